import secrets
from typing import Mapping, Optional
from hashlib import sha256
from app.config import settings

BEARER_PREFIX = "bearer "


def generate_api_key() -> str:
    """
    Generate a new plaintext API key.

    Format: ``<prefix><hex>`` where the hex part encodes API_KEY_BYTES random
    bytes (32 bytes = 256 bits by default). The fixed prefix lets secret
    scanners recognise a leaked key without reducing its entropy.
    """
    return f"{settings.API_KEY_PREFIX}{secrets.token_hex(settings.API_KEY_BYTES)}"


def hash_api_key(api_key: str) -> str:
    """
    Hash an API key for storage using SHA256.
    Using SHA256 instead of bcrypt because:
    - API keys are already random (not user-chosen passwords)
    - lookups must be by hash, so the digest has to be deterministic
    """
    return sha256(api_key.encode('utf-8')).hexdigest()


def verify_api_key(plain_key: str, hashed_key: str) -> bool:
    """Verify an API key against its hash using constant-time comparison."""
    computed_hash = hash_api_key(plain_key)
    return secrets.compare_digest(computed_hash, hashed_key)


def extract_api_key(headers: Mapping[str, str]) -> Optional[str]:
    """
    Pull the presented credential out of request headers.

    The API key header (``X-API-Key`` by default) is the primary transport;
    ``Authorization: Bearer <key>`` is accepted as an equivalent. When both are
    present the API key header wins.

    Args:
        headers: Request headers (case-insensitive mapping)

    Returns:
        The raw credential string, or None if neither header carries one
    """
    api_key = headers.get(settings.API_KEY_HEADER)
    if api_key and api_key.strip():
        return api_key.strip()

    auth_header = headers.get("authorization", "")
    if auth_header.lower().startswith(BEARER_PREFIX):
        token = auth_header[len(BEARER_PREFIX):].strip()
        if token:
            return token

    return None
