import re
from typing import Any, Dict, Optional
from fastapi import Request
from app.config import settings

MASK = "***MASKED***"

# Header names that carry credentials
SENSITIVE_HEADERS = (
    "authorization",
    "x-api-key",
    "api-key",
    "cookie",
    "set-cookie",
)

# Dict keys whose values are always masked
SENSITIVE_KEY_TERMS = (
    "api_key", "apikey", "x-api-key", "api-key",
    "token", "authorization", "bearer",
    "password", "secret", "key_hash", "keyhash",
)


def _looks_like_credential(value: str) -> bool:
    """True for strings shaped like an issued API key or a bearer JWT."""
    if value.startswith(settings.API_KEY_PREFIX):
        return True
    if value.startswith("eyJ") and len(value) > 50:
        return True
    # Long opaque tokens; UUIDs (request ids) contain hyphens and are kept
    return len(value) > 32 and re.match(r'^[A-Za-z0-9_]+$', value) is not None


def mask_sensitive_data(data: Any, mask_string: str = MASK) -> Any:
    """
    Recursively mask sensitive data in dictionaries, lists, and strings.

    Args:
        data: Data structure to mask (dict, list, str, or other)
        mask_string: String to use for masking

    Returns:
        Masked data structure
    """
    if not settings.LOG_MASK_SENSITIVE:
        return data

    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            key_lower = str(key).lower()

            # request ids are needed for traceability
            if key_lower in ("requestid", "request_id"):
                masked[key] = value
            elif any(term in key_lower for term in SENSITIVE_KEY_TERMS):
                masked[key] = mask_string
            # Partial mask for email (show first 3 chars + domain)
            elif key_lower == "email" and isinstance(value, str):
                local, _, domain = value.partition("@")
                if domain and len(local) > 3:
                    masked[key] = local[:3] + "***@" + domain
                else:
                    masked[key] = mask_string
            else:
                masked[key] = mask_sensitive_data(value, mask_string)

        return masked

    elif isinstance(data, list):
        return [mask_sensitive_data(item, mask_string) for item in data]

    elif isinstance(data, str):
        if _looks_like_credential(data):
            return mask_string
        return data

    return data


def mask_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """
    Mask sensitive HTTP headers.

    Args:
        headers: Dictionary of HTTP headers

    Returns:
        Dictionary with sensitive headers masked
    """
    masked = {}
    for key, value in headers.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in SENSITIVE_HEADERS):
            masked[key] = MASK
        else:
            masked[key] = value

    return masked


def get_request_id(request: Optional[Request]) -> Optional[str]:
    """
    Extract request ID from request state.

    Args:
        request: FastAPI Request object (can be None)

    Returns:
        Request ID (UUID string) or None if not available
    """
    if request and hasattr(request.state, "request_id"):
        return request.state.request_id
    return None


def sanitize_log_message(message: str, **kwargs: Any) -> str:
    """
    Sanitize log message by masking sensitive data in keyword arguments.

    Args:
        message: Base log message
        **kwargs: Additional context to include (will be masked).
                  RequestID is appended last so the formatter can lift it out.

    Returns:
        Sanitized log message with context
    """
    request_id = kwargs.pop('RequestID', None) or kwargs.pop('request_id', None)

    masked_kwargs = mask_sensitive_data(kwargs)

    context_parts = []
    for key, value in masked_kwargs.items():
        if isinstance(value, (dict, list)):
            value_str = str(value)[:200]  # Limit length
            context_parts.append(f"{key}: {value_str}")
        else:
            context_parts.append(f"{key}: {value}")

    if context_parts:
        formatted_message = f"{message} | {' | '.join(context_parts)}"
    else:
        formatted_message = message

    # Format: "message | context | RequestID: <uuid>"
    if request_id:
        formatted_message = f"{formatted_message} | RequestID: {request_id}"

    return formatted_message
