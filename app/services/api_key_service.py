import logging
from typing import Optional, Tuple
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select
from app.models.api_key import ApiKey
from app.models.mixins import utcnow
from app.schemas.api_key import ValidationResult, AuthResult
from app.core.api_key import generate_api_key, hash_api_key, verify_api_key, extract_api_key
from app.core.exceptions import ValidationError
from app.core.logging_utils import sanitize_log_message, get_request_id

logger = logging.getLogger(__name__)

MISSING_CREDENTIAL = "missing credential"
INVALID_CREDENTIAL = "invalid or inactive credential"


class ApiKeyService:
    """Service for API key issuance, validation, revocation, and request authentication."""

    @staticmethod
    async def generate(
        db: AsyncSession,
        agent_id: str,
        name: str
    ) -> Tuple[str, ApiKey]:
        """
        Issue a new API key for an agent.

        Only the SHA-256 hash is stored. The plaintext returned here is the
        caller's one chance to capture it.

        Args:
            db: Database session
            agent_id: Owning agent
            name: Human-readable label

        Returns:
            Tuple of (plaintext_key, ApiKey record)

        Raises:
            ValidationError if agent_id or name is empty
        """
        missing = [
            field for field, value in (("agentId", agent_id), ("name", name))
            if not value or not value.strip()
        ]
        if missing:
            raise ValidationError(missing=missing)

        plaintext_key = generate_api_key()

        api_key = ApiKey(
            agent_id=agent_id,
            key_hash=hash_api_key(plaintext_key),
            name=name.strip(),
            is_active=True
        )

        db.add(api_key)
        await db.commit()
        await db.refresh(api_key)

        logger.info(
            sanitize_log_message(
                "API key issued",
                KeyID=api_key.id,
                AgentID=agent_id,
                Name=api_key.name
            )
        )

        return plaintext_key, api_key

    @staticmethod
    async def validate(
        db: AsyncSession,
        plaintext_key: Optional[str]
    ) -> ValidationResult:
        """
        Check a presented key against the active keys.

        Lookup is by hash, so the cost does not depend on how close the
        input is to a real key. Unknown and revoked keys give the same
        result. On success last_used_at is refreshed on a best-effort basis.

        Args:
            db: Database session
            plaintext_key: Whatever the caller presented

        Returns:
            ValidationResult; invalid results carry no agent or key id
        """
        if not plaintext_key:
            return ValidationResult(valid=False)

        key_hash = hash_api_key(plaintext_key)
        result = await db.execute(
            select(ApiKey).where(
                ApiKey.key_hash == key_hash,
                ApiKey.is_active == True  # noqa: E712
            )
        )
        api_key = result.scalar_one_or_none()

        if not api_key or not verify_api_key(plaintext_key, api_key.key_hash):
            return ValidationResult(valid=False)

        try:
            api_key.last_used_at = utcnow()
            await db.commit()
        except SQLAlchemyError as e:
            # Advisory metadata only; the key is still valid
            await db.rollback()
            logger.warning(
                sanitize_log_message(
                    "Could not update API key last_used_at",
                    KeyID=api_key.id,
                    Error=str(e)
                )
            )

        return ValidationResult(valid=True, agent_id=api_key.agent_id, key_id=api_key.id)

    @staticmethod
    async def get_key(
        db: AsyncSession,
        key_id: str
    ) -> Optional[ApiKey]:
        """Get an API key record by ID."""
        return await db.get(ApiKey, key_id)

    @staticmethod
    async def revoke(
        db: AsyncSession,
        key_id: str
    ) -> bool:
        """
        Deactivate an API key. Idempotent.

        Args:
            db: Database session
            key_id: Key to revoke

        Returns:
            True if the key exists (whether or not it was already inactive),
            False if there is no such key
        """
        api_key = await ApiKeyService.get_key(db, key_id)
        if not api_key:
            return False

        if api_key.is_active:
            api_key.is_active = False
            await db.commit()
            logger.info(
                sanitize_log_message(
                    "API key revoked",
                    KeyID=api_key.id,
                    AgentID=api_key.agent_id
                )
            )

        return True

    @staticmethod
    async def list_for_agent(
        db: AsyncSession,
        agent_id: str
    ) -> list[ApiKey]:
        """All keys issued to an agent, newest first, active or not."""
        result = await db.execute(
            select(ApiKey)
            .where(ApiKey.agent_id == agent_id)
            .order_by(ApiKey.created_at.desc(), ApiKey.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def authenticate_request(
        db: AsyncSession,
        request: Request
    ) -> AuthResult:
        """
        Authenticate an inbound request from its headers.

        Accepts the API key header or an ``Authorization: Bearer`` header;
        both go through the same validate call.

        Args:
            db: Database session
            request: Incoming request

        Returns:
            AuthResult with agent and key ids on success, or an error message
        """
        plaintext_key = extract_api_key(request.headers)

        if not plaintext_key:
            return AuthResult(valid=False, error=MISSING_CREDENTIAL)

        validation = await ApiKeyService.validate(db, plaintext_key)
        if not validation.valid:
            logger.info(
                sanitize_log_message(
                    "Rejected API credential",
                    RequestID=get_request_id(request),
                    Path=request.url.path,
                    IP=request.client.host if request.client else None
                )
            )
            return AuthResult(valid=False, error=INVALID_CREDENTIAL)

        return AuthResult(**validation.model_dump())
