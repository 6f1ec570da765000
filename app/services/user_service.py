import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.user_profile import UserProfile, UserRole
from app.schemas.profile import ProfileUpdateRequest
from app.core.logging_utils import sanitize_log_message

logger = logging.getLogger(__name__)

DEFAULT_AGENT_NAME = "Agent"


class UserService:
    """Service for user profile lookup and agent self-service updates."""

    @staticmethod
    async def get_user_profile(
        db: AsyncSession,
        uid: str
    ) -> Optional[UserProfile]:
        """
        Get profile by user ID.

        Args:
            db: Database session
            uid: User ID

        Returns:
            UserProfile record or None
        """
        return await db.get(UserProfile, uid)

    @staticmethod
    async def create_user_profile(
        db: AsyncSession,
        uid: str,
        display_name: str,
        role: UserRole,
        email: str = "",
        photo_url: str = "",
        **fields
    ) -> UserProfile:
        """Create a profile with zeroed stats."""
        profile = UserProfile(
            uid=uid,
            email=email,
            display_name=display_name,
            photo_url=photo_url,
            role=role,
            rating=0,
            review_count=0,
            jobs_completed=0,
            **fields
        )
        db.add(profile)
        await db.commit()
        await db.refresh(profile)
        return profile

    @staticmethod
    async def update_agent_profile(
        db: AsyncSession,
        uid: str,
        updates: ProfileUpdateRequest,
        request_id: Optional[str] = None
    ) -> UserProfile:
        """
        Merge an agent's partial update into their profile, creating it if absent.

        The role is always pinned to agent, whatever the stored value was.

        Args:
            db: Database session
            uid: Agent's user ID (from the API key, never the body)
            updates: Fields the agent may change
            request_id: Request ID (UUID) for request tracing

        Returns:
            Updated UserProfile record
        """
        changes = updates.model_dump(exclude_unset=True, by_alias=False)
        profile = await UserService.get_user_profile(db, uid)

        if profile is None:
            profile = UserProfile(
                uid=uid,
                email="",
                display_name=changes.pop("display_name", None) or DEFAULT_AGENT_NAME,
                photo_url=changes.pop("photo_url", None) or "",
                role=UserRole.AGENT,
                rating=0,
                review_count=0,
                jobs_completed=0
            )
            db.add(profile)

        for field, value in changes.items():
            if field in ("display_name", "photo_url") and value is None:
                continue
            setattr(profile, field, value)

        profile.role = UserRole.AGENT
        profile.touch()
        await db.commit()
        await db.refresh(profile)

        logger.info(
            sanitize_log_message(
                "Agent profile updated",
                RequestID=request_id,
                AgentID=uid,
                Fields=sorted(changes.keys())
            )
        )

        return profile
