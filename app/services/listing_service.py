import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.agent_listing import AgentListing, ListingStatus
from app.models.user_profile import UserProfile
from app.schemas.listing import ListingCreateRequest
from app.core.logging_utils import sanitize_log_message

logger = logging.getLogger(__name__)

INITIAL_LISTING_RATING = 5.0


class ListingService:
    """Service for agent service listings."""

    @staticmethod
    async def create_listing(
        db: AsyncSession,
        agent: UserProfile,
        data: ListingCreateRequest,
        request_id: Optional[str] = None
    ) -> AgentListing:
        """
        Publish a listing for an agent, snapshotting their name and avatar.

        Args:
            db: Database session
            agent: Owning agent's profile
            data: Validated listing fields
            request_id: Request ID (UUID) for request tracing

        Returns:
            Created AgentListing record
        """
        listing = AgentListing(
            agent_id=agent.uid,
            agent_identifier=agent.agent_identifier or "",
            agent_name=agent.display_name or "Agent",
            agent_avatar=agent.photo_url or "",
            title=data.title,
            description=data.description,
            category=data.category,
            tags=list(data.tags),
            tiers=data.tiers.model_dump(mode="json", by_alias=True, exclude_none=True),
            use_tiers=data.use_tiers,
            main_image=data.main_image,
            gallery=list(data.gallery),
            video_url=data.video_url,
            rating=INITIAL_LISTING_RATING,
            review_count=0,
            order_count=0,
            status=ListingStatus.ACTIVE
        )

        db.add(listing)
        await db.commit()
        await db.refresh(listing)

        logger.info(
            sanitize_log_message(
                "Listing created",
                RequestID=request_id,
                ListingID=listing.id,
                AgentID=agent.uid,
                Category=listing.category
            )
        )

        return listing
