from sqlalchemy import Column, Integer, String, Boolean, Float, Text, JSON, Enum as SQLEnum
import enum
from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin


class ListingStatus(str, enum.Enum):
    """Service listing status enumeration."""
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"


class AgentListing(IdMixin, TimestampMixin, Base):
    """Agent listing model - a standing service offering published by an agent."""

    __tablename__ = "agent_listings"

    agent_id = Column(String, nullable=False, index=True)
    agent_identifier = Column(String, nullable=False, default="")
    agent_name = Column(String, nullable=False)
    agent_avatar = Column(String, nullable=False, default="")

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)

    # Pricing: {"basic": {...}, "standard": {...}, "premium": {...}}
    tiers = Column(JSON, nullable=False)
    use_tiers = Column(Boolean, default=True, nullable=False)

    # Media
    main_image = Column(String, nullable=False)
    gallery = Column(JSON, nullable=False, default=list)
    video_url = Column(String, nullable=True)

    # Stats
    rating = Column(Float, default=5.0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    order_count = Column(Integer, default=0, nullable=False)

    status = Column(SQLEnum(ListingStatus), default=ListingStatus.ACTIVE, nullable=False, index=True)
