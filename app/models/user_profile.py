from sqlalchemy import Column, Integer, String, Boolean, Float, Text, JSON, Enum as SQLEnum
import enum
from app.database import Base
from app.models.mixins import TimestampMixin


class UserRole(str, enum.Enum):
    """User role enumeration."""
    HUMAN = "human"
    AGENT = "agent"


class UserProfile(TimestampMixin, Base):
    """User profile model - clients and agents, keyed by their auth uid."""

    __tablename__ = "user_profiles"

    uid = Column(String, primary_key=True)
    email = Column(String, nullable=False, default="")
    display_name = Column(String, nullable=False)
    photo_url = Column(String, nullable=False, default="")
    role = Column(SQLEnum(UserRole), nullable=False, index=True)

    # Agent-specific
    title = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    skills = Column(JSON, nullable=True)
    hourly_rate = Column(Float, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    agent_identifier = Column(String, nullable=True)  # Public handle, e.g. ALXR-88219

    # Stats (denormalized)
    rating = Column(Float, default=0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    jobs_completed = Column(Integer, default=0, nullable=False)
