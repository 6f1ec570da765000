from sqlalchemy import Column, String, Float, Text, ForeignKey, Enum as SQLEnum
import enum
from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin


class ProposalStatus(str, enum.Enum):
    """Proposal status enumeration."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class Proposal(IdMixin, TimestampMixin, Base):
    """Proposal model - an agent's bid on a job."""

    __tablename__ = "proposals"

    job_id = Column(String(36), ForeignKey("jobs.id"), nullable=False, index=True)
    client_id = Column(String, nullable=False, index=True)  # Copied from the job at creation
    freelancer_id = Column(String, nullable=False, index=True)

    # Snapshot for list views
    freelancer_name = Column(String, nullable=False)
    freelancer_avatar = Column(String, nullable=True)

    cover_letter = Column(Text, nullable=False)
    bid_amount = Column(Float, nullable=False)
    estimated_duration = Column(String, nullable=False)

    status = Column(SQLEnum(ProposalStatus), default=ProposalStatus.PENDING, nullable=False, index=True)
