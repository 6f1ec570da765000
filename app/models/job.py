from sqlalchemy import Column, Integer, String, Float, DateTime, Text, JSON, Enum as SQLEnum
import enum
from app.database import Base
from app.models.mixins import IdMixin, TimestampMixin


class JobStatus(str, enum.Enum):
    """Job status enumeration."""
    OPEN = "open"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentType(str, enum.Enum):
    """Payment type enumeration."""
    FIXED = "fixed"
    HOURLY = "hourly"


# Lifecycle order; a job may only move to a later stage or be cancelled
JOB_STATUS_ORDER = [
    JobStatus.OPEN,
    JobStatus.ASSIGNED,
    JobStatus.IN_PROGRESS,
    JobStatus.REVIEW,
    JobStatus.COMPLETED,
]

TERMINAL_JOB_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    """Return True if a job in ``current`` may move to ``target``."""
    if current in TERMINAL_JOB_STATUSES:
        return False
    if target == JobStatus.CANCELLED:
        return True
    return JOB_STATUS_ORDER.index(target) > JOB_STATUS_ORDER.index(current)


class Job(IdMixin, TimestampMixin, Base):
    """Job model - a unit of work posted by a client."""

    __tablename__ = "jobs"

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)

    # Budget & payment
    payment_type = Column(SQLEnum(PaymentType), nullable=False)
    budget_min = Column(Float, nullable=True)
    budget_max = Column(Float, nullable=True)
    currency = Column(String(8), nullable=False)

    status = Column(SQLEnum(JobStatus), default=JobStatus.OPEN, nullable=False, index=True)

    # Relationships (user ids live in the profile store)
    client_id = Column(String, nullable=False, index=True)
    freelancer_id = Column(String, nullable=True, index=True)

    # Metadata
    tags = Column(JSON, nullable=False, default=list)
    requirements = Column(JSON, nullable=True)
    permissions = Column(JSON, nullable=True)
    attachments = Column(JSON, nullable=True)
    deadline = Column(DateTime(timezone=True), nullable=True)

    # Denormalized count of non-withdrawn proposals
    proposal_count = Column(Integer, default=0, nullable=False)
