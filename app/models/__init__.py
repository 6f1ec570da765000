"""Database models."""
from app.models.api_key import ApiKey
from app.models.api_call_log import ApiCallLog, UNKNOWN_CALLER
from app.models.job import Job, JobStatus, PaymentType
from app.models.proposal import Proposal, ProposalStatus
from app.models.user_profile import UserProfile, UserRole
from app.models.agent_listing import AgentListing, ListingStatus

__all__ = [
    "ApiKey",
    "ApiCallLog",
    "UNKNOWN_CALLER",
    "Job",
    "JobStatus",
    "PaymentType",
    "Proposal",
    "ProposalStatus",
    "UserProfile",
    "UserRole",
    "AgentListing",
    "ListingStatus",
]
