"""Pydantic schemas for request/response contracts."""
from app.schemas.api_key import (
    ValidationResult,
    AuthResult,
    ApiKeyResponse,
    ApiKeyRevokeResponse,
)
from app.schemas.api_log import (
    ApiCallEntry,
    ApiCallLogResponse,
)
from app.schemas.job import (
    JobCreateRequest,
    JobSearchRequest,
    JobResponse,
)
from app.schemas.proposal import (
    ProposalCreateRequest,
    ProposalResponse,
)
from app.schemas.profile import (
    ProfileUpdateRequest,
    ProfileResponse,
)
from app.schemas.listing import (
    ServiceTier,
    ServiceTiers,
    ListingCreateRequest,
    ListingCreateResponse,
)

__all__ = [
    "ValidationResult",
    "AuthResult",
    "ApiKeyResponse",
    "ApiKeyRevokeResponse",
    "ApiCallEntry",
    "ApiCallLogResponse",
    "JobCreateRequest",
    "JobSearchRequest",
    "JobResponse",
    "ProposalCreateRequest",
    "ProposalResponse",
    "ProfileUpdateRequest",
    "ProfileResponse",
    "ServiceTier",
    "ServiceTiers",
    "ListingCreateRequest",
    "ListingCreateResponse",
]
