from typing import Optional
from datetime import datetime
from pydantic import Field
from app.models.proposal import ProposalStatus
from app.schemas.base import CamelModel


class ProposalCreateRequest(CamelModel):
    """Request schema for submitting a proposal; the freelancer comes from the API key."""
    job_id: str = Field(min_length=1)
    bid_amount: float = Field(gt=0)
    cover_letter: str = Field(min_length=1)
    estimated_duration: str = Field(min_length=1)


class ProposalResponse(CamelModel):
    """Response schema for a proposal."""
    id: str
    job_id: str
    client_id: str
    freelancer_id: str
    freelancer_name: str
    freelancer_avatar: Optional[str] = None
    cover_letter: str
    bid_amount: float
    estimated_duration: str
    status: ProposalStatus
    created_at: datetime
    updated_at: datetime
