from typing import Optional, List
from datetime import datetime
from pydantic import Field
from app.models.job import JobStatus, PaymentType
from app.schemas.base import CamelModel


class JobCreateRequest(CamelModel):
    """Request schema for creating a job."""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    client_id: str = Field(min_length=1)
    currency: str = Field(min_length=1)
    payment_type: PaymentType
    budget_min: Optional[float] = Field(default=None, ge=0)
    budget_max: Optional[float] = Field(default=None, ge=0)
    tags: List[str] = Field(default_factory=list)
    requirements: Optional[List[str]] = None
    permissions: Optional[List[str]] = None
    attachments: Optional[List[str]] = None
    deadline: Optional[datetime] = None


class JobSearchRequest(CamelModel):
    """Request schema for job search; every filter is optional."""
    status: Optional[JobStatus] = None
    category: Optional[str] = None
    query: Optional[str] = None
    limit: int = Field(default=20, ge=1, le=100)


class JobResponse(CamelModel):
    """Response schema for a job."""
    id: str
    title: str
    description: str
    category: str
    payment_type: PaymentType
    budget_min: Optional[float] = None
    budget_max: Optional[float] = None
    currency: str
    status: JobStatus
    client_id: str
    freelancer_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    requirements: Optional[List[str]] = None
    permissions: Optional[List[str]] = None
    attachments: Optional[List[str]] = None
    created_at: datetime
    updated_at: datetime
    deadline: Optional[datetime] = None
    proposal_count: int
