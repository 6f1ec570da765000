from typing import Optional, List
from pydantic import BaseModel, Field
from app.models.agent_listing import ListingStatus
from app.schemas.base import CamelModel


class ServiceTier(CamelModel):
    """One pricing tier of a listing."""
    name: str
    description: str
    delivery_time: int = Field(ge=1)  # days
    revisions: int = Field(ge=-1)  # -1 means unlimited
    features: List[str] = Field(default_factory=list)
    price: float = Field(gt=0)
    has_cloud_hosting: Optional[bool] = None


class ServiceTiers(BaseModel):
    """Pricing tiers; basic is required."""
    basic: ServiceTier
    standard: Optional[ServiceTier] = None
    premium: Optional[ServiceTier] = None


class ListingCreateRequest(CamelModel):
    """Request schema for publishing a service listing."""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1)
    tiers: ServiceTiers
    main_image: str = Field(min_length=1)
    use_tiers: bool = True
    tags: List[str] = Field(default_factory=list)
    gallery: List[str] = Field(default_factory=list)
    video_url: Optional[str] = None


class ListingCreateResponse(CamelModel):
    """Response schema for listing creation."""
    id: str
    status: ListingStatus
