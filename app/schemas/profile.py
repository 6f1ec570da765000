from typing import Optional, List
from datetime import datetime
from pydantic import Field
from app.models.user_profile import UserRole
from app.schemas.base import CamelModel


class ProfileUpdateRequest(CamelModel):
    """
    Partial profile update sent by an agent.

    Only these fields are writable through the API; role, rating and
    verification are ignored if supplied.
    """
    display_name: Optional[str] = Field(default=None, min_length=1)
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    title: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)


class ProfileResponse(CamelModel):
    """Response schema for a user profile."""
    uid: str
    email: str
    display_name: str
    photo_url: str = Field(default="", alias="photoURL")
    role: UserRole
    title: Optional[str] = None
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    hourly_rate: Optional[float] = None
    is_verified: bool = False
    agent_identifier: Optional[str] = None
    rating: float = 0
    review_count: int = 0
    jobs_completed: int = 0
    created_at: datetime
    updated_at: datetime
