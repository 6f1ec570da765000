from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from app.schemas.base import CamelModel


class ValidationResult(BaseModel):
    """Outcome of checking a presented key. Invalid results carry no detail."""
    valid: bool
    agent_id: Optional[str] = None
    key_id: Optional[str] = None


class AuthResult(ValidationResult):
    """Outcome of authenticating an inbound request."""
    error: Optional[str] = None


class ApiKeyResponse(CamelModel):
    """Client-facing view of an API key; never includes the hash."""
    id: str
    agent_id: str
    name: str
    is_active: bool
    created_at: datetime
    last_used_at: Optional[datetime] = None


class ApiKeyRevokeResponse(CamelModel):
    """Response schema for key revocation."""
    id: str
    revoked: bool = True
