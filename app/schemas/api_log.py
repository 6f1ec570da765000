from typing import Optional, Any
from datetime import datetime
from pydantic import BaseModel
from app.schemas.base import CamelModel


class ApiCallEntry(BaseModel):
    """A call log entry as assembled by a request handler."""
    api_key_id: str
    agent_id: str
    endpoint: str
    method: str
    status_code: int
    response_time: float
    request_body: Optional[Any] = None
    request_id: Optional[str] = None


class ApiCallLogResponse(CamelModel):
    """Response schema for a call log entry."""
    id: str
    api_key_id: str
    agent_id: str
    endpoint: str
    method: str
    status_code: int
    response_time: float
    request_body: Optional[Any] = None
    timestamp: datetime
