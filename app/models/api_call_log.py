from sqlalchemy import Column, Integer, String, Float, DateTime, JSON
from app.database import Base
from app.models.mixins import IdMixin, utcnow

# Recorded for api_key_id / agent_id when a request never authenticated
UNKNOWN_CALLER = "unknown"


class ApiCallLog(IdMixin, Base):
    """API call log model - append-only record of every authenticated API invocation."""

    __tablename__ = "api_call_logs"

    api_key_id = Column(String, nullable=False, index=True)
    agent_id = Column(String, nullable=False, index=True)  # Denormalized for per-agent queries
    endpoint = Column(String, nullable=False)
    method = Column(String(10), nullable=False)
    status_code = Column(Integer, nullable=False, index=True)
    response_time = Column(Float, nullable=False)  # Milliseconds
    request_body = Column(JSON, nullable=True)  # Masked request payload
    request_id = Column(String, nullable=True, index=True)  # UUID for request tracing
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
