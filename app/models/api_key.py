from sqlalchemy import Column, String, Boolean, DateTime
from app.database import Base
from app.models.mixins import IdMixin, utcnow


class ApiKey(IdMixin, Base):
    """API key model - stores hashed credentials issued to agents."""

    __tablename__ = "api_keys"

    agent_id = Column(String, nullable=False, index=True)
    key_hash = Column(String(64), unique=True, nullable=False, index=True)  # SHA-256 of the plaintext key
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
