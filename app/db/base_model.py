import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, String


def generate_id() -> str:
    """Opaque string identifier for new records."""
    return str(uuid.uuid4())


class BaseModel:
    """Base class for all database models."""

    # Opaque string primary key, generated client side
    id = Column(String(36), primary_key=True, default=generate_id)

    # Timestamps
    createdAt = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updatedAt = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
