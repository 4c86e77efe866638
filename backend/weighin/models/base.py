"""
Base Model Class
Provides common fields and functionality for all database models.

All application models should inherit from BaseModel instead of Base directly.
This ensures consistent ID format (UUID) and automatic timestamp tracking.
"""

from sqlalchemy import Column, DateTime, func
from sqlalchemy.dialects.postgresql import UUID
import uuid

from weighin.core.timeutils import utcnow
from weighin.db.base import Base


class BaseModel(Base):
    """
    Abstract base model with common fields for all tables.

    Provides:
    - UUID primary key
    - created_at timestamp (set on insert, may be supplied explicitly)
    - updated_at timestamp (refreshed on modification)

    Example:
        class Team(BaseModel):
            __tablename__ = "teams"
            name = Column(String(100), nullable=False)
            # id, created_at, updated_at are inherited automatically
    """

    # Make this an abstract base class (no table created for BaseModel itself)
    __abstract__ = True

    # Primary Key: UUID v4 generated client-side
    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False
    )

    # Timestamp: Record Creation
    # Set in Python so ordering by created_at is deterministic within a
    # transaction; server_default covers rows inserted outside the ORM.
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True
    )

    # Timestamp: Last Update
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False
    )

    def __repr__(self):
        """String representation of model instance."""
        return f"<{self.__class__.__name__}(id={self.id})>"
