"""
Error Log Model
Persists unhandled application errors so they can be inspected later.

Each row captures:
- When the error happened and how severe it was
- Which user and request triggered it (when known)
- The exception type, message and traceback
- Sanitized context supplied by the caller
"""

from sqlalchemy import Column, String, Text, JSON, DateTime
from sqlalchemy.dialects.postgresql import UUID

from weighin.core.timeutils import utcnow
from weighin.models.base import BaseModel


class ErrorLog(BaseModel):
    """Stored error record written by the error logging service."""

    __tablename__ = "error_logs"

    occurred_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True
    )

    # Classification
    error_type = Column(String(255), nullable=False, index=True)  # e.g. "InvalidInputError"
    status_code = Column(String(10), nullable=True)
    severity = Column(String(20), default="error", nullable=False)  # warning, error, critical

    # Origin
    location = Column(String(500), nullable=True)  # "file:function:line" of the innermost frame

    # Who and where (all nullable, unauthenticated requests are common)
    user_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    request_method = Column(String(10), nullable=True)
    request_path = Column(String(500), nullable=True)
    client_ip = Column(String(50), nullable=True)

    message = Column(Text, nullable=False)
    stack_trace = Column(Text, nullable=True)
    context_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<ErrorLog(id={self.id}, type={self.error_type}, message={self.message[:50]}...)>"
