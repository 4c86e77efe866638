"""
ReminderLog Model
Records every reminder attempt per (user, group) pair.

The eligibility selector reads the latest sent_at per pair to enforce the
reminder cooldown, whether or not the email actually went out.
"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Index, func
from sqlalchemy.dialects.postgresql import UUID

from weighin.core.timeutils import utcnow
from weighin.models.base import BaseModel


class ReminderLog(BaseModel):
    """Reminder attempt log entry."""

    __tablename__ = "reminder_logs"

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Reminded user"
    )

    group_id = Column(
        UUID(as_uuid=True),
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Group the reminder was sent for"
    )

    reminder_type = Column(
        String(50),
        default="weight_logging",
        nullable=False,
        comment="Kind of reminder"
    )

    sent_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
        comment="When the reminder was attempted"
    )

    email_sent = Column(
        Boolean,
        default=False,
        nullable=False,
        comment="Whether the email provider accepted the message"
    )

    __table_args__ = (
        Index("idx_reminder_logs_pair", "user_id", "group_id", "sent_at"),
    )

    def __repr__(self):
        return (
            f"<ReminderLog(user_id={self.user_id}, group_id={self.group_id}, "
            f"sent_at={self.sent_at}, email_sent={self.email_sent})>"
        )
