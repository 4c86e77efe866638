"""
Notification Model
In-app notifications produced by explicit event publication after
mutations (member joined/left, weight logged, milestone reached).
"""

from sqlalchemy import Column, String, Text, Boolean, JSON, ForeignKey
from sqlalchemy.dialects.postgresql import UUID

from weighin.models.base import BaseModel


class Notification(BaseModel):
    """
    Notification for a single recipient.

    Fields:
        user_id (UUID): Recipient
        type (str): member_joined, member_left, weight_entry, milestone
        title (str): Short headline
        message (str): Human readable text
        data (dict): Event payload (group_id, member_id, percentage_change, ...)
        read (bool): Read flag
    """

    __tablename__ = "notifications"

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Recipient of the notification"
    )

    type = Column(
        String(50),
        nullable=False,
        index=True,
        comment="Event type"
    )

    title = Column(String(255), nullable=False)

    message = Column(Text, nullable=False)

    data = Column(
        JSON,
        default=dict,
        nullable=False,
        comment="Event payload"
    )

    read = Column(
        Boolean,
        default=False,
        nullable=False,
        index=True
    )

    def __repr__(self):
        return f"<Notification(user_id={self.user_id}, type={self.type}, read={self.read})>"
