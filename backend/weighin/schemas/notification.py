"""
Notification Pydantic Schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Any, Dict
from datetime import datetime
from uuid import UUID


class NotificationResponse(BaseModel):
    """
    Example:
        {
            "id": "...",
            "type": "member_joined",
            "title": "New Member Joined",
            "message": "Sam joined the group \\"Summer Cut\\"",
            "data": {"group_id": "...", "member_name": "Sam"},
            "read": false,
            "created_at": "2025-03-01T07:30:00Z"
        }
    """
    id: UUID
    type: str
    title: str
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    unread: int


class MarkAllReadResponse(BaseModel):
    updated: int
