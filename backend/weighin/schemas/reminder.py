"""
Reminder Pydantic Schemas
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class ReminderCandidateResponse(BaseModel):
    """
    A (user, group) pair due for a reminder.

    days_since_last_entry is 999 when the user never logged a weight.
    """
    user_id: UUID
    user_email: str
    user_display_name: str
    group_id: UUID
    group_name: str
    days_since_last_entry: int
    last_reminder_sent: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReminderResult(ReminderCandidateResponse):
    email_sent: bool


class ReminderDispatchResponse(BaseModel):
    """
    Outcome of POST /api/v1/reminders/dispatch.

    Example:
        {"total_processed": 3, "reminders_sent": 2, "errors": 1, "results": [...]}
    """
    total_processed: int
    reminders_sent: int
    errors: int
    results: List[ReminderResult] = Field(default_factory=list)
