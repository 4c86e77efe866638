"""
Database Models Module
Contains SQLAlchemy ORM models for all database tables.

All models must be imported here to be registered with SQLAlchemy
and created during Base.metadata.create_all().
"""

from weighin.db.base import Base
from weighin.models.base import BaseModel
from weighin.models.user import User, UserRole
from weighin.models.weight_entry import WeightEntry
from weighin.models.group import Group
from weighin.models.team import Team
from weighin.models.group_member import GroupMember
from weighin.models.reminder_log import ReminderLog
from weighin.models.notification import Notification
from weighin.models.error_log import ErrorLog

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "UserRole",
    "WeightEntry",
    "Group",
    "Team",
    "GroupMember",
    "ReminderLog",
    "Notification",
    "ErrorLog",
]
