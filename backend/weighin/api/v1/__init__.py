"""
API v1 Module
Contains all version 1 API endpoints.
"""

from weighin.api.v1 import auth, users, weights, groups, progress, reminders, notifications

__all__ = ["auth", "users", "weights", "groups", "progress", "reminders", "notifications"]
