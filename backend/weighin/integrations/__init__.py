"""
External Service Integrations

This package contains HTTP clients for external services:
- Resend-compatible email API (weigh-in reminders)
"""

from weighin.integrations.email_client import EmailClient, email_client

__all__ = [
    "EmailClient",
    "email_client",
]
