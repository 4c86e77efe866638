"""
Email API HTTP Client

Async client for a Resend-compatible transactional email API, used to send
weight logging reminders.

API Documentation: https://resend.com/docs/api-reference/emails/send-email

Features:
- Async HTTP requests using httpx
- Bearer token authentication
- Timeout protection (10 seconds)
- Graceful degradation: without an API key nothing is sent and
  send_email() reports False instead of raising
"""

import logging
from typing import Dict, List, Optional

import httpx

from weighin.core.config import settings

logger = logging.getLogger(__name__)


class EmailClient:
    """
    HTTP client for the email provider.

    send_email() never raises: every failure (missing key, network error,
    non-2xx response) is logged and returned as False, so one bad address
    cannot stop a reminder batch.

    Attributes:
        base_url (str): Provider base URL (EMAIL_API_URL)
        api_key (str): Provider API key (EMAIL_API_KEY)
        sender (str): From header (EMAIL_FROM)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        sender: Optional[str] = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.EMAIL_API_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.EMAIL_API_KEY
        self.sender = sender or settings.EMAIL_FROM

    @property
    def is_configured(self) -> bool:
        """True when both a base URL and an API key are set."""
        return bool(self.base_url and self.api_key)

    @property
    def headers(self) -> Dict[str, str]:
        """Authorization and content headers for the provider."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def send_email(self, to: List[str], subject: str, html: str) -> bool:
        """
        Send one HTML email.

        Args:
            to: Recipient addresses
            subject: Subject line
            html: HTML body

        Returns:
            True if the provider accepted the message, False otherwise

        Example:
            sent = await email_client.send_email(
                ["sam@example.com"], "Time to weigh in", "<p>Hi Sam</p>"
            )
        """
        if not self.is_configured:
            logger.info(f"Email API key not configured, skipping email to {', '.join(to)}")
            return False

        payload = {
            "from": self.sender,
            "to": to,
            "subject": subject,
            "html": html,
        }

        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.post(
                    f"{self.base_url}/emails",
                    headers=self.headers,
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"Email API request failed: {e}")
            return False

        if response.status_code >= 400:
            logger.error(f"Email API error {response.status_code}: {response.text[:500]}")
            return False

        logger.info(f"Email sent to {', '.join(to)}")
        return True


# Global singleton instance
email_client = EmailClient()
