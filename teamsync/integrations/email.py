"""Transactional email through the Resend REST API."""

import httpx

from teamsync.config import settings
from teamsync.core.logging import get_logger

logger = get_logger(__name__)


class EmailService:
    """
    Sends rendered emails and logs the outcome.

    Sending never raises: delivery problems are logged and reported as
    False, so no resource mutation ever depends on email delivery.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        sender: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.RESEND_API_KEY
        self.api_url = api_url or settings.RESEND_API_URL
        self.sender = sender or settings.EMAIL_FROM
        self.transport = transport

    def send(self, to: str, subject: str, html: str, email_type: str) -> bool:
        if not self.api_key:
            logger.warning(f"RESEND_API_KEY not set. Skipping {email_type} email to {to}.")
            return False

        try:
            with httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS, transport=self.transport) as client:
                response = client.post(
                    self.api_url,
                    json={"from": self.sender, "to": [to], "subject": subject, "html": html},
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Failed to send {email_type} email to {to}: {e.response.status_code} - {e.response.text}"
            )
            return False
        except httpx.HTTPError as e:
            logger.error(f"Failed to send {email_type} email to {to}: {e}")
            return False

        logger.info(f"Sent {email_type} email to {to}")
        return True

    def send_welcome_email(self, email: str, name: str | None) -> bool:
        dashboard_url = f"{settings.BASE_URL}/dashboard"
        html = (
            f"<p>Hi {name or 'there'},</p>"
            f"<p>Your TeamSync account is ready. Sign in to your "
            f'<a href="{dashboard_url}">dashboard</a> to see your assignments.</p>'
        )
        return self.send(email, "Welcome to TeamSync!", html, "welcome")

    def send_plan_update_email(self, email: str, tenant_name: str, plan_name: str) -> bool:
        html = (
            f"<p>The subscription of <strong>{tenant_name}</strong> now uses the "
            f"<strong>{plan_name}</strong> plan.</p>"
            f'<p>Manage billing from <a href="{settings.BASE_URL}/dashboard">your dashboard</a>.</p>'
        )
        return self.send(email, f"{tenant_name} is now on {plan_name}", html, "plan_update")
