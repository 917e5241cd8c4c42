"""Outbound e-mail through the SendGrid v3 REST API."""

from typing import Optional

import httpx

from cinestream.core.exceptions import EmailDeliveryError
from cinestream.core.logger import get_logger

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"

logger = get_logger("mailer")


class SendGridMailer:
    """
    Minimal SendGrid client.

    Args:
        api_key: SendGrid API key sent as a bearer token.
        sender: Verified sender address.
        url: Endpoint to post to (overridable for tests or a sandbox).
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        api_key: str,
        sender: str,
        *,
        url: str = SENDGRID_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.url = url
        self.timeout = timeout
        self._transport = transport

    def build_message(self, to: str, subject: str, html: str) -> dict:
        return {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.sender},
            "subject": subject,
            "content": [{"type": "text/html", "value": html}],
        }

    async def send(self, to: str, subject: str, html: str) -> None:
        """Send one HTML message.

        Raises:
            EmailDeliveryError: The API key is missing, the request failed, or SendGrid answered non-2xx.
        """
        if not self.api_key:
            raise EmailDeliveryError("Mail delivery is not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=self.build_message(to, subject, html), headers=headers)
        except httpx.HTTPError as e:
            logger.error("mail_send_failed", error=str(e))
            raise EmailDeliveryError() from e

        if not response.is_success:
            logger.error("mail_rejected", status_code=response.status_code, body=response.text[:500])
            raise EmailDeliveryError()
        logger.info("mail_sent", status_code=response.status_code)
