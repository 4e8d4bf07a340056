import logging
from typing import Optional

import httpx

from src.app.services.email_sender import EmailSender, NotificationDeliveryError

logger = logging.getLogger(__name__)


class LoggingEmailSender(EmailSender):
    """Development sender: records that a message would go out, never its body."""

    async def send(self, to: str, subject: str, html: str) -> None:
        logger.info("Email to %s: %s", to, subject)


class ResendEmailSender(EmailSender):
    """Sends through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        api_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    async def send(self, to: str, subject: str, html: str) -> None:
        payload = {
            "from": self.from_email,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(
                    self.api_url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
        except httpx.HTTPError as exc:
            raise NotificationDeliveryError(f"Email provider unreachable: {exc}") from exc

        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After", "unknown")
            raise NotificationDeliveryError(f"Rate limited. Retry after {retry_after}s")

        if not 200 <= resp.status_code < 300:
            raise NotificationDeliveryError(f"Email provider returned {resp.status_code}")


def build_email_sender(config) -> EmailSender:
    if config.EMAIL_BACKEND == "resend":
        return ResendEmailSender(
            api_key=config.RESEND_API_KEY,
            from_email=config.EMAIL_FROM,
            api_url=config.RESEND_API_URL,
            timeout=config.EMAIL_TIMEOUT_SECONDS,
        )
    if config.EMAIL_BACKEND == "log":
        return LoggingEmailSender()
    raise ValueError(f"Unknown EMAIL_BACKEND: {config.EMAIL_BACKEND}")
