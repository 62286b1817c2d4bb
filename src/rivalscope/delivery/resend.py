"""Report delivery by email."""

import logging
from typing import Protocol

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
DEFAULT_SENDER = "onboarding@resend.dev"


class ReportDelivery(Protocol):
    """Sends a rendered report to a recipient."""

    async def send(self, to: str, subject: str, html: str, text: str) -> None:
        ...


class ResendDelivery:
    """Delivers reports through the Resend email API."""

    def __init__(
        self,
        api_key: str,
        sender: str = DEFAULT_SENDER,
        reply_to: str | None = None,
        timeout: float = 30.0,
        api_url: str = RESEND_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.sender = sender
        self.reply_to = reply_to
        self.timeout = timeout
        self.api_url = api_url
        self._transport = transport

    @retry(
        retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def send(self, to: str, subject: str, html: str, text: str) -> None:
        """
        Send one email.

        Raises:
            httpx.HTTPStatusError: If the API rejects the message
        """
        payload = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "html": html,
            "text": text,
        }
        if self.reply_to:
            payload["reply_to"] = self.reply_to

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
            )
            response.raise_for_status()

        logger.info(f"Report sent to {to}: {response.json().get('id', '?')}")
