"""
Outbound email provider adapters.

Every provider implements the same single-method capability:

    async send(message: OutboundEmail) -> DeliveryOutcome

so the contact handler never knows which transactional-email service sits
behind it. Providers translate the provider-agnostic OutboundEmail into their
own JSON shape and translate the HTTP result back into a DeliveryOutcome.
They never raise for network errors; those come back as TransportFailure.

Supported providers:
  - mailchannels  (default)
  - resend

Adding a new provider:
  1. Write a class with an async send(message) method.
  2. Register a factory in _PROVIDERS.
  3. Set EMAIL_PROVIDER=<provider> in the environment.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional, Protocol

import httpx

from app.config import Settings
from app.models.contact import (
    Delivered,
    DeliveryOutcome,
    OutboundEmail,
    ProviderRejected,
    TransportFailure,
)

logger = logging.getLogger(__name__)

MAILCHANNELS_URL = "https://api.mailchannels.net/tx/v1/send"
RESEND_URL = "https://api.resend.com/emails"

SUCCESS_STATUS_CODES = frozenset({200, 202})


class EmailProvider(Protocol):
    name: str

    async def send(self, message: OutboundEmail) -> DeliveryOutcome:
        ...


class _HttpJsonProvider(ABC):
    """Shared POST-and-classify logic for JSON HTTP email APIs."""

    name = "http"

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._client = client

    @abstractmethod
    def build_payload(self, message: OutboundEmail) -> dict:
        """Translate an OutboundEmail into the provider's JSON body."""

    def build_headers(self) -> dict:
        return {"Content-Type": "application/json"}

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        return await client.post(
            self.url,
            json=payload,
            headers=self.build_headers(),
            timeout=self.timeout,
        )

    async def send(self, message: OutboundEmail) -> DeliveryOutcome:
        payload = self.build_payload(message)
        try:
            if self._client is not None:
                response = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, payload)
        except httpx.HTTPError as exc:
            return TransportFailure(error=exc)

        logger.debug(f"{self.name} responded with HTTP {response.status_code}")

        if response.status_code in SUCCESS_STATUS_CODES:
            return Delivered(status_code=response.status_code)

        return ProviderRejected(status_code=response.status_code, body=response.text)


# ---------------------------------------------------------------------------
# MailChannels
# ---------------------------------------------------------------------------

class MailChannelsProvider(_HttpJsonProvider):
    """
    MailChannels transactional API.

    Body shape:
      personalizations[].to[]  - {email, name}
      from / reply_to          - {email, name}
      subject
      content[]                - text/plain first, then text/html
    """

    name = "mailchannels"

    def build_payload(self, message: OutboundEmail) -> dict:
        return {
            "personalizations": [
                {"to": [{"email": message.to_email, "name": message.to_name}]},
            ],
            "from": {"email": message.from_email, "name": message.from_name},
            "reply_to": {
                "email": message.reply_to_email,
                "name": message.reply_to_name,
            },
            "subject": message.subject,
            "content": [
                {"type": "text/plain", "value": message.text},
                {"type": "text/html", "value": message.html},
            ],
        }

    def build_headers(self) -> dict:
        headers = super().build_headers()
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers


# ---------------------------------------------------------------------------
# Resend
# ---------------------------------------------------------------------------

def _format_address(email: str, name: str) -> str:
    return f"{name} <{email}>" if name else email


class ResendProvider(_HttpJsonProvider):
    """Resend /emails API, bearer-token authenticated."""

    name = "resend"

    def build_payload(self, message: OutboundEmail) -> dict:
        return {
            "from": _format_address(message.from_email, message.from_name),
            "to": [_format_address(message.to_email, message.to_name)],
            "reply_to": _format_address(message.reply_to_email, message.reply_to_name),
            "subject": message.subject,
            "text": message.text,
            "html": message.html,
        }

    def build_headers(self) -> dict:
        headers = super().build_headers()
        headers["Authorization"] = f"Bearer {self.api_key}"
        return headers


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def _mailchannels(settings: Settings) -> EmailProvider:
    return MailChannelsProvider(
        url=settings.email_api_url or MAILCHANNELS_URL,
        api_key=settings.email_api_key,
        timeout=settings.email_timeout_seconds,
    )


def _resend(settings: Settings) -> EmailProvider:
    if not settings.email_api_key:
        raise ValueError("EMAIL_API_KEY must be set when EMAIL_PROVIDER=resend")
    return ResendProvider(
        url=settings.email_api_url or RESEND_URL,
        api_key=settings.email_api_key,
        timeout=settings.email_timeout_seconds,
    )


_PROVIDERS: dict[str, Callable[[Settings], EmailProvider]] = {
    "mailchannels": _mailchannels,
    "resend": _resend,
}


def build_email_provider(settings: Settings) -> EmailProvider:
    """
    Instantiate the provider named by settings.email_provider.

    Raises ValueError for unknown provider names or missing credentials.
    """
    factory = _PROVIDERS.get(settings.email_provider)
    if factory is None:
        raise ValueError(
            f"Unknown email provider {settings.email_provider!r}. "
            f"Supported providers: {sorted(_PROVIDERS)}"
        )
    return factory(settings)
