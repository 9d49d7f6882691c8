"""
Models for the contact form flow.

Models:
  SubmissionPayload  - untrusted JSON body posted by the website form
  RenderedEmail      - subject plus plain-text and HTML bodies
  OutboundEmail      - provider-agnostic message handed to an EmailProvider
  Delivered / ProviderRejected / TransportFailure
                     - DeliveryOutcome variants returned by providers
  ContactResult      - what the handler decided; the router turns it into HTTP
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationInfo, field_validator


# ---------------------------------------------------------------------------
# Inbound payload
# ---------------------------------------------------------------------------

class SubmissionPayload(BaseModel):
    """
    Contact form body as sent by the browser.

    Every field is optional at the model level; the handler decides what is
    required so that it can answer with the localized messages. Unknown keys
    are ignored.
    """
    model_config = {"extra": "ignore"}

    name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    interest: Optional[str] = None
    message: Optional[str] = None
    website: Optional[str] = None   # honeypot, hidden from humans

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any, info: ValidationInfo) -> Optional[str]:
        # Falsy JSON values count as absent; other scalars keep their text form.
        if isinstance(value, str):
            return value
        if info.field_name == "website" and isinstance(value, (list, dict)):
            # Any array or object in the honeypot marks a bot, even an empty one.
            return json.dumps(value)
        if not value:
            return None
        if isinstance(value, bool):
            return "true"
        if isinstance(value, (int, float)):
            return str(value)
        raise ValueError("expected a string")


class RenderedEmail(BaseModel):
    subject: str
    text: str
    html: str


class OutboundEmail(BaseModel):
    """Normalized message; only the provider layer knows the wire format."""

    from_email: str
    from_name: str
    to_email: str
    to_name: str
    reply_to_email: str
    reply_to_name: str
    subject: str
    text: str
    html: str


# ---------------------------------------------------------------------------
# Delivery outcome
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Delivered:
    status_code: int


@dataclass(frozen=True)
class ProviderRejected:
    status_code: int
    body: str


@dataclass(frozen=True)
class TransportFailure:
    error: Exception


DeliveryOutcome = Union[Delivered, ProviderRejected, TransportFailure]


# ---------------------------------------------------------------------------
# Handler result
# ---------------------------------------------------------------------------

MSG_REQUIRED_FIELDS = "Name und E-Mail sind Pflichtfelder."
MSG_INVALID_EMAIL = "Bitte geben Sie eine gültige E-Mail-Adresse ein."
MSG_SEND_FAILED = (
    "E-Mail konnte nicht gesendet werden. Bitte versuchen Sie es später erneut."
)
MSG_INTERNAL_ERROR = (
    "Ein Fehler ist aufgetreten. Bitte versuchen Sie es später erneut."
)


class ContactResultKind(str, Enum):
    SENT = "sent"
    DISCARDED = "discarded"
    INVALID = "invalid"
    DELIVERY_FAILED = "delivery_failed"
    INTERNAL_ERROR = "internal_error"


_STATUS_CODES = {
    ContactResultKind.SENT: 200,
    ContactResultKind.DISCARDED: 200,
    ContactResultKind.INVALID: 400,
    ContactResultKind.DELIVERY_FAILED: 500,
    ContactResultKind.INTERNAL_ERROR: 500,
}


@dataclass(frozen=True)
class ContactResult:
    """
    Discriminated result of handling one submission.

    A discarded (honeypot) submission renders exactly like a sent one so that
    bots cannot tell they were detected.
    """

    kind: ContactResultKind
    error: Optional[str] = None

    @classmethod
    def sent(cls) -> "ContactResult":
        return cls(ContactResultKind.SENT)

    @classmethod
    def discarded(cls) -> "ContactResult":
        return cls(ContactResultKind.DISCARDED)

    @classmethod
    def invalid(cls, message: str) -> "ContactResult":
        return cls(ContactResultKind.INVALID, message)

    @classmethod
    def delivery_failed(cls) -> "ContactResult":
        return cls(ContactResultKind.DELIVERY_FAILED, MSG_SEND_FAILED)

    @classmethod
    def internal_error(cls) -> "ContactResult":
        return cls(ContactResultKind.INTERNAL_ERROR, MSG_INTERNAL_ERROR)

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self.kind]

    def body(self) -> dict:
        if self.error is None:
            return {"success": True}
        return {"error": self.error}
