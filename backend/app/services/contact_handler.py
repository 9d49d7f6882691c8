"""
Contact submission handling.

handle_submission() is the whole request flow minus HTTP: parse the body,
validate, apply the honeypot check, render the email, hand it to the
configured EmailProvider and classify the outcome. It always returns a
ContactResult; no exception escapes it. The router maps the result to a
status code and JSON body.

Validation order (first failure wins):
  1. name and email present and non-blank
  2. email has the local@domain.tld shape
  3. honeypot field empty (otherwise: silent success, nothing sent)
"""

import json
import logging
import re
from typing import Optional

from pydantic import ValidationError

from app.config import Settings
from app.models.contact import (
    MSG_INVALID_EMAIL,
    MSG_REQUIRED_FIELDS,
    ContactResult,
    Delivered,
    OutboundEmail,
    ProviderRejected,
    RenderedEmail,
    SubmissionPayload,
    TransportFailure,
)
from app.services.email_content import render_email
from app.services.email_sender import EmailProvider

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_valid_email(value: str) -> bool:
    # fullmatch, so a trailing newline does not slip through like it would with "$"
    return EMAIL_PATTERN.fullmatch(value) is not None


def validate_submission(payload: SubmissionPayload) -> Optional[str]:
    """Return the localized error message for the first failed check, or None."""
    if not payload.name or not payload.email:
        return MSG_REQUIRED_FIELDS
    if not payload.name.strip() or not payload.email.strip():
        return MSG_REQUIRED_FIELDS
    if not is_valid_email(payload.email):
        return MSG_INVALID_EMAIL
    return None


def is_honeypot(payload: SubmissionPayload) -> bool:
    return bool(payload.website)


def build_outbound_email(
    payload: SubmissionPayload,
    rendered: RenderedEmail,
    settings: Settings,
) -> OutboundEmail:
    return OutboundEmail(
        from_email=settings.from_email,
        from_name=settings.from_name,
        to_email=settings.to_email,
        to_name=settings.to_name,
        reply_to_email=payload.email,
        reply_to_name=payload.name,
        subject=rendered.subject,
        text=rendered.text,
        html=rendered.html,
    )


def parse_payload(body: bytes) -> SubmissionPayload:
    """
    Decode a JSON request body into a SubmissionPayload.

    A JSON value that is not an object is treated as an empty submission.

    Raises:
        ValueError: body is not valid JSON (json.JSONDecodeError and
            UnicodeDecodeError are both ValueError subclasses).
        ValidationError: a field holds a list or object instead of text.
    """
    data = json.loads(body)
    if not isinstance(data, dict):
        data = {}
    return SubmissionPayload.model_validate(data)


async def handle_submission(
    body: bytes,
    settings: Settings,
    provider: EmailProvider,
    client_ip: str = "unknown",
) -> ContactResult:
    """
    Process one contact form submission end to end.

    Args:
        body:      Raw request body (expected to be a JSON object).
        settings:  Process-wide configuration.
        provider:  Email provider used for delivery.
        client_ip: Address reported by the upstream proxy, for logging only.

    Returns:
        ContactResult describing what happened.
    """
    try:
        return await _handle(body, settings, provider, client_ip)
    except Exception:
        logger.exception("Unexpected error while handling contact submission")
        return ContactResult.internal_error()


async def _handle(
    body: bytes,
    settings: Settings,
    provider: EmailProvider,
    client_ip: str,
) -> ContactResult:
    try:
        payload = parse_payload(body)
    except ValidationError:
        return ContactResult.invalid(MSG_REQUIRED_FIELDS)
    except ValueError as exc:
        logger.error(f"Could not parse contact request body: {exc}")
        return ContactResult.internal_error()

    error = validate_submission(payload)
    if error:
        return ContactResult.invalid(error)

    if is_honeypot(payload):
        logger.warning(f"Honeypot field filled, discarding submission from {client_ip}")
        return ContactResult.discarded()

    rendered = render_email(payload)
    message = build_outbound_email(payload, rendered, settings)

    logger.info(f"Forwarding contact request from {client_ip} via {provider.name}")
    outcome = await provider.send(message)

    if isinstance(outcome, Delivered):
        return ContactResult.sent()

    if isinstance(outcome, ProviderRejected):
        logger.error(
            f"{provider.name} error: HTTP {outcome.status_code} {outcome.body}"
        )
        return ContactResult.delivery_failed()

    if isinstance(outcome, TransportFailure):
        logger.error(
            f"{provider.name} request failed: {outcome.error!r}",
            exc_info=outcome.error,
        )
        return ContactResult.internal_error()

    raise TypeError(f"Unknown delivery outcome: {outcome!r}")
