"""
Runtime configuration.

All settings are read from the environment (a local .env file is honoured via
python-dotenv) and collected into a single immutable Settings object. The
object is built once per process by get_settings() and handed to the router
through FastAPI's dependency injection, so nothing downstream reads os.environ
directly.

Environment variables
---------------------
ALLOWED_ORIGIN          Primary CORS origin, also the fallback for unknown
                        origins (default: https://nordvind-ai.de).
CORS_EXTRA_ORIGINS      Comma-separated secondary origins that are echoed back
                        (default: https://www.nordvind-ai.de).
TO_EMAIL / TO_NAME      Destination mailbox for contact requests.
FROM_EMAIL / FROM_NAME  Sender identity used for outbound mail.
EMAIL_PROVIDER          "mailchannels" (default) or "resend".
EMAIL_API_KEY           Provider credential.
EMAIL_API_URL           Optional endpoint override (staging / sandbox).
EMAIL_TIMEOUT_SECONDS   Outbound HTTP timeout (default: 10). The Cloudflare
                        worker this service replaces set no timeout and
                        relied on the platform request limit; here a hung
                        provider call fails after this many seconds and is
                        answered with the generic 500. No retry follows.
CLIENT_IP_HEADER        Upstream header carrying the client IP
                        (default: CF-Connecting-IP).
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ALLOWED_ORIGIN = "https://nordvind-ai.de"
DEFAULT_EXTRA_ORIGINS = "https://www.nordvind-ai.de"

_REQUIRED = ("TO_EMAIL", "FROM_EMAIL")


@dataclass(frozen=True)
class Settings:
    to_email: str
    from_email: str
    allowed_origin: str = DEFAULT_ALLOWED_ORIGIN
    extra_origins: tuple[str, ...] = ()
    to_name: str = "Nordvind AI"
    from_name: str = "Nordvind AI Kontaktformular"
    email_provider: str = "mailchannels"
    email_api_key: Optional[str] = None
    email_api_url: Optional[str] = None
    email_timeout_seconds: float = 10.0
    client_ip_header: str = "CF-Connecting-IP"

    @property
    def allowed_origins(self) -> tuple[str, ...]:
        """Primary origin first, then the secondary ones, without duplicates."""
        seen: set = set()
        origins: list[str] = []
        for origin in (self.allowed_origin, *self.extra_origins):
            if origin not in seen:
                seen.add(origin)
                origins.append(origin)
        return tuple(origins)


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from an environment mapping (defaults to os.environ).

    Raises:
        ValueError: if a required variable is missing or a value is malformed.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in _REQUIRED if not (env.get(name) or "").strip()]
    if missing:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    timeout_raw = (env.get("EMAIL_TIMEOUT_SECONDS") or "10").strip()
    try:
        timeout = float(timeout_raw)
    except ValueError:
        raise ValueError(
            f"EMAIL_TIMEOUT_SECONDS must be a number, got {timeout_raw!r}"
        )

    extra_raw = env.get("CORS_EXTRA_ORIGINS")
    if extra_raw is None:
        extra_raw = DEFAULT_EXTRA_ORIGINS

    return Settings(
        to_email=env["TO_EMAIL"].strip(),
        from_email=env["FROM_EMAIL"].strip(),
        allowed_origin=(env.get("ALLOWED_ORIGIN") or DEFAULT_ALLOWED_ORIGIN).strip(),
        extra_origins=_split_origins(extra_raw),
        to_name=(env.get("TO_NAME") or "Nordvind AI").strip(),
        from_name=(env.get("FROM_NAME") or "Nordvind AI Kontaktformular").strip(),
        email_provider=(env.get("EMAIL_PROVIDER") or "mailchannels").lower().strip(),
        email_api_key=(env.get("EMAIL_API_KEY") or "").strip() or None,
        email_api_url=(env.get("EMAIL_API_URL") or "").strip() or None,
        email_timeout_seconds=timeout,
        client_ip_header=(env.get("CLIENT_IP_HEADER") or "CF-Connecting-IP").strip(),
    )


@lru_cache
def get_settings() -> Settings:
    """Process-wide Settings, built on first use."""
    return load_settings()
