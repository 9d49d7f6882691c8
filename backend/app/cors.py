"""
CORS headers for the contact endpoint.

Unlike CORSMiddleware, which omits Access-Control-Allow-Origin for origins it
does not know, the contact endpoint always answers with an allowed origin:
the caller's own origin when it is on the allow-list, otherwise the primary
configured origin. The header set is attached to every response, errors
included.
"""

from typing import Optional

from app.config import Settings

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"
MAX_AGE_SECONDS = "86400"


def resolve_origin(request_origin: Optional[str], settings: Settings) -> str:
    """Echo an allow-listed origin back, fall back to the primary one."""
    if request_origin and request_origin in settings.allowed_origins:
        return request_origin
    return settings.allowed_origin


def cors_headers(origin: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        "Access-Control-Max-Age": MAX_AGE_SECONDS,
        "Vary": "Origin",
    }
