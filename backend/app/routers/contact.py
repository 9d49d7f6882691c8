"""
Contact form router.

The transport layer around handle_submission(): method dispatch, CORS headers
and rendering of ContactResult into JSON responses.

The endpoint answers on any path (the site posts to the bare host), so this
router must be included after every other router. Methods the route does not
list never reach it; method_not_allowed_handler gives those the same 405
answer.

  OPTIONS *   - CORS preflight, empty body
  POST    *   - contact submission
  other   *   - 405 {"error": "Method not allowed"}
"""

from functools import lru_cache

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, get_settings
from app.cors import cors_headers, resolve_origin
from app.services.contact_handler import handle_submission
from app.services.email_sender import EmailProvider, build_email_provider

router = APIRouter()

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _method_not_allowed(headers: dict[str, str]) -> JSONResponse:
    return JSONResponse({"error": "Method not allowed"}, status_code=405, headers=headers)


@lru_cache
def get_email_provider() -> EmailProvider:
    """Process-wide provider built from the process-wide Settings."""
    return build_email_provider(get_settings())


@router.api_route("/{path:path}", methods=_ALL_METHODS, include_in_schema=False)
async def contact(
    request: Request,
    settings: Settings = Depends(get_settings),
    provider: EmailProvider = Depends(get_email_provider),
) -> Response:
    headers = cors_headers(resolve_origin(request.headers.get("origin"), settings))

    if request.method == "OPTIONS":
        return Response(status_code=200, headers=headers)

    if request.method != "POST":
        return _method_not_allowed(headers)

    client_ip = request.headers.get(settings.client_ip_header) or "unknown"
    body = await request.body()

    result = await handle_submission(body, settings, provider, client_ip=client_ip)
    return JSONResponse(result.body(), status_code=result.status_code, headers=headers)


async def method_not_allowed_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    """
    Render routing-level 405s (methods outside _ALL_METHODS, e.g. TRACE)
    like the contact route does, CORS headers included. Other HTTP errors
    keep FastAPI's default rendering.
    """
    if exc.status_code != 405:
        return await http_exception_handler(request, exc)

    settings_dependency = request.app.dependency_overrides.get(get_settings, get_settings)
    settings = settings_dependency()
    headers = cors_headers(resolve_origin(request.headers.get("origin"), settings))
    return _method_not_allowed(headers)
