"""
Nordvind Contact API
FastAPI application that forwards website contact requests by email.
"""

import logging

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.routers import contact

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Nordvind Contact API",
    description="Contact form submission relay for nordvind-ai.de",
    version="0.1.0",
)


@app.on_event("startup")
async def check_configuration() -> None:
    """
    Fail fast on bad configuration and log where mail is going.

    Builds the process-wide Settings and email provider once so that a
    missing TO_EMAIL / FROM_EMAIL or an unknown EMAIL_PROVIDER stops the
    server at boot instead of surfacing as a 500 on the first submission.
    """
    settings = get_settings()
    provider = contact.get_email_provider()
    logger.info(
        "Contact API ready: provider=%s, recipient=%s, allowed origins=%s",
        provider.name,
        settings.to_email,
        ", ".join(settings.allowed_origins),
    )


@app.get("/health")
async def health():
    return {"status": "ok"}


app.add_exception_handler(StarletteHTTPException, contact.method_not_allowed_handler)

# Catch-all contact route; must stay last.
app.include_router(contact.router, tags=["contact"])
