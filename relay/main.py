"""Notification relay - FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from relay import __version__
from relay.config import settings
from relay.errors import MissingParametersError, describe_error
from relay.routers import health, webhooks

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Planning Center Notification Relay",
    description="Relays Planning Center plan updates to push notification services",
    version=__version__,
    debug=settings.debug,
)


@app.exception_handler(MissingParametersError)
async def missing_parameters_handler(request: Request, exc: MissingParametersError):
    return PlainTextResponse(exc.message, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return PlainTextResponse(describe_error(exc), status_code=500)


# Routers
app.include_router(health.router)
app.include_router(webhooks.router, tags=["webhooks"])
