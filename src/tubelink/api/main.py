"""FastAPI application for the tubelink API."""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from tubelink import __version__
from tubelink.api.exception_handlers import register_exception_handlers
from tubelink.api.middleware.request_id import RequestIdMiddleware
from tubelink.api.routers import health, resolve
from tubelink.config.logging import configure_logging
from tubelink.config.settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    app_settings = get_settings()
    configure_logging(app_settings.log_level, verbose=app_settings.debug)
    logger.info("Starting %s API v%s", app_settings.app_name, __version__)
    yield
    logger.info("Shutting down %s API", app_settings.app_name)


app = FastAPI(
    title="Tubelink API",
    description="Resolve YouTube channel handles to channel IDs and metadata",
    version=__version__,
    lifespan=lifespan,
)


def _get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxied requests."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    if request.client:
        return request.client.host
    return "unknown"


@app.middleware("http")
async def log_requests(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """
    Log each request and its response status and timing.

    Only the path is logged, never the query string.
    """
    start_time = time.perf_counter()
    method = request.method
    path = request.url.path

    logger.info("Request: %s %s from %s", method, path, _get_client_ip(request))

    response = await call_next(request)

    duration = time.perf_counter() - start_time
    status_code = response.status_code
    if status_code >= 500:
        log_level = logging.ERROR
    elif status_code >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    logger.log(
        log_level,
        "Response: %s %s - %d (%.3fs)",
        method,
        path,
        status_code,
        duration,
    )
    return response


# Added last so it wraps log_requests and the request ID is bound in its logs
app.add_middleware(RequestIdMiddleware)

register_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(resolve.router, tags=["resolve"])
