"""Centralized exception handlers for the tubelink API.

Resolution failures are part of the endpoint contract rather than transport
errors, so every handler here answers with status 200 and the
``{"success": false, "error": "..."}`` envelope. The request ID is echoed on
the response so failures can be matched to server logs.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tubelink.api.middleware.request_id import REQUEST_ID_HEADER, get_request_id
from tubelink.api.schemas.resolve import ResolveErrorResponse
from tubelink.exceptions import ChannelResolutionError, TubelinkError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


def _failure_response(message: str) -> JSONResponse:
    """Build the 200 failure envelope, echoing the request ID when set."""
    response = JSONResponse(
        status_code=200,
        content=ResolveErrorResponse(error=message).model_dump(),
    )
    request_id = get_request_id()
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


async def tubelink_error_handler(request: Request, exc: TubelinkError) -> JSONResponse:
    """Handle domain errors by surfacing their message.

    Parameters
    ----------
    request : Request
        The incoming FastAPI request.
    exc : TubelinkError
        The domain error.

    Returns
    -------
    JSONResponse
        Failure envelope carrying ``exc.message``.
    """
    if isinstance(exc, ChannelResolutionError):
        logger.warning(
            "Resolution failed for %s on %s (%s): %s",
            exc.handle,
            request.url.path,
            exc.reason,
            exc.message,
        )
    else:
        logger.warning("Request to %s failed: %s", request.url.path, exc.message)
    return _failure_response(exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed query parameters with the standard envelope."""
    logger.info("Validation error on %s: %s", request.url.path, exc.errors())
    return _failure_response("Invalid request parameters")


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internals.

    The full stack trace is logged; the client gets a generic message.
    """
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
    return _failure_response(GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Parameters
    ----------
    app : FastAPI
        The FastAPI application instance.
    """
    app.add_exception_handler(TubelinkError, tubelink_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_error_handler)
