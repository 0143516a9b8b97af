"""Request correlation for the resolution API.

Every request handled by the API gets an identifier, taken from the
``X-Request-ID`` header when the client supplies a usable one and minted
otherwise. The identifier is held in a ``ContextVar`` so that log records
emitted anywhere inside the request (including the resolution strategies)
carry it through ``RequestIdFilter``, and it is echoed back on the response.
"""

from __future__ import annotations

import contextvars
import logging
import uuid
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

if TYPE_CHECKING:
    from starlette.middleware.base import RequestResponseEndpoint

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default=""
)


def get_request_id() -> str:
    """Return the current request's ID, or "" outside a request."""
    return request_id_var.get()


def sanitize_request_id(header_value: str | None) -> str:
    """Accept a client-supplied request ID or mint a fresh UUID4.

    Parameters
    ----------
    header_value : str | None
        Raw ``X-Request-ID`` header value.

    Returns
    -------
    str
        The header value truncated to ``MAX_REQUEST_ID_LENGTH`` when it is
        non-empty printable ASCII; otherwise a new UUID4 string.
    """
    if not header_value:
        return str(uuid.uuid4())

    if not all(33 <= ord(c) <= 126 for c in header_value):
        logger.warning("Ignoring X-Request-ID with non-printable characters")
        return str(uuid.uuid4())

    return header_value[:MAX_REQUEST_ID_LENGTH]


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Bind a request ID to the context for the lifetime of one request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = sanitize_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(request_id)
        try:
            request.state.request_id = request_id
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)


class RequestIdFilter(logging.Filter):
    """Stamp ``record.request_id`` so formats can use ``%(request_id)s``.

    Records logged outside a request (CLI runs, startup) get ``"-"``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True
