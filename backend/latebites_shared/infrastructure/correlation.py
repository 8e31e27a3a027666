"""
Request correlation IDs.

Every request gets an ID, taken from the caller's X-Request-ID header when it
looks sane, so the log lines of one reservation or sign-in can be grouped.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Caller-supplied IDs are echoed into headers and logs
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._\-]{1,64}$")


def get_request_id() -> str:
    """ID of the request being handled, "" outside a request."""
    return request_id_var.get()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind a request ID for the duration of the request and return it as a header."""

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = request.headers.get(self.HEADER_NAME, "")
        request_id = incoming if _VALID_REQUEST_ID.match(incoming) else uuid.uuid4().hex

        token = request_id_var.set(request_id)
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.HEADER_NAME] = request_id
        return response


class CorrelationIdFilter:
    """Logging filter stamping records with the current request ID ("-" when none)."""

    def filter(self, record) -> bool:
        record.request_id = get_request_id() or "-"
        return True
