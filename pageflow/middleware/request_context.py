"""Request identifiers for responses and log records."""

from __future__ import annotations

import contextvars
import logging
import re
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

_REQUEST_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def get_request_id(default: str | None = None) -> str | None:
    return _REQUEST_ID.get(default)


def _normalise_request_id(value: str | None) -> str:
    """Return a safe request identifier, falling back to a generated token."""

    if value:
        candidate = value.strip()
        if _REQUEST_ID_PATTERN.match(candidate):
            return candidate
    return uuid.uuid4().hex


class RequestIdLogFilter(logging.Filter):
    """Expose the active request id on log records as ``request_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id("-")
        return True


def install_request_id_logging(logger: logging.Logger | None = None) -> None:
    """Tag records emitted through the handlers of ``logger`` with the request id."""

    target = logger or logging.getLogger()
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s [%(request_id)s] | %(message)s"
    )
    for handler in target.handlers:
        if any(isinstance(item, RequestIdLogFilter) for item in handler.filters):
            continue
        handler.addFilter(RequestIdLogFilter())
        handler.setFormatter(formatter)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Echo or assign an ``X-Request-ID`` for every request."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next):
        request_id = _normalise_request_id(request.headers.get(self.header_name))
        token = _REQUEST_ID.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _REQUEST_ID.reset(token)
        response.headers[self.header_name] = request_id
        return response


__all__ = [
    "RequestIdLogFilter",
    "RequestIdMiddleware",
    "get_request_id",
    "install_request_id_logging",
]
