"""Custom middleware for the pageflow service."""

from .request_context import (
    RequestIdLogFilter,
    RequestIdMiddleware,
    get_request_id,
    install_request_id_logging,
)

__all__ = [
    "RequestIdLogFilter",
    "RequestIdMiddleware",
    "get_request_id",
    "install_request_id_logging",
]
