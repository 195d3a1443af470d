"""pageflow service entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .engine.geometry import PageGeometry
from .middleware import RequestIdMiddleware, install_request_id_logging
from .observability import RequestMetricsMiddleware
from .routers import api_router
from .utils.logging import configure_logging


settings = get_settings()
configure_logging()
install_request_id_logging()
logger = logging.getLogger("uvicorn.error")

cors_allow_origins = list(settings.cors_allow_origins) or [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
allow_credentials = "*" not in cors_allow_origins
if not allow_credentials:
    cors_allow_origins = ["*"]

geometry = PageGeometry.from_settings(settings)
logger.info(
    "[pageflow] effective page height %.0fpx, spacer height %.0fpx",
    geometry.effective_page_height,
    geometry.visual_spacer_height,
)

app = FastAPI(title="pageflow", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_origin_regex=settings.cors_allow_origin_regex,
)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(RequestMetricsMiddleware)
app.include_router(api_router)


@app.exception_handler(Exception)
async def handle_unexpected_exception(
    request: Request, exc: Exception
) -> JSONResponse:
    """Ensure unexpected exceptions return a JSON payload."""

    logger.exception(
        "Unhandled exception while processing %s %s", request.method, request.url.path
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


__all__ = ["app"]
