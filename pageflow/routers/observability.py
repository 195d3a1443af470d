"""Routes that expose operational observability data."""

from __future__ import annotations

from fastapi import APIRouter

from pageflow import __version__
from ..config import get_settings
from ..engine.geometry import PageGeometry
from ..observability import metrics_registry

router = APIRouter(prefix="/api", tags=["observability"])


@router.get("/health")
def read_health() -> dict[str, bool]:
    return {"ok": True}


@router.get("/metrics")
def read_metrics() -> dict[str, object]:
    """Return the current request and pagination metrics snapshot."""

    return metrics_registry.snapshot()


@router.get("/status")
def read_status() -> dict[str, object]:
    """Return version, active page geometry and metrics."""

    geometry = PageGeometry.from_settings(get_settings())
    return {
        "app": {"version": __version__},
        "geometry": {
            "page_width": geometry.page_width,
            "page_height": geometry.page_height,
            "effective_page_height": geometry.effective_page_height,
            "visual_spacer_height": geometry.visual_spacer_height,
            "break_epsilon": geometry.break_epsilon,
        },
        "metrics": metrics_registry.snapshot(),
    }


__all__ = ["router"]
