"""Endpoints that compute page breaks for measured line-box layouts."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from ..config import get_settings
from ..engine.geometry import PageGeometry
from ..engine.layout import LineBox
from ..services.pagination import compute_single_pass, paginate_lines
from ..services.pagination_state import PageBreakInfo
from ..utils.errors import LayoutRequestError

router = APIRouter(prefix="/api/pagination", tags=["pagination"])


class LineBoxPayload(BaseModel):
    """One rendered line: its first document position and vertical extent."""

    start: int = Field(..., ge=0)
    top: float
    height: float = Field(..., ge=0)


class LayoutPayload(BaseModel):
    lines: list[LineBoxPayload] = Field(..., min_length=1)
    doc_size: int = Field(..., ge=0)
    unmeasurable: list[int] = Field(default_factory=list)


class BreaksRequest(LayoutPayload):
    """Layout measured with the spacers in ``ledger`` already rendered."""

    ledger: list[int] = Field(default_factory=list)


class SettleRequest(LayoutPayload):
    """Layout measured without any spacers installed.

    Omitted container dimensions default to the configured page size.
    """

    container_width: float | None = None
    container_height: float | None = None


class PageInfo(BaseModel):
    page_index: int
    content_start_y: float
    content_end_y: float
    position: int


class BreaksResponse(BaseModel):
    positions: list[int]
    pages: list[PageInfo]
    total_height: float
    soft_failure: str | None = None


class SettleResponse(BaseModel):
    positions: list[int]
    pages: list[PageInfo]
    page_count: int
    passes: int
    converged: bool
    outcomes: list[str] = Field(default_factory=list)


def _line_boxes(payload: LayoutPayload) -> list[LineBox]:
    return [LineBox(start=line.start, top=line.top, height=line.height) for line in payload.lines]


def _page_infos(pages: list[PageBreakInfo]) -> list[PageInfo]:
    return [
        PageInfo(
            page_index=page.page_index,
            content_start_y=page.content_start_y,
            content_end_y=page.content_end_y,
            position=page.position,
        )
        for page in pages
    ]


def _container(payload: SettleRequest) -> tuple[float, float]:
    geometry = PageGeometry.from_settings(get_settings())
    width = (
        geometry.page_width
        if payload.container_width is None
        else payload.container_width
    )
    height = (
        geometry.page_height
        if payload.container_height is None
        else payload.container_height
    )
    return width, height


def _unprocessable(exc: LayoutRequestError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"code": exc.code, "message": str(exc), **exc.extra},
    )


@router.post("/breaks", response_model=BreaksResponse)
def compute_breaks(payload: BreaksRequest) -> BreaksResponse:
    """Run one break computation pass against the submitted ledger."""

    try:
        result = compute_single_pass(
            _line_boxes(payload),
            payload.doc_size,
            payload.ledger,
            unmeasurable=payload.unmeasurable,
        )
    except LayoutRequestError as exc:
        raise _unprocessable(exc) from exc

    return BreaksResponse(
        positions=result.positions,
        pages=_page_infos(result.pages),
        total_height=result.total_height,
        soft_failure=result.soft_failure,
    )


@router.post("/settle", response_model=SettleResponse)
def settle_breaks(payload: SettleRequest) -> SettleResponse:
    """Paginate repeatedly, installing spacers, until the breaks stop changing."""

    try:
        result = paginate_lines(
            _line_boxes(payload),
            payload.doc_size,
            container=_container(payload),
            unmeasurable=payload.unmeasurable,
        )
    except LayoutRequestError as exc:
        raise _unprocessable(exc) from exc

    return SettleResponse(
        positions=result.positions,
        pages=_page_infos(result.pages),
        page_count=result.page_count,
        passes=result.passes,
        converged=result.converged,
        outcomes=result.outcomes,
    )


__all__ = ["router"]
