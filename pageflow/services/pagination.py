"""Run the pagination engine over submitted line-box layouts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..config import Settings, get_settings
from ..engine.builder import build_break_set
from ..engine.geometry import PageGeometry
from ..engine.layout import LineBox, LineBoxLayout
from ..engine.ledger import SpacerLedger
from ..engine.scheduler import PaginationController, PassOutcome, QueuedFrameScheduler
from ..utils.logging import configure_logging
from ..utils.trace import PaginationTracer
from .pagination_state import PageBreakInfo, PaginationState, page_infos_from_breaks

LOGGER = configure_logging().getChild(__name__)


@dataclass(slots=True)
class SinglePassResult:
    positions: list[int]
    pages: list[PageBreakInfo]
    total_height: float
    soft_failure: str | None = None


@dataclass(slots=True)
class SettleResult:
    positions: list[int]
    pages: list[PageBreakInfo]
    page_count: int
    passes: int
    converged: bool
    outcomes: list[str] = field(default_factory=list)


def _tracer_for(settings: Settings) -> PaginationTracer | None:
    if not settings.pagination_trace:
        return None
    return PaginationTracer(out_dir=str(settings.pagination_trace_dir))


def compute_single_pass(
    lines: Sequence[LineBox],
    doc_size: int,
    ledger_positions: Iterable[int] = (),
    *,
    unmeasurable: Iterable[int] = (),
    settings: Settings | None = None,
) -> SinglePassResult:
    """Compute breaks for a layout measured with ``ledger_positions`` installed.

    The submitted line tops are the rendered coordinates, so they already
    include the spacers listed in the ledger.
    """

    settings = settings or get_settings()
    geometry = PageGeometry.from_settings(settings)
    layout = LineBoxLayout(lines, doc_size, unmeasurable=unmeasurable)
    ledger = SpacerLedger.from_positions(
        ledger_positions, geometry.visual_spacer_height
    )
    tracer = _tracer_for(settings)
    break_set = build_break_set(
        layout,
        ledger,
        geometry,
        fallback_radius=settings.coords_fallback_radius,
        tracer=tracer,
    )
    if tracer is not None and tracer.events:
        tracer.flush_jsonl()
    return SinglePassResult(
        positions=list(break_set.positions),
        pages=page_infos_from_breaks(
            break_set.positions, break_set.content_tops, break_set.total_height
        ),
        total_height=break_set.total_height,
        soft_failure=break_set.soft_failure,
    )


def paginate_lines(
    lines: Sequence[LineBox],
    doc_size: int,
    *,
    container: tuple[float, float] | None = None,
    unmeasurable: Iterable[int] = (),
    settings: Settings | None = None,
) -> SettleResult:
    """Drive a controller over an unspaced layout until its breaks settle.

    Every committed pass installs spacers into the layout, which shifts the
    rendered coordinates seen by the next pass. Without an explicit
    ``container`` the layout reports the configured page size.
    """

    settings = settings or get_settings()
    geometry = PageGeometry.from_settings(settings)
    if container is None:
        container = (geometry.page_width, geometry.page_height)
    layout = LineBoxLayout(
        lines, doc_size, container=container, unmeasurable=unmeasurable
    )
    frames = QueuedFrameScheduler()
    state = PaginationState()
    tracer = _tracer_for(settings)
    controller = PaginationController(
        layout,
        layout,
        layout,
        frames,
        geometry=geometry,
        fallback_radius=settings.coords_fallback_radius,
        state=state,
        tracer=tracer,
    )

    outcomes: list[str] = []
    converged = False
    controller.install()
    try:
        for _ in range(settings.max_settle_passes):
            frames.flush()
            outcome = controller.last_outcome
            if outcome is None:
                break
            outcomes.append(outcome.value)
            if outcome is not PassOutcome.CHANGED:
                converged = outcome is PassOutcome.UNCHANGED
                break
            controller.request_recompute()
    finally:
        controller.teardown()

    if not converged:
        LOGGER.warning(
            "Pagination did not settle after %d passes (outcomes=%s)",
            len(outcomes),
            outcomes,
        )

    break_set = controller.last_break_set
    pages = (
        page_infos_from_breaks(
            break_set.positions, break_set.content_tops, break_set.total_height
        )
        if break_set is not None
        else []
    )
    return SettleResult(
        positions=list(controller.ledger.positions),
        pages=pages,
        page_count=state.page_count,
        passes=len(outcomes),
        converged=converged,
        outcomes=outcomes,
    )


__all__ = [
    "SettleResult",
    "SinglePassResult",
    "compute_single_pass",
    "paginate_lines",
]
