"""Compute the full break set for a document."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..utils import logging as _logging  # noqa: F401  (registers Logger.trace)
from ..utils.errors import UnmeasurablePositionError
from ..utils.trace import PaginationTracer
from .coordinates import ContentOnlyTranslator, CoordinateProvider
from .finder import find_break
from .geometry import PageGeometry
from .ledger import SpacerLedger

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BreakSet:
    """Result of one pass: break positions and their content-only tops."""

    positions: Tuple[int, ...] = ()
    content_tops: Tuple[float, ...] = ()
    total_height: float = 0.0
    # Reason the pass stopped early, if it did.
    soft_failure: str | None = None

    def same_breaks(self, other: Sequence[int]) -> bool:
        return breaks_equal(self.positions, other)


def breaks_equal(current: Sequence[int], previous: Sequence[int]) -> bool:
    """Element-wise comparison of two break sets."""

    if len(current) != len(previous):
        return False
    return all(a == b for a, b in zip(current, previous))


def build_break_set(
    provider: CoordinateProvider,
    ledger: SpacerLedger,
    geometry: PageGeometry | None = None,
    *,
    fallback_radius: int = 8,
    tracer: PaginationTracer | None = None,
) -> BreakSet:
    """Find every page break of the document in the content-only frame.

    Breaks are searched page by page; each search resumes one past the previous
    accepted break. The first candidate that is out of range or not strictly
    increasing ends the pass and the accepted prefix is returned.
    """

    geometry = geometry or PageGeometry.from_settings()
    page_height = geometry.effective_page_height
    translator = ContentOnlyTranslator(
        provider, ledger, fallback_radius=fallback_radius, tracer=tracer
    )
    doc_size = translator.doc_size
    if tracer is not None:
        tracer.ev("start_pass", doc_size=doc_size, ledger=list(ledger.positions))

    try:
        total_height = translator.bottom(doc_size)
    except UnmeasurablePositionError as exc:
        LOGGER.warning("Cannot measure document end (%s); no breaks this pass", exc)
        if tracer is not None:
            tracer.ev("break_rejected", reason=exc.code, position=doc_size)
        return BreakSet(soft_failure=exc.code)

    num_breaks = math.floor((total_height - geometry.break_epsilon) / page_height)
    if num_breaks <= 0:
        return BreakSet(total_height=total_height)

    positions: List[int] = []
    tops: List[float] = []
    soft_failure: str | None = None

    for page in range(1, num_breaks + 1):
        target = page * page_height
        lo = positions[-1] + 1 if positions else 0
        try:
            candidate = find_break(translator.top, target, lo, doc_size)
            top = translator.top(candidate) if candidate < doc_size else None
        except UnmeasurablePositionError as exc:
            soft_failure = exc.code
            LOGGER.warning("Stopping pass at page %d: %s", page, exc)
            if tracer is not None:
                tracer.ev("break_rejected", reason=exc.code, page=page)
            break

        previous = positions[-1] if positions else 0
        if not 0 < candidate < doc_size or candidate <= previous:
            soft_failure = "non_monotonic_break"
            LOGGER.warning(
                "Rejected break candidate %d for page %d (previous %d, doc size %d); "
                "layout may not be monotonic",
                candidate,
                page,
                previous,
                doc_size,
            )
            if tracer is not None:
                tracer.ev(
                    "break_rejected",
                    reason=soft_failure,
                    page=page,
                    position=candidate,
                    previous=previous,
                )
            break

        LOGGER.trace(  # type: ignore[attr-defined]
            "page %d: target %.1f -> position %d (top %.1f)", page, target, candidate, top
        )
        if tracer is not None:
            tracer.ev("break_accepted", page=page, position=candidate, target=target)
        positions.append(candidate)
        tops.append(top)

    ordered = sorted(set(positions))
    if ordered != positions:
        tops = [tops[positions.index(position)] for position in ordered]

    return BreakSet(
        positions=tuple(ordered),
        content_tops=tuple(tops),
        total_height=total_height,
        soft_failure=soft_failure,
    )


def compute_break_positions(
    provider: CoordinateProvider,
    ledger: SpacerLedger,
    geometry: PageGeometry | None = None,
    *,
    fallback_radius: int = 8,
) -> List[int]:
    """Return the strictly increasing break positions for the current layout."""

    result = build_break_set(
        provider, ledger, geometry, fallback_radius=fallback_radius
    )
    return list(result.positions)


__all__ = ["BreakSet", "breaks_equal", "build_break_set", "compute_break_positions"]
