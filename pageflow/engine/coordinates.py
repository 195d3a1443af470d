"""Coordinate provider protocol and the content-only coordinate translator."""

from __future__ import annotations

import logging
from typing import Iterator, NamedTuple, Protocol, Tuple

from ..utils import logging as _logging  # noqa: F401  (registers Logger.trace)
from ..utils.errors import UnmeasurablePositionError
from ..utils.trace import PaginationTracer
from .ledger import SpacerLedger

LOGGER = logging.getLogger(__name__)


class Coords(NamedTuple):
    top: float
    bottom: float


class CoordinateProvider(Protocol):
    """Read-only view of the host's text layout."""

    @property
    def doc_size(self) -> int: ...

    def coords_at_position(self, position: int) -> Coords:
        """Return rendered coordinates; raise ``LookupError`` if unavailable."""
        ...


def _neighbours(position: int, radius: int, doc_size: int) -> Iterator[int]:
    for distance in range(1, radius + 1):
        for candidate in (position - distance, position + distance):
            if 0 <= candidate <= doc_size:
                yield candidate


class ContentOnlyTranslator:
    """Measure positions as if no spacers were installed.

    The rendered coordinate of a position includes one spacer height for every
    ledger entry at or before it; that contribution is subtracted so break
    targets stay fixed regardless of the spacers the previous pass installed.
    """

    def __init__(
        self,
        provider: CoordinateProvider,
        ledger: SpacerLedger,
        *,
        fallback_radius: int = 8,
        tracer: PaginationTracer | None = None,
    ) -> None:
        self._provider = provider
        self._ledger = ledger
        self._fallback_radius = fallback_radius
        self._tracer = tracer
        self.doc_size = provider.doc_size

    @property
    def ledger(self) -> SpacerLedger:
        return self._ledger

    def top(self, position: int) -> float:
        measured, coords = self._measure(position)
        return coords.top - self._ledger.offset_at(measured)

    def bottom(self, position: int) -> float:
        measured, coords = self._measure(position)
        return coords.bottom - self._ledger.offset_at(measured)

    def _measure(self, position: int) -> Tuple[int, Coords]:
        """Return the position actually measured and its rendered coordinates."""

        try:
            return position, self._provider.coords_at_position(position)
        except LookupError as exc:
            first_error = exc

        for candidate in _neighbours(position, self._fallback_radius, self.doc_size):
            try:
                coords = self._provider.coords_at_position(candidate)
            except LookupError:
                continue
            LOGGER.trace(  # type: ignore[attr-defined]
                "coords unavailable at %s (%s); using %s", position, first_error, candidate
            )
            if self._tracer is not None:
                self._tracer.ev(
                    "coordinate_fallback", position=position, substitute=candidate
                )
            return candidate, coords

        raise UnmeasurablePositionError(position, self._fallback_radius) from first_error


__all__ = ["ContentOnlyTranslator", "CoordinateProvider", "Coords"]
