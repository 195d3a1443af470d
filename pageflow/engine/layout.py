"""In-process layout host built from measured line boxes.

Each line box covers the document positions from its ``start`` up to the next
line's start. Installed spacers push every position at or after them down by
the spacer height, the way a widget rendered before a position does in a
browser editor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Sequence, Tuple

import numpy as np

from ..utils.errors import CoordinateLookupError, LayoutRequestError
from .coordinates import Coords
from .decorations import SpacerDecoration


@dataclass(frozen=True, slots=True)
class LineBox:
    start: int
    top: float
    height: float


def uniform_lines(
    count: int, line_height: float, positions_per_line: int = 10
) -> list[LineBox]:
    """Line boxes for ``count`` equally tall lines laid out back to back."""

    return [
        LineBox(
            start=index * positions_per_line,
            top=index * line_height,
            height=line_height,
        )
        for index in range(count)
    ]


class LineBoxLayout:
    """Coordinate provider, host hooks and decoration sink over line boxes."""

    def __init__(
        self,
        lines: Sequence[LineBox],
        doc_size: int,
        *,
        container: Tuple[float, float] = (816.0, 1056.0),
        unmeasurable: Iterable[int] = (),
    ) -> None:
        self._change_listeners: List[Callable[[], None]] = []
        self._resize_listeners: List[Callable[[], None]] = []
        self._spacers: Tuple[SpacerDecoration, ...] = ()
        self._spacer_positions = np.zeros(0, dtype=np.int64)
        self._spacer_height = 0.0
        self.install_count = 0
        self.container = container
        self.unmeasurable = set(unmeasurable)
        self._load(lines, doc_size)

    def _load(self, lines: Sequence[LineBox], doc_size: int) -> None:
        if not lines:
            raise LayoutRequestError("no_lines", "layout needs at least one line box")
        ordered = sorted(lines, key=lambda line: line.start)
        starts = np.array([line.start for line in ordered], dtype=np.int64)
        if starts[0] != 0:
            raise LayoutRequestError(
                "bad_first_line", "the first line box must start at position 0"
            )
        if np.any(np.diff(starts) <= 0):
            raise LayoutRequestError(
                "duplicate_line_start", "line box starts must be unique"
            )
        if doc_size < int(starts[-1]):
            raise LayoutRequestError(
                "doc_size_too_small",
                "doc_size must not be smaller than the last line start",
                {"doc_size": doc_size, "last_start": int(starts[-1])},
            )
        heights = np.array([line.height for line in ordered], dtype=np.float64)
        if np.any(heights < 0):
            raise LayoutRequestError("negative_height", "line heights must be >= 0")
        self._starts = starts
        self._tops = np.array([line.top for line in ordered], dtype=np.float64)
        self._heights = heights
        self._doc_size = int(doc_size)

    @property
    def doc_size(self) -> int:
        return self._doc_size

    @property
    def spacers(self) -> Tuple[SpacerDecoration, ...]:
        return self._spacers

    def coords_at_position(self, position: int) -> Coords:
        if position < 0 or position > self._doc_size:
            raise CoordinateLookupError(position, f"position {position} out of range")
        if position in self.unmeasurable:
            raise CoordinateLookupError(position)
        line = int(np.searchsorted(self._starts, position, side="right")) - 1
        offset = (
            int(np.searchsorted(self._spacer_positions, position, side="right"))
            * self._spacer_height
        )
        top = float(self._tops[line]) + offset
        return Coords(top=top, bottom=top + float(self._heights[line]))

    def container_size(self) -> Tuple[float, float]:
        return self.container

    def on_change(self, callback: Callable[[], None]) -> Callable[[], None]:
        return self._subscribe(self._change_listeners, callback)

    def on_resize(self, callback: Callable[[], None]) -> Callable[[], None]:
        return self._subscribe(self._resize_listeners, callback)

    @staticmethod
    def _subscribe(
        listeners: List[Callable[[], None]], callback: Callable[[], None]
    ) -> Callable[[], None]:
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._change_listeners) + len(self._resize_listeners)

    def install(self, decorations: Sequence[SpacerDecoration]) -> Any:
        """Render spacers before each decoration's position."""

        self._spacers = tuple(decorations)
        self._spacer_positions = np.array(
            sorted(decoration.position for decoration in decorations), dtype=np.int64
        )
        self._spacer_height = float(decorations[0].height) if decorations else 0.0
        self.install_count += 1
        return self._spacers

    def replace_lines(self, lines: Sequence[LineBox], doc_size: int) -> None:
        """Apply a document mutation and notify change listeners."""

        self._load(lines, doc_size)
        for callback in list(self._change_listeners):
            callback()

    def resize(
        self,
        width: float,
        height: float,
        lines: Sequence[LineBox] | None = None,
    ) -> None:
        """Resize the container, optionally reflowing lines, and notify."""

        self.container = (width, height)
        if lines is not None:
            self._load(lines, self._doc_size)
        for callback in list(self._resize_listeners):
            callback()


__all__ = ["LineBox", "LineBoxLayout", "uniform_lines"]
