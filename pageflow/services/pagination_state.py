"""Page count, current page and break bookkeeping for a paginated view."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class PageBreakInfo:
    page_index: int         # 1-based page number
    content_start_y: float  # content-only Y where the page's content starts
    content_end_y: float    # content-only Y where the page's content ends
    position: int           # document position of the page's first line
    is_manual_break: bool = False


def page_infos_from_breaks(
    positions: Sequence[int], content_tops: Sequence[float], total_height: float
) -> list[PageBreakInfo]:
    """Describe every page delimited by the given breaks."""

    starts = [0.0, *content_tops]
    ends = [*content_tops, total_height]
    first_positions = [0, *positions]
    return [
        PageBreakInfo(
            page_index=index,
            content_start_y=start,
            content_end_y=end,
            position=position,
        )
        for index, (start, end, position) in enumerate(
            zip(starts, ends, first_positions), start=1
        )
    ]


class PaginationState:
    """Mutable navigation state published by the pagination controller."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._page_count = 1
        self._current_page = 1
        self._page_breaks: list[PageBreakInfo] = []
        self.scroll_position = 0.0
        self.is_calculating = False

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def page_breaks(self) -> tuple[PageBreakInfo, ...]:
        return tuple(self._page_breaks)

    def set_page_count(self, count: int) -> None:
        self._page_count = max(1, count)
        if self._current_page > self._page_count:
            self._current_page = self._page_count

    def set_current_page(self, page: float) -> None:
        if isinstance(page, float) and math.isnan(page):
            return
        self._current_page = int(max(1, min(page, self._page_count)))

    def set_page_breaks(self, breaks: Iterable[PageBreakInfo]) -> None:
        self._page_breaks = sorted(breaks, key=lambda info: info.page_index)

    def set_scroll_position(self, position: float) -> None:
        self.scroll_position = position

    def set_calculating(self, is_calculating: bool) -> None:
        self.is_calculating = is_calculating

    def go_to_page(self, page: float) -> None:
        self.set_current_page(page)

    def next_page(self) -> None:
        if self._current_page < self._page_count:
            self._current_page += 1

    def prev_page(self) -> None:
        if self._current_page > 1:
            self._current_page -= 1

    def get_page_at_y(self, y_position: float) -> int:
        """Return the 1-based page containing a content-only Y coordinate."""

        if not self._page_breaks or y_position < 0:
            return 1
        for info in self._page_breaks:
            if info.content_start_y <= y_position < info.content_end_y:
                return info.page_index
        last = self._page_breaks[-1]
        if y_position >= last.content_end_y:
            return last.page_index
        return 1

    def get_page_break_info(self, page_index: int) -> PageBreakInfo | None:
        for info in self._page_breaks:
            if info.page_index == page_index:
                return info
        return None


__all__ = ["PageBreakInfo", "PaginationState", "page_infos_from_breaks"]
