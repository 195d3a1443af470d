"""Page dimensions and page/coordinate arithmetic.

All measurements are pixels of a US Letter page (8.5" x 11") at 96 DPI.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..config import Settings, get_settings

PAGE_WIDTH = 816
PAGE_HEIGHT = 1056
PAGE_MARGIN_TOP = 96
PAGE_MARGIN_BOTTOM = 72
PAGE_MARGIN_HORIZONTAL = 96
PAGE_GAP = 32
HEADER_HEIGHT = 72
FOOTER_HEIGHT = 60
LINE_HEIGHT_BUFFER = 24

# Visible content area between the header and footer overlays.
CONTENT_AREA_HEIGHT = PAGE_HEIGHT - HEADER_HEIGHT - FOOTER_HEIGHT
# Footer of one page, the gap, and the header of the next.
SPACER_HEIGHT = FOOTER_HEIGHT + PAGE_GAP + HEADER_HEIGHT


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """Fixed page measurements used by the break engine."""

    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT
    page_gap: float = PAGE_GAP
    header_height: float = HEADER_HEIGHT
    footer_height: float = FOOTER_HEIGHT
    line_height_buffer: float = LINE_HEIGHT_BUFFER
    break_epsilon: float = 1.0

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PageGeometry":
        settings = settings or get_settings()
        return cls(
            page_width=settings.page_width,
            page_height=settings.page_height,
            page_gap=settings.page_gap,
            header_height=settings.header_height,
            footer_height=settings.footer_height,
            line_height_buffer=settings.line_height_buffer,
            break_epsilon=settings.break_epsilon,
        )

    @property
    def content_area_height(self) -> float:
        return self.page_height - self.header_height - self.footer_height

    @property
    def effective_page_height(self) -> float:
        """Usable height per page; the last line never reaches the footer."""

        return self.content_area_height - self.line_height_buffer

    @property
    def nominal_spacer_height(self) -> float:
        return self.footer_height + self.page_gap + self.header_height

    @property
    def visual_spacer_height(self) -> float:
        """Offset a spacer adds to everything rendered after it."""

        return self.nominal_spacer_height + self.line_height_buffer


def calculate_page_count(content_height: float, page_content_height: float) -> int:
    """Return the number of pages needed for ``content_height`` (at least one)."""

    if content_height <= 0:
        return 1
    return math.ceil(content_height / page_content_height)


def get_page_at_position(y_position: float, page_height: float, page_gap: float) -> int:
    """Return the 0-based page index for a rendered Y coordinate.

    Coordinates inside the gap after a page belong to that page.
    """

    if y_position < 0:
        return 0
    return int(y_position // (page_height + page_gap))


def get_page_start_y(page_index: int, page_height: float, page_gap: float) -> float:
    if page_index < 0:
        return 0
    return page_index * (page_height + page_gap)


def get_content_position_in_page(
    global_y: float,
    page_index: int,
    page_height: float,
    page_gap: float,
    header_height: float,
) -> float:
    """Return ``global_y`` relative to the content area of ``page_index``.

    Negative results fall inside the header area.
    """

    page_start_y = get_page_start_y(page_index, page_height, page_gap)
    return global_y - page_start_y - header_height


__all__ = [
    "CONTENT_AREA_HEIGHT",
    "FOOTER_HEIGHT",
    "HEADER_HEIGHT",
    "LINE_HEIGHT_BUFFER",
    "PAGE_GAP",
    "PAGE_HEIGHT",
    "PAGE_MARGIN_BOTTOM",
    "PAGE_MARGIN_HORIZONTAL",
    "PAGE_MARGIN_TOP",
    "PAGE_WIDTH",
    "PageGeometry",
    "SPACER_HEIGHT",
    "calculate_page_count",
    "get_content_position_in_page",
    "get_page_at_position",
    "get_page_start_y",
]
