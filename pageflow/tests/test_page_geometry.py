import pytest

from pageflow.config import Settings
from pageflow.engine.geometry import (
    CONTENT_AREA_HEIGHT,
    SPACER_HEIGHT,
    PageGeometry,
    calculate_page_count,
    get_content_position_in_page,
    get_page_at_position,
    get_page_start_y,
)


def test_derived_heights() -> None:
    geometry = PageGeometry()

    assert CONTENT_AREA_HEIGHT == geometry.content_area_height == 924
    assert SPACER_HEIGHT == geometry.nominal_spacer_height == 164
    assert geometry.effective_page_height == 900
    assert geometry.visual_spacer_height == 188


def test_geometry_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("PAGE_HEIGHT", "1200")
    monkeypatch.setenv("LINE_HEIGHT_BUFFER", "20")

    geometry = PageGeometry.from_settings(Settings())

    assert geometry.effective_page_height == 1200 - 72 - 60 - 20
    assert geometry.visual_spacer_height == 164 + 20


@pytest.mark.parametrize(
    ("height", "expected"), [(0, 1), (-5, 1), (500, 1), (828, 1), (1200, 2)]
)
def test_calculate_page_count(height, expected) -> None:
    assert calculate_page_count(height, 828) == expected


def test_page_at_position_assigns_gap_to_previous_page() -> None:
    assert get_page_at_position(500, 1056, 32) == 0
    assert get_page_at_position(1070, 1056, 32) == 0
    assert get_page_at_position(1200, 1056, 32) == 1
    assert get_page_at_position(-10, 1056, 32) == 0


def test_page_start_and_content_offsets() -> None:
    assert get_page_start_y(0, 1056, 32) == 0
    assert get_page_start_y(1, 1056, 32) == 1088
    assert get_page_start_y(-1, 1056, 32) == 0
    assert get_content_position_in_page(200, 0, 1056, 32, 72) == 128
    assert get_content_position_in_page(50, 0, 1056, 32, 72) == -22
