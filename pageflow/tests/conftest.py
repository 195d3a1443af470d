"""Shared fixtures for engine tests."""

from __future__ import annotations

from typing import Callable, Generator, Iterable

import pytest

from pageflow.config import reset_settings_cache
from pageflow.engine.layout import LineBoxLayout, uniform_lines
from pageflow.observability import MetricsRegistry, metrics_registry


@pytest.fixture(autouse=True)
def _isolate_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path
) -> Generator[None, None, None]:
    for name in (
        "PAGE_WIDTH",
        "PAGE_HEIGHT",
        "HEADER_HEIGHT",
        "FOOTER_HEIGHT",
        "PAGE_GAP",
        "LINE_HEIGHT_BUFFER",
        "BREAK_EPSILON",
        "PAGINATION_TRACE",
        "FRAME_INTERVAL_S",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PAGINATION_TRACE_DIR", str(tmp_path / "passes"))
    reset_settings_cache()
    metrics_registry.reset()
    yield
    reset_settings_cache()
    metrics_registry.reset()


@pytest.fixture()
def make_layout() -> Callable[..., LineBoxLayout]:
    """Build a layout of equally tall lines, ten positions per line by default."""

    def _make(
        count: int,
        line_height: float = 100.0,
        positions_per_line: int = 10,
        unmeasurable: Iterable[int] = (),
        container: tuple[float, float] = (816.0, 1056.0),
    ) -> LineBoxLayout:
        return LineBoxLayout(
            uniform_lines(count, line_height, positions_per_line),
            count * positions_per_line,
            container=container,
            unmeasurable=unmeasurable,
        )

    return _make


@pytest.fixture()
def registry() -> MetricsRegistry:
    return MetricsRegistry()
