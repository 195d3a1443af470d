"""Test configuration for the pageflow service."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from pageflow.config import reset_settings_cache  # noqa: E402
from pageflow.observability import metrics_registry  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Provide isolated configuration for each test."""

    monkeypatch.delenv("PAGINATION_TRACE", raising=False)
    monkeypatch.setenv("PAGINATION_TRACE_DIR", str(tmp_path / "passes"))
    reset_settings_cache()
    metrics_registry.reset()
    yield
    reset_settings_cache()
    metrics_registry.reset()


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """Return a test client for the FastAPI application."""

    from pageflow.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def uniform_payload():
    """Return a builder of JSON line boxes for equally tall lines."""

    def _build(count: int, line_height: float = 100.0, step: int = 10) -> list[dict]:
        return [
            {"start": index * step, "top": index * line_height, "height": line_height}
            for index in range(count)
        ]

    return _build
