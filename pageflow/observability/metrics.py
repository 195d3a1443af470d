"""Request and pagination pass metrics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from threading import Lock
from time import perf_counter
from typing import Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


@dataclass
class RouteStats:
    """Mutable statistics for a single route."""

    count: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float | None = None


@dataclass
class PassStats:
    """Mutable statistics for break computation passes."""

    total: int = 0
    total_duration_ms: float = 0.0
    max_breaks: int = 0


class MetricsRegistry:
    """In-memory collector for request and pagination metrics."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.reset()

    def reset(self) -> None:
        """Reset all counters (useful for tests)."""

        with self._lock:
            self._in_flight = 0
            self._requests_total = 0
            self._status_families: Counter[str] = Counter()
            self._routes: Dict[str, RouteStats] = {}
            self._passes = PassStats()
            self._outcomes: Counter[str] = Counter()
            self._soft_failures: Counter[str] = Counter()

    def request_started(self) -> None:
        with self._lock:
            self._in_flight += 1

    def request_finished(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_seconds: float,
    ) -> None:
        """Record request completion statistics."""

        duration_ms = max(duration_seconds * 1000.0, 0.0)
        route_key = f"{method.upper()} {path}"

        with self._lock:
            self._in_flight = max(0, self._in_flight - 1)
            self._requests_total += 1
            self._status_families[f"{status_code // 100}xx"] += 1

            stats = self._routes.setdefault(route_key, RouteStats())
            stats.count += 1
            stats.total_duration_ms += duration_ms
            stats.max_duration_ms = (
                duration_ms
                if stats.max_duration_ms is None
                else max(stats.max_duration_ms, duration_ms)
            )

    def pass_finished(
        self,
        outcome: str,
        duration_seconds: float,
        break_count: int = 0,
        soft_failure: str | None = None,
    ) -> None:
        """Record one scheduled pagination pass."""

        with self._lock:
            self._passes.total += 1
            self._passes.total_duration_ms += max(duration_seconds * 1000.0, 0.0)
            self._passes.max_breaks = max(self._passes.max_breaks, break_count)
            self._outcomes[outcome] += 1
            if soft_failure:
                self._soft_failures[soft_failure] += 1

    def snapshot(self) -> Dict[str, object]:
        """Return an immutable view of the current metrics."""

        with self._lock:
            routes: Dict[str, Dict[str, float | int | None]] = {}
            for key, stats in self._routes.items():
                count = stats.count or 1
                routes[key] = {
                    "count": stats.count,
                    "avg_duration_ms": stats.total_duration_ms / count,
                    "max_duration_ms": stats.max_duration_ms,
                }

            passes_total = self._passes.total
            return {
                "requests_total": self._requests_total,
                "in_flight": self._in_flight,
                "status_codes": dict(self._status_families),
                "routes": routes,
                "pagination": {
                    "passes_total": passes_total,
                    "changed": self._outcomes.get("changed", 0),
                    "unchanged": self._outcomes.get("unchanged", 0),
                    "skipped": self._outcomes.get("skipped", 0),
                    "soft_failures": dict(self._soft_failures),
                    "avg_duration_ms": (
                        self._passes.total_duration_ms / passes_total
                        if passes_total
                        else 0.0
                    ),
                    "max_breaks": self._passes.max_breaks,
                },
            }


class RequestMetricsMiddleware(BaseHTTPMiddleware):
    """ASGI middleware that records request metrics."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        registry: MetricsRegistry | None = None,
    ) -> None:
        super().__init__(app)
        self._registry = registry or metrics_registry

    async def dispatch(self, request: Request, call_next):
        start = perf_counter()
        self._registry.request_started()
        try:
            response = await call_next(request)
        except Exception:
            self._registry.request_finished(
                request.method, request.url.path, 500, perf_counter() - start
            )
            raise
        self._registry.request_finished(
            request.method,
            request.url.path,
            getattr(response, "status_code", 200),
            perf_counter() - start,
        )
        return response


metrics_registry = MetricsRegistry()

__all__ = [
    "MetricsRegistry",
    "PassStats",
    "RequestMetricsMiddleware",
    "metrics_registry",
]
