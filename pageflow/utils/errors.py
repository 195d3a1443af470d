from __future__ import annotations

from typing import Any, Dict


class CoordinateLookupError(LookupError):
    """Raised by coordinate providers when a position cannot be measured."""

    def __init__(
        self,
        position: int,
        message: str | None = None,
        extra: Dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or f"no coordinates for position {position}")
        self.code = "coords_unavailable"
        self.position = position
        self.extra = extra or {}


class UnmeasurablePositionError(Exception):
    """Raised when neither a position nor any nearby position can be measured."""

    def __init__(self, position: int, radius: int) -> None:
        super().__init__(
            f"position {position} and its neighbours within {radius} are unmeasurable"
        )
        self.code = "position_unmeasurable"
        self.position = position
        self.radius = radius


class LayoutRequestError(Exception):
    """Raised when submitted line boxes cannot form a valid layout."""

    def __init__(self, code: str, message: str, extra: Dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.extra = extra or {}


__all__ = [
    "CoordinateLookupError",
    "LayoutRequestError",
    "UnmeasurablePositionError",
]
