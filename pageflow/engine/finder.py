"""Binary search for the first position reaching a page threshold."""

from __future__ import annotations

from typing import Callable


def find_break(
    measure_top: Callable[[int], float], target: float, lo: int, hi: int
) -> int:
    """Return the smallest position in ``[lo, hi)`` whose top is at least ``target``.

    ``measure_top`` must be non-decreasing over the range. When no position
    qualifies ``hi`` is returned; callers decide whether a bound is acceptable.
    """

    low, high = lo, hi
    while low < high:
        mid = (low + high) // 2
        if measure_top(mid) >= target:
            high = mid
        else:
            low = mid + 1
    return low


__all__ = ["find_break"]
