"""Sorted record of the positions where spacers are installed."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Tuple


@dataclass(frozen=True, slots=True)
class SpacerLedger:
    """Strictly increasing spacer positions plus the height of one spacer."""

    spacer_height: float
    positions: Tuple[int, ...] = field(default=())

    def __post_init__(self) -> None:
        positions = tuple(self.positions)
        for earlier, later in zip(positions, positions[1:]):
            if later <= earlier:
                raise ValueError(
                    f"ledger positions must be strictly increasing: {positions!r}"
                )
        object.__setattr__(self, "positions", positions)

    @classmethod
    def empty(cls, spacer_height: float) -> "SpacerLedger":
        return cls(spacer_height=spacer_height)

    @classmethod
    def from_positions(
        cls, positions: Iterable[int], spacer_height: float
    ) -> "SpacerLedger":
        """Build a ledger from arbitrary positions, sorting and deduplicating."""

        return cls(
            spacer_height=spacer_height,
            positions=tuple(sorted({int(position) for position in positions})),
        )

    def count_at_or_before(self, position: int) -> int:
        return bisect_right(self.positions, position)

    def offset_at(self, position: int) -> float:
        """Rendered offset contributed by spacers at or before ``position``."""

        return self.count_at_or_before(position) * self.spacer_height

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self) -> Iterator[int]:
        return iter(self.positions)


__all__ = ["SpacerLedger"]
