"""Turn break positions into keyed spacer decorations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Protocol, Sequence, Tuple

WidgetSpec = Dict[str, Any]


def render_spacer_widget(height: float) -> WidgetSpec:
    """Describe the spacer element the host renders before a break."""

    return {
        "tag": "div",
        "class": "page-break-spacer",
        "style": {
            "height": f"{height:g}px",
            "width": "100%",
            "position": "relative",
            "pointer-events": "none",
            "user-select": "none",
        },
        "children": [
            {
                "tag": "div",
                "class": "page-break-indicator",
                "text": "Page Break",
            }
        ],
    }


@dataclass(frozen=True, slots=True)
class SpacerDecoration:
    """A widget rendered immediately before ``position``."""

    position: int
    key: str
    height: float
    side: int = -1
    ignore_selection: bool = True
    renderer: Callable[[float], WidgetSpec] = field(
        default=render_spacer_widget, compare=False, repr=False
    )

    def render(self) -> WidgetSpec:
        return self.renderer(self.height)

    def as_tuple(self) -> Tuple[int, Callable[[float], WidgetSpec], str, int, bool]:
        return (self.position, self.renderer, self.key, self.side, self.ignore_selection)


class DecorationSink(Protocol):
    """Host hook that installs decorations and returns an opaque handle."""

    def install(self, decorations: Sequence[SpacerDecoration]) -> Any: ...


def spacer_key(index: int) -> str:
    return f"spacer-{index}"


def materialize_decorations(
    positions: Sequence[int],
    spacer_height: float,
    previous: Sequence[SpacerDecoration] = (),
) -> Tuple[SpacerDecoration, ...]:
    """Map break ``i`` (1-based) to a ``spacer-{i}`` decoration.

    Entries of ``previous`` that already describe the same break are reused.
    """

    decorations = []
    for index, position in enumerate(positions, start=1):
        key = spacer_key(index)
        reusable = previous[index - 1] if index <= len(previous) else None
        if (
            reusable is not None
            and reusable.position == position
            and reusable.key == key
            and reusable.height == spacer_height
        ):
            decorations.append(reusable)
            continue
        decorations.append(
            SpacerDecoration(position=position, key=key, height=spacer_height)
        )
    return tuple(decorations)


__all__ = [
    "DecorationSink",
    "SpacerDecoration",
    "WidgetSpec",
    "materialize_decorations",
    "render_spacer_widget",
    "spacer_key",
]
