"""Page-break computation engine."""

from .builder import BreakSet, breaks_equal, build_break_set, compute_break_positions
from .coordinates import ContentOnlyTranslator, CoordinateProvider, Coords
from .decorations import SpacerDecoration, materialize_decorations
from .finder import find_break
from .geometry import PageGeometry
from .layout import LineBox, LineBoxLayout
from .ledger import SpacerLedger
from .scheduler import (
    AsyncioFrameScheduler,
    PaginationController,
    PassOutcome,
    QueuedFrameScheduler,
)

__all__ = [
    "AsyncioFrameScheduler",
    "BreakSet",
    "ContentOnlyTranslator",
    "CoordinateProvider",
    "Coords",
    "LineBox",
    "LineBoxLayout",
    "PageGeometry",
    "PaginationController",
    "PassOutcome",
    "QueuedFrameScheduler",
    "SpacerDecoration",
    "SpacerLedger",
    "breaks_equal",
    "build_break_set",
    "compute_break_positions",
    "find_break",
    "materialize_decorations",
]
