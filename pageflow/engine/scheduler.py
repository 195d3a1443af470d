"""Frame-coalesced recomputation and commit of page breaks."""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Callable, Dict, Protocol, Tuple

from ..config import Settings, get_settings
from ..observability import MetricsRegistry, metrics_registry
from ..services.pagination_state import PaginationState, page_infos_from_breaks
from ..utils.trace import PaginationTracer
from .builder import BreakSet, build_break_set
from .coordinates import CoordinateProvider
from .decorations import DecorationSink, SpacerDecoration, materialize_decorations
from .geometry import PageGeometry
from .ledger import SpacerLedger

LOGGER = logging.getLogger(__name__)

FrameCallback = Callable[[], None]
Unsubscribe = Callable[[], None]


class FrameScheduler(Protocol):
    """Host mechanism that runs a callback on the next rendering frame."""

    def request_frame(self, callback: FrameCallback) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


class LayoutHost(Protocol):
    """Container size and notification hooks exposed by the host view."""

    def container_size(self) -> Tuple[float, float]: ...

    def on_change(self, callback: Callable[[], None]) -> Unsubscribe: ...

    def on_resize(self, callback: Callable[[], None]) -> Unsubscribe: ...


class QueuedFrameScheduler:
    """Frame scheduler whose frames run only when ``flush`` is called."""

    def __init__(self) -> None:
        self._next_handle = 0
        self._pending: Dict[int, FrameCallback] = {}

    def request_frame(self, callback: FrameCallback) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def flush(self) -> int:
        """Run the frames queued so far; return how many ran."""

        ready = sorted(self._pending.items())
        self._pending.clear()
        for _, callback in ready:
            callback()
        return len(ready)


class AsyncioFrameScheduler:
    """Frame scheduler backed by ``loop.call_later`` at a fixed frame interval."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        frame_interval_s: float = 1.0 / 60.0,
    ) -> None:
        self._loop = loop
        self.frame_interval_s = frame_interval_s

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> "AsyncioFrameScheduler":
        settings = settings or get_settings()
        return cls(loop=loop, frame_interval_s=settings.frame_interval_s)

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(self.frame_interval_s, callback)

    def cancel_frame(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()


class ControllerState(str, enum.Enum):
    IDLE = "idle"
    COMPUTING = "computing"


class PassOutcome(str, enum.Enum):
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class CommittedBreaks:
    """Everything a commit replaces, swapped as one value."""

    ledger: SpacerLedger
    decorations: Tuple[SpacerDecoration, ...] = ()
    handle: Any = None


class PaginationController:
    """Owns the committed spacer ledger for one paginated view.

    Triggers from the host are coalesced into at most one pending frame. Each
    frame measures against the ledger committed by the previous pass and
    commits only when the break set differs from it.
    """

    def __init__(
        self,
        provider: CoordinateProvider,
        host: LayoutHost,
        sink: DecorationSink,
        frames: FrameScheduler,
        *,
        geometry: PageGeometry | None = None,
        fallback_radius: int = 8,
        state: PaginationState | None = None,
        registry: MetricsRegistry | None = None,
        tracer: PaginationTracer | None = None,
    ) -> None:
        self._provider = provider
        self._host = host
        self._sink = sink
        self._frames = frames
        self.geometry = geometry or PageGeometry.from_settings()
        self._fallback_radius = fallback_radius
        self.pagination_state = state
        self._registry = registry or metrics_registry
        self._tracer = tracer
        self._committed = CommittedBreaks(
            ledger=SpacerLedger.empty(self.geometry.visual_spacer_height)
        )
        self._pending_frame: Any = None
        self._unsubscribers: list[Unsubscribe] = []
        self._installed = False
        self.state = ControllerState.IDLE
        self.last_outcome: PassOutcome | None = None
        self.last_break_set: BreakSet | None = None

    @property
    def ledger(self) -> SpacerLedger:
        return self._committed.ledger

    @property
    def decorations(self) -> Tuple[SpacerDecoration, ...]:
        return self._committed.decorations

    @property
    def decoration_handle(self) -> Any:
        return self._committed.handle

    @property
    def has_pending_frame(self) -> bool:
        return self._pending_frame is not None

    @property
    def installed(self) -> bool:
        return self._installed

    def install(self) -> None:
        if self._installed:
            return
        self._installed = True
        self._unsubscribers = [
            self._host.on_change(self.request_recompute),
            self._host.on_resize(self.request_recompute),
        ]
        self.request_recompute()

    def teardown(self) -> None:
        if self._pending_frame is not None:
            self._frames.cancel_frame(self._pending_frame)
            self._pending_frame = None
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._installed = False
        if self._tracer is not None and self._tracer.events:
            self._tracer.flush_jsonl()

    def request_recompute(self) -> None:
        """Cancel any pending frame and schedule a fresh one."""

        if not self._installed:
            return
        if self._pending_frame is not None:
            self._frames.cancel_frame(self._pending_frame)
        self._pending_frame = self._frames.request_frame(self._on_frame)

    def _on_frame(self) -> None:
        self._pending_frame = None
        if not self._installed:
            return
        self.run_pass()

    def run_pass(self) -> PassOutcome:
        """Compute breaks against the committed ledger and commit on change."""

        width, height = self._host.container_size()
        if width <= 0 or height <= 0:
            LOGGER.debug("Container has no layout size; skipping pagination pass")
            self._finish(PassOutcome.SKIPPED, 0.0, None)
            return PassOutcome.SKIPPED

        started = perf_counter()
        self.state = ControllerState.COMPUTING
        if self.pagination_state is not None:
            self.pagination_state.set_calculating(True)
        try:
            committed = self._committed
            break_set = build_break_set(
                self._provider,
                committed.ledger,
                self.geometry,
                fallback_radius=self._fallback_radius,
                tracer=self._tracer,
            )
            self.last_break_set = break_set
            if break_set.same_breaks(committed.ledger.positions):
                outcome = PassOutcome.UNCHANGED
            else:
                self._commit(break_set, committed)
                outcome = PassOutcome.CHANGED
        finally:
            self.state = ControllerState.IDLE
            if self.pagination_state is not None:
                self.pagination_state.set_calculating(False)

        self._finish(outcome, perf_counter() - started, break_set)
        return outcome

    def _commit(self, break_set: BreakSet, committed: CommittedBreaks) -> None:
        spacer_height = self.geometry.visual_spacer_height
        ledger = SpacerLedger(spacer_height=spacer_height, positions=break_set.positions)
        decorations = materialize_decorations(
            break_set.positions, spacer_height, previous=committed.decorations
        )
        handle = self._sink.install(decorations)
        self._committed = CommittedBreaks(
            ledger=ledger, decorations=decorations, handle=handle
        )
        if self.pagination_state is not None:
            self.pagination_state.set_page_breaks(
                page_infos_from_breaks(
                    break_set.positions, break_set.content_tops, break_set.total_height
                )
            )
            self.pagination_state.set_page_count(len(break_set.positions) + 1)
        LOGGER.debug(
            "Committed %d page breaks: %s", len(break_set.positions), break_set.positions
        )

    def _finish(
        self, outcome: PassOutcome, duration: float, break_set: BreakSet | None
    ) -> None:
        self.last_outcome = outcome
        self._registry.pass_finished(
            outcome.value,
            duration,
            break_count=len(break_set.positions) if break_set else 0,
            soft_failure=break_set.soft_failure if break_set else None,
        )
        if self._tracer is not None:
            self._tracer.ev("end_pass", outcome=outcome.value)


__all__ = [
    "AsyncioFrameScheduler",
    "CommittedBreaks",
    "ControllerState",
    "FrameScheduler",
    "LayoutHost",
    "PaginationController",
    "PassOutcome",
    "QueuedFrameScheduler",
]
