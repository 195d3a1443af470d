from __future__ import annotations

import json
import os
import time
import uuid
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional

from .logging import configure_logging


LOGGER = configure_logging().getChild("pagination.trace")

MAX_TRACE_EVENTS = 10_000


@dataclass(slots=True)
class TraceEvent:
    t: float
    type: str
    data: Dict[str, Any]


class PaginationTracer:
    """Collect structured events describing break computation passes.

    Only the most recent ``max_events`` events are retained, so a tracer held by
    a long-lived controller stays bounded between flushes.
    """

    def __init__(
        self,
        run_id: Optional[str] = None,
        out_dir: str = "pageflow/logs/passes",
        max_events: int = MAX_TRACE_EVENTS,
    ) -> None:
        self.run_id = run_id or str(uuid.uuid4())
        self.out_dir = out_dir
        self.events: Deque[TraceEvent] = deque(maxlen=max_events)
        self._path = os.path.join(self.out_dir, f"{self.run_id}.jsonl")
        self._summary_path = os.path.join(self.out_dir, f"{self.run_id}.summary.json")

    def ev(self, event_type: str, **data: Any) -> None:
        self.events.append(TraceEvent(t=time.time(), type=event_type, data=data))

    def flush_jsonl(self) -> str:
        os.makedirs(self.out_dir, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as handle:
            for event in self.events:
                payload = {"t": event.t, "type": event.type, **event.data}
                handle.write(json.dumps(payload, ensure_ascii=False) + "\n")
        with open(self._summary_path, "w", encoding="utf-8") as handle:
            json.dump(self.summary(), handle, ensure_ascii=False, indent=2)
        LOGGER.info("[pagination] Pass log saved: %s", self._path)
        return self._path

    @property
    def path(self) -> str:
        return self._path

    @property
    def summary_path(self) -> str:
        return self._summary_path

    def as_list(self) -> List[Dict[str, Any]]:
        return [{"t": event.t, "type": event.type, **event.data} for event in self.events]

    def summary(self) -> Dict[str, Any]:
        """Aggregate the recorded events into a per-run summary."""

        passes = 0
        outcomes: Dict[str, int] = {}
        accepted: List[int] = []
        rejections: List[Dict[str, Any]] = []
        fallbacks = 0

        for event in self.as_list():
            event_type = event.get("type")
            if event_type == "start_pass":
                passes += 1
                accepted = []
            elif event_type == "break_accepted":
                accepted.append(int(event.get("position", 0)))
            elif event_type == "break_rejected":
                rejections.append(
                    {key: value for key, value in event.items() if key != "t"}
                )
            elif event_type == "coordinate_fallback":
                fallbacks += 1
            elif event_type == "end_pass":
                outcome = str(event.get("outcome", "unknown"))
                outcomes[outcome] = outcomes.get(outcome, 0) + 1

        return {
            "run_id": self.run_id,
            "passes": passes,
            "outcomes": outcomes,
            "last_breaks": accepted,
            "rejections": rejections,
            "coordinate_fallbacks": fallbacks,
        }


__all__ = ["PaginationTracer", "TraceEvent"]
