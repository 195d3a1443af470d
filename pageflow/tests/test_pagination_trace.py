import json

from pageflow.engine.builder import build_break_set
from pageflow.engine.geometry import PageGeometry
from pageflow.engine.ledger import SpacerLedger
from pageflow.engine.scheduler import PaginationController, QueuedFrameScheduler
from pageflow.utils.trace import PaginationTracer


def test_builder_records_pass_events(make_layout, tmp_path) -> None:
    tracer = PaginationTracer(run_id="run-1", out_dir=str(tmp_path))
    layout = make_layout(30, unmeasurable={150})

    build_break_set(layout, SpacerLedger.empty(188.0), PageGeometry(), tracer=tracer)
    tracer.ev("end_pass", outcome="changed")

    types = [event["type"] for event in tracer.as_list()]
    assert types[0] == "start_pass"
    assert types.count("break_accepted") == 3
    assert "coordinate_fallback" in types
    summary = tracer.summary()
    assert summary["passes"] == 1
    assert summary["last_breaks"] == [90, 180, 270]
    assert summary["outcomes"] == {"changed": 1}


def test_flush_writes_jsonl_and_summary(tmp_path) -> None:
    tracer = PaginationTracer(run_id="run-2", out_dir=str(tmp_path / "passes"))
    tracer.ev("start_pass", doc_size=100, ledger=[])
    tracer.ev("break_rejected", reason="non_monotonic_break", page=2)
    tracer.ev("end_pass", outcome="unchanged")

    path = tracer.flush_jsonl()

    lines = (tmp_path / "passes" / "run-2.jsonl").read_text(encoding="utf-8").splitlines()
    assert path == tracer.path
    assert [json.loads(line)["type"] for line in lines] == [
        "start_pass",
        "break_rejected",
        "end_pass",
    ]
    summary = json.loads(open(tracer.summary_path, encoding="utf-8").read())
    assert summary["rejections"][0]["reason"] == "non_monotonic_break"


def test_tracer_keeps_only_recent_events() -> None:
    tracer = PaginationTracer(run_id="run-3", out_dir="unused", max_events=3)

    for index in range(10):
        tracer.ev("end_pass", outcome="unchanged", index=index)

    assert [event.data["index"] for event in tracer.events] == [7, 8, 9]
    assert tracer.summary()["outcomes"] == {"unchanged": 3}


def test_installed_controller_trace_stays_bounded(make_layout, registry, tmp_path) -> None:
    layout = make_layout(30)
    frames = QueuedFrameScheduler()
    tracer = PaginationTracer(run_id="run-4", out_dir=str(tmp_path), max_events=20)
    controller = PaginationController(
        layout,
        layout,
        layout,
        frames,
        geometry=PageGeometry(),
        registry=registry,
        tracer=tracer,
    )
    controller.install()

    for _ in range(25):
        controller.request_recompute()
        frames.flush()

    assert len(tracer.events) == 20
    assert tracer.events[-1].type == "end_pass"
    assert registry.snapshot()["pagination"]["passes_total"] == 25
    controller.teardown()
