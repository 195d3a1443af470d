import pytest

from pageflow.engine.builder import build_break_set
from pageflow.engine.coordinates import ContentOnlyTranslator
from pageflow.engine.decorations import materialize_decorations
from pageflow.engine.geometry import PageGeometry
from pageflow.engine.ledger import SpacerLedger
from pageflow.utils.errors import UnmeasurablePositionError
from pageflow.utils.trace import PaginationTracer

SPACER = 188.0


def test_subtracts_installed_spacers(make_layout) -> None:
    layout = make_layout(30)
    layout.install(materialize_decorations([90, 180], SPACER))
    translator = ContentOnlyTranslator(
        layout, SpacerLedger(spacer_height=SPACER, positions=(90, 180))
    )

    assert layout.coords_at_position(180).top == 1800.0 + 2 * SPACER
    assert translator.top(89) == 800.0
    assert translator.top(90) == 900.0
    assert translator.top(180) == 1800.0
    assert translator.bottom(300) == 3000.0


def test_content_only_tops_are_monotonic(make_layout) -> None:
    layout = make_layout(30)
    layout.install(materialize_decorations([90, 180, 270], SPACER))
    translator = ContentOnlyTranslator(
        layout, SpacerLedger(spacer_height=SPACER, positions=(90, 180, 270))
    )

    tops = [translator.top(position) for position in range(layout.doc_size + 1)]

    assert all(earlier <= later for earlier, later in zip(tops, tops[1:]))


def test_falls_back_to_adjacent_position(make_layout) -> None:
    layout = make_layout(10, unmeasurable={45, 44})
    tracer = PaginationTracer(out_dir="unused")
    translator = ContentOnlyTranslator(layout, SpacerLedger.empty(SPACER), tracer=tracer)

    assert translator.top(45) == 400.0
    assert [event.type for event in tracer.events] == ["coordinate_fallback"]
    assert tracer.events[0].data == {"position": 45, "substitute": 46}


def test_raises_when_neighbourhood_is_unmeasurable(make_layout) -> None:
    layout = make_layout(10, unmeasurable=range(30, 61))
    translator = ContentOnlyTranslator(
        layout, SpacerLedger.empty(SPACER), fallback_radius=8
    )

    with pytest.raises(UnmeasurablePositionError) as excinfo:
        translator.top(45)

    assert excinfo.value.position == 45
    assert excinfo.value.code == "position_unmeasurable"


def test_zero_radius_disables_fallback(make_layout) -> None:
    layout = make_layout(10, unmeasurable={45})
    translator = ContentOnlyTranslator(
        layout, SpacerLedger.empty(SPACER), fallback_radius=0
    )

    with pytest.raises(UnmeasurablePositionError):
        translator.top(45)


def test_fallback_uses_substitute_spacer_frame(make_layout) -> None:
    layout = make_layout(19, unmeasurable={95})
    layout.install(materialize_decorations([95], SPACER))
    ledger = SpacerLedger(spacer_height=SPACER, positions=(95,))
    translator = ContentOnlyTranslator(layout, ledger)

    assert [translator.top(position) for position in (94, 95, 96)] == [
        900.0,
        900.0,
        900.0,
    ]


def test_fallback_across_ledger_entry_keeps_breaks_on_line_starts(make_layout) -> None:
    layout = make_layout(19, unmeasurable={95})
    layout.install(materialize_decorations([95], SPACER))
    ledger = SpacerLedger(spacer_height=SPACER, positions=(95,))

    spaced = build_break_set(layout, ledger, PageGeometry())
    unspaced = build_break_set(
        make_layout(19), SpacerLedger.empty(SPACER), PageGeometry()
    )

    assert spaced.positions == unspaced.positions == (90, 180)
    assert spaced.soft_failure is None
