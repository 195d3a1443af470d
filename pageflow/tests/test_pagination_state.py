from pageflow.services.pagination_state import (
    PageBreakInfo,
    PaginationState,
    page_infos_from_breaks,
)


def _state_with_pages() -> PaginationState:
    state = PaginationState()
    state.set_page_count(3)
    state.set_page_breaks(page_infos_from_breaks([90, 180], [900.0, 1800.0], 2500.0))
    return state


def test_defaults() -> None:
    state = PaginationState()

    assert state.page_count == 1
    assert state.current_page == 1
    assert state.page_breaks == ()
    assert state.get_page_at_y(500.0) == 1


def test_page_count_never_drops_below_one_and_clamps_current() -> None:
    state = PaginationState()
    state.set_page_count(5)
    state.set_current_page(5)

    state.set_page_count(2)
    assert state.current_page == 2

    state.set_page_count(0)
    assert state.page_count == 1
    assert state.current_page == 1


def test_current_page_is_clamped_and_ignores_nan() -> None:
    state = _state_with_pages()

    state.go_to_page(10)
    assert state.current_page == 3
    state.set_current_page(-4)
    assert state.current_page == 1
    state.set_current_page(float("nan"))
    assert state.current_page == 1


def test_navigation_stops_at_edges() -> None:
    state = _state_with_pages()

    state.prev_page()
    assert state.current_page == 1
    state.next_page()
    state.next_page()
    state.next_page()
    assert state.current_page == 3


def test_page_lookup_by_content_y() -> None:
    state = _state_with_pages()

    assert state.get_page_at_y(-1.0) == 1
    assert state.get_page_at_y(899.0) == 1
    assert state.get_page_at_y(900.0) == 2
    assert state.get_page_at_y(2499.0) == 3
    assert state.get_page_at_y(9000.0) == 3
    assert state.get_page_break_info(2) == PageBreakInfo(
        page_index=2, content_start_y=900.0, content_end_y=1800.0, position=90
    )
    assert state.get_page_break_info(7) is None


def test_breaks_are_sorted_by_page_index_and_reset_clears() -> None:
    state = PaginationState()
    infos = page_infos_from_breaks([90], [900.0], 1000.0)
    state.set_page_breaks(reversed(infos))
    assert [info.page_index for info in state.page_breaks] == [1, 2]

    state.set_scroll_position(120.0)
    state.reset()
    assert state.page_breaks == ()
    assert state.scroll_position == 0.0
