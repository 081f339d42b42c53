from erp_console.app.ui.pagination import PaginationState, goto_page, next_page, prev_page, resize


def test_pagination_next_prev_goto_bounds() -> None:
    state = PaginationState(page=1, page_size=20)

    next_page(state, has_next=True)
    assert state.page == 2

    prev_page(state)
    assert state.page == 1

    goto_page(state, -4)
    assert state.page == 0

    prev_page(state)
    assert state.page == 0

    next_page(state, has_next=False)
    assert state.page == 0


def test_pagination_total_pages_slice_and_clamp() -> None:
    state = PaginationState(page=3, page_size=4)

    assert state.total_pages(0) == 0
    assert state.total_pages(9) == 3
    assert state.slice(list(range(9))) == []

    state.clamp(9)
    assert state.page == 2
    assert state.slice(list(range(9))) == [8]


def test_resize_resets_page_and_keeps_size_positive() -> None:
    state = PaginationState(page=2, page_size=10)

    resize(state, 0)

    assert state.page == 0
    assert state.page_size == 1
