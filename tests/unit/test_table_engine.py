from erp_console.app.ui.filters import FilterPredicate
from erp_console.app.ui.listing_view import ColumnDef
from erp_console.app.ui.table_state import SortKey, TableConfig, TableEngine, stable_sort

COLUMNS = [ColumnDef("name", "Name"), ColumnDef("age", "Age")]


def _people() -> list[dict]:
    return [{"id": 1, "name": "Bob", "age": 30}, {"id": 2, "name": "Al", "age": 25}]


def _names(rows: list[dict]) -> list[str]:
    return [row["name"] for row in rows]


def _engine(records: list[dict] | None = None, **kwargs) -> TableEngine:
    return TableEngine(records if records is not None else _people(), COLUMNS, row_key="id", **kwargs)


def test_sort_toggles_direction_on_same_field() -> None:
    engine = _engine()

    engine.set_sort("age")
    assert _names(engine.get_visible_rows()) == ["Al", "Bob"]

    engine.set_sort("age")
    assert engine.sort == SortKey("age", "desc")
    assert _names(engine.get_visible_rows()) == ["Bob", "Al"]

    engine.set_sort("age")
    assert engine.sort == SortKey("age", "asc")


def test_sort_on_new_field_starts_ascending() -> None:
    engine = _engine()

    engine.set_sort("age")
    engine.set_sort("age")
    engine.set_sort("name")

    assert engine.sort == SortKey("name", "asc")
    assert _names(engine.get_visible_rows()) == ["Al", "Bob"]


def test_stable_sort_keeps_input_order_for_ties_and_is_idempotent() -> None:
    rows = [
        {"id": 1, "team": "b"},
        {"id": 2, "team": "a"},
        {"id": 3, "team": "b"},
        {"id": 4, "team": "a"},
    ]

    once = stable_sort(rows, SortKey("team"))
    twice = stable_sort(once, SortKey("team"))

    assert [row["id"] for row in once] == [2, 4, 1, 3]
    assert twice == once
    assert [row["id"] for row in stable_sort(rows, SortKey("team", "desc"))] == [1, 3, 2, 4]


def test_sort_orders_mixed_types_by_group() -> None:
    rows = [
        {"id": 1, "v": "x"},
        {"id": 2, "v": 3},
        {"id": 3, "v": None},
        {"id": 4, "v": 1.5},
        {"id": 5, "v": "a"},
        {"id": 6, "v": float("nan")},
    ]

    assert [row["id"] for row in stable_sort(rows, SortKey("v"))] == [4, 2, 5, 1, 3, 6]
    assert [row["id"] for row in stable_sort(rows, SortKey("v", "desc"))] == [1, 5, 2, 4, 3, 6]


def test_missing_values_sort_last_in_both_directions() -> None:
    records = [
        {"id": 1, "name": "a", "amount": 300.0},
        {"id": 2, "name": "b", "amount": None},
        {"id": 3, "name": "c", "amount": 100.0},
        {"id": 4, "name": "d", "amount": 200.0},
        {"id": 5, "name": "e"},
    ]
    engine = _engine(records)

    engine.set_sort("amount")
    assert [row.get("amount") for row in engine.get_visible_rows()] == [100.0, 200.0, 300.0, None, None]
    assert [row["id"] for row in engine.get_visible_rows()][-2:] == [2, 5]

    engine.set_sort("amount")
    assert [row.get("amount") for row in engine.get_visible_rows()] == [300.0, 200.0, 100.0, None, None]
    assert [row["id"] for row in engine.get_visible_rows()][-2:] == [2, 5]


def test_search_and_filter_narrow_rows() -> None:
    engine = _engine()

    engine.set_search_term("bo")
    assert _names(engine.get_visible_rows()) == ["Bob"]

    engine.set_search_term("")
    engine.add_filter(FilterPredicate("age", "greaterThan", 26))
    assert _names(engine.get_visible_rows()) == ["Bob"]


def test_page_size_one_pages_through_sorted_rows() -> None:
    engine = _engine(config=TableConfig(page_size=1))
    engine.set_sort("age")

    assert _names(engine.get_visible_rows()) == ["Al"]

    engine.set_page(1)
    assert _names(engine.get_visible_rows()) == ["Bob"]
    assert engine.view().total_pages == 2


def test_pages_cover_every_filtered_row_once() -> None:
    records = [{"id": index, "name": f"n{index}", "age": index} for index in range(23)]
    engine = _engine(records, config=TableConfig(page_size=5))
    engine.add_filter(FilterPredicate("age", "greaterThanOrEqual", 3))
    view = engine.view()

    seen: list[dict] = []
    for page in range(view.total_pages):
        engine.set_page(page)
        visible = engine.get_visible_rows()
        assert len(visible) <= engine.page_size
        seen.extend(visible)

    assert view.total_filtered_count == 20
    assert view.total_pages == 4
    assert [row["id"] for row in seen] == list(range(3, 23))


def test_search_and_filter_reset_page_but_sort_does_not() -> None:
    records = [{"id": index, "name": f"n{index}", "age": index} for index in range(30)]
    engine = _engine(records)

    engine.set_page(2)
    engine.set_sort("age")
    assert engine.page == 2

    engine.set_search_term("n")
    assert engine.page == 0

    engine.set_page(1)
    engine.add_filter(FilterPredicate("age", "lessThan", 25))
    assert engine.page == 0

    engine.set_page(1)
    engine.remove_filter(0)
    assert engine.page == 0


def test_page_past_the_end_shows_empty_slice() -> None:
    engine = _engine()

    engine.set_page(5)

    assert engine.get_visible_rows() == []
    assert engine.view().total_filtered_count == 2


def test_page_and_page_size_are_clamped() -> None:
    engine = _engine()

    engine.set_page(-3)
    assert engine.page == 0

    engine.set_page(1)
    engine.set_page_size(0)
    assert engine.page_size == 1
    assert engine.page == 0


def test_next_and_prev_page_stay_in_bounds() -> None:
    engine = _engine(config=TableConfig(page_size=1))

    engine.next_page()
    assert engine.page == 1
    engine.next_page()
    assert engine.page == 1

    engine.prev_page()
    engine.prev_page()
    assert engine.page == 0


def test_remove_filter_out_of_range_is_ignored() -> None:
    calls: list[list[FilterPredicate]] = []
    engine = _engine(on_filter=calls.append)

    engine.remove_filter(3)

    assert calls == []
    assert engine.filters == []


def test_filter_callbacks_receive_the_current_list() -> None:
    calls: list[list[FilterPredicate]] = []
    engine = _engine(on_filter=calls.append)
    predicate = FilterPredicate("age", "greaterThan", 26)

    engine.add_filter(predicate)
    engine.clear_all()

    assert calls == [[predicate], []]
    assert engine.search_term == ""


def test_sort_callback_fires_after_state_is_applied() -> None:
    seen: list[tuple[SortKey, SortKey | None]] = []
    engine: TableEngine

    def on_sort(key: SortKey) -> None:
        seen.append((key, engine.sort))

    engine = _engine(on_sort=on_sort)
    engine.set_sort("name")

    assert seen == [(SortKey("name", "asc"), SortKey("name", "asc"))]


def test_disabled_features_are_ignored() -> None:
    engine = _engine(config=TableConfig(searchable=False, filterable=False, paginate=False, page_size=1))

    engine.set_search_term("zzz")
    engine.add_filter(FilterPredicate("age", "greaterThan", 100))
    view = engine.view()

    assert len(view.rows) == 2
    assert view.total_pages == 1


def test_render_rows_uses_column_formatters() -> None:
    columns = [ColumnDef("name", "Name"), ColumnDef("age", "Age", format=lambda value: f"{value} yrs")]
    engine = TableEngine([{"id": 1, "name": " ", "age": 3}], columns, row_key="id")

    assert engine.render_rows() == [{"name": "—", "age": "3 yrs"}]


def test_records_are_not_mutated() -> None:
    records = _people()
    snapshot = [dict(row) for row in records]
    engine = _engine(records)

    engine.set_sort("age")
    engine.add_filter(FilterPredicate("age", "lessThan", 100))
    engine.get_visible_rows()

    assert records == snapshot
    assert engine.filtered_rows()[0] is records[1]


def test_formatter_errors_propagate_to_the_caller() -> None:
    def broken(value):
        raise RuntimeError("bad formatter")

    engine = TableEngine([{"id": 1, "name": "Al"}], [ColumnDef("name", "Name", format=broken)], row_key="id")

    try:
        engine.render_rows()
        raised = False
    except RuntimeError:
        raised = True

    assert raised
    assert _names(engine.get_visible_rows()) == ["Al"]
