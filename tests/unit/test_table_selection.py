from erp_console.app.ui.listing_view import ColumnDef
from erp_console.app.ui.table_state import SelectAllState, TableConfig, TableEngine

COLUMNS = [ColumnDef("name", "Name")]


def _records() -> list[dict]:
    return [{"id": index, "name": f"row-{index}"} for index in range(1, 6)]


def _ids(rows: list[dict]) -> list[int]:
    return [row["id"] for row in rows]


def test_selection_survives_page_changes() -> None:
    engine = TableEngine(_records(), COLUMNS, row_key="id", config=TableConfig(page_size=2))

    engine.toggle_row(engine.get_visible_rows()[0])
    engine.set_page(2)
    engine.toggle_row(engine.get_visible_rows()[0])
    engine.set_page(0)

    assert _ids(engine.selection) == [1, 5]
    assert engine.is_selected({"id": 1}) is True


def test_selection_survives_refetch_with_new_objects() -> None:
    engine = TableEngine(_records(), COLUMNS, row_key="id")
    engine.toggle_row(engine.records[1])
    engine.toggle_row(engine.records[3])

    refetched = [dict(row, name=row["name"].upper()) for row in _records()]
    engine.set_records(refetched)

    assert _ids(engine.selection) == [2, 4]
    assert engine.selection[0] is refetched[1]


def test_refetch_prunes_missing_keys() -> None:
    engine = TableEngine(_records(), COLUMNS, row_key="id")
    engine.toggle_row(engine.records[0])
    engine.toggle_row(engine.records[4])

    engine.set_records(_records()[:3])

    assert _ids(engine.selection) == [1]


def test_select_all_is_scoped_to_the_current_page() -> None:
    changes: list[list[int]] = []
    engine = TableEngine(
        _records(),
        COLUMNS,
        row_key="id",
        config=TableConfig(page_size=2),
        on_selection_change=lambda rows: changes.append(_ids(rows)),
    )

    engine.select_all(True)
    assert _ids(engine.selection) == [1, 2]
    assert engine.view().select_all == SelectAllState(checked=True, indeterminate=False)

    engine.set_page(1)
    assert engine.view().select_all == SelectAllState(checked=False, indeterminate=False)
    engine.toggle_row(engine.get_visible_rows()[0])
    assert engine.view().select_all == SelectAllState(checked=False, indeterminate=True)

    engine.select_all(False)
    assert _ids(engine.selection) == [1, 2]
    assert changes == [[1, 2], [1, 2, 3], [1, 2]]


def test_toggle_twice_deselects() -> None:
    engine = TableEngine(_records(), COLUMNS, row_key="id")
    row = engine.records[2]

    engine.toggle_row(row)
    engine.toggle_row(row)

    assert engine.selection == []


def test_selection_is_noop_when_disabled() -> None:
    changes: list[list[dict]] = []
    engine = TableEngine(
        _records(),
        COLUMNS,
        row_key="id",
        config=TableConfig(selectable=False),
        on_selection_change=changes.append,
    )

    engine.toggle_row(engine.records[0])
    engine.select_all(True)

    assert engine.selection == []
    assert changes == []


def test_callable_row_key_and_clear_selection() -> None:
    records = [{"code": "a", "region": "n"}, {"code": "a", "region": "s"}]
    engine = TableEngine(records, COLUMNS, row_key=lambda row: (row["code"], row["region"]))

    engine.toggle_row({"code": "a", "region": "s"})
    assert engine.selection == [records[1]]

    engine.clear_selection()
    assert engine.selection == []


def test_selection_order_follows_selection_not_sort() -> None:
    engine = TableEngine(_records(), COLUMNS, row_key="id")
    engine.toggle_row(engine.records[3])
    engine.toggle_row(engine.records[0])

    engine.set_sort("name")

    assert _ids(engine.view().selection) == [4, 1]
