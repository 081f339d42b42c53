"""Client-side table state: search, filter, sort, paginate and select.

The engine keeps the raw records read-only and derives every view from them
on demand, in a fixed order: search -> filter -> sort -> paginate.
Selection is tracked by record key, so it survives page changes and refetches
that rebuild the record objects.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Literal

from erp_console.app.ui.filters import FilterPredicate, Record, apply_filters, apply_search
from erp_console.app.ui.listing_view import ColumnDef, render_row
from erp_console.app.ui.pagination import PaginationState, goto_page, next_page, prev_page, resize

logger = logging.getLogger(__name__)

SortDirection = Literal["asc", "desc"]
RowKey = Callable[[Record], Hashable]


@dataclass(frozen=True)
class SortKey:
    field: str
    direction: SortDirection = "asc"


@dataclass(frozen=True)
class TableConfig:
    page_size: int = 10
    searchable: bool = True
    filterable: bool = True
    selectable: bool = True
    paginate: bool = True


@dataclass(frozen=True)
class SelectAllState:
    checked: bool
    indeterminate: bool


@dataclass(frozen=True)
class TableView:
    rows: list[Record]
    total_filtered_count: int
    total_pages: int
    page: int
    page_size: int
    sort_field: str | None
    sort_direction: SortDirection
    selection: list[Record]
    select_all: SelectAllState


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, (float, Decimal)) and math.isnan(value))


def _sort_key(value: Any) -> tuple:
    """Total order over mixed values: numbers, then text, then dates, then anything else."""
    if isinstance(value, (int, float, Decimal)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    if isinstance(value, date):
        return (2, value.isoformat())
    return (3, type(value).__name__, str(value))


def stable_sort(rows: Sequence[Record], sort: SortKey) -> list[Record]:
    """Sort on one field. Ties keep input order in both directions; missing values go last."""
    present = [row for row in rows if not _is_missing(row.get(sort.field))]
    missing = [row for row in rows if _is_missing(row.get(sort.field))]
    ordered = sorted(present, key=lambda row: _sort_key(row.get(sort.field)), reverse=sort.direction == "desc")
    return ordered + missing


def _key_extractor(row_key: str | RowKey) -> RowKey:
    if callable(row_key):
        return row_key
    return lambda row: row.get(row_key)


class TableEngine:
    def __init__(
        self,
        records: Iterable[Record],
        columns: Iterable[ColumnDef],
        *,
        row_key: str | RowKey,
        config: TableConfig | None = None,
        on_sort: Callable[[SortKey], Any] | None = None,
        on_filter: Callable[[list[FilterPredicate]], Any] | None = None,
        on_selection_change: Callable[[list[Record]], Any] | None = None,
    ) -> None:
        self.config = config or TableConfig()
        self.columns: tuple[ColumnDef, ...] = tuple(columns)
        self._records: tuple[Record, ...] = tuple(records)
        self._key_of = _key_extractor(row_key)
        self._on_sort = on_sort
        self._on_filter = on_filter
        self._on_selection_change = on_selection_change

        self._search_term = ""
        self._filters: list[FilterPredicate] = []
        self._sort: SortKey | None = None
        self._pagination = PaginationState(page=0, page_size=max(1, self.config.page_size))
        self._selected: dict[Hashable, None] = {}

    @property
    def records(self) -> tuple[Record, ...]:
        return self._records

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def filters(self) -> list[FilterPredicate]:
        return list(self._filters)

    @property
    def sort(self) -> SortKey | None:
        return self._sort

    @property
    def page(self) -> int:
        return self._pagination.page

    @property
    def page_size(self) -> int:
        return self._pagination.page_size

    @property
    def selection(self) -> list[Record]:
        by_key: dict[Hashable, Record] = {}
        for row in self._records:
            by_key.setdefault(self._key_of(row), row)
        return [by_key[key] for key in self._selected if key in by_key]

    def filtered_rows(self) -> list[Record]:
        rows: list[Record] = list(self._records)
        if self.config.searchable and self._search_term:
            rows = apply_search(rows, self._search_term, self.columns)
        if self.config.filterable and self._filters:
            rows = apply_filters(rows, self._filters)
        if self._sort is not None:
            rows = stable_sort(rows, self._sort)
        return rows

    def view(self) -> TableView:
        rows = self.filtered_rows()
        total = len(rows)
        if self.config.paginate:
            page_rows = self._pagination.slice(rows)
            total_pages = self._pagination.total_pages(total)
        else:
            page_rows = rows
            total_pages = 1 if total else 0
        return TableView(
            rows=page_rows,
            total_filtered_count=total,
            total_pages=total_pages,
            page=self._pagination.page,
            page_size=self._pagination.page_size,
            sort_field=self._sort.field if self._sort else None,
            sort_direction=self._sort.direction if self._sort else "asc",
            selection=self.selection,
            select_all=self._select_all_state(page_rows),
        )

    def get_visible_rows(self) -> list[Record]:
        return self.view().rows

    def render_rows(self) -> list[dict[str, str]]:
        return [render_row(row, list(self.columns)) for row in self.get_visible_rows()]

    def is_selected(self, record: Record) -> bool:
        return self._key_of(record) in self._selected

    def set_records(self, records: Iterable[Record]) -> None:
        self._records = tuple(records)
        present = {self._key_of(row) for row in self._records}
        self._selected = {key: None for key in self._selected if key in present}

    def set_search_term(self, text: str) -> None:
        self._search_term = text or ""
        goto_page(self._pagination, 0)

    def add_filter(self, predicate: FilterPredicate) -> None:
        self._filters.append(predicate)
        self._filters_changed()

    def remove_filter(self, index: int) -> None:
        if not 0 <= index < len(self._filters):
            logger.debug("remove_filter ignored, index %s out of range", index)
            return
        del self._filters[index]
        self._filters_changed()

    def clear_filters(self) -> None:
        self._filters = []
        self._filters_changed()

    def clear_all(self) -> None:
        self._search_term = ""
        self.clear_filters()

    def set_sort(self, field: str) -> None:
        if self._sort is not None and self._sort.field == field:
            direction: SortDirection = "desc" if self._sort.direction == "asc" else "asc"
        else:
            direction = "asc"
        self._sort = SortKey(field=field, direction=direction)
        if self._on_sort is not None:
            self._on_sort(self._sort)

    def set_page(self, page: int) -> None:
        goto_page(self._pagination, page)

    def set_page_size(self, page_size: int) -> None:
        resize(self._pagination, page_size)

    def next_page(self) -> None:
        total_pages = self._pagination.total_pages(len(self.filtered_rows()))
        next_page(self._pagination, has_next=self._pagination.page + 1 < total_pages)

    def prev_page(self) -> None:
        prev_page(self._pagination)

    def select_all(self, checked: bool) -> None:
        if not self.config.selectable:
            logger.debug("select_all ignored, selection disabled")
            return
        page_keys = [self._key_of(row) for row in self.get_visible_rows()]
        if checked:
            for key in page_keys:
                self._selected.setdefault(key, None)
        else:
            for key in page_keys:
                self._selected.pop(key, None)
        self._selection_changed()

    def toggle_row(self, record: Record) -> None:
        if not self.config.selectable:
            logger.debug("toggle_row ignored, selection disabled")
            return
        key = self._key_of(record)
        if key in self._selected:
            del self._selected[key]
        else:
            self._selected[key] = None
        self._selection_changed()

    def clear_selection(self) -> None:
        self._selected = {}
        self._selection_changed()

    def _filters_changed(self) -> None:
        goto_page(self._pagination, 0)
        if self._on_filter is not None:
            self._on_filter(list(self._filters))

    def _selection_changed(self) -> None:
        if self._on_selection_change is not None:
            self._on_selection_change(self.selection)

    def _select_all_state(self, page_rows: list[Record]) -> SelectAllState:
        selected_on_page = sum(1 for row in page_rows if self._key_of(row) in self._selected)
        return SelectAllState(
            checked=bool(page_rows) and selected_on_page == len(page_rows),
            indeterminate=0 < selected_on_page < len(page_rows),
        )
