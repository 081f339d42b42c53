from __future__ import annotations

import csv
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from erp_console.app.ui.filter_catalog import FilterField, describe_filter
from erp_console.app.ui.listing_view import sanitize_row
from erp_console.app.ui.table_state import TableEngine


def export_current_view(
    *,
    module: str,
    table: TableEngine,
    output_dir: str = "out/exports",
    filter_fields: Iterable[FilterField] | None = None,
) -> Path:
    """Write the searched, filtered and sorted rows (every page) to CSV."""
    destination = Path(output_dir)
    destination.mkdir(parents=True, exist_ok=True)

    now = datetime.now().astimezone()
    path = destination / f"{module}_{now.strftime('%Y%m%d_%H%M%S')}.csv"
    columns = list(table.columns)
    fields = list(filter_fields or [])
    filters = [describe_filter(predicate, fields) for predicate in table.filters]

    with path.open("w", newline="", encoding="utf-8-sig") as handle:
        handle.write(f"# timestamp_local: {now.isoformat()}\n")
        handle.write(f"# module: {module}\n")
        handle.write(f"# search: {table.search_term or 'N/A'}\n")
        handle.write(f"# filters: {filters}\n")
        writer = csv.writer(handle)
        writer.writerow([column.label for column in columns])
        for row in table.filtered_rows():
            rendered = sanitize_row(row, columns)
            writer.writerow([rendered[column.id] for column in columns])

    return path
