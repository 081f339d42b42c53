from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, TypeVar

T = TypeVar("T")


@dataclass
class PaginationState:
    page: int = 0
    page_size: int = 10

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.page_size) if total > 0 else 0

    def slice(self, rows: Sequence[T]) -> list[T]:
        start = self.page * self.page_size
        return list(rows[start : start + self.page_size])

    def clamp(self, total: int) -> "PaginationState":
        last_page = max(self.total_pages(total) - 1, 0)
        self.page = min(max(self.page, 0), last_page)
        return self


def next_page(state: PaginationState, has_next: bool | None) -> PaginationState:
    if has_next is False:
        return state
    state.page += 1
    return state


def prev_page(state: PaginationState) -> PaginationState:
    state.page = max(0, state.page - 1)
    return state


def goto_page(state: PaginationState, page: int) -> PaginationState:
    state.page = max(0, page)
    return state


def resize(state: PaginationState, page_size: int) -> PaginationState:
    state.page_size = max(1, page_size)
    state.page = 0
    return state
