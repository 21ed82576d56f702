"""Splitting invoice items across pages."""

from __future__ import annotations

from typing import List, Sequence, TypeVar

from .pdf_constants import CONT_PAGE_CAPACITY, FIRST_PAGE_CAPACITY, TOTALS_RESERVE_ROWS

T = TypeVar("T")


def paginate_items(items: Sequence[T]) -> List[List[T]]:
    """Item rows per page; the first page always exists, even when empty."""
    chunks: List[List[T]] = [list(items[:FIRST_PAGE_CAPACITY])]
    cursor = FIRST_PAGE_CAPACITY
    while cursor < len(items):
        chunks.append(list(items[cursor : cursor + CONT_PAGE_CAPACITY]))
        cursor += CONT_PAGE_CAPACITY
    return chunks


def totals_need_new_page(chunks: Sequence[Sequence[object]]) -> bool:
    capacity = FIRST_PAGE_CAPACITY if len(chunks) == 1 else CONT_PAGE_CAPACITY
    return len(chunks[-1]) > capacity - TOTALS_RESERVE_ROWS


def estimate_page_count(item_count: int) -> int:
    """Pages used by the item table and totals block (notes overflow not counted)."""
    chunks = paginate_items(range(item_count))
    return len(chunks) + (1 if totals_need_new_page(chunks) else 0)
