"""Fixed-size paging over a filtered collection."""

import math
from collections.abc import Sequence
from typing import TypeVar

from dutydesk.core.config import settings
from dutydesk.models.service_models import Page


ItemT = TypeVar("ItemT")


def _check_page_size(page_size: int) -> int:
    if page_size < 1:
        msg = f"page_size must be at least 1, got {page_size}"
        raise ValueError(msg)
    return page_size


def total_pages(total_items: int, page_size: int) -> int:
    """Number of pages, never less than one (an empty list still has page 0)."""
    _check_page_size(page_size)
    return max(1, math.ceil(total_items / page_size))


def paginate(items: Sequence[ItemT], page_index: int, page_size: int) -> Page[ItemT]:
    """Slice ``items`` to the requested page.

    An index past the last page yields an empty page rather than an error.
    """
    if page_index < 0:
        msg = f"page_index must not be negative, got {page_index}"
        raise ValueError(msg)
    pages = total_pages(len(items), page_size)
    start = page_index * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page_index=page_index,
        page_size=page_size,
        total_items=len(items),
        total_pages=pages,
    )


class PageState:
    """Current page position for one view.

    Whoever changes a filter or the page size must call ``reset`` (or use
    ``set_page_size``, which does it) so the view goes back to the first page.
    """

    def __init__(self, *, page_size: int | None = None) -> None:
        self.page_size = _check_page_size(settings.items_per_page if page_size is None else page_size)
        self.page_index = 0

    def reset(self) -> None:
        self.page_index = 0

    def set_page_size(self, page_size: int) -> None:
        self.page_size = _check_page_size(page_size)
        self.reset()

    def next(self, total_items: int) -> int:
        last = total_pages(total_items, self.page_size) - 1
        self.page_index = min(self.page_index + 1, last)
        return self.page_index

    def previous(self) -> int:
        self.page_index = max(self.page_index - 1, 0)
        return self.page_index

    def slice(self, items: Sequence[ItemT]) -> Page[ItemT]:
        return paginate(items, self.page_index, self.page_size)
