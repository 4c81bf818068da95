"""Pagination arithmetic: skip/limit bounds and response metadata."""
from dataclasses import dataclass

from app.schemas import PaginationInfo


@dataclass(frozen=True)
class PageWindow:
    """Slice of the matching set addressed by a 1-based *page* of *page_size* items."""

    page: int
    page_size: int

    def __post_init__(self) -> None:
        if self.page < 1 or self.page_size < 1:
            raise ValueError(f"page and page_size must be >= 1, got {self.page}/{self.page_size}")

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def total_pages(total_count: int, page_size: int) -> int:
    """Ceiling of total_count / page_size; 0 when nothing matches."""
    return -(-total_count // page_size)


def build_pagination_info(page: int, page_size: int, total_count: int) -> PaginationInfo:
    """
    Derive page metadata from the total number of matching items.

    A *page* past the last one is not an error: it reports
    ``has_next_page=False`` and the caller returns no items.
    """
    pages = total_pages(total_count, page_size)
    return PaginationInfo(
        current_page=page,
        total_pages=pages,
        total_articles=total_count,
        has_next_page=page < pages,
        has_prev_page=page > 1,
    )
