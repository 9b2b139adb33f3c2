"""Pagination metadata for a page of search results."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Paginator(BaseModel):
    """Page position within a result set.

    Use :meth:`from_request` to build one from the requested page; it clamps
    the current page to the last page that actually holds results.
    """

    model_config = ConfigDict(frozen=True)

    current_page: int = Field(default=1, ge=1, description="Current (clamped) page, 1-indexed")
    entries_per_page: int = Field(default=10, ge=1, description="Page size")
    total_entries: int = Field(default=0, ge=0, description="Total number of matching documents")

    @classmethod
    def from_request(cls, page: int, count: int, total: int) -> Paginator:
        """Build a paginator for ``page`` of ``count`` entries out of ``total`` hits.

        A page beyond the data is reported as the last real page, and an
        empty result set as page 1.
        """
        page_count = math.ceil(total / count) if total > 0 else 0
        return cls(
            current_page=max(1, min(page, max(page_count, 1))),
            entries_per_page=count,
            total_entries=total,
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def page_count(self) -> int:
        """Number of pages; 0 when there are no entries."""
        if self.total_entries <= 0:
            return 0
        return math.ceil(self.total_entries / self.entries_per_page)

    @property
    def first_page(self) -> int:
        return 1

    @property
    def last_page(self) -> int:
        return max(self.page_count, 1)

    @property
    def previous_page(self) -> int | None:
        return self.current_page - 1 if self.current_page > self.first_page else None

    @property
    def next_page(self) -> int | None:
        return self.current_page + 1 if self.current_page < self.last_page else None

    @property
    def first(self) -> int:
        """1-based number of the first entry on this page (0 when empty)."""
        if self.total_entries == 0:
            return 0
        return (self.current_page - 1) * self.entries_per_page + 1

    @property
    def last(self) -> int:
        """1-based number of the last entry on this page (0 when empty)."""
        if self.total_entries == 0:
            return 0
        return min(self.current_page * self.entries_per_page, self.total_entries)

    @property
    def entries_on_this_page(self) -> int:
        if self.total_entries == 0:
            return 0
        return self.last - self.first + 1
