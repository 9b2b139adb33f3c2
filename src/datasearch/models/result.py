"""Search result models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from datasearch.models.item import Item
from datasearch.models.paginator import Paginator
from datasearch.models.query import Query


class FacetValue(BaseModel):
    """One value of a facet and the number of hits that carry it."""

    value: Any = Field(description="Facet term")
    count: int = Field(default=0, ge=0, description="Number of matching documents")


class Results(BaseModel):
    """A page of search results.

    Items and facet values keep the order the engine returned them in.
    ``raw`` holds the unprocessed engine response when diagnostics were
    requested.
    """

    query: Query = Field(description="The query that produced these results")
    pager: Paginator = Field(default_factory=Paginator, description="Pagination metadata")
    elapsed: float = Field(default=0.0, ge=0, description="Engine round-trip time in seconds")
    items: list[Item] = Field(default_factory=list, description="Hits, in engine order")
    facets: dict[str, list[FacetValue]] = Field(default_factory=dict, description="Facet breakdowns by name")
    raw: dict[str, Any] | None = Field(default=None, description="Raw engine response (diagnostics only)")

    def add(self, item: Item) -> None:
        self.items.append(item)

    def get(self, index: int) -> Item:
        return self.items[index]

    def set_facet(self, name: str, value: FacetValue) -> None:
        self.facets.setdefault(name, []).append(value)

    def get_facet(self, name: str) -> list[FacetValue]:
        return self.facets.get(name, [])

    @property
    def facet_names(self) -> list[str]:
        return list(self.facets)
