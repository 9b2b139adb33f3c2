"""Query model — Immutable, backend-agnostic search request."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class Query(BaseModel):
    """A search request.

    ``query`` is the engine-specific payload and ``type`` names the query
    operator it belongs under, e.g. ``type="query_string"`` with
    ``query={"query": "solar"}``.  A payload without a type is rejected when
    the query is searched.

    Filters are combined with logical AND, in insertion order.  Facets are
    counted within the same filtered set as the hits.
    """

    model_config = ConfigDict(frozen=True)

    index: str = Field(min_length=1, description="Target index (collection) name")
    query: Any = Field(default=None, description="Engine-specific query payload")
    type: str | None = Field(default=None, description="Query operator the payload belongs under")
    filters: Mapping[str, dict[str, Any]] = Field(
        default_factory=dict, validate_default=True, description="Named filter clauses (AND)"
    )
    facets: Mapping[str, dict[str, Any]] = Field(
        default_factory=dict, validate_default=True, description="Named facet requests"
    )
    order: Any = Field(default=None, description="Sort specification")
    page: int = Field(default=1, ge=1, description="1-indexed page number")
    count: int = Field(default=10, ge=1, description="Results per page")
    debug: bool = Field(default=False, description="Request score explanations and keep the raw response")
    fields: list[str] | None = Field(default=None, description="Restrict returned document fields")
    original_query: str | None = Field(default=None, description="The text the user typed, for display")

    @field_validator("filters", "facets", mode="after")
    @classmethod
    def _freeze_clauses(cls, v: Mapping[str, dict[str, Any]]) -> Mapping[str, dict[str, Any]]:
        """Own a private copy and expose it read-only."""
        return MappingProxyType(copy.deepcopy(dict(v)))

    @field_serializer("filters", "facets")
    def _dump_clauses(self, v: Mapping[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(dict(v))

    @property
    def has_query(self) -> bool:
        return self.query is not None

    @property
    def has_type(self) -> bool:
        return bool(self.type)

    @property
    def has_filters(self) -> bool:
        return bool(self.filters)

    @property
    def has_facets(self) -> bool:
        return bool(self.facets)

    @property
    def has_order(self) -> bool:
        return self.order is not None

    @property
    def filter_names(self) -> list[str]:
        return list(self.filters)

    @property
    def facet_names(self) -> list[str]:
        return list(self.facets)

    @property
    def offset(self) -> int:
        """Index of the first result on the requested page."""
        return (self.page - 1) * self.count

    def get_filter(self, name: str) -> dict[str, Any] | None:
        return self.filters.get(name)

    def with_page(self, page: int) -> Query:
        """Return a copy of this query for another page."""
        return Query.model_validate({**self.model_dump(), "page": page})
