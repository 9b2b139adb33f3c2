"""Base search engine interfaces — Abstract classes for search backends.

A backend implements :class:`SearchEngine` to answer queries and
:class:`Modifiable` to accept writes.  Backends are responsible for:
  1. Translating a :class:`Query` into their own request format
  2. Issuing the request through their engine client
  3. Mapping the raw response back into :class:`Results`
  4. Reporting health status
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field

from datasearch.models.item import Item
from datasearch.models.query import Query
from datasearch.models.result import Results


class EngineHealth(BaseModel):
    """Health status of a search engine."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class LookupOutcome(BaseModel):
    """Outcome of looking a document up by id.

    ``error`` is set when the lookup could not be answered (transport
    failure, engine error); ``found`` is then ``False``.
    """

    found: bool = Field(description="Whether the document exists")
    error: str | None = Field(default=None, description="Why the lookup could not be answered")


class BulkReport(BaseModel):
    """Per-document outcome of a bulk write."""

    indexed: list[str] = Field(default_factory=list, description="Ids written successfully")
    failed: dict[str, str] = Field(default_factory=dict, description="Failed ids and the engine's reason")

    @property
    def ok(self) -> bool:
        return not self.failed


class SearchEngine(ABC):
    """Abstract base class for search backends.

    All backends must implement:
      - search(): Translate and execute a query, returning normalized results
      - engine: The underlying client, for operations this layer does not cover
      - initialize() / shutdown(): Client lifecycle
      - health_check(): Report backend health status
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique backend name (e.g., 'elasticsearch', 'opensearch')."""

    @property
    @abstractmethod
    def engine(self) -> Any:
        """The underlying engine client."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create the engine client and verify connectivity."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Close the engine client and release its connections."""

    @abstractmethod
    async def search(self, query: Query) -> Results:
        """Execute a query against the backend.

        Args:
            query: The search request.

        Returns:
            One page of results with facets and pagination.

        Raises:
            ConfigurationError: If the query is inconsistent.
            EngineUnavailableError: If the engine cannot be reached.
            MalformedResponseError: If the response lacks a hit count.
        """

    @abstractmethod
    async def health_check(self) -> EngineHealth:
        """Check the health of the search backend."""

    async def __aenter__(self) -> SearchEngine:
        await self.initialize()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.shutdown()


class Modifiable(ABC):
    """Write operations for backends whose index can be modified."""

    @abstractmethod
    async def add(self, items: Sequence[Item]) -> BulkReport:
        """Index items in one batched request."""

    @abstractmethod
    async def update(self, items: Sequence[Item]) -> BulkReport:
        """Overwrite items by id."""

    @abstractmethod
    async def remove(self, item: Item) -> None:
        """Remove documents matching an item."""

    @abstractmethod
    async def remove_by_id(self, item: Item) -> bool:
        """Remove the document with the item's id.

        Returns:
            ``True`` if it was deleted, ``False`` otherwise.
        """

    @abstractmethod
    async def present(self, item: Item) -> bool:
        """Whether a document with the item's id exists."""
