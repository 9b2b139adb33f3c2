"""Item model — A generic document record used for writes and search hits."""

from __future__ import annotations

from typing import Any, NamedTuple

from pydantic import BaseModel, Field

# Keys merged into the values of search hits from the engine's hit metadata.
RESERVED_KEYS = ("_index", "_version")


class Routing(NamedTuple):
    """Where a document lives: the index and (on legacy engines) its type."""

    index: str | None
    type: str | None


class Item(BaseModel):
    """A document: an identifier plus an arbitrary key/value payload.

    For writes, ``values`` must carry ``index`` (and optionally ``type``).
    They are consumed by :meth:`pop_routing` so that what remains is the
    document body sent to the engine.
    """

    id: str = Field(description="Document identifier, unique within its index")
    values: dict[str, Any] = Field(default_factory=dict, description="Document payload")
    score: float | None = Field(default=None, description="Relevance score of a search hit")

    @property
    def keys(self) -> list[str]:
        return list(self.values)

    def get_value(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set_value(self, key: str, value: Any) -> None:
        self.values[key] = value

    def pop_routing(self) -> Routing:
        """Remove ``index`` and ``type`` from the values and return them."""
        return Routing(
            index=self.values.pop("index", None),
            type=self.values.pop("type", None),
        )
