"""Engine Registry — Maps backend names to search engine classes.

Engines are created from configuration by name; see
:func:`datasearch.factory.create_engine`.
"""

from __future__ import annotations

import logging
from typing import Any

from datasearch.adapters.base.adapter import SearchEngine

logger = logging.getLogger(__name__)


class EngineNotFoundError(Exception):
    """Raised when a requested backend is not registered."""


class EngineRegistry:
    """Registry of search engine classes.

    Example:
        >>> registry = EngineRegistry()
        >>> registry.register("elasticsearch", ElasticsearchEngine)
        >>> engine = registry.create("elasticsearch", servers=["127.0.0.1:9200"])
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[SearchEngine]] = {}

    def register(self, name: str, engine_class: type[SearchEngine]) -> None:
        """Register an engine class under ``name``."""
        if name in self._classes:
            logger.warning("Overwriting existing engine registration: %s", name)
        self._classes[name] = engine_class
        logger.debug("Registered engine: %s", name)

    def create(self, name: str, **kwargs: Any) -> SearchEngine:
        """Instantiate a registered engine without connecting it.

        Raises:
            EngineNotFoundError: If no engine is registered under this name.
        """
        if name not in self._classes:
            raise EngineNotFoundError(
                f"No engine registered with name '{name}'. "
                f"Available engines: {list(self._classes.keys())}"
            )
        return self._classes[name](**kwargs)

    @property
    def registered_engines(self) -> list[str]:
        return list(self._classes.keys())
