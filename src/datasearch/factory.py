"""Engine construction from configuration."""

from __future__ import annotations

import importlib
import logging

from datasearch.adapters.base.adapter import SearchEngine
from datasearch.adapters.base.registry import EngineRegistry
from datasearch.config.settings import Settings

logger = logging.getLogger(__name__)

# Maps backend names to (module_path, class_name) for lazy import
_ENGINE_MAP: dict[str, tuple[str, str]] = {
    "elasticsearch": ("datasearch.adapters.elasticsearch.adapter", "ElasticsearchEngine"),
    "opensearch": ("datasearch.adapters.opensearch.adapter", "OpenSearchEngine"),
}


def build_registry() -> EngineRegistry:
    """A registry with every built-in backend registered."""
    registry = EngineRegistry()
    for name, (module_path, class_name) in _ENGINE_MAP.items():
        module = importlib.import_module(module_path)
        registry.register(name, getattr(module, class_name))
    return registry


def create_engine(settings: Settings, registry: EngineRegistry | None = None) -> SearchEngine:
    """Instantiate the backend named by ``settings.engine.backend``.

    The engine is not connected; call ``initialize()`` or use it as an async
    context manager.
    """
    registry = registry or build_registry()
    engine = registry.create(settings.engine.backend, **settings.engine.engine_kwargs())
    logger.debug("Created %s engine for %s", engine.name, settings.engine.servers)
    return engine
