"""Base engine interface — Abstract classes for search backends."""

from datasearch.adapters.base.adapter import Modifiable, SearchEngine
from datasearch.adapters.base.registry import EngineRegistry

__all__ = ["EngineRegistry", "Modifiable", "SearchEngine"]
