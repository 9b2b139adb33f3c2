"""OpenSearch backend."""

from datasearch.adapters.opensearch.adapter import OpenSearchEngine

__all__ = ["OpenSearchEngine"]
