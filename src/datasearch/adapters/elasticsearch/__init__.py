"""Elasticsearch backend."""

from datasearch.adapters.elasticsearch.adapter import ElasticsearchEngine

__all__ = ["ElasticsearchEngine"]
