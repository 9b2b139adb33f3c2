"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any

import pytest

from datasearch.config.settings import Settings
from datasearch.models.query import Query


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        engine={"servers": ["127.0.0.1:9200"]},
    )


@pytest.fixture
def sample_query() -> Query:
    """A query using every translation feature."""
    return Query(
        index="papers",
        type="query_string",
        query={"query": "solar nowcasting"},
        filters={
            "year": {"range": {"year": {"gte": 2020}}},
            "lang": {"term": {"language": "en"}},
        },
        facets={
            "author": {"terms": {"field": "author_literal"}},
            "source": {"terms": {"field": "source_literal"}},
        },
        order={"_score": {"order": "desc"}},
        page=2,
        count=5,
    )


@pytest.fixture
def sample_hit() -> dict[str, Any]:
    """Sample Elasticsearch hit document."""
    return {
        "_index": "papers-2024",
        "_id": "doc_001",
        "_version": 3,
        "_score": 8.5,
        "_source": {
            "title": "Solar Nowcasting with Deep Learning",
            "author_literal": "Jane Doe",
            "year": 2024,
        },
    }


@pytest.fixture
def sample_response(sample_hit: dict[str, Any]) -> dict[str, Any]:
    """Sample search response with hits and facet aggregations."""
    return {
        "took": 4,
        "timed_out": False,
        "hits": {
            "total": {"value": 12, "relation": "eq"},
            "max_score": 8.5,
            "hits": [
                sample_hit,
                {
                    "_index": "papers-2023",
                    "_id": "doc_002",
                    "_score": 6.1,
                    "_source": {"title": "Irradiance Forecasting", "year": 2023},
                },
            ],
        },
        "aggregations": {
            "author": {
                "doc_count": 12,
                "author": {
                    "doc_count_error_upper_bound": 0,
                    "sum_other_doc_count": 0,
                    "buckets": [
                        {"key": "Jane Doe", "doc_count": 7},
                        {"key": "John Smith", "doc_count": 5},
                    ],
                },
            },
            "source": {
                "doc_count": 12,
                "source": {"buckets": [{"key": "arxiv", "doc_count": 12}]},
            },
        },
    }
