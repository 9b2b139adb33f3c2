"""Fixtures for backend tests — mocked and in-memory engine clients."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from datasearch.adapters.elasticsearch.adapter import ElasticsearchEngine

from .fakes import FakeEngineClient


@pytest.fixture
def fake_client() -> FakeEngineClient:
    return FakeEngineClient()


@pytest.fixture
def mock_client(sample_response: dict[str, Any]) -> AsyncMock:
    """AsyncMock client answering searches with ``sample_response``."""
    client = AsyncMock()
    client.search.return_value = sample_response
    client.cluster = MagicMock()
    return client


@pytest.fixture
def engine(mock_client: AsyncMock) -> ElasticsearchEngine:
    return ElasticsearchEngine(servers=["127.0.0.1:9200"], client=mock_client)
