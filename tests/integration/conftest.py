"""Integration test fixtures: live Elasticsearch and OpenSearch nodes with seed data.

Expects the engines to be running, for example:
    docker run -d -p 9200:9200 -e discovery.type=single-node -e xpack.security.enabled=false \
        docker.elastic.co/elasticsearch/elasticsearch:8.13.4
    docker run -d -p 9201:9200 -e discovery.type=single-node -e DISABLE_SECURITY_PLUGIN=true \
        opensearchproject/opensearch:2.13.0

Tests are skipped when an engine cannot be reached.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import pytest

INDEX = "datasearch-test"

MOCK_DOCUMENTS: list[dict[str, Any]] = [
    {
        "id": "doc-001",
        "title": "Advances in Solar Nowcasting Using Deep Learning",
        "content": (
            "A convolutional neural network processes satellite imagery to predict "
            "solar irradiance up to 4 hours ahead."
        ),
        "author": "Alice Johnson",
        "tags": ["solar energy", "deep learning", "nowcasting"],
        "year": 2024,
    },
    {
        "id": "doc-002",
        "title": "Transformer Models for Natural Language Understanding",
        "content": "A survey of transformer-based models on GLUE, SuperGLUE and SQuAD.",
        "author": "Bob Smith",
        "tags": ["NLP", "transformers", "language models"],
        "year": 2023,
    },
    {
        "id": "doc-003",
        "title": "Solar Forecasting with Federated Learning",
        "content": "Federated averaging across solar plants without sharing raw production data.",
        "author": "Alice Johnson",
        "tags": ["solar energy", "federated learning"],
        "year": 2022,
    },
    {
        "id": "doc-004",
        "title": "Reinforcement Learning for Robotic Manipulation",
        "content": "A sim-to-real framework for dexterous robotic manipulation.",
        "author": "David Lee",
        "tags": ["reinforcement learning", "robotics"],
        "year": 2024,
    },
]

MAPPING = {
    "mappings": {
        "properties": {
            "title": {"type": "text"},
            "content": {"type": "text"},
            "author": {"type": "keyword"},
            "tags": {"type": "keyword"},
            "year": {"type": "integer"},
        }
    }
}


def _wait_for_service(url: str, timeout: float = 30.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


async def _seed(host: str, index: str = INDEX) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        await client.delete(f"/{index}", params={"ignore_unavailable": "true"})

        resp = await client.put(f"/{index}", json=MAPPING)
        resp.raise_for_status()

        for doc in MOCK_DOCUMENTS:
            body = {k: v for k, v in doc.items() if k != "id"}
            resp = await client.put(f"/{index}/_doc/{doc['id']}", json=body)
            resp.raise_for_status()

        await client.post(f"/{index}/_refresh")


@pytest.fixture(scope="session")
def elasticsearch_ready() -> str:
    """Ensure Elasticsearch is running and seeded."""
    host = "http://localhost:9200"
    if not _wait_for_service(host):
        pytest.skip("Elasticsearch not available at localhost:9200")
    asyncio.run(_seed(host))
    return host


@pytest.fixture(scope="session")
def opensearch_ready() -> str:
    """Ensure OpenSearch is running and seeded."""
    host = "http://localhost:9201"
    if not _wait_for_service(host):
        pytest.skip("OpenSearch not available at localhost:9201")
    asyncio.run(_seed(host))
    return host
