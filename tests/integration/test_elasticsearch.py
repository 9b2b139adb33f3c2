"""Integration tests for ElasticsearchEngine against a real Elasticsearch instance."""

from __future__ import annotations

import pytest

from datasearch.adapters.elasticsearch.adapter import ElasticsearchEngine
from datasearch.models.item import Item
from datasearch.models.query import Query

from .conftest import INDEX

pytestmark = [pytest.mark.integration, pytest.mark.asyncio, pytest.mark.elasticsearch]


@pytest.fixture
async def engine(elasticsearch_ready):
    e = ElasticsearchEngine(servers=[elasticsearch_ready])
    await e.initialize()
    yield e
    await e.shutdown()


class TestElasticsearchHealth:
    async def test_health_check_returns_healthy(self, engine):
        health = await engine.health_check()
        assert health.status in ("healthy", "degraded")
        assert health.latency_ms >= 0


class TestElasticsearchSearch:
    async def test_match_all(self, engine):
        results = await engine.search(Query(index=INDEX))
        assert results.pager.total_entries == 4
        assert len(results.items) == 4
        assert all(item.values["_index"] == INDEX for item in results.items)

    async def test_relevance(self, engine):
        results = await engine.search(Query(index=INDEX, type="match", query={"title": "transformer"}))
        assert results.items[0].id == "doc-002"
        assert results.items[0].score > 0

    async def test_filters_and_facets(self, engine):
        query = Query(
            index=INDEX,
            type="match",
            query={"title": "solar"},
            filters={"recent": {"range": {"year": {"gte": 2023}}}},
            facets={"author": {"terms": {"field": "author"}}},
        )

        results = await engine.search(query)

        assert [item.id for item in results.items] == ["doc-001"]
        assert [(f.value, f.count) for f in results.get_facet("author")] == [("Alice Johnson", 1)]

    async def test_paging(self, engine):
        results = await engine.search(Query(index=INDEX, order={"year": "asc"}, page=2, count=3))
        assert len(results.items) == 1
        assert results.pager.current_page == 2
        assert results.pager.page_count == 2

    async def test_page_past_end_is_clamped(self, engine):
        results = await engine.search(Query(index=INDEX, page=9, count=3))
        assert results.pager.current_page == 2


class TestElasticsearchWrites:
    async def test_add_present_remove(self, engine):
        report = await engine.add([Item(id="doc-new", values={"index": INDEX, "title": "Wind Power"})])
        assert report.ok
        await engine.engine.indices.refresh(index=INDEX)

        assert await engine.present(Item(id="doc-new", values={"index": INDEX}))
        results = await engine.search(Query(index=INDEX, type="match", query={"title": "wind"}))
        assert [item.id for item in results.items] == ["doc-new"]

        assert await engine.remove_by_id(Item(id="doc-new", values={"index": INDEX}))
        assert not await engine.present(Item(id="doc-new", values={"index": INDEX}))
        assert not await engine.remove_by_id(Item(id="doc-new", values={"index": INDEX}))
        await engine.engine.indices.refresh(index=INDEX)

    async def test_lookup_missing_index_is_not_an_error(self, engine):
        outcome = await engine.lookup(Item(id="x", values={"index": "datasearch-missing"}))
        assert not outcome.found
