"""Elasticsearch backend — Query translation and document writes over the query DSL.

This backend uses the async ``elasticsearch`` client.  Queries are
translated by :mod:`datasearch.adapters.elasticsearch.translate`; this
module issues the requests and maps failures onto the engine exceptions.

Indexing expects every :class:`Item` to carry its routing in ``values``::

    item = Item(id="42", values={"index": "twitter", "type": "tweet", "text": "..."})
    await engine.add([item])

``index`` and ``type`` are removed from the values before the document is
sent, so the stored body is only the remaining fields.  ``type`` is
accepted for compatibility but typeless engines ignore it.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from datasearch.adapters.base.adapter import (
    BulkReport,
    EngineHealth,
    LookupOutcome,
    Modifiable,
    SearchEngine,
)
from datasearch.adapters.base.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    EngineUnavailableError,
    OperationNotSupportedError,
)
from datasearch.adapters.elasticsearch.translate import (
    build_request,
    parse_facets,
    parse_hits,
    parse_total,
)
from datasearch.models.item import Item, Routing
from datasearch.models.paginator import Paginator
from datasearch.models.query import Query
from datasearch.models.result import Results

logger = logging.getLogger(__name__)

DEFAULT_SERVER = "127.0.0.1:9200"


def normalize_servers(servers: str | Sequence[str], transport: str = "http") -> list[str]:
    """Turn a server or list of servers into node URLs.

    Bare ``host:port`` entries get ``transport`` as their URL scheme.
    """
    if isinstance(servers, str):
        servers = [servers]
    nodes = []
    for server in servers:
        server = server.strip()
        if not server:
            continue
        nodes.append(server if "://" in server else f"{transport}://{server}")
    if not nodes:
        raise ConfigurationError("At least one search engine server is required.")
    return nodes


def response_body(response: Any) -> dict[str, Any]:
    """Plain dict of a client response (``ObjectApiResponse`` or dict)."""
    return dict(getattr(response, "body", response))


def is_not_found(error: Exception) -> bool:
    """Whether a client exception means the document does not exist."""
    if "NotFoundError" in type(error).__name__:
        return True
    return getattr(error, "status_code", None) == 404


def _require_index(routing: Routing, item: Item) -> None:
    if not routing.index:
        raise ConfigurationError(f"Item '{item.id}' has no 'index' value to route it.")


class ElasticsearchEngine(SearchEngine, Modifiable):
    """Search backend for Elasticsearch.

    Supports:
      - Typed queries (``{type: payload}``), filters, term facets and sorting
      - Bulk indexing, lookup and deletion by id

    The client is created once, on first use or by :meth:`initialize`, and
    is the only state the engine holds; concurrent calls are independent.

    Args:
        servers: Node address or list of addresses, e.g. ``"127.0.0.1:9200"``.
        transport: URL scheme for addresses given without one.
        debug: Trace calls: log every request body and keep raw responses.
        request_timeout: Per-request timeout in seconds, passed to the client.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        api_key: Optional API key.
        verify_certs: Whether to verify TLS certificates.
        client: A ready client to use instead of creating one.
        **kwargs: Additional keyword arguments forwarded to the client.
    """

    def __init__(
        self,
        servers: str | Sequence[str] = DEFAULT_SERVER,
        transport: str = "http",
        debug: bool = False,
        request_timeout: float | None = None,
        username: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
        verify_certs: bool = True,
        client: Any = None,
        **kwargs: Any,
    ) -> None:
        self._servers = normalize_servers(servers, transport)
        self._transport = transport
        self._debug = debug
        self._request_timeout = request_timeout
        self._username = username
        self._password = password
        self._api_key = api_key
        self._verify_certs = verify_certs
        self._extra_kwargs = kwargs
        self._client: Any = client
        self._client_lock = threading.Lock()

    @property
    def name(self) -> str:
        return "elasticsearch"

    @property
    def servers(self) -> list[str]:
        return list(self._servers)

    @property
    def engine(self) -> Any:
        return self._get_client()

    # ── Client lifecycle ─────────────────────────────────────────────────

    def _create_client(self) -> Any:
        try:
            from elasticsearch import AsyncElasticsearch
        except ImportError as e:
            raise ConfigurationError(
                "elasticsearch package is required.  Install with: pip install 'elasticsearch[async]'"
            ) from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._servers,
            "verify_certs": self._verify_certs,
        }
        if self._request_timeout is not None:
            client_kwargs["request_timeout"] = self._request_timeout
        if self._username and self._password:
            client_kwargs["basic_auth"] = (self._username, self._password)
        if self._api_key:
            client_kwargs["api_key"] = self._api_key

        client_kwargs.update(self._extra_kwargs)
        return AsyncElasticsearch(**client_kwargs)

    def _get_client(self) -> Any:
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = self._create_client()
        return self._client

    async def initialize(self) -> None:
        """Create the client and verify the cluster is reachable."""
        client = self._get_client()
        try:
            info = response_body(await client.info())
        except Exception as e:
            raise EngineUnavailableError(f"Failed to connect to {self.name}: {e}") from e

        version = info.get("version", {}).get("number", "unknown")
        cluster = info.get("cluster_name", "unknown")
        logger.info("Connected to %s cluster: %s (v%s)", self.name, cluster, version)

    async def shutdown(self) -> None:
        """Close the client."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    # ── Wire calls (differ between client libraries) ─────────────────────

    async def _send_search(self, client: Any, index: str, body: dict[str, Any]) -> Any:
        return await client.search(index=index, **body)

    async def _send_bulk(self, client: Any, operations: list[dict[str, Any]]) -> Any:
        return await client.bulk(operations=operations)

    # ── Search ───────────────────────────────────────────────────────────

    async def search(self, query: Query) -> Results:
        """Translate ``query``, run it and normalize the response."""
        body = build_request(query)
        client = self._get_client()

        if self._debug:
            logger.debug("%s search on %s: %s", self.name, query.index, json.dumps(body, default=str))

        try:
            start = time.monotonic()
            response = await self._send_search(client, query.index, body)
            elapsed = time.monotonic() - start
        except Exception as e:
            raise EngineUnavailableError(f"{self.name} search failed: {e}") from e

        data = response_body(response)
        total = parse_total(data)

        results = Results(
            query=query,
            pager=Paginator.from_request(query.page, query.count, total),
            elapsed=elapsed,
            raw=data if (query.debug or self._debug) else None,
        )
        for name, values in parse_facets(data, query.facet_names).items():
            for value in values:
                results.set_facet(name, value)
        for item in parse_hits(data):
            results.add(item)

        logger.debug(
            "Searched %s: %d hits, page %d of %d, %.3fs",
            query.index,
            total,
            results.pager.current_page,
            results.pager.page_count,
            elapsed,
        )
        return results

    # ── Writes ───────────────────────────────────────────────────────────

    async def add(self, items: Sequence[Item]) -> BulkReport:
        """Index ``items`` in a single bulk request.

        A failed request raises :class:`EngineUnavailableError`.  Documents
        the engine rejects individually are logged and listed in the
        returned report; they do not raise.
        """
        missing = [item.id for item in items if not item.values.get("index")]
        if missing:
            raise ConfigurationError(f"Items without an 'index' value: {missing}")

        operations: list[dict[str, Any]] = []
        ids: list[str] = []
        for item in items:
            routing = item.pop_routing()
            operations.append({"index": {"_index": routing.index, "_id": item.id}})
            operations.append(item.values)
            ids.append(item.id)

        if not operations:
            return BulkReport()

        client = self._get_client()
        try:
            response = await self._send_bulk(client, operations)
        except Exception as e:
            raise EngineUnavailableError(f"{self.name} bulk index failed: {e}") from e

        report = self._bulk_report(response_body(response), ids)
        logger.debug("Bulk indexed %d documents, %d failed", len(report.indexed), len(report.failed))
        return report

    def _bulk_report(self, data: dict[str, Any], ids: list[str]) -> BulkReport:
        if not data.get("errors"):
            return BulkReport(indexed=ids)

        report = BulkReport()
        for doc_id, entry in zip(ids, data.get("items", []), strict=False):
            result = next(iter(entry.values()), {}) if entry else {}
            error = result.get("error")
            if error:
                reason = error.get("reason", str(error)) if isinstance(error, dict) else str(error)
                report.failed[doc_id] = reason
                logger.warning("Failed to index document %s: %s", doc_id, reason)
            else:
                report.indexed.append(doc_id)
        return report

    async def update(self, items: Sequence[Item]) -> BulkReport:
        """Overwrite documents by id; the same request as :meth:`add`."""
        return await self.add(items)

    async def remove(self, item: Item) -> None:
        raise OperationNotSupportedError(f"{self.name} does not support remove(); use remove_by_id().")

    async def remove_by_id(self, item: Item) -> bool:
        """Delete the document with the item's id.

        Returns ``False`` when the document does not exist, when the item
        has no index to route it and when the engine could not be asked;
        the log tells them apart.
        """
        routing = item.pop_routing()
        try:
            _require_index(routing, item)
            await self._get_client().delete(index=routing.index, id=item.id)
        except Exception as e:
            self._log_lookup_failure("delete", routing, item, e)
            return False
        return True

    async def _get_document(self, routing: Routing, item: Item) -> dict[str, Any]:
        """Fetch the stored document.

        Raises:
            ConfigurationError: If the item has no index to route it.
            DocumentNotFoundError: If the engine has no document with this id.
        """
        _require_index(routing, item)
        client = self._get_client()
        try:
            response = response_body(await client.get(index=routing.index, id=item.id))
        except Exception as e:
            if is_not_found(e):
                raise DocumentNotFoundError(f"{routing.index}/{item.id}") from e
            raise
        if not response.get("found", True):
            raise DocumentNotFoundError(f"{routing.index}/{item.id}")
        return response

    async def lookup(self, item: Item) -> LookupOutcome:
        """Look the item's id up, telling "not found" apart from failures."""
        routing = item.pop_routing()
        try:
            await self._get_document(routing, item)
        except DocumentNotFoundError as e:
            self._log_lookup_failure("get", routing, item, e)
            return LookupOutcome(found=False)
        except Exception as e:
            self._log_lookup_failure("get", routing, item, e)
            return LookupOutcome(found=False, error=str(e))
        return LookupOutcome(found=True)

    async def present(self, item: Item) -> bool:
        """Whether the item's id exists; ``False`` if that cannot be determined."""
        outcome = await self.lookup(item)
        return outcome.found

    def _log_lookup_failure(self, operation: str, routing: Routing, item: Item, error: Exception) -> None:
        if is_not_found(error):
            logger.debug("%s %s/%s: not found", operation, routing.index, item.id)
        else:
            logger.warning("%s %s/%s failed: %s", operation, routing.index, item.id, error)

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> EngineHealth:
        """Check cluster health."""
        try:
            client = self._get_client()
            start = time.monotonic()
            health = response_body(await client.cluster.health())
            latency_ms = int((time.monotonic() - start) * 1000)
        except Exception as e:
            return EngineHealth(status="unhealthy", message=str(e))

        status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}
        return EngineHealth(
            status=status_map.get(health.get("status", "red"), "unhealthy"),
            latency_ms=latency_ms,
            last_check=datetime.now(UTC).isoformat(),
            message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
        )
