"""OpenSearch backend — The Elasticsearch translation over ``opensearch-py``.

OpenSearch is an AWS-maintained fork of Elasticsearch with a compatible
query DSL, so requests and responses are translated exactly as for
Elasticsearch.  Only the client library differs.

Install the optional dependency::

    pip install datasearch-elastic[opensearch]
    # or: pip install 'opensearch-py[async]'
"""

from __future__ import annotations

import logging
from typing import Any

from datasearch.adapters.base.exceptions import ConfigurationError
from datasearch.adapters.elasticsearch.adapter import ElasticsearchEngine

logger = logging.getLogger(__name__)


class OpenSearchEngine(ElasticsearchEngine):
    """Search backend for OpenSearch (v2+).

    Accepts the same arguments as :class:`ElasticsearchEngine`.  API keys
    are not supported by ``opensearch-py``; use basic auth.
    """

    @property
    def name(self) -> str:
        return "opensearch"

    def _create_client(self) -> Any:
        try:
            from opensearchpy import AsyncOpenSearch
        except ImportError as e:
            raise ConfigurationError(
                "opensearch-py package is required.  Install with: pip install datasearch-elastic[opensearch]"
            ) from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._servers,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
        }
        if self._request_timeout is not None:
            client_kwargs["timeout"] = self._request_timeout
        if self._username and self._password:
            client_kwargs["http_auth"] = (self._username, self._password)
        if self._api_key:
            logger.warning("OpenSearch does not support API keys; ignoring api_key")

        client_kwargs.update(self._extra_kwargs)
        return AsyncOpenSearch(**client_kwargs)

    async def _send_search(self, client: Any, index: str, body: dict[str, Any]) -> Any:
        return await client.search(index=index, body=body)

    async def _send_bulk(self, client: Any, operations: list[dict[str, Any]]) -> Any:
        return await client.bulk(body=operations)
