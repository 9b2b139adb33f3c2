"""Query translation for the Elasticsearch query DSL.

Pure functions: a :class:`Query` becomes a request body, and a response
body becomes items, facet values and a hit count.  No I/O happens here.

Request shape::

    {
        "query": {<type>: <payload>},            # omitted → match_all
        "post_filter": {"bool": {"filter": [...]}},   # all filters, AND
        "aggs": {
            <facet>: {
                "filter": <same AND group>,
                "aggs": {<facet>: <facet request>},
            },
        },
        "sort": <order>,
        "from": (page - 1) * count,
        "size": count,
    }

Filters restrict the hits through ``post_filter`` so scoring is unaffected,
and every facet is wrapped in a ``filter`` aggregation carrying the same
AND group, so facet counts cover exactly the filtered hits.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from datasearch.adapters.base.exceptions import ConfigurationError, MalformedResponseError
from datasearch.models.item import RESERVED_KEYS, Item
from datasearch.models.query import Query
from datasearch.models.result import FacetValue

MATCH_ALL: dict[str, Any] = {"match_all": {}}


def combine_filters(filters: Mapping[str, Any]) -> dict[str, Any] | None:
    """AND-combine filter clauses, in name order, into one bool group.

    Returns ``None`` when there are no filters.
    """
    if not filters:
        return None
    return {"bool": {"filter": [copy.deepcopy(clause) for clause in filters.values()]}}


def inject_facet_filters(
    facets: Mapping[str, Any],
    combined: dict[str, Any] | None,
) -> dict[str, Any]:
    """Wrap each facet request in a filter aggregation restricted by ``combined``.

    Every facet gets its own copy of the filter group; the input mappings
    are left untouched.  Without filters the wrapper matches everything.
    """
    restriction = combined if combined is not None else MATCH_ALL
    return {
        name: {
            "filter": copy.deepcopy(restriction),
            "aggs": {name: copy.deepcopy(request)},
        }
        for name, request in facets.items()
    }


def build_request(query: Query) -> dict[str, Any]:
    """Translate a query into a search request body.

    The target index is not part of the body; pass ``query.index`` to the
    client call.

    Raises:
        ConfigurationError: If the query has a payload but no type.
    """
    body: dict[str, Any] = {}

    if query.has_query:
        if not query.has_type:
            raise ConfigurationError("queries with a payload must declare a type")
        body["query"] = {query.type: copy.deepcopy(query.query)}

    if query.debug:
        body["explain"] = True

    combined = combine_filters(query.filters)
    if combined is not None:
        body["post_filter"] = combined

    if query.has_facets:
        body["aggs"] = inject_facet_filters(query.facets, combined)

    if query.has_order:
        body["sort"] = copy.deepcopy(query.order)

    if query.fields is not None:
        body["_source"] = list(query.fields)

    body["from"] = query.offset
    body["size"] = query.count
    return body


# ── Response parsing ─────────────────────────────────────────────────────


def parse_total(response: Mapping[str, Any]) -> int:
    """Read the total hit count.

    Accepts both ``hits.total: 12`` and ``hits.total: {"value": 12}``.

    Raises:
        MalformedResponseError: If the count is missing or not an integer.
    """
    hits = response.get("hits")
    if not isinstance(hits, Mapping) or "total" not in hits:
        raise MalformedResponseError("Search response has no hit count (hits.total)")

    total = hits["total"]
    if isinstance(total, Mapping):
        total = total.get("value")
    if isinstance(total, bool) or not isinstance(total, int) or total < 0:
        raise MalformedResponseError(f"Search response has an invalid hit count: {hits['total']!r}")
    return total


def parse_hits(response: Mapping[str, Any]) -> list[Item]:
    """Map every hit to an :class:`Item`, in response order.

    The hit's ``_source`` becomes the values, with the engine's metadata
    keys (``_index``, and ``_version`` when returned) merged in.

    Raises:
        MalformedResponseError: If ``hits.hits`` is missing or not a list.
    """
    container = response.get("hits")
    if not isinstance(container, Mapping) or "hits" not in container:
        raise MalformedResponseError("Search response has no hit list (hits.hits)")
    hits = container["hits"]
    if not isinstance(hits, list):
        raise MalformedResponseError("Search response hits.hits is not a list")

    items: list[Item] = []
    for hit in hits:
        if "_id" not in hit:
            raise MalformedResponseError("Search hit has no _id")
        values = dict(hit.get("_source") or {})
        for key in RESERVED_KEYS:
            if key in hit:
                values[key] = hit[key]
        items.append(Item(id=str(hit["_id"]), values=values, score=hit.get("_score")))
    return items


def parse_facets(
    response: Mapping[str, Any],
    facet_names: Iterable[str] | None = None,
) -> dict[str, list[FacetValue]]:
    """Extract term-style facet values, keeping the engine's order.

    Reads ``aggregations`` (buckets of ``key``/``doc_count``, either inside
    the filter wrapper built by :func:`inject_facet_filters` or directly)
    and the legacy ``facets`` section (``terms`` of ``term``/``count``).
    Facets without term results are skipped.  When ``facet_names`` is given
    only those facets are returned.
    """
    wanted = set(facet_names) if facet_names is not None else None
    facets: dict[str, list[FacetValue]] = {}

    for name, agg in (response.get("aggregations") or {}).items():
        if wanted is not None and name not in wanted:
            continue
        buckets = _term_buckets(name, agg)
        if buckets is not None:
            facets[name] = [
                FacetValue(value=bucket.get("key"), count=bucket.get("doc_count", 0)) for bucket in buckets
            ]

    for name, facet in (response.get("facets") or {}).items():
        if wanted is not None and name not in wanted:
            continue
        terms = facet.get("terms") if isinstance(facet, Mapping) else None
        if isinstance(terms, list):
            facets[name] = [FacetValue(value=term.get("term"), count=term.get("count", 0)) for term in terms]

    return facets


def _term_buckets(name: str, agg: Any) -> list[dict[str, Any]] | None:
    if not isinstance(agg, Mapping):
        return None
    inner = agg.get(name)
    if isinstance(inner, Mapping) and isinstance(inner.get("buckets"), list):
        return inner["buckets"]
    if isinstance(agg.get("buckets"), list):
        return agg["buckets"]
    return None
