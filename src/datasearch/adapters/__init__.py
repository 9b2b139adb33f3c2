"""Search backends — Connectors that translate queries for a specific engine.

Built-in backends:
  - elasticsearch: Elasticsearch (query DSL over HTTP)
  - opensearch: OpenSearch v2+ (Elasticsearch-compatible fork)

Implement ``SearchEngine`` (and ``Modifiable`` for writes) to add another.
"""
