"""Search provider layer — Connectors between the indexing pipeline and backends.

Built-in providers:
  - algolia: Algolia (hosted full-text and faceted search)

Implement ``SearchProvider`` to connect your own search backend.
"""
