"""Search adapter layer — Pluggable connectors for search backends.

Built-in adapters:
  - solr: Apache Solr v8+ (JSON Request API, Lucene query syntax)
  - opensearch: OpenSearch v2+ (``query_string`` queries)

Implement ``SearchAdapter`` to connect your own search backend.
"""
