"""OpenSearch adapter — Full-text search for OpenSearch (v2+).

Compiled conditions are sent as a ``query_string`` query, which accepts the
same Lucene syntax as Solr. This adapter uses ``opensearch-py`` and provides
search, counting and health monitoring through the standard adapter
interface.

Install the optional dependency::

    pip install searchrecord[opensearch]
    # or: pip install opensearch-py
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

from searchrecord.adapters.base.adapter import AdapterHealth, EngineRequest, RawResults, SearchAdapter
from searchrecord.adapters.base.exceptions import (
    ConfigurationError,
    ConnectionError,
    QueryError,
)
from searchrecord.models.document import Document

logger = logging.getLogger(__name__)


class OpenSearchAdapter(SearchAdapter):
    """Search adapter for OpenSearch (v2+).

    Args:
        hosts: List of OpenSearch node URLs.
        index_pattern: Default index (or pattern) for searches, e.g. ``'books'``.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        api_key: Not used; accepted for interface consistency.
        verify_certs: Whether to verify TLS certificates.
        timeout: Request timeout in seconds.
        default_field: Field searched by terms without a ``field:`` prefix.
        **kwargs: Additional keyword arguments forwarded to ``OpenSearch``.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        index_pattern: str = "*",
        username: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
        verify_certs: bool = True,
        timeout: float = 30.0,
        default_field: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._hosts = hosts or ["https://localhost:9200"]
        self._index_pattern = index_pattern
        self._username = username
        self._password = password
        self._api_key = api_key
        self._verify_certs = verify_certs
        self._timeout = timeout
        self._default_field = default_field
        self._extra_kwargs = kwargs
        self._client: Any = None

    @property
    def name(self) -> str:
        return "opensearch"

    @property
    def default_index(self) -> str:
        return self._index_pattern

    def initialize(self) -> None:
        """Create and verify the ``OpenSearch`` client."""
        try:
            from opensearchpy import OpenSearch
        except ImportError as e:
            raise ConfigurationError(
                "opensearch-py package is required.  Install with: pip install searchrecord[opensearch]"
            ) from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
            "timeout": self._timeout,
        }
        if self._username and self._password:
            client_kwargs["http_auth"] = (self._username, self._password)

        client_kwargs.update(self._extra_kwargs)

        try:
            self._client = OpenSearch(**client_kwargs)
            info = self._client.info()
            version = info.get("version", {}).get("number", "unknown")
            cluster = info.get("cluster_name", "unknown")
            logger.info("Connected to OpenSearch cluster: %s (v%s)", cluster, version)
        except Exception as e:
            raise ConnectionError(f"Failed to connect to OpenSearch: {e}") from e

    def shutdown(self) -> None:
        """Close the OpenSearch client."""
        if self._client:
            self._client.close()
            self._client = None

    # ── Search ───────────────────────────────────────────────────────────

    def execute(self, request: EngineRequest) -> RawResults:
        """Execute a ``query_string`` search against OpenSearch."""
        if not self._client:
            raise ConnectionError("OpenSearch client not initialized.")

        body: dict[str, Any] = {"query": self._build_query(request)}
        if request.limit is not None:
            body["size"] = request.limit
        if request.offset:
            body["from"] = request.offset
        if request.sort:
            body["sort"] = [{field: {"order": "asc" if asc else "desc"}} for field, asc in request.sort]

        try:
            start = time.monotonic()
            response = self._client.search(index=request.index or self._index_pattern, body=body)
            took_ms = int((time.monotonic() - start) * 1000)
        except Exception as e:
            raise QueryError(f"OpenSearch query failed: {e}") from e

        hits = response.get("hits", {})
        return RawResults(
            total_hits=hits.get("total", {}).get("value", 0),
            documents=list(hits.get("hits", [])),
            metadata={"took_os_ms": response.get("took", 0)},
            took_ms=took_ms,
        )

    def execute_count(self, request: EngineRequest) -> int:
        """Count matches through the ``_count`` API."""
        if not self._client:
            raise ConnectionError("OpenSearch client not initialized.")

        try:
            response = self._client.count(
                index=request.index or self._index_pattern,
                body={"query": self._build_query(request)},
            )
        except Exception as e:
            raise QueryError(f"OpenSearch count failed: {e}") from e
        return int(response.get("count", 0))

    def _build_query(self, request: EngineRequest) -> dict[str, Any]:
        if not request.query:
            return {"match_all": {}}
        query_string: dict[str, Any] = {
            "query": request.query,
            "default_operator": "OR" if request.fuzzy else "AND",
        }
        if self._default_field:
            query_string["default_field"] = self._default_field
        return {"query_string": query_string}

    # ── Schema mapping ───────────────────────────────────────────────────

    def map_to_document(self, raw_result: dict[str, Any]) -> Document:
        """Map an OpenSearch hit to ``Document``; ``_source`` becomes the fields."""
        score = raw_result.get("_score")
        return Document(
            id=str(raw_result.get("_id", "")),
            fields=dict(raw_result.get("_source", {})),
            score=float(score) if score is not None else None,
        )

    # ── Health ───────────────────────────────────────────────────────────

    def health_check(self) -> AdapterHealth:
        """Check OpenSearch cluster health."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = self._client.cluster.health()
            latency_ms = int((time.monotonic() - start) * 1000)

            status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}

            return AdapterHealth(
                status=status_map.get(health.get("status", "red"), "unhealthy"),
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))
