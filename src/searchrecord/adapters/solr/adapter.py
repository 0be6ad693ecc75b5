"""Apache Solr adapter — Full-text search via Solr's JSON Request API.

Connects to Apache Solr (v8+) using ``httpx`` over the standard JSON Request
API. Compiled conditions are Lucene syntax and are sent as the main query
with the standard query parser; fuzzy requests switch the default operator
from ``AND`` to ``OR``.

Usage::

    adapter = SolrAdapter(
        base_url="http://localhost:8983/solr",
        collection="books",
    )
    adapter.initialize()
    results = adapter.execute(EngineRequest(query="(author:leguin) AND (year:1969)"))
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any

import httpx

from searchrecord.adapters.base.adapter import AdapterHealth, EngineRequest, RawResults, SearchAdapter
from searchrecord.adapters.base.exceptions import ConnectionError, QueryError
from searchrecord.models.document import Document

logger = logging.getLogger(__name__)


class SolrAdapter(SearchAdapter):
    """Search adapter for Apache Solr (v8+).

    Communicates with Solr via its `JSON Request API`_ over HTTP.

    .. _JSON Request API: https://solr.apache.org/guide/solr/latest/query-guide/json-request-api.html

    Args:
        base_url: Solr base URL, e.g. ``"http://localhost:8983/solr"``.
        collection: Default Solr collection/core name.
        username: Optional basic-auth username.
        password: Optional basic-auth password.
        api_key: Not used by Solr; accepted for interface consistency.
        timeout: HTTP request timeout in seconds.
        default_field: Field searched by terms without a ``field:`` prefix.
        **kwargs: Extra keyword arguments stored for future use.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8983/solr",
        collection: str = "documents",
        username: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
        timeout: float = 30.0,
        default_field: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._collection = collection
        self._username = username
        self._password = password
        self._timeout = timeout
        self._default_field = default_field
        self._extra_kwargs = kwargs
        self._client: httpx.Client | None = None

    @property
    def name(self) -> str:
        return "solr"

    @property
    def default_index(self) -> str:
        return self._collection

    def initialize(self) -> None:
        """Create an ``httpx.Client`` and ping the Solr admin API."""
        auth = None
        if self._username and self._password:
            auth = httpx.BasicAuth(self._username, self._password)

        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            auth=auth,
        )

        try:
            resp = self._client.get(f"/{self._collection}/admin/ping")
            resp.raise_for_status()
            logger.info(
                "Connected to Solr collection '%s' at %s",
                self._collection,
                self._base_url,
            )
        except httpx.HTTPError as e:
            raise ConnectionError(f"Failed to connect to Solr: {e}") from e

    def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    # ── Search ───────────────────────────────────────────────────────────

    def execute(self, request: EngineRequest) -> RawResults:
        """Run ``request`` against the collection's ``/select`` handler."""
        body = self._build_body(request)
        if request.limit is not None:
            body["limit"] = request.limit
        if request.offset:
            body["offset"] = request.offset
        if request.sort:
            body["sort"] = ", ".join(f"{field} {'asc' if asc else 'desc'}" for field, asc in request.sort)
        body["params"]["fl"] = "*,score"

        start = time.monotonic()
        data = self._select(request.index, body)
        took_ms = int((time.monotonic() - start) * 1000)

        response_section = data.get("response", {})
        return RawResults(
            total_hits=response_section.get("numFound", 0),
            documents=response_section.get("docs", []),
            metadata={"qtime_ms": data.get("responseHeader", {}).get("QTime", 0)},
            took_ms=took_ms,
        )

    def execute_count(self, request: EngineRequest) -> int:
        """Count matches with a zero-row select."""
        body = self._build_body(request)
        body["limit"] = 0
        data = self._select(request.index, body)
        return int(data.get("response", {}).get("numFound", 0))

    def _build_body(self, request: EngineRequest) -> dict[str, Any]:
        params: dict[str, Any] = {"q.op": "OR" if request.fuzzy else "AND"}
        if self._default_field:
            params["df"] = self._default_field
        return {"query": request.query or "*:*", "params": params}

    def _select(self, index: str | None, body: dict[str, Any]) -> dict[str, Any]:
        if not self._client:
            raise ConnectionError("Solr client not initialized.")

        collection = index or self._collection
        try:
            resp = self._client.post(f"/{collection}/select", json=body)
            resp.raise_for_status()
            return dict(resp.json())
        except httpx.HTTPError as e:
            raise QueryError(f"Solr query failed: {e}") from e

    # ── Schema mapping ───────────────────────────────────────────────────

    def map_to_document(self, raw_result: dict[str, Any]) -> Document:
        """Map a Solr document to ``Document``.

        Solr documents are flat key-value dicts; the pseudo-field ``score`` is
        lifted out, everything else is kept as stored.
        """
        fields = {k: v for k, v in raw_result.items() if k != "score"}
        score = raw_result.get("score")
        return Document(
            id=str(raw_result.get("id", "")),
            fields=fields,
            score=float(score) if score is not None else None,
        )

    # ── Health ───────────────────────────────────────────────────────────

    def health_check(self) -> AdapterHealth:
        """Ping the Solr admin endpoint."""
        if not self._client:
            return AdapterHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            resp = self._client.get(f"/{self._collection}/admin/ping")
            latency_ms = int((time.monotonic() - start) * 1000)

            if resp.status_code == 200:
                data = resp.json()
                solr_status = data.get("status", "unknown")
                return AdapterHealth(
                    status="healthy" if solr_status == "OK" else "degraded",
                    latency_ms=latency_ms,
                    last_check=datetime.now(UTC).isoformat(),
                    message=f"Collection: {self._collection}, status: {solr_status}",
                )
            return AdapterHealth(
                status="degraded",
                latency_ms=latency_ms,
                last_check=datetime.now(UTC).isoformat(),
                message=f"Solr returned HTTP {resp.status_code}",
            )
        except Exception as e:
            return AdapterHealth(status="unhealthy", message=str(e))
