"""Base search adapter — Abstract interface for all search engine connectors.

Every search backend must implement this interface to serve queries.
The adapter is responsible for:
  1. Executing an ``EngineRequest`` (query string, sort, window, fuzzy flag)
  2. Counting the documents an ``EngineRequest`` matches
  3. Mapping raw hits to ``Document``
  4. Reporting health status

Adapters are long-lived and own the backend connection. Per-query state
lives in ``Search`` objects, which delegate to an adapter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from searchrecord.models.document import Document


class AdapterHealth(BaseModel):
    """Health status of a search adapter."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of last health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of last health check")
    message: str | None = Field(default=None, description="Additional health message")


class EngineRequest(BaseModel):
    """Engine-neutral description of one search call."""

    index: str | None = Field(default=None, description="Index/collection to search; adapter default if None")
    query: str = Field(default="", description="Query expression; empty matches everything")
    sort: list[tuple[str, bool]] = Field(default_factory=list, description="(field, ascending) in priority order")
    limit: int | None = Field(default=None, description="Maximum number of hits")
    offset: int = Field(default=0, description="Number of hits to skip")
    fuzzy: bool = Field(default=False, description="Match any term instead of all terms")


class RawResults(BaseModel):
    """Raw search results from a backend before normalization."""

    total_hits: int = Field(default=0, description="Total number of matching documents")
    documents: list[dict[str, Any]] = Field(default_factory=list, description="Raw document dicts")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Backend-specific metadata")
    took_ms: int = Field(default=0, description="Backend query execution time in ms")


class SearchAdapter(ABC):
    """Abstract base class for search engine adapters.

    All adapters must implement:
      - execute(): Run a request and return raw results
      - execute_count(): Count the documents a request matches
      - map_to_document(): Normalize a raw hit to ``Document``
      - health_check(): Report adapter health status
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique adapter name (e.g., 'solr', 'opensearch')."""

    @property
    @abstractmethod
    def default_index(self) -> str:
        """Index searched when a request does not name one."""

    @abstractmethod
    def initialize(self) -> None:
        """Open connections and verify the backend is reachable.

        Called once before the first request.
        """

    @abstractmethod
    def shutdown(self) -> None:
        """Close connections and release resources."""

    @abstractmethod
    def execute(self, request: EngineRequest) -> RawResults:
        """Execute a search request against the backend.

        Args:
            request: The compiled request.

        Returns:
            Raw search results from the backend.
        """

    @abstractmethod
    def execute_count(self, request: EngineRequest) -> int:
        """Return the number of documents matching ``request``.

        Sort and window settings of the request are ignored.
        """

    @abstractmethod
    def map_to_document(self, raw_result: dict[str, Any]) -> Document:
        """Map a raw backend hit to a ``Document``."""

    @abstractmethod
    def health_check(self) -> AdapterHealth:
        """Check the health of the search backend."""

    def search_documents(self, request: EngineRequest) -> list[Document]:
        """Search and normalize results in one step."""
        raw = self.execute(request)
        return [self.map_to_document(doc) for doc in raw.documents]
