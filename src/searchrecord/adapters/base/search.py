"""Search — the per-query engine object the executor configures and runs.

A ``Search`` accumulates query string, sort, window and fuzzy settings and
executes them through its adapter. Obtain a fresh one per query from a
``Connection``; settings are not reset between executions.
"""

from __future__ import annotations

import logging

from searchrecord.adapters.base.adapter import EngineRequest, SearchAdapter
from searchrecord.models.document import Document

logger = logging.getLogger(__name__)


class Search:
    """Stateful search request bound to one adapter and index.

    Args:
        adapter: An initialized adapter.
        index: Index/collection to search; the adapter's default if None.
    """

    def __init__(self, adapter: SearchAdapter, index: str | None = None) -> None:
        self._adapter = adapter
        self._request = EngineRequest(index=index)

    @property
    def adapter(self) -> SearchAdapter:
        return self._adapter

    @property
    def request(self) -> EngineRequest:
        """A copy of the request as configured so far."""
        return self._request.model_copy(deep=True)

    def set_query(self, query: str) -> Search:
        self._request.query = query
        return self

    def set_sort(self, field: str, ascending: bool = True) -> Search:
        """Sort by a single field, replacing any previous sort."""
        self._request.sort = [(field, ascending)]
        return self

    def set_multi_sort(self, fields: dict[str, bool]) -> Search:
        """Sort by several fields in mapping order, replacing any previous sort."""
        self._request.sort = list(fields.items())
        return self

    def set_limit(self, limit: int, offset: int = 0) -> Search:
        self._request.limit = limit
        self._request.offset = offset
        return self

    def set_fuzzy(self, value: bool = True) -> Search:
        self._request.fuzzy = value
        return self

    def search(self) -> list[Document]:
        """Run the request and return matching documents in engine order."""
        logger.debug("Searching %s: %r", self._adapter.name, self._request.query)
        return self._adapter.search_documents(self._request)

    def count(self) -> int:
        """Return the number of documents matching the query."""
        logger.debug("Counting %s: %r", self._adapter.name, self._request.query)
        return self._adapter.execute_count(self._request)
