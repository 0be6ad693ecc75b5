"""Query executor — Runs a ``QuerySpec`` against a search engine.

For every operation the executor:
  1. Obtains a fresh ``Search`` from its connection
  2. Pushes the page window, sort columns, compiled condition and fuzzy flag
  3. Executes the search (or count)
  4. Turns the returned documents into field mappings and, unless the query
     asks for raw arrays, into records
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from searchrecord.core.compiler import ConditionCompiler
from searchrecord.core.exceptions import NotSupportedError
from searchrecord.models.document import Document
from searchrecord.models.query import CompiledQuery, PageValue, QuerySpec, SortDirection

if TYPE_CHECKING:
    from searchrecord.adapters.base.search import Search
    from searchrecord.core.connection import ConnectionResolver
    from searchrecord.models.record import Record

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Executes queries for one record class.

    Args:
        connection: Resolver handing out ``Search`` objects.
        model_class: Record class results are hydrated into. Without one,
            results are always returned as field mappings.
        compiler: Condition compiler; a default one if None.
    """

    def __init__(
        self,
        connection: ConnectionResolver,
        model_class: type[Record] | None = None,
        compiler: ConditionCompiler | None = None,
    ) -> None:
        self.connection = connection
        self.model_class = model_class
        self.compiler = compiler or ConditionCompiler()
        # Query string compiled by the last prepare() call.
        self.query: str | None = None

    # ── Preparation ──────────────────────────────────────────────────────

    def apply_page(self, search: Search, limit: PageValue, offset: PageValue) -> tuple[int | None, int | None]:
        """Push the page window onto ``search`` if the limit is effective.

        Returns:
            The applied ``(limit, offset)``, or ``(None, None)`` when nothing
            was pushed.
        """
        if not has_offset(offset):
            offset = 0
        if not has_limit(limit):
            return None, None

        applied = (int(limit), int(offset))  # type: ignore[arg-type]
        search.set_limit(*applied)
        return applied

    def apply_sort(self, search: Search, columns: dict[str, SortDirection]) -> dict[str, bool]:
        """Push sort columns onto ``search``.

        One column becomes a single sort, several become one multi-sort in
        column order.

        Returns:
            Field -> ascending, as pushed.
        """
        if not columns:
            return {}

        sort = {name: direction != SortDirection.DESC for name, direction in columns.items()}
        if len(sort) == 1:
            name, ascending = next(iter(sort.items()))
            search.set_sort(name, ascending)
        else:
            search.set_multi_sort(sort)
        return sort

    def prepare(self, search: Search, spec: QuerySpec) -> CompiledQuery:
        """Configure ``search`` for ``spec`` and return what was applied.

        Raises:
            InvalidOperandCountError: If the condition contains a malformed
                ``NOT``.
        """
        limit, offset = self.apply_page(search, spec.limit, spec.offset)
        sort = self.apply_sort(search, spec.order_by)
        self.query = query = self.compiler.build_where(spec.where)
        search.set_query(query)
        if spec.fuzzy:
            search.set_fuzzy()

        return CompiledQuery(query=query, sort=sort, limit=limit, offset=offset, fuzzy=spec.fuzzy)

    # ── Execution ────────────────────────────────────────────────────────

    def fetch_one(self, spec: QuerySpec) -> Record | dict[str, Any] | None:
        """Return the first match, or None when nothing matches."""
        rows = self._fetch_rows(spec.model_copy(update={"limit": 1}))
        if not rows:
            return None
        return self._create_models(rows, spec)[0]

    def fetch_all(self, spec: QuerySpec) -> list[Any] | dict[Any, Any]:
        """Return every match in engine order.

        When ``spec.index_by`` is set, a dict keyed by that column is
        returned instead of a list.
        """
        rows = self._fetch_rows(spec)
        models = self._create_models(rows, spec)
        if spec.index_by:
            return {row.get(spec.index_by): model for row, model in zip(rows, models)}
        return models

    def fetch_count(self, spec: QuerySpec) -> int:
        """Return the number of matching documents."""
        search = self.connection.get_search(self.model_class)
        compiled = self.prepare(search, spec)
        total = search.count()
        logger.debug("Counted %d documents for %r", total, compiled.query)
        return total

    def exists(self) -> bool:
        raise NotSupportedError("exists() is not supported by search queries.")

    def fetch_related(self, name: str, model: Any) -> Any:
        raise NotSupportedError("Relation queries are not supported by search queries.")

    def via_relation(self, relation_name: str, callable_: Callable[..., Any] | None = None) -> Any:
        raise NotSupportedError("Relation queries are not supported by search queries.")

    # ── Helpers ──────────────────────────────────────────────────────────

    def _fetch_rows(self, spec: QuerySpec) -> list[dict[str, Any]]:
        search = self.connection.get_search(self.model_class)
        compiled = self.prepare(search, spec)
        docs = search.search()
        rows = [doc.get_fields() for doc in docs if isinstance(doc, Document)]
        logger.debug("Fetched %d documents for %r", len(rows), compiled.query)
        return rows

    def _create_models(self, rows: list[dict[str, Any]], spec: QuerySpec) -> list[Any]:
        if spec.as_array or self.model_class is None:
            return rows

        models = self.model_class.create_models(rows)
        for model in models:
            model.after_find()
        return models


def has_limit(limit: Any) -> bool:
    """Whether ``limit`` is a non-negative int or a digit string."""
    if isinstance(limit, bool):
        return False
    if isinstance(limit, int):
        return limit >= 0
    return isinstance(limit, str) and _is_digits(limit)


def has_offset(offset: Any) -> bool:
    """Whether ``offset`` is a positive int or a digit string other than ``"0"``."""
    if isinstance(offset, bool):
        return False
    if isinstance(offset, int):
        return offset > 0
    return isinstance(offset, str) and _is_digits(offset) and offset != "0"


def _is_digits(value: str) -> bool:
    return value.isascii() and value.isdigit()
