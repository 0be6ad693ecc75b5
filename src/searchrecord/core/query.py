"""Query builder — Fluent construction of ``QuerySpec`` objects.

``QueryBuilder`` collects conditions, ordering and paging through chained
calls and freezes them with ``build()``. ``ActiveQuery`` adds execution
against a connection for one record class::

    books = (
        Book.find(conn)
        .where({"genre": ["sf", "fantasy"]})
        .and_where(["WILD", "year", ">=", 1960])
        .order_by("year DESC, title")
        .limit(20)
        .all()
    )
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from searchrecord.core.compiler import ConditionCompiler
from searchrecord.core.executor import QueryExecutor
from searchrecord.models.condition import (
    ConditionNode,
    FieldMapNode,
    LiteralNode,
    Operator,
    OperatorNode,
    parse_condition,
)
from searchrecord.models.query import PageValue, QuerySpec, SortDirection

if TYPE_CHECKING:
    from searchrecord.core.connection import ConnectionResolver
    from searchrecord.models.record import Record

_ORDER_PART = re.compile(r"^(.*?)\s+(asc|desc)$", re.IGNORECASE)


class QueryBuilder:
    """Mutable builder producing immutable ``QuerySpec`` snapshots."""

    def __init__(self) -> None:
        self._where: ConditionNode | None = None
        self._order_by: dict[str, SortDirection] = {}
        self._limit: PageValue = None
        self._offset: PageValue = None
        self._fuzzy = False
        self._as_array = False
        self._index_by: str | None = None

    # ── Conditions ───────────────────────────────────────────────────────

    def where(self, condition: Any) -> QueryBuilder:
        """Replace the query condition."""
        self._where = None if condition is None else parse_condition(condition)
        return self

    def and_where(self, condition: Any) -> QueryBuilder:
        """Add a condition that must hold in addition to the current one."""
        return self._combine(Operator.AND, parse_condition(condition))

    def or_where(self, condition: Any) -> QueryBuilder:
        """Add a condition that may hold instead of the current one."""
        return self._combine(Operator.OR, parse_condition(condition))

    def filter_where(self, condition: Any) -> QueryBuilder:
        """Like ``where()``, but drops operands with empty values first.

        Useful for conditions built straight from optional user input. A
        condition with nothing left after filtering leaves the query as is.
        """
        node = filter_condition(parse_condition(condition))
        if node is not None:
            self._where = node
        return self

    def and_filter_where(self, condition: Any) -> QueryBuilder:
        node = filter_condition(parse_condition(condition))
        if node is not None:
            self._combine(Operator.AND, node)
        return self

    def or_filter_where(self, condition: Any) -> QueryBuilder:
        node = filter_condition(parse_condition(condition))
        if node is not None:
            self._combine(Operator.OR, node)
        return self

    def _combine(self, operator: Operator, node: ConditionNode) -> QueryBuilder:
        current = self._where
        if current is None:
            self._where = node
        elif isinstance(current, OperatorNode) and current.name == operator.value:
            self._where = OperatorNode(name=current.name, operands=(*current.operands, node))
        else:
            self._where = OperatorNode(name=operator.value, operands=(current, node))
        return self

    # ── Ordering and paging ──────────────────────────────────────────────

    def order_by(self, columns: Any) -> QueryBuilder:
        """Replace the sort columns.

        Args:
            columns: ``"year DESC, title"``, a list of column names, or a
                mapping of column -> direction (``SortDirection``, ``"asc"``
                or ``"desc"``).
        """
        self._order_by = normalize_order_by(columns)
        return self

    def add_order_by(self, columns: Any) -> QueryBuilder:
        """Append sort columns after the existing ones."""
        self._order_by = {**self._order_by, **normalize_order_by(columns)}
        return self

    def limit(self, limit: PageValue) -> QueryBuilder:
        self._limit = limit
        return self

    def offset(self, offset: PageValue) -> QueryBuilder:
        self._offset = offset
        return self

    def fuzzy(self, value: bool = True) -> QueryBuilder:
        """Match documents containing any query term rather than all of them."""
        self._fuzzy = value
        return self

    def as_array(self, value: bool = True) -> QueryBuilder:
        """Return field mappings instead of records."""
        self._as_array = value
        return self

    def index_by(self, column: str | None) -> QueryBuilder:
        """Key ``all()`` results by ``column``."""
        self._index_by = column
        return self

    def build(self) -> QuerySpec:
        return QuerySpec(
            where=self._where,
            order_by=dict(self._order_by),
            limit=self._limit,
            offset=self._offset,
            fuzzy=self._fuzzy,
            as_array=self._as_array,
            index_by=self._index_by,
        )


class ActiveQuery(QueryBuilder):
    """Query builder bound to a record class and a connection.

    Args:
        model_class: Record class results are hydrated into.
        connection: Resolver providing ``Search`` objects.
        compiler: Condition compiler; a default one if None.
    """

    def __init__(
        self,
        model_class: type[Record] | None,
        connection: ConnectionResolver,
        compiler: ConditionCompiler | None = None,
    ) -> None:
        super().__init__()
        self.model_class = model_class
        self._executor = QueryExecutor(connection, model_class, compiler)

    @property
    def executor(self) -> QueryExecutor:
        return self._executor

    @property
    def query(self) -> str | None:
        """The query string sent by the last execution, for inspection."""
        return self._executor.query

    def one(self) -> Record | dict[str, Any] | None:
        """Return the first matching record, or None."""
        return self._executor.fetch_one(self.build())

    def all(self) -> list[Any] | dict[Any, Any]:
        """Return all matching records."""
        return self._executor.fetch_all(self.build())

    def count(self) -> int:
        """Return the number of matching records."""
        return self._executor.fetch_count(self.build())

    def exists(self) -> bool:
        return self._executor.exists()

    def find_for(self, name: str, model: Any) -> Any:
        return self._executor.fetch_related(name, model)

    def via(self, relation_name: str, callable_: Callable[..., Any] | None = None) -> Any:
        return self._executor.via_relation(relation_name, callable_)


def normalize_order_by(columns: Any) -> dict[str, SortDirection]:
    """Turn the accepted ``order_by`` forms into column -> ``SortDirection``."""
    if not columns:
        return {}
    if isinstance(columns, str):
        result: dict[str, SortDirection] = {}
        for part in columns.split(","):
            part = part.strip()
            if not part:
                continue
            match = _ORDER_PART.match(part)
            if match:
                result[match.group(1)] = SortDirection(match.group(2).lower())
            else:
                result[part] = SortDirection.ASC
        return result
    if isinstance(columns, Mapping):
        return {str(name): _direction(direction) for name, direction in columns.items()}
    return {str(name): SortDirection.ASC for name in columns}


def _direction(value: Any) -> SortDirection:
    if isinstance(value, SortDirection):
        return value
    if isinstance(value, str) and value.strip().lower() == "desc":
        return SortDirection.DESC
    return SortDirection.ASC


def filter_condition(node: ConditionNode) -> ConditionNode | None:
    """Remove operands with empty values from ``node``.

    Returns:
        The filtered node, or None when nothing is left.
    """
    if isinstance(node, LiteralNode):
        return None if not node.text.strip() else node
    if isinstance(node, FieldMapNode):
        entries = tuple((field, value) for field, value in node.entries if not _is_empty(value))
        return FieldMapNode(entries=entries) if entries else None

    op = node.operator
    if op is Operator.AND or op is Operator.OR:
        operands = tuple(kept for kept in (filter_condition(o) for o in node.operands) if kept is not None)
        return OperatorNode(name=node.name, operands=operands) if operands else None
    if op is Operator.NOT:
        if len(node.operands) != 1:
            return node
        operand = filter_condition(node.operands[0])
        return OperatorNode(name=node.name, operands=(operand,)) if operand is not None else None
    if any(filter_condition(o) is None for o in node.operands):
        return None
    return node


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return len(value) == 0
