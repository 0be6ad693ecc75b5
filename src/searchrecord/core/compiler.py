"""Condition compiler — Renders a condition tree as a search-engine query string.

The output is the Lucene-style syntax understood by the supported engines:

  - ``{"city": "NY"}``                         -> ``city:NY``
  - ``{"city": "NY", "type": "shop"}``         -> ``(city:NY) AND (type:shop)``
  - ``{"type": ["a", "b"]}``                   -> ``(type:a) OR (type:b)``
  - ``["OR", {"a": 1}, ["NOT", {"b": 2}]]``    -> ``(a:1) OR (NOT (b:2))``
  - ``["WILD", "age", ">=", "18"]``            -> ``age >= 18``

Unknown operator tokens are rendered as ``TOKEN operand operand ...`` so that
callers can pass engine syntax the compiler has no rule for.
"""

from __future__ import annotations

from typing import Any

from searchrecord.core.exceptions import InvalidOperandCountError
from searchrecord.models.condition import (
    ConditionNode,
    FieldMapNode,
    LiteralNode,
    Operator,
    OperatorNode,
    parse_condition,
)


class ConditionCompiler:
    """Stateless translator from ``ConditionNode`` trees to query strings.

    Args:
        group_hash_fields: Controls hash conditions holding a multi-valued
            field. When False (default), the first multi-valued field
            short-circuits: only its alternatives are returned, OR-joined,
            and every other entry of the mapping is ignored. When True, each
            multi-valued field becomes one OR group and all entries are
            AND-joined.
    """

    def __init__(self, group_hash_fields: bool = False) -> None:
        self.group_hash_fields = group_hash_fields

    def compile(self, condition: Any) -> str:
        """Compile a raw condition or parsed node into a query string.

        Raises:
            InvalidOperandCountError: If a ``NOT`` condition does not have
                exactly one operand.
        """
        node = parse_condition(condition)
        if isinstance(node, LiteralNode):
            return node.text
        if isinstance(node, OperatorNode):
            return self._build_operator(node)
        return self._build_hash(node)

    def build_where(self, condition: Any) -> str:
        """Compile the ``where`` part of a query; None means no filter."""
        if condition is None:
            return ""
        return self.compile(condition)

    # ── Operator form ────────────────────────────────────────────────────

    def _build_operator(self, node: OperatorNode) -> str:
        op = node.operator
        if op is Operator.AND or op is Operator.OR:
            return self._build_junction(node.name, node.operands)
        if op is Operator.NOT:
            return self._build_not(node.name, node.operands)
        if op is Operator.WILD:
            return self._build_wild(node.operands)
        return self._build_simple(node.name, node.operands)

    def _build_junction(self, name: str, operands: tuple[ConditionNode, ...]) -> str:
        parts = [part for part in (self.compile(operand) for operand in operands) if part != ""]
        if not parts:
            return ""
        return "(" + f") {name} (".join(parts) + ")"

    def _build_not(self, name: str, operands: tuple[ConditionNode, ...]) -> str:
        if len(operands) != 1:
            raise InvalidOperandCountError(f"Operator '{name}' requires exactly one operand.")

        operand = self.compile(operands[0])
        if operand == "":
            return ""
        return f"{name} ({operand})"

    def _build_wild(self, operands: tuple[ConditionNode, ...]) -> str:
        # Compiled output only decides emptiness; the tokens are emitted as given.
        if not any(self.compile(operand) != "" for operand in operands):
            return ""
        return " ".join(self._token(operand) for operand in operands)

    def _build_simple(self, name: str, operands: tuple[ConditionNode, ...]) -> str:
        return name + " " + " ".join(self._token(operand) for operand in operands)

    def _token(self, operand: ConditionNode) -> str:
        if isinstance(operand, LiteralNode):
            return operand.text
        return self.compile(operand)

    # ── Hash form ────────────────────────────────────────────────────────

    def _build_hash(self, node: FieldMapNode) -> str:
        if self.group_hash_fields:
            return self._build_grouped_hash(node)

        parts: list[str] = []
        for field, value in node.entries:
            if isinstance(value, tuple):
                alternatives = [f"{field}:{v}" for v in value]
                return _join(alternatives, "OR")
            if value is not None:
                parts.append(f"{field}:{value}")
        return _join(parts, "AND")

    def _build_grouped_hash(self, node: FieldMapNode) -> str:
        parts: list[str] = []
        for field, value in node.entries:
            if isinstance(value, tuple):
                group = _join([f"{field}:{v}" for v in value], "OR")
                if group:
                    parts.append(group)
            elif value is not None:
                parts.append(f"{field}:{value}")
        return _join(parts, "AND")


def _join(parts: list[str], operator: str) -> str:
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    return "(" + f") {operator} (".join(parts) + ")"


def compile_condition(condition: Any, group_hash_fields: bool = False) -> str:
    """Compile ``condition`` with a one-off ``ConditionCompiler``."""
    return ConditionCompiler(group_hash_fields=group_hash_fields).compile(condition)
