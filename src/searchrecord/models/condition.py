"""Condition tree models — the parsed form of a ``where`` specification.

A raw condition is whatever callers pass to ``where()``:

  - a string, used verbatim as a query fragment
  - a mapping (hash form), ``{"status": "active", "type": ["a", "b"]}``
  - a sequence (operator form), ``["AND", {...}, ["NOT", {...}]]``

``parse_condition()`` decides which of the three node types a raw value is
exactly once, so the compiler only dispatches on node classes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

FieldValue = Union[str, tuple[str, ...], None]
"""Value of a hash-form entry: a scalar, a set of alternatives, or absent."""


class Operator(str, Enum):
    """Operators the compiler knows how to render."""

    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    WILD = "WILD"


class LiteralNode(BaseModel):
    """A raw query fragment passed through unchanged."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Query fragment in the engine's syntax")


class OperatorNode(BaseModel):
    """Operator form: ``[name, operand, operand, ...]``."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Uppercased operator token")
    operands: tuple[ConditionNode, ...] = Field(default=(), description="Operands in input order")

    @property
    def operator(self) -> Operator | None:
        """The known operator for ``name``, or None for a generic condition."""
        try:
            return Operator(self.name)
        except ValueError:
            return None


class FieldMapNode(BaseModel):
    """Hash form: ordered ``field -> value`` pairs."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[tuple[str, FieldValue], ...] = Field(default=(), description="Field/value pairs in input order")


ConditionNode = Union[LiteralNode, OperatorNode, FieldMapNode]

OperatorNode.model_rebuild()


def parse_condition(condition: Any) -> ConditionNode:
    """Turn a raw condition specification into a ``ConditionNode``.

    Args:
        condition: A string, mapping, sequence, already-parsed node, or None.

    Returns:
        The parsed node. ``None`` and empty containers become an empty
        ``FieldMapNode`` which compiles to an empty string.
    """
    if isinstance(condition, (LiteralNode, OperatorNode, FieldMapNode)):
        return condition
    if condition is None:
        return FieldMapNode()
    if isinstance(condition, str):
        return LiteralNode(text=condition)
    if isinstance(condition, Mapping):
        return FieldMapNode(entries=tuple((str(k), _field_value(v)) for k, v in condition.items()))
    if _is_sequence(condition):
        if len(condition) == 0:
            return FieldMapNode()
        return OperatorNode(
            name=stringify(condition[0]).upper(),
            operands=tuple(_parse_operand(op) for op in condition[1:]),
        )
    return LiteralNode(text=stringify(condition))


def stringify(value: Any) -> str:
    """Render a scalar the way it appears inside a query string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_operand(operand: Any) -> ConditionNode:
    if isinstance(operand, (Mapping, LiteralNode, OperatorNode, FieldMapNode)) or _is_sequence(operand):
        return parse_condition(operand)
    return LiteralNode(text=stringify(operand))


def _field_value(value: Any) -> FieldValue:
    if value is None:
        return None
    if _is_sequence(value) or isinstance(value, (set, frozenset)):
        return tuple(stringify(v) for v in value)
    return stringify(value)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))
