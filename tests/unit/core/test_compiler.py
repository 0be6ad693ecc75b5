"""Tests for the condition compiler."""

from __future__ import annotations

import pytest

from searchrecord.core.compiler import ConditionCompiler, compile_condition
from searchrecord.core.exceptions import InvalidArgumentError, InvalidOperandCountError
from searchrecord.models.condition import FieldMapNode, LiteralNode, OperatorNode


@pytest.fixture
def compiler() -> ConditionCompiler:
    return ConditionCompiler()


# ── Literals and empties ─────────────────────────────────────────────────────


class TestLiteralsAndEmpty:
    def test_string_passes_through(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile("title:dune AND year:[1960 TO 1970]") == "title:dune AND year:[1960 TO 1970]"

    def test_empty_mapping(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({}) == ""

    def test_empty_list(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile([]) == ""

    def test_none_where_is_no_filter(self, compiler: ConditionCompiler) -> None:
        assert compiler.build_where(None) == ""

    def test_parsed_node_accepted(self, compiler: ConditionCompiler) -> None:
        node = OperatorNode(name="NOT", operands=(LiteralNode(text="city:NY"),))
        assert compiler.compile(node) == "NOT (city:NY)"


# ── Hash form ────────────────────────────────────────────────────────────────


class TestHashCondition:
    def test_single_field_is_bare(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({"city": "NY"}) == "city:NY"

    def test_fields_are_anded(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({"city": "NY", "type": "shop"}) == "(city:NY) AND (type:shop)"

    def test_none_values_skipped(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({"city": "NY", "type": None}) == "city:NY"

    def test_all_none_is_empty(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({"city": None}) == ""

    def test_multi_valued_field_is_ored(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({"type": ["a", "b", "c"]}) == "(type:a) OR (type:b) OR (type:c)"

    def test_single_member_set_is_bare(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({"type": ["a"]}) == "type:a"

    def test_multi_valued_field_discards_earlier_fields(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({"status": "active", "type": ["a", "b"]}) == "(type:a) OR (type:b)"

    def test_only_first_multi_valued_field_compiled(self, compiler: ConditionCompiler) -> None:
        result = compiler.compile({"type": ["a", "b"], "status": "active", "tag": ["x", "y"]})
        assert result == "(type:a) OR (type:b)"

    def test_scalars_are_stringified(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({"year": 1969, "available": True}) == "(year:1969) AND (available:true)"

    def test_tuple_values_are_multi_valued(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile({"year": (1965, 1969)}) == "(year:1965) OR (year:1969)"


class TestGroupedHashCondition:
    @pytest.fixture
    def grouped(self) -> ConditionCompiler:
        return ConditionCompiler(group_hash_fields=True)

    def test_multi_valued_field_grouped(self, grouped: ConditionCompiler) -> None:
        result = grouped.compile({"status": "active", "type": ["a", "b"]})
        assert result == "(status:active) AND ((type:a) OR (type:b))"

    def test_several_multi_valued_fields(self, grouped: ConditionCompiler) -> None:
        result = grouped.compile({"type": ["a", "b"], "tag": ["x"]})
        assert result == "((type:a) OR (type:b)) AND (tag:x)"

    def test_empty_set_dropped(self, grouped: ConditionCompiler) -> None:
        assert grouped.compile({"type": [], "city": "NY"}) == "city:NY"

    def test_scalar_only_matches_default(self, grouped: ConditionCompiler, compiler: ConditionCompiler) -> None:
        condition = {"city": "NY", "type": "shop"}
        assert grouped.compile(condition) == compiler.compile(condition)


# ── AND / OR ─────────────────────────────────────────────────────────────────


class TestJunctions:
    def test_and(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["AND", {"a": "1"}, {"b": "2"}]) == "(a:1) AND (b:2)"

    def test_or(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["OR", {"a": "1"}, "b:2"]) == "(a:1) OR (b:2)"

    def test_operator_is_case_insensitive(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["or", "a:1", "b:2"]) == "(a:1) OR (b:2)"

    def test_empty_operands_elided(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["AND", {}, "a:1", {"b": None}, "b:2"]) == "(a:1) AND (b:2)"

    def test_all_empty_is_empty(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["AND", {}, [], ""]) == ""

    def test_no_operands_is_empty(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["OR"]) == ""

    def test_single_operand_still_parenthesized(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["AND", "a:1"]) == "(a:1)"

    def test_nested(self, compiler: ConditionCompiler) -> None:
        condition = ["AND", {"city": "NY"}, ["OR", {"type": "shop"}, ["NOT", {"closed": True}]]]
        assert compiler.compile(condition) == "(city:NY) AND ((type:shop) OR (NOT (closed:true)))"

    def test_and_matches_composition(self, compiler: ConditionCompiler) -> None:
        a = {"city": "NY", "type": "shop"}
        b = ["WILD", "rating", ">=", "4"]
        expected = "(" + compiler.compile(a) + ") AND (" + compiler.compile(b) + ")"
        assert compiler.compile(["AND", a, b]) == expected


# ── NOT ──────────────────────────────────────────────────────────────────────


class TestNot:
    def test_not(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["NOT", {"city": "NY"}]) == "NOT (city:NY)"

    def test_not_literal(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["not", "city:NY"]) == "NOT (city:NY)"

    def test_not_empty_operand(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["NOT", {}]) == ""

    def test_not_without_operand_raises(self, compiler: ConditionCompiler) -> None:
        with pytest.raises(InvalidOperandCountError, match="exactly one operand"):
            compiler.compile(["NOT"])

    def test_not_with_two_operands_raises(self, compiler: ConditionCompiler) -> None:
        with pytest.raises(InvalidOperandCountError):
            compiler.compile(["NOT", "a:1", "b:2"])

    def test_nested_not_error_propagates(self, compiler: ConditionCompiler) -> None:
        with pytest.raises(InvalidOperandCountError):
            compiler.compile(["AND", "a:1", ["NOT", "b:2", "c:3"]])

    def test_error_is_invalid_argument(self) -> None:
        assert issubclass(InvalidOperandCountError, InvalidArgumentError)
        assert issubclass(InvalidOperandCountError, ValueError)


# ── WILD and generic operators ───────────────────────────────────────────────


class TestWild:
    def test_operands_joined_verbatim(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["WILD", "age", ">=", "18"]) == "age >= 18"

    def test_numbers_stringified(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["WILD", "age", ">=", 18]) == "age >= 18"

    def test_no_parentheses_inside_and(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["AND", ["WILD", "age", ">=", "18"], {"city": "NY"}]) == "(age >= 18) AND (city:NY)"

    def test_all_empty_is_empty(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["WILD", "", ""]) == ""

    def test_empty_tokens_kept_when_any_survive(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["WILD", "a", "", "b"]) == "a  b"

    def test_no_operands(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["WILD"]) == ""


class TestGenericOperator:
    def test_unknown_operator_passes_through(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["range", "year:[1960", "TO", "1970]"]) == "RANGE year:[1960 TO 1970]"

    def test_no_parentheses(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile([">=", "age", "18"]) == ">= age 18"

    def test_without_operands_keeps_separator(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["FOO"]) == "FOO "

    def test_nested_operand_rendered(self, compiler: ConditionCompiler) -> None:
        assert compiler.compile(["BOOST", {"city": "NY"}, "^2"]) == "BOOST city:NY ^2"


# ── Helpers ──────────────────────────────────────────────────────────────────


class TestCompileCondition:
    def test_default(self) -> None:
        assert compile_condition({"status": "active", "type": ["a", "b"]}) == "(type:a) OR (type:b)"

    def test_grouped(self) -> None:
        result = compile_condition({"status": "active", "type": ["a", "b"]}, group_hash_fields=True)
        assert result == "(status:active) AND ((type:a) OR (type:b))"

    def test_field_map_node(self) -> None:
        node = FieldMapNode(entries=(("city", "NY"), ("type", ("a", "b"))))
        assert compile_condition(node) == "(type:a) OR (type:b)"
