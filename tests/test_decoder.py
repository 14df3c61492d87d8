"""Decoder rules per node kind, error accumulation and paths."""

from __future__ import annotations

import math

import pytest

from shapekit import schema as S
from shapekit.ast import Declaration, Struct, Symbol
from shapekit.core.errors import (
    ErrorCode,
    Failure,
    Grade,
    MissingProviderError,
    Success,
    UnsupportedNodeError,
    Warning,
)
from shapekit.core.validation import DecodeFailedError, custom, min_length, non_nan
from shapekit.engines import decode, decode_or_raise, decoder_for, is_valid


def kinds(result):
    return [e.kind for e in result.errors]


class TestScalars:
    def test_literal_is_strict(self):
        assert decode(S.literal(1), 1) == Success(1)
        assert decode(S.literal(1), True).is_failure()
        assert decode(S.literal(1), 1.0).is_failure()
        assert kinds(decode(S.literal("a"), "b")) == [ErrorCode.E2002_LITERAL_MISMATCH]

    def test_null_literal(self):
        assert decode(S.literal(None), None) == Success(None)

    @pytest.mark.parametrize("schema,good,bad", [
        (S.string, "x", 1),
        (S.number, 1.5, "1.5"),
        (S.number, float("inf"), True),
        (S.boolean, False, 0),
        (S.bigint, 10 ** 30, 1.0),
        (S.undefined, None, 0),
        (S.object_, {"a": 1}, "a"),
    ])
    def test_keywords(self, schema, good, bad):
        assert decode(schema, good).is_success()
        result = decode(schema, bad)
        assert kinds(result) == [ErrorCode.E2001_TYPE_MISMATCH]

    def test_nan_number_is_a_warning(self):
        result = decode(S.number, float("nan"))
        assert isinstance(result, Warning)
        assert math.isnan(result.value)
        assert kinds(result) == [ErrorCode.E2009_REFINEMENT_FAILED]
        assert result.errors[0].details["meta"] == "not(isNaN)"
        assert is_valid(S.number, float("nan"))

    def test_nan_warning_carries_field_path(self):
        result = decode(S.struct({"x": S.number}), {"x": float("nan")})
        assert result.is_warning()
        assert result.errors[0].path == ("x",)

    def test_unknown_and_any_accept_everything(self):
        for value in (None, 1, "x", [1], {"a": 1}):
            assert decode(S.unknown, value) == Success(value)
            assert decode(S.any_, value) == Success(value)

    def test_never_rejects_everything(self):
        assert decode(S.never, None).is_failure()

    def test_unique_symbol_is_identity(self):
        sym = Symbol("token")
        assert decode(S.unique_symbol(sym), sym) == Success(sym)
        assert decode(S.unique_symbol(sym), Symbol("token")).is_failure()

    def test_enums(self):
        colors = S.enums({"Red": "r", "Green": "g"})
        assert decode(colors, "g") == Success("g")
        result = decode(colors, "b")
        assert kinds(result) == [ErrorCode.E2003_ENUM_MISMATCH]
        assert result.errors[0].details["expected"] == ("r", "g")


class TestTuple:
    def test_decodes_positionally(self):
        assert decode(S.tuple_(S.string, S.number), ["a", 1]) == Success(["a", 1])
        assert decode(S.tuple_(S.string, S.number), ("a", 1)) == Success(["a", 1])

    def test_rejects_non_sequences(self):
        assert kinds(decode(S.tuple_(S.string), "a")) == [ErrorCode.E2001_TYPE_MISMATCH]

    def test_missing_required_index(self):
        result = decode(S.tuple_(S.string, S.number), ["a"])
        assert kinds(result) == [ErrorCode.E2005_MISSING_INDEX]
        assert result.errors[0].path == (1,)

    def test_missing_optional_index_is_skipped(self):
        schema = S.tuple_(S.string, S.optional(S.number))
        assert decode(schema, ["a"]) == Success(["a"])

    def test_rest_decodes_tail(self):
        schema = S.rest(S.tuple_(S.string), S.number)
        assert decode(schema, ["a", 1, 2]) == Success(["a", 1, 2])
        result = decode(schema, ["a", 1, "x", "y"])
        assert [e.path for e in result.errors] == [(2,), (3,)]

    def test_unexpected_index(self):
        result = decode(S.tuple_(S.string), ["a", 1, 2])
        assert kinds(result) == [ErrorCode.E2007_UNEXPECTED_INDEX] * 2
        assert [e.path for e in result.errors] == [(1,), (2,)]

    def test_allowed_unexpected_index_passes_through(self):
        schema = S.allow_unexpected(S.tuple_(S.string))
        assert decode(schema, ["a", 1, {"b": 2}]) == Success(["a", 1, {"b": 2}])

    def test_accumulates_every_position(self):
        result = decode(S.tuple_(S.string, S.number, S.boolean), [1, "x"])
        assert [e.path for e in result.errors] == [(0,), (1,), (2,)]


class TestStruct:
    def test_decodes_fields(self, person):
        value = {"name": "Ada", "tags": ["x"]}
        assert decode(person, value) == Success(value)

    def test_rejects_non_mappings(self, person):
        assert kinds(decode(person, ["Ada"])) == [ErrorCode.E2001_TYPE_MISMATCH]

    def test_accumulates_all_missing_keys(self):
        schema = S.struct({"a": S.string, "b": S.number})
        result = decode(schema, {})
        assert isinstance(result, Failure)
        assert kinds(result) == [ErrorCode.E2004_MISSING_KEY] * 2
        assert [e.path for e in result.errors] == [("a",), ("b",)]

    def test_nested_paths(self, person):
        result = decode(person, {"name": "Ada", "tags": ["x", 2]})
        assert [e.path for e in result.errors] == [("tags", 1)]

    def test_unexpected_key_disallowed(self):
        result = decode(S.struct({"a": S.number}), {"a": 1, "x": 2})
        assert kinds(result) == [ErrorCode.E2006_UNEXPECTED_KEY]
        assert result.errors[0].path == ("x",)

    def test_unexpected_key_allowed_is_dropped(self):
        schema = S.allow_unexpected(S.struct({"a": S.number}))
        assert decode(schema, {"a": 1, "x": 2}) == Success({"a": 1})

    def test_index_signature(self):
        schema = S.record(S.string, S.number)
        assert decode(schema, {"a": 1, "b": 2}) == Success({"a": 1, "b": 2})
        result = decode(schema, {"a": "x"})
        assert [e.path for e in result.errors] == [("a",)]

    def test_first_matching_signature_wins(self):
        schema = Struct((), (
            S.record(S.literal("a"), S.string).index_signatures[0],
            S.record(S.string, S.number).index_signatures[0],
        ))
        assert decode(schema, {"a": "x", "b": 1}) == Success({"a": "x", "b": 1})

    def test_output_order_is_declaration_then_input(self):
        schema = S.extend(S.struct({"a": S.number, "b": S.number}), S.record(S.string, S.number))
        result = decode(schema, {"z": 0, "b": 2, "a": 1})
        assert list(result.value) == ["a", "b", "z"]

    def test_symbol_keys(self):
        key = Symbol("k")
        schema = S.struct({key: S.number})
        assert decode(schema, {key: 1}) == Success({key: 1})


class TestUnion:
    def test_first_accepting_member_wins(self):
        schema = S.union(S.string, S.number)
        assert decode(schema, "a") == Success("a")
        assert decode(schema, 1) == Success(1)

    def test_no_match_reports_each_member(self):
        schema = S.union(S.string, S.number)
        result = decode(schema, True)
        assert kinds(result) == [ErrorCode.E2008_UNION_MEMBER] * 2
        assert [e.details["member"] for e in result.errors] == [0, 1]
        assert result.errors[0].details["errors"][0].kind is ErrorCode.E2001_TYPE_MISMATCH

    def test_order_decides_between_overlapping_members(self):
        tagged = S.type_alias(S.string, annotations={
            "decoder_hook": lambda: (lambda v: Success(("tagged", v))),
        })
        assert decode(S.union(tagged, S.string), "a") == Success(("tagged", "a"))
        assert decode(S.union(S.string, tagged), "a") == Success("a")

    def test_nested_union_errors_keep_relative_paths(self):
        schema = S.struct({"v": S.union(S.struct({"a": S.string}), S.number)})
        result = decode(schema, {"v": {"a": 1}})
        assert result.errors[0].path == ("v",)
        assert result.errors[0].details["errors"][0].path == ("a",)


class TestRefinement:
    def test_failure_by_default(self):
        schema = S.filter(S.string, min_length(2))
        assert decode(schema, "ab") == Success("ab")
        result = decode(schema, "a")
        assert kinds(result) == [ErrorCode.E2009_REFINEMENT_FAILED]
        assert result.errors[0].details["meta"] == "minLength(2)"

    def test_warning_policy_keeps_value(self):
        schema = S.filter(S.number, non_nan(), on_failure=Grade.WARNING)
        result = decode(schema, float("nan"))
        assert isinstance(result, Warning)
        assert math.isnan(result.value)

    def test_predicate_not_run_on_failure(self):
        calls = []
        schema = S.refine(S.number, lambda v: calls.append(v) or True)
        assert decode(schema, "x").is_failure()
        assert calls == []

    def test_custom_message(self):
        schema = S.filter(S.string, min_length(2), message="too short")
        assert decode(schema, "a").errors[0].message == "too short"

    def test_nested_refinements_apply_in_order(self):
        schema = S.filter(S.filter(S.number, non_nan(), on_failure=Grade.WARNING), custom(lambda v: v == v, "self-equal"))
        result = decode(schema, float("nan"))
        assert result.grade is Grade.FAILURE
        assert [e.details["meta"] for e in result.errors] == ["not(isNaN)", "nonNaN", "self-equal"]


class TestLazy:
    def test_recursive_schema(self, linked_list):
        value = {"head": 1, "tail": {"head": 2, "tail": None}}
        assert decode(linked_list, value) == Success(value)

    def test_recursive_error_path(self, linked_list):
        result = decode(linked_list, {"head": 1, "tail": {"head": "x", "tail": None}})
        assert result.is_failure()

    def test_thunk_resolved_once_per_derivation(self):
        calls = []

        def thunk():
            calls.append(1)
            return shape

        node = S.lazy(thunk)
        shape = S.struct({"a": S.optional(node), "b": S.optional(node)})
        decoder_for(shape)
        assert calls == [1]


class TestDerivationErrors:
    def test_missing_provider(self):
        with pytest.raises(MissingProviderError) as exc:
            decoder_for(Declaration("unknown/Type"))
        assert exc.value.metadata == {"artifact": "decoder", "declaration_id": "unknown/Type"}

    def test_unsupported_node(self):
        with pytest.raises(UnsupportedNodeError):
            decoder_for("not a node")


class TestDecodeOrRaise:
    def test_returns_value(self, person):
        assert decode_or_raise(person, {"name": "Ada", "tags": []}) == {"name": "Ada", "tags": []}

    def test_raises_with_report(self):
        with pytest.raises(DecodeFailedError) as exc:
            decode_or_raise(S.struct({"a": S.string, "b": S.number}), {})
        report = str(exc.value)
        assert report.splitlines()[0] == "2 error(s) found"
        assert '├─ ["a"]: missing key "a"' in report
        assert '└─ ["b"]: missing key "b"' in report
        assert exc.value.to_dict()["error"]["error_count"] == 2
