"""AST construction invariants and structural combinators."""

from __future__ import annotations

import dataclasses

import pytest

from shapekit import schema as S
from shapekit.ast import (
    EMPTY_ANNOTATIONS,
    NODE_TYPES,
    AnnotationKey,
    Element,
    Field,
    Keyword,
    KeywordKind,
    Lazy,
    Literal,
    Struct,
    Symbol,
    Tuple,
    Union,
    append_element,
    append_rest,
    extend,
    get_annotation,
    get_fields,
    keyof,
    never_keyword,
    node_size,
    omit,
    partial,
    pick,
    union,
    with_annotations,
)
from shapekit.core.errors import Grade, InvalidSchemaError


class TestNodes:
    @pytest.mark.parametrize("node_type", NODE_TYPES, ids=lambda t: t.__name__)
    def test_annotation_default_is_a_factory(self, node_type):
        annotations = next(f for f in dataclasses.fields(node_type) if f.name == "annotations")
        assert annotations.default is dataclasses.MISSING
        assert annotations.default_factory() is EMPTY_ANNOTATIONS

    def test_literal_rejects_non_primitive(self):
        with pytest.raises(InvalidSchemaError):
            Literal([1])

    def test_struct_rejects_duplicate_keys(self):
        with pytest.raises(InvalidSchemaError):
            Struct((Field("a", S.string), Field("a", S.number)))

    def test_tuple_rejects_required_after_optional(self):
        with pytest.raises(InvalidSchemaError):
            Tuple((Element(S.string, True), Element(S.number)))

    def test_union_requires_two_flat_members(self):
        with pytest.raises(InvalidSchemaError):
            Union((S.string,))
        with pytest.raises(InvalidSchemaError):
            Union((S.string, Union((S.number, S.boolean))))

    def test_refinement_rejects_success_policy(self):
        with pytest.raises(InvalidSchemaError):
            S.refine(S.number, lambda n: n > 0, on_failure=Grade.SUCCESS)

    def test_annotations_are_read_only(self):
        node = Keyword(KeywordKind.STRING, {"title": "Name"})
        with pytest.raises(TypeError):
            node.annotations["title"] = "Other"

    def test_unknown_annotation_is_none(self):
        assert get_annotation(S.string, "nope") is None
        assert get_annotation(S.string, AnnotationKey.TITLE) is None

    def test_annotation_lookup_accepts_both_spellings(self):
        node = with_annotations(S.string, {AnnotationKey.TITLE: "Name"})
        assert get_annotation(node, "title") == "Name"
        assert get_annotation(node, AnnotationKey.TITLE) == "Name"

    def test_with_annotations_does_not_mutate(self):
        node = with_annotations(S.string, {"x": 1})
        assert get_annotation(S.string, "x") is None
        assert get_annotation(node, "x") == 1

    def test_symbols_are_unique_unless_interned(self):
        assert Symbol("a") is not Symbol("a")
        assert Symbol.for_("a") is Symbol.for_("a")
        assert repr(Symbol("desc")) == "Symbol(desc)"

    def test_node_size_does_not_resolve_lazy(self):
        calls = []
        lazy = Lazy(lambda: calls.append(1) or S.string)
        assert node_size(S.struct({"a": lazy, "b": S.number})) == 3
        assert calls == []


class TestUnion:
    def test_empty_is_never(self):
        assert union([]) is never_keyword

    def test_single_member_is_returned(self):
        assert union([S.string]) is S.string

    def test_flattens_in_order(self):
        inner = union([S.number, S.boolean])
        result = union([S.string, inner, S.bigint])
        assert isinstance(result, Union)
        assert result.members == (S.string, S.number, S.boolean, S.bigint)


class TestTupleCombinators:
    def test_append_element_after_rest_fails(self):
        with pytest.raises(InvalidSchemaError):
            S.element(S.array(S.string), S.number)

    def test_second_rest_fails(self):
        with pytest.raises(InvalidSchemaError):
            append_rest(S.array(S.string), S.number)

    def test_required_after_optional_fails(self):
        tup = S.optional_element(S.tuple_(S.string), S.number)
        with pytest.raises(InvalidSchemaError):
            S.element(tup, S.boolean)

    def test_tuple_only_on_tuples(self):
        with pytest.raises(InvalidSchemaError):
            append_element(S.struct({}), Element(S.string))

    def test_builds_new_nodes(self):
        base = S.tuple_(S.string)
        extended = S.element(base, S.number)
        assert len(base.elements) == 1
        assert len(extended.elements) == 2


class TestStructCombinators:
    def test_pick_and_omit(self, person):
        assert [f.key for f in pick(person, ["tags", "name"]).fields] == ["name", "tags"]
        assert [f.key for f in omit(person, ["age"]).fields] == ["name", "tags"]

    def test_pick_unknown_key_fails(self, person):
        with pytest.raises(InvalidSchemaError):
            pick(person, ["nope"])

    def test_partial(self, person):
        assert all(f.is_optional for f in partial(person).fields)
        assert all(e.is_optional for e in partial(S.tuple_(S.string, S.number)).elements)

    def test_partial_leaves_scalars(self):
        assert partial(S.string) is S.string

    def test_extend_concatenates(self):
        result = extend(S.struct({"a": S.string}), S.struct({"b": S.number}))
        assert [f.key for f in result.fields] == ["a", "b"]

    def test_extend_rejects_duplicates(self):
        with pytest.raises(InvalidSchemaError):
            extend(S.struct({"a": S.string}), S.struct({"a": S.number}))

    def test_extend_requires_structs(self):
        with pytest.raises(InvalidSchemaError):
            extend(S.struct({"a": S.string}), S.string)

    @pytest.mark.parametrize("op", [omit, pick])
    def test_pick_and_omit_require_structs(self, op):
        for ast in (S.string, S.tuple_(S.string), S.union(S.struct({"a": S.string}), S.number)):
            with pytest.raises(InvalidSchemaError):
                op(ast, [])

    def test_omit_sees_through_wrappers(self, person):
        wrapped = S.type_alias(S.refine(person, lambda v: True))
        assert [f.key for f in omit(wrapped, ["age"]).fields] == ["name", "tags"]

    def test_get_fields_through_wrappers(self, person):
        wrapped = Lazy(lambda: S.type_alias(S.refine(person, lambda v: True)))
        assert [f.key for f in get_fields(wrapped)] == ["name", "age", "tags"]

    def test_get_fields_of_union_keeps_common_keys(self):
        a = S.struct({"kind": S.literal("a"), "x": S.number})
        b = S.struct({"kind": S.literal("b"), "y": S.optional(S.string)})
        fields = get_fields(S.union(a, b))
        assert [f.key for f in fields] == ["kind"]
        assert fields[0].ast == union([Literal("a"), Literal("b")])

    def test_keyof(self):
        assert keyof(S.struct({"a": S.string, "b": S.number})) == union([Literal("a"), Literal("b")])
        assert keyof(S.tuple_(S.string)) == Literal(0)

    def test_allow_unexpected_toggles(self, person):
        assert S.allow_unexpected(person).allow_unexpected is True
        assert S.disallow_unexpected(S.allow_unexpected(person)).allow_unexpected is False
        assert person.allow_unexpected is False
