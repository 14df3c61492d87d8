"""Lens derivation and composition."""

from __future__ import annotations

import pytest

from shapekit import schema as S
from shapekit.core.validation import min_length
from shapekit.engines import Lens, optics_for


@pytest.fixture
def nested():
    return S.struct({"a": S.string, "b": S.struct({"c": S.number})})


class TestLens:
    def test_get_set_modify(self):
        lens = Lens.of("b", "c")
        root = {"a": "x", "b": {"c": 1}}
        assert lens.get(root) == 1
        assert lens.set(root, 2) == {"a": "x", "b": {"c": 2}}
        assert lens.modify(root, lambda n: n + 10) == {"a": "x", "b": {"c": 11}}

    def test_set_does_not_mutate(self):
        root = {"b": {"c": [1, 2]}}
        updated = Lens.of("b", "c", 1).set(root, 9)
        assert root == {"b": {"c": [1, 2]}}
        assert updated == {"b": {"c": [1, 9]}}
        assert updated["b"] is not root["b"]

    def test_set_inside_tuple(self):
        assert Lens.of(1).set(("a", "b"), "z") == ("a", "z")

    def test_composition_is_associative(self):
        a, b, c = Lens.of("a"), Lens.of("b"), Lens.of(0)
        assert a.compose(b).compose(c) == a.compose(b.compose(c))
        assert Lens().compose(a) == a == a.compose(Lens())


class TestOptics:
    def test_nested_field_lens(self, nested):
        optics = optics_for(nested)
        lens = optics["b"]["c"].lens
        assert lens == optics["b"].lens.compose(Lens.of("c"))
        assert lens.get({"a": "x", "b": {"c": 1}}) == 1
        assert lens.set({"a": "x", "b": {"c": 1}}, 5) == {"a": "x", "b": {"c": 5}}

    def test_tuple_elements(self):
        optics = optics_for(S.tuple_(S.string, S.struct({"x": S.number})))
        assert list(optics) == [0, 1]
        assert optics[1]["x"].lens == Lens.of(1, "x")

    def test_looks_through_refinement_and_alias(self, nested):
        wrapped = S.type_alias(S.filter(nested, min_length(0)))
        assert optics_for(wrapped)["b"]["c"].lens == Lens.of("b", "c")

    def test_leaves(self, linked_list):
        assert optics_for(S.string).is_leaf
        assert optics_for(linked_list).is_leaf
        assert optics_for(S.array(S.string)).is_leaf

    def test_lenses_walks_tree(self, nested):
        paths = [lens.path for lens in optics_for(nested).lenses()]
        assert paths == [(), ("a",), ("b",), ("b", "c")]
