"""Guard, encoder, pretty and generator engines."""

from __future__ import annotations

import random

import pytest

from shapekit import schema as S
from shapekit.ast import Symbol
from shapekit.core.config import Settings
from shapekit.core.errors import GenerationError, Grade
from shapekit.core.validation import custom, min_length, non_nan
from shapekit.engines import (
    arbitrary_for,
    decoder_for,
    encode,
    encoder_for,
    guard_for,
    is_valid,
    pretty,
)


class TestGuard:
    def test_scalars(self):
        assert is_valid(S.string, "a")
        assert not is_valid(S.string, 1)
        assert not is_valid(S.number, True)
        assert is_valid(S.literal(1), 1)
        assert not is_valid(S.literal(1), True)

    def test_struct(self, person):
        guard = guard_for(person)
        assert guard.is_valid({"name": "Ada", "tags": []})
        assert guard.is_valid({"name": "Ada", "age": 3, "tags": ["x"]})
        assert not guard.is_valid({"name": "Ada"})
        assert not guard.is_valid({"name": "Ada", "tags": [], "extra": 1})

    def test_tuple(self):
        guard = guard_for(S.rest(S.tuple_(S.string, S.optional(S.number)), S.boolean))
        assert guard.is_valid(["a"])
        assert guard.is_valid(["a", 1, True, False])
        assert not guard.is_valid([])
        assert not guard.is_valid(["a", 1, 2])

    def test_warning_refinement_does_not_reject(self):
        schema = S.filter(S.number, non_nan(), on_failure=Grade.WARNING)
        assert is_valid(schema, float("nan"))

    def test_failure_refinement_rejects(self):
        assert not is_valid(S.filter(S.string, min_length(2)), "a")

    def test_recursive(self, linked_list):
        assert is_valid(linked_list, {"head": 1, "tail": {"head": 2, "tail": None}})
        assert not is_valid(linked_list, {"head": 1, "tail": {"head": 2}})

    @pytest.mark.parametrize("value", [
        None, 1, "x", True, [], ["a"], ["a", 1], {}, {"a": 1}, {"a": "x", "b": 2},
        {"name": "Ada", "tags": ["x"]}, {"name": "Ada", "tags": [1]},
    ])
    def test_agrees_with_decoder(self, value, person):
        schemas = [
            person,
            S.union(S.string, S.number),
            S.tuple_(S.string, S.optional(S.number)),
            S.record(S.string, S.number),
            S.allow_unexpected(S.struct({"a": S.number})),
            S.filter(S.string, min_length(1)),
        ]
        for schema in schemas:
            assert guard_for(schema).is_valid(value) == decoder_for(schema).decode(value).has_value()


class TestEncoder:
    def test_struct_order(self):
        schema = S.extend(S.struct({"a": S.number, "b": S.string}), S.record(S.string, S.number))
        encoded = encode(schema, {"z": 1, "b": "x", "a": 0})
        assert list(encoded) == ["a", "b", "z"]

    def test_tuple_to_list(self):
        assert encode(S.tuple_(S.string, S.number), ("a", 1)) == ["a", 1]

    def test_union_dispatches_on_guards(self):
        to_upper = S.type_alias(S.string, annotations={
            "encoder_hook": lambda: (lambda v: v.upper()),
        })
        schema = S.union(S.number, to_upper)
        encoder = encoder_for(schema)
        assert encoder.encode(1) == 1
        assert encoder.encode("a") == "A"

    def test_round_trip_over_generated_values(self, person, seeded_rng):
        schema = S.struct({
            "person": person,
            "pair": S.tuple_(S.boolean, S.optional(S.literal("x", "y"))),
            "scores": S.record(S.string, S.number),
        })
        decoder, encoder = decoder_for(schema), encoder_for(schema)
        for value in arbitrary_for(schema).examples(20, seed=seeded_rng.random()):
            assert decoder.decode(encoder.encode(value)).unwrap() == value


class TestPretty:
    def test_struct(self):
        schema = S.struct({"a": S.string, "b": S.number})
        assert pretty(schema, {"b": 1, "a": "a"}) == '{"a":"a","b":1}'

    def test_tuple(self):
        assert pretty(S.tuple_(S.string, S.number), ["a", 1]) == '["a",1]'

    def test_special_values(self):
        assert pretty(S.number, float("nan")) == "NaN"
        assert pretty(S.number, float("-inf")) == "-Infinity"
        assert pretty(S.boolean, True) == "true"
        assert pretty(S.literal(None), None) == "null"
        assert pretty(S.symbol, Symbol("s")) == "Symbol(s)"

    def test_unknown_nested(self):
        assert pretty(S.unknown, {"a": [1, None]}) == '{"a":[1,null]}'

    def test_deterministic(self, person):
        value = {"tags": ["x"], "name": "Ada"}
        assert pretty(person, value) == pretty(person, dict(value)) == '{"name":"Ada","tags":["x"]}'

    def test_pretty_hook(self):
        schema = S.type_alias(S.string, annotations={"pretty_hook": lambda: (lambda v: f"<{v}>")})
        assert pretty(schema, "a") == "<a>"


class TestArbitrary:
    def test_samples_satisfy_guard(self, person, seeded_rng):
        guard = guard_for(person)
        arbitrary = arbitrary_for(person)
        assert all(guard.is_valid(arbitrary.sample(seeded_rng)) for _ in range(25))

    def test_deterministic_for_a_seed(self, person):
        arbitrary = arbitrary_for(person)
        assert arbitrary.examples(5, seed=7) == arbitrary.examples(5, seed=7)

    def test_stream_restarts_when_reseeded(self, person):
        arbitrary = arbitrary_for(person)
        first = arbitrary.stream(random.Random(3))
        second = arbitrary.stream(random.Random(3))
        assert [next(first) for _ in range(5)] == [next(second) for _ in range(5)]

    def test_refinement_filters(self, seeded_rng):
        schema = S.filter(S.number, custom(lambda n: n > 0, "positive"))
        arbitrary = arbitrary_for(schema)
        assert all(arbitrary.sample(seeded_rng) > 0 for _ in range(20))

    def test_refinement_exhaustion_raises(self, rng):
        schema = S.refine(S.number, lambda n: False, "impossible")
        settings = Settings(GENERATOR_MAX_RETRIES=3)
        with pytest.raises(GenerationError) as exc:
            arbitrary_for(schema, settings=settings).sample(rng)
        assert exc.value.metadata["attempts"] == 3

    def test_never_raises_only_when_sampled(self, rng):
        arbitrary = arbitrary_for(S.never)
        with pytest.raises(GenerationError):
            arbitrary.sample(rng)

    def test_recursive_schema_terminates(self, linked_list, seeded_rng):
        guard = guard_for(linked_list)
        arbitrary = arbitrary_for(linked_list, settings=Settings(GENERATOR_MAX_DEPTH=2))
        for _ in range(25):
            assert guard.is_valid(arbitrary.sample(seeded_rng))

    def test_binary_tree_terminates(self, seeded_rng):
        node = S.lazy(lambda: tree)
        tree = S.union(S.number, S.struct({"left": node, "right": node}))
        guard = guard_for(tree)
        arbitrary = arbitrary_for(tree)
        assert all(guard.is_valid(arbitrary.sample(seeded_rng)) for _ in range(25))

    def test_rest_length_bounded(self, rng):
        arbitrary = arbitrary_for(S.array(S.number), settings=Settings(GENERATOR_MAX_REST_LENGTH=2))
        assert all(len(arbitrary.sample(rng)) <= 2 for _ in range(50))

    def test_enums_and_literals(self, rng):
        values = arbitrary_for(S.literal("a", "b")).examples(30, seed=1)
        assert set(values) <= {"a", "b"}
        assert set(arbitrary_for(S.enums({"A": 1, "B": 2})).examples(30, seed=1)) <= {1, 2}
