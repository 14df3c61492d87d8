"""Shared fixtures."""

from __future__ import annotations

import random

import pytest

from shapekit import schema as S
from shapekit.core.logging import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    configure_logging("WARNING")


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture(params=[0, 1, 2, 3, 4])
def seeded_rng(request) -> random.Random:
    """Several independent seeds for property-style checks."""
    return random.Random(request.param)


@pytest.fixture
def person():
    """``{name: string, age?: number, tags: string[]}``."""
    return S.struct({
        "name": S.string,
        "age": S.optional(S.number),
        "tags": S.array(S.string),
    })


@pytest.fixture
def linked_list():
    """``List = null | {head: number, tail: List}``."""
    node = S.lazy(lambda: shape)
    shape = S.nullable(S.struct({"head": S.number, "tail": node}))
    return shape
