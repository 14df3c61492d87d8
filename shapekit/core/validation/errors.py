"""Decode Failure Reports

DecodeFailedError is the exception form of a Failure, raised only where a
caller explicitly asks for it (``decode_or_raise``). It renders the error list
as a tree, nesting the per-member errors of failed unions:

    2 error(s) found
    ├─ ["name"]: missing key "name"
    └─ ["tags"][1]: 3 did not satisfy is(string)

and serializes for API responses via to_dict().
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Sequence

from shapekit.core.errors import DecodeError, ErrorCode


def format_path(path: Sequence[Any]) -> str:
    """Format a path tuple as ``["a"][0]``; the root renders as ``$``."""
    if not path:
        return "$"
    parts = []
    for segment in path:
        if isinstance(segment, int) and not isinstance(segment, bool):
            parts.append(f"[{segment}]")
        elif isinstance(segment, str):
            parts.append(f"[{json.dumps(segment)}]")
        else:
            parts.append(f"[{segment!r}]")
    return "".join(parts)


def _render(errors: Sequence[DecodeError], prefix: str, lines: list[str]) -> None:
    for i, error in enumerate(errors):
        last = i == len(errors) - 1
        branch, indent = ("└─ ", "   ") if last else ("├─ ", "│  ")
        lines.append(f"{prefix}{branch}{format_path(error.path)}: {error.message}")
        if error.kind is ErrorCode.E2008_UNION_MEMBER:
            _render(error.details.get("errors", ()), prefix + indent, lines)


def render_tree(errors: Sequence[DecodeError]) -> str:
    lines = [f"{len(errors)} error(s) found"]
    _render(errors, "", lines)
    return "\n".join(lines)


@dataclass
class DecodeFailedError(Exception):
    """A decode Failure surfaced as an exception."""
    errors: tuple[DecodeError, ...]

    def __post_init__(self):
        self.errors = tuple(self.errors)
        super().__init__(self.report)

    @property
    def report(self) -> str:
        return render_tree(self.errors)

    @property
    def first_error(self) -> DecodeError | None:
        return self.errors[0] if self.errors else None

    def errors_at(self, path: Sequence[Any]) -> list[DecodeError]:
        return [e for e in self.errors if e.path == tuple(path)]

    def __str__(self) -> str:
        return self.report

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {"error": {"type": "decode_error", "message": "Decode failed",
            "error_count": len(self.errors), "errors": [e.to_dict() for e in self.errors]}}
