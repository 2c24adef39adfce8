"""
Expectacle failure model.

ExpectationError is the expected, user-facing outcome of a check that does
not hold. ConstructionError signals misuse of the library itself and is
raised immediately at the point of misuse.
"""

from __future__ import annotations

import datetime
import json
import math
from collections.abc import Mapping
from typing import Any, Dict, Optional

from expectacle import config
from expectacle.classify import type_of
from expectacle.equality import regexp_source


class _NotProvided:
    """Marks a matcher called without a comparison argument."""

    def __repr__(self) -> str:
        return "<not provided>"


NOT_PROVIDED = _NotProvided()


class ConstructionError(TypeError):
    """Raised when the library is used incorrectly (bad matcher, bad argument)."""
    name = "ConstructionError"


class ExpectationError(AssertionError):
    """
    A failed expectation.

    Carries the structured parts of the failure so reporters can render
    their own diff without parsing the message.
    """

    name = "ExpectationError"

    def __init__(
        self,
        operator: Optional[str] = None,
        actual: Any = None,
        expected: Any = NOT_PROVIDED,
        description: Optional[str] = None,
        message: Optional[str] = None,
        **properties: Any,
    ) -> None:
        self.operator = operator
        self.actual = actual
        self.expected = expected
        self.description = description
        self.properties: Dict[str, Any] = dict(properties)
        for key, value in properties.items():
            setattr(self, key, value)
        self.message = message or self._render_body()
        super().__init__(self.message)

    def _render_body(self) -> str:
        parts = [
            "Expected",
            self.description or "",
            serialize(self.actual),
            self.operator or "",
            "" if self.expected is NOT_PROVIDED else serialize(self.expected),
        ]
        return " ".join(p for p in parts if p)

    def __str__(self) -> str:
        return self.message

    def render(self) -> str:
        """Full rendering including the error kind."""
        return f"{self.name}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Structured view for reporters."""
        data = {
            "name": self.name,
            "operator": self.operator,
            "actual": self.actual,
            "expected": None if self.expected is NOT_PROVIDED else self.expected,
            "expected_provided": self.expected is not NOT_PROVIDED,
            "description": self.description,
            "message": self.message,
        }
        data.update(self.properties)
        return data


def fail(message: Optional[str] = None) -> None:
    """Unconditionally raise an ExpectationError."""
    __tracebackhide__ = True
    raise ExpectationError(message=message or config.settings.fail_message)


# === Rendering ===

def _jsonable(value: Any, seen: set) -> Any:
    # Deferred import: shapes depends on this module.
    from expectacle.shapes import Shape

    if isinstance(value, Shape):
        return value.name
    tag = type_of(value)
    if tag == "undefined":
        return "undefined"
    if tag == "number":
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return _Raw(json_number(value))
        return value
    if tag in ("null", "boolean", "string"):
        return value
    if tag == "function":
        name = getattr(value, "__qualname__", None) or getattr(value, "__name__", "anonymous")
        return f"[Function: {name}]"
    if tag == "regexp":
        return regexp_source(value)
    if tag == "date":
        return value.isoformat()

    marker = id(value)
    if marker in seen:
        raise ValueError("circular structure")
    seen = seen | {marker}
    if tag in ("array", "arguments"):
        return [_jsonable(item, seen) for item in value]
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v, seen) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return [_jsonable(item, seen) for item in value]
    if isinstance(value, (datetime.time, datetime.timedelta)):
        return str(value)
    try:
        members = vars(value)
    except TypeError:
        return repr(value)
    return {str(k): _jsonable(v, seen) for k, v in members.items()}


class _Raw(str):
    """A token emitted verbatim (unquoted) in serialized output."""


def json_number(n: float) -> str:
    if math.isnan(n):
        return "NaN"
    return "Infinity" if n > 0 else "-Infinity"


def _dumps(value: Any) -> str:
    if isinstance(value, _Raw):
        return str(value)
    if isinstance(value, list):
        return "[" + ",".join(_dumps(v) for v in value) + "]"
    if isinstance(value, dict):
        return "{" + ",".join(f"{json.dumps(k)}:{_dumps(v)}" for k, v in value.items()) + "}"
    return json.dumps(value)


def serialize(value: Any) -> str:
    """JSON-like rendering of a value for failure messages."""
    try:
        text = _dumps(_jsonable(value, set()))
    except (ValueError, TypeError, RecursionError):
        text = repr(value)
    limit = config.settings.max_render_length
    if limit and len(text) > limit:
        text = text[:limit] + "..."
    return text
