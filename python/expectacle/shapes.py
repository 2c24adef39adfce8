"""
Expectacle shapes: declarative descriptions of a value's type structure.

A shape checks the skeleton of a value (which keys hold which kinds of
values) without checking the concrete data. Object shapes are subset
matches: keys the descriptor does not declare are ignored.

    >>> person = Object({"name": String(), "tags": Array(String())})
    >>> person.name
    'Object.{name:String,tags:Array.<String>}'
    >>> compare_shape(person, {"name": "ada", "tags": [], "age": 36})
    True
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from expectacle.classify import UNDEFINED, type_of
from expectacle.equality import strict_equal
from expectacle.errors import ConstructionError, serialize

Checker = Callable[[Any], bool]


@dataclass(frozen=True)
class Shape:
    """A named structural check."""
    name: str
    checker: Checker

    def check(self, value: Any) -> bool:
        return bool(self.checker(value))

    def __repr__(self) -> str:
        return f"<Shape {self.name}>"


def _is_sequence_descriptor(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def coerce(descriptor: Any) -> Shape:
    """Turn a nested descriptor into a shape: mapping, sequence or literal."""
    if isinstance(descriptor, Shape):
        return descriptor
    if isinstance(descriptor, Mapping):
        return Object(descriptor)
    if _is_sequence_descriptor(descriptor):
        return ArrayStructure(descriptor)
    return Literal(descriptor)


def to_shape(descriptor: Any) -> Optional[Shape]:
    """Normalize a top-level descriptor. Returns None when it is not a shape."""
    if isinstance(descriptor, Shape):
        return descriptor
    if isinstance(descriptor, Mapping):
        return Object(descriptor)
    if _is_sequence_descriptor(descriptor) and len(descriptor) > 0:
        return ArrayStructure(descriptor)
    return None


def compare_shape(shape: Any, value: Any) -> bool:
    """Check a value against a Shape or a raw mapping/sequence descriptor."""
    normalized = to_shape(shape)
    if normalized is None:
        return False
    return normalized.check(value)


def _member(value: Any, key: Any) -> Any:
    if isinstance(value, Mapping):
        return value.get(key, UNDEFINED)
    if isinstance(key, str):
        return getattr(value, key, UNDEFINED)
    return UNDEFINED


# === Primitive shapes ===

def _type_shape(name: str, tag: str) -> Callable[[], Shape]:
    def factory() -> Shape:
        return Shape(name, lambda value: type_of(value) == tag)
    factory.__name__ = name
    factory.__doc__ = f"Shape accepting values of type '{tag}'."
    return factory


Arguments = _type_shape("Arguments", "arguments")
Boolean = _type_shape("Boolean", "boolean")
Date = _type_shape("Date", "date")
Function = _type_shape("Function", "function")
Null = _type_shape("Null", "null")
Number = _type_shape("Number", "number")
RegExp = _type_shape("RegExp", "regexp")
String = _type_shape("String", "string")
Undefined = _type_shape("Undefined", "undefined")


# === Composite shapes ===

def Literal(literal: Any) -> Shape:
    """Accept exactly the given value (strict equality)."""
    try:
        rendered = json.dumps(literal)
    except (TypeError, ValueError):
        rendered = serialize(literal)
    return Shape(f"Literal.<{rendered}>", lambda value: strict_equal(value, literal))


def Object(descriptor: Mapping) -> Shape:
    """Accept objects whose declared keys each satisfy their sub-shape."""
    if not isinstance(descriptor, Mapping):
        raise ConstructionError("Object shape requires a mapping descriptor.")
    fields = {key: coerce(sub) for key, sub in descriptor.items()}
    name = "Object.{" + ",".join(f"{k}:{s.name}" for k, s in fields.items()) + "}"

    def check(value: Any) -> bool:
        if type_of(value) != "object":
            return False
        return all(sub.check(_member(value, key)) for key, sub in fields.items())

    return Shape(name, check)


def Array(subshape: Any = None) -> Shape:
    """Accept arrays, optionally requiring every element to match subshape."""
    if subshape is None:
        return Shape("Array", lambda value: type_of(value) == "array")
    element = coerce(subshape)

    def check(value: Any) -> bool:
        if type_of(value) != "array":
            return False
        return all(element.check(item) for item in value)

    return Shape(f"Array.<{element.name}>", check)


def ArrayStructure(shapes: Sequence[Any]) -> Shape:
    """Accept arrays whose element i satisfies shapes[i]."""
    if not _is_sequence_descriptor(shapes) or len(shapes) == 0:
        raise ConstructionError("ArrayStructure shape requires a non-empty sequence of shapes.")
    positions = [coerce(s) for s in shapes]
    name = "Array.[" + ", ".join(s.name for s in positions) + "]"

    def check(value: Any) -> bool:
        if type_of(value) != "array":
            return False
        for i, shape in enumerate(positions):
            item = value[i] if i < len(value) else UNDEFINED
            if not shape.check(item):
                return False
        return True

    return Shape(name, check)


LiteralArray = ArrayStructure


class ShapeNamespace:
    """Shape constructors grouped for attribute access (expect.shape.Number())."""

    Arguments = staticmethod(Arguments)
    Array = staticmethod(Array)
    ArrayStructure = staticmethod(ArrayStructure)
    Boolean = staticmethod(Boolean)
    Date = staticmethod(Date)
    Function = staticmethod(Function)
    Literal = staticmethod(Literal)
    LiteralArray = staticmethod(LiteralArray)
    Null = staticmethod(Null)
    Number = staticmethod(Number)
    Object = staticmethod(Object)
    RegExp = staticmethod(RegExp)
    String = staticmethod(String)
    Undefined = staticmethod(Undefined)

    compare = staticmethod(compare_shape)
    coerce = staticmethod(coerce)

    def __repr__(self) -> str:
        return "<expectacle shapes>"


shape = ShapeNamespace()
