"""
Expectacle type classifier: maps any runtime value onto a closed set of tags.

Tags: null, undefined, boolean, number, string, array, object, function,
date, regexp, arguments, plus lowercased type names for builtin types
without a fixed tag (set, bytes, frozenset, ...).
"""

from __future__ import annotations

import datetime
import re
import types
from typing import Any, Dict


class _Undefined:
    """Singleton marking an absent value (missing key, missing position)."""

    _instance = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


class Arguments(tuple):
    """An argument pack. Behaves as a tuple, classifies as 'arguments'."""

    @classmethod
    def of(cls, *args: Any) -> "Arguments":
        return cls(args)

    def __repr__(self) -> str:
        return f"Arguments{tuple.__repr__(self)}"


# Keyed by runtime type. Unknown types are added on first sight and never evicted.
_known_types: Dict[type, str] = {
    bool: "boolean",
    int: "number",
    float: "number",
    str: "string",
    list: "array",
    tuple: "array",
    Arguments: "arguments",
    dict: "object",
    datetime.date: "date",
    datetime.datetime: "date",
    re.Pattern: "regexp",
    types.FunctionType: "function",
    types.LambdaType: "function",
    types.MethodType: "function",
    types.BuiltinFunctionType: "function",
    types.BuiltinMethodType: "function",
    type: "function",
}

# Bases consulted when a subclass is seen for the first time.
_BASE_TAGS = (
    (bool, "boolean"),
    (Arguments, "arguments"),
    (str, "string"),
    (int, "number"),
    (float, "number"),
    (list, "array"),
    (tuple, "array"),
    (dict, "object"),
    (datetime.date, "date"),
    (type, "function"),
)


def _derive_tag(cls: type) -> str:
    for base, tag in _BASE_TAGS:
        if issubclass(cls, base):
            return tag
    if any("__call__" in vars(k) for k in cls.__mro__):
        return "function"
    if cls.__module__ == "builtins":
        return cls.__name__.lower()
    return "object"


def type_of(value: Any) -> str:
    """Return the tag of a value. Pure and total."""
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    cls = type(value)
    tag = _known_types.get(cls)
    if tag is None:
        tag = _known_types[cls] = _derive_tag(cls)
    return tag


def is_primitive(value: Any) -> bool:
    """True for values compared by value rather than by structure."""
    return type_of(value) in ("undefined", "boolean", "number", "string", "function")
