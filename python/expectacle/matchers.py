"""
Expectacle built-in matchers.

Each checker receives (actual, expected, ctx) and returns a verdict; it
never raises for a value that simply does not match. expected is
NOT_PROVIDED when the matcher was called without an argument.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Dict, Iterable

from expectacle.classify import UNDEFINED, type_of
from expectacle.equality import deep_equal, loose_equal, regexp_source, strict_equal, to_boolean, to_number, to_string
from expectacle.errors import NOT_PROVIDED, ConstructionError
from expectacle.registry import MatcherContext, MatcherFunction, MatcherRegistry
from expectacle.shapes import to_shape

_NO_MEMBERS = ("null", "undefined", "boolean", "number", "string")


# === Identity and equality ===

def to_be(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    return strict_equal(actual, expected)


def to_equal(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    return loose_equal(actual, expected)


def to_be_like(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    return deep_equal(actual, expected)


def to_be_an_instance_of(actual: Any, cls: Any, ctx: MatcherContext) -> bool:
    classes = cls if isinstance(cls, tuple) else (cls,)
    if not classes or not all(isinstance(c, type) for c in classes):
        raise ConstructionError("to_be_an_instance_of matcher requires a class.")
    return isinstance(actual, cls)


# === Types ===

def to_be_of_type(actual: Any, tag: Any, ctx: MatcherContext) -> bool:
    return type_of(actual) == tag


def _tag_checker(tag: str) -> MatcherFunction:
    def check(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
        return type_of(actual) == tag
    check.__name__ = f"to_be_{tag}"
    return check


def to_be_null(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    return actual is None


def to_be_undefined(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    return actual is UNDEFINED


def to_be_nan(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    n = to_number(actual)
    return n != n


def to_be_true(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    return actual is True


def to_be_false(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    return actual is False


def to_be_truthy(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    return to_boolean(actual)


def to_be_falsy(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    return not to_boolean(actual)


# === Length ===

def _object_length(value: Any) -> Any:
    if isinstance(value, Mapping):
        return value["length"] if "length" in value else len(value)
    length = getattr(value, "length", UNDEFINED)
    if length is not UNDEFINED:
        return length
    try:
        return len(vars(value))
    except TypeError:
        return len(value)


def _length(value: Any) -> Any:
    """Length of a value, or UNDEFINED when it has none."""
    tag = type_of(value)
    if tag in ("string", "array", "arguments"):
        return len(value)
    if tag == "object":
        try:
            return _object_length(value)
        except TypeError:
            return UNDEFINED
    if tag not in _NO_MEMBERS and hasattr(value, "__len__"):
        return len(value)
    return UNDEFINED


def to_have_length(actual: Any, length: Any, ctx: MatcherContext) -> bool:
    if type_of(actual) in ("string", "array", "arguments"):
        return strict_equal(len(actual), length)
    measured = _length(actual)
    if measured is UNDEFINED:
        return False
    return loose_equal(measured, length)


def to_be_empty(actual: Any, expected: Any, ctx: MatcherContext) -> bool:
    measured = _length(actual)
    if measured is UNDEFINED:
        return False
    return not to_boolean(measured)


# === Members ===
# A member is a mapping key or an attribute; "own" members live in the mapping
# itself or in the instance __dict__. Scalars have no members: probing one
# raises TypeError, which the matchers read as "no such member".

def _members(value: Any) -> Any:
    if type_of(value) in _NO_MEMBERS:
        raise TypeError(f"cannot probe members of {type_of(value)}")
    return value


def _has_member(value: Any, name: Any) -> bool:
    target = _members(value)
    if isinstance(target, Mapping) and name in target:
        return True
    return isinstance(name, str) and hasattr(target, name)


def _has_own_member(value: Any, name: Any) -> bool:
    target = _members(value)
    if isinstance(target, Mapping):
        return name in target
    try:
        return name in vars(target)
    except TypeError:
        return False


def _member(value: Any, name: Any) -> Any:
    if isinstance(value, Mapping) and name in value:
        return value[name]
    return getattr(value, name)


def _is_method(value: Any, name: Any) -> bool:
    return type_of(_member(value, name)) == "function"


def to_have_member(actual: Any, name: Any, ctx: MatcherContext) -> bool:
    try:
        return _has_member(actual, name)
    except TypeError:
        return False


def to_have_own_member(actual: Any, name: Any, ctx: MatcherContext) -> bool:
    try:
        return _has_own_member(actual, name)
    except TypeError:
        return False


def to_have_property(actual: Any, name: Any, ctx: MatcherContext) -> bool:
    try:
        return _has_member(actual, name) and not _is_method(actual, name)
    except TypeError:
        return False


def to_have_own_property(actual: Any, name: Any, ctx: MatcherContext) -> bool:
    try:
        return _has_own_member(actual, name) and not _is_method(actual, name)
    except TypeError:
        return False


def to_have_method(actual: Any, name: Any, ctx: MatcherContext) -> bool:
    try:
        return _has_member(actual, name) and _is_method(actual, name)
    except TypeError:
        return False


def to_have_own_method(actual: Any, name: Any, ctx: MatcherContext) -> bool:
    try:
        return _has_own_member(actual, name) and _is_method(actual, name)
    except TypeError:
        return False


# === Structure ===

def to_have_shape(actual: Any, descriptor: Any, ctx: MatcherContext) -> bool:
    shape = to_shape(descriptor)
    if shape is None:
        return False
    ctx.set_expected(shape)
    return shape.check(actual)


# === Errors and patterns ===

def _error_message(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    return message if isinstance(message, str) else str(exc)


def _describe_error(error: Any) -> str:
    if isinstance(error, type):
        return error.__name__
    if type_of(error) == "regexp":
        return regexp_source(error)
    return repr(error)


def _error_matches(exc: Exception, error: Any) -> bool:
    tag = type_of(error)
    if tag == "string":
        return _error_message(exc) == error
    if tag == "regexp":
        return error.search(_error_message(exc)) is not None
    if isinstance(error, type):
        return type(exc).__name__ == error.__name__
    return False


def to_throw(actual: Any, error: Any, ctx: MatcherContext) -> bool:
    if not callable(actual):
        raise ConstructionError("to_throw matcher requires the value to be a function.")
    provided = error is not NOT_PROVIDED and error is not None
    if provided:
        ctx.set_expected(error.__name__ if isinstance(error, type) else error)

    wanted = f" {_describe_error(error)}" if provided else ""
    try:
        actual()
    except Exception as exc:
        threw = f"{type(exc).__name__}: {_error_message(exc)}"
        if not provided:
            ctx.set_error_properties(message=f"Expected function not to throw, but it threw {threw}")
            return True
        if _error_matches(exc, error):
            ctx.set_error_properties(message=f"Expected function not to throw{wanted}, but it did")
            return True
        ctx.set_error_properties(
            message=f"Expected function to throw{wanted}, but it threw {threw}",
            thrown=exc,
        )
        return False

    ctx.set_error_properties(message=f"Expected function to throw{wanted}, but it did not throw")
    return False


def to_match(actual: Any, expression: Any, ctx: MatcherContext) -> bool:
    if isinstance(expression, (str, bytes)):
        expression = re.compile(expression)
    if type_of(expression) != "regexp":
        raise ConstructionError("to_match matcher requires a regular expression.")
    ctx.set_expected(expression)
    return expression.search(to_string(actual)) is not None


BUILTIN_MATCHERS: Dict[str, MatcherFunction] = {
    "to_be": to_be,
    "to_equal": to_equal,
    "to_be_an_instance_of": to_be_an_instance_of,
    "to_be_of_type": to_be_of_type,
    "to_be_object": _tag_checker("object"),
    "to_be_array": _tag_checker("array"),
    "to_be_function": _tag_checker("function"),
    "to_be_string": _tag_checker("string"),
    "to_be_number": _tag_checker("number"),
    "to_be_boolean": _tag_checker("boolean"),
    "to_be_null": to_be_null,
    "to_be_undefined": to_be_undefined,
    "to_be_nan": to_be_nan,
    "to_be_true": to_be_true,
    "to_be_false": to_be_false,
    "to_be_truthy": to_be_truthy,
    "to_be_falsy": to_be_falsy,
    "to_have_length": to_have_length,
    "to_be_empty": to_be_empty,
    "to_have_member": to_have_member,
    "to_have_own_member": to_have_own_member,
    "to_have_property": to_have_property,
    "to_have_own_property": to_have_own_property,
    "to_have_method": to_have_method,
    "to_have_own_method": to_have_own_method,
    "to_be_like": to_be_like,
    "to_have_shape": to_have_shape,
    "to_throw": to_throw,
    "to_match": to_match,
}

BUILTIN_ALIASES: Iterable[tuple] = (
    ("to_be_object", "to_be_an_object"),
    ("to_be_array", "to_be_an_array"),
    ("to_be_function", "to_be_a_function"),
    ("to_be_string", "to_be_a_string"),
    ("to_be_number", "to_be_a_number"),
    ("to_be_boolean", "to_be_a_boolean"),
)


def install(registry: MatcherRegistry) -> MatcherRegistry:
    """Register the built-in matchers and their grammatical aliases."""
    registry.register_batch(BUILTIN_MATCHERS)
    for name, alias in BUILTIN_ALIASES:
        registry.register_alias(name, alias)
    return registry
