"""
Expectacle equality: strict, loose (coercing) and structural comparison.

Loose equality follows a fixed coercion table rather than Python's ``==``:

    same category           -> strict comparison (NaN never equal)
    null / undefined        -> equal to each other only
    number vs string        -> number vs to_number(string)
    boolean vs anything     -> 0/1 vs anything
    composite vs primitive  -> to_primitive(composite) vs primitive
    composite vs composite  -> identity

deep_equal has no cycle detection; recursive structures raise RecursionError.
"""

from __future__ import annotations

import datetime
import math
import re
from collections.abc import Mapping
from typing import Any, Dict, Optional

from expectacle.classify import UNDEFINED, is_primitive, type_of

_SCALAR_TAGS = ("boolean", "number", "string")
_NAN = float("nan")
_OBJECT_STRING = "[object Object]"
_INFINITIES = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


# === Conversions ===

def number_to_string(n: float) -> str:
    """Render a number the way loose comparison sees it (1.0 -> '1')."""
    if isinstance(n, bool):
        return "1" if n else "0"
    if isinstance(n, float):
        if math.isnan(n):
            return "NaN"
        if math.isinf(n):
            return "Infinity" if n > 0 else "-Infinity"
        if n.is_integer():
            return str(int(n))
    return str(n)


def regexp_source(pattern: re.Pattern) -> str:
    """Source-text form of a compiled pattern: /source/flags."""
    flags = ""
    if pattern.flags & re.IGNORECASE:
        flags += "i"
    if pattern.flags & re.MULTILINE:
        flags += "m"
    if pattern.flags & re.DOTALL:
        flags += "s"
    if pattern.flags & re.VERBOSE:
        flags += "x"
    source = pattern.pattern
    if isinstance(source, bytes):
        source = source.decode("latin-1")
    return f"/{source}/{flags}"


def to_string(value: Any) -> str:
    """Stringify a value for coercion purposes."""
    tag = type_of(value)
    if tag == "string":
        return value
    if tag == "null":
        return "null"
    if tag == "undefined":
        return "undefined"
    if tag == "boolean":
        return "true" if value else "false"
    if tag == "number":
        return number_to_string(value)
    primitive = to_primitive(value)
    if isinstance(primitive, str):
        return primitive
    return to_string(primitive)


def _str_overridden(value: Any) -> bool:
    return type(value).__str__ is not object.__str__


def to_primitive(value: Any) -> Any:
    """Reduce a composite value to a number or string."""
    tag = type_of(value)
    if tag in _SCALAR_TAGS or tag in ("null", "undefined"):
        return value
    if tag in ("array", "arguments"):
        return ",".join(
            "" if item is None or item is UNDEFINED else to_string(item)
            for item in value
        )
    if tag == "regexp":
        return regexp_source(value)
    if tag == "date":
        return value.isoformat()
    if tag == "object" and isinstance(value, Mapping):
        return _OBJECT_STRING
    for hook in ("__index__", "__float__", "__int__"):
        if hasattr(type(value), hook):
            return getattr(value, hook)()
    if _str_overridden(value):
        return str(value)
    return _OBJECT_STRING


def _parse_number(text: str) -> float:
    s = text.strip()
    if not s:
        return 0
    if s in _INFINITIES:
        return _INFINITIES[s]
    lowered = s.lower()
    for prefix, base in (("0x", 16), ("0o", 8), ("0b", 2)):
        if lowered.startswith(prefix):
            try:
                return int(s[2:], base)
            except ValueError:
                return _NAN
    # float() accepts inf/nan/underscores, which coercion does not
    if "_" in s or any(c.isalpha() and c not in "eE" for c in s):
        return _NAN
    try:
        return float(s)
    except ValueError:
        return _NAN


def to_number(value: Any) -> float:
    """Convert any value to a number; unconvertible values become NaN."""
    tag = type_of(value)
    if tag == "number":
        return value
    if tag == "boolean":
        return 1 if value else 0
    if tag == "null":
        return 0
    if tag == "undefined":
        return _NAN
    if tag == "string":
        return _parse_number(value)
    if tag == "date":
        return _epoch_ms(value)
    primitive = to_primitive(value)
    if type_of(primitive) in ("number", "string"):
        return to_number(primitive)
    return _NAN


def to_boolean(value: Any) -> bool:
    """Truthiness: False, 0, NaN, '', None and UNDEFINED are falsy."""
    tag = type_of(value)
    if tag in ("null", "undefined"):
        return False
    if tag == "boolean":
        return bool(value)
    if tag == "number":
        return not (value == 0 or math.isnan(value))
    if tag == "string":
        return value != ""
    return True


# === Comparisons ===

def strict_equal(a: Any, b: Any) -> bool:
    """Identity for composites, same-category value equality for scalars."""
    if a is b:
        return not (isinstance(a, float) and math.isnan(a))
    tag_a, tag_b = type_of(a), type_of(b)
    if tag_a != tag_b:
        return False
    if tag_a in _SCALAR_TAGS:
        return a == b
    return False


def loose_equal(a: Any, b: Any) -> bool:
    """Equality with type coercion, following the table in the module docstring."""
    tag_a, tag_b = type_of(a), type_of(b)
    nullish = ("null", "undefined")

    if tag_a in nullish or tag_b in nullish:
        return tag_a in nullish and tag_b in nullish
    if tag_a == tag_b and tag_a in _SCALAR_TAGS:
        return strict_equal(a, b)
    if tag_a == "number" and tag_b == "string":
        return a == to_number(b)
    if tag_a == "string" and tag_b == "number":
        return to_number(a) == b
    if tag_a == "boolean":
        return loose_equal(to_number(a), b)
    if tag_b == "boolean":
        return loose_equal(a, to_number(b))

    a_scalar, b_scalar = tag_a in _SCALAR_TAGS, tag_b in _SCALAR_TAGS
    if not a_scalar and not b_scalar:
        return a is b
    if a_scalar:
        return loose_equal(a, to_primitive(b))
    return loose_equal(to_primitive(a), b)


def _epoch_ms(value: datetime.date) -> float:
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime.combine(value, datetime.time())
    return value.timestamp() * 1000


def _own_items(value: Any) -> Optional[Dict[str, Any]]:
    """Enumerable members keyed by string, or None when there are none to list."""
    tag = type_of(value)
    if tag in ("array", "arguments"):
        return {str(i): item for i, item in enumerate(value)}
    if isinstance(value, Mapping):
        return {str(k): v for k, v in value.items()}
    try:
        return dict(vars(value))
    except TypeError:
        return None


def _obj_equiv(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return False
    if type_of(a) == "arguments":
        if type_of(b) != "arguments":
            return False
        return deep_equal(list(a), list(b))

    items_a, items_b = _own_items(a), _own_items(b)
    if items_a is None or items_b is None:
        return a == b
    keys_a, keys_b = sorted(items_a), sorted(items_b)
    if keys_a != keys_b:
        return False
    return all(deep_equal(items_a[k], items_b[k]) for k in keys_a)


def deep_equal(a: Any, b: Any) -> bool:
    """Structural equivalence of two arbitrary values."""
    if a is b or strict_equal(a, b):
        return True
    tag_a, tag_b = type_of(a), type_of(b)
    if tag_a == "date" and tag_b == "date":
        return _epoch_ms(a) == _epoch_ms(b)
    if tag_a == "regexp" and tag_b == "regexp":
        return a.pattern == b.pattern and a.flags == b.flags
    if is_primitive(a) and is_primitive(b):
        return loose_equal(a, b)
    return _obj_equiv(a, b)
