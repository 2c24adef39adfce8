"""Tests for expectacle.equality module."""

import datetime
import math
import re
import unittest

from expectacle.classify import UNDEFINED, Arguments
from expectacle.equality import (
    deep_equal,
    loose_equal,
    number_to_string,
    regexp_source,
    strict_equal,
    to_boolean,
    to_number,
    to_primitive,
    to_string,
)


class ValueOfOne:
    """Converts to the number 1."""
    def __index__(self) -> int:
        return 1


class StringOne:
    """Converts to the string '1'."""
    def __str__(self) -> str:
        return "1"


class ValueOfZero:
    def __index__(self) -> int:
        return 0


class StringZero:
    def __str__(self) -> str:
        return "0"


class Node:
    def __init__(self, value, children=None) -> None:
        self.value = value
        self.children = children or []


class TestConversions(unittest.TestCase):
    """Test the coercion helpers."""

    def test_number_to_string(self) -> None:
        self.assertEqual(number_to_string(1.0), "1")
        self.assertEqual(number_to_string(1.5), "1.5")
        self.assertEqual(number_to_string(float("nan")), "NaN")
        self.assertEqual(number_to_string(-math.inf), "-Infinity")

    def test_to_number_strings(self) -> None:
        self.assertEqual(to_number(""), 0)
        self.assertEqual(to_number("  42 "), 42)
        self.assertEqual(to_number("0x1F"), 31)
        self.assertEqual(to_number("1e3"), 1000)
        self.assertEqual(to_number("-Infinity"), -math.inf)
        self.assertTrue(math.isnan(to_number("abc")))
        self.assertTrue(math.isnan(to_number("inf")))
        self.assertTrue(math.isnan(to_number("1_000")))

    def test_to_number_other_values(self) -> None:
        self.assertEqual(to_number(True), 1)
        self.assertEqual(to_number(None), 0)
        self.assertEqual(to_number([]), 0)
        self.assertEqual(to_number(["7"]), 7)
        self.assertTrue(math.isnan(to_number(UNDEFINED)))
        self.assertTrue(math.isnan(to_number({})))

    def test_to_primitive(self) -> None:
        self.assertEqual(to_primitive([1, None, "a", UNDEFINED]), "1,,a,")
        self.assertEqual(to_primitive({"a": 1}), "[object Object]")
        self.assertEqual(to_primitive(ValueOfOne()), 1)
        self.assertEqual(to_primitive(StringOne()), "1")
        self.assertEqual(to_primitive(re.compile("a+", re.I)), "/a+/i")

    def test_to_string(self) -> None:
        self.assertEqual(to_string(True), "true")
        self.assertEqual(to_string(None), "null")
        self.assertEqual(to_string(2.0), "2")
        self.assertEqual(to_string([1, [2, 3]]), "1,2,3")

    def test_to_boolean(self) -> None:
        for falsy in (False, 0, 0.0, float("nan"), "", None, UNDEFINED):
            self.assertFalse(to_boolean(falsy), falsy)
        for truthy in (True, 1, "0", [], {}, ValueOfZero()):
            self.assertTrue(to_boolean(truthy), truthy)

    def test_regexp_source(self) -> None:
        self.assertEqual(regexp_source(re.compile(r"^a\d$", re.M | re.I)), r"/^a\d$/im")


class TestStrictEqual(unittest.TestCase):
    def test_scalars(self) -> None:
        self.assertTrue(strict_equal(1, 1))
        self.assertTrue(strict_equal(1, 1.0))
        self.assertTrue(strict_equal("a", "a"))
        self.assertFalse(strict_equal(1, "1"))
        self.assertFalse(strict_equal(True, 1))
        self.assertFalse(strict_equal(False, 0))

    def test_nan_is_never_equal(self) -> None:
        nan = float("nan")
        self.assertFalse(strict_equal(nan, nan))

    def test_composites_by_identity(self) -> None:
        obj = {}
        self.assertTrue(strict_equal(obj, obj))
        self.assertFalse(strict_equal({}, {}))
        self.assertFalse(strict_equal([1], [1]))


class TestLooseEqual(unittest.TestCase):
    """The coercion table, including the historical examples."""

    def test_same_values(self) -> None:
        obj = {}
        self.assertTrue(loose_equal(1, 1))
        self.assertTrue(loose_equal("hello world", "hello world"))
        self.assertTrue(loose_equal(True, True))
        self.assertTrue(loose_equal(obj, obj))

    def test_one_coercions(self) -> None:
        self.assertTrue(loose_equal(1, True))
        self.assertTrue(loose_equal(1, "1"))
        self.assertTrue(loose_equal(1, ValueOfOne()))
        self.assertTrue(loose_equal(1, StringOne()))

    def test_zero_coercions(self) -> None:
        self.assertTrue(loose_equal(0, False))
        self.assertTrue(loose_equal(0, "0"))
        self.assertTrue(loose_equal(0, ValueOfZero()))
        self.assertTrue(loose_equal(0, StringZero()))

    def test_false_coercions(self) -> None:
        self.assertTrue(loose_equal(False, ""))
        self.assertTrue(loose_equal(False, []))
        self.assertTrue(loose_equal(False, "0"))

    def test_nullish(self) -> None:
        self.assertTrue(loose_equal(UNDEFINED, None))
        self.assertTrue(loose_equal(None, None))
        self.assertFalse(loose_equal(None, 0))
        self.assertFalse(loose_equal(UNDEFINED, False))
        self.assertFalse(loose_equal(None, ""))

    def test_inequalities(self) -> None:
        self.assertFalse(loose_equal(1, "2"))
        self.assertFalse(loose_equal(True, "true"))
        self.assertFalse(loose_equal({}, {}))
        self.assertFalse(loose_equal(float("nan"), float("nan")))
        self.assertFalse(loose_equal("a", "b"))

    def test_array_against_string(self) -> None:
        self.assertTrue(loose_equal([1, 2], "1,2"))
        self.assertTrue(loose_equal("", []))


class TestDeepEqual(unittest.TestCase):
    """Test structural equivalence."""

    def test_reflexive(self) -> None:
        nan = float("nan")
        values = [None, UNDEFINED, 0, "x", nan, [1, [2]], {"a": {"b": []}},
                  Node(1), re.compile("x"), datetime.date(2020, 1, 1)]
        for value in values:
            self.assertTrue(deep_equal(value, value), value)

    def test_symmetric(self) -> None:
        pairs = [
            (1, "1"), ({"a": 1}, {"a": 1}), ({"a": 1}, {"a": 2}),
            ([1, 2], [2, 1]), (None, UNDEFINED), ([], {}), (0, False),
        ]
        for a, b in pairs:
            self.assertEqual(deep_equal(a, b), deep_equal(b, a), (a, b))

    def test_nested_structures(self) -> None:
        self.assertTrue(deep_equal({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]}))
        self.assertFalse(deep_equal({"a": [1, {"b": 2}]}, {"a": [1, {"b": 3}]}))
        self.assertTrue(deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1}))
        self.assertFalse(deep_equal({"a": 1}, {"a": 1, "b": 2}))

    def test_leaves_compare_loosely(self) -> None:
        self.assertTrue(deep_equal({"n": 1}, {"n": "1"}))
        self.assertTrue(deep_equal([0], [False]))

    def test_objects_by_members(self) -> None:
        self.assertTrue(deep_equal(Node(1, [Node(2)]), Node(1, [Node(2)])))
        self.assertFalse(deep_equal(Node(1), Node(2)))

    def test_dates(self) -> None:
        self.assertTrue(deep_equal(datetime.datetime(2020, 1, 1, 12), datetime.datetime(2020, 1, 1, 12)))
        self.assertFalse(deep_equal(datetime.datetime(2020, 1, 1), datetime.datetime(2020, 1, 2)))
        self.assertTrue(deep_equal(datetime.date(2020, 1, 1), datetime.datetime(2020, 1, 1)))

    def test_regexps(self) -> None:
        self.assertTrue(deep_equal(re.compile("a"), re.compile("a")))
        self.assertFalse(deep_equal(re.compile("a"), re.compile("a", re.I)))
        self.assertFalse(deep_equal(re.compile("a"), re.compile("b")))

    def test_null_is_not_undefined(self) -> None:
        self.assertFalse(deep_equal(None, UNDEFINED))
        self.assertFalse(deep_equal(None, {}))

    def test_arguments(self) -> None:
        self.assertTrue(deep_equal(Arguments.of(1, 2), Arguments.of(1, 2)))
        self.assertFalse(deep_equal(Arguments.of(1, 2), Arguments.of(1, 3)))

    def test_arguments_against_array_is_asymmetric(self) -> None:
        self.assertFalse(deep_equal(Arguments.of(1, 2), [1, 2]))
        self.assertTrue(deep_equal([1, 2], Arguments.of(1, 2)))

    def test_memberless_objects_fall_back_to_eq(self) -> None:
        self.assertTrue(deep_equal({1, 2}, {2, 1}))
        self.assertFalse(deep_equal({1}, {2}))

    def test_cycles_are_not_detected(self) -> None:
        a, b = [], []
        a.append(a)
        b.append(b)
        with self.assertRaises(RecursionError):
            deep_equal(a, b)


if __name__ == "__main__":
    unittest.main()
