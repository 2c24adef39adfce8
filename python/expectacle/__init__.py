"""
Expectacle: composable expectations for test suites.

Expectacle asserts properties of a value through named matchers:
- Every matcher has a positive and a negated form (expect(x).not_)
- Awaitables get the same matchers (expect.promised(coro))
- Shapes check a value's type skeleton without its data
- A failed check raises ExpectationError with structured fields

Expectacle does not:
- Discover or run tests
- Format reports
- Mock or stub collaborators
"""

__version__ = "0.1.0"

from expectacle.api import Expect, expect
from expectacle.classify import UNDEFINED, Arguments, type_of
from expectacle.equality import deep_equal, loose_equal, strict_equal
from expectacle.errors import NOT_PROVIDED, ConstructionError, ExpectationError, fail
from expectacle.expectation import (
    Chain,
    DeferredExpectation,
    Expectation,
    NegatedDeferredExpectation,
    NegatedExpectation,
    Polarity,
    humanize,
)
from expectacle.registry import MatchOutcome, MatcherContext, MatcherRegistry, default_registry
from expectacle.shapes import Shape, compare_shape, shape

__all__ = [
    "expect",
    "Expect",
    "UNDEFINED",
    "Arguments",
    "type_of",
    "deep_equal",
    "loose_equal",
    "strict_equal",
    "NOT_PROVIDED",
    "ConstructionError",
    "ExpectationError",
    "fail",
    "Chain",
    "Expectation",
    "NegatedExpectation",
    "DeferredExpectation",
    "NegatedDeferredExpectation",
    "Polarity",
    "humanize",
    "MatchOutcome",
    "MatcherContext",
    "MatcherRegistry",
    "default_registry",
    "Shape",
    "compare_shape",
    "shape",
]
