"""
Expectacle entry point: the callable expect factory and its helpers.
"""

from __future__ import annotations

from typing import Any, Awaitable, Mapping, Optional

from expectacle import errors, matchers
from expectacle.classify import UNDEFINED, type_of
from expectacle.errors import NOT_PROVIDED
from expectacle.expectation import DeferredExpectation, Expectation
from expectacle.registry import MatcherFunction, MatcherRegistry, default_registry
from expectacle.shapes import ShapeNamespace, shape


class Expect:
    """
    Factory for expectations bound to one matcher registry.

    The module-level ``expect`` uses the process-wide registry; build your
    own ``Expect(MatcherRegistry())`` for an isolated set of matchers.
    """

    NULL_VALUE = NOT_PROVIDED

    def __init__(self, registry: Optional[MatcherRegistry] = None) -> None:
        self.registry = registry if registry is not None else default_registry

    @property
    def shape(self) -> ShapeNamespace:
        return shape

    def __call__(self, actual: Any = UNDEFINED, description: Optional[str] = None) -> Expectation:
        return Expectation(actual, description, self.registry)

    def promised(self, pending: Awaitable[Any], description: Optional[str] = None) -> DeferredExpectation:
        return DeferredExpectation(pending, description, self.registry)

    def fail(self, message: Optional[str] = None) -> None:
        __tracebackhide__ = True
        errors.fail(message)

    @staticmethod
    def type_of(value: Any) -> str:
        return type_of(value)

    def add_matcher(self, name: str, checker: MatcherFunction) -> None:
        self.registry.register(name, checker)

    def add_matchers(self, checkers: Mapping[str, MatcherFunction]) -> None:
        self.registry.register_batch(checkers)

    def add_alias(self, name: str, alias: str) -> None:
        self.registry.register_alias(name, alias)

    # camelCase spellings
    typeOf = type_of
    addMatcher = add_matcher
    addMatchers = add_matchers

    def __repr__(self) -> str:
        return f"<Expect matchers={len(self.registry)}>"


matchers.install(default_registry)

expect = Expect(default_registry)
