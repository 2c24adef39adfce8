"""
Expectacle expectation views: positive, negated and deferred (awaitable) variants.

Every view resolves matcher names against its registry at attribute access,
so a matcher registered once is available on all four views. The views
differ only in polarity (how a verdict is read) and kind (whether the
actual value is available now or must be awaited).
"""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
import re
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from expectacle.errors import NOT_PROVIDED, ConstructionError, ExpectationError
from expectacle.registry import MatchOutcome, MatcherContext, MatcherEntry, MatcherRegistry, default_registry

logger = logging.getLogger(__name__)

_CAPITAL = re.compile(r"[A-Z]")
_NAN_WORD = re.compile(r"\b(?:n a n|nan)\b")


def humanize(name: str) -> str:
    """to_be_an_instance_of / toBeAnInstanceOf -> 'to be an instance of'."""
    spaced = _CAPITAL.sub(lambda m: " " + m.group(0).lower(), name).replace("_", " ")
    return _NAN_WORD.sub("NaN", " ".join(spaced.split()))


class Polarity(enum.Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"

    @property
    def negated(self) -> bool:
        return self is Polarity.NEGATIVE

    def operator(self, name: str) -> str:
        return ("not " if self.negated else "") + humanize(name)


class Chain:
    """Returned by a passing matcher; and_ continues on the same expectation."""

    __slots__ = ("and_",)

    def __init__(self, expectation: "_View") -> None:
        self.and_ = expectation

    def __repr__(self) -> str:
        return f"<Chain and_={self.and_!r}>"


def evaluate(entry: MatcherEntry, actual: Any, args: Tuple[Any, ...], polarity: Polarity) -> MatchOutcome:
    """Run a checker and fold its context into an outcome. Never raises on a failed check."""
    if len(args) > 1:
        raise TypeError(f"{entry.name}() takes at most one argument ({len(args)} given)")
    expected = args[0] if args else NOT_PROVIDED
    ctx = MatcherContext(expected, polarity.negated)
    return ctx.outcome(entry.checker(actual, expected, ctx))


def build_failure(
    entry: MatcherEntry,
    polarity: Polarity,
    actual: Any,
    outcome: MatchOutcome,
    description: Optional[str],
) -> ExpectationError:
    fields = {
        "operator": polarity.operator(entry.name),
        "actual": actual,
        "expected": outcome.expected,
        "description": description,
    }
    fields.update(outcome.extra)
    return ExpectationError(**fields)


class _View:
    """Shared matcher lookup for every expectation variant."""

    polarity = Polarity.POSITIVE

    def __init__(self, registry: MatcherRegistry, description: Optional[str]) -> None:
        self._registry = registry
        self._description = description

    @property
    def description(self) -> Optional[str]:
        return self._description

    def __getattr__(self, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            raise AttributeError(name)
        entry = self._registry.lookup(name)
        if entry is None:
            raise AttributeError(f"{type(self).__name__} has no matcher {name!r}")

        def matcher(*args: Any) -> Any:
            __tracebackhide__ = True
            return self._apply(entry, args)

        matcher.__name__ = name
        matcher.__qualname__ = f"{type(self).__name__}.{name}"
        return matcher

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | set(self._registry.names()))

    def _apply(self, entry: MatcherEntry, args: Tuple[Any, ...]) -> Any:
        raise NotImplementedError


# === Synchronous views ===

class Expectation(_View):
    """Wraps an actual value; matchers raise ExpectationError or return a Chain."""

    def __init__(
        self,
        actual: Any,
        description: Optional[str] = None,
        registry: Optional[MatcherRegistry] = None,
        sibling: Optional["Expectation"] = None,
    ) -> None:
        super().__init__(registry if registry is not None else default_registry, description)
        self._actual = actual
        self._sibling = sibling

    @property
    def actual(self) -> Any:
        return self._actual

    def _make_sibling(self) -> "Expectation":
        return NegatedExpectation(self._actual, self._description, self._registry, sibling=self)

    @property
    def not_(self) -> "Expectation":
        """The view with inverted polarity. Built once, on first access."""
        if self._sibling is None:
            self._sibling = self._make_sibling()
        return self._sibling

    def _apply(self, entry: MatcherEntry, args: Tuple[Any, ...]) -> Chain:
        __tracebackhide__ = True
        outcome = evaluate(entry, self._actual, args, self.polarity)
        if outcome.ok != self.polarity.negated:
            return Chain(self)
        raise build_failure(entry, self.polarity, self._actual, outcome, self._description)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} actual={self._actual!r}>"


class NegatedExpectation(Expectation):
    """Expectation whose matchers pass when the checker says no."""

    polarity = Polarity.NEGATIVE

    def _make_sibling(self) -> Expectation:
        return Expectation(self._actual, self._description, self._registry, sibling=self)


# === Deferred views ===

class _Settlement:
    """One shared resolution of an awaitable, reusable by any number of matchers."""

    def __init__(self, source: Awaitable[Any]) -> None:
        self._source = source
        self._future: Optional[asyncio.Future] = None

    async def result(self) -> Tuple[bool, Any]:
        """(True, value) when the source completed, (False, exception) when it raised."""
        if self._future is None:
            self._future = asyncio.ensure_future(self._source)
        try:
            return True, await self._future
        except Exception as exc:
            logger.debug("deferred source raised %s: %s", type(exc).__name__, exc)
            return False, exc


class DeferredExpectation(_View):
    """
    Wraps an awaitable. Each matcher call returns a coroutine that awaits the
    source, feeds its result (or the exception it raised) to the checker, and
    resolves to a Chain or raises ExpectationError.
    """

    def __init__(
        self,
        pending: Awaitable[Any],
        description: Optional[str] = None,
        registry: Optional[MatcherRegistry] = None,
        settlement: Optional[_Settlement] = None,
        sibling: Optional["DeferredExpectation"] = None,
    ) -> None:
        if settlement is None:
            if not inspect.isawaitable(pending):
                raise ConstructionError(
                    f"promised() requires an awaitable, got {type(pending).__name__}."
                )
            settlement = _Settlement(pending)
        super().__init__(registry if registry is not None else default_registry, description)
        self._pending = pending
        self._settlement = settlement
        self._sibling = sibling if sibling is not None else self._make_sibling()

    def _make_sibling(self) -> "DeferredExpectation":
        return NegatedDeferredExpectation(
            self._pending, self._description, self._registry,
            settlement=self._settlement, sibling=self,
        )

    @property
    def not_(self) -> "DeferredExpectation":
        return self._sibling

    def _apply(self, entry: MatcherEntry, args: Tuple[Any, ...]) -> Awaitable[Chain]:
        if len(args) > 1:
            raise TypeError(f"{entry.name}() takes at most one argument ({len(args)} given)")
        return self._resolve(entry, args)

    async def _resolve(self, entry: MatcherEntry, args: Tuple[Any, ...]) -> Chain:
        __tracebackhide__ = True
        _, value = await self._settlement.result()
        outcome = evaluate(entry, value, args, self.polarity)
        if outcome.ok != self.polarity.negated:
            return Chain(self)
        raise build_failure(entry, self.polarity, value, outcome, self._description)

    async def then(
        self,
        on_fulfilled: Optional[Callable[[Any], Any]] = None,
        on_rejected: Optional[Callable[[BaseException], Any]] = None,
    ) -> Any:
        """Await the source and pass its value or exception to the matching callback."""
        fulfilled, value = await self._settlement.result()
        if fulfilled:
            result = on_fulfilled(value) if on_fulfilled is not None else value
        elif on_rejected is not None:
            result = on_rejected(value)
        else:
            raise value
        if inspect.isawaitable(result):
            result = await result
        return result

    async def catch(self, on_rejected: Callable[[BaseException], Any]) -> Any:
        return await self.then(None, on_rejected)

    def __await__(self):
        return self.then().__await__()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} pending={self._pending!r}>"


class NegatedDeferredExpectation(DeferredExpectation):
    """Deferred expectation with inverted polarity."""

    polarity = Polarity.NEGATIVE

    def _make_sibling(self) -> DeferredExpectation:
        return DeferredExpectation(
            self._pending, self._description, self._registry,
            settlement=self._settlement, sibling=self,
        )
