"""
Expectacle matcher registry: named checker functions shared by every view.

A registry is plain process state with no locking. Populate it during test
setup; registering matchers while other threads are matching is unsupported.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from expectacle.errors import NOT_PROVIDED, ConstructionError

logger = logging.getLogger(__name__)

_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class MatchOutcome:
    """Verdict of one matcher call."""
    ok: bool
    expected: Any = NOT_PROVIDED
    extra: Dict[str, Any] = field(default_factory=dict)


class MatcherContext:
    """
    Per-call context handed to a checker.

    A checker may override what a failure renders as "expected" and attach
    extra properties to the failure; both only matter if the call fails.
    """

    def __init__(self, expected: Any, negated: bool) -> None:
        self._expected = expected
        self._extra: Dict[str, Any] = {}
        self._negated = negated

    @property
    def negated(self) -> bool:
        return self._negated

    def set_expected(self, value: Any) -> None:
        self._expected = value

    def set_error_properties(self, **props: Any) -> None:
        self._extra.update(props)

    def outcome(self, result: Union[bool, MatchOutcome, Any]) -> MatchOutcome:
        """Fold a checker's return value and this context into one outcome."""
        if isinstance(result, MatchOutcome):
            expected = self._expected if result.expected is NOT_PROVIDED else result.expected
            return MatchOutcome(
                ok=result.ok,
                expected=expected,
                extra={**self._extra, **result.extra},
            )
        return MatchOutcome(ok=bool(result), expected=self._expected, extra=dict(self._extra))


MatcherFunction = Callable[[Any, Any, MatcherContext], Union[bool, MatchOutcome]]


@dataclass(frozen=True)
class MatcherEntry:
    """A registered matcher. Aliases carry target and resolve it at call time."""
    name: str
    checker: Optional[MatcherFunction] = None
    target: Optional[str] = None


class MatcherRegistry:
    """Name -> checker table. Last registration for a name wins."""

    def __init__(self) -> None:
        self._entries: Dict[str, MatcherEntry] = {}

    def register(self, name: str, checker: MatcherFunction) -> None:
        """Install a matcher on every expectation view."""
        if not isinstance(name, str) or not _NAME.match(name):
            raise ConstructionError(f"Invalid matcher name: {name!r}")
        if not callable(checker):
            raise ConstructionError(f"Matcher {name!r} must be a function, got {type(checker).__name__}.")
        if name in self._entries:
            logger.debug("matcher %s overwritten", name)
        else:
            logger.debug("matcher %s registered", name)
        self._entries[name] = MatcherEntry(name=name, checker=checker)

    def register_alias(self, name: str, alias: str) -> None:
        """Forward alias to name. No-op when name is not registered."""
        if name not in self._entries:
            logger.debug("alias %s skipped: %s is not registered", alias, name)
            return
        if not isinstance(alias, str) or not _NAME.match(alias):
            raise ConstructionError(f"Invalid matcher name: {alias!r}")
        self._entries[alias] = MatcherEntry(name=alias, target=name)
        logger.debug("alias %s -> %s registered", alias, name)

    def register_batch(self, matchers: Mapping[str, MatcherFunction]) -> None:
        """Register every name -> checker pair of a mapping."""
        for name, checker in matchers.items():
            self.register(name, checker)

    def lookup(self, name: str) -> Optional[MatcherEntry]:
        """
        Resolve a name to the entry that owns its checker.

        Aliases are followed so the returned entry always has a checker; its
        name is the one failures are reported under.
        """
        entry = self._entries.get(name)
        visited: List[str] = []
        while entry is not None and entry.target is not None:
            if entry.name in visited:
                return None
            visited.append(entry.name)
            entry = self._entries.get(entry.target)
        return entry

    def names(self) -> List[str]:
        return sorted(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._entries)


default_registry = MatcherRegistry()
