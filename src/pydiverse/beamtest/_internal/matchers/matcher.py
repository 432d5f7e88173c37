# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from pydiverse.beamtest._internal import errors
from pydiverse.beamtest._internal.eq.instances import Eq
from pydiverse.beamtest._internal.eq.registry import default_eq
from pydiverse.beamtest._internal.errors import CollectionAssertionError
from pydiverse.beamtest._internal.matchers.core import Expect, Kind, MatchResult
from pydiverse.beamtest._internal.matchers.scope import Scope, WholeCollection


class Matcher(ABC):
    """
    Describes what to check about a collection. A matcher holds no results, it is
    evaluated by the runtime once the pipeline has produced the collection.
    """

    name: str
    kind: Kind
    # whether the elements are normalized through the collection's coder first
    round_trip: bool = True

    def __init__(self, *, eq: Eq | None = None):
        errors.check_arg_type(Eq | None, f"{self.name}", "eq", eq)
        self.eq = eq if eq is not None else default_eq()
        self.scope: Scope = WholeCollection()

    def scoped(self, scope: Scope) -> Matcher:
        if not isinstance(self.scope, WholeCollection):
            raise TypeError(
                f"matcher `{self.name}` is already restricted by `{self.scope!r}`"
            )
        new = copy.copy(self)
        new.scope = scope
        return new

    @abstractmethod
    def evaluate(self, values: list[Any]) -> MatchResult: ...

    def _args_repr(self) -> str:
        return ""

    def __repr__(self) -> str:
        r = f"{self.name}({self._args_repr()})"
        if isinstance(self.scope, WholeCollection):
            return r
        return f"{r}.{self.scope!r}"


class IterableMatcher(Matcher):
    kind = Kind.ITERABLE


class SingleMatcher(Matcher):
    kind = Kind.SINGLE

    @staticmethod
    def single(values: list[Any]) -> Any:
        # the precondition holds regardless of the polarity
        if len(values) != 1:
            raise CollectionAssertionError(
                f"expected a single element, found {len(values)}\n"
                f"elements: {values!r}"
            )
        return values[0]


class Assertion:
    """
    A matcher bound to a polarity. Calling it with the elements of the collection
    under test raises `CollectionAssertionError` if the check fails.

    The elements are reified `PanedValue`s if the matcher's scope needs window and
    pane information, otherwise plain values.
    """

    def __init__(self, matcher: Matcher, expect: Expect):
        errors.check_arg_type(Matcher, "Assertion.__init__", "matcher", matcher)
        errors.check_arg_type(Expect, "Assertion.__init__", "expect", expect)
        self.matcher = matcher
        self.expect = expect

    @property
    def reified(self) -> bool:
        return self.matcher.scope.reified

    def __call__(self, actual: Iterable[Any]) -> None:
        values = self.matcher.scope.select(actual)
        result = self.matcher.evaluate(values)
        if (message := result.message_for(self.expect)) is not None:
            raise CollectionAssertionError(message)

    def __repr__(self) -> str:
        if self.expect is Expect.NEGATIVE:
            return f"not {self.matcher!r}"
        return repr(self.matcher)
