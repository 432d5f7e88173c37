# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Mapping
from pprint import pformat
from typing import Any

from pydiverse.beamtest._internal import errors
from pydiverse.beamtest._internal.eq.instances import Eq
from pydiverse.beamtest._internal.matchers.core import MatchResult
from pydiverse.beamtest._internal.matchers.matcher import (
    IterableMatcher,
    SingleMatcher,
)
from pydiverse.beamtest._internal.values.wrapper import Wrapped, wrap_all


def _items(values: Iterable[Any]) -> str:
    return "[" + "".join(f"\n\t\t{v!r}" for v in values) + "\n]"


def _predicate_name(predicate: Callable) -> str:
    if isinstance(predicate, functools.partial):
        args = ", ".join(_predicate_name(a) for a in predicate.args)
        return f"{_predicate_name(predicate.func)}({args})"
    return getattr(predicate, "__qualname__", None) or repr(predicate)


class ContainInAnyOrder(IterableMatcher):
    name = "contain_in_any_order"

    def __init__(self, expected: Iterable[Any], *, eq: Eq | None = None):
        super().__init__(eq=eq)
        self.expected = list(expected)

    def evaluate(self, values):
        expected = wrap_all(self.expected, self.eq)
        missing = list(expected)
        unexpected = []
        for v in wrap_all(values, self.eq):
            for i, e in enumerate(missing):
                if e == v:
                    del missing[i]
                    break
            else:
                unexpected.append(v)

        failure = (
            "collection does not contain the expected items in any order\n"
            f"expected: iterable with items {_items(expected)}"
        )
        if unexpected:
            failure += f"\nunexpected elements: {_items(unexpected)}"
        if missing:
            failure += f"\nmissing elements: {_items(missing)}"

        return MatchResult(
            not missing and not unexpected,
            failure,
            "collection contains exactly the given items in any order\n"
            f"items: {_items(expected)}",
        )

    def _args_repr(self):
        return repr(self.expected)


class ContainSingleValue(SingleMatcher):
    name = "contain_single_value"

    def __init__(self, expected: Any, *, eq: Eq | None = None):
        super().__init__(eq=eq)
        self.expected = expected

    def evaluate(self, values):
        actual = Wrapped(self.single(values), self.eq)
        expected = Wrapped(self.expected, self.eq)
        return MatchResult(
            actual == expected,
            f"expected single value {expected!r}, found {actual!r}",
            f"expected single value other than {expected!r}",
        )

    def _args_repr(self):
        return repr(self.expected)


class ContainValue(IterableMatcher):
    name = "contain_value"

    def __init__(self, expected: Any, *, eq: Eq | None = None):
        super().__init__(eq=eq)
        self.expected = expected

    def evaluate(self, values):
        expected = Wrapped(self.expected, self.eq)
        wrapped = wrap_all(values, self.eq)
        return MatchResult(
            any(v == expected for v in wrapped),
            f"collection does not contain {expected!r}\nelements: {_items(wrapped)}",
            f"collection contains {expected!r}",
        )

    def _args_repr(self):
        return repr(self.expected)


class BeEmpty(IterableMatcher):
    name = "be_empty"
    round_trip = False

    def evaluate(self, values):
        return MatchResult(
            len(values) == 0,
            f"expected an empty collection, found {len(values)} elements\n"
            f"elements: {_items(values)}",
            "collection is empty",
        )


class HaveSize(IterableMatcher):
    name = "have_size"
    round_trip = False

    def __init__(self, size: int):
        super().__init__()
        errors.check_arg_type(int, "have_size", "size", size)
        if isinstance(size, bool) or size < 0:
            raise ValueError(f"`have_size` expects a non-negative size, got {size}")
        self.size = size

    def evaluate(self, values):
        return MatchResult(
            len(values) == self.size,
            f"collection expected size: {self.size}, actual: {len(values)}",
            f"collection expected size: not {self.size}, actual: {len(values)}",
        )

    def _args_repr(self):
        return repr(self.size)


class EqualMapOf(SingleMatcher):
    """
    The key-value pairs of the collection, taken as a single mapping. Keys are
    expected to be unique; for duplicate keys the last pair wins. Values are compared
    with `eq`, keys by their own equality.
    """

    name = "equal_map_of"

    def __init__(self, expected: Mapping[Any, Any], *, eq: Eq | None = None):
        super().__init__(eq=eq)
        errors.check_arg_type(Mapping, "equal_map_of", "expected", expected)
        self.expected = dict(expected)

    def evaluate(self, values):
        actual = dict(values)

        failure = "collection is not equal to the expected map"
        if missing := [k for k in self.expected if k not in actual]:
            failure += f"\nmissing keys: {pformat(missing)}"
        if extra := [k for k in actual if k not in self.expected]:
            failure += f"\nunexpected keys: {pformat(extra)}"
        differing = {
            k: (self.expected[k], actual[k])
            for k in self.expected
            if k in actual and not self.eq.eqv(actual[k], self.expected[k])
        }
        if differing:
            failure += f"\ndiffering values (expected, actual): {pformat(differing)}"

        return MatchResult(
            not missing and not extra and not differing,
            failure,
            f"collection is equal to the map {pformat(self.expected)}",
        )

    def _args_repr(self):
        return pformat(self.expected)


class Satisfy(IterableMatcher):
    name = "satisfy"

    def __init__(self, predicate: Callable[[list[Any]], bool]):
        super().__init__()
        errors.check_callable("satisfy", "predicate", predicate)
        self.predicate = predicate

    def evaluate(self, values):
        name = _predicate_name(self.predicate)
        return MatchResult(
            bool(self.predicate(values)),
            f"collection does not satisfy predicate `{name}`\n"
            f"elements: {_items(values)}",
            f"collection satisfies predicate `{name}`",
        )

    def _args_repr(self):
        return _predicate_name(self.predicate)


class SatisfySingleValue(SingleMatcher):
    name = "satisfy_single_value"

    def __init__(self, predicate: Callable[[Any], bool]):
        super().__init__()
        errors.check_callable("satisfy_single_value", "predicate", predicate)
        self.predicate = predicate

    def evaluate(self, values):
        value = self.single(values)
        name = _predicate_name(self.predicate)
        return MatchResult(
            bool(self.predicate(value)),
            f"single value {pformat(value)} does not satisfy predicate `{name}`",
            f"single value {pformat(value)} satisfies predicate `{name}`",
        )

    def _args_repr(self):
        return _predicate_name(self.predicate)


def _all_match(predicate, values) -> bool:
    return all(predicate(v) for v in values)


def _any_match(predicate, values) -> bool:
    return any(predicate(v) for v in values)


def contain_in_any_order(
    expected: Iterable[Any], *, eq: Eq | None = None
) -> ContainInAnyOrder:
    """
    The collection contains exactly the elements of *expected*, in any order.

    Elements are compared with *eq* (by default the registered equality of their
    type), duplicates count.

    Examples
    --------
    >>> with TestPipeline() as p:
    ...     pcoll = p | beam.Create([3, 1, 2])
    ...     pcoll >> should(contain_in_any_order([1, 2, 3]))
    """
    return ContainInAnyOrder(expected, eq=eq)


def contain_single_value(expected: Any, *, eq: Eq | None = None) -> ContainSingleValue:
    """The collection has exactly one element, and it is equal to *expected*."""
    return ContainSingleValue(expected, eq=eq)


def contain_value(expected: Any, *, eq: Eq | None = None) -> ContainValue:
    """
    *expected* is an element of the collection. Nothing is assumed about the other
    elements.
    """
    return ContainValue(expected, eq=eq)


def be_empty() -> BeEmpty:
    return BeEmpty()


def have_size(size: int) -> HaveSize:
    return HaveSize(size)


def equal_map_of(expected: Mapping[Any, Any], *, eq: Eq | None = None) -> EqualMapOf:
    """
    The collection of key-value pairs is equal to the mapping *expected*.
    """
    return EqualMapOf(expected, eq=eq)


def satisfy(predicate: Callable[[list[Any]], bool]) -> Satisfy:
    """
    *predicate* returns a truthy value for the list of all elements.

    The predicate is shipped to the pipeline workers, so everything it captures must
    be serializable with cloudpickle.
    """
    return Satisfy(predicate)


def satisfy_single_value(predicate: Callable[[Any], bool]) -> SatisfySingleValue:
    """The collection has exactly one element and *predicate* holds for it."""
    return SatisfySingleValue(predicate)


def for_all(predicate: Callable[[Any], bool]) -> Satisfy:
    """Every element satisfies *predicate*."""
    errors.check_callable("for_all", "predicate", predicate)
    return Satisfy(functools.partial(_all_match, predicate))


def exist(predicate: Callable[[Any], bool]) -> Satisfy:
    """At least one element satisfies *predicate*."""
    errors.check_callable("exist", "predicate", predicate)
    return Satisfy(functools.partial(_any_match, predicate))
