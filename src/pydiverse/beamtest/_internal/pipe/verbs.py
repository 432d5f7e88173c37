# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from typing import Any

from pydiverse.beamtest._internal import errors
from pydiverse.beamtest._internal.backend.backend import AssertionBackend, Registration
from pydiverse.beamtest._internal.backend.targets import Target
from pydiverse.beamtest._internal.matchers.core import Expect
from pydiverse.beamtest._internal.matchers.matcher import Assertion, Matcher
from pydiverse.beamtest._internal.pipe.pipeable import verb

__all__ = ["assert_that", "should", "should_not"]


def assert_that(
    collection: Any,
    matcher: Matcher,
    expect: Expect = Expect.POSITIVE,
    *,
    target: Target | None = None,
    label: str | None = None,
) -> Registration:
    """
    Registers a deferred assertion that *collection* matches *matcher*.

    Nothing is checked right away. The runtime evaluates the assertion when it runs,
    e.g. when the ``with TestPipeline() as p:`` block is left, and raises
    `CollectionAssertionError` if it fails.

    :param collection:
        An ``apache_beam.PCollection`` or a `LocalCollection`.

    :param matcher:
        What to check, e.g. ``contain_in_any_order([1, 2, 3])``.

    :param expect:
        ``Expect.POSITIVE`` to assert that the matcher matches, ``Expect.NEGATIVE``
        to assert that it does not.

    :param target:
        Configuration of the backend, see `Beam` and `Local`. Inferred from the type
        of *collection* if omitted.

    :param label:
        Label of the assertion. For Beam, it must be unique within the pipeline.
    """
    errors.check_arg_type(Matcher, "assert_that", "matcher", matcher)
    errors.check_arg_type(Expect, "assert_that", "expect", expect)
    errors.check_arg_type(str | None, "assert_that", "label", label)

    backend = AssertionBackend.for_collection(collection, target)
    return backend.register(collection, Assertion(matcher, expect), label=label)


@verb
def should(
    collection: Any,
    matcher: Matcher,
    *,
    target: Target | None = None,
    label: str | None = None,
) -> Registration:
    """
    Asserts that the collection matches.

    Examples
    --------
    >>> pcoll >> should(have_size(3))
    >>> pcoll >> should(in_window(IntervalWindow(0, 10), contain_value(1)))
    """
    return assert_that(
        collection, matcher, Expect.POSITIVE, target=target, label=label
    )


@verb
def should_not(
    collection: Any,
    matcher: Matcher,
    *,
    target: Target | None = None,
    label: str | None = None,
) -> Registration:
    """
    Asserts that the collection does not match.

    >>> pcoll >> should_not(contain_value(42))
    """
    return assert_that(
        collection, matcher, Expect.NEGATIVE, target=target, label=label
    )
