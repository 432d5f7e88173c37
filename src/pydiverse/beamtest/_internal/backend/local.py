# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import cloudpickle
import structlog
from apache_beam import coders

from pydiverse.beamtest._internal import errors
from pydiverse.beamtest._internal.backend.backend import AssertionBackend
from pydiverse.beamtest._internal.backend.targets import Local
from pydiverse.beamtest._internal.matchers.matcher import Assertion
from pydiverse.beamtest._internal.matchers.scope import PanedValue
from pydiverse.beamtest._internal.serialize.closure import SerializableFn
from pydiverse.beamtest._internal.serialize.roundtrip import RoundTrip

logger = structlog.get_logger(__name__)


class LocalCollection:
    """
    An in-memory collection of elements, each living in a window and a pane.

    Plain values are put into the global window, in a pane that never fired. Pass
    `PanedValue`s to place elements into specific windows and panes.
    """

    def __init__(
        self,
        runtime: LocalRuntime,
        elements: Iterable[Any],
        *,
        coder: coders.Coder | None = None,
    ):
        errors.check_arg_type(
            LocalRuntime, "LocalCollection.__init__", "runtime", runtime
        )
        errors.check_arg_type(
            coders.Coder | None, "LocalCollection.__init__", "coder", coder
        )
        self.runtime = runtime
        self.elements = tuple(
            e if isinstance(e, PanedValue) else PanedValue(e) for e in elements
        )
        self.coder = coder if coder is not None else coders.FastPrimitivesCoder()

    def __len__(self) -> int:
        return len(self.elements)

    def __repr__(self) -> str:
        return f"LocalCollection({[pv.value for pv in self.elements]!r})"


class LocalRuntime:
    """
    Collects deferred assertions and evaluates them on `run`.

    Used as a context manager, the runtime runs when the block exits without an
    exception, like a Beam `TestPipeline`.

    Examples
    --------
    >>> with LocalRuntime() as rt:
    ...     rt.collection([3, 1, 2]) >> should(contain_in_any_order([1, 2, 3]))
    """

    def __init__(self):
        self._pending: list[tuple[str, Callable[[], None]]] = []

    def collection(
        self, elements: Iterable[Any], *, coder: coders.Coder | None = None
    ) -> LocalCollection:
        return LocalCollection(self, elements, coder=coder)

    def defer(self, label: str, check: Callable[[], None]):
        self._pending.append((label, check))

    @property
    def pending(self) -> list[str]:
        return [label for label, _ in self._pending]

    def run(self):
        """
        Evaluates every registered check once, in registration order, and raises the
        first failure.
        """
        pending, self._pending = self._pending, []
        logger.info("evaluating deferred assertions", count=len(pending))
        for label, check in pending:
            logger.debug("evaluating assertion", label=label)
            check()

    def __enter__(self) -> LocalRuntime:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.run()


class _DeferredCheck:
    def __init__(
        self,
        fn: SerializableFn,
        collection: LocalCollection,
        round_trip: bool,
        reified: bool,
    ):
        self.fn = fn
        self.collection = collection
        self.round_trip = round_trip
        self.reified = reified

    def __call__(self):
        elements = self.collection.elements
        if self.round_trip:
            normalize = RoundTrip(self.collection.coder)
            elements = [pv._replace(value=normalize(pv.value)) for pv in elements]
        if self.reified:
            self.fn(list(elements))
        else:
            self.fn([pv.value for pv in elements])


class LocalBackend(AssertionBackend):
    backend_name = "local"
    target_type = Local

    def _register(self, collection: LocalCollection, assertion: Assertion, label: str):
        # the same trip the assertion takes to a pipeline worker
        fn = cloudpickle.loads(cloudpickle.dumps(SerializableFn(assertion)))
        collection.runtime.defer(
            label,
            _DeferredCheck(
                fn,
                collection,
                assertion.matcher.round_trip and self.target.round_trip,
                assertion.reified,
            ),
        )
