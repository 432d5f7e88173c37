# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import dataclasses
import itertools
from abc import ABC, abstractmethod
from typing import Any

import structlog

from pydiverse.beamtest._internal import errors
from pydiverse.beamtest._internal.backend.targets import Target
from pydiverse.beamtest._internal.errors import UnsupportedCollectionError
from pydiverse.beamtest._internal.matchers.core import Expect
from pydiverse.beamtest._internal.matchers.matcher import Assertion

logger = structlog.get_logger(__name__)

_label_counter = itertools.count()


@dataclasses.dataclass(frozen=True, slots=True)
class Registration:
    """Handle of an assertion registered with a runtime."""

    label: str
    assertion: str
    expect: Expect
    backend: str


class AssertionBackend(ABC):
    """
    Registers deferred assertions with a runtime. Registration only describes the
    check, the runtime evaluates it later, exactly once.
    """

    backend_name: str
    target_type: type[Target]

    def __init__(self, target: Target | None = None):
        if target is None:
            target = self.target_type()
        errors.check_arg_type(
            self.target_type, f"{type(self).__name__}.__init__", "target", target
        )
        self.target = target

    @abstractmethod
    def _register(self, collection: Any, assertion: Assertion, label: str): ...

    def register(
        self, collection: Any, assertion: Assertion, *, label: str | None = None
    ) -> Registration:
        if label is None:
            label = self.default_label(assertion)
        self._register(collection, assertion, label)

        registration = Registration(
            label, repr(assertion), assertion.expect, self.backend_name
        )
        logger.debug(
            "registered assertion",
            label=label,
            assertion=registration.assertion,
            expect=assertion.expect.value,
            backend=self.backend_name,
        )
        return registration

    def default_label(self, assertion: Assertion) -> str:
        return f"{self.backend_name}_{next(_label_counter)}_{assertion.matcher.name}"

    @staticmethod
    def for_collection(
        collection: Any, target: Target | None = None
    ) -> AssertionBackend:
        import apache_beam as beam

        from pydiverse.beamtest._internal.backend.beam import BeamBackend
        from pydiverse.beamtest._internal.backend.local import (
            LocalBackend,
            LocalCollection,
        )

        errors.check_arg_type(
            Target | None, "AssertionBackend.for_collection", "target", target
        )

        if isinstance(collection, beam.PCollection):
            return BeamBackend(target)
        if isinstance(collection, LocalCollection):
            return LocalBackend(target)

        raise UnsupportedCollectionError(
            f"cannot register an assertion on a `{type(collection).__name__}`\n"
            "hint: Assertions can be made on an `apache_beam.PCollection` or on a "
            "`LocalCollection` created by `LocalRuntime.collection`."
        )
