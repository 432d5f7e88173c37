# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from collections.abc import Iterable
from pprint import pformat
from typing import Any

from pydiverse.beamtest._internal.eq.instances import Eq


class Wrapped:
    """
    A collection element together with the equality used to compare it.

    Two wrapped values are equal iff ``eq.eqv`` says so. Comparing against an
    unwrapped value uses the equality of this side.
    """

    __slots__ = ["value", "eq"]

    def __init__(self, value: Any, eq: Eq):
        self.value = value
        self.eq = eq

    def __eq__(self, rhs) -> bool:
        if isinstance(rhs, Wrapped):
            return self.eq.eqv(self.value, rhs.value)
        return self.eq.eqv(self.value, rhs)

    def __ne__(self, rhs) -> bool:
        return not self.__eq__(rhs)

    # custom equality cannot promise a consistent hash
    __hash__ = None

    def __repr__(self) -> str:
        return pformat(self.value)

    def __getstate__(self):
        return (self.value, self.eq)

    def __setstate__(self, state):
        self.value, self.eq = state


def wrap_all(values: Iterable[Any], eq: Eq) -> list[Wrapped]:
    return [Wrapped(v, eq) for v in values]
