# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from typing import Any

import numpy as np
import pandas as pd
import polars as pl


class Eq(ABC):
    """
    An equality capability for values of some type.

    Instances must be picklable by reference (module level classes without
    closures), since they travel with the assertion to the pipeline workers.
    """

    @abstractmethod
    def eqv(self, x: Any, y: Any) -> bool: ...

    def __eq__(self, rhs) -> bool:
        return type(self) is type(rhs)

    def __hash__(self):
        return hash(type(self).__qualname__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class UniversalEq(Eq):
    """
    Native ``==``. Used for every type without a registered instance.

    Dataclass instances are compared field by field through the registry, so an
    array field compares by content. Any other value whose ``==`` yields something
    without a truth value (e.g. an object holding arrays in a tuple) is unequal.
    """

    def eqv(self, x, y) -> bool:
        if dataclasses.is_dataclass(x) and not isinstance(x, type):
            if type(x) is not type(y):
                return False
            eq = DispatchingEq()
            return all(
                eq.eqv(getattr(x, f.name), getattr(y, f.name))
                for f in dataclasses.fields(x)
                if f.compare
            )
        try:
            return bool(x == y)
        except ValueError:
            # "the truth value of an array is ambiguous"
            return False


class DispatchingEq(Eq):
    """
    Looks up the instance for the operands in the registry on every call. The left
    operand decides unless only the right one has a dedicated instance.

    This is the default equality of all matchers. Container instances recurse through
    it, so an array nested inside a tuple or dict still compares by content.
    """

    def eqv(self, x, y) -> bool:
        from pydiverse.beamtest._internal.eq.registry import EqRegistry

        eq = EqRegistry.resolve(type(x))
        if isinstance(eq, UniversalEq):
            # the right operand may still be array-like
            rhs_eq = EqRegistry.resolve(type(y))
            if not isinstance(rhs_eq, UniversalEq):
                return rhs_eq.eqv(y, x)
        return eq.eqv(x, y)


class SequenceEq(Eq):
    # lists and tuples; `==` on them would call `==` on arrays inside
    def eqv(self, xs, ys) -> bool:
        if not isinstance(ys, list if isinstance(xs, list) else tuple):
            return False
        if len(xs) != len(ys):
            return False
        eq = DispatchingEq()
        return all(eq.eqv(x, y) for x, y in zip(xs, ys, strict=True))


class MappingEq(Eq):
    def eqv(self, x, y) -> bool:
        if not isinstance(y, dict) or x.keys() != y.keys():
            return False
        eq = DispatchingEq()
        return all(eq.eqv(x[k], y[k]) for k in x)


class NdarrayEq(Eq):
    def eqv(self, x: np.ndarray, y) -> bool:
        if not isinstance(y, np.ndarray) or x.shape != y.shape:
            return False
        if x.dtype == object or y.dtype == object:
            eq = DispatchingEq()
            return all(eq.eqv(a, b) for a, b in zip(x.flat, y.flat, strict=True))
        return bool(np.array_equal(x, y))


class PolarsEq(Eq):
    def eqv(self, x: pl.Series | pl.DataFrame, y) -> bool:
        if type(x) is not type(y):
            return False
        return x.equals(y)


class PandasEq(Eq):
    def eqv(self, x: pd.Series | pd.DataFrame | pd.Index, y) -> bool:
        if type(x) is not type(y):
            return False
        return bool(x.equals(y))
