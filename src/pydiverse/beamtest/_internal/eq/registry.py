# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import numpy as np
import pandas as pd
import polars as pl

from pydiverse.beamtest._internal import errors
from pydiverse.beamtest._internal.eq.instances import (
    DispatchingEq,
    Eq,
    MappingEq,
    NdarrayEq,
    PandasEq,
    PolarsEq,
    SequenceEq,
    UniversalEq,
)


class EqRegistry:
    type_to_eq: dict[type, Eq] = {}

    @staticmethod
    def register(tp: type, eq: Eq):
        errors.check_arg_type(type, "EqRegistry.register", "tp", tp)
        errors.check_arg_type(Eq, "EqRegistry.register", "eq", eq)
        EqRegistry.type_to_eq[tp] = eq

    @staticmethod
    def resolve(tp: type) -> Eq:
        # the most specific registered base class wins, everything else falls back to
        # native equality
        for base in tp.__mro__:
            if (eq := EqRegistry.type_to_eq.get(base)) is not None:
                return eq
        return UniversalEq()


for tp, eq in [
    (list, SequenceEq()),
    (tuple, SequenceEq()),
    (dict, MappingEq()),
    (np.ndarray, NdarrayEq()),
    (pl.Series, PolarsEq()),
    (pl.DataFrame, PolarsEq()),
    (pd.Series, PandasEq()),
    (pd.DataFrame, PandasEq()),
    (pd.Index, PandasEq()),
]:
    EqRegistry.register(tp, eq)


def eq_for(tp: type) -> Eq:
    """
    Returns the equality instance used for values of type *tp*.

    >>> eq_for(np.ndarray).eqv(np.array([1, 2]), np.array([1, 2]))
    True
    """
    return EqRegistry.resolve(tp)


def register_eq(tp: type, eq: Eq) -> None:
    """
    Registers *eq* for *tp* and all its subclasses that have no instance of their own.

    Registration is global. Since workers unpickle the default equality and resolve
    instances on their side, the registration must also run on the workers, e.g. by
    performing it at import time of the module that defines *tp*.
    """
    EqRegistry.register(tp, eq)


def default_eq() -> Eq:
    return DispatchingEq()
