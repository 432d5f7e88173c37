# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from ._internal.eq.instances import (
    DispatchingEq,
    Eq,
    MappingEq,
    NdarrayEq,
    PandasEq,
    PolarsEq,
    SequenceEq,
    UniversalEq,
)
from ._internal.eq.registry import default_eq, eq_for, register_eq

__all__ = [
    "Eq",
    "UniversalEq",
    "DispatchingEq",
    "SequenceEq",
    "MappingEq",
    "NdarrayEq",
    "PolarsEq",
    "PandasEq",
    "eq_for",
    "register_eq",
    "default_eq",
]
