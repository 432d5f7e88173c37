# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from .assertion import assert_fails, assert_passes, run_assertion
from .backend import BACKENDS

__all__ = [
    "assert_fails",
    "assert_passes",
    "run_assertion",
    "BACKENDS",
]
