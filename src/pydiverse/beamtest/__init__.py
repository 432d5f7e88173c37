# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from ._internal.backend.backend import Registration
from ._internal.backend.local import LocalCollection, LocalRuntime
from ._internal.backend.targets import Beam, Local, Target
from ._internal.matchers.builders import (
    be_empty,
    contain_in_any_order,
    contain_single_value,
    contain_value,
    equal_map_of,
    exist,
    for_all,
    have_size,
    satisfy,
    satisfy_single_value,
)
from ._internal.matchers.core import Expect, MatchResult
from ._internal.matchers.matcher import Matcher
from ._internal.matchers.scope import (
    NO_FIRING,
    Pane,
    PanedValue,
    in_combined_non_late_panes,
    in_early_global_window_panes,
    in_final_pane,
    in_on_time_pane,
    in_only_pane,
    in_window,
)
from ._internal.pipe.verbs import assert_that, should, should_not
from ._internal.serialize.closure import SerializableFn
from .eq import Eq, eq_for, register_eq
from .errors import *
from .errors import __all__ as __errors
from .version import __version__

__all__ = [
    "__version__",
    "assert_that",
    "should",
    "should_not",
    "Expect",
    "Matcher",
    "MatchResult",
    "Registration",
    "be_empty",
    "contain_in_any_order",
    "contain_single_value",
    "contain_value",
    "equal_map_of",
    "exist",
    "for_all",
    "have_size",
    "satisfy",
    "satisfy_single_value",
    "in_combined_non_late_panes",
    "in_early_global_window_panes",
    "in_final_pane",
    "in_on_time_pane",
    "in_only_pane",
    "in_window",
    "Pane",
    "PanedValue",
    "NO_FIRING",
    "Target",
    "Beam",
    "Local",
    "LocalRuntime",
    "LocalCollection",
    "SerializableFn",
    "Eq",
    "eq_for",
    "register_eq",
] + __errors
