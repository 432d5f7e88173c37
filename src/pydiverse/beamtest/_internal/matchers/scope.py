# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

# Restrictions of an assertion to a subset of a collection's windows and panes. The
# window and pane of each element come from the runtime; the scopes only select.

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, NamedTuple

from apache_beam.transforms.window import BoundedWindow, GlobalWindow
from apache_beam.utils.windowed_value import PaneInfo, PaneInfoTiming

from pydiverse.beamtest._internal import errors
from pydiverse.beamtest._internal.errors import CollectionAssertionError
from pydiverse.beamtest._internal.matchers.core import Kind

if TYPE_CHECKING:
    from pydiverse.beamtest._internal.matchers.matcher import Matcher


class Pane(NamedTuple):
    is_first: bool = True
    is_last: bool = True
    timing: int = PaneInfoTiming.UNKNOWN
    index: int = 0

    @staticmethod
    def from_beam(pane_info: PaneInfo) -> Pane:
        return Pane(
            pane_info.is_first,
            pane_info.is_last,
            pane_info.timing,
            pane_info.index,
        )

    @property
    def is_on_time(self) -> bool:
        # a pane that never fired (e.g. bounded input without a GroupByKey) is the
        # only, and therefore the on-time, pane of its window
        if self.timing == PaneInfoTiming.UNKNOWN:
            return self.is_first and self.is_last
        return self.timing == PaneInfoTiming.ON_TIME


# default pane of elements that did not pass through a trigger
NO_FIRING = Pane()


class PanedValue(NamedTuple):
    value: Any
    window: BoundedWindow = GlobalWindow()
    pane: Pane = NO_FIRING


class Scope:
    name: str = "whole_collection"
    kinds: frozenset[Kind] = frozenset(Kind)
    # whether elements must be reified with their window and pane
    reified: bool = False

    def __init__(self, window: BoundedWindow | None = None):
        self.window = window

    def accepts(self, pv: PanedValue) -> bool:
        return True

    def select(self, elements: Iterable[Any]) -> list[Any]:
        if not self.reified:
            return list(elements)
        return [pv.value for pv in elements if self.accepts(pv)]

    def __eq__(self, rhs) -> bool:
        return type(self) is type(rhs) and self.window == rhs.window

    def __hash__(self):
        return hash((type(self).__qualname__, self.window))

    def __repr__(self) -> str:
        if self.window is None:
            return self.name
        return f"{self.name}({self.window!r})"


class WholeCollection(Scope): ...


class WindowScope(Scope):
    reified = True

    def accepts(self, pv: PanedValue) -> bool:
        return pv.window == self.window and self.accepts_pane(pv.pane)

    def accepts_pane(self, pane: Pane) -> bool:
        return True


class OnTimePane(WindowScope):
    name = "in_on_time_pane"

    def accepts_pane(self, pane: Pane) -> bool:
        return pane.is_on_time


class InWindow(WindowScope):
    name = "in_window"
    kinds = frozenset({Kind.ITERABLE})


class CombinedNonLatePanes(WindowScope):
    name = "in_combined_non_late_panes"
    kinds = frozenset({Kind.ITERABLE})

    def accepts_pane(self, pane: Pane) -> bool:
        return pane.timing != PaneInfoTiming.LATE


class FinalPane(WindowScope):
    """
    The pane with the highest index of the window. Runners do not reliably set
    `is_last` (the Python direct runner leaves it unset for the only pane of a
    default trigger), so the index decides.
    """

    name = "in_final_pane"

    def select(self, elements: Iterable[Any]) -> list[Any]:
        retained = [pv for pv in elements if self.accepts(pv)]
        if not retained:
            return []
        final = max(pv.pane.index for pv in retained)
        return [pv.value for pv in retained if pv.pane.index == final]


class OnlyPane(WindowScope):
    name = "in_only_pane"
    kinds = frozenset({Kind.SINGLE})

    def select(self, elements: Iterable[Any]) -> list[Any]:
        retained = [pv for pv in elements if self.accepts(pv)]
        panes = {pv.pane.index: pv.pane for pv in retained}
        # all elements must come from the first pane, and it must be the only one
        if len(panes) > 1 or any(not pane.is_first for pane in panes.values()):
            raise CollectionAssertionError(
                f"expected elements of window {self.window!r} to be produced by a "
                "trigger that fires at most once\n"
                f"found panes: {sorted(panes.values(), key=lambda p: p.index)!r}"
            )
        return [pv.value for pv in retained]


class EarlyGlobalWindowPanes(WindowScope):
    name = "in_early_global_window_panes"
    kinds = frozenset({Kind.ITERABLE})

    def __init__(self):
        super().__init__(GlobalWindow())

    def accepts_pane(self, pane: Pane) -> bool:
        return pane.timing == PaneInfoTiming.EARLY

    def __repr__(self) -> str:
        return self.name


def _restrict(scope: Scope, matcher: Matcher) -> Matcher:
    from pydiverse.beamtest._internal.matchers.matcher import Matcher

    errors.check_arg_type(Matcher, scope.name, "matcher", matcher)
    if matcher.kind not in scope.kinds:
        allowed = " or ".join(sorted(k.value for k in scope.kinds))
        raise TypeError(
            f"`{scope.name}` cannot be applied to the {matcher.kind.value} matcher "
            f"`{matcher.name}`\n"
            f"hint: `{scope.name}` only accepts {allowed} matchers."
        )
    return matcher.scoped(scope)


def in_on_time_pane(window: BoundedWindow, matcher: Matcher) -> Matcher:
    """
    Restricts *matcher* to *window*, looking only at the on-time pane.
    """
    errors.check_arg_type(BoundedWindow, "in_on_time_pane", "window", window)
    return _restrict(OnTimePane(window), matcher)


def in_window(window: BoundedWindow, matcher: Matcher) -> Matcher:
    """Restricts *matcher* to all panes of *window*."""
    errors.check_arg_type(BoundedWindow, "in_window", "window", window)
    return _restrict(InWindow(window), matcher)


def in_combined_non_late_panes(window: BoundedWindow, matcher: Matcher) -> Matcher:
    """
    Restricts *matcher* to *window*, across all panes that were not produced by the
    arrival of late data.
    """
    errors.check_arg_type(
        BoundedWindow, "in_combined_non_late_panes", "window", window
    )
    return _restrict(CombinedNonLatePanes(window), matcher)


def in_final_pane(window: BoundedWindow, matcher: Matcher) -> Matcher:
    """Restricts *matcher* to the final pane of *window*."""
    errors.check_arg_type(BoundedWindow, "in_final_pane", "window", window)
    return _restrict(FinalPane(window), matcher)


def in_only_pane(window: BoundedWindow, matcher: Matcher) -> Matcher:
    """
    Restricts *matcher* to *window* and expects the window's output to be produced
    exactly once, i.e. all of it lies in a single pane.
    """
    errors.check_arg_type(BoundedWindow, "in_only_pane", "window", window)
    return _restrict(OnlyPane(window), matcher)


def in_early_global_window_panes(matcher: Matcher) -> Matcher:
    """Restricts *matcher* to the early panes of the global window."""
    return _restrict(EarlyGlobalWindowPanes(), matcher)
