# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import dataclasses
import enum


class Expect(enum.Enum):
    """
    Polarity of an assertion.

    ``POSITIVE`` asserts that the matcher matches, ``NEGATIVE`` that it does not.
    The polarity is always passed explicitly, it is never derived from the calling
    test framework.
    """

    POSITIVE = "positive"
    NEGATIVE = "negative"


class Kind(enum.Enum):
    # the matcher looks at all retained elements
    ITERABLE = "iterable"
    # the matcher looks at one value derived from the retained elements
    SINGLE = "single"


@dataclasses.dataclass(frozen=True, slots=True)
class MatchResult:
    matches: bool
    failure_message: str
    negated_failure_message: str

    def message_for(self, expect: Expect) -> str | None:
        """The failure message under *expect*, or None if the check passed."""
        if expect is Expect.POSITIVE:
            return None if self.matches else self.failure_message
        return self.negated_failure_message if self.matches else None
