# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

# This module defines the config classes provided to the user to configure how
# assertions are registered with the runtime.

from __future__ import annotations


class Target:
    def __init__(self, *, round_trip: bool = True):
        self.round_trip = round_trip

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({args})"


class Beam(Target):
    """
    Registers assertions on an Apache Beam pipeline. They are evaluated when the
    pipeline runs.

    :param round_trip:
        Whether elements are encoded and decoded with the collection's coder before
        they are compared.

    :param label_prefix:
        Prefix of the transform labels added to the pipeline.
    """

    def __init__(self, *, round_trip: bool = True, label_prefix: str = "beamtest"):
        super().__init__(round_trip=round_trip)
        self.label_prefix = label_prefix


class Local(Target):
    """
    Registers assertions with an in-memory `LocalRuntime`. They are evaluated when
    the runtime runs.
    """
