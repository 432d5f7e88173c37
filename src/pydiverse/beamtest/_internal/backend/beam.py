# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import itertools

import apache_beam as beam
from apache_beam.testing.util import assert_that

from pydiverse.beamtest._internal.backend.backend import AssertionBackend
from pydiverse.beamtest._internal.backend.targets import Beam
from pydiverse.beamtest._internal.matchers.matcher import Assertion
from pydiverse.beamtest._internal.matchers.scope import Pane, PanedValue
from pydiverse.beamtest._internal.serialize.closure import SerializableFn
from pydiverse.beamtest._internal.serialize.roundtrip import RoundTrip, coder_for

_label_counter = itertools.count()


class ReifyPanes(beam.DoFn):
    """Attaches the window and pane of each element to the element."""

    def process(
        self,
        element,
        window=beam.DoFn.WindowParam,
        pane_info=beam.DoFn.PaneInfoParam,
    ):
        yield PanedValue(element, window, Pane.from_beam(pane_info))


class BeamBackend(AssertionBackend):
    """
    Registers assertions through `apache_beam.testing.util.assert_that`.

    The runtime gathers the (possibly reified) elements of the collection in the
    global window and calls the assertion with all of them once the pipeline runs.
    A failing assertion fails the pipeline run.
    """

    backend_name = "beam"
    target_type = Beam

    def default_label(self, assertion: Assertion) -> str:
        return (
            f"{self.target.label_prefix}_{next(_label_counter)}_"
            f"{assertion.matcher.name}"
        )

    def _register(self, pcoll: beam.PCollection, assertion: Assertion, label: str):
        if assertion.matcher.round_trip and self.target.round_trip:
            pcoll = pcoll | f"{label}_RoundTrip" >> beam.Map(
                RoundTrip(coder_for(pcoll))
            )
        if assertion.reified:
            # must happen before `assert_that` moves everything to the global window
            pcoll = pcoll | f"{label}_ReifyPanes" >> beam.ParDo(ReifyPanes())

        assert_that(pcoll, SerializableFn(assertion), label=label)
