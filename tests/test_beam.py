from __future__ import annotations

import apache_beam as beam
import numpy as np
import pytest
from apache_beam.testing.test_pipeline import TestPipeline
from apache_beam.transforms import trigger
from apache_beam.transforms.window import (
    FixedWindows,
    GlobalWindows,
    IntervalWindow,
    TimestampedValue,
)

from pydiverse.beamtest import (
    Beam,
    Expect,
    assert_that,
    be_empty,
    contain_in_any_order,
    contain_single_value,
    contain_value,
    equal_map_of,
    have_size,
    in_combined_non_late_panes,
    in_final_pane,
    in_on_time_pane,
    in_only_pane,
    in_window,
    satisfy,
    should,
    should_not,
)

pytestmark = pytest.mark.beam


def windowed(p, elements, label="Create"):
    """Elements with timestamp = value, in fixed windows of size 10."""
    return (
        p
        | label >> beam.Create(elements)
        | f"{label}_Stamp" >> beam.Map(lambda x: TimestampedValue(x, x))
        | f"{label}_Window" >> beam.WindowInto(FixedWindows(10))
    )


class TestPipelineAssertions:
    def test_fixture_and_pipe(self, pipeline):
        pcoll = pipeline | beam.Create([3, 1, 2])
        pcoll >> should(contain_in_any_order([1, 2, 3]))
        pcoll >> should_not(contain_value(4))
        pcoll >> should(have_size(3))

    def test_failure_fails_the_run(self):
        with pytest.raises(Exception, match="missing elements"):
            with TestPipeline() as p:
                pcoll = p | beam.Create([1, 2])
                pcoll >> should(contain_in_any_order([1, 2, 3]))

    def test_labels(self):
        with TestPipeline() as p:
            pcoll = p | beam.Create([1])
            reg = assert_that(pcoll, have_size(1), label="one_element")
            other = pcoll >> should(have_size(1), target=Beam(label_prefix="size"))
        assert reg.label == "one_element"
        assert reg.backend == "beam"
        assert other.label.startswith("size_")

    def test_without_round_trip(self):
        with TestPipeline() as p:
            pcoll = p | beam.Create([(1, "a")])
            pcoll >> should(
                contain_single_value((1, "a")), target=Beam(round_trip=False)
            )

    def test_equal_map_of(self):
        with TestPipeline() as p:
            pairs = p | beam.Create([("a", 1), ("b", 2)]) | beam.CombinePerKey(sum)
            pairs >> should(equal_map_of({"a": 1, "b": 2}))

    def test_arrays(self):
        with TestPipeline() as p:
            pcoll = p | beam.Create([np.array([1.0, 2.0])]) | beam.Map(lambda a: a * 2)
            pcoll >> should(contain_single_value(np.array([2.0, 4.0])))

    def test_satisfy_ships_closure(self):
        limit = 10
        with TestPipeline() as p:
            pcoll = p | beam.Create([1, 2, 3])
            pcoll >> should(satisfy(lambda xs: sum(xs) < limit))
            pcoll >> should_not(satisfy(lambda xs: sum(xs) > limit))

    def test_empty(self):
        with TestPipeline() as p:
            pcoll = p | beam.Create([]) | beam.Map(lambda x: x)
            pcoll >> should(be_empty())


class TestWindows:
    def test_in_window(self):
        with TestPipeline() as p:
            pcoll = windowed(p, [1, 2, 11, 12, 13])
            pcoll >> should(
                in_window(IntervalWindow(0, 10), contain_in_any_order([1, 2]))
            )
            pcoll >> should(in_window(IntervalWindow(10, 20), have_size(3)))
            pcoll >> should(in_window(IntervalWindow(20, 30), be_empty()))
            # the whole collection still sees every element
            pcoll >> should(have_size(5))

    def test_in_window_failure(self):
        with pytest.raises(Exception, match="unexpected elements"):
            with TestPipeline() as p:
                pcoll = windowed(p, [1, 2, 11])
                pcoll >> should(
                    in_window(IntervalWindow(0, 10), contain_in_any_order([1]))
                )

    def test_panes_of_default_trigger(self):
        with TestPipeline() as p:
            sums = windowed(p, [1, 2, 11]) | beam.CombineGlobally(
                sum
            ).without_defaults()
            w0 = IntervalWindow(0, 10)
            w1 = IntervalWindow(10, 20)
            sums >> should(in_on_time_pane(w0, contain_single_value(3)))
            sums >> should(in_final_pane(w1, contain_single_value(11)))
            sums >> should(in_only_pane(w0, contain_single_value(3)))
            sums >> should(in_combined_non_late_panes(w1, contain_in_any_order([11])))

    def test_negated_scope(self):
        with TestPipeline() as p:
            pcoll = windowed(p, [1, 11])
            assert_that(
                pcoll,
                in_window(IntervalWindow(0, 10), contain_value(11)),
                Expect.NEGATIVE,
            )

    def test_global_window_with_trigger(self):
        with TestPipeline() as p:
            pcoll = (
                p
                | beam.Create([1, 2, 3])
                | beam.WindowInto(
                    GlobalWindows(),
                    trigger=trigger.AfterWatermark(),
                    accumulation_mode=trigger.AccumulationMode.DISCARDING,
                )
            )
            pcoll >> should(contain_in_any_order([1, 2, 3]))
