# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

# Elements are sent through an encode / decode cycle of their coder before they are
# compared, so that they went through the same canonicalization as the values the
# runtime serialized internally.

from __future__ import annotations

import apache_beam as beam
from apache_beam import coders

from pydiverse.beamtest._internal.util.reraise import reraise


class RoundTrip:
    __slots__ = ["coder"]

    def __init__(self, coder: coders.Coder):
        self.coder = coder

    def __call__(self, element):
        try:
            return self.coder.decode(self.coder.encode(element))
        except Exception as e:
            # a setup error, not an assertion failure
            reraise(
                e,
                prefix=f"cannot round trip element {element!r} through coder "
                f"{self.coder!r}: ",
            )

    def __getstate__(self):
        return (self.coder,)

    def __setstate__(self, state):
        (self.coder,) = state

    def __repr__(self) -> str:
        return f"RoundTrip({self.coder!r})"


def coder_for(pcoll: beam.PCollection) -> coders.Coder:
    return coders.registry.get_coder(pcoll.element_type)
