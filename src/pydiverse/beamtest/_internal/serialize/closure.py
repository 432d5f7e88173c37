# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import cloudpickle

from pydiverse.beamtest._internal import errors
from pydiverse.beamtest._internal.errors import ClosureSerializationError


def _restore(loads: Callable[[bytes], Any], payload: bytes) -> SerializableFn:
    return SerializableFn(loads(payload), loads=loads, _payload=payload)


class SerializableFn:
    """
    Envelope around a checker function that is shipped to the pipeline workers.

    The function is serialized with *dumps* right away, so a function that captures
    something unserializable fails while the test sets up the pipeline and not in the
    middle of a pipeline run. On the receiving side only *loads* is needed, it must
    therefore be importable by reference (a module level function).

    Calling the envelope forwards all arguments and returns None: a check succeeds
    iff it does not raise.
    """

    __slots__ = ["fn", "_loads", "_payload"]

    def __init__(
        self,
        fn: Callable[..., Any],
        *,
        dumps: Callable[[Any], bytes] = cloudpickle.dumps,
        loads: Callable[[bytes], Any] = cloudpickle.loads,
        _payload: bytes | None = None,
    ):
        errors.check_callable("SerializableFn", "fn", fn)
        self.fn = fn
        self._loads = loads
        if _payload is None:
            try:
                _payload = dumps(fn)
            except Exception as e:
                raise ClosureSerializationError(
                    f"cannot serialize `{fn!r}` for the pipeline runtime\n"
                    f"{type(e).__name__}: {e}\n"
                    "hint: Predicates are sent to the pipeline workers. Make sure "
                    "they only capture values that can be pickled, or pass explicit "
                    "`dumps` / `loads` functions."
                ) from e
        self._payload = _payload

    def __call__(self, *args, **kwargs):
        self.fn(*args, **kwargs)
        return None

    def __reduce__(self):
        return (_restore, (self._loads, self._payload))

    def __repr__(self) -> str:
        return f"SerializableFn({self.fn!r})"
