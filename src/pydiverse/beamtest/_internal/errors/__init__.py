# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from __future__ import annotations

import typing
from typing import Any


class CollectionAssertionError(AssertionError):
    """
    Raised when a registered check is evaluated and the collection does not match.
    """


class ClosureSerializationError(TypeError):
    """
    Raised when a predicate or checker cannot be serialized for shipping to the
    pipeline runtime.
    """


class UnsupportedCollectionError(TypeError):
    """
    Signals a collection type for which no assertion backend exists.
    """


# Our error message format: The first line is in lowercase letters, without a dot at
# the end. More detail is given in the following lines in normal english sentences.
# To give advice to to the user, we write `hint: ...`.


def _type_str(expected_type: Any) -> str:
    type_args = typing.get_args(expected_type)
    if not type_args:
        return expected_type.__name__
    return " | ".join(t.__name__ for t in type_args)


def check_arg_type(
    expected_type: type,
    fn: str,
    param_name: str,
    arg: Any,
):
    if not isinstance(arg, expected_type):
        raise TypeError(
            f"argument for parameter `{param_name}` of `{fn}` must have type "
            f"`{_type_str(expected_type)}`, found `{type(arg).__name__}` instead"
        )


def check_callable(fn: str, param_name: str, arg: Any):
    if not callable(arg):
        raise TypeError(
            f"argument for parameter `{param_name}` of `{fn}` must be callable, "
            f"found `{type(arg).__name__}` instead"
        )
