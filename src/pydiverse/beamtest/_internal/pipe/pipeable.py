# Copyright (c) QuantCo and pydiverse contributors 2025-2025
# SPDX-License-Identifier: BSD-3-Clause

from functools import partial, wraps


class Pipeable:
    """
    A call waiting for the collection it is applied to. The collection is given on
    the left side of the pipe: ``pcoll >> should(...)``.
    """

    def __init__(self, f):
        self.f = f

    def __rrshift__(self, lhs):
        return self(lhs)

    def __call__(self, arg):
        return self.f(arg)


class inverse_partial(partial):
    """
    Just like partial, but the arguments get applied to the back instead of the front.
    This means that a function `def x(a, b, c)` decorated with `@inverse_partial(1, 2)`
    that gets called with `x(0)` is equivalent to calling `x(0, 1, 2)` on the non
    decorated function.
    """

    def __call__(self, /, *args, **keywords):
        keywords = {**self.keywords, **keywords}
        return self.func(*args, *self.args, **keywords)


def verb(fn):
    """
    Decorator for creating verbs.

    A verb is a function that takes the collection under test as its first argument.
    `@verb` enables usage of the function with the pipe `>>` syntax, in which case the
    collection is left out of the call.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):
        return Pipeable(inverse_partial(fn, *args, **kwargs))

    return wrapper
