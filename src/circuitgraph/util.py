"""Utility functions for circuitgraph."""

import types
from collections.abc import Callable, Generator
from typing import Any, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def apply1(
    f: Callable[..., R], xs: T | list[T] | tuple[T, ...] | Generator[T, None, None], *args: Any, **kwds: Any
) -> R | list[R] | Generator[R, None, None]:
    """Apply f to a single node reference, or to each of a list, tuple or generator of them.

    Lists and tuples both give back a list.
    """
    if isinstance(xs, types.GeneratorType):
        return (f(x, *args, **kwds) for x in xs)
    if isinstance(xs, (list, tuple)):
        return [f(x, *args, **kwds) for x in xs]
    return f(xs, *args, **kwds)


def value_eq(a: int | None, b: int | None, strict: bool = False) -> bool:
    """Compare two node values, where None stands for an absent value.

    - Two absent values compare equal, an absent and a present value do not
    - With ``strict``, any comparison involving an absent value is unequal
    """
    if a is None or b is None:
        if strict:
            return False
        return a is None and b is None
    return a == b
