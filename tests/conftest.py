"""Pytest configuration and fixtures for circuitgraph tests."""

import math
from types import SimpleNamespace

import pytest

from circuitgraph import Builder


def build_polynomial(builder=None):
    """Build y = x*x + x + 8 and return the builder and the nodes."""
    if builder is None:
        builder = Builder()
    x = builder.new_input()
    x_sq = builder.mul(x, x)
    eight = builder.constant(8)
    plus_x = builder.add(x_sq, x)
    y = builder.add(plus_x, eight)
    return SimpleNamespace(builder=builder, x=x, x_sq=x_sq, eight=eight, plus_x=plus_x, y=y)


def build_sqrt_check(builder=None):
    """Build r = isqrt(x + 7) as a hint, checked by r * r == x + 7."""
    if builder is None:
        builder = Builder()
    x = builder.new_input()
    seven = builder.constant(7)
    s = builder.add(x, seven)
    r = builder.hint([s], lambda vals: math.isqrt(vals[0]))
    check = builder.mul(r, r)
    builder.assert_equal(check, s)
    return SimpleNamespace(builder=builder, x=x, seven=seven, s=s, r=r, check=check)


@pytest.fixture
def polynomial():
    """Polynomial graph y = x^2 + x + 8 with x unset."""
    return build_polynomial()


@pytest.fixture
def sqrt_check():
    """Square root hint graph with its constraint, x unset."""
    return build_sqrt_check()


@pytest.fixture
def make_polynomial():
    """Factory building fresh polynomial graphs, optionally into a given builder."""
    return build_polynomial
