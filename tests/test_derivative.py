"""Differentiation with respect to the embedded infinitesimals."""
import math

from symbolic.expressions import (
    Constant, Differential, derivative, exp, ln, partial, variables, zero,
)

x, y, z = variables("x y z")
dx, dy = Differential(x), Differential(y)


def test_leaves():
    assert x.derivative() == dx
    assert Constant(3).derivative() == zero
    assert dx.derivative() == zero
    assert derivative(5) == zero


def test_power_rule():
    assert (x ** 3).derivative() == 3 * x ** 2 * dx
    assert partial(1 / x, x) == -1 / x ** 2


def test_sum_rule():
    assert partial(x ** 2 + 3 * x + 1, x) == 2 * x + 3


def test_product_rule_and_partials():
    f = x ** 2 * y
    assert partial(f, x) == 2 * x * y
    assert partial(f, y) == x ** 2
    assert partial(3 * x * y, x) == 3 * y
    assert partial(f, z) == zero


def test_chain_rule():
    assert ln(x ** 2).derivative() == (2 * ln(x)).derivative()
    assert partial(ln(x ** 2), x) == 2 / x
    assert partial(exp(x), x) == exp(x)
    assert partial(2 ** x, x) == 2 ** x * math.log(2)
    assert partial(ln(x + 1), x) == 1 / (x + 1)


def test_second_differential():
    ddf = (x ** 2 * y).derivative().derivative()
    assert ddf / dx ** 2 == 2 * y
    # d(df) carries the mixed term twice.
    assert ddf / (dx * dy) == 4 * x
    assert ddf / dy ** 2 == zero


def test_parallel_sum_derivative_matches_serial(parallel_threshold):
    f = sum(x ** k for k in range(1, 8)) + x * y
    serial = f.derivative()
    parallel_threshold(2)
    assert f.derivative() == serial
    assert partial(f, x) == sum(k * x ** (k - 1) for k in range(1, 8)) + y
