"""Simplification rules of powers, exponentials and logarithms."""
import math

import pytest

from symbolic.expressions import (
    Constant, Differential, Exponential, Ln, Power, Product, Sum,
    UnsupportedOperand, e, exp, exponential, ln, log, power, variables, zero, one,
)

x, y, z = variables("x y z")
dx = Differential(x)


class TestPower:
    def test_degenerate_exponents(self):
        assert x ** 0 == one
        assert x ** 1 == x
        assert power(zero, 3) == zero
        assert power(Constant(3), 2) == Constant(9)

    def test_power_of_power(self):
        assert (x ** 2) ** 3 == x ** 6
        assert (x ** 0.5) ** 2 == x

    def test_power_of_product(self):
        assert (2 * x * y) ** 2 == 4 * x ** 2 * y ** 2
        assert (x * y) ** -1 == 1 / x / y

    def test_power_of_sum_is_irreducible(self):
        p = (x + 1) ** 2
        assert isinstance(p, Power)
        assert p.member == x + 1
        assert p.exponent == Constant(2)
        assert (x + 1) ** 2 / (x + 1) == x + 1

    def test_power_of_exponential_scales_member(self):
        assert exp(x) ** 2 == exp(2 * x)
        assert exp(x) * exp(x) == exp(2 * x)

    def test_non_constant_exponent(self):
        assert x ** y == exp(y * ln(x))


class TestExponential:
    def test_degenerate_bases(self):
        assert exponential(zero, x) == zero
        assert exponential(one, x) == one
        assert exp(zero) == one
        assert 2 ** Constant(3) == Constant(8)
        with pytest.raises(ValueError):
            exponential(-2, x)

    def test_exp_of_ln(self):
        assert exp(ln(x)) == x
        assert exp(3 * ln(x)) == x ** 3
        assert 2 ** ln(x) == x ** math.log(2)

    def test_exp_of_sum(self):
        assert exp(x + y) == exp(x) * exp(y)
        assert exp(x + 2) == exp(x) * e ** 2

    def test_coefficient_moves_into_base(self):
        q = exp(2 * x)
        assert isinstance(q, Exponential)
        assert q.base == e ** 2
        assert q.member == x

    def test_differential_member_is_rejected(self):
        with pytest.raises(UnsupportedOperand):
            exp(dx)

    def test_exponentials_of_one_member_merge(self):
        assert 2 ** x * 3 ** x == 6 ** x
        assert 2 ** -x * 2 ** x == one
        assert 2 ** (2 * x) * 2 ** x == 2 ** (3 * x)
        q = exp(2 * x) * exp(x)
        assert isinstance(q, Exponential)
        assert q.member == x
        assert q.base.re == pytest.approx(math.e ** 3)
        assert isinstance(exp(x) * 2 ** y, Product)


class TestLn:
    def test_constants(self):
        assert ln(e) == one
        assert ln(Constant(1)) == zero
        with pytest.raises(ValueError):
            ln(0)
        with pytest.raises(ValueError):
            ln(-1)

    def test_ln_of_power_and_exponential(self):
        assert ln(x ** 2) == 2 * ln(x)
        assert ln(exp(x)) == x
        assert ln(2 ** x) == x * math.log(2)

    def test_ln_of_product(self):
        assert ln(3 * x) == ln(x) + ln(3)
        assert ln(x * exp(y)) == y + ln(x)
        assert isinstance(ln(x * y), Ln)

    def test_ln_keeps_sign_inside(self):
        q = ln(-2 * x)
        assert isinstance(q, Sum)
        assert q.tail == Constant(math.log(2))
        (term,) = q.products
        assert term == Ln(-x)

    def test_ln_of_negative_exponential_is_invalid(self):
        with pytest.raises(ValueError):
            ln(-exp(x))

    def test_ln_of_sum_is_irreducible(self):
        q = ln(x + 1)
        assert isinstance(q, Ln)
        assert q.member == x + 1

    def test_differential_member_is_rejected(self):
        with pytest.raises(UnsupportedOperand):
            ln(dx)

    def test_log_with_base(self):
        assert log(2, x) == ln(x) / ln(2)
        assert log(10, Constant(100)).re == pytest.approx(2)
        for base in (1, 0, -2):
            with pytest.raises(ValueError):
                log(base, x)
