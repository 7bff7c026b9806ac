"""Plain text and TeX rendering."""
import pytest

from symbolic.expressions import Constant, Differential, exp, ln, variables

x, y, z = variables("x y z")


@pytest.mark.parametrize("expr, text", [
    (x ** 2 - 1, "x^2 - 1"),
    (-x, "-x"),
    (-2 * x, "-2 x"),
    (-2.5 * x * y, "-2.5 x y"),
    (Constant(1, 1) * x, "(1 + 1i) x"),
    (2 * x * y, "2 x y"),
    (x - 2 * y, "x - 2 y"),
    (y - x, "y - x"),
    (z + y + x, "x + y + z"),
    (ln(x + 1), "ln(x + 1)"),
    (ln(x), "ln x"),
    (exp(x), "e^x"),
    (1 / (x + 1), "(x + 1)^(-1)"),
    (x ** 0.5, "x^0.5"),
    ((x ** 3).derivative(), "3 x^2 dx"),
    (Constant(1, -2), "1 - 2i"),
    (Constant(2.5), "2.5"),
])
def test_plain_text(expr, text):
    assert str(expr) == text


@pytest.mark.parametrize("expr, text", [
    (x ** 0.5, r"\sqrt{x}"),
    (x ** -0.5, r"\frac{1}{\sqrt{x}}"),
    (x ** 2, "{x}^{2}"),
    (ln(x), r"\ln x"),
    (Differential(x), r"\mathrm{d}x"),
    (exp(x), r"{\mathrm{e}}^{x}"),
    (Constant(0, 1), r"1\mathrm{i}"),
])
def test_tex(expr, text):
    assert expr.to_tex() == text


def test_rendering_ignores_construction_order():
    assert str((y + 1) * (x + 2)) == str((2 + x) * (1 + y))
