"""Numeric evaluation of expression trees.

``compile_scalar`` and ``compile_vector`` lower a tree once into a flat list
of cells in post-order; every distinct sub-expression owns one slot of a
scratch array, so shared sub-trees are computed once per call and the
symbolic tree is never walked again. ``evaluate`` is the direct, uncompiled
walk used to cross-check the compiler.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Dict, Any

import numpy as np

from .common import Context, VariableSpace, real_pow, real_log
from .expressions import (
    Expr, Constant, Variable, Differential, Power, Exponential, Ln, Product, Sum,
    UnsupportedOperand, convert,
)
from .parallel import sum_parallel, product_parallel

logger = logging.getLogger(__name__)

ARGS  = 0
SLOTS = 1

@dataclass(eq=False)
class CellGet:
    k : int
    i : int
    def __call__(self, xs):
        return xs[self.k][self.i]

@dataclass(eq=False)
class CellArg:
    def __call__(self, xs):
        return xs[ARGS]

@dataclass(eq=False)
class CellValue:
    value : float
    def __call__(self, xs):
        return self.value

@dataclass(eq=False)
class Cell:
    op   : Any
    args : List[Any]
    def __call__(self, xs):
        x = [a(xs) for a in self.args]
        return self.op(*x)

@dataclass(eq=False)
class CellSum:
    args : List[Any]
    tail : float
    def __call__(self, xs):
        return sum_parallel(self.args, xs, self.tail)

@dataclass(eq=False)
class CellProduct:
    args  : List[Any]
    coef  : float
    def __call__(self, xs):
        return product_parallel(self.args, xs, self.coef)

def cells(expr, variable_cell):
    """Lower ``expr``; returns the post-ordered cells and the root reader."""
    slots : Dict[Expr, int] = {}
    out = []
    def build(expr):
        if isinstance(expr, Constant):
            return CellValue(expr.re)
        if isinstance(expr, Variable):
            return variable_cell(expr)
        if expr in slots:
            return CellGet(SLOTS, slots[expr])
        if isinstance(expr, Sum):
            cell = CellSum([build(p) for p in expr.products], expr.tail.re)
        elif isinstance(expr, Product):
            cell = CellProduct([build(f) for f in expr.factors], expr.coef.re)
        elif isinstance(expr, Power):
            k = expr.exponent.re
            cell = Cell(lambda b: real_pow(b, k), [build(expr.member)])
        elif isinstance(expr, Exponential):
            b = expr.base.re
            cell = Cell(lambda m: real_pow(b, m), [build(expr.member)])
        elif isinstance(expr, Ln):
            cell = Cell(real_log, [build(expr.member)])
        elif isinstance(expr, Differential):
            raise UnsupportedOperand(f"cannot compile {expr}: differentials have no numeric value")
        else:
            raise UnsupportedOperand(f"cannot compile {expr} : {type(expr).__name__}")
        slots[expr] = len(out)
        out.append(cell)
        return CellGet(SLOTS, slots[expr])
    root = build(expr)
    logger.debug(f"compiled {len(out)} cells")
    return out, root

def run(out, root, x):
    s = np.zeros(len(out), float)
    xs = x, s
    for i, cell in enumerate(out):
        s[i] = cell(xs)
    return float(root(xs))

def compile_scalar(expr, variable):
    """``f(t)`` evaluating ``expr`` with ``variable = t``."""
    expr = convert(expr)
    def variable_cell(v):
        if v != variable:
            raise ValueError(f"{v} is free in {expr} but only {variable} is bound")
        return CellArg()
    out, root = cells(expr, variable_cell)
    def f(t):
        return run(out, root, float(t))
    return f

def compile_vector(expr, space):
    """``f(x)`` evaluating ``expr`` at the point ``x`` of ``space``."""
    expr = convert(expr)
    if not isinstance(space, VariableSpace):
        space = VariableSpace(tuple(space))
    out, root = cells(expr, lambda v: CellGet(ARGS, space.index(v)))
    n = len(space)
    def f(x):
        x = np.asarray(x, float)
        if x.shape != (n,):
            raise ValueError(f"expected a vector of {n} values, got shape {x.shape}")
        return run(out, root, x)
    return f

def evaluate(expr, values):
    """Walk ``expr`` directly with ``values: {Variable: float}``."""
    return float(Context(dict(values), {}).compute(convert(expr)))

def evaluate_vector(expr, space, vector):
    return float(space.context(vector).compute(convert(expr)))
