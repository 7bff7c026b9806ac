import numpy as np
import math
from dataclasses import dataclass, field
from functools import cached_property
from typing import List, Dict, Optional, Callable, Tuple, Any, Set, Union

# Real-branch numeric kernels shared by the contexts and the cell compiler.
# Values outside the real domain evaluate to nan instead of raising.

def real_pow(base, k):
    try:
        return math.pow(base, k)
    except ValueError:
        return math.nan
    except OverflowError:
        return math.inf if base > 0 or k % 2 == 0 else -math.inf

def real_log(x):
    if x > 0:
        return math.log(x)
    elif x == 0:
        return -math.inf
    else:
        return math.nan

@dataclass(eq=False)
class Context:
    mapping : Dict['Variable', float]
    memo    : Dict['Expr', float]
    def compute(self, expr):
        try:
            return self.memo[expr]
        except KeyError:
            self.memo[expr] = value = expr.evaluate(self)
            return value

    def lookup(self, variable):
        try:
            return self.mapping[variable]
        except KeyError:
            raise ValueError(f"no value for {variable}") from None

@dataclass(eq=False)
class VectorContext(Context):
    space  : 'VariableSpace'
    vector : Any
    def lookup(self, variable):
        return self.vector[self.space.index(variable)]

@dataclass(frozen=True)
class VariableSpace:
    """Ordered set of variables; the domain of a compiled vector evaluator."""
    variables : Tuple['Variable', ...]

    def __post_init__(self):
        object.__setattr__(self, "variables", tuple(self.variables))
        if len(set(self.variables)) != len(self.variables):
            raise ValueError(f"duplicate variables in {self}")

    @classmethod
    def of(cls, *exprs):
        """All variables the expressions depend on, ordered by name."""
        found = set()
        for expr in exprs:
            found |= expr.free_variables()
        return cls(tuple(sorted(found, key=lambda v: v.name)))

    @cached_property
    def _index(self):
        return {v: i for i, v in enumerate(self.variables)}

    def index(self, variable):
        try:
            return self._index[variable]
        except KeyError:
            raise ValueError(f"{variable} is not in {self}") from None

    def vector(self, values, default=0.0):
        return np.array([values.get(v, default) for v in self.variables], float)

    def context(self, vector):
        vector = np.asarray(vector, float)
        if vector.shape != (len(self),):
            raise ValueError(f"expected a vector of {len(self)} values, got shape {vector.shape}")
        return VectorContext({}, {}, self, vector)

    def __len__(self):
        return len(self.variables)

    def __iter__(self):
        return iter(self.variables)

    def __contains__(self, variable):
        return variable in self._index

    def __str__(self):
        return "(" + ", ".join(str(v) for v in self.variables) + ")"
