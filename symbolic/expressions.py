from dataclasses import dataclass, field, fields
from functools import cached_property
from typing import List, Dict, Optional, Callable, Tuple, Any, Set, Union, FrozenSet
import numbers
import math

from .common import Context, real_pow, real_log
from .parallel import map_parallel, sum_parallel, product_parallel

# Every node is an immutable value. Nodes are only created by the builders
# at the bottom half of this module (summation, product, power, exponential,
# ln), which keep the tree canonical: equal expressions always end up as
# equal trees, so __eq__ and __hash__ can be purely structural.

class UnsupportedOperand(TypeError):
    pass

@dataclass(eq=False, frozen=True)
class Expr:
    kind = -1

    def __post_init__(self):
        return validate(self)

    def __str__(self):
        return self.stringify(str)

    def to_tex(self):
        return self.texify(tex)

    def texify(self, s):
        return self.stringify(s)

    def __eq__(self, other):
        if self is other:
            return True
        if type(self) is not type(other):
            return False
        return hash(self) == hash(other) and self._values() == other._values()

    def __hash__(self):
        return self._hash

    @cached_property
    def _hash(self):
        return hash((type(self).__name__,) + self._values())

    def _values(self):
        return tuple(getattr(self, f.name) for f in fields(self))

    @cached_property
    def sort_key(self):
        # Deterministic order for rendering; independent of hash seeds.
        return (self.kind,) + tuple(
            a.sort_key if isinstance(a, Expr) else a for a in self._values())

    def subexpressions(self):
        return iter(())

    def free_variables(self):
        return all_variables([self])

    def __add__(self, other):
        return summation([self, convert(other)])

    def __radd__(self, other):
        return summation([convert(other), self])

    def __sub__(self, other):
        return summation([self, -convert(other)])

    def __rsub__(self, other):
        return summation([convert(other), -self])

    def __mul__(self, other):
        other = convert(other)
        if isinstance(other, Constant):
            return self.times(other)
        return product([self, other])

    def __rmul__(self, other):
        other = convert(other)
        if isinstance(other, Constant):
            return self.times(other)
        return product([other, self])

    def __truediv__(self, other):
        other = convert(other)
        if isinstance(other, Constant):
            return self.div(other)
        return product([self, power(other, negative_one)])

    def __rtruediv__(self, other):
        return convert(other) / self

    def __pow__(self, other):
        other = convert(other)
        if isinstance(other, Constant):
            return power(self, other)
        return exp(other * ln(self))

    def __rpow__(self, other):
        return exponential(convert(other), self)

    def __neg__(self):
        return self.times(negative_one)

    def times(self, c):
        if c == zero:
            return zero
        elif c == one:
            return self
        else:
            return self._times(c)

    def div(self, c):
        if c == zero:
            return nan
        elif c == one:
            return self
        else:
            return self._div(c)

    def _times(self, c):
        return product([self, c])

    def _div(self, c):
        return product([self, one / c])

    def substitute(self, old, new=None):
        """Replace ``old`` by ``new``, or apply a whole ``{old: new}`` mapping."""
        if new is None:
            mapping = {convert(k): convert(v) for k, v in dict(old).items()}
            return self.replace_all(mapping)
        return self.replace(convert(old), convert(new))

    def compile_scalar(self, variable):
        from .evaluate import compile_scalar
        return compile_scalar(self, variable)

    def compile_vector(self, space):
        from .evaluate import compile_vector
        return compile_vector(self, space)

@dataclass(eq=False, frozen=True)
class Constant(Expr):
    """Complex constant. Ordering compares real parts only."""
    re : float
    im : float = 0.0
    kind = 0

    def stringify(self, s):
        return self._format("i")

    def texify(self, s):
        return self._format(r"\mathrm{i}")

    def _format(self, unit):
        if self.im == 0.0:
            return number_repr(self.re)
        elif self.re == 0.0:
            return number_repr(self.im) + unit
        elif self.im < 0.0:
            return f"{number_repr(self.re)} - {number_repr(-self.im)}{unit}"
        else:
            return f"{number_repr(self.re)} + {number_repr(self.im)}{unit}"

    def component(self, s):
        text = s(self)
        if self.im != 0.0 or self.re < 0.0:
            return "(" + text + ")"
        return text

    def is_nan(self):
        return math.isnan(self.re) or math.isnan(self.im)

    def __float__(self):
        return self.re

    def __complex__(self):
        return complex(self.re, self.im)

    def __add__(self, other):
        other = convert(other)
        if isinstance(other, Constant):
            return Constant(self.re + other.re, self.im + other.im)
        return super().__add__(other)

    def __radd__(self, other):
        return convert(other) + self

    def __sub__(self, other):
        other = convert(other)
        if isinstance(other, Constant):
            return Constant(self.re - other.re, self.im - other.im)
        return super().__sub__(other)

    def __rsub__(self, other):
        return convert(other) - self

    def __mul__(self, other):
        other = convert(other)
        if not isinstance(other, Constant):
            return other.times(self)
        if self.im == 0.0 and other.im == 0.0:
            return Constant(self.re * other.re)
        z = complex(self) * complex(other)
        return Constant(z.real, z.imag)

    def __rmul__(self, other):
        return convert(other) * self

    def __truediv__(self, other):
        other = convert(other)
        if not isinstance(other, Constant):
            return super().__truediv__(other)
        if other == zero:
            return nan
        if self.im == 0.0 and other.im == 0.0:
            return Constant(self.re / other.re)
        z = complex(self) / complex(other)
        return Constant(z.real, z.imag)

    def __rtruediv__(self, other):
        return convert(other) / self

    def __pow__(self, other):
        other = convert(other)
        if isinstance(other, Constant):
            return self.pow(other.re)
        return exponential(self, other)

    def __rpow__(self, other):
        return convert(other) ** self

    def __neg__(self):
        return Constant(-self.re, -self.im)

    def __abs__(self):
        return Constant(abs(complex(self)))

    def _times(self, c):
        return self * c

    def _div(self, c):
        return self / c

    def pow(self, k):
        """Real exponent; a negative real base only has integer powers."""
        k = float(k)
        if self.im == 0.0:
            if self.re == 0.0 and k < 0.0:
                return nan
            if self.re < 0.0 and not k.is_integer():
                return nan
            return Constant(real_pow(self.re, k))
        r = abs(complex(self)) ** k
        theta = math.atan2(self.im, self.re) * k
        return Constant(r * math.cos(theta), r * math.sin(theta))

    def ln(self):
        if self.is_nan():
            return nan
        if self.im != 0.0 or self.re <= 0.0:
            raise ValueError(f"ln({self}) is undefined")
        return Constant(math.log(self.re))

    def __lt__(self, other):
        return self.re < convert(other).re

    def __le__(self, other):
        return self.re <= convert(other).re

    def __gt__(self, other):
        return self.re > convert(other).re

    def __ge__(self, other):
        return self.re >= convert(other).re

    def derivative(self):
        return zero

    def replace(self, old, new):
        return new if self == old else self

    def replace_all(self, mapping):
        return self

    def evaluate(self, context):
        return self.re

@dataclass(eq=False, frozen=True)
class Variable(Expr):
    name : str
    kind = 1

    def stringify(self, s):
        return self.name

    def derivative(self):
        return Differential(self)

    def replace(self, old, new):
        return new if self == old else self

    def replace_all(self, mapping):
        return mapping.get(self, self)

    def evaluate(self, context):
        return context.lookup(self)

@dataclass(eq=False, frozen=True)
class Differential(Expr):
    """The infinitesimal d<variable>; only ever raised to integer powers."""
    variable : Variable
    kind = 2

    def stringify(self, s):
        return "d" + self.variable.name

    def texify(self, s):
        return r"\mathrm{d}" + self.variable.name

    def derivative(self):
        return zero

    def replace(self, old, new):
        return new if self == old else self

    def replace_all(self, mapping):
        return mapping.get(self, self)

    def evaluate(self, context):
        raise UnsupportedOperand(f"{self} has no numeric value")

@dataclass(eq=False, frozen=True)
class Factor(Expr):
    """A basic elementary function of exactly one member expression."""

    def subexpressions(self):
        yield self.member

    def derivative(self):
        return product([self.df, self.member.derivative()])

    def replace(self, old, new):
        if self == old:
            return new
        elif self.member == old:
            return self.rebuild(new)
        else:
            return self.rebuild(self.member.replace(old, new))

    def replace_all(self, mapping):
        if self in mapping:
            return mapping[self]
        elif self.member in mapping:
            return self.rebuild(mapping[self.member])
        else:
            return self.rebuild(self.member.replace_all(mapping))

    def argument(self, s):
        if isinstance(self.member, (Variable, Differential)):
            return s(self.member)
        return "(" + s(self.member) + ")"

@dataclass(eq=False, frozen=True)
class Power(Factor):
    member   : Expr
    exponent : 'Constant'
    kind = 3

    @cached_property
    def df(self):
        return power(self.member, self.exponent - one).times(self.exponent)

    def rebuild(self, member):
        return power(member, self.exponent)

    def stringify(self, s):
        return f"{self.argument(s)}^{self.exponent.component(s)}"

    def texify(self, s):
        if self.exponent == Constant(0.5):
            return rf"\sqrt{{{s(self.member)}}}"
        if self.exponent == Constant(-0.5):
            return rf"\frac{{1}}{{\sqrt{{{s(self.member)}}}}}"
        return f"{{{self.argument(s)}}}^{{{s(self.exponent)}}}"

    def evaluate(self, context):
        return real_pow(context.compute(self.member), self.exponent.re)

@dataclass(eq=False, frozen=True)
class Exponential(Factor):
    base   : 'Constant'
    member : Expr
    kind = 4

    @cached_property
    def df(self):
        return self.times(self.base.ln())

    def rebuild(self, member):
        return exponential(self.base, member)

    def stringify(self, s):
        base = "e" if self.base == e else self.base.component(s)
        return f"{base}^{self.argument(s)}"

    def texify(self, s):
        base = r"\mathrm{e}" if self.base == e else s(self.base)
        return f"{{{base}}}^{{{s(self.member)}}}"

    def evaluate(self, context):
        return real_pow(self.base.re, context.compute(self.member))

@dataclass(eq=False, frozen=True)
class Ln(Factor):
    member : Expr
    kind = 5

    @cached_property
    def df(self):
        return power(self.member, negative_one)

    def rebuild(self, member):
        return ln(member)

    def stringify(self, s):
        if isinstance(self.member, (Variable, Differential)):
            return "ln " + s(self.member)
        return "ln" + self.argument(s)

    def texify(self, s):
        return r"\ln " + self.argument(s)

    def evaluate(self, context):
        return real_log(context.compute(self.member))

@dataclass(eq=False, frozen=True)
class Product(Expr):
    factors : FrozenSet[Expr]
    coef    : 'Constant'
    kind = 6

    @cached_property
    def sort_key(self):
        return (self.kind, tuple(sorted(f.sort_key for f in self.factors)), self.coef.sort_key)

    def subexpressions(self):
        yield from self.factors

    def derivative(self):
        factors = list(self.factors)
        variants = []
        for i, factor in enumerate(factors):
            variants.append(product(factors[:i] + factors[i+1:] + [factor.derivative()]))
        return summation(variants).times(self.coef)

    def replace(self, old, new):
        if self == old:
            return new
        return product([f.replace(old, new) for f in self.factors]).times(self.coef)

    def replace_all(self, mapping):
        if self in mapping:
            return mapping[self]
        return product([f.replace_all(mapping) for f in self.factors]).times(self.coef)

    def reset_coef(self, k):
        if k == zero:
            return zero
        if k == one and len(self.factors) == 1:
            return next(iter(self.factors))
        return Product(self.factors, k)

    def _times(self, c):
        return self.reset_coef(self.coef * c)

    def _div(self, c):
        return self.reset_coef(self.coef / c)

    def groups(self):
        ordinary = []
        differentials = []
        for factor in sorted(self.factors, key=lambda f: f.sort_key):
            if is_differential(factor):
                differentials.append(factor)
            else:
                ordinary.append(factor)
        return ordinary + differentials

    def stringify(self, s):
        if self.coef == one:
            head = ""
        elif self.coef == negative_one:
            head = "-"
        elif self.coef.im == 0.0:
            head = s(self.coef) + " "
        else:
            head = self.coef.component(s) + " "
        return head + " ".join(s(f) for f in self.groups())

    def component(self, s):
        # Rendering as a non-leading term of a sum: explicit sign, then magnitude.
        if self.coef.re < 0.0 or self.coef.re == 0.0 and self.coef.im < 0.0:
            sign, k = "-", -self.coef
        else:
            sign, k = "+", self.coef
        head = "" if k == one else k.component(s) + " "
        return f" {sign} {head}" + " ".join(s(f) for f in self.groups())

    def evaluate(self, context):
        return product_parallel([lambda _, f=f: context.compute(f) for f in self.factors], None, self.coef.re)

@dataclass(eq=False, frozen=True)
class Sum(Expr):
    products : FrozenSet[Expr]
    tail     : 'Constant'
    kind = 7

    @cached_property
    def sort_key(self):
        return (self.kind, tuple(sorted(p.sort_key for p in self.products)), self.tail.sort_key)

    def subexpressions(self):
        yield from self.products

    def derivative(self):
        return summation(map_parallel(lambda p: p.derivative(), self.products))

    def replace(self, old, new):
        if self == old:
            return new
        return summation([p.replace(old, new) for p in self.products] + [self.tail])

    def replace_all(self, mapping):
        if self in mapping:
            return mapping[self]
        return summation([p.replace_all(mapping) for p in self.products] + [self.tail])

    def _times(self, c):
        return Sum(frozenset(p.times(c) for p in self.products), self.tail * c)

    def _div(self, c):
        return Sum(frozenset(p.div(c) for p in self.products), self.tail / c)

    def stringify(self, s):
        terms = sorted(self.products, key=lambda p: p.sort_key)
        out = [s(terms[0])]
        for term in terms[1:]:
            if isinstance(term, Product):
                out.append(term.component(s))
            else:
                out.append(" + " + s(term))
        if self.tail.re > 0.0 or self.tail.re == 0.0 and self.tail.im > 0.0:
            out.append(" + " + s(self.tail))
        elif self.tail != zero:
            out.append(" - " + s(-self.tail))
        return "".join(out)

    def evaluate(self, context):
        return sum_parallel([lambda _, p=p: context.compute(p) for p in self.products], None, self.tail.re)

FACTORS = (Variable, Differential, Power, Exponential, Ln)
TERMS   = FACTORS + (Product,)

def is_differential(factor):
    return isinstance(factor, Differential) or isinstance(factor, Power) and isinstance(factor.member, Differential)

def validate(obj):
    for f in fields(obj):
        a = getattr(obj, f.name)
        if f.type == float:
            object.__setattr__(obj, f.name, float(a))
        elif f.type == 'Constant':
            object.__setattr__(obj, f.name, convert(a))
        a = getattr(obj, f.name)
        ty = Constant if f.type == 'Constant' else f.type
        if isinstance(ty, type) and not isinstance(a, ty):
            raise UnsupportedOperand(f".{f.name} = {a!r} ? {ty.__name__}")
    if isinstance(obj, Power) and isinstance(obj.member, Differential):
        if obj.exponent.im != 0.0 or not obj.exponent.re.is_integer():
            raise ValueError(f"{obj.member} can only be raised to an integer power, not {obj.exponent}")

def number_repr(x):
    if x.is_integer() and abs(x) < 1e15:
        return str(int(x))
    return repr(x)

def tex(expr):
    return expr.to_tex()

def convert(obj):
    if isinstance(obj, Expr):
        return obj
    elif isinstance(obj, numbers.Real):
        return Constant(float(obj))
    elif isinstance(obj, numbers.Complex):
        return Constant(obj.real, obj.imag)
    else:
        raise UnsupportedOperand(f"convert({obj!r} : {type(obj).__name__})")

def all_variables(exprs):
    visited = set()
    found = set()
    def visit(expr):
        if expr not in visited:
            visited.add(expr)
            if isinstance(expr, Variable):
                found.add(expr)
            for a in expr.subexpressions():
                visit(a)
    for expr in exprs:
        visit(convert(expr))
    return found

def summation(terms):
    """Canonical sum of ``terms``.

    Terms with the same shape (the product with its coefficient reset to 1)
    are merged by adding coefficients, constants collect in the tail. The
    result collapses to the tail, or to a single term when the tail is zero.
    """
    terms = list(terms)
    if len(terms) == 0:
        return zero
    if len(terms) == 1:
        return terms[0]
    collector = {}
    for term in terms:
        summation_merge(collector, term)
    # Constants are merged as multiples of one.
    tail = collector.pop(one, zero)
    products = frozenset(shape.times(k) for shape, k in collector.items())
    if not products:
        return tail
    elif tail == zero and len(products) == 1:
        return next(iter(products))
    else:
        return Sum(products, tail)

def summation_merge(collector, u):
    if isinstance(u, Constant):
        if u != zero:
            merge(collector, one, u)
    elif isinstance(u, Product):
        merge(collector, u.reset_coef(one), u.coef)
    elif isinstance(u, FACTORS):
        merge(collector, u, one)
    elif isinstance(u, Sum):
        for p in u.products:
            summation_merge(collector, p)
        merge(collector, one, u.tail)
    else:
        raise UnsupportedOperand(f"summation_merge({u} : {type(u).__name__})")

def merge(collector, key, k):
    # Exact comparison: only symbolic duplicates cancel, not float noise.
    total = collector.get(key, zero) + k
    if total == zero:
        collector.pop(key, None)
    else:
        collector[key] = total

def product(factors):
    """Canonical product of ``factors``.

    Powers of the same base are merged by adding exponents, constants fold
    into the coefficient, and sums are distributed over, so the result is a
    sum of products whenever any operand is a sum.
    """
    factors = list(factors)
    if len(factors) == 0:
        return one
    if len(factors) == 1:
        return factors[0]
    collectors = [ProductCollector()]
    for factor in factors:
        if factor == zero:
            return zero
        elif factor == one:
            continue
        elif isinstance(factor, (Constant,) + TERMS):
            for c in collectors:
                c.multiply(factor)
            collectors = [c for c in collectors if not c.is_zero()]
        elif isinstance(factor, Sum):
            collectors = [x for c in collectors for x in c.distribute(factor)]
        else:
            raise UnsupportedOperand(f"product({factor} : {type(factor).__name__})")
        if not collectors:
            return zero
    return summation([c.build() for c in collectors])

@dataclass(eq=False)
class ProductCollector:
    coef          : Constant = None
    powers        : Dict[Expr, Constant] = field(default_factory=dict)
    differentials : Set[Differential] = field(default_factory=set)

    def __post_init__(self):
        if self.coef is None:
            self.coef = one

    def copy(self):
        return ProductCollector(self.coef, dict(self.powers), set(self.differentials))

    def is_zero(self):
        return self.coef == zero

    def multiply(self, u):
        if isinstance(u, Constant):
            self.coef = self.coef * u
        elif isinstance(u, Product):
            for f in u.factors:
                self.inner(f)
                if self.is_zero():
                    return
            self.coef = self.coef * u.coef
        else:
            self.inner(u)

    def distribute(self, s):
        out = []
        for p in s.products:
            c = self.copy()
            c.multiply(p)
            if not c.is_zero():
                out.append(c)
        if s.tail != zero:
            c = self.copy()
            c.multiply(s.tail)
            out.append(c)
        return out

    def inner(self, f):
        if isinstance(f, Power):
            merge(self.powers, f.member, f.exponent)
            if isinstance(f.member, Differential):
                self.check(f.member)
        elif isinstance(f, (Variable, Differential, Exponential, Ln)):
            merge(self.powers, f, one)
            if isinstance(f, Differential):
                self.check(f)
        else:
            raise UnsupportedOperand(f"ProductCollector.inner({f} : {type(f).__name__})")

    def check(self, dv):
        # Independent infinitesimals annihilate: du/dv == 0. A differential
        # joins the related set while every related one has the same sign,
        # leaves it once its exponent cancels, and zeroes the term otherwise.
        k = self.powers.get(dv)
        if k is None:
            self.differentials.discard(dv)
        elif all(sign(self.powers[d].re) == sign(k.re) for d in self.differentials):
            self.differentials.add(dv)
        else:
            self.coef = zero

    def build(self):
        results = merge_exponentials([power(base, k) for base, k in self.powers.items()])
        if not results:
            return self.coef
        if self.coef == one and len(results) == 1:
            return results[0]
        factors = [r for r in results if isinstance(r, FACTORS)]
        others  = [r for r in results if not isinstance(r, FACTORS)]
        if not factors:
            core = self.coef
        elif self.coef == one and len(factors) == 1:
            core = factors[0]
        else:
            core = Product(frozenset(factors), self.coef)
        if others:
            return product(others + [core])
        return core

def merge_exponentials(results):
    # Exponentials of one member combine into a single base, 2^x 3^x == 6^x.
    # A combined base of exactly 1 drops out as the constant one.
    bases = {}
    out = []
    for r in results:
        if isinstance(r, Exponential):
            bases.setdefault(r.member, []).append(r.base)
        else:
            out.append(r)
    for member, group in bases.items():
        if len(group) == 1:
            out.append(Exponential(group[0], member))
        else:
            out.append(exponential(math.prod(sorted(group), start=one), member))
    return out

def sign(x):
    return (x > 0) - (x < 0)

def power(base, k):
    """``base ** k`` for a constant exponent ``k``."""
    base = convert(base)
    k = convert(k)
    if not isinstance(k, Constant):
        raise UnsupportedOperand(f"power({base}, {k} : {type(k).__name__})")
    if k == zero:
        return one
    elif k == one:
        return base
    elif base == zero:
        return zero
    elif isinstance(base, Constant):
        return base ** k
    elif isinstance(base, FACTORS):
        return power_factor(base, k)
    elif isinstance(base, Product):
        return product([power_factor(f, k) for f in base.factors]).times(base.coef ** k)
    elif isinstance(base, Sum):
        return Power(base, k)
    else:
        raise UnsupportedOperand(f"power({base} : {type(base).__name__}, {k})")

def power_factor(f, k):
    if isinstance(f, Power):
        return power(f.member, f.exponent * k)
    elif isinstance(f, Exponential):
        return exponential(f.base, f.member.times(k))
    else:
        return Power(f, k)

def exponential(base, member):
    """``base ** member`` for a constant base."""
    base = convert(base)
    member = convert(member)
    if not isinstance(base, Constant):
        raise UnsupportedOperand(f"exponential({base} : {type(base).__name__}, {member})")
    if base == zero:
        return zero
    elif base == one:
        return one
    elif base < zero:
        raise ValueError(f"exponential base must be positive, not {base}")
    if isinstance(member, Constant):
        return base ** member
    elif isinstance(member, Product):
        core = member.reset_coef(one)
        if isinstance(core, Ln):
            # b^(k ln x) == x^(k ln b), exact for k ln e == k.
            return power(core.member, base.ln() * member.coef)
        k = base ** member.coef
        if isinstance(core, Product):
            if k == zero or k == one:
                return k
            return Exponential(k, core)
        return exponential(k, core)
    elif isinstance(member, Ln):
        return power(member.member, base.ln())
    elif isinstance(member, Sum):
        return product([exponential(base, p) for p in member.products]).times(base ** member.tail)
    elif isinstance(member, (Variable, Power, Exponential)):
        return Exponential(base, member)
    else:
        raise UnsupportedOperand(f"exponential({base}, {member} : {type(member).__name__})")

def exp(member):
    return exponential(e, member)

def ln(member):
    """Natural logarithm, pushed inward through powers, exponentials and products."""
    member = convert(member)
    if isinstance(member, Constant):
        return member.ln()
    elif isinstance(member, (Variable, Ln, Sum)):
        return Ln(member)
    elif isinstance(member, Power):
        return ln(member.member).times(member.exponent)
    elif isinstance(member, Exponential):
        return member.member.times(member.base.ln())
    elif isinstance(member, Product):
        exps   = [f for f in member.factors if isinstance(f, Exponential)]
        others = [f for f in member.factors if not isinstance(f, Exponential)]
        terms  = [f.member.times(f.base.ln()) for f in exps]
        # The sign stays inside the logarithm of the remaining factors so
        # the numeric log only ever sees the magnitude of the coefficient.
        s = negative_one if member.coef.re < 0.0 else one
        if others:
            rest = product(others).times(s)
            terms.append(Ln(rest) if isinstance(rest, Product) else ln(rest))
        elif s == negative_one:
            raise ValueError(f"ln({member}) is undefined")
        terms.append((member.coef / s).ln())
        return summation(terms)
    else:
        raise UnsupportedOperand(f"ln({member} : {type(member).__name__})")

def log(base, member):
    base = convert(base)
    if not isinstance(base, Constant) or base <= zero or base == one:
        raise ValueError(f"invalid logarithm base {base}")
    return ln(member).div(base.ln())

def variable(name):
    return Variable(name)

def variables(names):
    return tuple(Variable(name) for name in names.split())

def substitute(expr, old, new=None):
    return convert(expr).substitute(old, new)

def derivative(expr):
    return convert(expr).derivative()

def partial(expr, v):
    """Partial derivative through the infinitesimal algebra: d(expr) / dv."""
    return convert(expr).derivative() / Differential(v)

zero         = Constant(0.0)
one          = Constant(1.0)
negative_one = Constant(-1.0)
nan          = Constant(math.nan)
e            = Constant(math.e)
