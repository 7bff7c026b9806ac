from symbolic.expressions import *
from symbolic.common import VariableSpace
from symbolic.config import configure_logging
from symbolic.evaluate import evaluate
import numpy as np
import logging

configure_logging()
logger = logging.getLogger("demo")

x, y = variables("x y")

f = (x + 1) * (x - y) / y + ln(x * y ** 2) - exp(x - y) + (x + y) ** 1.5

print("f        =", f)
print("tex      =", f.to_tex())
print("df       =", f.derivative())
print("df/dx    =", partial(f, x))
print("df/dy    =", partial(f, y))
print("f(y=2x)  =", f.substitute(y, 2 * x))

space = VariableSpace.of(f)
fs = f.compile_vector(space)
gradient = [partial(f, v).compile_vector(space) for v in space]

xs = np.linspace(0.5, 3.0, 6)
ys = np.linspace(0.5, 3.0, 6)
for a in xs:
    row = []
    for b in ys:
        point = np.array([a, b])
        row.append(fs(point))
    print(" ".join(f"{v:9.4f}" for v in row))

point = np.array([1.5, 2.0])
check = evaluate(f, dict(zip(space, point)))
if abs(check - fs(point)) > 1e-9 * max(1.0, abs(check)):
    logger.warning(f"compiled {fs(point)} and walked {check} values disagree")
print("grad f(1.5, 2) =", [g(point) for g in gradient])

g = sum(x ** k / k for k in range(1, 6))
gx = g.compile_scalar(x)
print("g        =", g)
print("dg/dx    =", partial(g, x))
print("g(0.5)   =", gx(0.5))
