"""System resolver for two linear equations in x and y.

Each equation is classified (see :func:`solver.equation.classify`) and the
pair of categories selects one rule out of a 4x4 matrix.  Every cell whose
determinant ``D = x1*y2 - x2*y1`` is guaranteed nonzero goes through the same
Cramer's-rule elimination; only the cells with a structurally zero
determinant get their own rule.

Conventions for an unconstrained unknown:
  - both equations degenerate       -> (0, 0)
  - only one unknown is constrained -> the other one is reported as 0

Those zeros are a fixed convention, not a derived value.  Coincident lines
(infinitely many solutions) and underdetermined pairs always fail.
"""

import logging
import math
from typing import Callable, NamedTuple

from solver.equation import Category, Equation, EquationSystem
from solver.errors import Contradiction, InfiniteSolutions, Underdetermined

logger = logging.getLogger(__name__)

# Relative and absolute tolerance used when two single-axis equations are
# compared.  Distinct fractions with denominators below 1000 differ by more
# than 1e-6, so exact-integer inputs keep their exact-equality outcome.
DEFAULT_TOLERANCE = 1e-9


class Solution(NamedTuple):
    x: float
    y: float

    @classmethod
    def of(cls, x: float, y: float) -> "Solution":
        # Adding 0.0 turns -0.0 into 0.0.
        return cls(float(x) + 0.0, float(y) + 0.0)


class Rule(NamedTuple):
    name: str
    description: str
    apply: Callable


def determinant(e1: Equation, e2: Equation) -> int:
    return e1.x * e2.y - e2.x * e1.y


def _agree(a: float, b: float, tolerance: float) -> bool:
    return math.isclose(a, b, rel_tol=tolerance, abs_tol=tolerance)


# ── Rules ───────────────────────────────────────────────────────────────

def _eliminate(e1: Equation, e2: Equation, tolerance: float) -> Solution:
    """Cramer's rule; a zero determinant means parallel or coincident lines."""
    d = determinant(e1, e2)
    if d == 0:
        # Rank of the augmented matrix decides between "same line" and
        # "parallel lines".  Integer arithmetic keeps this exact.
        if e1.x * e2.rhs == e2.x * e1.rhs and e1.y * e2.rhs == e2.y * e1.rhs:
            raise InfiniteSolutions(
                f"infinitely many solutions: {e1} and {e2} describe the same line")
        raise Contradiction(
            f"no solution: {e1} and {e2} are parallel lines")
    x = (e1.rhs * e2.y - e2.rhs * e1.y) / d
    y = (e1.x * e2.rhs - e2.x * e1.rhs) / d
    return Solution.of(x, y)


def _trivial(e1: Equation, e2: Equation, tolerance: float) -> Solution:
    return Solution.of(0.0, 0.0)


def _one_sided(e1: Equation, e2: Equation, tolerance: float) -> Solution:
    """One equation is ``0 = 0``; the other fixes at most one unknown."""
    eq = e2 if e1.category is Category.DEGENERATE else e1
    if eq.category is Category.Y_ONLY:
        return Solution.of(0.0, eq.rhs / eq.y)
    if eq.category is Category.X_ONLY:
        return Solution.of(eq.rhs / eq.x, 0.0)
    raise Underdetermined(
        f"no unique solution: {eq} is the only constraint on two unknowns")


def _same_y(e1: Equation, e2: Equation, tolerance: float) -> Solution:
    y1 = e1.rhs / e1.y
    y2 = e2.rhs / e2.y
    if not _agree(y1, y2, tolerance):
        raise Contradiction(
            f"no solution: {e1} gives y = {y1:g} but {e2} gives y = {y2:g}")
    return Solution.of(0.0, y1)


def _same_x(e1: Equation, e2: Equation, tolerance: float) -> Solution:
    x1 = e1.rhs / e1.x
    x2 = e2.rhs / e2.x
    if not _agree(x1, x2, tolerance):
        raise Contradiction(
            f"no solution: {e1} gives x = {x1:g} but {e2} gives x = {x2:g}")
    return Solution.of(x1, 0.0)


ELIMINATION = Rule(
    "Elimination (Cramer's rule)",
    "Compute D = x1*y2 - x2*y1 and divide the replaced determinants by it.",
    _eliminate,
)
TRIVIAL = Rule(
    "Trivial identities",
    "Both equations read 0 = 0; x and y are reported as 0 by convention.",
    _trivial,
)
ONE_SIDED = Rule(
    "Single constraint",
    "One equation reads 0 = 0; the other equation alone has to fix the unknowns.",
    _one_sided,
)
SAME_Y = Rule(
    "Consistency on y",
    "Both equations fix y; they must agree, and x is reported as 0 by convention.",
    _same_y,
)
SAME_X = Rule(
    "Consistency on x",
    "Both equations fix x; they must agree, and y is reported as 0 by convention.",
    _same_x,
)

_D, _Y, _X, _G = (Category.DEGENERATE, Category.Y_ONLY,
                  Category.X_ONLY, Category.GENERAL)

RULES = {
    (_D, _D): TRIVIAL,
    (_D, _Y): ONE_SIDED,
    (_D, _X): ONE_SIDED,
    (_D, _G): ONE_SIDED,
    (_Y, _D): ONE_SIDED,
    (_Y, _Y): SAME_Y,
    (_Y, _X): ELIMINATION,
    (_Y, _G): ELIMINATION,
    (_X, _D): ONE_SIDED,
    (_X, _Y): ELIMINATION,
    (_X, _X): SAME_X,
    (_X, _G): ELIMINATION,
    (_G, _D): ONE_SIDED,
    (_G, _Y): ELIMINATION,
    (_G, _X): ELIMINATION,
    (_G, _G): ELIMINATION,
}


def rule_for(first: Category, second: Category) -> Rule:
    return RULES[(first, second)]


def solve(system: EquationSystem, tolerance: float = DEFAULT_TOLERANCE) -> Solution:
    """Resolve *system* to a single ``(x, y)`` point.

    Raises :class:`Contradiction` when no point satisfies both equations and
    :class:`Underdetermined` (or its subclass :class:`InfiniteSolutions`)
    when the equations do not pin down a point.
    """
    first, second = system.categories
    rule = rule_for(first, second)
    logger.debug("resolving %s as (%s, %s) with %s",
                 system, first.label, second.label, rule.name)
    try:
        solution = rule.apply(system.first, system.second, tolerance)
    except (Contradiction, Underdetermined) as exc:
        logger.info("cannot resolve %s: %s", system, exc)
        raise
    logger.debug("resolved %s -> %s", system, solution)
    return solution
