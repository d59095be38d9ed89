"""Numerical (NumPy) resolver for a two-equation system."""

"""
Classifies the system by matrix rank instead of by equation category and
solves it with NumPy's floating-point linear algebra.  It follows the same
conventions and raises the same errors as :mod:`solver.resolver`, which makes
it an independent cross-check of the exact dispatch table.
"""

import numpy as np

from solver.equation import EquationSystem
from solver.errors import Contradiction, InfiniteSolutions, Underdetermined
from solver.resolver import DEFAULT_TOLERANCE, Solution


# ── Numeric formatting helpers ──────────────────────────────────────────

def _fmt_num(value: float, max_decimals: int = 10) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    """
    rounded = round(float(value), max_decimals)
    if rounded == int(rounded):
        return str(int(rounded))
    text = f"{rounded:.{max_decimals}f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _format_matrix(A: np.ndarray) -> str:
    """Format a 2-D NumPy array as a readable bracketed matrix."""
    rows = []
    for row in A:
        rows.append("[" + ", ".join(_fmt_num(v) for v in row) + "]")
    return "[" + ", ".join(rows) + "]"


# ── Solver ──────────────────────────────────────────────────────────────

def coefficient_matrix(system: EquationSystem) -> tuple:
    """Return ``(A, b)`` for ``A @ [x, y] = b``."""
    A = np.array([[eq.x, eq.y] for eq in system], dtype=np.float64)
    b = np.array([eq.rhs for eq in system], dtype=np.float64)
    return A, b


def solve_numeric(system: EquationSystem,
                  tolerance: float = DEFAULT_TOLERANCE) -> Solution:
    """Solve *system* with NumPy.

    - rank(A) == 2                   -> ``numpy.linalg.solve``
    - an unknown has no coefficient  -> minimum-norm ``lstsq`` (that unknown is 0);
      rows the point misses beyond *tolerance* -> :class:`Contradiction`
    - rank(A) < rank([A|b])          -> :class:`Contradiction`
    - otherwise                      -> :class:`InfiniteSolutions` when both
      rows constrain the point, :class:`Underdetermined` when one row is 0 = 0
    """
    A, b = coefficient_matrix(system)
    rank_a = np.linalg.matrix_rank(A)

    if rank_a == 2:
        x, y = np.linalg.solve(A, b)
        return Solution.of(x, y)

    zero_columns = ~A.any(axis=0)
    if zero_columns.any():
        sol, _residuals, _rank, _sv = np.linalg.lstsq(A, b, rcond=None)
        if not np.isclose(A @ sol, b, rtol=tolerance, atol=tolerance).all():
            raise Contradiction(
                f"no solution: {system} is inconsistent "
                f"(no point satisfies both rows within {tolerance:g})")
        return Solution.of(sol[0], sol[1])

    rank_ab = np.linalg.matrix_rank(np.column_stack([A, b]))
    if rank_ab > rank_a:
        raise Contradiction(
            f"no solution: {system} is inconsistent "
            f"(rank {rank_a} vs augmented rank {rank_ab})")

    if A.any(axis=1).all():
        raise InfiniteSolutions(
            f"infinitely many solutions: {system} describes a single line")
    raise Underdetermined(
        f"no unique solution: {system} holds one constraint on two unknowns")
