""" Step-by-step trail for a two-equation formula."""

"""
Parses a formula such as ``1*x + 1*y = 2, 2*x + 1*y = 9``, resolves it with
the exact dispatch table (or NumPy in numerical mode) and explains each step.
The solution is verified by substituting it back into SymPy equations.

Failures (contradictions, underdetermined systems, bad syntax) are raised,
never returned as a result dict.
"""

import re
import time
from datetime import datetime
from typing import Optional

import numpy as np
import sympy
from sympy import Eq, Rational, symbols

from solver import resolver
from solver.config import DEFAULT_SETTINGS, check_mode
from solver.equation import Category, Equation, EquationSystem
from solver.numerical import _fmt_num, _format_matrix, coefficient_matrix, solve_numeric
from solver.parser import parse_system

X, Y = symbols("x y")


# ── Formatting helpers ──────────────────────────────────────────────────

def _format_expr(expr) -> str:
    """Format a SymPy expression for display (``2*x`` → ``2x``)."""
    s = str(expr)
    s = re.sub(r'(\d)\*([A-Za-z])', r'\1\2', s)
    return s.replace('*', '·')


def _format_equation(lhs, rhs) -> str:
    return f"{_format_expr(lhs)} = {_format_expr(rhs)}"


def _ratio(num: int, den: int) -> str:
    """Exact quotient for explanations, e.g. ``7/3`` or ``-5``."""
    return str(Rational(num, den))


def to_sympy(eq: Equation) -> Eq:
    return Eq(eq.x * X + eq.y * Y, eq.rhs, evaluate=False)


# ── Steps per rule ──────────────────────────────────────────────────────

def _elimination_steps(e1: Equation, e2: Equation) -> list:
    d = resolver.determinant(e1, e2)
    dx = e1.rhs * e2.y - e2.rhs * e1.y
    dy = e1.x * e2.rhs - e2.x * e1.rhs
    return [
        {
            "description": "Compute the determinant",
            "expression": (
                f"D = ({e1.x})({e2.y}) − ({e2.x})({e1.y}) = {d}"
            ),
            "explanation": (
                "D = x₁·y₂ − x₂·y₁ is nonzero, so the two lines cross "
                "at exactly one point."
            ),
        },
        {
            "description": "Apply Cramer's rule",
            "expression": (
                f"x = ({e1.rhs}·{e2.y} − {e2.rhs}·{e1.y}) / D = {dx}/{d} = {_ratio(dx, d)}\n"
                f"y = ({e1.x}·{e2.rhs} − {e2.x}·{e1.rhs}) / D = {dy}/{d} = {_ratio(dy, d)}"
            ),
            "explanation": (
                "Replace the x column (then the y column) by the right-hand "
                "sides and divide each determinant by D."
            ),
        },
    ]


def _same_axis_steps(e1: Equation, e2: Equation, axis: str) -> list:
    other = "x" if axis == "y" else "y"
    v1 = _ratio(e1.rhs, getattr(e1, axis))
    v2 = _ratio(e2.rhs, getattr(e2, axis))
    return [
        {
            "description": f"Solve each equation for {axis}",
            "expression": f"(1)  {axis} = {v1}\n(2)  {axis} = {v2}",
            "explanation": f"Neither equation contains {other}.",
        },
        {
            "description": f"Compare the two values of {axis}",
            "expression": f"{v1} = {v2}  ✓",
            "explanation": (
                f"Both equations agree on {axis}. {other} is not constrained "
                f"and is reported as 0 by convention."
            ),
        },
    ]


def _one_sided_steps(e1: Equation, e2: Equation) -> list:
    idx, eq = (2, e2) if e1.category is Category.DEGENERATE else (1, e1)
    if eq.category is Category.Y_ONLY:
        value, axis, other = _ratio(eq.rhs, eq.y), "y", "x"
    else:
        value, axis, other = _ratio(eq.rhs, eq.x), "x", "y"
    return [
        {
            "description": "Drop the identity 0 = 0",
            "expression": f"Only equation ({idx}) constrains the unknowns",
            "explanation": "An equation with both coefficients zero holds for any x and y.",
        },
        {
            "description": f"Solve equation ({idx}) for {axis}",
            "expression": f"{axis} = {value}",
            "explanation": (
                f"{other} is not constrained and is reported as 0 by convention."
            ),
        },
    ]


def _trivial_steps() -> list:
    return [{
        "description": "Both equations are 0 = 0",
        "expression": "x = 0, y = 0",
        "explanation": (
            "Neither equation constrains x or y; both are reported as 0 "
            "by convention."
        ),
    }]


def _numerical_steps(system: EquationSystem) -> list:
    A, b = coefficient_matrix(system)
    rank_a = np.linalg.matrix_rank(A)
    return [
        {
            "description": "Build coefficient matrix and constant vector",
            "expression": (
                f"A = {_format_matrix(A)}\n"
                f"b = [{', '.join(_fmt_num(v) for v in b)}]"
            ),
            "explanation": (
                "Extract the coefficients of x and y from both equations "
                "to form the matrix A and constant vector b for Ax = b."
            ),
        },
        {
            "description": "Solve Ax = b using NumPy",
            "expression": f"rank(A) = {rank_a}",
            "explanation": (
                "A full-rank matrix is solved by LU decomposition; otherwise "
                "the minimum-norm least-squares point is taken."
            ),
        },
    ]


def _rule_steps(rule: resolver.Rule, system: EquationSystem) -> list:
    e1, e2 = system.first, system.second
    if rule is resolver.ELIMINATION:
        return _elimination_steps(e1, e2)
    if rule is resolver.SAME_Y:
        return _same_axis_steps(e1, e2, "y")
    if rule is resolver.SAME_X:
        return _same_axis_steps(e1, e2, "x")
    if rule is resolver.ONE_SIDED:
        return _one_sided_steps(e1, e2)
    return _trivial_steps()


# ── Verification ────────────────────────────────────────────────────────

def _build_verification(system: EquationSystem, solution: resolver.Solution,
                        tolerance: float) -> tuple:
    """Substitute *solution* into both equations; return ``(steps, ok)``."""
    sub = {X: solution.x, Y: solution.y}
    steps = [{
        "description": "Substitute into every equation",
        "expression": f"x = {_fmt_num(solution.x)}, y = {_fmt_num(solution.y)}",
        "explanation": "Plug the solution back into each original equation.",
    }]
    all_ok = True
    for i, eq in enumerate(system, 1):
        eq_obj = to_sympy(eq)
        lhs_val = float(eq_obj.lhs.subs(sub))
        rhs_val = float(eq_obj.rhs)
        scale = max(1.0, abs(eq.x * solution.x) + abs(eq.y * solution.y) + abs(rhs_val))
        ok = abs(lhs_val - rhs_val) <= tolerance * scale
        all_ok = all_ok and ok
        steps.append({
            "description": f"Equation ({i}): {eq}",
            "expression": (
                f"LHS = {_fmt_num(lhs_val)},  RHS = {_fmt_num(rhs_val)}"
                f"  →  {'✓' if ok else '✗'}"
            ),
            "explanation": (
                f"Both sides equal {_fmt_num(lhs_val)}."
                if ok else "Sides differ beyond the tolerance."
            ),
        })
    steps.append({
        "description": "All equations verified" if all_ok else "Verification failed",
        "expression": (
            "All equations satisfied  ✓" if all_ok
            else "At least one equation is not satisfied  ✗"
        ),
        "explanation": (
            "The solution is correct." if all_ok
            else "The reported point does not satisfy the system."
        ),
    })
    return steps, all_ok


# ── Public API ──────────────────────────────────────────────────────────

def resolve(system: EquationSystem, mode: str = "exact",
            tolerance: float = resolver.DEFAULT_TOLERANCE) -> resolver.Solution:
    """Resolve a parsed system with the chosen backend."""
    if check_mode(mode) == "numerical":
        return solve_numeric(system, tolerance)
    return resolver.solve(system, tolerance)


def solve_formula(formula: str, mode: Optional[str] = None,
                  settings: Optional[dict] = None) -> dict:
    """
    Resolve a two-equation formula and explain it step by step.

    Returns a dict with trail-format sections:
      - given, method, steps, final_answer, verification_steps, summary
    plus ``solution`` (``[x, y]``) and ``categories``.
    """
    t_start = time.perf_counter()
    settings = {**DEFAULT_SETTINGS, **(settings or {})}
    mode = check_mode(mode or settings["mode"])
    tolerance = float(settings["tolerance"])

    system = parse_system(formula)
    first, second = system.categories
    rule = resolver.rule_for(first, second)
    solution = resolve(system, mode, tolerance)

    steps = []
    steps.append({
        "description": "System of equations",
        "expression": "\n".join(
            f"  ({i})  {_format_equation(to_sympy(eq).lhs, eq.rhs)}"
            for i, eq in enumerate(system, 1)
        ),
        "explanation": "We have 2 equations with 2 unknowns: x, y.",
    })
    steps.append({
        "description": "Classify each equation",
        "expression": f"(1)  {first.label}\n(2)  {second.label}",
        "explanation": (
            "An equation is Degenerate (no unknowns), Y-only, X-only or "
            "General (both unknowns) depending on which coefficients are zero."
        ),
    })
    if mode == "numerical":
        steps.extend(_numerical_steps(system))
    else:
        steps.extend(_rule_steps(rule, system))
    steps.append({
        "description": "Solution",
        "expression": f"x = {_fmt_num(solution.x)}\ny = {_fmt_num(solution.y)}",
        "explanation": "Values that satisfy both equations.",
    })

    verification_steps, ok = _build_verification(system, solution, tolerance)

    for i, s in enumerate(steps, 1):
        s["step_number"] = i
    for i, s in enumerate(verification_steps, 1):
        s["step_number"] = i

    t_end = time.perf_counter()
    runtime_ms = round((t_end - t_start) * 1000, 2)

    if mode == "numerical":
        method_name = "NumPy Linear Algebra"
        method_desc = "Classify by matrix rank, then solve Ax = b numerically."
        library = f"NumPy {np.__version__}"
    else:
        method_name = rule.name
        method_desc = rule.description
        library = f"SymPy {sympy.__version__}"

    return {
        "equation": formula,
        "given": {
            "problem": "Solve the system of two linear equations",
            "inputs": {
                "equations": str(system),
                "number_of_equations": "2",
                "variables": "x, y",
                "number_of_variables": "2",
            },
        },
        "method": {
            "name": method_name,
            "description": method_desc,
            "parameters": {
                "equation_type": "System of 2 linear equations",
                "categories": f"({first.label}, {second.label})",
                "mode": mode,
            },
        },
        "steps": steps,
        "final_answer": f"x = {_fmt_num(solution.x)}\ny = {_fmt_num(solution.y)}",
        "solution": [solution.x, solution.y],
        "categories": [first.value, second.value],
        "verification_steps": verification_steps,
        "summary": {
            "runtime_ms": runtime_ms,
            "total_steps": len(steps),
            "verification_steps": len(verification_steps),
            "validation_status": "pass" if ok else "fail",
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "library": library,
        },
    }


if __name__ == "__main__":
    test_formulas = [
        "1*x + 1*y = 2, 2*x + 1*y = 9",
        "0*x + 1*y = 5, 1*x + 0*y = 3",
        "0*x + 0*y = 0, 0*x + 0*y = 0",
        "3*x - 2*y = 1, 0*x + 4*y = 6",
    ]
    for f in test_formulas:
        print(f"\n{'='*50}")
        print(f"Solving: {f}")
        print('=' * 50)
        result = solve_formula(f)
        for step in result["steps"]:
            print(f"  {step['description']}")
            for line in step["expression"].split('\n'):
                print(f"    {line}")
        print(f"\n  => {result['final_answer']}")
