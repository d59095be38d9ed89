"""
Graph builder for FormulaFold.

Produces a dark-themed matplotlib Figure of a two-equation system:
  - General equations are drawn as sloped lines,
  - Y-only equations as horizontal lines, X-only ones as vertical lines,
  - Degenerate equations (0 = 0) cover the whole plane and are not drawn.
"""

import numpy as np

from solver import resolver
from solver.equation import Category, Equation, EquationSystem
from solver.errors import Contradiction, InfiniteSolutions, Underdetermined
from solver.numerical import _fmt_num

# ── palette ────────────────────────────────────────────────────────────────
C_BG       = "#0f0f0f"
C_AX       = "#181818"
C_GRID     = "#252525"
C_TICK     = "#666666"
C_SPINE    = "#333333"
C_LINE1    = "#1a8cff"   # first equation
C_LINE2    = "#ff8c42"   # second equation
C_DOT      = "#4caf50"   # intersection / solution dot
C_TEXT     = "#cccccc"

_FORM = "a₁x + b₁y = c₁\na₂x + b₂y = c₂"


def _style_axes(ax, fig):
    fig.patch.set_facecolor(C_BG)
    ax.set_facecolor(C_AX)
    ax.tick_params(colors=C_TICK, labelsize=9)
    ax.xaxis.label.set_color(C_TEXT)
    ax.yaxis.label.set_color(C_TEXT)
    ax.title.set_color(C_TEXT)
    for spine in ax.spines.values():
        spine.set_edgecolor(C_SPINE)
    ax.grid(True, color=C_GRID, linewidth=0.8, linestyle="--", alpha=0.7)
    ax.axhline(0, color=C_SPINE, linewidth=0.8)
    ax.axvline(0, color=C_SPINE, linewidth=0.8)


def analyze_system(system: EquationSystem,
                   tolerance: float = resolver.DEFAULT_TOLERANCE) -> dict:
    """
    Return a structured analysis dict describing the mathematical case.

    Returned dict keys:
      eq_type    : always "system"
      case       : "one_solution" | "convention" | "no_solution" |
                   "infinite" | "underdetermined"
      case_label : human-readable short label
      form       : general algebraic form string
      description: multiline explanation of the case
      detail     : extra algebraic condition string
      solution   : solution string or None
      graphable  : bool
    """
    first, second = system.categories
    rule = resolver.rule_for(first, second)
    d = resolver.determinant(system.first, system.second)

    try:
        sol = resolver.solve(system, tolerance)
    except InfiniteSolutions:
        return {
            "eq_type":    "system",
            "case":       "infinite",
            "case_label": "Dependent System — Infinitely Many Solutions",
            "form":       _FORM,
            "description": (
                "Both equations represent the same line.\n"
                "Every point on that line satisfies both equations,\n"
                "so no single point can be reported."
            ),
            "detail":   "a₁/a₂ = b₁/b₂ = c₁/c₂   →   same line",
            "solution": None,
            "graphable": True,
        }
    except Underdetermined:
        return {
            "eq_type":    "system",
            "case":       "underdetermined",
            "case_label": "Underdetermined — One Constraint, Two Unknowns",
            "form":       _FORM,
            "description": (
                "One equation reads 0 = 0 and the other involves both x and y.\n"
                "A single line of solutions remains."
            ),
            "detail":   "0x + 0y = 0   →   no information",
            "solution": None,
            "graphable": True,
        }
    except Contradiction:
        return {
            "eq_type":    "system",
            "case":       "no_solution",
            "case_label": "Inconsistent System — No Solution",
            "form":       _FORM,
            "description": (
                "The two lines are parallel — they have the same slope\n"
                "but different intercepts, so they never intersect."
            ),
            "detail":   "D = a₁b₂ − a₂b₁ = 0  but  c₁/c₂ ≠ a₁/a₂   →   parallel lines",
            "solution": "No solution",
            "graphable": True,
        }

    sol_str = f"x = {_fmt_num(sol.x)}  ,  y = {_fmt_num(sol.y)}"
    if rule is resolver.ELIMINATION:
        return {
            "eq_type":    "system",
            "case":       "one_solution",
            "case_label": "Consistent Independent — One Solution",
            "form":       _FORM,
            "description": (
                "The two lines have different slopes, so they intersect\n"
                "at exactly one point."
            ),
            "detail":   f"D = a₁b₂ − a₂b₁ = {d} ≠ 0   →   unique intersection",
            "solution": sol_str,
            "graphable": True,
        }
    return {
        "eq_type":    "system",
        "case":       "convention",
        "case_label": "Partially Constrained — Conventional Zero",
        "form":       _FORM,
        "description": (
            f"The equations are ({first.label}, {second.label}).\n"
            "At least one unknown is not constrained by either equation\n"
            "and is reported as 0 by convention."
        ),
        "detail":   rule.description,
        "solution": sol_str,
        "graphable": True,
    }


def _draw_equation(ax, eq: Equation, x_range, color, label):
    """Draw one equation; returns the plotted y values (or None)."""
    cat = eq.category
    if cat is Category.DEGENERATE:
        return None
    if cat is Category.X_ONLY:
        ax.axvline(eq.rhs / eq.x, color=color, linewidth=2, label=label)
        return None
    y_vals = (eq.rhs - eq.x * x_range) / eq.y
    ax.plot(x_range, y_vals, color=color, linewidth=2, label=label)
    return y_vals


def build_figure(system: EquationSystem, solution=None,
                 tolerance: float = resolver.DEFAULT_TOLERANCE):
    """
    Build and return a dark-themed matplotlib Figure for *system*.

    *solution* is an optional ``(x, y)`` point to mark on the plot;
    *tolerance* is the one the solution was resolved with.
    """
    from matplotlib.figure import Figure

    cx = solution[0] if solution is not None else 0.0
    x_range = np.linspace(cx - 8, cx + 8, 400)

    fig = Figure(figsize=(7, 3.8), dpi=100)
    ax  = fig.add_subplot(111)
    _style_axes(ax, fig)

    drawn = []
    for eq, color in zip(system, (C_LINE1, C_LINE2)):
        y_vals = _draw_equation(ax, eq, x_range, color, str(eq))
        if y_vals is not None:
            drawn.append(y_vals)

    analysis = analyze_system(system, tolerance)
    title = analysis["case_label"]
    if solution is not None:
        sx, sy = float(solution[0]), float(solution[1])
        ax.scatter([sx], [sy], color=C_DOT, s=90, zorder=5,
                   label=f"Solution: ({sx:g}, {sy:g})")
        title = f"{title}  at  ({sx:g}, {sy:g})"
    ax.set_title(title, color=C_TEXT, fontsize=9)

    ax.set_xlabel("x", color=C_TEXT)
    ax.set_ylabel("y", color=C_TEXT)

    # Clip y-axis to avoid extreme values
    if drawn:
        y_all = np.concatenate(drawn)
        y_finite = y_all[np.isfinite(y_all)]
        if len(y_finite):
            ylo, yhi = np.percentile(y_finite, 2), np.percentile(y_finite, 98)
            pad = max((yhi - ylo) * 0.2, 1.0)
            ax.set_ylim(ylo - pad, yhi + pad)

    if ax.get_legend_handles_labels()[0]:
        ax.legend(fontsize=8, facecolor="#1e1e1e", edgecolor=C_SPINE,
                  labelcolor=C_TEXT)
    fig.tight_layout(pad=1.2)
    return fig


def save_figure(system: EquationSystem, path: str, solution=None,
                tolerance: float = resolver.DEFAULT_TOLERANCE) -> None:
    fig = build_figure(system, solution, tolerance)
    fig.savefig(path, facecolor=fig.get_facecolor())
