import pytest
from matplotlib.figure import Figure

from solver import graph
from solver.parser import parse_system


@pytest.mark.parametrize(
    "formula,case",
    [
        ("1*x + 1*y = 2, 2*x + 1*y = 9", "one_solution"),
        ("0*x + 2*y = 4, 0*x + 1*y = 2", "convention"),
        ("0*x + 0*y = 0, 0*x + 0*y = 0", "convention"),
        ("1*x + 1*y = 2, 1*x + 1*y = 3", "no_solution"),
        ("0*x + 1*y = 1, 0*x + 1*y = 2", "no_solution"),
        ("1*x + 1*y = 4, 2*x + 2*y = 8", "infinite"),
        ("0*x + 0*y = 0, 1*x + 1*y = 4", "underdetermined"),
    ],
)
def test_analyze_system_cases(formula: str, case: str) -> None:
    analysis = graph.analyze_system(parse_system(formula))
    assert analysis["eq_type"] == "system"
    assert analysis["case"] == case
    assert analysis["graphable"] is True


def test_analyze_system_reports_solution_and_determinant() -> None:
    analysis = graph.analyze_system(parse_system("1*x + 1*y = 2, 2*x + 1*y = 9"))
    assert analysis["solution"] == "x = 7  ,  y = -5"
    assert "= -1" in analysis["detail"]


def test_analyze_system_failure_has_no_point() -> None:
    analysis = graph.analyze_system(parse_system("1*x + 1*y = 4, 2*x + 2*y = 8"))
    assert analysis["solution"] is None


def test_analyze_system_uses_given_tolerance() -> None:
    system = parse_system("0*x + 3*y = 1, 0*x + 1000*y = 333")
    assert graph.analyze_system(system)["case"] == "no_solution"
    assert graph.analyze_system(system, tolerance=1e-2)["case"] == "convention"


def test_figure_title_follows_tolerance() -> None:
    system = parse_system("0*x + 3*y = 1, 0*x + 1000*y = 333")
    fig = graph.build_figure(system, (0.0, 1 / 3), tolerance=1e-2)
    assert fig.axes[0].get_title().startswith("Partially Constrained")


@pytest.mark.parametrize(
    "formula,solution,lines",
    [
        ("1*x + 1*y = 2, 2*x + 1*y = 9", (7.0, -5.0), 4),
        ("0*x + 1*y = 5, 1*x + 0*y = 3", (3.0, 5.0), 4),
        ("0*x + 0*y = 0, 0*x + 0*y = 0", (0.0, 0.0), 2),
        ("1*x + 1*y = 2, 1*x + 1*y = 3", None, 4),
    ],
)
def test_build_figure(formula: str, solution, lines: int) -> None:
    fig = graph.build_figure(parse_system(formula), solution)
    assert isinstance(fig, Figure)
    ax = fig.axes[0]
    # Two axis lines plus one line per drawn equation.
    assert len(ax.get_lines()) == lines
    if solution is not None:
        assert "at" in ax.get_title()
        assert len(ax.collections) == 1


def test_save_figure_writes_png(tmp_path) -> None:
    out = tmp_path / "plot.png"
    graph.save_figure(parse_system("1*x + 1*y = 2, 2*x + 1*y = 9"), str(out), (7.0, -5.0))
    assert out.exists() and out.stat().st_size > 0
