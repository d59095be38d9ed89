import pytest
from sympy import symbols

from solver import engine
from solver.equation import Equation
from solver.errors import ArityError, Contradiction, FormulaSyntaxError, InfiniteSolutions

REQUIRED_FIELDS = {
    "equation",
    "given",
    "method",
    "steps",
    "final_answer",
    "verification_steps",
    "summary",
    "solution",
    "categories",
}


def test_formatting_helpers() -> None:
    x, y = symbols("x y")
    assert engine._format_expr(2 * x - 3 * y) == "2x - 3y"
    assert engine._format_equation(x + 4 * y, 7) == "x + 4y = 7"
    assert engine._ratio(7, 3) == "7/3"
    assert engine._ratio(-7, -1) == "7"


def test_to_sympy_keeps_structure() -> None:
    eq_obj = engine.to_sympy(Equation(2, -1, 5))
    x, y = symbols("x y")
    assert eq_obj.lhs == 2 * x - y
    assert eq_obj.rhs == 5


def test_solve_formula_required_fields_type_and_range_checks() -> None:
    result = engine.solve_formula("1*x + 1*y = 2, 2*x + 1*y = 9")

    assert REQUIRED_FIELDS.issubset(set(result.keys()))
    assert result["solution"] == [7.0, -5.0]
    assert result["final_answer"] == "x = 7\ny = -5"
    assert result["categories"] == ["general", "general"]

    summary = result["summary"]
    assert isinstance(summary["runtime_ms"], (int, float)) and summary["runtime_ms"] >= 0
    assert summary["total_steps"] == len(result["steps"])
    assert summary["verification_steps"] == len(result["verification_steps"])
    assert summary["validation_status"] == "pass"
    assert "SymPy" in summary["library"]


def test_steps_are_numbered_and_explain_elimination() -> None:
    result = engine.solve_formula("1*x + 1*y = 2, 2*x + 1*y = 9")
    numbers = [s["step_number"] for s in result["steps"]]
    assert numbers == list(range(1, len(numbers) + 1))
    descriptions = [s["description"] for s in result["steps"]]
    assert "Compute the determinant" in descriptions
    assert "Apply Cramer's rule" in descriptions
    det_step = result["steps"][descriptions.index("Compute the determinant")]
    assert det_step["expression"].endswith("= -1")
    assert result["method"]["name"].startswith("Elimination")


@pytest.mark.parametrize(
    "formula,description,method",
    [
        ("0*x + 2*y = 4, 0*x + 1*y = 2", "Compare the two values of y", "Consistency on y"),
        ("3*x + 0*y = 3, 1*x + 0*y = 1", "Compare the two values of x", "Consistency on x"),
        ("0*x + 0*y = 0, 0*x + 4*y = 2", "Drop the identity 0 = 0", "Single constraint"),
        ("0*x + 0*y = 0, 0*x + 0*y = 0", "Both equations are 0 = 0", "Trivial identities"),
    ],
)
def test_rule_specific_steps(formula: str, description: str, method: str) -> None:
    result = engine.solve_formula(formula)
    assert description in [s["description"] for s in result["steps"]]
    assert result["method"]["name"] == method
    assert result["summary"]["validation_status"] == "pass"


def test_verification_substitutes_into_both_equations() -> None:
    result = engine.solve_formula("0*x + 1*y = 5, 1*x + 0*y = 3")
    verification = result["verification_steps"]
    assert verification[0]["expression"] == "x = 3, y = 5"
    assert verification[1]["description"].startswith("Equation (1)")
    assert "✓" in verification[1]["expression"]
    assert "✓" in verification[2]["expression"]
    assert verification[-1]["description"] == "All equations verified"


def test_numerical_mode() -> None:
    result = engine.solve_formula("1*x + 1*y = 2, 2*x + 1*y = 9", mode="numerical")
    assert "NumPy" in result["summary"]["library"]
    assert result["solution"] == pytest.approx([7.0, -5.0])
    assert any("matrix" in s["description"].lower() for s in result["steps"])


def test_mode_from_settings() -> None:
    result = engine.solve_formula("1*x + 1*y = 2, 2*x + 1*y = 9",
                                  settings={"mode": "numerical"})
    assert result["method"]["parameters"]["mode"] == "numerical"


def test_unknown_mode_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown mode"):
        engine.solve_formula("1*x + 1*y = 2, 2*x + 1*y = 9", mode="symbolic")


def test_tolerance_from_settings() -> None:
    formula = "0*x + 3*y = 1, 0*x + 1000*y = 333"
    with pytest.raises(Contradiction):
        engine.solve_formula(formula)
    result = engine.solve_formula(formula, settings={"tolerance": 1e-2})
    assert result["solution"][1] == pytest.approx(1 / 3)


def test_tolerance_from_settings_in_numerical_mode() -> None:
    formula = "0*x + 3*y = 1, 0*x + 1000*y = 333"
    with pytest.raises(Contradiction):
        engine.solve_formula(formula, mode="numerical")
    result = engine.solve_formula(formula, mode="numerical", settings={"tolerance": 1e-2})
    assert result["solution"][1] == pytest.approx(1 / 3, rel=1e-2)
    assert result["summary"]["validation_status"] == "pass"


@pytest.mark.parametrize(
    "formula,error",
    [
        ("1*x + 1*y = 4, 2*x + 2*y = 8", InfiniteSolutions),
        ("1*x + 1*y = 2, 1*x + 1*y = 3", Contradiction),
        ("1*x + 1*y = 2", ArityError),
        ("2x + 1*y = 2, 1*x + 1*y = 3", FormulaSyntaxError),
    ],
)
def test_failures_propagate(formula: str, error: type) -> None:
    with pytest.raises(error):
        engine.solve_formula(formula)
