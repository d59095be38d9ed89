from fastapi.testclient import TestClient

from backend.app.main import app

client = TestClient(app)


def test_solve_endpoint_returns_solution() -> None:
    resp = client.post("/api/solve", json={"formula": "1*x + 1*y = 2, 2*x + 1*y = 9"})
    assert resp.status_code == 200
    body = resp.json()
    assert (body["x"], body["y"]) == (7.0, -5.0)
    assert body["categories"] == ["general", "general"]
    assert body["method"].startswith("Elimination")
    assert body["final_answer"] == "x = 7\ny = -5"
    assert body["steps"][0]["description"] == "System of equations"
    assert body["verification_steps"]


def test_solve_endpoint_numerical_mode() -> None:
    resp = client.post("/api/solve", json={"formula": "0*x + 1*y = 5, 1*x + 0*y = 3",
                                           "mode": "numerical"})
    assert resp.status_code == 200
    assert resp.json()["method"] == "NumPy Linear Algebra"


def test_empty_formula_is_rejected() -> None:
    resp = client.post("/api/solve", json={"formula": "   "})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Formula cannot be empty."


def test_unsolvable_formula_is_a_client_error() -> None:
    resp = client.post("/api/solve", json={"formula": "1*x + 1*y = 2, 1*x + 1*y = 3"})
    assert resp.status_code == 400
    assert "parallel" in resp.json()["detail"]


def test_syntax_error_is_a_client_error() -> None:
    resp = client.post("/api/solve", json={"formula": "1*x + 1*y = 2"})
    assert resp.status_code == 400
    assert "require two formula" in resp.json()["detail"]


def test_unknown_mode_is_a_client_error() -> None:
    resp = client.post("/api/solve", json={"formula": "1*x + 1*y = 2, 2*x + 1*y = 9",
                                           "mode": "guess"})
    assert resp.status_code == 400
    assert "Unknown mode" in resp.json()["detail"]
