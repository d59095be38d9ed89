from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from solver.engine import solve_formula

app = FastAPI(title="FormulaFold API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class FormulaRequest(BaseModel):
    formula: str
    mode: str = "exact"


class StepInfo(BaseModel):
    description: str
    expression: str
    explanation: str


class SolveResponse(BaseModel):
    formula: str
    x: float
    y: float
    categories: list[str]
    method: str
    steps: list[StepInfo]
    final_answer: str
    verification_steps: list[StepInfo]


@app.post("/api/solve", response_model=SolveResponse)
def solve(req: FormulaRequest):
    formula = req.formula.strip()
    if not formula:
        raise HTTPException(status_code=400, detail="Formula cannot be empty.")

    try:
        result = solve_formula(formula, mode=req.mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")

    x, y = result["solution"]
    return {
        "formula": formula,
        "x": x,
        "y": y,
        "categories": result["categories"],
        "method": result["method"]["name"],
        "steps": result["steps"],
        "final_answer": result["final_answer"],
        "verification_steps": result["verification_steps"],
    }
