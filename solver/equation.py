"""Equation model, validator and category classifier.

An equation is ``x_coeff * x + y_coeff * y = rhs`` with integer terms.  The
sign of the y-term is already folded into ``y_coeff`` by the front end.
"""

import enum
from dataclasses import dataclass, field
from typing import Iterator, Optional

from solver.errors import ArityError, ContradictoryIdentity


class Category(enum.Enum):
    """Shape of an equation, derived from its coefficient pair."""

    DEGENERATE = "degenerate"   # 0x + 0y
    Y_ONLY = "y_only"           # 0x + by
    X_ONLY = "x_only"           # ax + 0y
    GENERAL = "general"         # ax + by

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    Category.DEGENERATE: "Degenerate",
    Category.Y_ONLY: "Y-only",
    Category.X_ONLY: "X-only",
    Category.GENERAL: "General",
}


def validate(x_coeff: int, y_coeff: int, rhs: int, *,
             offset: Optional[int] = None) -> None:
    """Reject the unsatisfiable identity ``0 = rhs`` (``rhs`` nonzero).

    *offset* points the diagnostic at the right-hand side literal when the
    equation came from text.
    """
    if x_coeff == 0 and y_coeff == 0 and rhs != 0:
        raise ContradictoryIdentity(
            f"invalid equal: 0*x + 0*y can never equal {rhs}", offset=offset)


@dataclass(frozen=True)
class Equation:
    x: int
    y: int
    rhs: int
    source: str = field(default="", compare=False)

    def __post_init__(self):
        validate(self.x, self.y, self.rhs)

    @property
    def category(self) -> Category:
        return classify(self)

    def __str__(self) -> str:
        if self.source:
            return self.source
        sign = "-" if self.y < 0 else "+"
        return f"{self.x}*x {sign} {abs(self.y)}*y = {self.rhs}"


def classify(eq: Equation) -> Category:
    if eq.x == 0:
        return Category.DEGENERATE if eq.y == 0 else Category.Y_ONLY
    return Category.X_ONLY if eq.y == 0 else Category.GENERAL


@dataclass(frozen=True)
class EquationSystem:
    """Exactly two equations.  Order matters: dispatch keys on (first, second)."""

    equations: tuple

    def __post_init__(self):
        if len(self.equations) != 2:
            raise ArityError(
                f"require two formula, got {len(self.equations)}")

    @classmethod
    def of(cls, *equations: Equation) -> "EquationSystem":
        return cls(tuple(equations))

    @property
    def first(self) -> Equation:
        return self.equations[0]

    @property
    def second(self) -> Equation:
        return self.equations[1]

    @property
    def categories(self) -> tuple:
        return classify(self.first), classify(self.second)

    def __iter__(self) -> Iterator[Equation]:
        return iter(self.equations)

    def __str__(self) -> str:
        return ", ".join(str(eq) for eq in self.equations)
