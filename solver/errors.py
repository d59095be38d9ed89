"""Diagnostics raised while reading and resolving a formula.

Every error here aborts the enclosing build step (a fold, a CLI run, an API
request).  None of them is recovered or retried locally.
"""

from typing import Optional


class FormulaError(ValueError):
    """Base class for every formula diagnostic.

    *offset* is the 0-based column inside the formula text when the error can
    be pinned to a token.  ``with_location`` attaches the call site once the
    code-synthesis layer knows which file and line the formula came from.
    """

    def __init__(self, message: str, *, offset: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.filename: Optional[str] = None
        self.lineno: Optional[int] = None
        self.col: Optional[int] = None

    def with_location(self, filename: str, lineno: int, col: int) -> "FormulaError":
        self.filename = filename
        self.lineno = lineno
        self.col = col
        return self

    def __str__(self) -> str:
        text = self.message
        if self.offset is not None:
            text = f"{text} (at column {self.offset})"
        if self.filename is not None:
            text = f"{self.filename}:{self.lineno}:{self.col}: {text}"
        return text


class FormulaSyntaxError(FormulaError):
    """The text does not follow ``<int>*x (+|-) <int>*y = <int>``."""


class ContradictoryIdentity(FormulaError):
    """An equation reduces to ``0 = c`` with ``c != 0``."""


class ArityError(FormulaError):
    """A system does not hold exactly two equations."""


class Underdetermined(FormulaError):
    """Fewer independent constraints than unknowns."""


class InfiniteSolutions(Underdetermined):
    """Both equations describe the same line."""


class Contradiction(FormulaError):
    """No assignment satisfies both equations."""
