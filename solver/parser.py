"""Front end: turns formula text into an :class:`EquationSystem`.

Grammar (per equation)::

    <int> '*' 'x' ('+' | '-') <int> '*' 'y' '=' <int>

Two equations separated by ``,`` form a system.  The ``+``/``-`` operator
decides the sign of the y-coefficient.  The x-coefficient and the right-hand
side may carry a unary ``-``; the y magnitude may not.  Every literal must
fit in a 32-bit signed integer.
"""

import re
from typing import NamedTuple

from solver.equation import Equation, EquationSystem, validate
from solver.errors import ArityError, FormulaSyntaxError

_TOKEN_RE = re.compile(
    r"(?P<int>\d+(?:_\d+)*)"
    r"|(?P<ident>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>[*+\-=,])"
    r"|(?P<ws>\s+)"
)

# Coefficients and right-hand sides are 32-bit signed integers.
INT_MIN = -2**31
INT_MAX = 2**31 - 1

_ALLOWED = set("0123456789_*+-=, \t\r\n"
               "abcdefghijklmnopqrstuvwxyz"
               "ABCDEFGHIJKLMNOPQRSTUVWXYZ")


class Token(NamedTuple):
    kind: str       # "int", "ident", "op" or "end"
    text: str
    offset: int


def _describe(tok: Token) -> str:
    if tok.kind == "end":
        return "end of input"
    return f"`{tok.text}`"


def _validate_characters(text: str) -> None:
    """Reject formulas with characters the grammar can never accept."""
    bad = sorted({ch for ch in text if ch not in _ALLOWED})
    if bad:
        raise FormulaSyntaxError(
            f"Invalid character(s): {' '.join(bad)}\n"
            f"Only integers, x, y and the symbols * + - = , are allowed.",
            offset=text.index(bad[0]),
        )


def tokenize(text: str) -> list:
    _validate_characters(text)
    tokens = []
    pos = 0
    while pos < len(text):
        # Every allowed character starts one of the four token rules.
        m = _TOKEN_RE.match(text, pos)
        kind = m.lastgroup
        if kind != "ws":
            tokens.append(Token(kind, m.group(), pos))
        pos = m.end()
    tokens.append(Token("end", "", len(text)))
    return tokens


class _Parser:
    """Recursive-descent reader over a token list."""

    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != "end":
            self.pos += 1
        return tok

    def _error(self, expected: str) -> FormulaSyntaxError:
        tok = self.current
        return FormulaSyntaxError(
            f"expected {expected}, found {_describe(tok)}", offset=tok.offset)

    def _peek_op(self, op: str) -> bool:
        return self.current.kind == "op" and self.current.text == op

    def _expect_op(self, op: str) -> Token:
        if not self._peek_op(op):
            raise self._error(f"`{op}`")
        return self._advance()

    def _expect_keyword(self, name: str) -> Token:
        tok = self.current
        if tok.kind != "ident" or tok.text != name:
            raise self._error(f"`{name}`")
        return self._advance()

    def _integer(self, *, signed: bool) -> tuple:
        """Return ``(value, offset)`` of an integer literal."""
        start = self.current.offset
        negative = False
        if signed and self._peek_op("-"):
            self._advance()
            negative = True
        if self.current.kind != "int":
            raise self._error("integer literal")
        tok = self._advance()
        value = -int(tok.text) if negative else int(tok.text)
        if not INT_MIN <= value <= INT_MAX:
            raise FormulaSyntaxError(
                f"integer literal `{'-' if negative else ''}{tok.text}` "
                f"does not fit in 32 bits", offset=start)
        return value, start

    def equation(self) -> Equation:
        start = self.current.offset

        x_coeff, _ = self._integer(signed=True)
        self._expect_op("*")
        self._expect_keyword("x")

        if self._peek_op("+"):
            factor = 1
        elif self._peek_op("-"):
            factor = -1
        else:
            raise self._error("`+` or `-`")
        self._advance()

        y_mag, _ = self._integer(signed=False)
        self._expect_op("*")
        self._expect_keyword("y")
        self._expect_op("=")
        rhs, rhs_offset = self._integer(signed=True)

        y_coeff = y_mag * factor
        validate(x_coeff, y_coeff, rhs, offset=rhs_offset)

        end = self.current.offset
        source = self.text[start:end].strip()
        return Equation(x_coeff, y_coeff, rhs, source=source)

    def system(self) -> EquationSystem:
        equations = []
        while self.current.kind != "end":
            equations.append(self.equation())
            if self.current.kind == "end":
                break
            self._expect_op(",")
        if len(equations) != 2:
            raise ArityError(
                f"require two formula, got {len(equations)}")
        return EquationSystem(tuple(equations))

    def finish(self) -> None:
        if self.current.kind != "end":
            raise self._error("end of input")


def parse_equation(text: str) -> Equation:
    """Parse a single ``<int>*x (+|-) <int>*y = <int>`` equation."""
    parser = _Parser(text)
    eq = parser.equation()
    parser.finish()
    return eq


def parse_system(text: str) -> EquationSystem:
    """Parse two comma-separated equations.

    A single trailing comma is accepted.  Any count other than two raises
    :class:`ArityError`.
    """
    return _Parser(text).system()
