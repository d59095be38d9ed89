"""Code synthesis: fold ``formula("...")`` call sites into constant tuples.

Folding happens on source text, before the program runs::

    pair = formula("1*x + 1*y = 2, 2*x + 1*y = 9")

becomes::

    pair = (7.0, -5.0)

If any formula in a file cannot be resolved, the whole fold fails and no
source is produced.  Unfolded code can still call :func:`formula` directly.
"""

import ast
import functools
import logging
from typing import Optional

from solver import resolver
from solver.errors import FormulaError
from solver.parser import parse_system

logger = logging.getLogger(__name__)

FUNCTION_NAME = "formula"


@functools.lru_cache(maxsize=256)
def formula(text: str) -> tuple:
    """Resolve a literal two-equation formula to ``(x, y)``."""
    return tuple(resolver.solve(parse_system(text)))


def _is_formula_call(node: ast.Call) -> bool:
    func = node.func
    if isinstance(func, ast.Name):
        named = func.id == FUNCTION_NAME
    elif isinstance(func, ast.Attribute):
        named = func.attr == FUNCTION_NAME
    else:
        named = False
    return (
        named
        and len(node.args) == 1
        and not node.keywords
        and isinstance(node.args[0], ast.Constant)
        and isinstance(node.args[0].value, str)
    )


class FormulaFolder(ast.NodeTransformer):
    """Replace every literal ``formula(...)`` call by its solution."""

    def __init__(self, filename: str = "<string>"):
        self.filename = filename
        self.folded = 0

    def visit_Call(self, node: ast.Call):
        self.generic_visit(node)
        if not _is_formula_call(node):
            return node
        text = node.args[0].value
        try:
            x, y = formula(text)
        except FormulaError as exc:
            exc.with_location(self.filename, node.lineno, node.col_offset)
            raise
        self.folded += 1
        logger.debug("%s:%d folded %r -> (%r, %r)",
                     self.filename, node.lineno, text, x, y)
        folded = ast.Tuple(
            elts=[ast.Constant(value=x), ast.Constant(value=y)],
            ctx=ast.Load(),
        )
        return ast.copy_location(folded, node)


def fold_source(source: str, filename: str = "<string>") -> str:
    """Return *source* with every literal ``formula(...)`` call folded.

    Comments and original formatting are not preserved: the result is
    regenerated from the syntax tree.
    """
    tree = ast.parse(source, filename=filename)
    folder = FormulaFolder(filename)
    tree = ast.fix_missing_locations(folder.visit(tree))
    logger.info("%s: folded %d formula call(s)", filename, folder.folded)
    return ast.unparse(tree) + "\n"


def fold_file(path: str, output: Optional[str] = None) -> str:
    """Fold *path* and write the result to *output* (defaults to *path*)."""
    with open(path, "r", encoding="utf-8") as f:
        source = f.read()
    folded = fold_source(source, filename=path)
    with open(output or path, "w", encoding="utf-8") as f:
        f.write(folded)
    return folded
