"""
FormulaFold — Entry point.

  python main.py solve "1*x + 1*y = 2, 2*x + 1*y = 9"
  python main.py fold module.py -o module_folded.py
"""

import argparse
import logging
import sys
from typing import Optional

from codegen.fold import fold_file
from solver.config import MODES, load_settings
from solver.engine import solve_formula
from solver.logging_config import setup_logging

logger = logging.getLogger("solver.cli")


def _print_trail(result: dict) -> None:
    for step in result["steps"]:
        print(f"{step['step_number']}. {step['description']}")
        for line in step["expression"].split("\n"):
            print(f"     {line}")
    print()


def _cmd_solve(args, settings: dict) -> int:
    result = solve_formula(args.formula, mode=args.mode, settings=settings)
    if args.steps or settings.get("show_steps"):
        _print_trail(result)
    print(result["final_answer"])
    if args.plot:
        from solver.graph import save_figure
        from solver.parser import parse_system

        save_figure(parse_system(args.formula), args.plot, result["solution"],
                    tolerance=float(settings["tolerance"]))
        logger.info("graph written to %s", args.plot)
    return 0


def _cmd_fold(args, settings: dict) -> int:
    folded = fold_file(args.source, args.output)
    if args.output is None:
        logger.info("folded %s in place", args.source)
    else:
        logger.info("folded %s into %s", args.source, args.output)
    if args.print_source:
        print(folded, end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formulafold",
        description="Resolve two-equation formulas and fold them into source code")
    parser.add_argument("--verbose", action="store_true", help="debug logging")
    parser.add_argument("--settings", help="settings JSON file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_solve = sub.add_parser("solve", help="resolve one formula")
    p_solve.add_argument("formula", help='e.g. "1*x + 1*y = 2, 2*x + 1*y = 9"')
    p_solve.add_argument("--mode", choices=MODES, default=None)
    p_solve.add_argument("--steps", action="store_true", help="print every step")
    p_solve.add_argument("--plot", metavar="PATH", help="save a graph of the system")
    p_solve.set_defaults(handler=_cmd_solve)

    p_fold = sub.add_parser("fold", help="fold formula(...) calls in a Python file")
    p_fold.add_argument("source")
    p_fold.add_argument("-o", "--output", default=None)
    p_fold.add_argument("--print", dest="print_source", action="store_true",
                        help="echo the folded source")
    p_fold.set_defaults(handler=_cmd_fold)
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.settings)

    try:
        setup_logging("DEBUG" if args.verbose else settings["log_level"])
        return args.handler(args, settings)
    except (ValueError, OSError, SyntaxError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
