# cli.py: command-line front end for the solver
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from board import BOARD_KINDS, create_board
from config import CFG
from io_files import write_solutions
from shapes import GeometryError
from solver.driver import SolverDriver
from solver.initial_state import InitialStateError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kanoodle",
        description="Enumerate every way to fill the board with the twelve pieces.",
    )
    parser.add_argument("--board", choices=BOARD_KINDS, default=CFG.BOARD,
                        help="Board geometry (default: %(default)s).")
    parser.add_argument("--initial-state", metavar="PATH",
                        help="Text file with the starting board, one block per layer "
                             "separated by a blank line ('-' reads stdin).")
    parser.add_argument("--start-at", nargs="+", metavar="TOKEN",
                        help="Placement sequence to start from, e.g. A[00] C[03].")
    parser.add_argument("--stop-at", nargs="+", metavar="TOKEN",
                        help="Stop before the first solution whose path is not below this one.")
    parser.add_argument("--allow-backtracking", action="store_true", default=CFG.ALLOW_BACKTRACKING,
                        help="Allow the search to undo the initial placements.")
    parser.add_argument("--max-solutions", type=int, default=CFG.MAX_SOLUTIONS,
                        help="Stop after this many solutions (0 = no limit).")
    parser.add_argument("--out", metavar="PATH",
                        help="Also write the solutions to this file.")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Only print the summary line.")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log search events to stderr.")
    return parser


def _read_initial_state(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    def _print_solution(solution, board) -> None:
        if not args.quiet:
            print(solution.path)
            print(solution.text)

    try:
        board = create_board(args.board)
        driver = SolverDriver(
            board,
            stop_path=args.stop_at,
            allow_backtracking=args.allow_backtracking,
            max_solutions=args.max_solutions,
            on_solution=_print_solution,
        )
        print(f"Finding solutions for {board.kind} board")
        print(f"Ending at {driver.stop_path or 'NO-LIMIT'}")
        driver.initialize(_read_initial_state(args.initial_state), args.start_at)
        if not args.quiet:
            print("Initial board state")
            print(board.render())
        result = driver.run()
    except (InitialStateError, GeometryError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.out:
        write_solutions(result, os.getcwd(), path=args.out)
    print(result.summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
