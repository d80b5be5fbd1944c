# Driver: depth-first placement loop over a Board and a PlacementCursor
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple, Union

from board import Board, create_board
from config import CFG
from models import Placement, normalize_stop_path, parse_path
from pieces import PieceCatalog, standard_catalog
from progress import (
    log_attempt_detail, set_board, set_done, set_search_state, set_status,
    set_stop_path, start_timer,
)
from solver.initial_state import InitialStateError, load_initial_state
from solver.placements import PlacementCursor

logger = logging.getLogger(__name__)

REASON_EXHAUSTED = "exhausted"
REASON_STOP_PATH = "stop_path"
REASON_MAX_SOLUTIONS = "max_solutions"


@dataclass
class Solution:
    index: int
    path: str
    layers: Tuple[str, ...]
    text: str


@dataclass
class SolveResult:
    board_kind: str
    solutions: List[Solution] = field(default_factory=list)
    attempts: int = 0
    reason: str = REASON_EXHAUSTED
    stop_path: Optional[str] = None
    initial_path: str = ""
    elapsed_sec: float = 0.0

    @property
    def count(self) -> int:
        return len(self.solutions)

    @property
    def ok(self) -> bool:
        return bool(self.solutions)

    @property
    def summary(self) -> str:
        return f"found {self.count} solutions"

    @property
    def paths(self) -> List[str]:
        return [s.path for s in self.solutions]

    def as_dict(self) -> dict:
        return {
            "ok": self.ok,
            "board": self.board_kind,
            "count": self.count,
            "summary": self.summary,
            "reason": self.reason,
            "attempts": self.attempts,
            "stop_path": self.stop_path or "",
            "initial_path": self.initial_path,
            "elapsed_sec": round(self.elapsed_sec, 3),
            "solutions": [
                {"index": s.index, "path": s.path, "layers": list(s.layers)}
                for s in self.solutions
            ],
        }


SolutionCallback = Callable[[Solution, Board], None]


class SolverDriver:
    """Runs the search: try candidate, commit or advance, report solutions.

    The board and the cursor move in lock-step: every push onto the cursor
    is one shape committed to the board and every pop is one removal.
    """

    def __init__(
        self,
        board: Board,
        catalog: Optional[PieceCatalog] = None,
        *,
        stop_path: Union[str, Sequence[str], None] = None,
        allow_backtracking: Optional[bool] = None,
        max_solutions: Optional[int] = None,
        on_solution: Optional[SolutionCallback] = None,
        progress_every: Optional[int] = None,
    ):
        self.board = board
        self.catalog = catalog if catalog is not None else standard_catalog(board.supports_3d)
        self.cursor = PlacementCursor(self.catalog)
        self.stop_path = normalize_stop_path(stop_path if stop_path is not None else CFG.STOP_AT)
        self.allow_backtracking = (
            CFG.ALLOW_BACKTRACKING if allow_backtracking is None else bool(allow_backtracking)
        )
        limit = CFG.MAX_SOLUTIONS if max_solutions is None else max_solutions
        self.max_solutions = max(0, int(limit or 0))
        self.on_solution = on_solution
        every = CFG.PROGRESS_EVERY if progress_every is None else progress_every
        self.progress_every = max(1, int(every or 1))
        self._candidate: Optional[Placement] = None
        self._initialized = False

    # ---- setup ----

    def initialize(
        self,
        initial_state: Union[str, Sequence[str], None] = None,
        start_at: Union[str, Sequence[str], None] = None,
    ) -> Optional[Placement]:
        """Load the starting board and pick the first candidate.

        Pieces from ``initial_state`` go where they are drawn.  Every piece of
        ``start_at`` but the last is placed at the open cell in turn; the last
        one is the first candidate tried.  Unless backtracking is allowed the
        search never undoes any of these.
        """
        placed = load_initial_state(initial_state, self.board, self.catalog)
        self.cursor.seed(placed)

        requested = parse_path(start_at)
        candidate: Optional[Placement]
        if requested:
            resolved = []
            for req in requested:
                try:
                    resolved.append(self.cursor.resolve(req))
                except ValueError as exc:
                    raise InitialStateError(str(exc)) from None
            for placement in resolved[:-1]:
                if placement.name in self.cursor.used_names:
                    raise InitialStateError(f"Starting piece {placement.token} is already on the board")
                at = self.board.next_pos
                if not self.board.try_add_shape(placement.shape, placement.name):
                    raise InitialStateError(
                        f"Unable to add starting piece {placement.token} to board at "
                        f"{at.as_tuple() if at else '?'}. It does not fit. Initialization failed."
                    )
                self.cursor.seed([placement])
            candidate = resolved[-1]
            if candidate.name in self.cursor.used_names:
                raise InitialStateError(f"Starting piece {candidate.token} is already on the board")
        else:
            candidate = self.cursor.first_candidate()

        if not self.allow_backtracking:
            self.cursor.prevent_backtracking()

        self._candidate = candidate
        self._initialized = True
        logger.info(
            "Initialized %s board: %d piece(s) preset, first candidate %s",
            self.board.kind, self.cursor.depth, candidate.token if candidate else "none",
        )
        return candidate

    # ---- search ----

    def _after_failure(self, failed: Placement) -> Optional[Placement]:
        step = self.cursor.after_failure(failed)
        for popped in step.to_remove:
            self.board.remove_shape(popped.name)
        return step.candidate

    def run(self) -> SolveResult:
        if not self._initialized:
            self.initialize()

        t0 = time.time()
        result = SolveResult(
            board_kind=self.board.kind,
            stop_path=self.stop_path,
            initial_path=self.cursor.path(),
        )

        set_status("Solving")
        set_board(self.board.kind)
        set_stop_path(self.stop_path)
        start_timer()
        log_attempt_detail(
            "Run setup",
            board=self.board.kind,
            pieces=len(self.catalog),
            cells=self.board.cell_count,
            preset=self.cursor.depth,
            stop_path=self.stop_path,
            allow_backtracking=int(self.allow_backtracking),
            max_solutions=self.max_solutions or None,
        )

        candidate = self._candidate
        while True:
            while candidate is not None:
                result.attempts += 1
                if self.board.try_add_shape(candidate.shape, candidate.name):
                    candidate = self.cursor.after_success(candidate)
                else:
                    candidate = self._after_failure(candidate)
                if result.attempts % self.progress_every == 0:
                    set_search_state(self.cursor.path(), result.attempts, result.count)

            # Nothing left to try from here: either a full board or a dead end.
            if not self.board.solved():
                result.reason = REASON_EXHAUSTED
                break

            path = self.cursor.path()
            if self.stop_path is not None and not path < self.stop_path:
                result.reason = REASON_STOP_PATH
                break

            solution = Solution(
                index=result.count + 1,
                path=path,
                layers=self.board.snapshot(),
                text=self.board.render(),
            )
            result.solutions.append(solution)
            logger.info("Solution %d: %s", solution.index, path)
            log_attempt_detail("Solution found", index=solution.index, path=path)
            if self.on_solution is not None:
                self.on_solution(solution, self.board)

            if self.max_solutions and result.count >= self.max_solutions:
                result.reason = REASON_MAX_SOLUTIONS
                break

            # Treat the last piece as if it had not fit, so the next solution
            # found is strictly after this one.
            last = self.cursor.remove_last_piece()
            if last is None:
                result.reason = REASON_EXHAUSTED
                break
            self.board.remove_shape(last.name)
            candidate = self._after_failure(last)

        self._candidate = None
        result.elapsed_sec = time.time() - t0
        set_search_state(self.cursor.path(), result.attempts, result.count)
        set_done(True, reason=f"{result.summary} ({result.reason})")
        logger.info("%s after %d attempts (%s)", result.summary, result.attempts, result.reason)
        return result


def find_solutions(
    board_type: Optional[str] = None,
    initial_state: Union[str, Sequence[str], None] = None,
    allow_backtracking: Optional[bool] = None,
    stop_at: Union[str, Sequence[str], None] = None,
    *,
    start_at: Union[str, Sequence[str], None] = None,
    max_solutions: Optional[int] = None,
    catalog: Optional[PieceCatalog] = None,
    board: Optional[Board] = None,
    on_solution: Optional[SolutionCallback] = None,
) -> SolveResult:
    """Enumerate solutions strictly below ``stop_at`` (all of them if None)."""
    if board is None:
        board = create_board(board_type)
    driver = SolverDriver(
        board,
        catalog,
        stop_path=stop_at,
        allow_backtracking=allow_backtracking,
        max_solutions=max_solutions,
        on_solution=on_solution,
    )
    try:
        driver.initialize(initial_state, start_at)
    except InitialStateError as exc:
        set_status("Error")
        set_done(False, reason=str(exc))
        raise
    return driver.run()


__all__ = [
    "REASON_EXHAUSTED", "REASON_STOP_PATH", "REASON_MAX_SOLUTIONS",
    "Solution", "SolveResult", "SolverDriver", "find_solutions",
]
