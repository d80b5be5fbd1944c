# solver/placements.py: which (piece, orientation) to try next
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from models import Placement, RequestedPiece, format_path
from pieces import PieceCatalog


@dataclass
class FailureStep:
    """Outcome of a failed placement.

    ``to_remove`` lists placements the cursor popped (most recent first);
    the caller must take them off the board before trying ``candidate``.
    ``candidate`` is None once the search space below the floor is used up.
    """

    candidate: Optional[Placement]
    to_remove: List[Placement] = field(default_factory=list)


class PlacementCursor:
    """Depth-first state over the pieces committed to the board.

    Candidates are always proposed in ascending (name, orientation) order
    for the current stack, so once a candidate has been offered in a given
    context it is never offered again and the search terminates.
    """

    def __init__(self, catalog: PieceCatalog):
        self.catalog = catalog
        self._stack: List[Placement] = []
        self._used: Set[str] = set()
        self._floor = 0

    # ---- inspection ----

    @property
    def stack(self) -> Tuple[Placement, ...]:
        return tuple(self._stack)

    @property
    def used_names(self) -> frozenset:
        return frozenset(self._used)

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def floor(self) -> int:
        return self._floor

    def path(self) -> str:
        return format_path(self._stack)

    def __str__(self) -> str:
        return self.path()

    # ---- candidates ----

    def candidate(self, name: str, orientation_index: int = 0) -> Optional[Placement]:
        shape = self.catalog.orientation(name, orientation_index)
        if shape is None:
            return None
        return Placement(name, orientation_index, shape)

    def resolve(self, requested: RequestedPiece) -> Placement:
        found = self.candidate(requested.name, requested.orientation_index)
        if found is None:
            piece = self.catalog.get(requested.name)
            if piece is None:
                raise ValueError(f"Unknown piece {requested.name!r}")
            raise ValueError(
                f"Piece {requested.name} has no orientation {requested.orientation_index} "
                f"({len(piece.orientations)} available)"
            )
        return found

    def first_candidate(self) -> Optional[Placement]:
        return self._next_unused_after(None)

    def _next_unused_after(self, name: Optional[str]) -> Optional[Placement]:
        next_name = self.catalog.next_name_after(name, self._used)
        if next_name is None:
            return None
        return self.candidate(next_name, 0)

    # ---- transitions ----

    def seed(self, pieces: Sequence[Placement]) -> None:
        """Push placements that are already on the board (initial state)."""
        for placement in pieces:
            self._push(placement)

    def _push(self, placement: Placement) -> None:
        if placement.name in self._used:
            raise ValueError(f"Piece {placement.name} is already placed")
        self._stack.append(placement)
        self._used.add(placement.name)

    def after_success(self, placement: Placement) -> Optional[Placement]:
        """Record a committed placement and propose the first piece for the next cell."""
        self._push(placement)
        return self._next_unused_after(None)

    def after_failure(self, placement: Placement) -> FailureStep:
        """Propose what to try after ``placement`` did not fit.

        Next orientation of the same piece, else the next unused piece.
        When neither exists the last committed placement is popped and
        treated as a failure itself, repeating until a candidate turns up
        or the floor is reached.
        """
        step = FailureStep(None)
        failed = placement
        while True:
            nxt = self.candidate(failed.name, failed.orientation_index + 1)
            if nxt is None:
                nxt = self._next_unused_after(failed.name)
            if nxt is not None:
                step.candidate = nxt
                return step

            if len(self._stack) <= self._floor:
                return step

            failed = self._stack.pop()
            self._used.discard(failed.name)
            step.to_remove.append(failed)

    def remove_last_piece(self) -> Optional[Placement]:
        """Pop the last placement (used to keep searching after a solution)."""
        if len(self._stack) <= self._floor:
            return None
        last = self._stack.pop()
        self._used.discard(last.name)
        return last

    def prevent_backtracking(self, depth: Optional[int] = None) -> None:
        """Never pop below ``depth`` (default: the current stack depth)."""
        self._floor = len(self._stack) if depth is None else max(0, int(depth))


__all__ = ["FailureStep", "PlacementCursor"]
