# board.py: the playing surface
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from config import CFG
from layers import LayeredGrid, pyramid_dims
from models import Position
from render import render_text
from shapes import Shape

logger = logging.getLogger(__name__)

BOARD_KINDS = ("rectangle", "pyramid")


class Board:
    """A layered grid of piece letters plus the next open cell.

    ``next_pos`` is the first empty cell (layer, then row, then column) or
    None once every cell is filled.  The two geometries differ only in
    their layer table; placement, removal and rendering are shared.
    """

    kind = "board"

    def __init__(self, dims: Sequence[Tuple[int, int]], empty: Optional[str] = None):
        self.empty = empty if empty is not None else CFG.EMPTY_CELL
        # Board text is whitespace-trimmed per row, so the marker must be visible.
        if len(self.empty) != 1 or self.empty.isspace():
            raise ValueError(f"empty cell marker must be one visible character, got {self.empty!r}")
        self.grid = LayeredGrid(dims, self.empty)
        self.next_pos: Optional[Position] = self.grid.find(self.empty)

    # ---- queries ----

    @property
    def supports_3d(self) -> bool:
        return self.grid.layer_count > 1

    @property
    def cell_count(self) -> int:
        return sum(rows * cols for rows, cols in self.grid.layer_dims)

    def solved(self) -> bool:
        return self.grid.find(self.empty) is None

    def layer_rows(self) -> List[List[str]]:
        return [
            ["".join(row) for row in self.grid.rows(layer)]
            for layer in range(self.grid.layer_count)
        ]

    def snapshot(self) -> Tuple[str, ...]:
        """One newline-joined block per layer, layer 0 first."""
        return tuple("\n".join(rows) for rows in self.layer_rows())

    # ---- mutation ----

    def try_add_shape_at(self, shape: Shape, name: str, position: Optional[Position]) -> bool:
        """Place ``shape`` so its first layer-0 cell lands on ``position``.

        Nothing is written unless every cell fits; returns False on any
        overlap, out-of-range cell, or layer the board does not have.
        """
        if position is None:
            return False
        if name == self.empty:
            raise ValueError(f"piece name {name!r} collides with the empty cell marker")

        off_row, off_col = shape.offset()
        writes: List[Tuple[int, int, int]] = []

        for shape_layer in range(shape.layer_count):
            # Shapes are built bottom-up, so an empty layer ends the shape.
            if shape_layer > 0 and (not shape.is_3d or shape.layer_is_empty(shape_layer)):
                break
            board_layer = position.layer + shape_layer
            if board_layer >= self.grid.layer_count:
                return False
            rows, cols = self.grid.dimensions(board_layer)
            s_rows, s_cols = shape.dimensions(shape_layer)
            for r in range(s_rows):
                for c in range(s_cols):
                    if not shape.is_set(shape_layer, r, c):
                        continue
                    br = position.row + r - off_row
                    bc = position.col + c - off_col
                    if br < 0 or bc < 0 or br >= rows or bc >= cols:
                        return False
                    if self.grid.at(board_layer, br, bc) != self.empty:
                        return False
                    writes.append((board_layer, br, bc))

        for layer, row, col in writes:
            self.grid.update(layer, row, col, name)
        self.next_pos = self.grid.find(self.empty)
        return True

    def try_add_shape(self, shape: Shape, name: str) -> bool:
        return self.try_add_shape_at(shape, name, self.next_pos)

    def remove_shape(self, name: str) -> int:
        """Clear every cell holding ``name``; returns how many were cleared.

        ``next_pos`` moves to the first cleared cell.  In search order the
        removed piece is always the most recently placed one, so that cell
        is the new first empty cell.
        """
        first: Optional[Position] = None
        cleared = 0
        for pos, value in self.grid.cells():
            if value == name:
                self.grid.update(pos.layer, pos.row, pos.col, self.empty)
                cleared += 1
                if first is None:
                    first = pos
        if first is not None:
            self.next_pos = first
        return cleared

    # ---- display ----

    def render(self) -> str:
        return render_text(self.layer_rows())

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dims={list(self.grid.layer_dims)!r}, next_pos={self.next_pos!r})"


class RectangleBoard(Board):
    kind = "rectangle"

    def __init__(self, rows: Optional[int] = None, cols: Optional[int] = None, empty: Optional[str] = None):
        rows = int(rows if rows is not None else CFG.RECT_ROWS)
        cols = int(cols if cols is not None else CFG.RECT_COLS)
        if rows <= 0 or cols <= 0:
            raise ValueError(f"rectangle board needs positive dimensions, got {rows}×{cols}")
        super().__init__([(rows, cols)], empty)


class PyramidBoard(Board):
    kind = "pyramid"

    def __init__(self, base: Optional[int] = None, empty: Optional[str] = None):
        base = int(base if base is not None else CFG.PYRAMID_BASE)
        super().__init__(pyramid_dims(base), empty)


def create_board(kind: Optional[str] = None, **kwargs) -> Board:
    requested = (kind or CFG.BOARD or "rectangle").strip().lower()
    if requested == "rectangle":
        board: Board = RectangleBoard(**kwargs)
    elif requested == "pyramid":
        board = PyramidBoard(**kwargs)
    else:
        raise ValueError(f"Unknown board type {kind!r} (expected one of {', '.join(BOARD_KINDS)})")
    logger.debug("Created %r", board)
    return board


__all__ = ["BOARD_KINDS", "Board", "RectangleBoard", "PyramidBoard", "create_board"]
