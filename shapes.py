"""Shape geometry: multi-layer bit grids and the transforms that orient them.

A shape lives in a fixed five-layer table (5×5, 4×4, 3×3, 2×2, 1×1), the
same stepped layout as the pyramid board.  A cell (r, c) in layer k rests
on the layer k-1 cells (r..r+1, c..c+1), so rotating or transposing every
layer about its own centre rotates/reflects the whole 3-D shape, and a
(dr, dc) translation means the same thing in every layer.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from layers import LayeredGrid
from models import Position

SHAPE_DIMS: Tuple[Tuple[int, int], ...] = ((5, 5), (4, 4), (3, 3), (2, 2), (1, 1))

FILLED_CELL = "●"
BLANK_CELL = "·"


class GeometryError(RuntimeError):
    """A shape transform broke an invariant (malformed shape)."""


# ---------------- grid transforms ----------------

def _transform_each_layer(
    grid: LayeredGrid,
    source_of: Callable[[int, int, int], Tuple[int, int]],
) -> LayeredGrid:
    """Build a new grid where cell (r, c) takes the value at ``source_of(r, c, size)``.

    ``size`` is the last valid index of the (square) layer.
    """
    out = LayeredGrid(grid.layer_dims, grid.default)
    for layer in range(grid.layer_count):
        rows, cols = grid.dimensions(layer)
        if rows != cols:
            raise GeometryError("A non-square layer cannot be transformed")
        size = rows - 1
        for r in range(rows):
            for c in range(cols):
                sr, sc = source_of(r, c, size)
                out.update(layer, r, c, grid.at(layer, sr, sc))
    return out


def _shift_up(grid: LayeredGrid) -> LayeredGrid:
    return _transform_each_layer(grid, lambda r, c, size: (0 if r == size else r + 1, c))


def _shift_left(grid: LayeredGrid) -> LayeredGrid:
    return _transform_each_layer(grid, lambda r, c, size: (r, 0 if c == size else c + 1))


def _shift_down(grid: LayeredGrid) -> LayeredGrid:
    return _transform_each_layer(grid, lambda r, c, size: (size if r == 0 else r - 1, c))


def _top_row_empty(grid: LayeredGrid) -> bool:
    for layer in range(grid.layer_count):
        _, cols = grid.dimensions(layer)
        if any(grid.at(layer, 0, c) for c in range(cols)):
            return False
    return True


def _left_col_empty(grid: LayeredGrid) -> bool:
    for layer in range(grid.layer_count):
        rows, _ = grid.dimensions(layer)
        if any(grid.at(layer, r, 0) for r in range(rows)):
            return False
    return True


def _right_of_diagonal(grid: LayeredGrid) -> bool:
    rows, _ = grid.dimensions(0)
    return any(grid.at(0, i, i + 1) for i in range(rows - 1))


def _shift_while(
    grid: LayeredGrid,
    keep_going: Callable[[LayeredGrid], bool],
    step: Callable[[LayeredGrid], LayeredGrid],
) -> LayeredGrid:
    # A full cycle in every direction is the most any well-formed shape needs.
    budget = 4 * max(max(rows, cols) for rows, cols in grid.layer_dims)
    for _ in range(budget):
        if not keep_going(grid):
            return grid
        grid = step(grid)
    raise GeometryError("Detected infinite loop in shift logic")


# ---------------- shape ----------------

class Shape:
    """The footprint of one piece in one orientation."""

    __slots__ = ("layers", "is_3d", "_key")

    def __init__(self, layers: LayeredGrid, is_3d: bool = False):
        self.layers = layers
        self.is_3d = bool(is_3d)
        self._key = (self.layers.freeze(), self.is_3d)

    @classmethod
    def from_cells(cls, cells: Iterable[Tuple[int, int, int]], is_3d: Optional[bool] = None) -> "Shape":
        grid = LayeredGrid(SHAPE_DIMS, False)
        used_layers: Set[int] = set()
        for layer, row, col in cells:
            if not grid.contains(layer, row, col):
                raise ValueError(f"cell ({layer}, {row}, {col}) is outside the shape grid")
            grid.update(layer, row, col, True)
            used_layers.add(layer)
        if is_3d is None:
            is_3d = len(used_layers) > 1
        return cls(grid, is_3d)

    # ---- inspection ----

    def is_set(self, layer: int, row: int, col: int) -> bool:
        return bool(self.layers.at(layer, row, col))

    def dimensions(self, layer: int) -> Tuple[int, int]:
        return self.layers.dimensions(layer)

    @property
    def layer_count(self) -> int:
        return self.layers.layer_count

    def cells(self) -> List[Position]:
        return [pos for pos, val in self.layers.cells() if val]

    @property
    def size(self) -> int:
        return len(self.cells())

    def layer_is_empty(self, layer: int) -> bool:
        return self.layers.layer_is_empty(layer)

    def offset(self) -> Tuple[int, int]:
        """(row, col) of the first occupied cell, scanning layer 0 row-major.

        A rotated or reflected shape is not guaranteed to occupy (0, 0), so
        boards align this cell, not the grid origin, with their anchor.
        """
        pos = self.layers.find_in_layer(0, True) or self.layers.find(True)
        if pos is None:
            return (0, 0)
        return (pos.row, pos.col)

    def to_int(self) -> int:
        """Canonical numeric encoding used to order orientations."""
        total = 0
        layer_bonus = 1
        for layer in range(self.layers.layer_count):
            if layer == 0:
                layer_bonus = 1
            elif layer == 1:
                layer_bonus = 10000
            else:
                layer_bonus *= 100
            rows, cols = self.layers.dimensions(layer)
            for r in range(rows):
                row_bonus = (10 ** r) * layer_bonus
                for c in range(cols):
                    if self.layers.at(layer, r, c):
                        total += (c + 1) * row_bonus
        return total

    def sort_key(self):
        # The cell tuple breaks (unlikely) encoding ties so ordering is total.
        return (self.to_int(), self._key)

    # ---- transforms ----

    def rotate(self) -> "Shape":
        """90° clockwise, layer by layer."""
        rotated = _transform_each_layer(self.layers, lambda r, c, size: (size - c, r))
        return Shape(rotated, self.is_3d)

    def reflect(self) -> "Shape":
        """Mirror image (transpose of every layer)."""
        reflected = _transform_each_layer(self.layers, lambda r, c, size: (c, r))
        return Shape(reflected, self.is_3d)

    def snap_to_top_left(self) -> "Shape":
        layers = _shift_while(self.layers, _top_row_empty, _shift_up)
        layers = _shift_while(layers, _left_col_empty, _shift_left)
        return Shape(layers, self.is_3d)

    def erect(self) -> "Shape":
        """Stand a flat shape up so that it rises to the north-east.

        Layer 0 is read as a side elevation tilted by 45°: after sliding the
        shape down until nothing sits right of the main diagonal, the cells on
        the main diagonal stay on layer 0 and each diagonal further below it
        climbs one layer, landing at (c, c) of that layer.
        """
        if self.is_3d:
            return Shape(self.layers.copy(), True)

        aligned = self.snap_to_top_left()
        base = _shift_while(aligned.layers, _right_of_diagonal, _shift_down)

        out = LayeredGrid(SHAPE_DIMS, False)
        n, _ = SHAPE_DIMS[0]
        for layer in range(len(SHAPE_DIMS)):
            for i in range(n - layer):
                if base.at(0, i + layer, i):
                    out.update(layer, i, i, True)
        return Shape(out, True)

    # ---- parsing / display ----

    @classmethod
    def parse(cls, layer_strings: Sequence[str], letter: str) -> Optional["Shape"]:
        """Extract the shape drawn with ``letter`` from per-layer text blocks.

        Rows inside a block are separated by newlines.  The lowest layer that
        contains the letter becomes shape layer 0.  Returns None when the
        letter does not appear at all.
        """
        found: List[Tuple[int, int, int]] = []
        for layer, text in enumerate(layer_strings):
            row = col = 0
            for ch in text:
                if ch == "\n":
                    row += 1
                    col = 0
                    continue
                if ch == letter:
                    found.append((layer, row, col))
                col += 1

        if not found:
            return None

        layer_offset = min(l for l, _, _ in found)
        row_offset = min(r for _, r, _ in found)
        col_offset = min(c for _, _, c in found)
        try:
            shape = cls.from_cells(
                (l - layer_offset, r - row_offset, c - col_offset) for l, r, c in found
            )
        except ValueError as exc:
            raise ValueError(f"Shape {letter} is too large: {exc}") from None
        return shape.snap_to_top_left()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Shape):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        order = list(range(self.layers.layer_count - 1, -1, -1)) if self.is_3d else [0]
        blocks = []
        for layer in order:
            rows, cols = self.layers.dimensions(layer)
            blocks.append("\n".join(
                "".join(FILLED_CELL if self.layers.at(layer, r, c) else BLANK_CELL for c in range(cols))
                for r in range(rows)
            ))
        return "\n\n".join(blocks) + "\n"

    def __repr__(self) -> str:
        return f"Shape(cells={len(self.cells())}, is_3d={self.is_3d}, key={self.to_int()})"


# ---------------- orientations ----------------

def generate_orientations(base: Shape, *, allow_erect: bool = False) -> List[Shape]:
    """Every distinct orientation of ``base``, in canonical order.

    Rotations 0/90/180/270 of the shape and of its mirror image; when
    ``allow_erect`` is set each flat rotation is also erected and the
    erected form rotated in turn (erecting and rotating do not commute).
    """
    seen: Set[Shape] = set()

    def _add_rotations(shape: Shape) -> None:
        nxt = shape
        for _ in range(4):
            seen.add(nxt.snap_to_top_left())
            if allow_erect and not nxt.is_3d:
                _add_rotations(nxt.erect())
            nxt = nxt.rotate()

    _add_rotations(base)
    _add_rotations(base.reflect())
    return sorted(seen, key=Shape.sort_key)
