"""Fixed-layout layered grid storage shared by shapes and boards."""

from __future__ import annotations

from typing import Any, Iterator, List, Optional, Sequence, Tuple

from models import Position

Dims = Tuple[int, int]


def pyramid_dims(base: int) -> Tuple[Dims, ...]:
    """Layer table for a stepped pyramid: base×base, then one smaller per layer."""
    base = int(base)
    if base <= 0:
        raise ValueError(f"pyramid base must be positive, got {base}")
    return tuple((n, n) for n in range(base, 0, -1))


class LayeredGrid:
    """An ordered stack of 2-D layers, each with its own (rows, cols).

    The layer table is fixed when the grid is built.  Indices are not
    bounds-checked beyond what Python lists do; callers consult
    :meth:`dimensions` first.
    """

    __slots__ = ("_dims", "default", "_cells")

    def __init__(self, dims: Sequence[Dims], default: Any):
        if not dims:
            raise ValueError("a layered grid needs at least one layer")
        self._dims: Tuple[Dims, ...] = tuple((int(r), int(c)) for r, c in dims)
        self.default = default
        self._cells: List[List[List[Any]]] = [
            [[default] * cols for _ in range(rows)] for rows, cols in self._dims
        ]

    @classmethod
    def from_layers(cls, layers: Sequence[Sequence[Sequence[Any]]], default: Any) -> "LayeredGrid":
        dims = [(len(layer), len(layer[0]) if layer else 0) for layer in layers]
        grid = cls(dims, default)
        for li, layer in enumerate(layers):
            for ri, row in enumerate(layer):
                grid._cells[li][ri] = list(row)
        return grid

    # ---- read access ----------------------------------------------------

    @property
    def layer_count(self) -> int:
        return len(self._dims)

    @property
    def layer_dims(self) -> Tuple[Dims, ...]:
        return self._dims

    def dimensions(self, layer: int) -> Dims:
        return self._dims[layer]

    def at(self, layer: int, row: int, col: int) -> Any:
        return self._cells[layer][row][col]

    def contains(self, layer: int, row: int, col: int) -> bool:
        if layer < 0 or layer >= len(self._dims):
            return False
        rows, cols = self._dims[layer]
        return 0 <= row < rows and 0 <= col < cols

    def find(self, value: Any) -> Optional[Position]:
        """First cell equal to ``value``: layers in order, then rows, then columns."""
        for li, layer in enumerate(self._cells):
            for ri, row in enumerate(layer):
                for ci, cell in enumerate(row):
                    if cell == value:
                        return Position(li, ri, ci)
        return None

    def find_in_layer(self, layer: int, value: Any) -> Optional[Position]:
        for ri, row in enumerate(self._cells[layer]):
            for ci, cell in enumerate(row):
                if cell == value:
                    return Position(layer, ri, ci)
        return None

    def cells(self) -> Iterator[Tuple[Position, Any]]:
        for li, layer in enumerate(self._cells):
            for ri, row in enumerate(layer):
                for ci, cell in enumerate(row):
                    yield Position(li, ri, ci), cell

    def layer_is_empty(self, layer: int) -> bool:
        return all(cell == self.default for row in self._cells[layer] for cell in row)

    def rows(self, layer: int) -> List[List[Any]]:
        return [list(row) for row in self._cells[layer]]

    def freeze(self) -> Tuple[Tuple[Tuple[Any, ...], ...], ...]:
        return tuple(tuple(tuple(row) for row in layer) for layer in self._cells)

    # ---- mutation -------------------------------------------------------

    def update(self, layer: int, row: int, col: int, value: Any) -> None:
        self._cells[layer][row][col] = value

    def copy(self) -> "LayeredGrid":
        clone = LayeredGrid(self._dims, self.default)
        clone._cells = [[list(row) for row in layer] for layer in self._cells]
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LayeredGrid):
            return NotImplemented
        return self._dims == other._dims and self._cells == other._cells

    def __hash__(self) -> int:
        return hash((self._dims, self.freeze()))

    def __repr__(self) -> str:
        return f"LayeredGrid(dims={list(self._dims)!r})"
