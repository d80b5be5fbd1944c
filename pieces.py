# pieces.py: the named piece catalog
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from shapes import Shape, generate_orientations

# Base outline of every piece, drawn with its own letter ("." is blank).
PIECE_DEFINITIONS: Dict[str, str] = {
    "A": "A\nAAA",
    "B": "BB\nBBB",
    "C": ".C\n.C\n.C\nCC",
    "D": "DDDD\n..D",
    "E": "EE\n.EEE",
    "F": "F\nFF",
    "G": "GGG\n..G\n..G",
    "H": "HH\n.HH\n..H",
    "I": "II\n.I\nII",
    "J": "JJJJ",
    "K": "KK\nKK",
    "L": ".L\nLLL\n.L",
}


@dataclass(frozen=True)
class Piece:
    name: str
    orientations: Tuple[Shape, ...]

    @classmethod
    def parse(cls, outline: str, name: str, *, allow_erect: bool = False) -> "Piece":
        """Build a piece from its outline; every other orientation is derived."""
        base = Shape.parse([outline], name)
        if base is None:
            raise ValueError(f"outline for piece {name} does not contain {name!r}")
        return cls(name, tuple(generate_orientations(base, allow_erect=allow_erect)))

    def __str__(self) -> str:
        return f"{self.name} ({len(self.orientations)} orientations)"


class PieceCatalog:
    """Immutable, name-ordered set of pieces shared by the cursor and driver."""

    def __init__(self, pieces: Iterable[Piece], *, three_d: bool = False):
        ordered = sorted(pieces, key=lambda p: p.name)
        self._pieces: Dict[str, Piece] = {}
        for piece in ordered:
            if piece.name in self._pieces:
                raise ValueError(f"duplicate piece name {piece.name!r}")
            self._pieces[piece.name] = piece
        self._names: Tuple[str, ...] = tuple(self._pieces)
        self.three_d = bool(three_d)

    @classmethod
    def from_outlines(cls, outlines: Mapping[str, str], *, three_d: bool = False) -> "PieceCatalog":
        return cls(
            (Piece.parse(text, name, allow_erect=three_d) for name, text in outlines.items()),
            three_d=three_d,
        )

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    def get(self, name: str) -> Optional[Piece]:
        return self._pieces.get(name)

    def orientation(self, name: str, index: int) -> Optional[Shape]:
        piece = self._pieces.get(name)
        if piece is None or index < 0 or index >= len(piece.orientations):
            return None
        return piece.orientations[index]

    def index_of(self, name: str, shape: Shape) -> Optional[int]:
        piece = self._pieces.get(name)
        if piece is None:
            return None
        for idx, candidate in enumerate(piece.orientations):
            if candidate == shape:
                return idx
        return None

    def next_name_after(self, name: Optional[str], used: Iterable[str] = ()) -> Optional[str]:
        """Smallest name strictly after ``name`` (None = from the start) not in ``used``."""
        used_set = set(used)
        for candidate in self._names:
            if name is not None and candidate <= name:
                continue
            if candidate not in used_set:
                return candidate
        return None

    def total_cells(self) -> int:
        return sum(p.orientations[0].size for p in self._pieces.values() if p.orientations)

    def __contains__(self, name: object) -> bool:
        return name in self._pieces

    def __iter__(self) -> Iterator[Piece]:
        return iter(self._pieces.values())

    def __len__(self) -> int:
        return len(self._pieces)


@lru_cache(maxsize=2)
def standard_catalog(three_d: bool = False) -> PieceCatalog:
    """The twelve A–L pieces; erected orientations only for 3-D boards."""
    return PieceCatalog.from_outlines(PIECE_DEFINITIONS, three_d=three_d)


__all__ = ["PIECE_DEFINITIONS", "Piece", "PieceCatalog", "standard_catalog"]
