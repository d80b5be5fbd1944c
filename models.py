import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

_TOKEN_RE = re.compile(r"^(?P<name>[A-Za-z])(?:\[(?P<bracketed>\d{1,3})\]|(?P<bare>\d{1,3}))$")


@dataclass(frozen=True, order=True)
class Position:
    layer: int
    row: int
    col: int

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.layer, self.row, self.col)


@dataclass(frozen=True)
class Placement:
    """A (piece, orientation) pair the cursor has proposed or committed.

    ``shape`` is the oriented shape itself; it is carried along so callers
    never have to look it up again, but two placements are equal when their
    name and orientation index match.
    """

    name: str
    orientation_index: int
    shape: object = field(compare=False, repr=False)

    @property
    def token(self) -> str:
        return format_token(self.name, self.orientation_index)


@dataclass(frozen=True)
class RequestedPiece:
    name: str
    orientation_index: int

    @classmethod
    def parse(cls, text: str) -> "RequestedPiece":
        """Accepts ``A[3]``, ``A[03]``, ``A3`` and ``A03``."""
        raw = (text or "").strip().rstrip(";").strip()
        m = _TOKEN_RE.match(raw)
        if not m:
            raise ValueError(f"Bad piece token: {text!r} (expected e.g. 'A[03]')")
        index = m.group("bracketed") or m.group("bare")
        return cls(m.group("name").upper(), int(index))

    @property
    def token(self) -> str:
        return format_token(self.name, self.orientation_index)


def format_token(name: str, orientation_index: int) -> str:
    return f"{name}[{orientation_index:02d}]"


def format_path(pieces: Iterable) -> str:
    """Join placements/requested pieces into the ``A[00]; B[03]`` form."""
    return "; ".join(format_token(p.name, p.orientation_index) for p in pieces)


def parse_path(value) -> List[RequestedPiece]:
    """Parse a placement path given either as one string or a list of tokens."""
    if value is None:
        return []
    if isinstance(value, str):
        chunks = [value]
    else:
        chunks = [str(v) for v in value]
    out: List[RequestedPiece] = []
    for chunk in chunks:
        for tok in re.split(r"[;,\s]+", chunk):
            if tok:
                out.append(RequestedPiece.parse(tok))
    return out


def normalize_stop_path(value) -> Optional[str]:
    """Return the canonical path string for a stop path, or None for no limit."""
    pieces = parse_path(value)
    if not pieces:
        return None
    return format_path(pieces)
