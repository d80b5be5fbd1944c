# solver/initial_state.py: load a partially filled board from text
from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Union

from board import Board
from models import Placement, Position
from pieces import PieceCatalog
from shapes import Shape

logger = logging.getLogger(__name__)

_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")


def _clean_block(block: str) -> str:
    lines = [line.rstrip() for line in block.replace("\r", "").split("\n")]
    return "\n".join(line for line in lines if line)


class InitialStateError(ValueError):
    """The supplied starting board cannot be reproduced with the catalog."""


def split_layers(text: Union[str, Sequence[str], None]) -> List[str]:
    """One string per board layer, layer 0 first.

    Accepts either a single text with layers separated by a blank line or a
    ready-made list of layer strings.
    """
    if text is None:
        return []
    if not isinstance(text, str):
        return [_clean_block(str(t)) for t in text if str(t).strip()]
    body = text.replace("\r", "").strip("\n")
    if not body.strip():
        return []
    return [_clean_block(block) for block in _BLANK_LINE_RE.split(body) if block.strip()]


def find_position(layers: Sequence[str], letter: str) -> Optional[Position]:
    """First occurrence of ``letter`` scanning layers, then rows, then columns."""
    for layer_index, text in enumerate(layers):
        for row_index, row in enumerate(text.split("\n")):
            col = row.find(letter)
            if col >= 0:
                return Position(layer_index, row_index, col)
    return None


def _check_characters(layers: Sequence[str], catalog: PieceCatalog, empty: str) -> None:
    for layer_index, text in enumerate(layers):
        for row_index, row in enumerate(text.split("\n")):
            for col_index, ch in enumerate(row):
                if ch == empty or ch in catalog:
                    continue
                raise InitialStateError(
                    f"Unexpected character {ch!r} at ({layer_index}, {row_index}, {col_index}); "
                    f"expected {empty!r} or one of {''.join(catalog.names)}"
                )


def load_initial_state(
    text: Union[str, Sequence[str], None],
    board: Board,
    catalog: PieceCatalog,
) -> List[Placement]:
    """Place every piece drawn in ``text`` on ``board``.

    Pieces are handled in name order.  Returns the committed placements;
    raises :class:`InitialStateError` on the first piece that is unknown,
    drawn in an orientation the catalog does not have, or does not fit.
    """
    layers = split_layers(text)
    if not layers:
        return []

    empty = board.empty
    _check_characters(layers, catalog, empty)

    placed: List[Placement] = []
    for name in catalog.names:
        try:
            shape = Shape.parse(layers, name)
        except ValueError as exc:
            raise InitialStateError(str(exc)) from None
        if shape is None:
            continue

        index = catalog.index_of(name, shape)
        if index is None:
            raise InitialStateError(f"Unrecognized piece orientation for [{name}]\n{shape}")

        position = find_position(layers, name)
        oriented = catalog.orientation(name, index)
        if position is None or not board.try_add_shape_at(oriented, name, position):
            where = position.as_tuple() if position is not None else "?"
            raise InitialStateError(
                f"Unable to add initial piece {name} to board at {where}. "
                "It does not fit. Initialization failed."
            )
        logger.debug("Initial piece %s[%02d] at %s", name, index, position)
        placed.append(Placement(name, index, oriented))

    return placed


__all__ = ["InitialStateError", "split_layers", "find_position", "load_initial_state"]
