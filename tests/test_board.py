import pytest

from board import PyramidBoard, RectangleBoard, create_board
from models import Position
from shapes import Shape

DOMINO = Shape.from_cells([(0, 0, 0), (0, 0, 1)])
SINGLE = Shape.from_cells([(0, 0, 0)])
SQUARE = Shape.from_cells([(0, 0, 0), (0, 0, 1), (0, 1, 0), (0, 1, 1)])
# Offset (0, 1): the first layer-0 cell is not at the origin.
NOTCH = Shape.from_cells([(0, 0, 1), (0, 1, 0), (0, 1, 1)])
STANDING_DOMINO = Shape.from_cells([(0, 0, 0), (0, 0, 1)]).erect()


def test_solved_only_when_no_empty_cell_remains():
    board = RectangleBoard(1, 3)
    assert board.try_add_shape(DOMINO, "A")
    assert not board.solved()
    assert board.next_pos == Position(0, 0, 2)
    assert board.try_add_shape(SINGLE, "B")
    assert board.solved()
    assert board.next_pos is None


def test_add_then_remove_restores_the_board():
    board = RectangleBoard(2, 3)
    before = board.snapshot()
    assert board.try_add_shape(SQUARE, "B")
    assert board.snapshot() == ("BB.\nBB.",)
    assert board.remove_shape("B") == 4
    assert board.snapshot() == before
    assert board.next_pos == Position(0, 0, 0)


def test_overlap_fails_without_writing():
    board = RectangleBoard(2, 3)
    assert board.try_add_shape(DOMINO, "A")
    snap = board.snapshot()
    assert not board.try_add_shape_at(DOMINO, "B", Position(0, 0, 1))
    assert board.snapshot() == snap


def test_out_of_range_fails():
    board = RectangleBoard(2, 3)
    assert not board.try_add_shape_at(SQUARE, "B", Position(0, 1, 0))
    assert not board.try_add_shape_at(DOMINO, "A", Position(0, 0, 2))
    assert not board.try_add_shape_at(DOMINO, "A", None)


def test_offset_aligns_first_cell_with_anchor():
    board = RectangleBoard(2, 3)
    assert board.try_add_shape_at(NOTCH, "A", Position(0, 0, 1))
    assert board.layer_rows() == [[".A.", "AA."]]
    assert board.next_pos == Position(0, 0, 0)


def test_three_d_shape_climbs_pyramid_layers():
    board = PyramidBoard(2)
    assert board.supports_3d
    assert board.try_add_shape_at(STANDING_DOMINO, "A", Position(0, 1, 1))
    assert board.grid.at(0, 1, 1) == "A"
    assert board.grid.at(1, 0, 0) == "A"
    assert board.next_pos == Position(0, 0, 0)
    assert board.remove_shape("A") == 2


def test_three_d_shape_needs_the_upper_layer():
    board = RectangleBoard(2, 2)
    assert not board.try_add_shape_at(STANDING_DOMINO, "A", Position(0, 1, 1))
    assert board.snapshot() == ("..\n..",)


def test_flat_shape_on_pyramid_stays_on_its_layer():
    board = PyramidBoard(2)
    assert board.try_add_shape(DOMINO, "A")
    assert board.layer_rows() == [["AA", ".."], ["."]]


def test_piece_name_cannot_be_the_empty_marker():
    board = RectangleBoard(1, 2)
    with pytest.raises(ValueError):
        board.try_add_shape(DOMINO, ".")


def test_render_prints_highest_layer_first():
    assert RectangleBoard(1, 2).render() == ". .\n"
    assert PyramidBoard(2).render() == ".\n\n . .\n . .\n"


def test_create_board_picks_geometry():
    rect = create_board("rectangle")
    assert rect.kind == "rectangle"
    assert rect.grid.layer_dims == ((5, 11),)
    assert not rect.supports_3d

    pyramid = create_board("Pyramid")
    assert pyramid.kind == "pyramid"
    assert pyramid.cell_count == 55

    with pytest.raises(ValueError, match="Unknown board type"):
        create_board("hexagon")


def test_rectangle_needs_positive_dimensions():
    with pytest.raises(ValueError):
        RectangleBoard(0, 3)


@pytest.mark.parametrize("marker", [" ", "\t", "", ".."])
def test_empty_marker_must_be_one_visible_character(marker):
    with pytest.raises(ValueError, match="empty cell marker"):
        RectangleBoard(1, 2, empty=marker)
