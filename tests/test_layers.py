import pytest

from layers import LayeredGrid, pyramid_dims
from models import Position


def test_pyramid_dims_steps_down_to_one():
    assert pyramid_dims(3) == ((3, 3), (2, 2), (1, 1))
    with pytest.raises(ValueError):
        pyramid_dims(0)


def test_layer_table_is_fixed_per_layer():
    grid = LayeredGrid([(2, 3), (1, 1)], ".")
    assert grid.layer_count == 2
    assert grid.dimensions(0) == (2, 3)
    assert grid.dimensions(1) == (1, 1)
    assert grid.rows(0) == [[".", ".", "."], [".", ".", "."]]


def test_find_scans_layers_then_rows_then_columns():
    grid = LayeredGrid([(2, 2), (1, 1)], ".")
    grid.update(1, 0, 0, "X")
    grid.update(0, 1, 1, "X")
    assert grid.find("X") == Position(0, 1, 1)
    grid.update(0, 0, 1, "X")
    assert grid.find("X") == Position(0, 0, 1)
    assert grid.find("Y") is None
    assert grid.find_in_layer(1, "X") == Position(1, 0, 0)


def test_contains_checks_layer_and_bounds():
    grid = LayeredGrid([(2, 2), (1, 1)], False)
    assert grid.contains(0, 1, 1)
    assert not grid.contains(1, 1, 0)
    assert not grid.contains(2, 0, 0)
    assert not grid.contains(0, -1, 0)


def test_copy_is_independent_and_equal():
    grid = LayeredGrid([(2, 2)], ".")
    grid.update(0, 0, 0, "A")
    clone = grid.copy()
    assert clone == grid
    assert hash(clone) == hash(grid)
    clone.update(0, 1, 1, "B")
    assert clone != grid
    assert grid.at(0, 1, 1) == "."


def test_layer_is_empty_and_from_layers():
    grid = LayeredGrid.from_layers([[["A", "."]], [["."]]], ".")
    assert grid.layer_dims == ((1, 2), (1, 1))
    assert not grid.layer_is_empty(0)
    assert grid.layer_is_empty(1)
    assert [v for _, v in grid.cells()] == ["A", ".", "."]
