import numpy as np
import pytest

from mapgen.grid import GenerationMode, Grid


def test_grid_starts_filled_with_initial_value():
    grid = Grid(4, 3, initial_value=0.25)
    assert grid.width == 4
    assert grid.height == 3
    assert grid.shape == (3, 4)
    assert grid.count(0.25) == 12


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3)])
def test_grid_rejects_non_positive_dimensions(width, height):
    with pytest.raises(ValueError):
        Grid(width, height)


def test_get_and_set_use_x_y_order():
    grid = Grid(5, 3)
    grid.set(4, 1, 2.0)
    assert grid.get(4, 1) == 2.0
    # numpy storage is row-major: [y, x]
    assert grid.array[1, 4] == 2.0


def test_is_valid_edges():
    grid = Grid(3, 2)
    assert grid.is_valid(0, 0)
    assert grid.is_valid(2, 1)
    assert not grid.is_valid(3, 0)
    assert not grid.is_valid(0, 2)
    assert not grid.is_valid(-1, 0)


def test_cell_arithmetic_returns_new_value():
    grid = Grid(2, 2, initial_value=2.0)
    assert grid.add(0, 0, 1.0) == 3.0
    assert grid.subtract(0, 0, 0.5) == 2.5
    assert grid.multiply(0, 0, 2.0) == 5.0
    assert grid.divide(0, 0, 4.0) == 1.25


def test_fill_rect_is_clipped():
    grid = Grid(4, 4)
    grid.fill_rect(2, 2, 5, 5, 1.0)
    assert grid.count(1.0) == 4
    assert grid.get(3, 3) == 1.0
    assert grid.get(1, 1) == 0.0


def test_clamp_and_replace():
    grid = Grid.from_array(np.array([[-1.0, 0.5], [2.0, 0.5]]))
    grid.clamp(0.0, 1.0)
    assert grid.get(0, 0) == 0.0
    assert grid.get(0, 1) == 1.0
    grid.replace(0.5, 0.75)
    assert grid.count(0.75) == 2


def test_copy_is_independent_and_equal():
    grid = Grid(3, 3)
    grid.set(1, 1, 1.0)
    other = grid.copy()
    assert other == grid
    other.set(0, 0, 5.0)
    assert grid.get(0, 0) == 0.0
    assert other != grid


def test_set_grid_requires_matching_size():
    grid = Grid(3, 3)
    with pytest.raises(ValueError):
        grid.set_grid(Grid(2, 3))
    source = Grid(3, 3, initial_value=4.0)
    grid.set_grid(source)
    assert grid == source


def test_from_array_rejects_non_2d():
    with pytest.raises(ValueError):
        Grid.from_array(np.zeros(4))


def test_cells_iterates_row_major():
    grid = Grid(2, 2)
    grid.set(1, 0, 1.0)
    assert list(grid.cells()) == [(0, 0, 0.0), (1, 0, 1.0), (0, 1, 0.0), (1, 1, 0.0)]


@pytest.mark.parametrize(
    "mode,expected",
    [
        (GenerationMode.ADD, 6.0),
        (GenerationMode.SUBTRACT, 2.0),
        (GenerationMode.MULTIPLY, 8.0),
        (GenerationMode.DIVIDE, 2.0),
        (GenerationMode.REPLACE, 2.0),
    ],
)
def test_generation_modes(mode, expected):
    grid = Grid(1, 1, initial_value=4.0)
    mode.modify(grid, 0, 0, 2.0)
    assert grid.get(0, 0) == expected
