from collections import defaultdict

import numpy as np

from mapgen.dungeon.config import DungeonConfig
from mapgen.dungeon.maze import Direction, MazeCarver, Point
from mapgen.dungeon.regions import RegionIndex
from mapgen.grid import Grid
from mapgen.utils.map_rng import MapRNG


def _carve(width: int, height: int, seed: int = 1, **config_values):
    config = DungeonConfig(**config_values)
    grid = Grid(width, height, initial_value=config.wall_threshold)
    regions = RegionIndex(width, height)
    walks = MazeCarver(config, MapRNG(seed=seed)).carve(grid, regions)
    return config, grid, regions, walks


def test_direction_order_and_offsets():
    assert list(Direction) == [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]
    assert Direction.UP.step(3, 3) == (3, 2)
    assert Direction.DOWN.step(3, 3) == (3, 4)
    assert Direction.LEFT.step(3, 3, 2) == (1, 3)
    assert Direction.RIGHT.step(3, 3, 2) == (5, 3)


def test_point_moves_in_place():
    point = Point(1, 1)
    point.move(Direction.RIGHT)
    point.move(Direction.DOWN)
    assert (point.x, point.y) == (2, 2)


def test_single_lattice_cell_is_one_walk():
    config, grid, regions, walks = _carve(3, 3)
    assert walks == 1
    assert grid.get(1, 1) == config.corridor_threshold
    assert grid.count(config.wall_threshold) == 8
    assert regions.get(1, 1) == 0


def test_single_row_is_carved_in_one_walk():
    config, grid, regions, walks = _carve(11, 3)
    assert walks == 1
    assert all(grid.get(x, 1) == config.corridor_threshold for x in range(1, 10))
    assert grid.get(10, 1) == config.wall_threshold


def test_every_lattice_cell_is_carved():
    config, grid, regions, walks = _carve(21, 15, seed=4)
    for x in range(1, 21, 2):
        for y in range(1, 15, 2):
            assert grid.get(x, y) == config.corridor_threshold
            assert regions.get(x, y) >= 0
    # Cells with both coordinates even are never carved
    for x in range(0, 21, 2):
        for y in range(0, 15, 2):
            assert grid.get(x, y) == config.wall_threshold
    assert regions.count == walks


def test_walks_are_cycle_free_paths():
    config, grid, regions, walks = _carve(25, 25, seed=9)
    cells = defaultdict(int)
    links = defaultdict(int)
    for y, x in np.argwhere(regions.array >= 0):
        region = regions.get(x, y)
        cells[region] += 1
        for direction in (Direction.RIGHT, Direction.DOWN):
            nx, ny = direction.step(x, y)
            if regions.get(nx, ny) == region:
                links[region] += 1
    assert len(cells) == walks
    for region, count in cells.items():
        assert links[region] == count - 1


def test_carving_is_deterministic():
    _, first, _, _ = _carve(31, 21, seed=5, winding_chance=0.5)
    _, second, _, _ = _carve(31, 21, seed=5, winding_chance=0.5)
    assert first == second


def test_existing_floor_is_left_alone():
    config = DungeonConfig()
    grid = Grid(9, 9, initial_value=config.wall_threshold)
    grid.fill_rect(1, 1, 7, 7, config.floor_threshold)
    regions = RegionIndex(9, 9)
    walks = MazeCarver(config, MapRNG(seed=1)).carve(grid, regions)
    assert walks == 0
    assert grid.count(config.corridor_threshold) == 0


def test_zero_winding_runs_first_walk_straight_to_the_edge():
    config, grid, regions, walks = _carve(11, 11, seed=3, winding_chance=0.0)
    row = [regions.get(x, 1) for x in range(1, 10)]
    column = [regions.get(1, y) for y in range(1, 10)]
    # The first walk leaves (1, 1) either right or down and never turns
    assert row == [0] * 9 or column == [0] * 9


def test_zero_winding_spirals_over_empty_lattice():
    # Turning only when blocked wraps the first walk around the whole lattice
    config, grid, regions, walks = _carve(11, 11, seed=3, winding_chance=0.0)
    assert walks == 1
    assert regions.get(9, 9) == 0
    assert regions.get(5, 5) == 0


def test_winding_chance_changes_layout():
    _, straight, straight_regions, _ = _carve(21, 21, seed=12, winding_chance=0.0)
    _, winding, winding_regions, _ = _carve(21, 21, seed=12, winding_chance=1.0)
    assert not np.array_equal(straight_regions.array, winding_regions.array)
