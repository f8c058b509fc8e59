from mapgen.dungeon.config import DungeonConfig
from mapgen.dungeon.pruning import DeadEndPruner, PruneReport
from mapgen.grid import Grid

WALL = 1.0
OPEN = 0.0


def _corridor_grid():
    """5x5 walls with a vertical corridor from (1, 1) to (1, 3)."""
    grid = Grid(5, 5, initial_value=WALL)
    for y in range(1, 4):
        grid.set(1, y, OPEN)
    return grid


def _ring_grid():
    grid = Grid(5, 5, initial_value=WALL)
    grid.fill_rect(1, 1, 3, 3, OPEN)
    grid.set(2, 2, WALL)
    return grid


def test_dead_end_detection():
    pruner = DeadEndPruner(DungeonConfig())
    grid = _corridor_grid()
    assert pruner.is_dead_end(grid, 1, 1)
    assert pruner.is_dead_end(grid, 1, 3)
    assert not pruner.is_dead_end(grid, 1, 2)
    assert not pruner.is_dead_end(grid, 0, 0)
    assert not pruner.is_dead_end(grid, -1, 2)
    assert pruner.find_dead_ends(grid) == [[1, 1], [1, 3]]


def test_grid_edge_counts_as_wall():
    pruner = DeadEndPruner(DungeonConfig())
    grid = Grid(3, 1, initial_value=OPEN)
    assert pruner.is_dead_end(grid, 0, 0)
    assert pruner.is_dead_end(grid, 2, 0)
    assert not pruner.is_dead_end(grid, 1, 0)


def test_full_budget_removes_isolated_corridor():
    grid = _corridor_grid()
    report = DeadEndPruner(DungeonConfig()).prune(grid)
    assert report == PruneReport(passes=2, removed=3, exhausted=False)
    assert grid.count(WALL) == 25


def test_budget_limits_passes():
    grid = _corridor_grid()
    report = DeadEndPruner(DungeonConfig(dead_end_removal_iterations=1)).prune(grid)
    assert report == PruneReport(passes=1, removed=2, exhausted=True)
    assert grid.get(1, 2) == OPEN


def test_zero_budget_skips_pruning():
    grid = _corridor_grid()
    before = grid.copy()
    report = DeadEndPruner(DungeonConfig(dead_end_removal_iterations=0)).prune(grid)
    assert report == PruneReport(0, 0, False)
    assert grid == before


def test_loops_are_kept():
    grid = _ring_grid()
    before = grid.copy()
    report = DeadEndPruner(DungeonConfig()).prune(grid)
    assert report.removed == 0
    assert grid == before


def test_spur_off_loop_is_removed():
    grid = Grid(7, 5, initial_value=WALL)
    grid.fill_rect(1, 1, 3, 3, OPEN)
    grid.set(2, 2, WALL)
    grid.set(4, 2, OPEN)
    grid.set(5, 2, OPEN)
    report = DeadEndPruner(DungeonConfig()).prune(grid)
    assert report.removed == 2
    assert grid == _padded_ring()


def _padded_ring():
    grid = Grid(7, 5, initial_value=WALL)
    grid.fill_rect(1, 1, 3, 3, OPEN)
    grid.set(2, 2, WALL)
    return grid
