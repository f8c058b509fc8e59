# mapgen/dungeon/maze.py
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

import structlog

from mapgen.grid import Grid
from mapgen.utils.map_rng import MapRNG

if TYPE_CHECKING:
    from mapgen.dungeon.config import DungeonConfig
    from mapgen.dungeon.regions import RegionIndex

log = structlog.get_logger(__name__)


class Direction(Enum):
    """Axis-aligned unit steps. Iteration order is part of the carving contract."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def step(self, x: int, y: int, amount: int = 1) -> Tuple[int, int]:
        return x + self.dx * amount, y + self.dy * amount


class Point:
    """Mutable cursor used by a single maze walk."""

    __slots__ = ("x", "y")

    def __init__(self, x: int, y: int):
        self.x = x
        self.y = y

    def move(self, direction: Direction) -> None:
        self.x += direction.dx
        self.y += direction.dy

    def __repr__(self) -> str:
        return f"Point({self.x}, {self.y})"


class MazeCarver:
    """Fills the uncarved odd-coordinate lattice with corridor walks.

    Each walk starts on a wall cell with odd coordinates and moves two cells
    at a time, carving the cell in between, until no wall cell two steps away
    is left. A walk never backtracks; every walk becomes its own region, and
    the region merger joins them afterwards.
    """

    def __init__(self, config: "DungeonConfig", rng: MapRNG):
        self.config = config
        self.rng = rng
        self._directions: List[Direction] = []

    def is_wall(self, grid: Grid, x: int, y: int) -> bool:
        return grid.array[y, x] >= self.config.wall_threshold

    def carve(self, grid: Grid, regions: "RegionIndex") -> int:
        """Carve walks over the whole grid. Returns the number of walks."""
        walks = 0
        cells = 0
        for x in range(1, grid.width, 2):
            for y in range(1, grid.height, 2):
                if self.is_wall(grid, x, y):
                    cells += self.carve_walk(grid, regions, Point(x, y))
                    walks += 1
        log.info("Maze carving finished", walks=walks, cells=cells)
        return walks

    def carve_walk(self, grid: Grid, regions: "RegionIndex", point: Point) -> int:
        """Carve one walk starting at *point*. Returns the number of cells carved."""
        region = regions.next_region()
        winding_chance = self.config.winding_chance
        last: Optional[Direction] = None
        carved = 0
        while True:
            self.carve_corridor(grid, regions, point, region)
            carved += 1
            self._directions.clear()
            for direction in Direction:
                if self.is_carveable(grid, point, direction):
                    self._directions.append(direction)
            if not self._directions:
                break
            if (
                last is not None
                and last in self._directions
                and self.rng.get_float() > winding_chance
            ):
                direction = last
            else:
                direction = self.rng.choice(self._directions)
            last = direction
            # Cell between two lattice points
            point.move(direction)
            self.carve_corridor(grid, regions, point, region)
            carved += 1
            point.move(direction)
        log.debug("Walk carved", region=region, cells=carved, end=point)
        return carved

    def is_carveable(self, grid: Grid, point: Point, direction: Direction) -> bool:
        x, y = direction.step(point.x, point.y, 2)
        return grid.is_valid(x, y) and self.is_wall(grid, x, y)

    def carve_corridor(
        self, grid: Grid, regions: "RegionIndex", point: Point, region: int
    ) -> None:
        grid.set(point.x, point.y, self.config.corridor_threshold)
        regions.set(point.x, point.y, region)

    def reset(self) -> None:
        self._directions.clear()


__all__ = ["Direction", "Point", "MazeCarver"]
