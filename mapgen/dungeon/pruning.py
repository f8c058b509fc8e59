# mapgen/dungeon/pruning.py
"""Dead-end removal for carved dungeons.

A dead end is a non-wall cell with at least three of its four neighbours
being walls or outside the grid. Each pass walls up every tracked dead end
and follows the corridor back by one cell, so a budget of ``n`` passes
shortens every dangling corridor by up to ``n`` cells. Corridors that still
lead somewhere on both sides are never touched.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, NamedTuple, Optional, Tuple

import structlog

from mapgen.dungeon.maze import Direction
from mapgen.grid import Grid

if TYPE_CHECKING:
    from mapgen.dungeon.config import DungeonConfig

log = structlog.get_logger(__name__)


class PruneReport(NamedTuple):
    passes: int
    removed: int
    exhausted: bool


class DeadEndPruner:
    def __init__(self, config: "DungeonConfig"):
        self.config = config
        self.dead_ends: List[List[int]] = []

    def is_wall(self, grid: Grid, x: int, y: int) -> bool:
        return grid.array[y, x] >= self.config.wall_threshold

    def is_dead_end(self, grid: Grid, x: int, y: int) -> bool:
        if not grid.is_valid(x, y) or self.is_wall(grid, x, y):
            return False
        walls = 0
        for direction in Direction:
            nx, ny = direction.step(x, y)
            if not grid.is_valid(nx, ny) or self.is_wall(grid, nx, ny):
                walls += 1
        return walls >= 3

    def find_dead_ends(self, grid: Grid) -> List[List[int]]:
        return [
            [x, y]
            for x in range(grid.width)
            for y in range(grid.height)
            if self.is_dead_end(grid, x, y)
        ]

    def dead_end_neighbor(self, grid: Grid, x: int, y: int) -> Optional[Tuple[int, int]]:
        for direction in Direction:
            nx, ny = direction.step(x, y)
            if self.is_dead_end(grid, nx, ny):
                return nx, ny
        return None

    def prune(self, grid: Grid) -> PruneReport:
        iterations = self.config.dead_end_removal_iterations
        if iterations <= 0:
            log.info("Dead end removal disabled")
            return PruneReport(0, 0, False)

        wall = self.config.wall_threshold
        self.dead_ends = self.find_dead_ends(grid)
        log.debug("Dead ends found", count=len(self.dead_ends))
        passes = removed = 0
        while passes < iterations and self.dead_ends:
            passes += 1
            remaining: List[List[int]] = []
            for dead_end in self.dead_ends:
                x, y = dead_end
                if not self.is_wall(grid, x, y):
                    removed += 1
                grid.set(x, y, wall)
                neighbor = self.dead_end_neighbor(grid, x, y)
                if neighbor is not None:
                    # Follow the corridor back on the next pass
                    dead_end[0], dead_end[1] = neighbor
                    remaining.append(dead_end)
            self.dead_ends = remaining

        report = PruneReport(passes, removed, bool(self.dead_ends))
        log.info("Dead end removal finished", **report._asdict())
        return report

    def reset(self) -> None:
        self.dead_ends = []


__all__ = ["DeadEndPruner", "PruneReport"]
