# mapgen/cellular.py
from typing import Optional

import numpy as np
import structlog

from mapgen.grid import GenerationMode, Grid
from mapgen.utils.map_rng import MapRNG, ensure_rng

log = structlog.get_logger(__name__)


class CellularAutomataGenerator:
    """Cave-like smoothing with birth and death rules.

    A cell is alive when its value is at least ``marker``. Each iteration
    counts living cells in the square neighbourhood of ``radius`` (cells
    outside the grid count as dead): living cells with fewer than
    ``death_limit`` living neighbours die, dead cells with more than
    ``birth_limit`` are born. All cells of one iteration are judged on the
    same snapshot.
    """

    def __init__(
        self,
        marker: float = 1.0,
        alive_chance: float = 0.5,
        iterations: int = 3,
        birth_limit: int = 4,
        death_limit: int = 3,
        radius: int = 1,
        initiate: bool = True,
        mode: GenerationMode = GenerationMode.ADD,
        rng: Optional[MapRNG] = None,
    ):
        if radius <= 0:
            log.error("Invalid neighbourhood radius", radius=radius)
            raise ValueError("Neighbourhood radius must be positive.")
        if not 0.0 <= alive_chance <= 1.0:
            log.error("Invalid alive chance", alive_chance=alive_chance)
            raise ValueError("alive_chance must be within [0, 1].")
        self.marker = marker
        self.alive_chance = alive_chance
        self.iterations = iterations
        self.birth_limit = birth_limit
        self.death_limit = death_limit
        self.radius = radius
        self.initiate = initiate
        self.mode = mode
        self.rng = ensure_rng(rng)

    def generate(self, grid: Grid) -> None:
        if self.initiate:
            self.spawn_living_cells(grid)
        for _ in range(self.iterations):
            self.step(grid)
        log.debug(
            "Cellular automata finished",
            iterations=self.iterations,
            alive=int(np.count_nonzero(self.alive_mask(grid))),
        )

    def spawn_living_cells(self, grid: Grid) -> None:
        """Randomly revive or kill every cell, row by row."""
        marker = self.marker
        cells = grid.array
        for y in range(grid.height):
            for x in range(grid.width):
                if self.rng.get_float() > self.alive_chance:
                    if cells[y, x] < marker:
                        grid.add(x, y, marker)
                elif cells[y, x] >= marker:
                    grid.subtract(x, y, marker)

    def alive_mask(self, grid: Grid) -> np.ndarray:
        return grid.array >= self.marker

    def count_living_neighbors(self, grid: Grid) -> np.ndarray:
        """Living neighbour count of every cell, indexed ``[y, x]``."""
        radius = self.radius
        alive = np.pad(self.alive_mask(grid).astype(np.int32), radius)
        counts = np.zeros(grid.shape, dtype=np.int32)
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                if dx == 0 and dy == 0:
                    continue
                counts += alive[
                    radius + dy : radius + dy + grid.height,
                    radius + dx : radius + dx + grid.width,
                ]
        return counts

    def step(self, grid: Grid) -> None:
        """Run a single birth/death iteration on *grid*."""
        alive = self.alive_mask(grid)
        neighbors = self.count_living_neighbors(grid)
        result = grid.copy()
        result.array[alive & (neighbors < self.death_limit)] -= self.marker
        for y, x in np.argwhere(~alive & (neighbors > self.birth_limit)):
            self.mode.modify(result, int(x), int(y), self.marker)
        grid.set_grid(result)


__all__ = ["CellularAutomataGenerator"]
