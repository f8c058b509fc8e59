# mapgen/dungeon/generator.py
from __future__ import annotations

from enum import Enum, auto
from typing import NamedTuple, Optional, Tuple

import structlog

from mapgen.dungeon.config import DungeonConfig
from mapgen.dungeon.maze import MazeCarver
from mapgen.dungeon.pruning import DeadEndPruner, PruneReport
from mapgen.dungeon.regions import MergeReport, RegionIndex, RegionMerger
from mapgen.dungeon.rooms import Room, RoomPlacer
from mapgen.grid import Grid
from mapgen.utils.map_rng import MapRNG, ensure_rng

log = structlog.get_logger(__name__)


class GenerationPhase(Enum):
    RESET = auto()
    PLACING_ROOMS = auto()
    CARVING_MAZE = auto()
    MERGING_REGIONS = auto()
    PRUNING_DEAD_ENDS = auto()


class DungeonResult(NamedTuple):
    rooms: Tuple[Room, ...]
    regions: int
    walks: int
    merge: MergeReport
    prune: PruneReport


class DungeonGenerator:
    """Generates rooms joined by maze corridors on a grid.

    The whole grid is overwritten: it is filled with the wall value, rooms are
    carved at the floor value and corridors at the corridor value. Rooms and
    corridors line up on odd coordinates, so odd grid sizes give the cleanest
    result; with even sizes the last row and column may hold corridors.

    A generator keeps its per-run state (rooms, region index, connectors,
    dead-end queue) on the instance. It is not reentrant and not thread-safe:
    use one instance per concurrent generation. The random stream is consumed
    in a fixed order (rooms, maze, connector shuffle, extra connectors), so a
    seeded :class:`MapRNG` reproduces the same map for the same config and
    grid size.
    """

    def __init__(
        self,
        config: Optional[DungeonConfig] = None,
        rng: Optional[MapRNG] = None,
        seed: Optional[int] = None,
    ):
        self.config = config or DungeonConfig()
        self.rng = ensure_rng(rng, seed)
        self.phase = GenerationPhase.RESET
        self.regions: Optional[RegionIndex] = None
        self.room_placer = RoomPlacer(self.config, self.rng, lattice=True)
        self.maze_carver = MazeCarver(self.config, self.rng)
        self.region_merger = RegionMerger(self.config, self.rng)
        self.dead_end_pruner = DeadEndPruner(self.config)

    def generate(self, grid: Grid) -> DungeonResult:
        """Overwrite *grid* with a new dungeon.

        Raises :class:`~mapgen.errors.ConfigurationError` before touching the
        grid if the settings cannot be used with it.
        """
        config = self.config
        config.validate(grid, lattice=True)
        log.info(
            "Starting dungeon generation",
            width=grid.width,
            height=grid.height,
            seed=self.rng.initial_seed,
        )
        self.reset()
        self.regions = regions = RegionIndex(grid.width, grid.height)
        grid.fill(config.wall_threshold)

        self.phase = GenerationPhase.PLACING_ROOMS
        rooms = tuple(self.room_placer.place(grid, regions))
        room_regions = regions.count

        self.phase = GenerationPhase.CARVING_MAZE
        walks = self.maze_carver.carve(grid, regions)

        self.phase = GenerationPhase.MERGING_REGIONS
        merge = self.region_merger.merge(grid, regions)

        self.phase = GenerationPhase.PRUNING_DEAD_ENDS
        prune = self.dead_end_pruner.prune(grid)

        result = DungeonResult(rooms, regions.count, walks, merge, prune)
        self.reset()
        log.info(
            "Dungeon generation complete",
            rooms=len(rooms),
            room_regions=room_regions,
            regions=result.regions,
            connectors_carved=merge.carved + merge.extra_carved,
            dead_ends_removed=prune.removed,
        )
        return result

    def reset(self) -> None:
        """Drop all per-run state."""
        self.phase = GenerationPhase.RESET
        self.regions = None
        self.room_placer.reset()
        self.maze_carver.reset()
        self.region_merger.reset()
        self.dead_end_pruner.reset()


def generate_dungeon(
    width: int,
    height: int,
    config: Optional[DungeonConfig] = None,
    seed: Optional[int] = None,
) -> Tuple[Grid, DungeonResult]:
    """Create a *width* x *height* grid and fill it with a new dungeon."""
    grid = Grid(width, height)
    result = DungeonGenerator(config, seed=seed).generate(grid)
    return grid, result


__all__ = ["DungeonGenerator", "DungeonResult", "GenerationPhase", "generate_dungeon"]
