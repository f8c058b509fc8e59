"""Room-and-maze dungeon generation.

:class:`DungeonGenerator` runs four phases over a grid: room placement, maze
carving, region merging and dead-end pruning. Each phase lives in its own
module and can be used on its own.
"""

from .config import DungeonConfig, load_dungeon_config
from .generator import DungeonGenerator, DungeonResult, GenerationPhase, generate_dungeon
from .maze import Direction, MazeCarver
from .pruning import DeadEndPruner, PruneReport
from .regions import Connector, MergeReport, RegionIndex, RegionMerger, RegionUnion
from .rooms import Room, RoomPlacer, RoomShape, RoomStyle

__all__ = [
    "DungeonConfig",
    "load_dungeon_config",
    "DungeonGenerator",
    "DungeonResult",
    "GenerationPhase",
    "generate_dungeon",
    "Direction",
    "MazeCarver",
    "DeadEndPruner",
    "PruneReport",
    "Connector",
    "MergeReport",
    "RegionIndex",
    "RegionMerger",
    "RegionUnion",
    "Room",
    "RoomPlacer",
    "RoomShape",
    "RoomStyle",
]
