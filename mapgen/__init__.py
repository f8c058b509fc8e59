"""Procedural map generation on numpy-backed float grids."""

from .cellular import CellularAutomataGenerator
from .dungeon import DungeonConfig, DungeonGenerator, generate_dungeon, load_dungeon_config
from .errors import ConfigurationError, MapGenError
from .grid import GenerationMode, Grid
from .noise import NoiseGenerator
from .utils import MapRNG, setup_logging

__all__ = [
    "CellularAutomataGenerator",
    "ConfigurationError",
    "DungeonConfig",
    "DungeonGenerator",
    "GenerationMode",
    "Grid",
    "MapGenError",
    "MapRNG",
    "NoiseGenerator",
    "generate_dungeon",
    "load_dungeon_config",
    "setup_logging",
]
