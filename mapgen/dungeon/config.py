# mapgen/dungeon/config.py
import sys
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import structlog
import yaml

from mapgen.dungeon.rooms import RoomStyle, parse_room_style
from mapgen.errors import ConfigurationError
from mapgen.grid import Grid

log = structlog.get_logger(__name__)

# Tile values
DEFAULT_WALL_THRESHOLD = 1.0
DEFAULT_FLOOR_THRESHOLD = 0.5
DEFAULT_CORRIDOR_THRESHOLD = 0.0


@dataclass(frozen=True)
class DungeonConfig:
    """Settings for :class:`~mapgen.dungeon.generator.DungeonGenerator`.

    ``room_generation_attempts`` of 0 derives the attempt count from the grid
    and ``max_room_size``. ``max_rooms`` of 0 places as many rooms as fit.
    ``dead_end_removal_iterations`` of 0 or less keeps every dead end.
    """

    min_room_size: int = 3
    max_room_size: int = 7
    tolerance: int = 2
    room_generation_attempts: int = 0
    max_rooms: int = 0
    wall_threshold: float = DEFAULT_WALL_THRESHOLD
    floor_threshold: float = DEFAULT_FLOOR_THRESHOLD
    corridor_threshold: float = DEFAULT_CORRIDOR_THRESHOLD
    winding_chance: float = 0.15
    random_connector_chance: float = 0.01
    dead_end_removal_iterations: int = sys.maxsize
    room_styles: Tuple[RoomStyle, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        styles = tuple(parse_room_style(style) for style in self.room_styles)
        object.__setattr__(self, "room_styles", styles)

    def with_changes(self, **changes: Any) -> "DungeonConfig":
        return replace(self, **changes)

    def validate(self, grid: Optional[Grid] = None, lattice: bool = True) -> None:
        """Raise :class:`ConfigurationError` if this config cannot be used.

        With *grid*, room sizes are also checked against its extent. With
        *lattice*, room sizes must be odd.
        """
        problems = self._type_problems()
        if problems:
            log.error("Invalid dungeon configuration types", problems=problems)
            raise ConfigurationError("; ".join(problems))

        if self.min_room_size <= 0 or self.max_room_size <= 0:
            problems.append("room sizes must be positive")
        if self.min_room_size > self.max_room_size:
            problems.append("min_room_size cannot be bigger than max_room_size")
        if lattice and (self.min_room_size % 2 == 0 or self.max_room_size % 2 == 0):
            problems.append("min and max room sizes have to be odd")
        if self.tolerance < 0:
            problems.append("tolerance cannot be negative")
        if self.room_generation_attempts < 0:
            problems.append("room_generation_attempts cannot be negative")
        for name in ("winding_chance", "random_connector_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                problems.append(f"{name} must be within [0, 1]")
        if grid is not None and (
            self.max_room_size > grid.width or self.max_room_size > grid.height
        ):
            problems.append("max_room_size exceeds the grid size")
        if problems:
            log.error(
                "Invalid dungeon configuration",
                problems=problems,
                grid=(grid.width, grid.height) if grid is not None else None,
            )
            raise ConfigurationError("; ".join(problems))

        if (
            self.wall_threshold <= self.floor_threshold
            or self.wall_threshold <= self.corridor_threshold
        ):
            log.warning(
                "Wall threshold should exceed floor and corridor thresholds",
                wall=self.wall_threshold,
                floor=self.floor_threshold,
                corridor=self.corridor_threshold,
            )

    def _type_problems(self) -> List[str]:
        """Settings whose value does not match the field type.

        Booleans are rejected for numeric fields; ints are accepted for floats.
        """
        problems = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is int:
                valid = isinstance(value, int) and not isinstance(value, bool)
            elif f.type is float:
                valid = isinstance(value, (int, float)) and not isinstance(value, bool)
            else:
                continue
            if not valid:
                problems.append(
                    f"{f.name} must be {f.type.__name__}, got {type(value).__name__} {value!r}"
                )
        return problems

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DungeonConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            log.error("Unknown dungeon config keys", keys=unknown)
            raise ConfigurationError(f"Unknown dungeon config keys: {', '.join(unknown)}")
        values: Dict[str, Any] = dict(data)
        if "room_styles" in values:
            values["room_styles"] = tuple(values["room_styles"] or ())
        config = cls(**values)
        problems = config._type_problems()
        if problems:
            log.error("Invalid dungeon config value types", problems=problems)
            raise ConfigurationError("; ".join(problems))
        return config


def load_dungeon_config(config_path: Union[str, Path]) -> DungeonConfig:
    """Load a :class:`DungeonConfig` from a YAML or TOML file.

    Settings may sit at the top level or under a ``dungeon`` table.
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        log.error("Dungeon config file not found", path=str(config_path))
        raise FileNotFoundError(f"Dungeon configuration file not found: {config_path}")

    suffix = config_path.suffix.lower()
    try:
        if suffix == ".toml":
            with config_path.open("rb") as f:  # tomllib requires bytes mode
                data = tomllib.load(f)
        elif suffix in (".yaml", ".yml"):
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            log.error("Unsupported config format", path=str(config_path), suffix=suffix)
            raise ConfigurationError(f"Unsupported config format: {suffix or '(none)'}")
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        log.error("Error parsing dungeon config", path=str(config_path), error=str(e))
        raise ConfigurationError(f"Could not parse {config_path}: {e}") from e

    if data is None:
        log.warning("Dungeon config file is empty.", path=str(config_path))
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"{config_path} must contain a mapping of settings")
    if isinstance(data.get("dungeon"), Mapping):
        data = data["dungeon"]
    config = DungeonConfig.from_mapping(data)
    log.info("Dungeon config loaded", path=str(config_path))
    return config


__all__ = [
    "DungeonConfig",
    "load_dungeon_config",
    "DEFAULT_WALL_THRESHOLD",
    "DEFAULT_FLOOR_THRESHOLD",
    "DEFAULT_CORRIDOR_THRESHOLD",
]
