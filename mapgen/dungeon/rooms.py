# mapgen/dungeon/rooms.py
from __future__ import annotations

from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import numpy as np
import structlog

from mapgen.errors import ConfigurationError
from mapgen.grid import Grid
from mapgen.utils.map_rng import MapRNG

if TYPE_CHECKING:
    from mapgen.dungeon.config import DungeonConfig
    from mapgen.dungeon.regions import RegionIndex

log = structlog.get_logger(__name__)


class Room(NamedTuple):
    """An axis-aligned room rectangle. Never mutated after placement."""

    x: int
    y: int
    width: int
    height: int

    @property
    def center(self) -> Tuple[int, int]:
        return self.x + self.width // 2, self.y + self.height // 2

    def overlaps(self, other: "Room") -> bool:
        """Returns True if this rectangle intersects with another one."""
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def is_border(self, x: int, y: int) -> bool:
        return (
            x == self.x
            or y == self.y
            or x == self.x + self.width - 1
            or y == self.y + self.height - 1
        )

    def cells(self) -> Iterator[Tuple[int, int]]:
        for ix in range(self.x, self.x + self.width):
            for iy in range(self.y, self.y + self.height):
                yield ix, iy

    def view(self, array: np.ndarray) -> np.ndarray:
        """Slice of a ``[y, x]`` array covered by this room."""
        return array[self.y : self.y + self.height, self.x : self.x + self.width]

    def fill(self, grid: Grid, value: float) -> None:
        self.view(grid.array)[:, :] = value


# --- Room shapes ---
# Each shape is a pure function filling part of the room's rectangle, plus a
# predicate deciding whether a room is big enough for it. Overlap tests always
# use the full rectangle, whatever the shape.

CASTLE_MIN_SIZE = 7
CASTLE_MIN_TOWER = 3
CROSS_MIN_SIZE = 3


def _offsets(room: Room) -> Tuple[np.ndarray, np.ndarray]:
    """Column and row offsets inside the room, broadcastable to ``[y, x]``."""
    return np.arange(room.width)[np.newaxis, :], np.arange(room.height)[:, np.newaxis]


def carve_square(room: Room, grid: Grid, value: float) -> None:
    room.fill(grid, value)


def carve_rounded(room: Room, grid: Grid, value: float) -> None:
    half_size = (room.width + room.height) // 2
    max_distance = half_size * 9 // 10
    xs, ys = _offsets(room)
    distance = np.abs(xs - room.width // 2) + np.abs(ys - room.height // 2)
    room.view(grid.array)[distance < max_distance] = value


def carve_castle(room: Room, grid: Grid, value: float) -> None:
    size = min(room.width, room.height)
    tower = max((size - 1) // 4, CASTLE_MIN_TOWER)
    offset = max(tower // 4, 1 if tower == CASTLE_MIN_TOWER else 2)
    area = room.view(grid.array)
    # Main hall
    area[offset : room.height - offset, offset : room.width - offset] = value
    # Corner towers
    area[:tower, :tower] = value
    area[:tower, room.width - tower :] = value
    area[room.height - tower :, :tower] = value
    area[room.height - tower :, room.width - tower :] = value


def carve_diamond(room: Room, grid: Grid, value: float) -> None:
    half_size = room.width // 2
    xs, ys = _offsets(room)
    distance = np.abs(xs - half_size) + np.abs(ys - half_size)
    room.view(grid.array)[distance <= half_size] = value


def carve_cross(room: Room, grid: Grid, value: float) -> None:
    offset_x = room.width // 3
    offset_y = room.height // 3
    area = room.view(grid.array)
    area[offset_y : room.height - offset_y, :] = value
    area[:, offset_x : room.width - offset_x] = value


class RoomShape(Enum):
    SQUARE = "square"
    ROUNDED = "rounded"
    CASTLE = "castle"
    DIAMOND = "diamond"
    CROSS = "cross"

    def carve(self, room: Room, grid: Grid, value: float) -> None:
        _CARVERS[self](room, grid, value)

    def is_valid(self, room: Room) -> bool:
        return _VALIDATORS[self](room)


_CARVERS: Dict[RoomShape, Callable[[Room, Grid, float], None]] = {
    RoomShape.SQUARE: carve_square,
    RoomShape.ROUNDED: carve_rounded,
    RoomShape.CASTLE: carve_castle,
    RoomShape.DIAMOND: carve_diamond,
    RoomShape.CROSS: carve_cross,
}

_VALIDATORS: Dict[RoomShape, Callable[[Room], bool]] = {
    RoomShape.SQUARE: lambda room: True,
    RoomShape.ROUNDED: lambda room: True,
    RoomShape.CASTLE: lambda room: room.width >= CASTLE_MIN_SIZE
    and room.height >= CASTLE_MIN_SIZE,
    RoomShape.DIAMOND: lambda room: room.width > 2 and room.width == room.height,
    RoomShape.CROSS: lambda room: room.width >= CROSS_MIN_SIZE
    and room.height >= CROSS_MIN_SIZE,
}


class RoomStyle(NamedTuple):
    """A room shape entry in the generator's style list.

    ``weight`` repeats the entry in the candidate list; ``value`` replaces the
    floor value for rooms carved with this style.
    """

    shape: RoomShape
    weight: int = 1
    value: Optional[float] = None


def parse_room_style(entry: Union[str, RoomShape, RoomStyle, Mapping[str, Any]]) -> RoomStyle:
    """Build a :class:`RoomStyle` from a shape name, enum, or mapping."""
    if isinstance(entry, RoomStyle):
        style = entry
    elif isinstance(entry, RoomShape):
        style = RoomStyle(entry)
    elif isinstance(entry, str):
        style = RoomStyle(_parse_shape(entry))
    elif isinstance(entry, Mapping):
        unknown = set(entry) - {"shape", "weight", "value"}
        if unknown or "shape" not in entry:
            log.error("Invalid room style entry", entry=dict(entry))
            raise ConfigurationError(f"Invalid room style entry: {dict(entry)!r}")
        value = entry.get("value")
        style = RoomStyle(
            _parse_shape(entry["shape"]),
            int(entry.get("weight", 1)),
            float(value) if value is not None else None,
        )
    else:
        log.error("Unsupported room style type", entry_type=type(entry).__name__)
        raise ConfigurationError(f"Unsupported room style: {entry!r}")
    if style.weight <= 0:
        log.error("Room style weight must be positive", style=style)
        raise ConfigurationError("Room style weight must be positive.")
    return style


def _parse_shape(name: Union[str, RoomShape]) -> RoomShape:
    if isinstance(name, RoomShape):
        return name
    try:
        return RoomShape(str(name).lower())
    except ValueError:
        log.error("Unknown room shape", shape=name)
        raise ConfigurationError(f"Unknown room shape: {name!r}") from None


def expand_styles(styles: Sequence[RoomStyle]) -> List[RoomStyle]:
    """Flatten weighted styles into the list rooms are drawn from."""
    expanded: List[RoomStyle] = []
    for style in styles:
        expanded.extend([style] * style.weight)
    return expanded


# --- Room placement ---


class RoomPlacer:
    """Rejection-samples non-overlapping rooms and carves them into a grid.

    With ``lattice=True`` room sizes and positions are forced odd so rooms line
    up with the maze carver's odd-coordinate lattice. Subclasses can override
    :meth:`normalize_size` and :meth:`normalize_position` for other layouts.
    """

    def __init__(self, config: "DungeonConfig", rng: MapRNG, lattice: bool = True):
        self.config = config
        self.rng = rng
        self.lattice = lattice
        self.rooms: List[Room] = []
        self._styles = expand_styles(config.room_styles)

    def default_attempts(self, grid: Grid) -> int:
        size = self.config.max_room_size
        return (grid.width // size) * (grid.height // size)

    def place(self, grid: Grid, regions: "RegionIndex") -> List[Room]:
        """Place rooms on *grid*, assigning each a fresh region. Returns the rooms."""
        attempts = self.config.room_generation_attempts or self.default_attempts(grid)
        max_rooms = self.config.max_rooms
        rejected = 0
        for _ in range(attempts):
            if 0 < max_rooms <= len(self.rooms):
                log.debug("Room cap reached", max_rooms=max_rooms)
                break
            room = self.random_room(grid)
            if room is None or self.overlaps_any(room):
                rejected += 1
                continue
            self.rooms.append(room)
            self.carve_room(grid, room)
            region = regions.next_region()
            regions.fill_room(room, region)
            log.debug("Placed room", room=room, region=region)
        log.info(
            "Room placement finished",
            attempts=attempts,
            placed=len(self.rooms),
            rejected=rejected,
        )
        return self.rooms

    def overlaps_any(self, room: Room) -> bool:
        return any(placed.overlaps(room) for placed in self.rooms)

    def random_room(self, grid: Grid) -> Optional[Room]:
        """Sample a room inside *grid*; None when normalization pushed it out."""
        width = self.random_size()
        height = self.random_size(width)
        if width > grid.width or height > grid.height:
            log.error(
                "Sampled room larger than grid",
                width=width,
                height=height,
                grid=(grid.width, grid.height),
            )
            raise ConfigurationError(
                "max_room_size is higher than the grid size. Set max_room_size to a lower value."
            )
        x = self.normalize_position(self._random_position(grid.width - width))
        y = self.normalize_position(self._random_position(grid.height - height))
        if x + width > grid.width or y + height > grid.height:
            log.debug("Room does not fit after normalization", x=x, y=y, width=width, height=height)
            return None
        return Room(x, y, width, height)

    def _random_position(self, span: int) -> int:
        return self.rng.get_int(0, span - 1) if span > 0 else 0

    def random_size(self, bound: Optional[int] = None) -> int:
        """Random side length; with *bound*, within ``tolerance`` of it."""
        low, high = self.config.min_room_size, self.config.max_room_size
        if bound is not None:
            tolerance = self.config.tolerance
            low, high = max(low, bound - tolerance), min(high, bound + tolerance)
        size = low if low == high else self.rng.get_int(low, high)
        return self.normalize_size(size, low, high)

    def normalize_size(self, size: int, low: int, high: int) -> int:
        if not self.lattice or size % 2 == 1:
            return size
        candidates = [c for c in (size - 1, size + 1) if low <= c <= high]
        if not candidates:
            log.error("No odd room size in range", size=size, low=low, high=high)
            raise ConfigurationError(
                f"No odd room size between {low} and {high}. Use odd min and max room sizes."
            )
        if len(candidates) == 1:
            return candidates[0]
        return candidates[0] if self.rng.get_bool() else candidates[1]

    def normalize_position(self, position: int) -> int:
        if not self.lattice:
            return position
        if position == 0:
            return 1
        return position - 1 if position % 2 == 0 else position

    def carve_room(self, grid: Grid, room: Room) -> None:
        """Carve *room* with a random valid style, or fill it when none applies."""
        floor = self.config.floor_threshold
        if not self._styles:
            room.fill(grid, floor)
            return
        index = self.rng.get_index(self._styles)
        for offset in range(len(self._styles)):
            style = self._styles[(index + offset) % len(self._styles)]
            if style.shape.is_valid(room):
                value = style.value if style.value is not None else floor
                style.shape.carve(room, grid, value)
                return
        room.fill(grid, floor)

    def reset(self) -> None:
        self.rooms = []


__all__ = [
    "Room",
    "RoomShape",
    "RoomStyle",
    "RoomPlacer",
    "parse_room_style",
    "expand_styles",
    "carve_square",
    "carve_rounded",
    "carve_castle",
    "carve_diamond",
    "carve_cross",
]
