# mapgen/dungeon/regions.py
"""Region bookkeeping and region merging.

Every room and every maze walk gets its own region id. Once carving is done,
:class:`RegionMerger` opens wall cells ("connectors") between regions until a
single connected region remains.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, NamedTuple, Optional, Tuple

import numpy as np
import structlog

from mapgen.dungeon.maze import Direction
from mapgen.grid import Grid
from mapgen.utils.map_rng import MapRNG

if TYPE_CHECKING:
    from mapgen.dungeon.config import DungeonConfig
    from mapgen.dungeon.rooms import Room

log = structlog.get_logger(__name__)

NO_REGION = -1


class RegionIndex:
    """Integer field mirroring a grid: each cell's region id, or ``NO_REGION``."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.array: np.ndarray = np.full(
            (height, width), fill_value=NO_REGION, dtype=np.int32, order="C"
        )
        self.current = NO_REGION

    @property
    def count(self) -> int:
        """Number of region ids handed out so far."""
        return self.current + 1

    def next_region(self) -> int:
        self.current += 1
        return self.current

    def get(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return int(self.array[y, x])
        return NO_REGION

    def set(self, x: int, y: int, region: int) -> None:
        self.array[y, x] = region

    def fill_room(self, room: "Room", region: int) -> None:
        room.view(self.array)[:, :] = region

    def clear(self) -> None:
        self.array.fill(NO_REGION)
        self.current = NO_REGION


class Connector(NamedTuple):
    x: int
    y: int
    regions: Tuple[int, ...]


def find_connectors(grid: Grid, regions: RegionIndex, wall_threshold: float) -> List[Connector]:
    """Wall cells bordering two or more distinct regions, in scan order.

    Only the grid interior is scanned (columns outer, rows inner). Region ids
    of each connector are sorted so that the result does not depend on set
    ordering.
    """
    assert regions.array.shape == grid.array.shape, "region index does not match grid"
    cells = grid.array
    connectors: List[Connector] = []
    for x in range(1, grid.width - 1):
        for y in range(1, grid.height - 1):
            if cells[y, x] < wall_threshold:
                continue
            found = set()
            for direction in Direction:
                nx, ny = direction.step(x, y)
                region = regions.get(nx, ny)
                if region >= 0 and cells[ny, nx] < wall_threshold:
                    found.add(region)
            if len(found) > 1:
                connectors.append(Connector(x, y, tuple(sorted(found))))
    return connectors


class RegionUnion:
    """Union-find over region ids with path compression and union by size."""

    def __init__(self, count: int):
        self.parent: List[int] = list(range(count))
        self.size: List[int] = [1] * count
        self.groups = count

    def find(self, region: int) -> int:
        root = region
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[region] != root:
            self.parent[region], region = root, self.parent[region]
        return root

    def union(self, a: int, b: int) -> int:
        """Join the groups of *a* and *b*; returns the surviving root."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return root_a
        if self.size[root_a] < self.size[root_b]:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a
        self.size[root_a] += self.size[root_b]
        self.groups -= 1
        return root_a

    def representatives(self, regions: Tuple[int, ...]) -> List[int]:
        """Distinct current roots of *regions*, sorted."""
        return sorted({self.find(region) for region in regions})


class MergeReport(NamedTuple):
    """Outcome of a merge.

    ``unjoined`` counts region groups never linked through a carved
    connector. Regions that touch directly (a walk running along the open
    edge of a shaped room) count separately here although their cells are
    connected.
    """

    connectors: int
    carved: int
    extra_carved: int
    unjoined: int


class RegionMerger:
    """Carves connectors until all regions form one connected group.

    Connectors are visited once, in shuffled order. A connector whose regions
    already share a group may still be carved with probability
    ``random_connector_chance``, adding loops without changing connectivity.
    """

    def __init__(self, config: "DungeonConfig", rng: MapRNG):
        self.config = config
        self.rng = rng
        self.connectors: List[Connector] = []
        self.union: Optional[RegionUnion] = None

    def merge(self, grid: Grid, regions: RegionIndex) -> MergeReport:
        config = self.config
        self.connectors = find_connectors(grid, regions, config.wall_threshold)
        self.rng.shuffle(self.connectors)
        self.union = union = RegionUnion(regions.count)
        unjoined = regions.count
        carved = extra = 0
        log.debug("Connectors found", connectors=len(self.connectors), regions=unjoined)

        for connector in self.connectors:
            if unjoined <= 1:
                break
            roots = union.representatives(connector.regions)
            if len(roots) <= 1:
                if self.rng.get_float() < config.random_connector_chance:
                    self.carve_connector(grid, connector)
                    extra += 1
                continue
            self.carve_connector(grid, connector)
            carved += 1
            target = roots[0]
            for other in roots[1:]:
                union.union(target, other)
            unjoined -= len(roots) - 1

        report = MergeReport(len(self.connectors), carved, extra, unjoined)
        if unjoined > 1:
            log.debug("Region groups left without a connector", unjoined=unjoined)
        log.info("Regions merged", **report._asdict())
        return report

    def carve_connector(self, grid: Grid, connector: Connector) -> None:
        grid.set(connector.x, connector.y, self.config.corridor_threshold)

    def reset(self) -> None:
        self.connectors = []
        self.union = None


__all__ = [
    "NO_REGION",
    "RegionIndex",
    "Connector",
    "find_connectors",
    "RegionUnion",
    "MergeReport",
    "RegionMerger",
]
