# mapgen/noise.py
"""Smoothed value noise for height maps.

The grid is split into square regions of ``radius`` cells. Every region corner
gets a deterministic noise value for the generator's seed, and each cell gets
the cosine interpolation of its region's four corner values. Results lie in
``[0, modifier]`` and are merged into the grid through a :class:`GenerationMode`.
"""
import math
from typing import Optional

import structlog

from mapgen.grid import GenerationMode, Grid
from mapgen.utils.map_rng import MapRNG, ensure_rng

log = structlog.get_logger(__name__)

MAX_SEED = 2**31 - 1


def noise(seed: int, x: int, y: int) -> float:
    """Integer-hash noise in ``(-1, 1]`` for a lattice point."""
    n = x + seed + y * seed
    # Only the low 31 bits survive the mask, so no 32-bit wrapping is needed
    return 1.0 - ((n * (n * n * 15731 + 789221) + 1376312589) & 0x7FFFFFFF) / 1073741824.0


def smooth_noise(seed: int, x: int, y: int) -> float:
    corners = (
        noise(seed, x - 1, y - 1)
        + noise(seed, x + 1, y - 1)
        + noise(seed, x - 1, y + 1)
        + noise(seed, x + 1, y + 1)
    ) / 16.0
    sides = (
        noise(seed, x - 1, y)
        + noise(seed, x + 1, y)
        + noise(seed, x, y - 1)
        + noise(seed, x, y + 1)
    ) / 8.0
    return corners + sides + noise(seed, x, y) / 4.0


def interpolate(start: float, end: float, factor: float) -> float:
    """Cosine interpolation between *start* and *end*."""
    weight = (1.0 - math.cos(factor * math.pi)) * 0.5
    return start * (1.0 - weight) + end * weight


class NoiseGenerator:
    def __init__(
        self,
        radius: int,
        modifier: float,
        seed: int = 0,
        mode: GenerationMode = GenerationMode.ADD,
        rng: Optional[MapRNG] = None,
    ):
        if radius <= 0:
            log.error("Invalid noise radius", radius=radius)
            raise ValueError("Noise radius must be positive.")
        self.radius = radius
        self.modifier = modifier
        self.seed = seed
        self.mode = mode
        self.rng = ensure_rng(rng)

    def generate(self, grid: Grid) -> None:
        """Merge one layer of noise into every cell of *grid*.

        A seed of 0 is replaced by one drawn from the generator's RNG, and the
        drawn seed is kept so later calls repeat the same layer.
        """
        if self.seed == 0:
            self.seed = self.rng.get_int(1, MAX_SEED)
        radius = self.radius
        seed = self.seed
        for y in range(grid.height):
            region_y, offset_y = divmod(y, radius)
            factor_y = offset_y / radius
            for x in range(grid.width):
                region_x, offset_x = divmod(x, radius)
                factor_x = offset_x / radius
                top = interpolate(
                    smooth_noise(seed, region_x, region_y),
                    smooth_noise(seed, region_x + 1, region_y),
                    factor_x,
                )
                bottom = interpolate(
                    smooth_noise(seed, region_x, region_y + 1),
                    smooth_noise(seed, region_x + 1, region_y + 1),
                    factor_x,
                )
                value = interpolate(top, bottom, factor_y)
                self.mode.modify(grid, x, y, (value + 1.0) / 2.0 * self.modifier)
        log.debug(
            "Noise layer generated",
            radius=radius,
            modifier=self.modifier,
            seed=seed,
            mode=self.mode.value,
        )


__all__ = ["NoiseGenerator", "noise", "smooth_noise", "interpolate"]
