# mapgen/grid.py
from enum import Enum
from typing import Iterator, Tuple

import numpy as np
import structlog

log = structlog.get_logger(__name__)


class Grid:
    """Mutable 2D float field addressed by ``(x, y)``.

    Values live in a C-ordered numpy array of shape ``(height, width)``, so
    ``grid.array[y, x]`` is the same cell as ``grid.get(x, y)``.  Internal
    generator code validates coordinates before touching cells; ``is_valid``
    is the bounds check used at edges.
    """

    def __init__(self, width: int, height: int, initial_value: float = 0.0):
        if width <= 0 or height <= 0:
            log.error("Invalid grid dimensions", width=width, height=height)
            raise ValueError("Grid width and height must be positive integers.")
        self._width = width
        self._height = height
        self.array: np.ndarray = np.full(
            (height, width), fill_value=initial_value, dtype=np.float64, order="C"
        )
        log.debug("Grid initialized", width=width, height=height)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Grid":
        """Wrap a copy of a 2D array (indexed ``[y, x]``) in a new grid."""
        if array.ndim != 2:
            raise ValueError("Grid arrays must be two-dimensional.")
        height, width = array.shape
        grid = cls(width, height)
        grid.array[:, :] = array
        return grid

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        return self.array.shape

    def is_valid(self, x: int, y: int) -> bool:
        """Checks if the given coordinates are within the grid boundaries."""
        return 0 <= x < self._width and 0 <= y < self._height

    def get(self, x: int, y: int) -> float:
        return float(self.array[y, x])

    def set(self, x: int, y: int, value: float) -> float:
        self.array[y, x] = value
        return value

    def add(self, x: int, y: int, value: float) -> float:
        self.array[y, x] += value
        return float(self.array[y, x])

    def subtract(self, x: int, y: int, value: float) -> float:
        self.array[y, x] -= value
        return float(self.array[y, x])

    def multiply(self, x: int, y: int, value: float) -> float:
        self.array[y, x] *= value
        return float(self.array[y, x])

    def divide(self, x: int, y: int, value: float) -> float:
        self.array[y, x] /= value
        return float(self.array[y, x])

    # --- Bulk operations ---
    def fill(self, value: float) -> "Grid":
        self.array.fill(value)
        return self

    def fill_rect(self, x: int, y: int, width: int, height: int, value: float) -> "Grid":
        """Fill a rectangle, clipped to the grid."""
        y_start, y_end = max(0, y), min(self._height, y + height)
        x_start, x_end = max(0, x), min(self._width, x + width)
        if y_start < y_end and x_start < x_end:
            self.array[y_start:y_end, x_start:x_end] = value
        return self

    def set_grid(self, other: "Grid") -> "Grid":
        """Copy all values of a same-sized grid into this one."""
        self._validate_grid(other)
        np.copyto(self.array, other.array)
        return self

    def clamp(self, minimum: float, maximum: float) -> "Grid":
        np.clip(self.array, minimum, maximum, out=self.array)
        return self

    def replace(self, value: float, with_value: float) -> "Grid":
        self.array[self.array == value] = with_value
        return self

    def count(self, value: float) -> int:
        return int(np.count_nonzero(self.array == value))

    def copy(self) -> "Grid":
        return Grid.from_array(self.array)

    def cells(self) -> Iterator[Tuple[int, int, float]]:
        """Yield ``(x, y, value)`` in row-major order."""
        for y in range(self._height):
            for x in range(self._width):
                yield x, y, float(self.array[y, x])

    def _validate_grid(self, other: "Grid") -> None:
        if other.shape != self.shape:
            log.error(
                "Grid sizes do not match", expected=self.shape, received=other.shape
            )
            raise ValueError("Grid sizes do not match. Unable to perform operation.")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.array, other.array))

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Grid(width={self._width}, height={self._height})"


class GenerationMode(Enum):
    """Decides how a generator's value is merged into an existing cell."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    REPLACE = "replace"

    def modify(self, grid: Grid, x: int, y: int, value: float) -> None:
        if self is GenerationMode.ADD:
            grid.add(x, y, value)
        elif self is GenerationMode.SUBTRACT:
            grid.subtract(x, y, value)
        elif self is GenerationMode.MULTIPLY:
            grid.multiply(x, y, value)
        elif self is GenerationMode.DIVIDE:
            grid.divide(x, y, value)
        else:
            grid.set(x, y, value)


__all__ = ["Grid", "GenerationMode"]
