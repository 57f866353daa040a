"""Geometry and value contract of the camera's indexed pixel grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

WIDTH = 128
HEIGHT = 112
PIXEL_COUNT = WIDTH * HEIGHT
LEVELS = 4
MAX_LEVEL = LEVELS - 1

Grid = Sequence[int]


class InvalidGridError(ValueError):
    """Raised when a grid has the wrong length or holds values outside 0-3."""


@dataclass(frozen=True)
class GridGeometry:
    width: int = WIDTH
    height: int = HEIGHT

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive: {self.width}x{self.height}")
        # Mirroring and 2x resampling split each axis into two equal halves.
        if self.width % 2 or self.height % 2:
            raise ValueError(f"Grid dimensions must be even: {self.width}x{self.height}")

    @property
    def size(self) -> int:
        return self.width * self.height

    @property
    def half_width(self) -> int:
        return self.width // 2

    @property
    def half_height(self) -> int:
        return self.height // 2

    def index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Coordinate ({x}, {y}) outside {self.width}x{self.height} grid")
        return y * self.width + x

    def coords(self, index: int) -> Tuple[int, int]:
        if not 0 <= index < self.size:
            raise IndexError(f"Index {index} outside grid of {self.size} pixels")
        y, x = divmod(index, self.width)
        return x, y


DEFAULT_GEOMETRY = GridGeometry(WIDTH, HEIGHT)


def validate_levels(grid: Grid) -> None:
    for position, value in enumerate(grid):
        # bool is an int subclass but never a pixel value.
        if type(value) is not int or not 0 <= value <= MAX_LEVEL:
            raise InvalidGridError(
                f"Pixel {position} has value {value!r}; expected an integer in [0, {MAX_LEVEL}]"
            )


def validate_grid(grid: Grid, geometry: GridGeometry = DEFAULT_GEOMETRY) -> None:
    """Check the full grid contract: exact pixel count and 2-bit values.

    Raises :class:`InvalidGridError` on the first violation instead of clamping,
    so bad data is caught at the stage that produced it.
    """

    if len(grid) != geometry.size:
        raise InvalidGridError(
            f"Grid has {len(grid)} pixels; expected {geometry.size} "
            f"({geometry.width}x{geometry.height})"
        )
    validate_levels(grid)
