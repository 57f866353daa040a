from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from ..grid import DEFAULT_GEOMETRY, MAX_LEVEL, Grid, GridGeometry, validate_grid, validate_levels

logger = logging.getLogger(__name__)

MIRROR_DIRECTIONS = ("rtl", "ltr", "btt", "ttb")
ZOOM_DIRECTIONS = ("center", "v", "h")


class Effect(str, Enum):
    INVERT = "invert"
    MIRROR_RTL = "mirror-rtl"
    MIRROR_LTR = "mirror-ltr"
    MIRROR_BTT = "mirror-btt"
    MIRROR_TTB = "mirror-ttb"
    ZOOM = "zoom"
    ZOOM_V = "zoom-v"
    ZOOM_H = "zoom-h"
    TILE = "tile"

    @classmethod
    def parse(cls, name: str) -> Optional["Effect"]:
        """Return the effect for ``name`` (exact, case-sensitive) or ``None``."""
        try:
            return cls(name)
        except ValueError:
            return None


EFFECT_NAMES = tuple(effect.value for effect in Effect)


def invert(grid: Grid) -> List[int]:
    validate_levels(grid)
    return [MAX_LEVEL - value for value in grid]


def mirror(grid: Grid, direction: str, geometry: GridGeometry = DEFAULT_GEOMETRY) -> List[int]:
    """Reflect one half of the grid onto the other.

    ``rtl`` copies the right half onto the left, ``ltr`` the left onto the
    right, ``btt`` the bottom onto the top and ``ttb`` the top onto the bottom.
    The source half is carried over from the input untouched.
    """

    if direction not in MIRROR_DIRECTIONS:
        raise ValueError(f"Unknown mirror direction: {direction!r}")
    validate_grid(grid, geometry)

    width, height = geometry.width, geometry.height
    index = geometry.index
    out = list(grid)

    if direction in ("rtl", "ltr"):
        for y in range(height):
            for x in range(geometry.half_width):
                left = index(x, y)
                right = index(width - 1 - x, y)
                if direction == "rtl":
                    out[left] = grid[right]
                else:
                    out[right] = grid[left]
    else:
        for y in range(geometry.half_height):
            for x in range(width):
                top = index(x, y)
                bottom = index(x, height - 1 - y)
                if direction == "btt":
                    out[top] = grid[bottom]
                else:
                    out[bottom] = grid[top]

    return out


def zoom(grid: Grid, direction: str, geometry: GridGeometry = DEFAULT_GEOMETRY) -> List[int]:
    """Magnify the central region 2x with nearest-neighbor block replication.

    ``center`` doubles both axes from the central half-width, half-height
    window; ``v`` stretches the central half-height band vertically; ``h``
    stretches the central half-width band horizontally.
    """

    if direction not in ZOOM_DIRECTIONS:
        raise ValueError(f"Unknown zoom direction: {direction!r}")
    validate_grid(grid, geometry)

    width, height = geometry.width, geometry.height
    index = geometry.index
    scale_x = 2 if direction in ("center", "h") else 1
    scale_y = 2 if direction in ("center", "v") else 1
    source_width = width // scale_x
    source_height = height // scale_y
    start_x = (width - source_width) // 2
    start_y = (height - source_height) // 2

    out = [0] * geometry.size
    for y in range(source_height):
        for x in range(source_width):
            value = grid[index(start_x + x, start_y + y)]
            for dy in range(scale_y):
                for dx in range(scale_x):
                    out[index(x * scale_x + dx, y * scale_y + dy)] = value
    return out


def tile(grid: Grid, geometry: GridGeometry = DEFAULT_GEOMETRY) -> List[int]:
    """Shrink the grid to a quarter and repeat it in a 2x2 arrangement.

    The quarter-size image samples every second pixel on both axes, so output
    ``(x, y)`` reads source ``(2 * (x mod W/2), 2 * (y mod H/2))``.
    """

    validate_grid(grid, geometry)

    small_width, small_height = geometry.half_width, geometry.half_height
    out = [0] * geometry.size
    for position in range(geometry.size):
        x, y = geometry.coords(position)
        out[position] = grid[geometry.index((x % small_width) * 2, (y % small_height) * 2)]
    return out


EffectFn = Callable[[Grid, GridGeometry], List[int]]

_DISPATCH: Dict[Effect, EffectFn] = {
    Effect.INVERT: lambda grid, geometry: invert(grid),
    Effect.MIRROR_RTL: lambda grid, geometry: mirror(grid, "rtl", geometry),
    Effect.MIRROR_LTR: lambda grid, geometry: mirror(grid, "ltr", geometry),
    Effect.MIRROR_BTT: lambda grid, geometry: mirror(grid, "btt", geometry),
    Effect.MIRROR_TTB: lambda grid, geometry: mirror(grid, "ttb", geometry),
    Effect.ZOOM: lambda grid, geometry: zoom(grid, "center", geometry),
    Effect.ZOOM_V: lambda grid, geometry: zoom(grid, "v", geometry),
    Effect.ZOOM_H: lambda grid, geometry: zoom(grid, "h", geometry),
    Effect.TILE: lambda grid, geometry: tile(grid, geometry),
}


def apply_effect(grid: Grid, effect_name: str, geometry: GridGeometry = DEFAULT_GEOMETRY) -> Grid:
    """Apply the named effect and return a new grid.

    Names outside :data:`EFFECT_NAMES` are not an error: the input grid is
    returned as-is.
    """

    effect = Effect.parse(effect_name)
    if effect is None:
        logger.debug("Unrecognized effect %r; returning grid unchanged", effect_name)
        return grid
    logger.debug("Applying effect %s", effect.value)
    return _DISPATCH[effect](grid, geometry)


def apply_effects(
    grid: Grid, effect_names: Iterable[str], geometry: GridGeometry = DEFAULT_GEOMETRY
) -> Grid:
    for name in effect_names:
        grid = apply_effect(grid, name, geometry)
    return grid
