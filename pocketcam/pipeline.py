from __future__ import annotations

from typing import Iterable, Optional

from PIL import Image

from .config import SETTINGS
from .grid import DEFAULT_GEOMETRY, Grid, GridGeometry, InvalidGridError
from .processing.effects import apply_effects
from .processing.palette import PaletteLike, apply_palette


def render_rgba(
    grid: Grid,
    effects: Iterable[str] = (),
    palette: Optional[PaletteLike] = None,
    geometry: GridGeometry = DEFAULT_GEOMETRY,
) -> bytes:
    transformed = apply_effects(grid, effects, geometry)
    return apply_palette(transformed, SETTINGS.default_palette if palette is None else palette)


def to_image(rgba: bytes, geometry: GridGeometry = DEFAULT_GEOMETRY) -> Image.Image:
    expected = geometry.size * 4
    if len(rgba) != expected:
        raise InvalidGridError(f"RGBA buffer has {len(rgba)} bytes; expected {expected}")
    return Image.frombytes("RGBA", (geometry.width, geometry.height), bytes(rgba))


def render_image(
    grid: Grid,
    effects: Iterable[str] = (),
    palette: Optional[PaletteLike] = None,
    geometry: GridGeometry = DEFAULT_GEOMETRY,
) -> Image.Image:
    return to_image(render_rgba(grid, effects, palette, geometry), geometry)
