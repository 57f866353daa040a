"""Effect engine and palette mapping for indexed camera grids."""

from .effects import EFFECT_NAMES, Effect, apply_effect, apply_effects, invert, mirror, tile, zoom
from .palette import (
    InvalidPaletteError,
    UnknownPaletteError,
    apply_palette,
    indexed_image,
    normalize_palette,
    resolve_palette,
)

__all__ = [
    "EFFECT_NAMES",
    "Effect",
    "apply_effect",
    "apply_effects",
    "invert",
    "mirror",
    "tile",
    "zoom",
    "InvalidPaletteError",
    "UnknownPaletteError",
    "apply_palette",
    "indexed_image",
    "normalize_palette",
    "resolve_palette",
]
