from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, Tuple, Union

from PIL import Image

from ..config import PALETTES
from ..grid import DEFAULT_GEOMETRY, LEVELS, Grid, GridGeometry, validate_grid, validate_levels

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]
Palette = Tuple[Color, Color, Color, Color]
PaletteLike = Union[str, Sequence[Any]]

ALPHA = 255


class InvalidPaletteError(ValueError):
    """Raised for palettes without exactly four valid RGB entries."""


class UnknownPaletteError(KeyError):
    """Raised when a palette id is missing from the registry."""


def _normalize_color(position: int, entry: Any) -> Color:
    if isinstance(entry, Mapping):
        try:
            channels = (entry["r"], entry["g"], entry["b"])
        except KeyError as exc:
            raise InvalidPaletteError(f"Palette entry {position} is missing channel {exc}") from exc
    else:
        if isinstance(entry, (str, bytes)) or not isinstance(entry, Sequence) or len(entry) != 3:
            raise InvalidPaletteError(f"Palette entry {position} is not an RGB triple: {entry!r}")
        channels = tuple(entry)

    for channel in channels:
        if type(channel) is not int or not 0 <= channel <= 255:
            raise InvalidPaletteError(
                f"Palette entry {position} has component {channel!r} outside [0, 255]"
            )
    r, g, b = channels
    return r, g, b


def normalize_palette(entries: Sequence[Any]) -> Palette:
    """Return ``entries`` as a tuple of four ``(r, g, b)`` triples.

    Entries may be triples or ``{"r": .., "g": .., "b": ..}`` mappings.
    """

    if isinstance(entries, (str, bytes)) or not isinstance(entries, Sequence):
        raise InvalidPaletteError(f"Palette must be a sequence of {LEVELS} colors")
    if len(entries) != LEVELS:
        raise InvalidPaletteError(f"Palette has {len(entries)} entries; expected {LEVELS}")
    colors = tuple(_normalize_color(position, entry) for position, entry in enumerate(entries))
    return colors  # type: ignore[return-value]


def resolve_palette(palette: PaletteLike, registry: Mapping[str, Sequence[Any]] = PALETTES) -> Palette:
    if isinstance(palette, str):
        try:
            entries = registry[palette]
        except KeyError:
            raise UnknownPaletteError(
                f"Unknown palette: {palette}. Available: {', '.join(sorted(registry))}"
            ) from None
        return normalize_palette(entries)
    return normalize_palette(palette)


def apply_palette(
    grid: Grid, palette: PaletteLike, registry: Mapping[str, Sequence[Any]] = PALETTES
) -> bytes:
    """Map each pixel index to its palette color as an RGBA byte string.

    The result holds ``len(grid) * 4`` bytes, ``r, g, b, 255`` per pixel in
    grid order, ready for ``Image.frombytes("RGBA", ...)``.
    """

    colors = resolve_palette(palette, registry)
    validate_levels(grid)

    lut = [bytes((r, g, b, ALPHA)) for r, g, b in colors]
    rgba = b"".join(lut[value] for value in grid)

    logger.debug("Mapped %d pixels to %d RGBA bytes", len(grid), len(rgba))
    return rgba


def indexed_image(
    grid: Grid,
    palette: PaletteLike,
    geometry: GridGeometry = DEFAULT_GEOMETRY,
    registry: Mapping[str, Sequence[Any]] = PALETTES,
) -> Image.Image:
    """Wrap ``grid`` as a ``"P"`` mode image carrying ``palette``.

    Pixel indices stay untouched, so the image round-trips losslessly through
    indexed formats such as PNG.
    """

    colors = resolve_palette(palette, registry)
    validate_grid(grid, geometry)

    image = Image.frombytes("P", (geometry.width, geometry.height), bytes(grid))
    flat: Tuple[int, ...] = tuple(channel for rgb in colors for channel in rgb)
    padded = flat + (0,) * (768 - len(flat))
    image.putpalette(padded)
    return image
