"""Infrastructure helpers for fetching grids and caching rendered output."""

from .cache import CACHE, ResponseCache, last_good_png, remember_last_good
from .network import FETCHER, SourceFetcher, decode_grid
from .responses import encode_png, send_png, send_png_bytes

__all__ = [
    "CACHE",
    "ResponseCache",
    "last_good_png",
    "remember_last_good",
    "FETCHER",
    "SourceFetcher",
    "decode_grid",
    "encode_png",
    "send_png",
    "send_png_bytes",
]
