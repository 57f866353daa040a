"""Application package exports."""

from .app import APP_VERSION, app, create_app
from . import grid, infrastructure, processing
from .pipeline import render_image, render_rgba, to_image
from .processing import apply_effect, apply_palette

__version__ = APP_VERSION

__all__ = [
    "APP_VERSION",
    "__version__",
    "app",
    "create_app",
    "grid",
    "infrastructure",
    "processing",
    "render_image",
    "render_rgba",
    "to_image",
    "apply_effect",
    "apply_palette",
]
