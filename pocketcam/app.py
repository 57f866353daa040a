from __future__ import annotations

import json
import logging
from dataclasses import asdict

from flask import Flask, Response, jsonify, request

from .config import PALETTES, SETTINGS, configure_logging
from .grid import HEIGHT, WIDTH, InvalidGridError, validate_grid
from .infrastructure.cache import CACHE, last_good_png, remember_last_good
from .infrastructure.network import FETCHER
from .infrastructure.responses import encode_png, send_png, send_png_bytes
from .pipeline import render_image, render_rgba, to_image
from .processing.effects import EFFECT_NAMES, apply_effects
from .processing.palette import (
    InvalidPaletteError,
    UnknownPaletteError,
    indexed_image,
    resolve_palette,
)

APP_VERSION = "1.0.0"

OUTPUT_FORMATS = ("png", "indexed", "rgba", "grid")

logger = logging.getLogger(__name__)


def _requested_effects(payload: dict) -> list[str]:
    if "effects" in payload:
        effects = payload["effects"]
    elif "effect" in payload:
        effects = [payload["effect"]]
    else:
        effects = []
    if not isinstance(effects, list) or not all(isinstance(name, str) for name in effects):
        raise ValueError("effects must be a list of effect names")
    return effects


def create_app() -> Flask:
    configure_logging()
    app = Flask(__name__)

    @app.errorhandler(InvalidGridError)
    def invalid_grid(exc: InvalidGridError):
        return jsonify(error=str(exc)), 400

    @app.errorhandler(InvalidPaletteError)
    def invalid_palette(exc: InvalidPaletteError):
        return jsonify(error=str(exc)), 400

    @app.errorhandler(UnknownPaletteError)
    def unknown_palette(exc: UnknownPaletteError):
        return jsonify(error=exc.args[0]), 404

    @app.route("/photo")
    def photo():
        effects = request.args.getlist("effect")
        palette = request.args.get("palette") or SETTINGS.default_palette
        resolve_palette(palette)

        key = json.dumps([effects, palette])
        cached = CACHE.get(key)
        if cached:
            return send_png_bytes(cached)

        try:
            grid = FETCHER.fetch_grid()
        except (RuntimeError, InvalidGridError) as exc:
            logger.exception("Upstream capture unavailable")
            fallback = last_good_png()
            if fallback:
                return send_png_bytes(fallback)
            return (f"Source Error: {exc}", 502)

        data = encode_png(render_image(grid, effects, palette))
        remember_last_good(data)
        CACHE.put(key, data)
        return send_png_bytes(data)

    @app.route("/render", methods=["POST"])
    def render():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify(error="Expected a JSON object body"), 400

        pixels = payload.get("pixels")
        if not isinstance(pixels, list):
            return jsonify(error="pixels must be an array of palette indices"), 400
        try:
            effects = _requested_effects(payload)
        except ValueError as exc:
            return jsonify(error=str(exc)), 400

        output = payload.get("format", "png")
        if output not in OUTPUT_FORMATS:
            return jsonify(error=f"format must be one of {', '.join(OUTPUT_FORMATS)}"), 400

        validate_grid(pixels)
        if output == "grid":
            return jsonify(pixels=list(apply_effects(pixels, effects)))

        palette = payload.get("palette") or SETTINGS.default_palette
        if output == "indexed":
            return send_png(indexed_image(apply_effects(pixels, effects), palette))

        rgba = render_rgba(pixels, effects, palette)
        if output == "rgba":
            return Response(rgba, mimetype="application/octet-stream")
        return send_png(to_image(rgba))

    @app.route("/effects")
    def effects_view():
        return jsonify(effects=list(EFFECT_NAMES))

    @app.route("/palettes")
    def palettes_view():
        return jsonify(
            default=SETTINGS.default_palette,
            palettes={name: [list(color) for color in colors] for name, colors in PALETTES.items()},
        )

    @app.route("/health")
    def health():
        return jsonify(ok=True, version=APP_VERSION, width=WIDTH, height=HEIGHT)

    @app.route("/settings")
    def settings_view():
        return jsonify(asdict(SETTINGS))

    return app


# Expose a module-level Flask application for Gunicorn import paths like ``pocketcam.app:app``
# and provide a conventional ``application`` alias for WSGI servers that default to that name.
app = create_app()
application = app
