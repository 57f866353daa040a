import io

import pytest
from PIL import Image

from pocketcam.app import create_app
from pocketcam.grid import PIXEL_COUNT
from pocketcam.infrastructure import cache as cache_module
from pocketcam.infrastructure.cache import CACHE
from pocketcam.infrastructure.network import FETCHER
from pocketcam.processing.effects import apply_effect
from pocketcam.processing.palette import apply_palette


@pytest.fixture
def client(monkeypatch):
    CACHE.clear()
    monkeypatch.setattr(cache_module, "_last_good_png", b"")
    app = create_app()
    app.config["TESTING"] = True
    yield app.test_client()
    CACHE.clear()


def open_png(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


def test_health_reports_grid_size(client) -> None:
    payload = client.get("/health").get_json()

    assert payload["ok"] is True
    assert (payload["width"], payload["height"]) == (128, 112)


def test_effects_lists_vocabulary(client) -> None:
    assert "zoom-h" in client.get("/effects").get_json()["effects"]


def test_palettes_lists_registry(client) -> None:
    payload = client.get("/palettes").get_json()

    assert payload["palettes"]["grayscale"][1] == [85, 85, 85]
    assert payload["default"] in payload["palettes"]


def test_render_returns_png(client, grid) -> None:
    response = client.post("/render", json={"pixels": grid, "effect": "tile", "palette": "dmg"})

    assert response.status_code == 200
    assert response.mimetype == "image/png"
    image = open_png(response.data)
    assert image.size == (128, 112)
    assert image.convert("RGBA").tobytes() == apply_palette(apply_effect(grid, "tile"), "dmg")


def test_render_indexed_png_keeps_indices(client, grid) -> None:
    response = client.post("/render", json={"pixels": grid, "format": "indexed"})

    image = open_png(response.data)
    assert image.mode == "P"
    assert list(image.tobytes()) == grid


def test_render_rgba_bytes_with_inline_palette(client, grid) -> None:
    palette = [[0, 0, 0], [1, 1, 1], [2, 2, 2], [3, 3, 3]]

    response = client.post("/render", json={"pixels": grid, "palette": palette, "format": "rgba"})

    assert response.mimetype == "application/octet-stream"
    assert len(response.data) == PIXEL_COUNT * 4
    assert list(response.data[0::4]) == grid


def test_render_grid_format_skips_palette(client, grid) -> None:
    response = client.post(
        "/render", json={"pixels": grid, "effects": ["invert", "invert"], "format": "grid"}
    )

    assert response.get_json()["pixels"] == grid


def test_render_unknown_effect_is_identity(client, grid) -> None:
    response = client.post("/render", json={"pixels": grid, "effect": "sparkle", "format": "grid"})

    assert response.status_code == 200
    assert response.get_json()["pixels"] == grid


@pytest.mark.parametrize(
    "body",
    [
        {"pixels": [0, 1, 2, 3]},
        {"pixels": "nope"},
        {"pixels": [], "effects": "invert"},
        {"pixels": [], "format": "gif"},
    ],
)
def test_render_rejects_bad_requests(client, body) -> None:
    response = client.post("/render", json=body)

    assert response.status_code == 400
    assert "error" in response.get_json()


def test_render_rejects_malformed_palette(client, grid) -> None:
    response = client.post("/render", json={"pixels": grid, "palette": [[0, 0, 0]]})

    assert response.status_code == 400


def test_render_unknown_palette_is_not_found(client, grid) -> None:
    response = client.post("/render", json={"pixels": grid, "palette": "neon"})

    assert response.status_code == 404
    assert "neon" in response.get_json()["error"]


def test_photo_renders_and_caches_upstream_grid(client, grid, monkeypatch) -> None:
    calls = []

    def fake_fetch(**kwargs):
        calls.append(kwargs)
        return grid

    monkeypatch.setattr(FETCHER, "fetch_grid", fake_fetch)

    first = client.get("/photo?effect=mirror-rtl&palette=sepia")
    second = client.get("/photo?effect=mirror-rtl&palette=sepia")

    assert first.status_code == second.status_code == 200
    assert first.data == second.data
    assert len(calls) == 1
    expected = apply_palette(apply_effect(grid, "mirror-rtl"), "sepia")
    assert open_png(first.data).convert("RGBA").tobytes() == expected


def test_photo_serves_last_good_image_when_upstream_fails(client, grid, monkeypatch) -> None:
    monkeypatch.setattr(FETCHER, "fetch_grid", lambda **kwargs: grid)
    good = client.get("/photo?palette=grayscale")
    CACHE.clear()

    def failing_fetch(**kwargs):
        raise RuntimeError("camera offline")

    monkeypatch.setattr(FETCHER, "fetch_grid", failing_fetch)
    fallback = client.get("/photo?palette=grayscale")

    assert fallback.status_code == 200
    assert fallback.data == good.data


def test_photo_reports_upstream_failure_without_fallback(client, monkeypatch) -> None:
    def failing_fetch(**kwargs):
        raise RuntimeError("camera offline")

    monkeypatch.setattr(FETCHER, "fetch_grid", failing_fetch)

    response = client.get("/photo")

    assert response.status_code == 502
    assert b"camera offline" in response.data


def test_photo_unknown_palette_is_not_found(client) -> None:
    assert client.get("/photo?palette=neon").status_code == 404


def test_photo_cache_keeps_comma_joined_name_separate_from_chain(client, grid, monkeypatch) -> None:
    monkeypatch.setattr(FETCHER, "fetch_grid", lambda **kwargs: grid)

    chained = client.get("/photo?effect=mirror-rtl&effect=invert&palette=grayscale")
    single = client.get("/photo?effect=mirror-rtl,invert&palette=grayscale")

    assert chained.data != single.data
    assert open_png(single.data).convert("RGBA").tobytes() == apply_palette(grid, "grayscale")
