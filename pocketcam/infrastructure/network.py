from __future__ import annotations

import json
import logging
import time
from typing import Callable, List, Mapping

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

from ..config import SETTINGS
from ..grid import DEFAULT_GEOMETRY, GridGeometry, InvalidGridError, validate_grid

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


def _merge_query_params(url: str, overrides: Mapping[str, str | None] | None) -> str:
    """Merge override query parameters into ``url``.

    Parameters with a value of ``None`` are removed from the query string.
    """

    if not overrides:
        return url

    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))

    for key, value in overrides.items():
        if value is None:
            query.pop(key, None)
        else:
            query[key] = value

    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


def decode_grid(content: bytes, geometry: GridGeometry = DEFAULT_GEOMETRY) -> List[int]:
    """Decode a capture payload into a validated pixel grid.

    Two layouts are accepted: a raw body holding one byte per pixel, or a JSON
    array of integers.
    """

    if content.lstrip()[:1] == b"[":
        try:
            pixels = json.loads(content)
        except ValueError as exc:
            raise InvalidGridError(f"Malformed JSON grid payload: {exc}") from exc
        if not isinstance(pixels, list):
            raise InvalidGridError("JSON grid payload must be an array")
    else:
        pixels = list(content)

    validate_grid(pixels, geometry)
    return pixels


class SourceFetcher:
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory or requests.Session
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        session = self._session_factory()
        session.headers.update({"User-Agent": "pocketcam/1.0"})
        return session

    def fetch_grid(
        self,
        *,
        source_url: str | None = None,
        overrides: Mapping[str, str | None] | None = None,
    ) -> List[int]:
        target_url = _merge_query_params(source_url or SETTINGS.source_url, overrides)
        last_exception: Exception | None = None
        for attempt in range(1, SETTINGS.retries + 2):
            try:
                response = self._session.get(target_url, timeout=SETTINGS.timeout)
                response.raise_for_status()
                return decode_grid(response.content)
            except InvalidGridError:
                raise
            except requests.RequestException as exc:
                logger.warning("Fetching %s failed (attempt %d): %s", target_url, attempt, exc)
                last_exception = exc
                time.sleep(0.4 * attempt)
        raise RuntimeError(f"Unable to fetch grid from {target_url}") from last_exception


FETCHER = SourceFetcher()
