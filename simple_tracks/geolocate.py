"""Current-position lookup used once to center the map.

This module uses only the Python standard library. The lookup is IP based and
therefore coarse; it only decides where the map starts before any track is
drawn.
"""

from __future__ import annotations

import json
import logging
import time
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable

from simple_tracks.models import FALLBACK_CENTER, GeoPosition

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocatorConfig:
    """Configuration for the position lookup endpoint.

    The endpoint must answer with a JSON object holding numeric
    ``latitude``/``longitude`` (or ``lat``/``lon``) fields.
    """

    base_url: str = "https://ipapi.co/json/"
    timeout_seconds: float = 5.0
    max_age_seconds: float = 300.0
    user_agent: str = "simple-tracks/0.1.0 (map centering)"


def locate_raw(cfg: LocatorConfig) -> dict[str, Any] | None:
    """Call the lookup endpoint and return the raw JSON dict, or None on any failure."""

    req = urllib.request.Request(
        cfg.base_url,
        headers={
            "User-Agent": cfg.user_agent,
            "Accept": "application/json",
        },
        method="GET",
    )
    try:
        with urllib.request.urlopen(req, timeout=cfg.timeout_seconds) as resp:  # noqa: S310
            body = resp.read().decode("utf-8", errors="replace")
        raw: dict[str, Any] = json.loads(body)
    except Exception as exc:
        logger.info("Position lookup failed: %s", exc)
        return None
    return raw


def position_from_raw(raw: dict[str, Any]) -> GeoPosition | None:
    lat = raw.get("latitude", raw.get("lat"))
    lon = raw.get("longitude", raw.get("lon"))
    try:
        position = GeoPosition(latitude=float(lat), longitude=float(lon))
    except (TypeError, ValueError):
        return None
    if not (-90.0 <= position.latitude <= 90.0 and -180.0 <= position.longitude <= 180.0):
        return None
    return position


class CurrentPositionLocator:
    """Position lookup with a bounded wait and a fixed fallback."""

    def __init__(
        self,
        config: LocatorConfig | None = None,
        fallback: GeoPosition = FALLBACK_CENTER,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cfg = config or LocatorConfig()
        self._fallback = fallback
        self._clock = clock
        self._last_fix: GeoPosition | None = None
        self._last_fix_at = 0.0

    def locate(self) -> GeoPosition:
        """Return a fix no older than ``max_age_seconds``, else query; fall back on failure."""

        now = self._clock()
        if self._last_fix is not None and now - self._last_fix_at <= self._cfg.max_age_seconds:
            return self._last_fix

        raw = locate_raw(self._cfg)
        position = position_from_raw(raw) if raw is not None else None
        if position is None:
            logger.info("Using fallback map center %s", self._fallback)
            return self._fallback

        self._last_fix = position
        self._last_fix_at = self._clock()
        return position
