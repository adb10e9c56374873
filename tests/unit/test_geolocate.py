"""Unit tests for the current-position lookup."""

from __future__ import annotations

import io
import json
import urllib.request
from typing import Any

import pytest

from simple_tracks.geolocate import CurrentPositionLocator, LocatorConfig, locate_raw, position_from_raw
from simple_tracks.models import FALLBACK_CENTER, GeoPosition


class _Response(io.BytesIO):
    def __enter__(self) -> "_Response":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _fake_urlopen(payload: dict[str, Any], seen: list[float] | None = None):
    def _urlopen(req: urllib.request.Request, timeout: float) -> _Response:
        if seen is not None:
            seen.append(timeout)
        return _Response(json.dumps(payload).encode("utf-8"))

    return _urlopen


class TestPositionFromRaw:
    """Tests for position_from_raw."""

    def test_latitude_longitude_keys(self) -> None:
        assert position_from_raw({"latitude": 60.2, "longitude": 24.9}) == GeoPosition(60.2, 24.9)

    def test_lat_lon_keys_as_strings(self) -> None:
        assert position_from_raw({"lat": "60.2", "lon": "24.9"}) == GeoPosition(60.2, 24.9)

    @pytest.mark.parametrize("raw", [{}, {"latitude": "x", "longitude": 1}, {"latitude": 95.0, "longitude": 0.0}])
    def test_invalid(self, raw: dict[str, Any]) -> None:
        assert position_from_raw(raw) is None


class TestLocator:
    """Tests for CurrentPositionLocator."""

    def test_locate_raw_uses_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[float] = []
        monkeypatch.setattr(urllib.request, "urlopen", _fake_urlopen({"latitude": 1.0, "longitude": 2.0}, seen))

        raw = locate_raw(LocatorConfig(timeout_seconds=3.0))

        assert raw == {"latitude": 1.0, "longitude": 2.0}
        assert seen == [3.0]

    def test_failure_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _timeout(req: urllib.request.Request, timeout: float) -> _Response:
            raise TimeoutError("timed out")

        monkeypatch.setattr(urllib.request, "urlopen", _timeout)

        assert CurrentPositionLocator().locate() == FALLBACK_CENTER

    def test_custom_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(urllib.request, "urlopen", _fake_urlopen({"error": True}))

        locator = CurrentPositionLocator(fallback=GeoPosition(0.0, 0.0))

        assert locator.locate() == GeoPosition(0.0, 0.0)

    def test_recent_fix_is_reused(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[float] = []
        monkeypatch.setattr(urllib.request, "urlopen", _fake_urlopen({"latitude": 1.0, "longitude": 2.0}, seen))
        locator = CurrentPositionLocator(LocatorConfig(max_age_seconds=300.0))

        assert locator.locate() == GeoPosition(1.0, 2.0)
        assert locator.locate() == GeoPosition(1.0, 2.0)
        assert len(seen) == 1

    def test_stale_fix_is_refreshed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[float] = []
        monkeypatch.setattr(urllib.request, "urlopen", _fake_urlopen({"latitude": 1.0, "longitude": 2.0}, seen))
        clock = iter([0.0, 0.0, 1000.0, 1000.0])
        locator = CurrentPositionLocator(LocatorConfig(max_age_seconds=300.0), clock=lambda: next(clock))

        locator.locate()
        locator.locate()

        assert len(seen) == 2
