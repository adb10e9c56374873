"""Shared fixtures for simple_tracks tests."""

from __future__ import annotations

import csv
import json
from datetime import date
from pathlib import Path
from typing import Callable

import pytest

from simple_tracks.models import TrackPoint
from tests.helpers import FakeMonitor


@pytest.fixture
def today() -> date:
    return date(2026, 3, 18)


@pytest.fixture
def fake_monitor() -> FakeMonitor:
    return FakeMonitor()


@pytest.fixture
def write_track_csv(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing points to a CSV export with the usual columns."""

    def _write(points: list[TrackPoint], name: str = "Path.csv") -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8", newline="") as f:
            w = csv.DictWriter(f, fieldnames=["geoTime", "latitude", "longitude", "altitude", "speed"])
            w.writeheader()
            for pt in points:
                w.writerow(
                    {
                        "geoTime": pt.timestamp_ms,
                        "latitude": f"{pt.latitude:.7f}",
                        "longitude": f"{pt.longitude:.7f}",
                        "altitude": "12.0",
                        "speed": "0.0",
                    }
                )
        return path

    return _write


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    path = tmp_path / "motion_settings.json"
    path.write_text(
        json.dumps({"location_enabled": True, "places_visited": True, "version": 2, "api_set": 1}),
        encoding="utf-8",
    )
    return path
