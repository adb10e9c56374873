"""Unit tests for track CSV loading."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Callable

import pytest

from simple_tracks.csv_io import load_track_points, load_track_points_between
from tests.helpers import point_at

DAY = date(2026, 3, 18)


class TestLoadTrackPoints:
    """Tests for load_track_points."""

    def test_load_with_summary(self, write_track_csv: Callable[..., Path]) -> None:
        path = write_track_csv([point_at(DAY, 8), point_at(DAY, 9)])

        points, summary = load_track_points(path)

        assert len(points) == 2
        assert summary.rows_total == 2
        assert summary.rows_skipped == 0
        assert "geoTime" in summary.fieldnames

    def test_broken_rows_are_skipped(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "Path.csv"
        path.write_text(
            "geoTime,latitude,longitude\n"
            "1773820800000,60.1,24.8\n"
            "oops,60.2,24.9\n"
            "1773824400000,,24.9\n"
            "1773828000000,60.3,25.0\n",
            encoding="utf-8",
        )

        with caplog.at_level(logging.WARNING, logger="simple_tracks.csv_io"):
            points, summary = load_track_points(path)

        assert [p.latitude for p in points] == [60.1, 60.3]
        assert summary.rows_skipped == 2
        assert "Skipped 2" in caplog.text

    def test_missing_required_column(self, tmp_path: Path) -> None:
        path = tmp_path / "Path.csv"
        path.write_text("geoTime,latitude\n1,2\n", encoding="utf-8")

        with pytest.raises(KeyError, match="longitude"):
            load_track_points(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "Path.csv"
        path.write_text("", encoding="utf-8")

        points, summary = load_track_points(path)

        assert points == []
        assert summary.rows_total == 0


def test_load_between_is_half_open_and_sorted(write_track_csv: Callable[..., Path]) -> None:
    a, b, c = point_at(DAY, 8), point_at(DAY, 9), point_at(DAY, 10)
    path = write_track_csv([c, a, b])

    points = load_track_points_between(path, a.timestamp_ms, c.timestamp_ms)

    assert points == [a, b]
