"""Test helpers shared by unit tests."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from simple_tracks.models import TrackPoint

TEST_TZ = "UTC"


def point_at(day: date, hour: int, minute: int = 0, lat: float = 60.17, lon: float = 24.83) -> TrackPoint:
    """TrackPoint at a UTC wall-clock time."""

    dt = datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)
    return TrackPoint(timestamp_ms=int(dt.timestamp() * 1000), latitude=lat, longitude=lon)


class FakeMonitor:
    """Scripted track point monitor.

    ``tracks`` maps a start day to the points returned for it; ``error`` is
    raised by every fetch when set.
    """

    def __init__(self, tracks: dict[date, list[TrackPoint]] | None = None) -> None:
        self.tracks = tracks or {}
        self.error: Exception | None = None
        self.calls: list[tuple[date, timedelta]] = []
        self.active = False
        self.activations = 0
        self.deactivations = 0

    def activate(self) -> None:
        self.active = True
        self.activations += 1

    def deactivate(self) -> None:
        self.active = False
        self.deactivations += 1

    def get_track_points(self, day: date, span: timedelta) -> list[TrackPoint]:
        self.calls.append((day, span))
        if self.error is not None:
            raise self.error
        return list(self.tracks.get(day, []))

