"""Data models for track points and drawable segments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class GeoPosition:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A single recorded position.

    Attributes:
        timestamp_ms: Unix epoch milliseconds when the position was recorded.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
    """

    timestamp_ms: int
    latitude: float
    longitude: float

    @property
    def timestamp_s(self) -> float:
        """Unix epoch seconds as float."""

        return self.timestamp_ms / 1000.0

    @property
    def position(self) -> GeoPosition:
        return GeoPosition(latitude=self.latitude, longitude=self.longitude)


@dataclass(frozen=True, slots=True)
class StrokeStyle:
    """Visual attributes shared by every segment of a track.

    Attributes:
        thickness: Stroke width in pixels.
        color: ARGB tuple, each channel 0-255.
        dashed: Whether the line is drawn dashed.
    """

    thickness: int = 3
    color: tuple[int, int, int, int] = (255, 100, 100, 255)
    dashed: bool = False

    @property
    def hex_color(self) -> str:
        """RGB part of the color as "#rrggbb"."""

        _, r, g, b = self.color
        return f"#{r:02x}{g:02x}{b:02x}"

    @property
    def opacity(self) -> float:
        return self.color[0] / 255.0


@dataclass(frozen=True, slots=True)
class Segment:
    """A drawable line between two consecutive track points."""

    start: TrackPoint
    end: TrackPoint
    style: StrokeStyle


DEFAULT_TZ: Final[str] = "Europe/Helsinki"
DEFAULT_STROKE: Final[StrokeStyle] = StrokeStyle()
TRACK_ZOOM_LEVEL: Final[int] = 13
# Days shown by the weekly view; the day cursor may go back HISTORY_DAYS - 1 days.
HISTORY_DAYS: Final[int] = 7
# Espoo, Finland. Used when the current position cannot be determined.
FALLBACK_CENTER: Final[GeoPosition] = GeoPosition(latitude=60.17, longitude=24.83)
