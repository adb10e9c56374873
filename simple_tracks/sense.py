"""Sensing service interface and a file-backed implementation.

The application only talks to the sensing service through the two protocols
below. ``CsvSenseService`` serves recorded history from a track-point CSV
export, with the motion-data settings persisted in a small JSON file next to
it, so the whole app can run without any device SDK.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from datetime import date, timedelta
from enum import IntEnum
from pathlib import Path
from typing import Any, Final, Protocol

from simple_tracks.config import as_bool
from simple_tracks.csv_io import load_track_points_between
from simple_tracks.models import DEFAULT_TZ, TrackPoint
from simple_tracks.timeutils import day_window_ms

logger = logging.getLogger(__name__)

# Oldest settings/API revision this application understands.
REQUIRED_API_SET: Final[int] = 1


class SenseErrorCode(IntEnum):
    """Error codes carried by SenseException."""

    GENERAL_FAILURE = 0
    LOCATION_DISABLED = 1
    SENSE_DISABLED = 2
    INCOMPATIBLE_SDK = 3
    NOT_SUPPORTED = 4


class SenseException(Exception):
    """Raised by the sensing service; ``code`` tells what went wrong."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message or f"sense error code {code}")
        self.code = code


def get_sense_error(code: int) -> SenseErrorCode:
    """Map a raw code to SenseErrorCode; unknown codes are GENERAL_FAILURE."""

    try:
        return SenseErrorCode(code)
    except ValueError:
        return SenseErrorCode.GENERAL_FAILURE


@dataclass(frozen=True, slots=True)
class MotionDataSettings:
    """System settings relevant to collecting track points.

    Attributes:
        location_enabled: System location switch.
        places_visited: Motion-data "places visited" collection switch.
        version: Settings revision. Revisions below 2 only have a single
            motion-data on/off switch.
        api_set: API revision offered by the service.
    """

    location_enabled: bool = True
    places_visited: bool = True
    version: int = 2
    api_set: int = REQUIRED_API_SET


class TrackPointMonitor(Protocol):
    def activate(self) -> None: ...

    def deactivate(self) -> None: ...

    def get_track_points(self, day: date, span: timedelta) -> list[TrackPoint]: ...


class SenseService(Protocol):
    def is_supported(self) -> bool: ...

    def get_supported_api_set(self) -> int: ...

    def get_settings(self) -> MotionDataSettings: ...

    def get_default_monitor(self) -> TrackPointMonitor: ...

    def launch_location_settings(self) -> Path: ...

    def launch_sense_settings(self) -> Path: ...


def load_settings(path: str | Path) -> MotionDataSettings:
    """Load settings from JSON; a missing file yields the defaults."""

    p = Path(path)
    if not p.exists():
        return MotionDataSettings()
    text = p.read_text(encoding="utf-8").strip()
    if not text:
        return MotionDataSettings()
    try:
        raw: dict[str, Any] = json.loads(text)
    except json.JSONDecodeError:
        # keep a backup and start over from defaults
        backup = p.with_suffix(p.suffix + ".broken")
        backup.write_text(text, encoding="utf-8")
        defaults = MotionDataSettings()
        save_settings(p, defaults)
        logger.warning("Settings file %s is corrupted, backed up to %s and reset", p, backup)
        return defaults

    defaults = MotionDataSettings()
    return MotionDataSettings(
        location_enabled=as_bool(raw.get("location_enabled", defaults.location_enabled)),
        places_visited=as_bool(raw.get("places_visited", defaults.places_visited)),
        version=int(raw.get("version", defaults.version)),
        api_set=int(raw.get("api_set", defaults.api_set)),
    )


def save_settings(path: str | Path, settings: MotionDataSettings) -> None:
    """Persist settings to disk (atomic-ish)."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(p.suffix + ".tmp")
    tmp.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
    tmp.replace(p)


class CsvTrackPointMonitor:
    """Track-point monitor reading history from a CSV export."""

    def __init__(self, service: CsvSenseService) -> None:
        self._service = service
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> None:
        self._active = True
        logger.debug("Track point monitor activated")

    def deactivate(self) -> None:
        self._active = False
        logger.debug("Track point monitor deactivated")

    def get_track_points(self, day: date, span: timedelta) -> list[TrackPoint]:
        """Return points recorded in [day 00:00, day 00:00 + span), time ascending.

        Raises:
            SenseException: If the settings forbid collection, the service is
                outdated or the monitor is not active.
        """

        self._service.check_access()
        if not self._active:
            raise SenseException(SenseErrorCode.GENERAL_FAILURE, "track point monitor is not active")
        start_ms, end_ms = day_window_ms(day, span, self._service.tz_name)
        return load_track_points_between(self._service.csv_path, start_ms, end_ms)


class CsvSenseService:
    """Sensing service backed by a track-point CSV and a settings JSON file."""

    def __init__(self, csv_path: str | Path, settings_path: str | Path, tz_name: str = DEFAULT_TZ) -> None:
        self.csv_path = Path(csv_path)
        self.settings_path = Path(settings_path)
        self.tz_name = tz_name

    def is_supported(self) -> bool:
        return self.csv_path.exists()

    def get_supported_api_set(self) -> int:
        return self.get_settings().api_set

    def get_settings(self) -> MotionDataSettings:
        return load_settings(self.settings_path)

    def update_settings(self, **changes: Any) -> MotionDataSettings:
        """Apply changes (MotionDataSettings field names) and persist them."""

        settings = replace(self.get_settings(), **changes)
        save_settings(self.settings_path, settings)
        logger.info("Settings updated: %s", changes)
        return settings

    def get_default_monitor(self) -> CsvTrackPointMonitor:
        if not self.is_supported():
            raise SenseException(SenseErrorCode.NOT_SUPPORTED, f"no track history at {self.csv_path}")
        self.check_access()
        return CsvTrackPointMonitor(self)

    def launch_location_settings(self) -> Path:
        logger.info("Location settings live in %s", self.settings_path)
        return self.settings_path

    def launch_sense_settings(self) -> Path:
        logger.info("Motion data settings live in %s", self.settings_path)
        return self.settings_path

    def check_access(self) -> None:
        """Raise SenseException if the current settings block reading history."""

        settings = self.get_settings()
        if settings.api_set < REQUIRED_API_SET:
            raise SenseException(
                SenseErrorCode.INCOMPATIBLE_SDK,
                f"api set {settings.api_set} is older than required {REQUIRED_API_SET}",
            )
        if not settings.location_enabled:
            raise SenseException(SenseErrorCode.LOCATION_DISABLED, "location is disabled")
        if not settings.places_visited:
            raise SenseException(SenseErrorCode.SENSE_DISABLED, "places visited is disabled")
