"""CSV input utilities for the exported track-point file."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from simple_tracks.models import TrackPoint

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("geoTime", "latitude", "longitude")


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


def _parse_row(row: dict[str, str]) -> TrackPoint:
    return TrackPoint(
        timestamp_ms=int(row["geoTime"].strip()),
        latitude=float(row["latitude"].strip()),
        longitude=float(row["longitude"].strip()),
    )


def _check_fieldnames(fieldnames: Sequence[str] | None, csv_path: Path) -> None:
    missing = [name for name in REQUIRED_FIELDS if name not in (fieldnames or ())]
    if missing:
        raise KeyError(f"{csv_path} is missing required columns {missing}; found {list(fieldnames or ())}")


def load_track_points(csv_path: str | Path) -> tuple[list[TrackPoint], CsvSummary]:
    """Load all points into memory.

    Returns:
        (points, summary)
    """

    p = Path(csv_path)
    rows_total = 0
    parsed: list[TrackPoint] = []
    fieldnames: Sequence[str] = ()

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        if fieldnames:
            _check_fieldnames(fieldnames, p)
        for row in reader:
            rows_total += 1
            try:
                parsed.append(_parse_row(row))
            except (ValueError, TypeError, AttributeError):
                continue

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=len(parsed),
        rows_skipped=rows_total - len(parsed),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("Skipped %s unparsable rows in %s", summary.rows_skipped, p)
    return parsed, summary


def load_track_points_between(csv_path: str | Path, start_ms: int, end_ms: int) -> list[TrackPoint]:
    """Load the points recorded in [start_ms, end_ms), sorted by time ascending."""

    points, _ = load_track_points(csv_path)
    window = [pt for pt in points if start_ms <= pt.timestamp_ms < end_ms]
    window.sort(key=lambda pt: pt.timestamp_ms)
    logger.debug("Loaded %s of %s points for window [%s, %s)", len(window), len(points), start_ms, end_ms)
    return window
