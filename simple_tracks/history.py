"""Track history fetching and day navigation.

Every handler takes a ``ViewState`` and returns a new one; nothing is stored
on module level, so each transition can be tested in isolation.

Navigation window: the cursor may move between ``today - (HISTORY_DAYS - 1)``
and ``today``. The weekly view fetches ``HISTORY_DAYS + 1`` days starting
``HISTORY_DAYS`` days ago and does not touch the cursor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Callable, Literal, TypeVar

from simple_tracks.errors import FailureKind, TrackFetchError
from simple_tracks.models import HISTORY_DAYS, TrackPoint
from simple_tracks.notices import FUTURE_NOT_ALLOWED, TOO_FAR_PAST, Notice, notice_for_failure
from simple_tracks.render import EMPTY_RENDER, RenderResult, render
from simple_tracks.sense import SenseErrorCode, SenseException, TrackPointMonitor, get_sense_error
from simple_tracks.timeutils import format_day, format_range

logger = logging.getLogger(__name__)

T = TypeVar("T")

ONE_DAY = timedelta(days=1)

_KIND_BY_CODE = {
    SenseErrorCode.LOCATION_DISABLED: FailureKind.LOCATION_DISABLED,
    SenseErrorCode.SENSE_DISABLED: FailureKind.TRACKING_DISABLED,
    SenseErrorCode.INCOMPATIBLE_SDK: FailureKind.INCOMPATIBLE_SERVICE,
    SenseErrorCode.NOT_SUPPORTED: FailureKind.UNAVAILABLE,
}


def classify_failure(exc: BaseException) -> FailureKind:
    """Classify an exception raised by the sensing service."""

    if isinstance(exc, TrackFetchError):
        return exc.kind
    if isinstance(exc, SenseException):
        return _KIND_BY_CODE.get(get_sense_error(exc.code), FailureKind.TRANSIENT_FAILURE)
    return FailureKind.TRANSIENT_FAILURE


def call_sense_api(action: Callable[[], T]) -> T:
    """Run one sensing call, turning any failure into a TrackFetchError.

    No retry is attempted; the user re-triggers the action.
    """

    try:
        return action()
    except TrackFetchError:
        raise
    except Exception as exc:
        kind = classify_failure(exc)
        if kind.fatal:
            logger.error("Sensing call failed (%s): %s", kind.value, exc)
        else:
            logger.warning("Sensing call failed (%s): %s", kind.value, exc)
        raise TrackFetchError(kind, exc) from exc


def fetch_track_points(monitor: TrackPointMonitor, day: date, span: timedelta) -> tuple[TrackPoint, ...]:
    """Fetch the points recorded in [day, day + span).

    Raises:
        TrackFetchError: classified sensing failure.
    """

    points = call_sense_api(lambda: monitor.get_track_points(day, span))
    logger.debug("Fetched %s points for %s + %s", len(points), day, span)
    return tuple(points)


@dataclass(frozen=True, slots=True)
class ViewState:
    """Everything the single screen shows.

    Attributes:
        cursor: Day selected for single-day viewing.
        points: Current track point list (replaced on every fetch).
        rendered: Segments and recentering derived from ``points``.
        label: Date caption for the current view.
        notice: Message to present after the last transition, if any.
        failure: Kind of the last fetch failure, if the last fetch failed.
        mode: "day" for cursor views, "week" for the last-days view.
    """

    cursor: date
    points: tuple[TrackPoint, ...] = ()
    rendered: RenderResult = EMPTY_RENDER
    label: str = ""
    notice: Notice | None = None
    failure: FailureKind | None = None
    mode: Literal["day", "week"] = "day"


def initial_state(today: date) -> ViewState:
    return ViewState(cursor=today, label=format_day(today))


def can_go_previous(cursor: date, today: date, days: int = HISTORY_DAYS) -> bool:
    return (today - cursor) < timedelta(days=days - 1)


def can_go_next(cursor: date, today: date) -> bool:
    return cursor < today


def _apply_fetch(
    state: ViewState,
    monitor: TrackPointMonitor,
    day: date,
    span: timedelta,
    settings_version: int,
) -> ViewState:
    try:
        points = fetch_track_points(monitor, day, span)
    except TrackFetchError as exc:
        return replace(
            state,
            points=(),
            rendered=EMPTY_RENDER,
            notice=notice_for_failure(exc.kind, settings_version),
            failure=exc.kind,
        )
    return replace(state, points=points, rendered=render(points), notice=None, failure=None)


def load_day(state: ViewState, monitor: TrackPointMonitor, *, settings_version: int = 2) -> ViewState:
    """Fetch and render the 1-day window starting at the cursor."""

    state = replace(state, mode="day", label=format_day(state.cursor))
    return _apply_fetch(state, monitor, state.cursor, ONE_DAY, settings_version)


def previous_day(
    state: ViewState,
    monitor: TrackPointMonitor,
    today: date,
    *,
    days: int = HISTORY_DAYS,
    settings_version: int = 2,
) -> ViewState:
    """Move the cursor one day back, or reject with a notice at the boundary."""

    if not can_go_previous(state.cursor, today, days):
        logger.info("Previous day rejected at %s", state.cursor)
        return replace(state, notice=TOO_FAR_PAST)
    return load_day(replace(state, cursor=state.cursor - ONE_DAY), monitor, settings_version=settings_version)


def next_day(
    state: ViewState,
    monitor: TrackPointMonitor,
    today: date,
    *,
    settings_version: int = 2,
) -> ViewState:
    """Move the cursor one day forward, or reject with a notice at today."""

    if not can_go_next(state.cursor, today):
        logger.info("Next day rejected at %s", state.cursor)
        return replace(state, notice=FUTURE_NOT_ALLOWED)
    return load_day(replace(state, cursor=state.cursor + ONE_DAY), monitor, settings_version=settings_version)


def show_last_days(
    state: ViewState,
    monitor: TrackPointMonitor,
    today: date,
    days: int = HISTORY_DAYS,
    *,
    settings_version: int = 2,
) -> ViewState:
    """Render every point of the last ``days`` days and today as one track.

    The cursor is kept as is, so day navigation resumes where it was.
    """

    start = today - timedelta(days=days)
    state = replace(state, mode="week", label=format_range(today, start))
    return _apply_fetch(state, monitor, start, timedelta(days=days + 1), settings_version)


def redraw(state: ViewState) -> ViewState:
    """Re-render the stored points without fetching."""

    return replace(state, rendered=render(state.points))
