"""Application session: startup checks, initial view and visibility lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date

from simple_tracks.errors import FailureKind, TrackFetchError
from simple_tracks.geolocate import CurrentPositionLocator
from simple_tracks.history import ViewState, call_sense_api, initial_state, load_day, redraw
from simple_tracks.models import FALLBACK_CENTER, GeoPosition
from simple_tracks.notices import Notice, notice_for_failure
from simple_tracks.sense import REQUIRED_API_SET, MotionDataSettings, SenseService, TrackPointMonitor

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StartupReport:
    """Outcome of the checks run before the first fetch."""

    settings: MotionDataSettings | None
    notices: tuple[Notice, ...] = ()
    failure: FailureKind | None = None

    @property
    def fatal(self) -> bool:
        return self.failure is not None and self.failure.fatal


@dataclass(frozen=True, slots=True)
class Session:
    """A running single-screen session.

    ``monitor`` is None when the session could not obtain one; the UI then
    only shows ``notices`` and offers to start over.
    """

    monitor: TrackPointMonitor | None
    state: ViewState
    center: GeoPosition = FALLBACK_CENTER
    settings_version: int = 2
    notices: tuple[Notice, ...] = ()
    fatal: bool = False

    @property
    def ready(self) -> bool:
        return self.monitor is not None and not self.fatal


def _append_notice(notices: tuple[Notice, ...], notice: Notice) -> tuple[Notice, ...]:
    return notices if notice in notices else (*notices, notice)


def startup_check(service: SenseService) -> StartupReport:
    """Check device support and the settings needed to collect track points."""

    try:
        supported = call_sense_api(service.is_supported)
        api_set = call_sense_api(service.get_supported_api_set) if supported else None
        settings = call_sense_api(service.get_settings) if supported else None
    except TrackFetchError as exc:
        return StartupReport(settings=None, notices=(notice_for_failure(exc.kind),), failure=exc.kind)

    if settings is None:
        logger.error("Sensing service is not supported")
        return StartupReport(
            settings=None,
            notices=(notice_for_failure(FailureKind.UNAVAILABLE),),
            failure=FailureKind.UNAVAILABLE,
        )
    if api_set is not None and api_set < REQUIRED_API_SET:
        logger.error("Sensing API set %s is older than required %s", api_set, REQUIRED_API_SET)
        return StartupReport(
            settings=settings,
            notices=(notice_for_failure(FailureKind.INCOMPATIBLE_SERVICE),),
            failure=FailureKind.INCOMPATIBLE_SERVICE,
        )

    notices: tuple[Notice, ...] = ()
    failure: FailureKind | None = None
    if not settings.location_enabled:
        failure = FailureKind.LOCATION_DISABLED
        notices = _append_notice(notices, notice_for_failure(failure, settings.version))
    if not settings.places_visited:
        failure = failure or FailureKind.TRACKING_DISABLED
        notices = _append_notice(notices, notice_for_failure(FailureKind.TRACKING_DISABLED, settings.version))
    return StartupReport(settings=settings, notices=notices, failure=failure)


def initialize(
    service: SenseService,
    today: date,
    locator: CurrentPositionLocator | None = None,
) -> Session:
    """Run startup checks, obtain and activate the monitor, then load today's track."""

    report = startup_check(service)
    state = initial_state(today)
    if report.fatal:
        return Session(monitor=None, state=state, notices=report.notices, fatal=True)

    version = report.settings.version if report.settings is not None else 2
    notices = report.notices
    try:
        monitor = call_sense_api(service.get_default_monitor)
        call_sense_api(monitor.activate)
    except TrackFetchError as exc:
        notices = _append_notice(notices, notice_for_failure(exc.kind, version))
        return Session(monitor=None, state=state, settings_version=version, notices=notices, fatal=exc.fatal)

    center = locator.locate() if locator is not None else FALLBACK_CENTER
    state = load_day(state, monitor, settings_version=version)
    logger.info("Session started on %s with %s points", today, len(state.points))
    return Session(monitor=monitor, state=state, center=center, settings_version=version, notices=notices)


def apply_state(session: Session, state: ViewState) -> Session:
    """Store a handler's result; a fatal fetch failure ends the session."""

    if state.failure is not None and state.failure.fatal:
        logger.error("Session ended after %s failure", state.failure.value)
        notices = _append_notice(session.notices, state.notice) if state.notice is not None else session.notices
        return replace(session, state=state, notices=notices, fatal=True)
    return replace(session, state=state)


def notice_shown(session: Session) -> Session:
    """Drop the view notice once displayed, unless it offers a settings action."""

    notice = session.state.notice
    if notice is None or notice.settings_action is not None:
        return session
    return replace(session, state=replace(session.state, notice=None))


def on_visibility_changed(session: Session, visible: bool) -> Session:
    """Deactivate the monitor when hidden; reactivate and redraw when shown."""

    monitor = session.monitor
    if monitor is None:
        return session

    try:
        if not visible:
            call_sense_api(monitor.deactivate)
            return session
        call_sense_api(monitor.activate)
    except TrackFetchError as exc:
        notice = notice_for_failure(exc.kind, session.settings_version)
        return apply_state(session, replace(session.state, notice=notice, failure=exc.kind))
    return replace(session, state=redraw(session.state))
