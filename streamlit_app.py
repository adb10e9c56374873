from __future__ import annotations

from pathlib import Path

import streamlit as st
import streamlit.components.v1 as components

from simple_tracks.config import load_config
from simple_tracks.geolocate import CurrentPositionLocator
from simple_tracks.history import next_day, previous_day, show_last_days
from simple_tracks.notices import Notice, SettingsAction
from simple_tracks.render import build_map
from simple_tracks.sense import CsvSenseService
from simple_tracks.session import Session, apply_state, initialize, notice_shown, on_visibility_changed
from simple_tracks.timeutils import today_in

_SESSION_KEY = "tracks_session"
_SESSION_ID_KEY = "tracks_session_id"


@st.cache_resource(show_spinner=False)
def _locator() -> CurrentPositionLocator:
    return CurrentPositionLocator()


def _session_id(csv_path: str, settings_path: str, tz_name: str) -> tuple[str, str, str]:
    return (str(Path(csv_path).resolve()), str(Path(settings_path).resolve()), tz_name)


def _start_session(service: CsvSenseService, tz_name: str, locate: bool) -> Session:
    with st.spinner("Reading track history ..."):
        return initialize(service, today_in(tz_name), _locator() if locate else None)


def _settings_editor(service: CsvSenseService, action: SettingsAction, key: str) -> None:
    """Inline replacement for the system settings page."""

    settings = service.get_settings()
    with st.expander(f"Open {action.value} settings", expanded=True):
        if action is SettingsAction.LOCATION:
            enabled = st.toggle("Location", value=settings.location_enabled, key=f"{key}_location")
            changes = {"location_enabled": enabled}
        else:
            enabled = st.toggle("Places visited", value=settings.places_visited, key=f"{key}_places")
            changes = {"places_visited": enabled}
        if st.button("Save and restart", key=f"{key}_save"):
            service.update_settings(**changes)
            st.session_state.pop(_SESSION_KEY, None)
            st.rerun()


def _show_notice(notice: Notice, service: CsvSenseService, key: str) -> None:
    if notice.fatal:
        st.error(notice.message)
    elif notice.settings_action is not None:
        st.warning(notice.message)
        _settings_editor(service, notice.settings_action, key)
    else:
        st.info(notice.message)


def _end_if_not_ready(session: Session) -> None:
    """Store a session that can no longer navigate and rerun into its notices."""

    if not session.ready:
        st.session_state[_SESSION_KEY] = session
        st.rerun()


def main() -> None:
    st.set_page_config(page_title="Simple Tracks", layout="wide")
    st.title("Simple Tracks")

    config = load_config()
    with st.sidebar:
        st.subheader("Data and time zone")
        tz_name = st.text_input("Time zone (IANA)", value=config.tz_name)
        csv_path = st.text_input("Track point CSV", value=str(config.track_csv))
        settings_path = st.text_input("Motion data settings JSON", value=str(config.settings_json))
        locate = st.checkbox("Center map on my position", value=config.locate)
        visible = st.toggle("Tracking session active", value=True)

        if st.button("Restart session", use_container_width=True):
            st.session_state.pop(_SESSION_KEY, None)

    service = CsvSenseService(csv_path, settings_path, tz_name=tz_name)
    sid = _session_id(csv_path, settings_path, tz_name)
    if st.session_state.get(_SESSION_ID_KEY) != sid:
        st.session_state.pop(_SESSION_KEY, None)
        st.session_state[_SESSION_ID_KEY] = sid

    session: Session | None = st.session_state.get(_SESSION_KEY)
    if session is None:
        try:
            session = _start_session(service, tz_name, locate)
        except ValueError as exc:
            st.exception(exc)
            return

    for i, notice in enumerate(session.notices):
        _show_notice(notice, service, key=f"startup_{i}")
    if not session.ready:
        st.session_state[_SESSION_KEY] = session
        return

    was_visible = st.session_state.get("tracks_visible", True)
    if visible != was_visible:
        session = on_visibility_changed(session, visible)
        st.session_state["tracks_visible"] = visible
        _end_if_not_ready(session)

    today = today_in(tz_name)
    c1, c2, c3 = st.columns(3)
    state = session.state
    if c1.button("Previous day", use_container_width=True, disabled=not visible):
        state = previous_day(
            state, session.monitor, today, days=config.history_days, settings_version=session.settings_version
        )
    if c2.button("Next day", use_container_width=True, disabled=not visible):
        state = next_day(state, session.monitor, today, settings_version=session.settings_version)
    if c3.button(f"Last {config.history_days} days", use_container_width=True, disabled=not visible):
        state = show_last_days(
            state, session.monitor, today, config.history_days, settings_version=session.settings_version
        )
    session = apply_state(session, state)
    _end_if_not_ready(session)

    st.subheader(state.label)
    if state.notice is not None:
        _show_notice(state.notice, service, key="view")
    st.session_state[_SESSION_KEY] = notice_shown(session)

    m1, m2 = st.columns(2)
    m1.metric("Track points", str(len(state.points)))
    m2.metric("Segments", str(len(state.rendered.segments)))

    fmap = build_map(state.rendered, fallback_center=session.center, tiles=config.tiles)
    components.html(fmap.get_root().render(), height=560)

    st.caption(
        "Day view covers [day 00:00, next day 00:00) in the selected time zone; "
        f"the last-days view covers {config.history_days + 1} days ending today as one continuous track."
    )


if __name__ == "__main__":
    main()
