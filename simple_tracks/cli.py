"""Command-line interface for simple_tracks.

Run:
    python -m simple_tracks day --csv Path.csv --html tracks.html
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

from simple_tracks.config import AppConfig, load_config
from simple_tracks.geolocate import CurrentPositionLocator
from simple_tracks.history import ONE_DAY, ViewState, can_go_next, can_go_previous, load_day, show_last_days
from simple_tracks.notices import FUTURE_NOT_ALLOWED, TOO_FAR_PAST, Notice, SettingsAction
from simple_tracks.render import write_geojson, write_map_html
from simple_tracks.sense import CsvSenseService
from simple_tracks.session import Session, initialize
from simple_tracks.timeutils import dt_from_epoch_ms, parse_day, today_in


def _config_from_args(args: argparse.Namespace) -> AppConfig:
    config = load_config(args.config)
    overrides = {
        "track_csv": args.csv,
        "settings_json": args.settings,
        "tz_name": args.tz,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})
    if getattr(args, "no_locate", False):
        config = replace(config, locate=False)
    return config


def _service(config: AppConfig) -> CsvSenseService:
    return CsvSenseService(config.track_csv, config.settings_json, tz_name=config.tz_name)


_SETTINGS_FLAGS = {
    SettingsAction.LOCATION: "--location on",
    SettingsAction.SENSE: "--places on",
}


def _print_notice(notice: Notice) -> None:
    print(f"[{notice.title}] {notice.message}", file=sys.stderr)
    if notice.settings_action is not None:
        print(f"  -> run: python -m simple_tracks settings {_SETTINGS_FLAGS[notice.settings_action]}", file=sys.stderr)


def _print_state(state: ViewState, tz_name: str) -> None:
    print("### Tracks")
    print(f"view={state.mode}, label={state.label}")
    print(f"points={len(state.points)}, segments={len(state.rendered.segments)}")
    if state.points:
        start = dt_from_epoch_ms(state.points[0].timestamp_ms, tz_name)
        end = dt_from_epoch_ms(state.points[-1].timestamp_ms, tz_name)
        print(f"first={start.isoformat(sep=' ')}, last={end.isoformat(sep=' ')}")
    if state.rendered.center is not None:
        c = state.rendered.center
        print(f"center=({c.latitude:.6f}, {c.longitude:.6f}), zoom={state.rendered.zoom}")


def _finish(session: Session, state: ViewState, args: argparse.Namespace, config: AppConfig) -> int:
    _print_state(state, config.tz_name)
    if args.html:
        write_map_html(state.rendered, args.html, fallback_center=session.center, tiles=config.tiles)
        print(f"Exported: {args.html}")
    if args.geojson:
        write_geojson(state.rendered.segments, args.geojson)
        print(f"Exported: {args.geojson}")
    if state.notice is not None:
        _print_notice(state.notice)
    if state.failure is not None:
        return 2 if state.failure.fatal else 1
    return 0


def _start(config: AppConfig) -> tuple[Session, int | None]:
    """Start a session; the second item is an exit code when it cannot continue."""

    locator = CurrentPositionLocator() if config.locate else None
    session = initialize(_service(config), today_in(config.tz_name), locator)
    for notice in session.notices:
        _print_notice(notice)
    if not session.ready:
        return session, 2 if session.fatal else 1
    return session, None


def _cmd_day(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    session, code = _start(config)
    if code is not None:
        return code

    state = session.state
    if args.day is not None:
        today = state.cursor
        day = parse_day(args.day)
        # a rejected day is a notice, not a failure
        if not can_go_next(day - ONE_DAY, today):
            _print_notice(FUTURE_NOT_ALLOWED)
            return 0
        if not can_go_previous(day + ONE_DAY, today, config.history_days):
            _print_notice(TOO_FAR_PAST)
            return 0
        if day != today:
            state = load_day(replace(state, cursor=day), session.monitor, settings_version=session.settings_version)
    return _finish(session, state, args, config)


def _cmd_week(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    session, code = _start(config)
    if code is not None:
        return code

    today = session.state.cursor
    state = show_last_days(
        session.state,
        session.monitor,
        today,
        config.history_days,
        settings_version=session.settings_version,
    )
    return _finish(session, state, args, config)


def _on_off(value: str | None) -> bool | None:
    if value is None:
        return None
    return value == "on"


def _cmd_settings(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    service = _service(config)
    changes = {
        "location_enabled": _on_off(args.location),
        "places_visited": _on_off(args.places),
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    settings = service.update_settings(**changes) if changes else service.get_settings()

    print(f"### Motion data settings ({config.settings_json})")
    print(f"location_enabled={settings.location_enabled}")
    print(f"places_visited={settings.places_visited}")
    print(f"version={settings.version}, api_set={settings.api_set}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, default=None, help="TOML config file (default ./simple_tracks.toml)")
    common.add_argument("--csv", type=str, default=None, help="Track point CSV export")
    common.add_argument("--settings", type=str, default=None, help="Motion data settings JSON")
    common.add_argument("--tz", type=str, default=None, help="Time zone (IANA)")

    output = argparse.ArgumentParser(add_help=False)
    output.add_argument("--html", type=str, default=None, help="Write the map as HTML")
    output.add_argument("--geojson", type=str, default=None, help="Write segments as GeoJSON")
    output.add_argument("--no-locate", action="store_true", help="Do not look up the current position")

    p = argparse.ArgumentParser(prog="simple_tracks")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_day = sub.add_parser("day", parents=[common, output], help="Show the track of one day")
    p_day.add_argument("--day", type=str, default=None, help="Day to show, YYYY-MM-DD (default today)")
    p_day.set_defaults(func=_cmd_day)

    p_week = sub.add_parser("week", parents=[common, output], help="Show the last seven days as one track")
    p_week.set_defaults(func=_cmd_week)

    p_set = sub.add_parser("settings", parents=[common], help="Show or change motion data settings")
    p_set.add_argument("--location", choices=["on", "off"], default=None, help="Location switch")
    p_set.add_argument("--places", choices=["on", "off"], default=None, help="Places visited switch")
    p_set.set_defaults(func=_cmd_settings)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
