"""Unit tests for time utilities."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from simple_tracks.timeutils import (
    day_window_ms,
    dt_from_epoch_ms,
    epoch_ms_from_dt,
    format_day,
    format_range,
    parse_day,
    tzinfo_from_name,
)


def test_invalid_timezone() -> None:
    with pytest.raises(ValueError, match="Invalid time zone"):
        tzinfo_from_name("Mars/Olympus_Mons")


def test_epoch_roundtrip() -> None:
    dt = datetime(2026, 3, 18, 12, 30, tzinfo=UTC)

    assert dt_from_epoch_ms(epoch_ms_from_dt(dt), "UTC") == dt


def test_naive_datetime_is_utc() -> None:
    assert epoch_ms_from_dt(datetime(1970, 1, 1, 0, 0, 1)) == 1000


def test_parse_day() -> None:
    assert parse_day(" 2026-03-18 ") == date(2026, 3, 18)
    with pytest.raises(ValueError, match="Cannot parse date"):
        parse_day("18.03.2026")


class TestDayWindow:
    """Tests for day_window_ms."""

    def test_one_day_utc(self) -> None:
        start, end = day_window_ms(date(2026, 3, 18), timedelta(days=1), "UTC")

        assert start == epoch_ms_from_dt(datetime(2026, 3, 18, tzinfo=UTC))
        assert end - start == 24 * 3600 * 1000

    def test_local_midnight(self) -> None:
        start, _ = day_window_ms(date(2026, 1, 15), timedelta(days=1), "Europe/Helsinki")

        # UTC+2 in winter
        assert start == epoch_ms_from_dt(datetime(2026, 1, 14, 22, tzinfo=UTC))

    def test_dst_day_is_23_hours(self) -> None:
        # Europe/Helsinki switches to summer time on 2026-03-29
        start, end = day_window_ms(date(2026, 3, 29), timedelta(days=1), "Europe/Helsinki")

        assert end - start == 23 * 3600 * 1000


def test_format_day_is_locale_independent() -> None:
    assert format_day(date(2026, 10, 9)) == "Oct 09 2026"


def test_format_range_newest_first() -> None:
    assert format_range(date(2026, 3, 18), date(2026, 3, 11)) == "Mar 18 2026 - Mar 11 2026"
