"""Unit tests for track rendering."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import folium
import pytest

from simple_tracks.models import FALLBACK_CENTER, TRACK_ZOOM_LEVEL, GeoPosition, StrokeStyle
from simple_tracks.render import (
    EMPTY_RENDER,
    build_map,
    render,
    segments_to_geojson,
    write_geojson,
    write_map_html,
)
from tests.helpers import point_at

DAY = date(2026, 3, 18)


class TestRender:
    """Tests for render()."""

    def test_empty_list_has_no_segments_and_no_center(self) -> None:
        result = render([])

        assert result == EMPTY_RENDER
        assert result.segments == ()
        assert result.center is None
        assert result.zoom is None

    def test_single_point_recenters_without_segments(self) -> None:
        pt = point_at(DAY, 8, lat=60.2, lon=24.9)

        result = render([pt])

        assert result.segments == ()
        assert result.center == GeoPosition(60.2, 24.9)
        assert result.zoom == TRACK_ZOOM_LEVEL

    @pytest.mark.parametrize("n", [2, 3, 10])
    def test_segments_connect_consecutive_points(self, n: int) -> None:
        points = [point_at(DAY, 8, i, lat=60.0 + i * 0.01, lon=24.0 + i * 0.01) for i in range(n)]

        result = render(points)

        assert len(result.segments) == n - 1
        for i, seg in enumerate(result.segments):
            assert seg.start == points[i]
            assert seg.end == points[i + 1]
        assert result.center == points[0].position

    def test_fixed_stroke_attributes(self) -> None:
        points = [point_at(DAY, 8), point_at(DAY, 9), point_at(DAY, 10)]

        result = render(points)

        for seg in result.segments:
            assert seg.style.thickness == 3
            assert seg.style.color == (255, 100, 100, 255)
            assert seg.style.dashed is False
            assert seg.style.hex_color == "#6464ff"

    def test_render_is_idempotent(self) -> None:
        points = (point_at(DAY, 8), point_at(DAY, 9), point_at(DAY, 10))

        assert render(points) == render(points)

    def test_custom_style_and_zoom(self) -> None:
        style = StrokeStyle(thickness=5, color=(128, 0, 0, 0), dashed=True)

        result = render([point_at(DAY, 8), point_at(DAY, 9)], style=style, zoom=10)

        assert result.zoom == 10
        assert result.segments[0].style is style
        assert style.opacity == pytest.approx(128 / 255)


class TestMapOutput:
    """Tests for folium and GeoJSON output."""

    def test_build_map_adds_one_polyline_per_segment(self) -> None:
        result = render([point_at(DAY, 8), point_at(DAY, 9, lat=60.18), point_at(DAY, 10, lat=60.19)])

        m = build_map(result)

        lines = [child for child in m._children.values() if isinstance(child, folium.PolyLine)]
        assert len(lines) == 2
        assert m.location == [60.17, 24.83]

    def test_build_map_uses_fallback_center_for_empty_track(self) -> None:
        m = build_map(EMPTY_RENDER, fallback_center=GeoPosition(1.0, 2.0))

        assert m.location == [1.0, 2.0]
        assert not any(isinstance(child, folium.PolyLine) for child in m._children.values())

    def test_default_fallback_is_espoo(self) -> None:
        m = build_map(EMPTY_RENDER)

        assert m.location == [FALLBACK_CENTER.latitude, FALLBACK_CENTER.longitude]

    def test_write_map_html(self, tmp_path: Path) -> None:
        out = tmp_path / "maps" / "tracks.html"

        write_map_html(render([point_at(DAY, 8), point_at(DAY, 9)]), out)

        assert out.exists()
        assert "leaflet" in out.read_text(encoding="utf-8").lower()

    def test_geojson_uses_lon_lat_order(self) -> None:
        a = point_at(DAY, 8, lat=60.1, lon=24.1)
        b = point_at(DAY, 9, lat=60.2, lon=24.2)

        data = segments_to_geojson(render([a, b]).segments)

        assert data["type"] == "FeatureCollection"
        (feature,) = data["features"]
        assert feature["geometry"]["coordinates"] == [[24.1, 60.1], [24.2, 60.2]]
        assert feature["properties"]["start_ms"] == a.timestamp_ms
        assert feature["properties"]["stroke-width"] == 3

    def test_write_geojson(self, tmp_path: Path) -> None:
        out = tmp_path / "segments.geojson"

        write_geojson(render([point_at(DAY, 8), point_at(DAY, 9), point_at(DAY, 10)]).segments, out)

        data = json.loads(out.read_text(encoding="utf-8"))
        assert [f["properties"]["index"] for f in data["features"]] == [0, 1]
