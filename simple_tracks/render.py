"""Turn an ordered track into drawable segments and map output."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import folium

from simple_tracks.models import (
    DEFAULT_STROKE,
    FALLBACK_CENTER,
    TRACK_ZOOM_LEVEL,
    GeoPosition,
    Segment,
    StrokeStyle,
    TrackPoint,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderResult:
    """What the map should show for one track.

    ``center`` and ``zoom`` are None when there is nothing to recenter on.
    """

    center: GeoPosition | None
    zoom: int | None
    segments: tuple[Segment, ...]


EMPTY_RENDER = RenderResult(center=None, zoom=None, segments=())


def render(
    points: Sequence[TrackPoint],
    *,
    style: StrokeStyle = DEFAULT_STROKE,
    zoom: int = TRACK_ZOOM_LEVEL,
) -> RenderResult:
    """Connect each point to the next one, in list order.

    Args:
        points: Track points ordered by time ascending.
        style: Stroke attributes applied to every segment.
        zoom: Zoom level used when recentering on the first point.

    Returns:
        RenderResult with ``len(points) - 1`` segments, centered on the first
        point. An empty list gives EMPTY_RENDER.
    """

    if not points:
        return EMPTY_RENDER
    segments = tuple(Segment(start=a, end=b, style=style) for a, b in zip(points, points[1:]))
    return RenderResult(center=points[0].position, zoom=zoom, segments=segments)


def build_map(
    result: RenderResult,
    *,
    fallback_center: GeoPosition = FALLBACK_CENTER,
    fallback_zoom: int = TRACK_ZOOM_LEVEL,
    tiles: str = "OpenStreetMap",
) -> folium.Map:
    """Draw a RenderResult on a folium map, one PolyLine per segment."""

    center = result.center or fallback_center
    zoom = result.zoom if result.zoom is not None else fallback_zoom
    m = folium.Map(location=[center.latitude, center.longitude], zoom_start=zoom, tiles=tiles)
    for seg in result.segments:
        folium.PolyLine(
            [(seg.start.latitude, seg.start.longitude), (seg.end.latitude, seg.end.longitude)],
            color=seg.style.hex_color,
            weight=seg.style.thickness,
            opacity=seg.style.opacity,
            dash_array="6 6" if seg.style.dashed else None,
        ).add_to(m)
    return m


def write_map_html(result: RenderResult, out_path: str | Path, **kwargs: Any) -> None:
    """Save build_map(result) as a standalone HTML page."""

    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    build_map(result, **kwargs).save(str(p))
    logger.info("Wrote map with %s segments to %s", len(result.segments), p)


def segments_to_geojson(segments: Sequence[Segment]) -> dict[str, Any]:
    """GeoJSON FeatureCollection with one LineString per segment.

    Coordinates follow GeoJSON order (lon, lat).
    """

    features = []
    for i, seg in enumerate(segments):
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [
                        [seg.start.longitude, seg.start.latitude],
                        [seg.end.longitude, seg.end.latitude],
                    ],
                },
                "properties": {
                    "index": i,
                    "start_ms": seg.start.timestamp_ms,
                    "end_ms": seg.end.timestamp_ms,
                    "stroke": seg.style.hex_color,
                    "stroke-width": seg.style.thickness,
                    "stroke-opacity": seg.style.opacity,
                    "dashed": seg.style.dashed,
                },
            }
        )
    return {"type": "FeatureCollection", "features": features}


def write_geojson(segments: Sequence[Segment], out_path: str | Path) -> None:
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(segments_to_geojson(segments), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Wrote %s segments to %s", len(segments), p)
