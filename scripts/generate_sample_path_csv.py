from __future__ import annotations

import argparse
import csv
import json
import random
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Final

from zoneinfo import ZoneInfo


TZ: Final[str] = "Europe/Helsinki"


@dataclass(frozen=True, slots=True)
class Cluster:
    name: str
    lat: float
    lon: float


def _epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def generate_points(
    *,
    days: int,
    points_per_day: int,
    seed: int,
    end_day: date,
    clusters: list[Cluster],
) -> list[dict[str, str]]:
    """Generate fake track rows covering ``days`` days up to and including end_day."""

    rng = random.Random(seed)
    tz = ZoneInfo(TZ)

    out: list[dict[str, str]] = []
    for offset in range(days - 1, -1, -1):
        day = end_day - timedelta(days=offset)
        cur = datetime.combine(day, time(7, 0), tzinfo=tz)
        cluster = rng.choice(clusters)
        lat, lon = cluster.lat, cluster.lon

        for _ in range(points_per_day):
            # Occasionally move to another place, otherwise wander nearby
            if rng.random() < 0.05:
                cluster = rng.choice(clusters)
                lat, lon = cluster.lat, cluster.lon
            lat += rng.uniform(-0.002, 0.002)
            lon += rng.uniform(-0.004, 0.004)

            cur = cur + timedelta(seconds=rng.uniform(120, 900))
            if cur.date() != day:
                break

            out.append(
                {
                    "geoTime": str(_epoch_ms(cur)),
                    "latitude": f"{lat:.7f}",
                    "longitude": f"{lon:.7f}",
                    "altitude": f"{rng.uniform(0, 60):.1f}",
                    "horizontalAccuracy": f"{rng.choice([3.0, 5.0, 8.0, 12.0, 20.0]):.1f}",
                    "speed": f"{rng.choice([0.0, rng.uniform(0.5, 2.5), rng.uniform(3.0, 12.0)]):.1f}",
                    "locationType": str(rng.choice([0, 1])),
                }
            )

    # Ensure stable order by time
    out.sort(key=lambda r: int(r["geoTime"]))
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake track CSV for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/Path.csv", help="Output CSV path")
    p.add_argument(
        "--settings-out",
        type=str,
        default="sample_data/motion_settings.json",
        help="Output motion data settings JSON (skipped if it exists)",
    )
    p.add_argument("--days", type=int, default=8, help="Number of days, ending today")
    p.add_argument("--points-per-day", type=int, default=60, help="Points per day (upper bound)")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    args = p.parse_args()

    clusters = [
        Cluster("espoo_office", 60.1841000, 24.8301000),
        Cluster("espoo_home", 60.2055000, 24.6559000),
        Cluster("helsinki_center", 60.1699000, 24.9384000),
        Cluster("tampere_trip", 61.4978000, 23.7610000),
    ]

    end_day = datetime.now(ZoneInfo(TZ)).date()
    rows = generate_points(
        days=args.days,
        points_per_day=args.points_per_day,
        seed=args.seed,
        end_day=end_day,
        clusters=clusters,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["geoTime", "latitude", "longitude", "altitude", "horizontalAccuracy", "speed", "locationType"]
    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        w.writerows(rows)
    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")

    settings_path = Path(args.settings_out)
    if not settings_path.exists():
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        settings = {"location_enabled": True, "places_visited": True, "version": 2, "api_set": 1}
        settings_path.write_text(json.dumps(settings, indent=2), encoding="utf-8")
        print(f"Generated: {settings_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
