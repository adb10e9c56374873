"""Module entry point: python -m simple_tracks ..."""

from __future__ import annotations

from simple_tracks.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
