"""Module entry point: python -m location2gpx ..."""

from location2gpx.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
