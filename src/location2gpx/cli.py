"""Command-line interface for location2gpx.

Run:
    location2gpx csv positions.csv 2019-10-01T00:00:00Z 2019-10-02T00:00:00Z out.gpx
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
from datetime import datetime

from location2gpx.config import AppConfig, load_config
from location2gpx.core.errors import Location2GpxError
from location2gpx.export import write_gpx
from location2gpx.modules.normalization.normalizer import parse_time
from location2gpx.pipeline import TrackBuilder
from location2gpx.sources import CsvRecordSource

logger = logging.getLogger("location2gpx")


def _rfc3339(text: str) -> datetime:
    try:
        return parse_time(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid RFC3339 time {text!r}: {exc}") from exc


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _segment_options(args: argparse.Namespace, config: AppConfig):
    # Flat files carry no ordering guarantee
    overrides = {"sort_points": True}
    if args.max_duration is not None:
        overrides["max_duration"] = args.max_duration
    if args.vw_tolerance is not None:
        overrides["vw_tolerance"] = args.vw_tolerance
    return dataclasses.replace(config.segments, **overrides)


def _cmd_csv(args: argparse.Namespace, config: AppConfig) -> int:
    source = CsvRecordSource(args.csv_path, sep=args.sep)
    builder = TrackBuilder(
        fields=config.fields,
        options=_segment_options(args, config),
        source=args.source,
        workers=args.workers,
    )
    collection = builder.build(source, args.start, args.end)
    if not len(collection):
        logger.warning("No positions found between %s and %s", args.start, args.end)

    write_gpx(collection, args.destination)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(
        prog="location2gpx",
        description="Convert your raw GPS data into a GPX file",
    )
    p.add_argument("--config", type=str, default=None,
                   help="Fields and segments configuration. Default: .loc2gpx.yaml, ~/.loc2gpx.yaml")
    p.add_argument("--log-level", type=str, default=None, help="Logging level, eg. debug, info, warning")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_csv = sub.add_parser("csv", help="Generate a GPX from a CSV file source")
    p_csv.add_argument("csv_path", type=str, help="CSV file source")
    p_csv.add_argument("start", type=_rfc3339, help="Start time, RFC3339 format")
    p_csv.add_argument("end", type=_rfc3339, help="End time, RFC3339 format")
    p_csv.add_argument("destination", type=str, help="GPX path file destination")
    p_csv.add_argument("--sep", type=str, default=",", help="CSV column separator")
    p_csv.add_argument("--source", type=str, default=None, help="Data source label, eg.: track app")
    p_csv.add_argument("--max-duration", type=float, default=None,
                       help="Max gap in seconds inside a segment, overrides the configuration")
    p_csv.add_argument("--vw-tolerance", type=float, default=None,
                       help="Visvalingam-Whyatt area tolerance, overrides the configuration")
    p_csv.add_argument("--workers", type=int, default=1, help="Threads used to build tracks")
    p_csv.set_defaults(func=_cmd_csv)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except Location2GpxError as exc:
        _setup_logging(args.log_level or "info")
        logger.error("%s", exc)
        return 1
    _setup_logging(args.log_level or config.logging.level)

    try:
        return int(args.func(args, config))
    except Location2GpxError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("Failed on read or write a file: %s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
