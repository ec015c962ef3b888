"""GPX 1.1 serialization of a TrackCollection."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

from location2gpx.core.point import LocationPoint
from location2gpx.core.segment import Track, TrackCollection

logger = logging.getLogger(__name__)

GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
TRACKPOINT_EXT_NAMESPACE = "http://www.garmin.com/xmlschemas/TrackPointExtension/v2"

ET.register_namespace("", GPX_NAMESPACE)
ET.register_namespace("gpxtpx", TRACKPOINT_EXT_NAMESPACE)


def _gpx(tag: str) -> str:
    return f"{{{GPX_NAMESPACE}}}{tag}"


def _tpx(tag: str) -> str:
    return f"{{{TRACKPOINT_EXT_NAMESPACE}}}{tag}"


def format_time(dt: datetime) -> str:
    """RFC3339 in UTC with a Z suffix, as GPX expects."""
    text = dt.astimezone(timezone.utc).isoformat()
    return text.replace("+00:00", "Z")


def _trkpt(parent: ET.Element, p: LocationPoint) -> None:
    pt = ET.SubElement(parent, _gpx("trkpt"), lat=repr(p.lat), lon=repr(p.lon))
    if p.elevation is not None:
        ET.SubElement(pt, _gpx("ele")).text = repr(p.elevation)
    ET.SubElement(pt, _gpx("time")).text = format_time(p.time)
    if p.speed is not None:
        # GPX 1.1 dropped <speed>, Garmin's TrackPointExtension carries it
        extensions = ET.SubElement(pt, _gpx("extensions"))
        tpx = ET.SubElement(extensions, _tpx("TrackPointExtension"))
        ET.SubElement(tpx, _tpx("speed")).text = repr(p.speed)


def _trk(parent: ET.Element, track: Track) -> None:
    trk = ET.SubElement(parent, _gpx("trk"))
    if track.name is not None:
        ET.SubElement(trk, _gpx("name")).text = track.name
    ET.SubElement(trk, _gpx("desc")).text = track.description
    if track.source is not None:
        ET.SubElement(trk, _gpx("src")).text = track.source
    for segment in track.segments:
        seg = ET.SubElement(trk, _gpx("trkseg"))
        for p in segment.points:
            _trkpt(seg, p)


def to_gpx_tree(collection: TrackCollection) -> ET.ElementTree:
    root = ET.Element(_gpx("gpx"), {
        "version": "1.1",
        "creator": collection.creator,
    })
    for track in collection:
        _trk(root, track)
    tree = ET.ElementTree(root)
    ET.indent(tree)
    return tree


def write_gpx(collection: TrackCollection, destination: str | Path | BinaryIO) -> None:
    """
    Args:
        collection: Assembled tracks.
        destination: Path or binary file object to write to.
    """
    tree = to_gpx_tree(collection)
    tree.write(destination, encoding="utf-8", xml_declaration=True)
    logger.info("Wrote %d tracks to %s", len(collection), getattr(destination, "name", destination))
