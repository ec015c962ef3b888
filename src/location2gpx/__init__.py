"""location2gpx - GPX generator from many location sources."""

from location2gpx.core import (
    InvalidConfiguration,
    Location2GpxError,
    LocationPoint,
    MalformedValue,
    MissingField,
    NoRoute,
    Route,
    Segment,
    Track,
    TrackCollection,
    TrackKey,
)
from location2gpx.modules.normalization import FieldMapping, PointNormalizer
from location2gpx.pipeline import SegmentOptions, TrackBuilder

__version__ = "0.1.0"
