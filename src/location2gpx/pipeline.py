"""Track-building pipeline.

raw records -> PointNormalizer -> TrackGrouper -> SegmentSplitter
-> VisvalingamSimplifier (optional) -> TrackAssembler -> TrackCollection
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from location2gpx.core.errors import InvalidConfiguration
from location2gpx.core.point import LocationPoint, TrackKey
from location2gpx.core.segment import Segment, TrackCollection
from location2gpx.metrics import segments_compression_ratio
from location2gpx.modules.assembly import TrackAssembler
from location2gpx.modules.grouping import TrackGrouper
from location2gpx.modules.normalization import FieldMapping, PointNormalizer
from location2gpx.modules.normalization.normalizer import parse_time
from location2gpx.modules.segmentation import SegmentSplitter
from location2gpx.modules.simplification import VisvalingamSimplifier
from location2gpx.modules.simplification.visvalingam import validate_tolerance

logger = logging.getLogger(__name__)

# Longest gap timedelta can hold, in whole days. inf and beyond overflow
MAX_DURATION_SECONDS = timedelta.max.days * 86400


@dataclass
class SegmentOptions:
    """Segment parameters.

    Attributes:
        max_duration: Largest gap in seconds between two points of a segment.
            None keeps every track in a single segment.
        vw_tolerance: Visvalingam-Whyatt area tolerance in square degrees.
            None or 0 disables simplification.
        sort_points: Stable-sort points by time before grouping. Needed for
            sources that do not return records in time order, like flat files.
    """

    max_duration: Optional[float] = None
    vw_tolerance: Optional[float] = None
    sort_points: bool = False

    def __post_init__(self) -> None:
        if self.max_duration is not None:
            if isinstance(self.max_duration, bool) or not isinstance(self.max_duration, (int, float)):
                raise InvalidConfiguration(f"max_duration must be a number of seconds, got {self.max_duration!r}")
            if math.isnan(self.max_duration) or self.max_duration < 0:
                raise InvalidConfiguration(f"max_duration must be zero or positive, got {self.max_duration!r}")
            if self.max_duration > MAX_DURATION_SECONDS:
                raise InvalidConfiguration(
                    f"max_duration must be at most {MAX_DURATION_SECONDS:.0f} seconds, got {self.max_duration!r}"
                )
        self.vw_tolerance = validate_tolerance(self.vw_tolerance)
        if not isinstance(self.sort_points, bool):
            raise InvalidConfiguration(f"sort_points must be true or false, got {self.sort_points!r}")

    @property
    def max_segment_time(self) -> Optional[timedelta]:
        if self.max_duration is None:
            return None
        return timedelta(seconds=self.max_duration)


class TrackBuilder:
    """
    Builds a TrackCollection from raw location records.

    Every stage either fully succeeds or raises; a single bad record aborts the
    whole build.
    """

    def __init__(
        self,
        fields: FieldMapping | None = None,
        options: SegmentOptions | None = None,
        source: str | None = None,
        workers: int = 1,
    ):
        """
        Args:
            fields: Source field names. Defaults to FieldMapping().
            options: Segment parameters. Defaults to SegmentOptions().
            source: Data source label attached to every track.
            workers: Number of threads used to split and simplify tracks.
        """
        if workers < 1:
            raise InvalidConfiguration(f"workers must be at least 1, got {workers}")
        self.options = options or SegmentOptions()
        self.workers = workers

        self.normalizer = PointNormalizer(fields)
        self.grouper = TrackGrouper()
        self.splitter = SegmentSplitter(self.options.max_segment_time)
        self.simplifier = VisvalingamSimplifier(self.options.vw_tolerance)
        self.assembler = TrackAssembler(source=source)

    def build(
        self,
        records: Iterable[Mapping[str, Any]],
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> TrackCollection:
        """
        Args:
            records: Raw records, mapping source field names to values.
            start: Keep only points at or after this time.
            end: Keep only points at or before this time.
        """
        points = self.normalize(records, start, end)
        grouped = self.grouper.group(points)
        logger.info("Grouped %d points into %d tracks", len(points), len(grouped))

        items = list(grouped.items())
        if self.workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                built = list(executor.map(self._build_track, items))
        else:
            built = [self._build_track(item) for item in items]

        collection = self.assembler.assemble(built)
        logger.info(
            "Built %d tracks with %d segments and %d points",
            len(collection),
            sum(len(t.segments) for t in collection),
            collection.point_count,
        )
        return collection

    def normalize(
        self,
        records: Iterable[Mapping[str, Any]],
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> List[LocationPoint]:
        start = _window_bound("start", start)
        end = _window_bound("end", end)
        points = []
        total = 0
        for p in self.normalizer.normalize_all(records):
            total += 1
            if start is not None and p.time < start:
                continue
            if end is not None and p.time > end:
                continue
            points.append(p)

        if total != len(points):
            logger.debug("Dropped %d of %d points outside the time window", total - len(points), total)
        if self.options.sort_points:
            points.sort(key=lambda p: p.time)
        return points

    def _build_track(self, item: Tuple[TrackKey, List[LocationPoint]]) -> Tuple[TrackKey, List[Segment]]:
        key, points = item
        segments = self.splitter.split(points)
        if not self.simplifier.enabled:
            return key, segments

        simplified = [self.simplifier.simplify_segment(s) for s in segments]
        logger.debug(
            "Track %s/%s: simplified %d segments, ratio %.2f",
            key.device_id,
            key.route_id,
            len(segments),
            segments_compression_ratio(segments, simplified),
        )
        return key, simplified


def _window_bound(name: str, value: datetime | None) -> datetime | None:
    if value is None:
        return None
    try:
        return parse_time(value)
    except ValueError as exc:
        raise InvalidConfiguration(f"Time window {name} must be a datetime with offset, got {value!r}") from exc
