from datetime import timedelta
from typing import List, Optional

from location2gpx.core.errors import InvalidConfiguration
from location2gpx.core.point import LocationPoint
from location2gpx.core.segment import Segment


class SegmentSplitter:
    """
    Splits one track's time-ordered points into segments wherever the gap
    between two consecutive points exceeds max_segment_time.
    """

    def __init__(self, max_segment_time: Optional[timedelta] = None):
        """
        Args:
            max_segment_time: Largest gap allowed inside a segment. None keeps
                the whole track as a single segment.
        """
        if max_segment_time is not None:
            if not isinstance(max_segment_time, timedelta):
                raise InvalidConfiguration(f"max_segment_time must be a timedelta, got {max_segment_time!r}")
            if max_segment_time < timedelta(0):
                raise InvalidConfiguration(f"max_segment_time must not be negative, got {max_segment_time}")
        self.max_segment_time = max_segment_time

    def split(self, points: List[LocationPoint]) -> List[Segment]:
        if not points:
            return []
        if self.max_segment_time is None:
            return [Segment(points=list(points))]

        segments = []
        current = [points[0]]
        for prev, p in zip(points, points[1:]):
            if p.time - prev.time > self.max_segment_time:
                segments.append(Segment(points=current))
                current = []
            current.append(p)
        segments.append(Segment(points=current))
        return segments
