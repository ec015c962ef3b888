from typing import Dict, Iterable, List

from location2gpx.core.point import LocationPoint, TrackKey


class TrackGrouper:
    """
    Partitions a stream of points into tracks keyed by (device, route).
    Tracks come out in order of first appearance; points keep their input order.
    The grouper never re-sorts: time ordering is the data source's job.
    """

    def group(self, points: Iterable[LocationPoint]) -> Dict[TrackKey, List[LocationPoint]]:
        tracks: Dict[TrackKey, List[LocationPoint]] = {}
        for p in points:
            tracks.setdefault(p.key, []).append(p)
        return tracks
