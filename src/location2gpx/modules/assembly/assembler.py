from typing import Iterable, List, Optional, Tuple

from location2gpx.core.point import TrackKey
from location2gpx.core.segment import Segment, Track, TrackCollection


class TrackAssembler:
    """
    Folds the segments of each track into the collection handed to the serializer.
    """

    def __init__(self, source: Optional[str] = None, creator: str = "location2gpx"):
        """
        Args:
            source: Free-form data source label attached to every track, eg. the tracking app.
            creator: Creator tag of the resulting collection.
        """
        self.source = source
        self.creator = creator

    def assemble(self, tracks: Iterable[Tuple[TrackKey, List[Segment]]]) -> TrackCollection:
        """
        Tracks are kept in the given order. Tracks without segments are omitted.
        """
        collection = TrackCollection(creator=self.creator)
        for key, segments in tracks:
            segments = [s for s in segments if s.points]
            if not segments:
                continue
            collection.tracks.append(Track(
                device_id=key.device_id,
                route_id=key.route_id,
                segments=segments,
                source=self.source,
            ))
        return collection
