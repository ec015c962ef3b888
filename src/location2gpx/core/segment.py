from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterator

from .point import LocationPoint


@dataclass(frozen=True)
class Segment:
    """
    A maximal time-contiguous run of points within one track.
    """
    points: list[LocationPoint] = field(default_factory=list)

    @property
    def start_time(self) -> datetime:
        if not self.points:
            raise ValueError("Segment is empty")
        return self.points[0].time

    @property
    def end_time(self) -> datetime:
        if not self.points:
            raise ValueError("Segment is empty")
        return self.points[-1].time

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class Track:
    """
    Output unit for one (device, route) pair.

    name and description are the metadata handed to the serializer: the route id
    when the track has one, otherwise the date of its first point.
    """
    device_id: str
    route_id: str | None = None
    segments: list[Segment] = field(default_factory=list)
    source: str | None = None

    @property
    def name(self) -> str | None:
        if self.route_id is not None:
            return self.route_id
        first = self.first_date
        return first.isoformat() if first else None

    @property
    def description(self) -> str:
        return f"Tracked by `{self.device_id}`"

    @property
    def first_date(self) -> date | None:
        for segment in self.segments:
            if segment.points:
                return segment.start_time.date()
        return None

    @property
    def point_count(self) -> int:
        return sum(len(s) for s in self.segments)


@dataclass
class TrackCollection:
    tracks: list[Track] = field(default_factory=list)
    creator: str = "location2gpx"

    def __iter__(self) -> Iterator[Track]:
        return iter(self.tracks)

    def __len__(self) -> int:
        return len(self.tracks)

    def __getitem__(self, index: int) -> Track:
        return self.tracks[index]

    @property
    def point_count(self) -> int:
        return sum(t.point_count for t in self.tracks)
