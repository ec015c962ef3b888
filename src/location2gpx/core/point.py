from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NoRoute:
    """
    Route component of a track key for points recorded without a route.
    Never equal to any Route, whatever its id.
    """

    @property
    def id(self) -> None:
        return None


@dataclass(frozen=True)
class Route:
    id: str


RouteKey = NoRoute | Route

NO_ROUTE = NoRoute()


@dataclass(frozen=True)
class TrackKey:
    device_id: str
    route: RouteKey = NO_ROUTE

    @property
    def route_id(self) -> str | None:
        return self.route.id


@dataclass(frozen=True)
class LocationPoint:
    """
    Represents a single normalized GPS fix.
    frozen=True keeps points immutable once they leave the normalizer.
    """
    coordinates: tuple[float, float]  # (latitude, longitude)
    time: datetime
    device_id: str
    route: RouteKey = NO_ROUTE
    elevation: float | None = None
    speed: float | None = None

    @property
    def lat(self) -> float:
        return self.coordinates[0]

    @property
    def lon(self) -> float:
        return self.coordinates[1]

    @property
    def route_id(self) -> str | None:
        return self.route.id

    @property
    def key(self) -> TrackKey:
        return TrackKey(self.device_id, self.route)
