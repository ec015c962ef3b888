from .errors import InvalidConfiguration, Location2GpxError, MalformedValue, MissingField, RecordError
from .point import NO_ROUTE, LocationPoint, NoRoute, Route, RouteKey, TrackKey
from .segment import Segment, Track, TrackCollection
