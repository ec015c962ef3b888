import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

from location2gpx.core.errors import MalformedValue, MissingField, RecordError
from location2gpx.core.point import NO_ROUTE, LocationPoint, Route, RouteKey

DEFAULT_ROUTE_FIELD = "route"
DEFAULT_SPEED_FIELD = "speed"
DEFAULT_ELEVATION_FIELD = "elevation"

_COORD_SEPARATOR = re.compile(r"[,;]|\s+")


@dataclass
class FieldMapping:
    """
    Maps each logical field to the name it has in the source records.

    Optional fields left as None fall back to their default source name and are
    read leniently: a malformed value becomes None. Optional fields set
    explicitly must be well-formed whenever they are present.

    Args:
        device_id: Source field holding the tracker identifier.
        time: Source field holding the fix timestamp.
        coordinates: Source field holding the position pair.
        route: Source field holding the route identifier.
        speed: Source field holding the speed.
        elevation: Source field holding the elevation in meters.
        flip_coordinates: True when the source stores (longitude, latitude).
    """
    device_id: str = "device"
    time: str = "time"
    coordinates: str = "coordinates"
    route: Optional[str] = None
    speed: Optional[str] = None
    elevation: Optional[str] = None
    flip_coordinates: bool = False

    @property
    def route_field(self) -> str:
        return self.route or DEFAULT_ROUTE_FIELD

    @property
    def speed_field(self) -> str:
        return self.speed or DEFAULT_SPEED_FIELD

    @property
    def elevation_field(self) -> str:
        return self.elevation or DEFAULT_ELEVATION_FIELD


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        # pandas hands empty cells over as NaN
        return True
    return isinstance(value, str) and not value.strip()


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value.strip())
    raise ValueError(f"unsupported type {type(value).__name__}")


def parse_device_id(value: Any) -> str:
    if isinstance(value, bool):
        raise ValueError("booleans are not identifiers")
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        # 251.0 and 251 identify the same device
        return str(int(value)) if value.is_integer() else str(value)
    raise ValueError(f"unsupported type {type(value).__name__}")


def parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            raise ValueError("timestamp has no timezone offset")
        return value
    if isinstance(value, bool):
        raise ValueError("booleans are not timestamps")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError("timestamp is not finite")
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except OSError as exc:
            raise ValueError(f"timestamp {value} out of range") from exc
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
        if dt.tzinfo is None:
            raise ValueError("timestamp has no timezone offset")
        return dt
    raise ValueError(f"unsupported type {type(value).__name__}")


def parse_coordinates(value: Any, flip: bool = False) -> tuple[float, float]:
    """
    Parses a position pair into (latitude, longitude).

    Accepts a two-element sequence or a string holding two numbers separated by
    a comma, a semicolon or whitespace.
    """
    if isinstance(value, str):
        parts = [p for p in _COORD_SEPARATOR.split(value.strip()) if p]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        raise ValueError(f"unsupported type {type(value).__name__}")

    if len(parts) != 2:
        raise ValueError(f"expected 2 values, got {len(parts)}")

    first, second = _to_float(parts[0]), _to_float(parts[1])
    lat, lon = (second, first) if flip else (first, second)

    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise ValueError("coordinates are not finite")
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"latitude {lat} out of range")
    if not -180.0 <= lon <= 180.0:
        raise ValueError(f"longitude {lon} out of range")
    return (lat, lon)


def parse_route(value: Any) -> RouteKey:
    if isinstance(value, (list, tuple)):
        if not value:
            return NO_ROUTE
        value = value[0]
    if isinstance(value, bool):
        raise ValueError("booleans are not route identifiers")
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return Route(text) if text else NO_ROUTE
    raise ValueError(f"unsupported type {type(value).__name__}")


def parse_measure(value: Any) -> float:
    result = _to_float(value)
    if not math.isfinite(result):
        raise ValueError("value is not finite")
    return result


Extractor = Callable[[Mapping[str, Any]], Any]


class PointNormalizer:
    """
    Converts loosely-typed raw records into LocationPoints.

    The field mapping is resolved once, at construction, into one extraction
    function per logical field.
    """

    def __init__(self, fields: FieldMapping | None = None):
        self.fields = fields or FieldMapping()
        flip = self.fields.flip_coordinates

        self._device_id = self._required("device_id", self.fields.device_id, "a string or integer identifier", parse_device_id)
        self._time = self._required("time", self.fields.time, "an RFC3339 timestamp with offset", parse_time)
        self._coordinates = self._required(
            "coordinates", self.fields.coordinates, "two floats",
            lambda v: parse_coordinates(v, flip),
        )
        self._route = self._optional("route", self.fields.route_field, self.fields.route is not None,
                                     "a string or integer identifier", parse_route, NO_ROUTE)
        self._speed = self._optional("speed", self.fields.speed_field, self.fields.speed is not None,
                                     "a float", parse_measure, None)
        self._elevation = self._optional("elevation", self.fields.elevation_field, self.fields.elevation is not None,
                                         "a float", parse_measure, None)

    @staticmethod
    def _required(name: str, source: str, expected: str, parse: Callable[[Any], Any]) -> Extractor:
        def extract(record: Mapping[str, Any]) -> Any:
            value = record.get(source)
            if _is_blank(value):
                raise MissingField(name)
            try:
                return parse(value)
            except (ValueError, TypeError, OverflowError) as exc:
                raise MalformedValue(name, expected, value) from exc
        return extract

    @staticmethod
    def _optional(name: str, source: str, explicit: bool, expected: str,
                  parse: Callable[[Any], Any], default: Any) -> Extractor:
        def extract(record: Mapping[str, Any]) -> Any:
            value = record.get(source)
            if _is_blank(value):
                return default
            try:
                return parse(value)
            except (ValueError, TypeError, OverflowError) as exc:
                if explicit:
                    raise MalformedValue(name, expected, value) from exc
                return default
        return extract

    def normalize(self, record: Mapping[str, Any], position: int | None = None) -> LocationPoint:
        """
        Args:
            record: Mapping of source field name to raw value.
            position: Index of the record in its source, used in error messages.

        Raises:
            MissingField: A required field is absent or empty.
            MalformedValue: A field is present but cannot be parsed.
        """
        try:
            device_id = self._device_id(record)
            time = self._time(record)
            return LocationPoint(
                coordinates=self._coordinates(record),
                time=time,
                device_id=device_id,
                route=self._route(record),
                elevation=self._elevation(record),
                speed=self._speed(record),
            )
        except RecordError as exc:
            if position is None:
                raise
            raise exc.at(position) from exc.__cause__

    def normalize_all(self, records: Iterable[Mapping[str, Any]]) -> Iterator[LocationPoint]:
        for position, record in enumerate(records):
            yield self.normalize(record, position)
