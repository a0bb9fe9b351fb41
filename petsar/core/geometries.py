# petsar/core/geometries.py
from dataclasses import dataclass

import geojson
import shapely

from ..utils.validation import InvalidArgumentError, require_finite


@dataclass(frozen=True)
class GeoPoint:
    """
    Immutable WGS84 coordinate.

    Construction fails with InvalidArgumentError unless ``lat`` is within
    [-90, 90] and ``lng`` within [-180, 180].
    """

    lat: float
    lng: float

    def __post_init__(self):
        lat = require_finite(self.lat, "lat")
        lng = require_finite(self.lng, "lng")
        if not -90.0 <= lat <= 90.0:
            msg = f"Latitude must be within [-90, 90], got {lat}."
            raise InvalidArgumentError(msg)
        if not -180.0 <= lng <= 180.0:
            msg = f"Longitude must be within [-180, 180], got {lng}."
            raise InvalidArgumentError(msg)
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lng", lng)

    def offset(self, lat_offset: float, lng_offset: float) -> "GeoPoint":
        """Shift by fixed degree offsets. Latitude is clamped, longitude wraps."""
        lat = min(90.0, max(-90.0, self.lat + lat_offset))
        lng = self.lng + lng_offset
        if not -180.0 <= lng <= 180.0:
            lng = (lng + 180.0) % 360.0 - 180.0
        return GeoPoint(lat, lng)

    def to_shapely(self) -> shapely.Point:
        # GeoJSON axis order: x=longitude, y=latitude
        return shapely.Point(self.lng, self.lat)

    def to_geojson(self, properties=None) -> geojson.Feature:
        return geojson.Feature(geometry=self.to_shapely(), properties=properties or {})

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return None
        if isinstance(data, GeoPoint):
            return data
        try:
            return cls(data["lat"], data["lng"])
        except (KeyError, TypeError) as exc:
            msg = f"Expected a mapping with 'lat' and 'lng', got {data!r}."
            raise InvalidArgumentError(msg) from exc
