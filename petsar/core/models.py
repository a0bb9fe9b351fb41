# petsar/core/models.py
"""
Value types exchanged between the prediction services and the handler layer.

``to_dict`` methods return the JSON shape the HTTP handlers send to the map
frontend (camelCase keys, ISO-8601 timestamps).
"""
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from ..utils.validation import InvalidArgumentError, require_finite, require_non_negative
from .geometries import GeoPoint


@dataclass(frozen=True)
class PetRecord:
    """Read-only view of a pet record as stored by the pet record store."""

    id: str
    species: str | None = None
    last_seen_location: GeoPoint | None = None
    home_location: GeoPoint | None = None
    lost_date: datetime | None = None
    distinctive_features: tuple = ()

    @classmethod
    def from_dict(cls, data: dict) -> "PetRecord":
        lost_date = data.get("lostDate")
        if isinstance(lost_date, str):
            # fromisoformat accepts a trailing "Z" only from Python 3.11
            if lost_date.endswith(("Z", "z")):
                lost_date = lost_date[:-1] + "+00:00"
            lost_date = datetime.fromisoformat(lost_date)
        return cls(
            id=data["id"],
            species=data.get("species"),
            last_seen_location=GeoPoint.from_dict(data.get("lastSeenLocation")),
            home_location=GeoPoint.from_dict(data.get("homeLocation")),
            lost_date=lost_date,
            distinctive_features=tuple(data.get("distinctiveFeatures") or ()),
        )

    def with_geocoded_location(self, address: str, geocoder: "Geocoder") -> "PetRecord":
        """
        Fill in a missing last-seen location by geocoding the reported address.

        The record is returned unchanged when it already has coordinates or the
        geocoder cannot resolve the address.
        """
        if self.last_seen_location is not None or not address:
            return self
        location = geocoder(address)
        if location is None:
            return self
        return replace(self, last_seen_location=location)


@dataclass(frozen=True)
class PredictedLocation:
    position: GeoPoint
    confidence: float
    reason: str
    radius: float  # meters

    def __post_init__(self):
        confidence = require_finite(self.confidence, "confidence")
        if not 0.0 <= confidence <= 1.0:
            msg = f"confidence must be within [0, 1], got {confidence}."
            raise InvalidArgumentError(msg)
        if require_finite(self.radius, "radius") <= 0:
            msg = f"radius must be positive, got {self.radius}."
            raise InvalidArgumentError(msg)

    def to_dict(self) -> dict:
        return {
            "position": self.position.to_dict(),
            "confidence": self.confidence,
            "reason": self.reason,
            "radius": self.radius,
        }


@dataclass
class BehaviorPrediction:
    predicted_locations: list[PredictedLocation]
    overall_confidence: float
    search_strategy: list[str]
    last_updated: datetime

    def to_dict(self) -> dict:
        return {
            "predictedLocations": [loc.to_dict() for loc in self.predicted_locations],
            "overallConfidence": self.overall_confidence,
            "searchStrategy": list(self.search_strategy),
            "lastUpdated": self.last_updated.isoformat(),
        }


@dataclass
class GridPoint:
    """One lattice cell of a heatmap; only lives for the duration of a generation call."""

    lat: float
    lng: float
    probability: float = 0.0
    weight: float = 0.0


@dataclass(frozen=True)
class HeatmapData:
    location: GeoPoint
    weight: float

    def to_dict(self) -> dict:
        return {"location": self.location.to_dict(), "weight": self.weight}


@dataclass(frozen=True)
class WeatherCondition:
    """Conditions as reported by the weather lookup collaborator."""

    temperature: float  # Celsius
    humidity: float = 0.0
    precipitation: bool = False
    wind_speed: float = 0.0  # m/s
    condition: str = "sunny"

    def __post_init__(self):
        require_finite(self.temperature, "temperature")
        require_non_negative(self.humidity, "humidity")
        require_non_negative(self.wind_speed, "wind_speed")


# External collaborator call shapes
Geocoder = Callable[[str], GeoPoint | None]
WeatherLookup = Callable[[float, float], WeatherCondition]
