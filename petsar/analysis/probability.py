# petsar/analysis/probability.py
"""
Multi-factor estimate of how likely a lost pet is to be found.

Six sub-scores in [0, 1] are combined with fixed weights. Each sub-score is
exposed as a module-level function so handlers can display the breakdown.
"""
from dataclasses import asdict, dataclass, field

from ..core.models import PetRecord, PredictedLocation
from ..utils.logging_setup import get_logger
from ..utils.pet_behavior import (
    BEHAVIOR_AGGRESSIVE,
    BEHAVIOR_FRIENDLY,
    BEHAVIOR_SHY,
    PET_SIZE_LARGE,
    PET_SIZE_MEDIUM,
    PET_SIZE_SMALL,
    POPULAR_PLACE_OFFSET,
    QUIET_PLACE_OFFSET,
    URBAN_DENSITY_HIGH,
    URBAN_DENSITY_LOW,
    URBAN_DENSITY_MEDIUM,
    WEATHER_CLEAR,
    WEATHER_CLOUDY,
    WEATHER_RAIN,
    WEATHER_SNOW,
)
from ..utils.validation import InvalidArgumentError, require_count, require_finite, require_non_negative

log = get_logger()

MIN_PROBABILITY = 0.05
MAX_PROBABILITY = 0.95

FACTOR_WEIGHTS = {
    "time_factor": 0.25,
    "weather_factor": 0.10,
    "search_efficiency": 0.20,
    "pet_characteristics": 0.20,
    "sighting_reliability": 0.15,
    "location_factor": 0.10,
}

# (upper bound in hours, exclusive; factor)
TIME_FACTOR_STEPS = (
    (6, 0.95),
    (24, 0.85),
    (72, 0.70),
    (168, 0.50),  # 1 week
    (336, 0.35),  # 2 weeks
    (720, 0.25),  # 1 month
)
LATE_TIME_FACTOR = 0.15

WEATHER_IMPACT = {
    WEATHER_CLEAR: 1.0,
    WEATHER_CLOUDY: 0.9,
    WEATHER_RAIN: 0.7,
    WEATHER_SNOW: 0.5,
}
DEFAULT_WEATHER_IMPACT = 0.8

IDEAL_AREA_PER_PERSON_KM2 = 0.5
MAX_VOLUNTEER_BONUS = 0.2
VOLUNTEER_BONUS_PER_PERSON = 0.02

SIZE_IMPACT = {PET_SIZE_SMALL: -0.1, PET_SIZE_MEDIUM: 0.0, PET_SIZE_LARGE: 0.1}
BEHAVIOR_IMPACT = {BEHAVIOR_FRIENDLY: 0.2, BEHAVIOR_SHY: -0.1, BEHAVIOR_AGGRESSIVE: 0.0}
COLLAR_BONUS = 0.15
MICROCHIP_BONUS = 0.1
DISTINCTIVE_FEATURE_BONUS = 0.1

DENSITY_IMPACT = {URBAN_DENSITY_HIGH: 0.8, URBAN_DENSITY_MEDIUM: 0.7, URBAN_DENSITY_LOW: 0.5}
DEFAULT_DENSITY_IMPACT = 0.6

DEFAULT_SEARCH_AREA_KM2 = 10
DEFAULT_VOLUNTEER_COUNT = 1
FEW_VOLUNTEERS = 5

EVENT_NEW_SIGHTING = "new_sighting"
EVENT_VOLUNTEER_JOINED = "volunteer_joined"
EVENT_AREA_SEARCHED = "area_searched"
EVENT_WEATHER_IMPROVED = "weather_improved"
EVENT_TIME_PASSED = "time_passed"


@dataclass(frozen=True)
class ProbabilityFactors:
    """
    Search conditions for one calculation. Any field left as None falls back to
    a neutral default (see ``resolved``).
    """

    time_elapsed: float | None = None  # hours
    weather_condition: str | None = None
    search_area_size: float | None = None  # km²
    volunteer_count: int | None = None
    sighting_count: int | None = None
    pet_type: str | None = None
    pet_size: str | None = None
    pet_behavior: str | None = None
    urban_density: str | None = None
    has_collar: bool = False
    has_microchip: bool = False

    def resolved(self) -> "ProbabilityFactors":
        # Zero area or volunteers means "not reported", the same as missing
        return ProbabilityFactors(
            time_elapsed=self.time_elapsed if self.time_elapsed is not None else 0,
            weather_condition=self.weather_condition or WEATHER_CLEAR,
            search_area_size=self.search_area_size or DEFAULT_SEARCH_AREA_KM2,
            volunteer_count=self.volunteer_count or DEFAULT_VOLUNTEER_COUNT,
            sighting_count=self.sighting_count if self.sighting_count is not None else 0,
            pet_type=self.pet_type,
            pet_size=self.pet_size or PET_SIZE_MEDIUM,
            pet_behavior=self.pet_behavior or BEHAVIOR_FRIENDLY,
            urban_density=self.urban_density or URBAN_DENSITY_MEDIUM,
            has_collar=bool(self.has_collar),
            has_microchip=bool(self.has_microchip),
        )


@dataclass(frozen=True)
class ProbabilityBreakdown:
    time_factor: float
    weather_factor: float
    search_efficiency: float
    pet_characteristics: float
    sighting_reliability: float
    location_factor: float

    def weighted_sum(self, weights=None) -> float:
        weights = weights or FACTOR_WEIGHTS
        return sum(getattr(self, name) * weight for name, weight in weights.items())

    def to_dict(self) -> dict:
        return {
            "timeFactor": self.time_factor,
            "weatherFactor": self.weather_factor,
            "searchEfficiency": self.search_efficiency,
            "petCharacteristics": self.pet_characteristics,
            "sightingReliability": self.sighting_reliability,
            "locationFactor": self.location_factor,
        }


@dataclass(frozen=True)
class DiscoveryResult:
    probability: float
    breakdown: ProbabilityBreakdown
    recommendations: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "probability": self.probability,
            "breakdown": self.breakdown.to_dict(),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class ProbabilityUpdateEvent:
    type: str
    reliability: float | None = None
    thoroughness: float | None = None
    hours: float | None = None


def clamp_probability(value: float) -> float:
    return max(MIN_PROBABILITY, min(MAX_PROBABILITY, value))


def calculate_time_factor(hours_elapsed: float) -> float:
    hours_elapsed = require_non_negative(hours_elapsed, "hours_elapsed")
    for max_hours, factor in TIME_FACTOR_STEPS:
        if hours_elapsed < max_hours:
            return factor
    return LATE_TIME_FACTOR


def calculate_weather_factor(weather: str) -> float:
    return WEATHER_IMPACT.get(weather, DEFAULT_WEATHER_IMPACT)


def calculate_search_efficiency(area_size: float, volunteer_count: int) -> float:
    """
    Share of the ideal per-person coverage (0.5 km² each) plus a small bonus
    per volunteer, capped at 1.0.
    """
    area_size = require_non_negative(area_size, "area_size")
    volunteer_count = require_count(volunteer_count, "volunteer_count")
    area_per_person = area_size / max(1, volunteer_count)
    efficiency = IDEAL_AREA_PER_PERSON_KM2 / max(IDEAL_AREA_PER_PERSON_KM2, area_per_person)
    volunteer_bonus = min(MAX_VOLUNTEER_BONUS, volunteer_count * VOLUNTEER_BONUS_PER_PERSON)
    return min(1.0, efficiency + volunteer_bonus)


def calculate_pet_characteristics(pet: PetRecord, factors: ProbabilityFactors) -> float:
    score = 0.5
    score += SIZE_IMPACT.get(factors.pet_size, 0.0)
    score += BEHAVIOR_IMPACT.get(factors.pet_behavior, 0.0)
    if factors.has_collar:
        score += COLLAR_BONUS
    if factors.has_microchip:
        score += MICROCHIP_BONUS
    if pet.distinctive_features:
        score += DISTINCTIVE_FEATURE_BONUS
    return min(1.0, max(0.0, score))


def calculate_sighting_reliability(sighting_count: int) -> float:
    sighting_count = require_count(sighting_count, "sighting_count")
    if sighting_count == 0:
        return 0.3
    if sighting_count == 1:
        return 0.5
    if sighting_count == 2:
        return 0.65
    if sighting_count == 3:
        return 0.75
    if sighting_count >= 4:
        return 0.85
    # Unreachable for valid counts
    return 0.9


def calculate_location_factor(urban_density: str) -> float:
    return DENSITY_IMPACT.get(urban_density, DEFAULT_DENSITY_IMPACT)


class ProbabilityCalculator:
    """Computes and incrementally updates a pet's discovery probability."""

    def __init__(self, weights: dict | None = None):
        self.weights = dict(weights or FACTOR_WEIGHTS)
        total = sum(self.weights.values())
        if abs(total - 1.0) > 1e-9:
            msg = f"Factor weights must sum to 1.0, got {total}."
            raise InvalidArgumentError(msg)

    def calculate_discovery_probability(self, pet: PetRecord, factors: ProbabilityFactors | None = None) -> DiscoveryResult:
        factors = (factors or ProbabilityFactors()).resolved()
        breakdown = ProbabilityBreakdown(
            time_factor=calculate_time_factor(factors.time_elapsed),
            weather_factor=calculate_weather_factor(factors.weather_condition),
            search_efficiency=calculate_search_efficiency(factors.search_area_size, factors.volunteer_count),
            pet_characteristics=calculate_pet_characteristics(pet, factors),
            sighting_reliability=calculate_sighting_reliability(factors.sighting_count),
            location_factor=calculate_location_factor(factors.urban_density),
        )
        probability = clamp_probability(breakdown.weighted_sum(self.weights))
        log.debug(f"Discovery probability for pet '{pet.id}': {probability:.3f} ({asdict(breakdown)})")

        return DiscoveryResult(
            probability=probability,
            breakdown=breakdown,
            recommendations=self.generate_recommendations(breakdown, factors),
        )

    @staticmethod
    def generate_recommendations(breakdown: ProbabilityBreakdown, factors: ProbabilityFactors) -> list[str]:
        recommendations = []
        if breakdown.time_factor < 0.5:
            recommendations.append("Time has passed since the pet went missing. Step up sharing on social media.")
        if breakdown.weather_factor < 0.8:
            recommendations.append("The weather is poor. Focus on indoor spots and under eaves.")
        if breakdown.search_efficiency < 0.6:
            recommendations.append("Recruit more volunteers or narrow the search area.")
        if breakdown.sighting_reliability < 0.5:
            recommendations.append("Hand out more flyers and put up more posters.")
        if breakdown.pet_characteristics < 0.5:
            recommendations.append("Describe the pet's features in detail and prepare several photos.")
        if (factors.volunteer_count or 0) < FEW_VOLUNTEERS:
            recommendations.append("Ask local animal welfare groups for help.")
        if factors.has_microchip:
            recommendations.append("Make sure vets and shelters have been notified of the microchip details.")
        return recommendations

    @staticmethod
    def update_probability_with_new_data(current_probability: float, event: ProbabilityUpdateEvent) -> float:
        """
        Nudges an existing probability after a search event without a full recalculation.
        """
        current_probability = require_finite(current_probability, "current_probability")
        if event.type == EVENT_NEW_SIGHTING:
            adjustment = require_finite(event.reliability, "reliability") * 0.1
        elif event.type == EVENT_VOLUNTEER_JOINED:
            adjustment = 0.02
        elif event.type == EVENT_AREA_SEARCHED:
            # A thorough search that finds nothing lowers the odds for that area
            adjustment = require_finite(event.thoroughness, "thoroughness") * -0.05
        elif event.type == EVENT_WEATHER_IMPROVED:
            adjustment = 0.05
        elif event.type == EVENT_TIME_PASSED:
            adjustment = -0.01 * require_finite(event.hours, "hours")
        else:
            msg = f"Unknown probability update event type: {event.type!r}"
            raise InvalidArgumentError(msg)

        return clamp_probability(current_probability + adjustment)

    @staticmethod
    def predict_discovery_locations(pet: PetRecord, factors: ProbabilityFactors | None = None) -> list[PredictedLocation]:
        last_seen = pet.last_seen_location
        if last_seen is None:
            return []

        factors = (factors or ProbabilityFactors()).resolved()
        locations = [PredictedLocation(
            position=last_seen,
            confidence=0.4,
            reason="Around the last sighting",
            radius=500,
        )]
        if factors.pet_behavior == BEHAVIOR_FRIENDLY:
            locations.append(PredictedLocation(
                position=last_seen.offset(*POPULAR_PLACE_OFFSET),
                confidence=0.3,
                reason="Friendly pets drift toward places where people gather",
                radius=300,
            ))
        elif factors.pet_behavior == BEHAVIOR_SHY:
            locations.append(PredictedLocation(
                position=last_seen.offset(*QUIET_PLACE_OFFSET),
                confidence=0.35,
                reason="Shy pets look for quiet hiding places",
                radius=400,
            ))
        return locations
