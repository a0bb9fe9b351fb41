# petsar/core/behavior.py
"""
Heuristic prediction of where a lost pet is likely to be found.
"""
from datetime import datetime

from ..analysis.weather import weather_impact_on_behavior
from ..utils.geo import distance_between
from ..utils.logging_setup import get_logger
from ..utils.pet_behavior import (
    ENVIRONMENTAL_PATTERNS,
    EVENING_PATTERN,
    HOMING_CONFIDENCE,
    HOMING_RADIUS_M,
    MORNING_PATTERN,
    NIGHT_PATTERN,
    SPECIES_CAT,
    SPECIES_DOG,
    SPECIES_PATTERNS,
    normalize_species,
)
from .cache import PredictionCache
from .models import BehaviorPrediction, PetRecord, PredictedLocation, WeatherLookup

log = get_logger()

MAX_PREDICTED_LOCATIONS = 5
DEFAULT_CONFIDENCE = 0.3
CONFIDENCE_SCALE = 1.1
MAX_CONFIDENCE = 0.95
HIGH_PRIORITY_THRESHOLD = 0.7

DEFAULT_SEARCH_STRATEGY = ("Search the immediate surroundings", "Keep collecting information")


def _pattern_location(origin, pattern):
    lat_offset, lng_offset, confidence, radius, reason = pattern
    return PredictedLocation(
        position=origin.offset(lat_offset, lng_offset),
        confidence=confidence,
        reason=reason,
        radius=radius,
    )


def _as_naive_local(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def hours_since(start: datetime | None, now: datetime) -> float:
    """
    Hours between ``start`` and ``now``. When only one of them carries a
    timezone, both are compared as naive local time.
    """
    if start is None:
        return 0.0
    if (start.tzinfo is None) != (now.tzinfo is None):
        start, now = _as_naive_local(start), _as_naive_local(now)
    return (now - start).total_seconds() / 3600.0


class BehaviorPredictor:
    """
    Predicts candidate locations for a lost pet from fixed-offset heuristics.

    Args:
        cache (PredictionCache, optional): Store for recent predictions. A private
            5-minute cache is created when omitted.
        clock (callable, optional): Returns the current datetime. Used whenever a
            method is called without an explicit ``now``.
        weather_lookup (callable, optional): ``(lat, lng) -> WeatherCondition``
            collaborator used by ``describe_prediction``.
    """

    def __init__(self, cache: PredictionCache | None = None, clock=None, weather_lookup: WeatherLookup | None = None):
        self.cache = cache if cache is not None else PredictionCache()
        self._clock = clock or datetime.now
        self._weather_lookup = weather_lookup

    def _resolve_now(self, now):
        return now if now is not None else self._clock()

    def predict_behavior(self, pet: PetRecord, now: datetime | None = None) -> BehaviorPrediction:
        now = self._resolve_now(now)
        cached = self.cache.get(pet.id, now)
        if cached is not None:
            return cached

        prediction = self.analyze_behavior_patterns(pet, now)
        self.cache.set(pet.id, prediction, now)
        return prediction

    def update_prediction(self, pet: PetRecord, now: datetime | None = None) -> BehaviorPrediction:
        """Drops any cached prediction for the pet and recomputes it."""
        self.cache.invalidate(pet.id)
        return self.predict_behavior(pet, now)

    def analyze_behavior_patterns(self, pet: PetRecord, now: datetime) -> BehaviorPrediction:
        last_seen = pet.last_seen_location
        if last_seen is None:
            log.info(f"Pet '{pet.id}' has no last-seen location. Returning default prediction.")
            return self.default_prediction(now)

        candidates = []
        if pet.home_location is not None:
            candidates.append(PredictedLocation(
                position=pet.home_location,
                confidence=HOMING_CONFIDENCE,
                reason="Homing instinct toward the owner's home",
                radius=HOMING_RADIUS_M,
            ))
        candidates.extend(self.species_patterns(pet))
        candidates.extend(self.time_based_patterns(last_seen, now))
        candidates.extend(self.environmental_patterns(last_seen))

        ranked = sorted(candidates, key=lambda loc: loc.confidence, reverse=True)
        log.debug(f"Generated {len(ranked)} candidate locations for pet '{pet.id}'")

        return BehaviorPrediction(
            predicted_locations=ranked[:MAX_PREDICTED_LOCATIONS],
            overall_confidence=self.overall_confidence(ranked),
            search_strategy=self.search_strategy(pet, ranked, now),
            last_updated=now,
        )

    def species_patterns(self, pet: PetRecord) -> list[PredictedLocation]:
        if pet.last_seen_location is None:
            return []
        pattern = SPECIES_PATTERNS[normalize_species(pet.species)]
        return [_pattern_location(pet.last_seen_location, pattern)]

    def time_based_patterns(self, last_seen, now: datetime) -> list[PredictedLocation]:
        hour = now.hour
        if 6 <= hour < 10:
            return [_pattern_location(last_seen, MORNING_PATTERN)]
        if 17 <= hour < 20:
            return [_pattern_location(last_seen, EVENING_PATTERN)]
        if hour >= 20 or hour < 6:
            return [_pattern_location(last_seen, NIGHT_PATTERN)]
        return []

    def environmental_patterns(self, last_seen) -> list[PredictedLocation]:
        return [_pattern_location(last_seen, pattern) for pattern in ENVIRONMENTAL_PATTERNS]

    @staticmethod
    def overall_confidence(locations: list[PredictedLocation]) -> float:
        if not locations:
            return DEFAULT_CONFIDENCE
        mean_confidence = sum(loc.confidence for loc in locations) / len(locations)
        return min(mean_confidence * CONFIDENCE_SCALE, MAX_CONFIDENCE)

    def search_strategy(self, pet: PetRecord, ranked: list[PredictedLocation], now: datetime) -> list[str]:
        strategies = []
        if ranked and ranked[0].confidence > HIGH_PRIORITY_THRESHOLD:
            strategies.append("Concentrate on the high-priority area")

        species = normalize_species(pet.species)
        if species == SPECIES_DOG:
            strategies.append("Collect sightings over a wide area")
            strategies.append("Check the usual walking routes")
        elif species == SPECIES_CAT:
            strategies.append("Check gaps between buildings and under cars")
            strategies.append("Search at night")

        hours_elapsed = hours_since(pet.lost_date, now)
        if hours_elapsed < 24:
            strategies.append("Intensive search during the first 24 hours")
        elif hours_elapsed < 72:
            strategies.append("Strengthen information sharing in the neighbourhood")
        else:
            strategies.append("Set up a long-term, wide-area search")
        return strategies

    @staticmethod
    def default_prediction(now: datetime) -> BehaviorPrediction:
        return BehaviorPrediction(
            predicted_locations=[],
            overall_confidence=DEFAULT_CONFIDENCE,
            search_strategy=list(DEFAULT_SEARCH_STRATEGY),
            last_updated=now,
        )

    def describe_prediction(self, pet: PetRecord, prediction: BehaviorPrediction, weather=None) -> list[str]:
        """
        Human-readable notes for a prediction: how far each candidate lies from
        the last-seen point and how the current weather affects the pet.
        """
        last_seen = pet.last_seen_location
        if last_seen is None:
            return []

        notes = []
        for loc in prediction.predicted_locations:
            distance_m = distance_between(last_seen, loc.position)
            notes.append(
                f"{loc.reason}: {distance_m:.0f} m from the last sighting "
                f"(search radius {loc.radius:.0f} m, confidence {loc.confidence:.0%})"
            )

        if weather is None and self._weather_lookup is not None:
            weather = self._weather_lookup(last_seen.lat, last_seen.lng)
        if weather is not None:
            species = normalize_species(pet.species)
            impact = weather_impact_on_behavior(weather, SPECIES_CAT if species == SPECIES_CAT else SPECIES_DOG)
            notes.append(impact.description)
        return notes
