# petsar/analysis/weather.py
"""
How the weather changes a lost pet's behaviour, and translation between the
weather lookup's vocabulary and the probability calculator's.
"""
from dataclasses import dataclass

from ..utils.pet_behavior import (
    CONDITION_CLOUDY,
    CONDITION_RAINY,
    CONDITION_SNOWY,
    CONDITION_STORMY,
    CONDITION_SUNNY,
    SPECIES_CAT,
    WEATHER_CLEAR,
    WEATHER_CLOUDY,
    WEATHER_RAIN,
    WEATHER_SNOW,
)

COLD_THRESHOLD_C = 5
HOT_THRESHOLD_C = 30
WINDY_THRESHOLD_MS = 10

SEARCH_CONDITIONS = {
    CONDITION_SUNNY: WEATHER_CLEAR,
    CONDITION_CLOUDY: WEATHER_CLOUDY,
    CONDITION_RAINY: WEATHER_RAIN,
    CONDITION_STORMY: WEATHER_RAIN,
    CONDITION_SNOWY: WEATHER_SNOW,
}


@dataclass(frozen=True)
class WeatherImpact:
    movement_reduction: float
    hiding_increase: float
    description: str


def weather_impact_on_behavior(weather, pet_type: str) -> WeatherImpact:
    """
    Estimates how much the current weather restricts movement and encourages hiding.

    Args:
        weather (WeatherCondition): Conditions at the last-seen location.
        pet_type (str): "cat" or "dog"; anything other than "cat" is treated as a dog.

    Returns:
        WeatherImpact: Reduction/increase factors in [0, 1] and a short description.
    """
    is_cat = pet_type == SPECIES_CAT
    if weather.precipitation:
        if is_cat:
            return WeatherImpact(0.7, 0.9, "It is raining, so the cat is probably sheltering somewhere dry.")
        return WeatherImpact(0.3, 0.5, "It is raining, so the dog's range of movement is likely limited.")
    if weather.temperature < COLD_THRESHOLD_C:
        return WeatherImpact(0.5, 0.7, "It is cold, so the pet may be looking for a warm place.")
    if weather.temperature > HOT_THRESHOLD_C:
        return WeatherImpact(0.4, 0.6, "It is hot, so the pet may be resting in shade or a cool spot.")
    if weather.wind_speed > WINDY_THRESHOLD_MS:
        return WeatherImpact(0.3, 0.4, "It is windy, so the pet may be sheltering out of the wind.")
    return WeatherImpact(0.0, 0.0, "The weather is not having a significant effect on movement.")


def to_search_condition(condition: str) -> str:
    """Maps a weather-lookup condition (e.g. "rainy") to a calculator condition (e.g. "rain")."""
    return SEARCH_CONDITIONS.get(condition, WEATHER_CLOUDY)
