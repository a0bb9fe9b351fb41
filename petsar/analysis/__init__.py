from .heatmap import HeatmapConfig, HeatmapGenerator, HeatmapOptions
from .probability import (
    DiscoveryResult,
    ProbabilityBreakdown,
    ProbabilityCalculator,
    ProbabilityFactors,
    ProbabilityUpdateEvent,
)
from .weather import WeatherImpact, to_search_condition, weather_impact_on_behavior

__all__ = [
    "DiscoveryResult",
    "HeatmapConfig",
    "HeatmapGenerator",
    "HeatmapOptions",
    "ProbabilityBreakdown",
    "ProbabilityCalculator",
    "ProbabilityFactors",
    "ProbabilityUpdateEvent",
    "WeatherImpact",
    "to_search_condition",
    "weather_impact_on_behavior",
]
