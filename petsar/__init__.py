# petsar/__init__.py
"""
PetSAR: discovery-probability heatmaps, behaviour predictions and search
success estimates for lost pets.
"""
from .analysis.heatmap import HeatmapConfig, HeatmapGenerator, HeatmapOptions
from .analysis.probability import ProbabilityCalculator, ProbabilityFactors, ProbabilityUpdateEvent
from .core.behavior import BehaviorPredictor
from .core.cache import PredictionCache
from .core.geometries import GeoPoint
from .core.models import HeatmapData, PetRecord, WeatherCondition
from .io.geojson_export import export_heatmap_geojson
from .utils.geo import distance_between
from .utils.logging_setup import get_logger
from .utils.plot import visualize_heatmap
from .utils.validation import InvalidArgumentError

__all__ = [
    "BehaviorPredictor",
    "GeoPoint",
    "HeatmapConfig",
    "HeatmapData",
    "HeatmapGenerator",
    "HeatmapOptions",
    "InvalidArgumentError",
    "PetRecord",
    "PredictionCache",
    "ProbabilityCalculator",
    "ProbabilityFactors",
    "ProbabilityUpdateEvent",
    "WeatherCondition",
    "distance_between",
    "export_heatmap_geojson",
    "get_logger",
    "visualize_heatmap",
]
