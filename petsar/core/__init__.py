from .geometries import GeoPoint
from .models import (
    BehaviorPrediction,
    GridPoint,
    HeatmapData,
    PetRecord,
    PredictedLocation,
    WeatherCondition,
)
from .cache import PredictionCache
from .behavior import BehaviorPredictor

__all__ = [
    "BehaviorPrediction",
    "BehaviorPredictor",
    "GeoPoint",
    "GridPoint",
    "HeatmapData",
    "PetRecord",
    "PredictedLocation",
    "PredictionCache",
    "WeatherCondition",
]
