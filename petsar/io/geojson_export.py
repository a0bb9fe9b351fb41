# petsar/io/geojson_export.py
from pathlib import Path

from geojson import FeatureCollection, dump

from ..core.models import BehaviorPrediction, HeatmapData
from ..utils.logging_setup import get_logger

log = get_logger()


def heatmap_to_feature_collection(points: list[HeatmapData]) -> FeatureCollection:
    """One Point feature per heatmap point, carrying its weight as a property."""
    features = [point.location.to_geojson({"weight": point.weight}) for point in points]
    return FeatureCollection(features)


def predictions_to_feature_collection(prediction: BehaviorPrediction) -> FeatureCollection:
    features = [
        loc.position.to_geojson({
            "rank": rank,
            "confidence": loc.confidence,
            "reason": loc.reason,
            "radius": loc.radius,
        })
        for rank, loc in enumerate(prediction.predicted_locations, start=1)
    ]
    return FeatureCollection(features, properties={
        "overallConfidence": prediction.overall_confidence,
        "searchStrategy": list(prediction.search_strategy),
        "lastUpdated": prediction.last_updated.isoformat(),
    })


def export_heatmap_geojson(points: list[HeatmapData], output_filepath: str | Path) -> Path:
    """Writes heatmap points to a GeoJSON file, creating parent directories as needed."""
    output_path = Path(output_filepath)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w") as geojson_file:
        dump(heatmap_to_feature_collection(points), geojson_file, indent=4)
    log.info(f"Exported {len(points)} heatmap points to GeoJSON: {output_path}")
    return output_path
