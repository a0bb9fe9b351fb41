from .geojson_export import (
    export_heatmap_geojson,
    heatmap_to_feature_collection,
    predictions_to_feature_collection,
)

__all__ = [
    "export_heatmap_geojson",
    "heatmap_to_feature_collection",
    "predictions_to_feature_collection",
]
