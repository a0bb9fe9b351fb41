"""Integration tests for the complete search-planning workflow."""

from datetime import timedelta

import geojson
import matplotlib.pyplot as plt
import pytest

from petsar import (
    BehaviorPredictor,
    HeatmapGenerator,
    HeatmapOptions,
    ProbabilityCalculator,
    ProbabilityFactors,
    ProbabilityUpdateEvent,
    export_heatmap_geojson,
    visualize_heatmap,
)
from petsar.analysis.weather import to_search_condition
from petsar.core.models import WeatherCondition
from petsar.io.geojson_export import predictions_to_feature_collection


@pytest.mark.integration
class TestWorkflowIntegration:
    """Integration tests for the complete workflow."""

    def test_end_to_end_workflow(self, sample_dog, fixed_now, tmp_path):
        """Predict, map, boost with a sighting, score and export for one pet."""
        weather = WeatherCondition(temperature=12.0, precipitation=True, condition="rainy")

        # Step 1: Behaviour prediction
        predictor = BehaviorPredictor(weather_lookup=lambda lat, lng: weather)
        prediction = predictor.predict_behavior(sample_dog, now=fixed_now)
        assert prediction.predicted_locations
        notes = predictor.describe_prediction(sample_dog, prediction)
        assert "raining" in notes[-1]

        # Step 2: Heatmap around the last-seen location
        hours_elapsed = (fixed_now - sample_dog.lost_date).total_seconds() / 3600
        options = HeatmapOptions(
            center=sample_dog.last_seen_location,
            radius_km=1.0,
            zoom_level=16,
            time_elapsed=hours_elapsed,
            pet_size="large",
            terrain_type="residential",
        )
        generator = HeatmapGenerator(seed=0)
        heatmap = generator.generate_detailed_heatmap(options)
        assert heatmap

        # Step 3: A sighting near the top-ranked location
        sighting = prediction.predicted_locations[0].position
        boosted = generator.update_heatmap_with_sighting(heatmap, sighting, 0.9)
        assert len(boosted) == len(heatmap) + 132

        # Step 4: Discovery probability, then an incremental update
        calculator = ProbabilityCalculator()
        factors = ProbabilityFactors(
            time_elapsed=hours_elapsed,
            weather_condition=to_search_condition(weather.condition),
            volunteer_count=6,
            search_area_size=3.0,
            sighting_count=1,
            pet_size="large",
        )
        result = calculator.calculate_discovery_probability(sample_dog, factors)
        assert 0.05 <= result.probability <= 0.95
        updated = calculator.update_probability_with_new_data(
            result.probability, ProbabilityUpdateEvent("new_sighting", reliability=0.9)
        )
        assert updated >= result.probability

        # Step 5: Export for the map frontend
        heatmap_path = export_heatmap_geojson(boosted, tmp_path / "out" / "heatmap.geojson")
        with heatmap_path.open() as f:
            assert len(geojson.load(f)["features"]) == len(boosted)
        assert predictions_to_feature_collection(prediction).is_valid

        fig = visualize_heatmap(boosted, center=sample_dog.last_seen_location, output_file=tmp_path / "heatmap.png")
        plt.close(fig)
        assert (tmp_path / "heatmap.png").exists()

    def test_prediction_refresh_after_new_information(self, sample_dog, fixed_now):
        predictor = BehaviorPredictor()
        first = predictor.predict_behavior(sample_dog, now=fixed_now)
        refreshed = predictor.update_prediction(sample_dog, now=fixed_now + timedelta(minutes=1))
        assert refreshed.last_updated > first.last_updated
        assert [loc.to_dict() for loc in refreshed.predicted_locations] == [
            loc.to_dict() for loc in first.predicted_locations
        ]

    @pytest.mark.slow
    def test_large_area_heatmap(self, sample_coordinates):
        options = HeatmapOptions(center=sample_coordinates["shibuya"], radius_km=5.0, zoom_level=14)
        heatmap = HeatmapGenerator(seed=1).generate_detailed_heatmap(options)
        assert heatmap
        assert all(point.weight > 0.5 for point in heatmap)
