"""Unit tests for the enhanced heatmap generator."""

import numpy as np
import pytest

from petsar.analysis.heatmap import (
    HeatmapConfig,
    HeatmapGenerator,
    HeatmapOptions,
    base_probability,
    calculate_optimal_grid_size,
    calculate_time_decay,
    probability_at_distance,
    weight_for,
)
from petsar.core.geometries import GeoPoint
from petsar.core.models import HeatmapData
from petsar.utils.geo import haversine_m
from petsar.utils.validation import InvalidArgumentError


@pytest.fixture
def center():
    return GeoPoint(35.681236, 139.767125)


class TestProbabilityModel:
    """Test cases for the per-cell probability and weight functions."""

    @pytest.mark.parametrize("zoom, expected", [(19, 25), (18, 25), (17, 50), (16, 50), (15, 100), (13, 150), (12, 150), (10, 200)])
    def test_grid_size_for_zoom(self, zoom, expected):
        assert calculate_optimal_grid_size(zoom) == expected

    @pytest.mark.parametrize("hours, expected", [(0, 1.0), (6, 1.0), (7, 0.9), (24, 0.75), (48, 0.5), (72, 0.35), (100, 0.2)])
    def test_time_decay(self, hours, expected):
        assert calculate_time_decay(hours) == expected

    def test_base_probability_bands(self):
        probabilities = base_probability([0.0, 0.4, 1.0, 2.0])
        assert probabilities == pytest.approx([0.9, 0.7, 0.52, 0.34])

    def test_base_probability_far_tail_has_floor(self):
        assert base_probability(100.0) == pytest.approx(0.05)

    def test_probability_at_center(self, center):
        options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=16)
        assert float(probability_at_distance(0.0, options)) == pytest.approx(0.9)

    def test_probability_scaled_by_time_and_terrain(self, center):
        options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=16, time_elapsed=100, terrain_type="park")
        assert float(probability_at_distance(0.0, options)) == pytest.approx(0.9 * 0.2 * 1.2)

    def test_probability_clipped_to_unit_interval(self, center):
        options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=16, pet_size="small", terrain_type="park")
        assert float(probability_at_distance(0.0, options)) == 1.0

    def test_probability_decreases_with_distance(self, center):
        options = HeatmapOptions(center=center, radius_km=5.0, zoom_level=12)
        probabilities = probability_at_distance(np.array([0.0, 400.0, 1600.0, 3000.0, 8000.0]), options)
        assert np.all(np.diff(probabilities) < 0)

    def test_weight_bonus_toward_center(self):
        weights = weight_for(np.array([0.5, 0.5]), np.array([0.0, 1000.0]), 1000.0)
        assert weights == pytest.approx([75.0, 50.0])

    def test_weight_with_zero_radius(self):
        assert weight_for(np.array([0.9]), np.array([0.0]), 0.0) == pytest.approx([135.0])


class TestHeatmapOptions:
    """Test cases for option validation."""

    def test_center_from_dict(self):
        options = HeatmapOptions(center={"lat": 35.0, "lng": 139.0}, radius_km=1, zoom_level=15)
        assert options.center == GeoPoint(35.0, 139.0)
        assert options.radius_m == 1000

    @pytest.mark.parametrize("overrides", [
        {"radius_km": -1},
        {"radius_km": float("nan")},
        {"time_elapsed": -2},
        {"pet_size": "huge"},
    ])
    def test_invalid_options_raise(self, center, overrides):
        params = {"center": center, "radius_km": 1.0, "zoom_level": 15}
        params.update(overrides)
        with pytest.raises(InvalidArgumentError):
            HeatmapOptions(**params)

    def test_config_keeps_unknown_parameters(self):
        config = HeatmapConfig(min_weight=1.0, colormap="YlOrRd")
        assert config.min_weight == 1.0
        assert config.jitter_points == 3
        assert config.additional_params == {"colormap": "YlOrRd"}


class TestGridGeneration:
    """Test cases for the lattice and smoothing."""

    def test_grid_points_inside_radius(self, center):
        generator = HeatmapGenerator(seed=1)
        options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=18)
        grid = generator.generate_probability_grid(options)

        assert len(grid) > 4000
        distances = haversine_m(center.lat, center.lng, [p.lat for p in grid], [p.lng for p in grid])
        assert np.max(distances) <= 1000.0 + 1e-6

    def test_smoothed_weights_finite_and_non_negative(self, center):
        generator = HeatmapGenerator(seed=1)
        options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=16)
        grid = generator.generate_probability_grid(options)

        weights = np.array([p.weight for p in grid])
        probabilities = np.array([p.probability for p in grid])
        assert np.all(np.isfinite(weights))
        assert np.all(weights >= 0)
        assert np.all((probabilities >= 0.01) & (probabilities <= 1.0))

    def test_center_cell_stays_close_to_peak(self, center):
        generator = HeatmapGenerator(seed=1)
        options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=16)
        grid = generator.generate_probability_grid(options)
        nearest = min(grid, key=lambda p: haversine_m(center.lat, center.lng, p.lat, p.lng))
        assert nearest.probability == pytest.approx(0.9, abs=0.05)

    def test_isolated_points_keep_their_values(self):
        generator = HeatmapGenerator()
        lats = np.array([35.0, 36.0])
        lngs = np.array([139.0, 139.0])
        probabilities = np.array([0.4, 0.8])
        weights = np.array([40.0, 80.0])
        smoothed_p, smoothed_w = generator.interpolate_grid(lats, lngs, probabilities, weights)
        assert smoothed_p == pytest.approx(probabilities)
        assert smoothed_w == pytest.approx(weights)

    def test_neighbour_pairs_respect_radius(self):
        generator = HeatmapGenerator(HeatmapConfig(neighbor_radius_m=100.0))
        # 0, ~55 m and ~111 m north of the first point
        lats = np.array([35.0, 35.0005, 35.001])
        lngs = np.array([139.0, 139.0, 139.0])
        i, j, distances = generator.find_neighbor_pairs(lats, lngs)
        pairs = {tuple(sorted(pair)) for pair in zip(i.tolist(), j.tolist())}
        assert pairs == {(0, 1), (1, 2)}
        assert np.all(distances <= 100.0)

    def test_zero_radius_yields_single_cell(self, center):
        generator = HeatmapGenerator(seed=3)
        options = HeatmapOptions(center=center, radius_km=0, zoom_level=18)
        grid = generator.generate_probability_grid(options)
        assert len(grid) == 1
        assert grid[0].weight == pytest.approx(135.0)


class TestDetailedHeatmap:
    """Test cases for the emitted heatmap points."""

    def test_points_above_minimum_weight(self, center):
        generator = HeatmapGenerator(seed=7)
        options = HeatmapOptions(center=center, radius_km=0.5, zoom_level=16)
        heatmap = generator.generate_detailed_heatmap(options)
        assert heatmap
        assert all(isinstance(point, HeatmapData) for point in heatmap)
        assert all(point.weight > 0.5 for point in heatmap)

    def test_zero_radius_adds_jitter_points(self, center):
        generator = HeatmapGenerator(seed=3)
        options = HeatmapOptions(center=center, radius_km=0, zoom_level=18)
        heatmap = generator.generate_detailed_heatmap(options)

        assert len(heatmap) == 4
        assert heatmap[0].location == center
        for jitter in heatmap[1:]:
            assert abs(jitter.location.lat - center.lat) <= 0.00005
            assert abs(jitter.location.lng - center.lng) <= 0.00005
            assert 0.8 * 135.0 <= jitter.weight <= 135.0

    def test_same_seed_is_reproducible(self, center):
        options = HeatmapOptions(center=center, radius_km=0.3, zoom_level=16)
        first = HeatmapGenerator(seed=42).generate_detailed_heatmap(options)
        second = HeatmapGenerator(seed=42).generate_detailed_heatmap(options)
        assert first == second

    def test_injected_rng_is_used(self, center):
        options = HeatmapOptions(center=center, radius_km=0.3, zoom_level=16)
        first = HeatmapGenerator(rng=np.random.default_rng(5)).generate_detailed_heatmap(options)
        second = HeatmapGenerator(seed=5).generate_detailed_heatmap(options)
        assert first == second

    def test_no_jitter_when_disabled(self, center):
        generator = HeatmapGenerator(HeatmapConfig(jitter_points=0))
        options = HeatmapOptions(center=center, radius_km=0, zoom_level=18)
        assert len(generator.generate_detailed_heatmap(options)) == 1


class TestSightingUpdate:
    """Test cases for adding sighting rings to a heatmap."""

    def test_ring_point_count_and_weights(self, center):
        generator = HeatmapGenerator()
        updated = generator.update_heatmap_with_sighting([], center, 0.8)

        # 12 directions x 11 radii (0, 50, ..., 500 m)
        assert len(updated) == 132
        weights = [point.weight for point in updated]
        assert max(weights) == pytest.approx(80.0)
        assert min(weights) == pytest.approx(80.0 * np.exp(-1))

    def test_ring_points_within_boost_radius(self, center):
        updated = HeatmapGenerator().update_heatmap_with_sighting([], center, 1.0)
        distances = [haversine_m(center.lat, center.lng, p.location.lat, p.location.lng) for p in updated]
        assert max(distances) == pytest.approx(500.0, rel=0.01)

    def test_existing_points_untouched(self, center):
        existing = [HeatmapData(location=center, weight=10.0)]
        updated = HeatmapGenerator().update_heatmap_with_sighting(existing, {"lat": center.lat, "lng": center.lng}, 0.5)
        assert len(existing) == 1
        assert updated[0] is existing[0]
        assert len(updated) == 133

    def test_repeated_sightings_accumulate(self, center):
        generator = HeatmapGenerator()
        once = generator.update_heatmap_with_sighting([], center, 0.5)
        twice = generator.update_heatmap_with_sighting(once, center, 0.5)
        assert len(twice) == 2 * len(once)

    def test_negative_confidence_raises(self, center):
        with pytest.raises(InvalidArgumentError):
            HeatmapGenerator().update_heatmap_with_sighting([], center, -0.1)


class TestGlobeEdges:
    """Test cases for search circles that cross the antimeridian or reach a pole."""

    @pytest.mark.parametrize("center, zoom", [
        (GeoPoint(-17.7, 179.999), 16),
        (GeoPoint(10.0, -179.9995), 18),
        (GeoPoint(89.999, 0.0), 14),
        (GeoPoint(-90.0, 45.0), 16),
    ])
    def test_heatmap_points_stay_on_the_globe(self, center, zoom):
        options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=zoom)
        heatmap = HeatmapGenerator(seed=11).generate_detailed_heatmap(options)

        assert heatmap
        assert all(-90.0 <= p.location.lat <= 90.0 for p in heatmap)
        assert all(-180.0 <= p.location.lng <= 180.0 for p in heatmap)

    def test_antimeridian_grid_wraps_longitude(self):
        center = GeoPoint(-17.7, 179.999)
        options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=16)
        grid = HeatmapGenerator().generate_probability_grid(options)

        lngs = np.array([p.lng for p in grid])
        assert np.any(lngs < 0)
        distances = haversine_m(center.lat, center.lng, [p.lat for p in grid], lngs)
        assert np.max(distances) <= 1000.0 + 1e-6
        # The lattice is centred on the last-seen point, not cut off at 180 degrees
        assert np.sum(lngs < 0) > len(grid) // 4

    def test_polar_grid_within_radius(self):
        center = GeoPoint(89.999, 0.0)
        options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=14)
        grid = HeatmapGenerator().generate_probability_grid(options)

        distances = haversine_m(center.lat, center.lng, [p.lat for p in grid], [p.lng for p in grid])
        assert np.all(np.isfinite(distances))
        assert np.max(distances) <= 1000.0 + 1e-6

    def test_sighting_ring_at_pole(self):
        updated = HeatmapGenerator().update_heatmap_with_sighting([], GeoPoint(90.0, 0.0), 0.5)
        assert len(updated) == 132
        assert all(-180.0 <= p.location.lng <= 180.0 for p in updated)
