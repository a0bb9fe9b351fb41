# petsar/analysis/heatmap.py
"""
Grid-based discovery-probability heatmaps around a pet's last-seen location.

The generator lays a square lattice over a circular search area, scores each
cell with a distance-decay curve derived from lost-pet recovery statistics
(roughly half of pets are found within 400 m, 70% within 1.6 km), smooths the
lattice with a Gaussian kernel and emits weighted points for a map heatmap
layer.
"""
import math
from dataclasses import dataclass

import numpy as np
from scipy.spatial import cKDTree

from ..core.geometries import GeoPoint
from ..core.models import GridPoint, HeatmapData
from ..utils.geo import (
    chord_length_m,
    haversine_m,
    meters_to_lat_degrees,
    meters_to_lng_degrees,
    normalize_lat_lng,
    to_unit_sphere_xyz,
)
from ..utils.logging_setup import get_logger
from ..utils.pet_behavior import (
    PET_SIZE_LARGE,
    PET_SIZE_MEDIUM,
    PET_SIZE_SMALL,
    PET_SIZES,
    get_terrain_factor,
)
from ..utils.validation import require_choice, require_finite, require_non_negative

log = get_logger()

MIN_GRID_SIZE_M = 25
MAX_GRID_SIZE_M = 200

# (minimum zoom level, cell edge in meters), checked in order
ZOOM_GRID_SIZES = (
    (18, MIN_GRID_SIZE_M),
    (16, 50),
    (14, 100),
    (12, 150),
)

# (upper bound in hours, factor); anything older uses LATE_TIME_FACTOR
TIME_DECAY_STEPS = (
    (6, 1.0),
    (12, 0.9),
    (24, 0.75),
    (48, 0.5),
    (72, 0.35),
)
LATE_TIME_FACTOR = 0.2

MIN_PROBABILITY = 0.01
MAX_PROBABILITY = 1.0


class HeatmapConfig:
    """
    Tunable parameters for heatmap smoothing, densification and sighting boosts.
    """

    def __init__(self, **kwargs):
        """
        Args:
            **kwargs: Parameter overrides.
                neighbor_radius_m (float): Smoothing neighbourhood. Defaults to 100.0.
                smoothing_sigma_m (float): Gaussian kernel sigma. Defaults to 50.0.
                min_weight (float): Points at or below this weight are dropped. Defaults to 0.5.
                densify_threshold (float): Probability above which jitter points are added. Defaults to 0.5.
                jitter_points (int): Jitter points per high-probability cell. Defaults to 3.
                jitter_span_deg (float): Full width of the jitter window in degrees. Defaults to 0.0001.
                jitter_min_factor (float): Lower bound of the jitter value factor. Defaults to 0.8.
                sighting_boost_radius_m (float): Ring radius around a sighting. Defaults to 500.0.
                sighting_step_m (float): Radial step of the sighting ring. Defaults to 50.0.
                sighting_angle_step_deg (int): Angular step of the sighting ring. Defaults to 30.
        """
        self.neighbor_radius_m = kwargs.pop('neighbor_radius_m', 100.0)
        self.smoothing_sigma_m = kwargs.pop('smoothing_sigma_m', 50.0)
        self.min_weight = kwargs.pop('min_weight', 0.5)
        self.densify_threshold = kwargs.pop('densify_threshold', 0.5)
        self.jitter_points = kwargs.pop('jitter_points', 3)
        self.jitter_span_deg = kwargs.pop('jitter_span_deg', 0.0001)
        self.jitter_min_factor = kwargs.pop('jitter_min_factor', 0.8)
        self.sighting_boost_radius_m = kwargs.pop('sighting_boost_radius_m', 500.0)
        self.sighting_step_m = kwargs.pop('sighting_step_m', 50.0)
        self.sighting_angle_step_deg = kwargs.pop('sighting_angle_step_deg', 30)

        # Store any additional parameters not explicitly defined
        self.additional_params = kwargs

    def __repr__(self):
        return (
            f"HeatmapConfig(neighbor_radius_m={self.neighbor_radius_m}, "
            f"smoothing_sigma_m={self.smoothing_sigma_m}, min_weight={self.min_weight}, "
            f"jitter_points={self.jitter_points})"
        )


@dataclass(frozen=True)
class HeatmapOptions:
    center: GeoPoint
    radius_km: float
    zoom_level: float
    time_elapsed: float = 0.0  # hours
    pet_size: str = PET_SIZE_MEDIUM
    terrain_type: str | None = None

    def __post_init__(self):
        if not isinstance(self.center, GeoPoint):
            object.__setattr__(self, "center", GeoPoint.from_dict(self.center))
        object.__setattr__(self, "radius_km", require_non_negative(self.radius_km, "radius_km"))
        object.__setattr__(self, "zoom_level", require_finite(self.zoom_level, "zoom_level"))
        object.__setattr__(self, "time_elapsed", require_non_negative(self.time_elapsed, "time_elapsed"))
        require_choice(self.pet_size, PET_SIZES, "pet_size")

    @property
    def radius_m(self) -> float:
        return self.radius_km * 1000


def calculate_optimal_grid_size(zoom_level: float) -> int:
    """Cell edge length in meters for a map zoom level; closer zoom means finer cells."""
    for min_zoom, grid_size in ZOOM_GRID_SIZES:
        if zoom_level >= min_zoom:
            return grid_size
    return MAX_GRID_SIZE_M


def calculate_time_decay(hours: float) -> float:
    for max_hours, factor in TIME_DECAY_STEPS:
        if hours <= max_hours:
            return factor
    return LATE_TIME_FACTOR


def base_probability(distance_km):
    """Piecewise distance-decay curve, vectorised over a distance array in km."""
    d = np.asarray(distance_km, dtype=float)
    return np.select(
        [d <= 0.4, d <= 1.6, d <= 3.0],
        [0.9 - d * 0.5, 0.7 - (d - 0.4) * 0.3, 0.4 - (d - 1.6) * 0.15],
        default=np.maximum(0.05, 0.25 * np.exp(-d / 5)),
    )


def size_factor(pet_size: str, distance_km):
    # Small pets stay close; large pets keep moving further out
    d = np.asarray(distance_km, dtype=float)
    if pet_size == PET_SIZE_SMALL:
        return np.where(d <= 1, 1.2, 0.6)
    if pet_size == PET_SIZE_LARGE:
        return np.where(d > 2, 1.3, 0.9)
    return np.ones_like(d)


def probability_at_distance(distance_m, options: HeatmapOptions):
    distance_km = np.asarray(distance_m, dtype=float) / 1000
    probability = (
        base_probability(distance_km)
        * calculate_time_decay(options.time_elapsed)
        * size_factor(options.pet_size, distance_km)
        * get_terrain_factor(options.terrain_type)
    )
    return np.clip(probability, MIN_PROBABILITY, MAX_PROBABILITY)


def weight_for(probability, distance_m, radius_m: float):
    """Heatmap weight: probability scaled to 0-100 with a bonus toward the center."""
    if radius_m > 0:
        distance_bonus = np.maximum(0.0, 1 - np.asarray(distance_m, dtype=float) / radius_m)
    else:
        distance_bonus = np.ones_like(np.asarray(distance_m, dtype=float))
    return np.asarray(probability) * 100 * (1 + distance_bonus * 0.5)


class HeatmapGenerator:
    """
    Builds detailed discovery-probability heatmaps.

    Args:
        config (HeatmapConfig, optional): Tunable parameters.
        rng (numpy.random.Generator, optional): Source of randomness for the
            cosmetic jitter points. Takes precedence over ``seed``.
        seed (int, optional): Seed for a fresh generator when ``rng`` is not given.
    """

    def __init__(self, config: HeatmapConfig | None = None, rng: np.random.Generator | None = None, seed=None):
        self.config = config or HeatmapConfig()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def generate_detailed_heatmap(self, options: HeatmapOptions) -> list[HeatmapData]:
        grid = self._build_grid(options)
        heatmap = self._convert_to_heatmap_data(*grid)
        log.info(
            f"Generated {len(heatmap)} heatmap points around ({options.center.lat:.5f}, {options.center.lng:.5f}) "
            f"for radius {options.radius_km} km at zoom {options.zoom_level}"
        )
        return heatmap

    def generate_probability_grid(self, options: HeatmapOptions) -> list[GridPoint]:
        """Smoothed lattice before filtering and densification."""
        lats, lngs, probabilities, weights = self._build_grid(options)
        return [
            GridPoint(lat=float(lat), lng=float(lng), probability=float(p), weight=float(w))
            for lat, lng, p, w in zip(lats, lngs, probabilities, weights, strict=True)
        ]

    def _build_grid(self, options: HeatmapOptions):
        grid_size = calculate_optimal_grid_size(options.zoom_level)
        lats, lngs, distances = self.generate_grid_points(options, grid_size)
        probabilities = probability_at_distance(distances, options)
        weights = weight_for(probabilities, distances, options.radius_m)
        probabilities, weights = self.interpolate_grid(lats, lngs, probabilities, weights)
        return lats, lngs, probabilities, weights

    def generate_grid_points(self, options: HeatmapOptions, grid_size: float):
        """
        Lays a square lattice over the search circle.

        Returns:
            tuple[np.ndarray, np.ndarray, np.ndarray]: Latitudes, longitudes and
            haversine distances to the center (meters) of the points kept.
        """
        center = options.center
        radius_m = options.radius_m
        grid_size_lat = meters_to_lat_degrees(grid_size)
        grid_size_lng = meters_to_lng_degrees(grid_size, center.lat)

        num_grids = math.ceil((radius_m * 2) / grid_size)
        # Near a pole the columns would wrap the globe several times over
        grid_size_lng = min(grid_size_lng, 360.0 / (num_grids + 1))
        # Offsets run from -n/2 to n/2 in unit steps, so odd n gives half-cell offsets
        offsets = np.arange(-num_grids / 2, num_grids / 2 + 0.5, 1.0)
        lat_offsets, lng_offsets = np.meshgrid(offsets, offsets, indexing="ij")

        lats, lngs = normalize_lat_lng(
            center.lat + lat_offsets.ravel() * grid_size_lat,
            center.lng + lng_offsets.ravel() * grid_size_lng,
        )
        distances = np.atleast_1d(haversine_m(center.lat, center.lng, lats, lngs))

        inside = distances <= radius_m
        log.debug(
            f"Grid size {grid_size} m: {offsets.size ** 2} lattice points, {int(inside.sum())} inside {radius_m:.0f} m"
        )
        return lats[inside], lngs[inside], distances[inside]

    def find_neighbor_pairs(self, lats, lngs):
        """
        Finds all point pairs closer than the smoothing radius.

        Returns:
            tuple[np.ndarray, np.ndarray, np.ndarray]: Index arrays ``i``, ``j`` and
            the haversine distance of each pair (meters).
        """
        empty = (np.empty(0, dtype=int), np.empty(0, dtype=int), np.empty(0))
        if len(lats) < 2:
            return empty

        radius = self.config.neighbor_radius_m
        tree = cKDTree(to_unit_sphere_xyz(lats, lngs))
        # Chord length is a tight bound; the haversine check below makes it exact
        pairs = tree.query_pairs(r=chord_length_m(radius) + 1e-6, output_type="ndarray")
        if len(pairs) == 0:
            return empty

        i, j = pairs[:, 0], pairs[:, 1]
        distances = haversine_m(lats[i], lngs[i], lats[j], lngs[j])
        keep = distances <= radius
        return i[keep], j[keep], distances[keep]

    def interpolate_grid(self, lats, lngs, probabilities, weights):
        """
        Gaussian-weighted average of each point with its neighbours.

        Points without neighbours keep their values.
        """
        n = len(lats)
        i, j, distances = self.find_neighbor_pairs(lats, lngs)
        sigma = self.config.smoothing_sigma_m
        kernel = np.exp(-distances * distances / (2 * sigma * sigma))

        rows = np.concatenate([i, j])
        cols = np.concatenate([j, i])
        pair_kernel = np.concatenate([kernel, kernel])

        # The point itself contributes with kernel weight exp(0) = 1
        total_kernel = 1.0 + np.bincount(rows, weights=pair_kernel, minlength=n)
        smoothed_probabilities = (
            probabilities + np.bincount(rows, weights=pair_kernel * probabilities[cols], minlength=n)
        ) / total_kernel
        smoothed_weights = (
            weights + np.bincount(rows, weights=pair_kernel * weights[cols], minlength=n)
        ) / total_kernel

        log.debug(f"Smoothed {n} grid points using {len(i)} neighbour pairs")
        return smoothed_probabilities, smoothed_weights

    def _convert_to_heatmap_data(self, lats, lngs, probabilities, weights) -> list[HeatmapData]:
        keep = weights > self.config.min_weight
        lats, lngs = lats[keep], lngs[keep]
        probabilities, weights = probabilities[keep], weights[keep]

        heatmap = [
            HeatmapData(location=GeoPoint(float(lat), float(lng)), weight=float(w))
            for lat, lng, w in zip(lats, lngs, weights, strict=True)
        ]
        heatmap.extend(self.enhance_point_density(lats, lngs, probabilities, weights))
        return heatmap

    def enhance_point_density(self, lats, lngs, probabilities, weights) -> list[HeatmapData]:
        """
        Adds jitter points around high-probability cells so the rendered layer
        looks continuous. The jitter is cosmetic and never feeds back into any
        probability.
        """
        config = self.config
        high = probabilities > config.densify_threshold
        count = int(high.sum())
        if count == 0 or config.jitter_points <= 0:
            return []

        # Per jitter point: lat offset, lng offset, weight factor
        draws = self.rng.random((count, config.jitter_points, 3))
        factor_span = 1.0 - config.jitter_min_factor
        jitter_lats, jitter_lngs = normalize_lat_lng(
            lats[high][:, None] + (draws[..., 0] - 0.5) * config.jitter_span_deg,
            lngs[high][:, None] + (draws[..., 1] - 0.5) * config.jitter_span_deg,
        )
        jitter_weights = weights[high][:, None] * (config.jitter_min_factor + draws[..., 2] * factor_span)

        log.debug(f"Added {jitter_lats.size} jitter points around {count} high-probability cells")
        return [
            HeatmapData(location=GeoPoint(float(lat), float(lng)), weight=float(w))
            for lat, lng, w in zip(jitter_lats.ravel(), jitter_lngs.ravel(), jitter_weights.ravel(), strict=True)
        ]

    def update_heatmap_with_sighting(
        self,
        current_heatmap: list[HeatmapData],
        sighting_location: GeoPoint,
        confidence: float,
    ) -> list[HeatmapData]:
        """
        Returns a new heatmap with a ring of boosted points around a sighting.

        Existing points are left untouched and nothing is renormalised, so every
        call adds weight; callers that apply sightings repeatedly should rebuild
        from a fresh heatmap rather than feeding the result back in.
        """
        confidence = require_non_negative(confidence, "confidence")
        if not isinstance(sighting_location, GeoPoint):
            sighting_location = GeoPoint.from_dict(sighting_location)
        config = self.config
        boost_radius = config.sighting_boost_radius_m
        radii = np.arange(0, boost_radius + config.sighting_step_m / 2, config.sighting_step_m)

        updated = list(current_heatmap)
        for angle in np.arange(0, 360, config.sighting_angle_step_deg):
            angle_rad = math.radians(angle)
            for r in radii.tolist():
                lat_offset = float(meters_to_lat_degrees(r * math.cos(angle_rad)))
                lng_offset = float(meters_to_lng_degrees(r * math.sin(angle_rad), sighting_location.lat))
                weight = confidence * 100 * math.exp(-r / boost_radius)
                updated.append(HeatmapData(location=sighting_location.offset(lat_offset, lng_offset), weight=weight))

        log.info(
            f"Added {len(updated) - len(current_heatmap)} sighting points at "
            f"({sighting_location.lat:.5f}, {sighting_location.lng:.5f}) with confidence {confidence}"
        )
        return updated
