# petsar/utils/geo.py
"""
Geographic utility functions.

All functions accept plain floats or NumPy arrays of latitudes/longitudes in
degrees, so the heatmap generator can run them over a whole lattice at once.
"""
import numpy as np

EARTH_RADIUS_M = 6371000.0
METERS_PER_DEGREE_LAT = 111320.0
MIN_COS_LAT = 1e-12


def haversine_m(lat1, lng1, lat2, lng2):
    """Great-circle distance in meters between two points (or arrays of points)."""
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    d_phi = np.radians(np.subtract(lat2, lat1))
    d_lambda = np.radians(np.subtract(lng2, lng1))

    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    # Rounding can push `a` a hair past 1 for antipodal points
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    distance = EARTH_RADIUS_M * c
    return float(distance) if np.ndim(distance) == 0 else distance


def distance_between(point_a, point_b) -> float:
    """Haversine distance in meters between two objects exposing ``lat``/``lng``."""
    return haversine_m(point_a.lat, point_a.lng, point_b.lat, point_b.lng)


def meters_to_lat_degrees(meters):
    return np.divide(meters, METERS_PER_DEGREE_LAT)


def meters_to_lng_degrees(meters, at_lat):
    # cos(lat) is floored so the result stays finite at the poles
    cos_lat = np.maximum(np.cos(np.radians(at_lat)), MIN_COS_LAT)
    return np.divide(meters, METERS_PER_DEGREE_LAT * cos_lat)


def to_unit_sphere_xyz(lats, lngs, radius=EARTH_RADIUS_M):
    """
    Projects lat/lng arrays onto 3D Cartesian coordinates on a sphere.

    Straight-line (chord) distance between two projected points grows
    monotonically with their great-circle distance, which makes the projection
    usable for exact radius queries in a KD-tree.

    Returns:
        np.ndarray: Array of shape (n, 3).
    """
    phi = np.radians(np.asarray(lats, dtype=float))
    lam = np.radians(np.asarray(lngs, dtype=float))
    cos_phi = np.cos(phi)
    return np.column_stack((
        radius * cos_phi * np.cos(lam),
        radius * cos_phi * np.sin(lam),
        radius * np.sin(phi),
    ))


def chord_length_m(arc_m, radius=EARTH_RADIUS_M):
    """Chord length for a great-circle arc of ``arc_m`` meters."""
    return 2 * radius * np.sin(arc_m / (2 * radius))


def normalize_lat_lng(lats, lngs):
    """
    Brings raw lat/lng arrays back onto the globe.

    Latitudes that overshoot a pole are folded back over it (the point moves to
    the opposite meridian), then longitudes are wrapped into [-180, 180].
    """
    lats = np.asarray(lats, dtype=float)
    lngs = np.asarray(lngs, dtype=float)
    over = lats > 90.0
    under = lats < -90.0
    lats = np.where(over, 180.0 - lats, np.where(under, -180.0 - lats, lats))
    lats = np.clip(lats, -90.0, 90.0)
    lngs = np.where(over | under, lngs + 180.0, lngs)
    outside = (lngs < -180.0) | (lngs > 180.0)
    lngs = np.where(outside, (lngs + 180.0) % 360.0 - 180.0, lngs)
    return lats, lngs
