#!/usr/bin/env python3
"""
Geometry utilities: bounding boxes, unit-square projection and distances
"""

import math
from typing import List, Sequence

import numpy as np

from .models import BoundingBox, NormalizedPoint, Point

# Mean Earth radius in meters
EARTH_RADIUS_M = 6371000.0


def compute_bounding_box(points: Sequence[Point]) -> BoundingBox:
    """
    Compute the minimal lat/lon rectangle containing all points

    Args:
        points: Ordered sequence of Points (only latitude/longitude are used)

    Returns:
        BoundingBox. An empty input yields the all-zero box.
    """
    if not points:
        return BoundingBox(0.0, 0.0, 0.0, 0.0)

    min_lat = max_lat = points[0].latitude
    min_lon = max_lon = points[0].longitude

    for point in points:
        if point.latitude < min_lat:
            min_lat = point.latitude
        elif point.latitude > max_lat:
            max_lat = point.latitude
        if point.longitude < min_lon:
            min_lon = point.longitude
        elif point.longitude > max_lon:
            max_lon = point.longitude

    return BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lon=min_lon, max_lon=max_lon)


def normalize(points: Sequence[Point], bounding_box: BoundingBox) -> List[NormalizedPoint]:
    """
    Project GPS points into the unit square

    Both axes are divided by the larger of the two geographic extents so the
    route keeps its true aspect ratio, and the narrower axis is centered.
    Latitude grows northwards while raster y grows downwards, hence the flip.

    Args:
        points: Ordered sequence of Points
        bounding_box: Box computed from the same points

    Returns:
        List of NormalizedPoint, same length and order as ``points``.
        When every point coincides, each maps to (0.5, 0.5).
    """
    if not points:
        return []

    delta_lat = bounding_box.delta_lat
    delta_lon = bounding_box.delta_lon
    scale = max(delta_lat, delta_lon)

    if scale == 0:
        return [NormalizedPoint(0.5, 0.5) for _ in points]

    offset_lon = (scale - delta_lon) / 2
    offset_lat = (scale - delta_lat) / 2

    coords_array = np.array([[p.latitude, p.longitude] for p in points], dtype=np.float64)
    xs = (coords_array[:, 1] - bounding_box.min_lon + offset_lon) / scale
    ys = 1 - (coords_array[:, 0] - bounding_box.min_lat + offset_lat) / scale

    return [NormalizedPoint(float(x), float(y)) for x, y in zip(xs, ys)]


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth

    Args:
        lat1, lon1: Coordinates of first point (in degrees)
        lat2, lon2: Coordinates of second point (in degrees)

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(math.sqrt(min(1.0, a)))

    return EARTH_RADIUS_M * c


def segment_distances(points: Sequence[Point]) -> np.ndarray:
    """Haversine length in meters of each consecutive leg of the track."""

    if len(points) < 2:
        return np.zeros(0)

    coords_array = np.radians(np.array([[p.latitude, p.longitude] for p in points], dtype=np.float64))
    lats = coords_array[:, 0]
    lons = coords_array[:, 1]

    dlat = np.diff(lats)
    dlon = np.diff(lons)
    a = np.sin(dlat / 2) ** 2 + np.cos(lats[:-1]) * np.cos(lats[1:]) * np.sin(dlon / 2) ** 2
    c = 2 * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))

    return EARTH_RADIUS_M * c


def path_distance(points: Sequence[Point]) -> float:
    """Total length of the track in meters."""

    return float(np.sum(segment_distances(points)))
