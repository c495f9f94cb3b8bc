"""Data types shared by the parser, geometry helpers and render engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ActivityType(str, Enum):
    """Activity classification of a route."""

    RUN = "run"
    RIDE = "ride"
    HIKE = "hike"
    OTHER = "other"


@dataclass(frozen=True)
class Point:
    """One GPS sample. ``timestamp`` is in epoch seconds."""

    latitude: float
    longitude: float
    elevation: Optional[float] = None
    timestamp: Optional[float] = None


@dataclass(frozen=True)
class BoundingBox:
    """Minimal lat/lon rectangle containing a set of points."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def delta_lat(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def delta_lon(self) -> float:
        return self.max_lon - self.min_lon


@dataclass(frozen=True)
class NormalizedPoint:
    """A point projected into the unit square, y growing downwards."""

    x: float
    y: float


@dataclass(frozen=True)
class Route:
    """A parsed track with statistics derived once at parse time."""

    name: str
    points: Tuple[Point, ...]
    bounding_box: BoundingBox
    distance: float = 0.0  # meters
    elevation_gain: float = 0.0  # meters
    date: Optional[str] = None
    min_elevation: Optional[float] = None
    max_elevation: Optional[float] = None
    moving_time: float = 0.0  # seconds, wall-clock span
    average_speed: float = 0.0  # m/s
    activity_type: ActivityType = ActivityType.OTHER

    def __post_init__(self):
        if not self.points:
            raise ValueError("A route needs at least one point")

    def summary(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict of the route statistics."""

        return {
            "name": self.name,
            "date": self.date,
            "points": len(self.points),
            "distance": self.distance,
            "elevation_gain": self.elevation_gain,
            "min_elevation": self.min_elevation,
            "max_elevation": self.max_elevation,
            "moving_time": self.moving_time,
            "average_speed": self.average_speed,
            "activity_type": self.activity_type.value,
            "bounding_box": {
                "min_lat": self.bounding_box.min_lat,
                "max_lat": self.bounding_box.max_lat,
                "min_lon": self.bounding_box.min_lon,
                "max_lon": self.bounding_box.max_lon,
            },
        }
