#!/usr/bin/env python3
"""
Track parsing: GPX documents and raw track samples into Route records
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Union

import gpxpy
import gpxpy.gpx

from .geometry import compute_bounding_box, path_distance
from .models import ActivityType, Point, Route

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_NAME = "Untitled Activity"

# Average speed thresholds (m/s) used when the track declares no type
RIDE_SPEED_THRESHOLD = 6.0  # ~21.6 km/h
RUN_SPEED_THRESHOLD = 2.0  # ~7.2 km/h

ACTIVITY_KEYWORDS = (
    (ActivityType.RUN, ("run",)),
    (ActivityType.RIDE, ("bike", "cycl", "ride")),
    (ActivityType.HIKE, ("hike", "walk")),
)

_TYPE_TAG = re.compile(r"<type>(.*?)</type>", re.IGNORECASE | re.DOTALL)


class ParseError(ValueError):
    """The track could not be turned into a Route."""


class MalformedInputError(ParseError):
    """The document is not readable as GPX at all."""


class EmptyTrackError(ParseError):
    """The document is valid but holds no usable track points."""


@dataclass
class RawTrack:
    """Track samples plus whatever metadata the source provides."""

    points: Sequence[Point]
    name: Optional[str] = None
    start_time: Optional[float] = None  # epoch seconds
    declared_type: Optional[str] = None
    total_distance: Optional[float] = None  # meters, if precomputed by the source


def to_timestamp(value: Optional[datetime]) -> Optional[float]:
    """Convert a datetime to epoch seconds, treating naive values as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def format_date(timestamp: Optional[float]) -> Optional[str]:
    """Format an instant as e.g. ``April 14, 2024 • 08:30`` (UTC)."""

    if timestamp is None:
        return None
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return f"{moment:%B} {moment.day}, {moment.year} • {moment:%H:%M}"


def elevation_gain(elevations: Sequence[Optional[float]]) -> float:
    """Sum of the climbs between consecutive known elevations."""

    known = [e for e in elevations if e is not None]
    gain = 0.0
    for previous, current in zip(known, known[1:]):
        if current > previous:
            gain += current - previous
    return gain


def moving_time(points: Sequence[Point]) -> float:
    """
    Seconds between the first and last timestamp of the track

    This is the wall-clock span of the recording: pauses are not detected
    and count towards the total. Returns 0 when either endpoint has no time.
    """
    if len(points) < 2:
        return 0.0
    start = points[0].timestamp
    end = points[-1].timestamp
    if start is None or end is None:
        return 0.0
    return max(0.0, end - start)


def classify_activity(declared_type: Optional[str], average_speed: float) -> ActivityType:
    """
    Classify the activity, preferring the declared type over speed

    Args:
        declared_type: Type string found in the source (e.g. "Trail Run"), if any
        average_speed: Average speed in m/s

    Returns:
        ActivityType
    """
    if declared_type:
        lowered = declared_type.lower()
        for activity_type, keywords in ACTIVITY_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return activity_type
        logger.debug(f"Declared type '{declared_type}' not recognised, using speed")

    if average_speed > RIDE_SPEED_THRESHOLD:
        return ActivityType.RIDE
    if average_speed > RUN_SPEED_THRESHOLD:
        return ActivityType.RUN
    if average_speed > 0:
        return ActivityType.HIKE
    return ActivityType.OTHER


def parse_track(raw: RawTrack) -> Route:
    """
    Build a Route and its statistics from raw track samples

    Args:
        raw: RawTrack with an ordered point list and optional metadata

    Returns:
        Route

    Raises:
        EmptyTrackError: if the track has no points
    """
    points = tuple(raw.points)
    if not points:
        raise EmptyTrackError("No track data found in GPX file.")

    if raw.total_distance is not None:
        distance = float(raw.total_distance)
    else:
        distance = path_distance(points)

    elevations = [p.elevation for p in points if p.elevation is not None]
    duration = moving_time(points)
    average_speed = distance / duration if duration > 0 else 0.0

    start_time = raw.start_time if raw.start_time is not None else points[0].timestamp

    route = Route(
        name=raw.name or DEFAULT_ROUTE_NAME,
        date=format_date(start_time),
        points=points,
        distance=distance,
        elevation_gain=elevation_gain(elevations),
        min_elevation=min(elevations) if elevations else None,
        max_elevation=max(elevations) if elevations else None,
        moving_time=duration,
        average_speed=average_speed,
        activity_type=classify_activity(raw.declared_type, average_speed),
        bounding_box=compute_bounding_box(points),
    )

    logger.info(
        f"Parsed '{route.name}': {len(points)} points, {distance / 1000:.2f} km, "
        f"+{route.elevation_gain:.0f} m, {route.activity_type.value}"
    )
    return route


def _declared_type(xml: str, track: gpxpy.gpx.GPXTrack) -> Optional[str]:
    if track.type:
        return track.type
    # Some exporters put <type> outside the track element. The whole document
    # is searched on purpose, so a later track's type can be picked up.
    match = _TYPE_TAG.search(xml)
    if match:
        return match.group(1).strip()
    return None


def read_gpx(xml: str) -> RawTrack:
    """
    Extract the first track of a GPX document

    Every segment of the first track is concatenated in order; further
    tracks are ignored.

    Raises:
        MalformedInputError: if the text is not a GPX document
        EmptyTrackError: if there is no track or it has no points
    """
    try:
        gpx = gpxpy.parse(xml)
    except gpxpy.gpx.GPXException as e:
        raise MalformedInputError(f"Could not read GPX document: {e}") from e

    if not gpx.tracks:
        raise EmptyTrackError("No track data found in GPX file.")
    if len(gpx.tracks) > 1:
        logger.debug(f"GPX holds {len(gpx.tracks)} tracks, using the first one")

    track = gpx.tracks[0]
    points: List[Point] = []
    for segment in track.segments:
        for point in segment.points:
            points.append(Point(
                latitude=point.latitude,
                longitude=point.longitude,
                elevation=point.elevation,
                timestamp=to_timestamp(point.time),
            ))

    if not points:
        raise EmptyTrackError("No track data found in GPX file.")

    return RawTrack(
        points=points,
        name=track.name or gpx.name,
        start_time=to_timestamp(gpx.time),
        declared_type=_declared_type(xml, track),
    )


def parse_gpx(xml: str) -> Route:
    """Parse GPX XML text into a Route."""

    return parse_track(read_gpx(xml))


def parse_gpx_file(path: Union[str, Path]) -> Route:
    """Read a GPX file from disk and parse it into a Route."""

    text = Path(path).read_text(encoding="utf-8")
    return parse_gpx(text)
