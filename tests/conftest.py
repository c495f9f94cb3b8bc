"""Shared fixtures: small GPX documents built on the fly."""

import pytest

GPX_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<gpx version="1.1" creator="pytest" xmlns="http://www.topografix.com/GPX/1/1">\n'
)


def _trkpt(lat, lon, ele=None, time=None):
    inner = ""
    if ele is not None:
        inner += f"<ele>{ele}</ele>"
    if time is not None:
        inner += f"<time>{time}</time>"
    return f'      <trkpt lat="{lat}" lon="{lon}">{inner}</trkpt>\n'


def build_gpx(points, name=None, activity_type=None, metadata_time=None, extra_tracks=""):
    """points: iterable of (lat, lon, ele, time) tuples; ele/time may be None."""
    doc = GPX_HEADER
    if metadata_time:
        doc += f"  <metadata><time>{metadata_time}</time></metadata>\n"
    doc += "  <trk>\n"
    if name:
        doc += f"    <name>{name}</name>\n"
    if activity_type:
        doc += f"    <type>{activity_type}</type>\n"
    doc += "    <trkseg>\n"
    for point in points:
        doc += _trkpt(*point)
    doc += "    </trkseg>\n  </trk>\n"
    doc += extra_tracks
    doc += "</gpx>\n"
    return doc


# A small triangle closed back on its first corner
TRIANGLE = [
    (45.0, 6.0, 100, "2024-04-14T08:00:00Z"),
    (45.01, 6.0, 90, "2024-04-14T08:10:00Z"),
    (45.0, 6.01, 120, "2024-04-14T08:20:00Z"),
    (45.0, 6.0, 115, "2024-04-14T08:30:00Z"),
]


@pytest.fixture
def make_gpx():
    return build_gpx


@pytest.fixture
def triangle_gpx():
    return build_gpx(TRIANGLE, name="Morning Loop")


@pytest.fixture
def trail_run_gpx():
    return build_gpx(TRIANGLE, name="Ridge Trail", activity_type="Trail Run")


@pytest.fixture
def untimed_gpx():
    return build_gpx([(45.0, 6.0, None, None), (45.002, 6.003, None, None)], name="Sketch")


@pytest.fixture
def empty_track_gpx():
    return GPX_HEADER + "  <trk><name>Nothing</name><trkseg></trkseg></trk>\n</gpx>\n"


@pytest.fixture
def gpx_file(tmp_path, triangle_gpx):
    path = tmp_path / "morning-loop.gpx"
    path.write_text(triangle_gpx, encoding="utf-8")
    return path
