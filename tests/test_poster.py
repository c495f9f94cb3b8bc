"""Tests for poster composition: themes, settings, formatting and scheduling."""

import pytest

from route_poster.lib.geometry import normalize
from route_poster.lib.poster import (
    CustomTheme,
    DarkTheme,
    LightTheme,
    PosterSettings,
    RenderScheduler,
    create_surface,
    export_png,
    format_pace,
    format_time,
    poster_filename,
    render_poster,
    route_stats,
    save_poster,
    theme_from_name,
)
from route_poster.lib.track_parser import parse_gpx


@pytest.fixture
def route(triangle_gpx):
    return parse_gpx(triangle_gpx)


@pytest.fixture
def points(route):
    return normalize(route.points, route.bounding_box)


def test_themes_resolve_to_colors():
    assert LightTheme().colors().background == "#ffffff"
    assert DarkTheme().colors().stroke == "#ffffff"

    custom = CustomTheme(background="#f4efe6", stroke="#1f3b2d").colors()
    assert custom.background == "#f4efe6"
    assert custom.stroke == custom.text == "#1f3b2d"


def test_theme_from_name():
    assert isinstance(theme_from_name("Dark"), DarkTheme)
    assert theme_from_name("custom", background="#000000") == CustomTheme(background="#000000")
    with pytest.raises(ValueError):
        theme_from_name("neon")


def test_frame_follows_theme_unless_forced():
    assert PosterSettings(theme=DarkTheme()).frame_is_dark
    assert not PosterSettings(theme=LightTheme()).frame_is_dark
    assert PosterSettings(theme=LightTheme(), dark_frame=True).frame_is_dark


def test_settings_from_route(route):
    settings = PosterSettings.from_route(route, stroke_width=3)

    assert settings.title == "Morning Loop"
    assert settings.subtext.startswith(f"{route.distance / 1000:.1f} KM • April 14, 2024")
    assert settings.stroke_width == 3


@pytest.mark.parametrize("seconds, expected", [
    (None, "0:00"),
    (0, "0:00"),
    (65, "1:05"),
    (3725, "1:02:05"),
])
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


@pytest.mark.parametrize("speed, expected", [
    (None, "0:00"),
    (0, "0:00"),
    (2.5, "6:40"),
    (4.0, "4:10"),
])
def test_format_pace(speed, expected):
    assert format_pace(speed) == expected


def test_route_stats(route):
    stats = dict(route_stats(route))

    assert stats["Elevation"] == "30 m"
    assert stats["Time"] == "30:00"
    assert stats["Distance"].endswith(" km")


def test_poster_filename():
    assert poster_filename("Paris  Marathon 2024") == "paris-marathon-2024-poster.png"


def test_render_poster_scales_with_pixel_ratio(route, points):
    image = render_poster(route, points, PosterSettings.from_route(route), width=100, height=150, pixel_ratio=2)

    assert image.size == (200, 300)
    assert image.mode == "RGBA"
    # Light theme background
    assert image.getpixel((2, 2)) == (255, 255, 255, 255)


def test_render_poster_dark_theme(route, points):
    settings = PosterSettings.from_route(route, theme=DarkTheme())

    image = render_poster(route, points, settings, width=100, height=150, pixel_ratio=1)

    assert image.getpixel((2, 2)) == (0, 0, 0, 255)


def test_render_poster_with_single_point(points):
    image = render_poster(None, points[:1], PosterSettings(), width=100, height=150, pixel_ratio=1)

    assert image.size == (100, 150)


def test_export_png(route, points):
    image = render_poster(route, points, PosterSettings.from_route(route), width=100, height=150, pixel_ratio=1)

    assert export_png(image).startswith(b"\x89PNG\r\n\x1a\n")


def test_save_poster(tmp_path, route, points):
    image = render_poster(route, points, PosterSettings.from_route(route), width=100, height=150, pixel_ratio=1)

    path = save_poster(image, tmp_path / "poster.png")

    assert path.exists()
    assert path.read_bytes().startswith(b"\x89PNG")


def test_scheduler_paints_only_latest_request(route, points):
    scheduler = RenderScheduler()
    stale = create_surface(100, 150)
    latest = create_surface(100, 150)

    scheduler.request(stale, points, PosterSettings(title="old"), route=route)
    scheduler.request(latest, points, PosterSettings(title="new"), route=route)
    painted = scheduler.flush()

    assert painted is latest
    assert latest.getbbox() is not None
    assert stale.getbbox() is None
    assert scheduler.frames_painted == 1
    assert scheduler.requests_superseded == 1
    assert not scheduler.pending


def test_scheduler_flush_without_request():
    assert RenderScheduler().flush() is None


def test_scheduler_cancel(points):
    scheduler = RenderScheduler()
    surface = create_surface(100, 150)

    scheduler.request(surface, points, PosterSettings())
    scheduler.cancel()

    assert scheduler.flush() is None
    assert surface.getbbox() is None


def test_custom_theme_rejects_bad_color():
    with pytest.raises(ValueError):
        theme_from_name("custom", background="not-a-color")
