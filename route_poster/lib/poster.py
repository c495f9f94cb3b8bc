"""High-level utilities for composing and exporting route posters."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from PIL import Image, ImageColor

from .. import config
from .canvas_engine import CanvasEngine, ColorScheme, DrawOptions
from .models import NormalizedPoint, Route

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LightTheme:
    """Black line on white."""

    is_dark = False

    def colors(self) -> ColorScheme:
        return ColorScheme(background="#ffffff", stroke="#000000", text="#000000")


@dataclass(frozen=True)
class DarkTheme:
    """White line on black."""

    is_dark = True

    def colors(self) -> ColorScheme:
        return ColorScheme(background="#000000", stroke="#ffffff", text="#ffffff")


@dataclass(frozen=True)
class CustomTheme:
    """User-picked background and stroke; text follows the stroke."""

    background: str = "#ffffff"
    stroke: str = "#000000"

    is_dark = False

    def colors(self) -> ColorScheme:
        return ColorScheme(background=self.background, stroke=self.stroke, text=self.stroke)


Theme = Union[LightTheme, DarkTheme, CustomTheme]

THEMES = ("light", "dark", "custom")


def theme_from_name(name: str, background: Optional[str] = None, stroke: Optional[str] = None) -> Theme:
    """Build a theme from its identifier; colors only apply to ``custom``."""

    name = (name or "light").strip().lower()
    if name == "light":
        return LightTheme()
    if name == "dark":
        return DarkTheme()
    if name == "custom":
        theme = CustomTheme(background=background or "#ffffff", stroke=stroke or "#000000")
        # Fail early on colors Pillow cannot parse
        ImageColor.getrgb(theme.background)
        ImageColor.getrgb(theme.stroke)
        return theme
    raise ValueError(f"Unknown theme: {name} (expected one of {', '.join(THEMES)})")


def format_time(seconds: Optional[float]) -> str:
    """Format seconds as ``h:mm:ss``, or ``m:ss`` under an hour."""

    if not seconds:
        return "0:00"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_pace(meters_per_second: Optional[float]) -> str:
    """Format a speed as a ``m:ss`` per-kilometer pace."""

    if not meters_per_second or meters_per_second <= 0:
        return "0:00"
    seconds_per_km = 1000 / meters_per_second
    minutes = int(seconds_per_km // 60)
    secs = int(seconds_per_km % 60)
    return f"{minutes}:{secs:02d}"


def route_stats(route: Route) -> List[Tuple[str, str]]:
    """Label/value pairs shown under the route frame."""

    return [
        ("Distance", f"{route.distance / 1000:.1f} km"),
        ("Elevation", f"{round(route.elevation_gain or 0)} m"),
        ("Time", format_time(route.moving_time)),
        ("Avg pace", f"{format_pace(route.average_speed)} /km"),
    ]


def default_subtext(route: Route) -> str:
    return f"{route.distance / 1000:.1f} KM • {route.date or 'Unknown Date'}"


def poster_filename(title: str) -> str:
    """File name for an exported poster, e.g. ``paris-marathon-poster.png``."""

    slug = re.sub(r"\s+", "-", (title or "route").strip().lower())
    return f"{slug}-poster.png"


@dataclass(frozen=True)
class PosterSettings:
    """Rendering configuration for a poster."""

    title: str = "My Activity"
    subtext: str = ""
    theme: Theme = field(default_factory=LightTheme)
    stroke_width: float = 2.0
    padding: float = 0.15
    dark_frame: Optional[bool] = None  # None = follow the theme
    show_stats: bool = True
    show_markers: bool = True

    @property
    def frame_is_dark(self) -> bool:
        if self.dark_frame is None:
            return self.theme.is_dark
        return self.dark_frame

    @classmethod
    def from_route(cls, route: Route, **overrides) -> "PosterSettings":
        """Default settings for a route: its name as title, distance and date as subtext."""

        settings = cls(title=route.name, subtext=default_subtext(route))
        return replace(settings, **overrides) if overrides else settings


def create_surface(width: int, height: int, pixel_ratio: float = 1.0) -> Image.Image:
    """Create a transparent RGBA surface scaled for the given pixel density."""

    return Image.new("RGBA", (round(width * pixel_ratio), round(height * pixel_ratio)), (0, 0, 0, 0))


def paint_poster(surface: Image.Image, points: Sequence[NormalizedPoint], settings: PosterSettings,
                 route: Optional[Route] = None, pixel_ratio: float = 1.0) -> Image.Image:
    """
    Paint a poster onto an existing surface

    Args:
        surface: RGBA image already sized for the output density
        points: Normalized route points
        settings: PosterSettings
        route: Route providing the stats row (optional)
        pixel_ratio: Device pixel ratio the surface was scaled by; the stroke
                     width is multiplied by it so lines keep their weight

    Returns:
        The painted surface
    """
    width, height = surface.size
    colors = settings.theme.colors()
    options = DrawOptions(
        color=colors.stroke,
        line_width=settings.stroke_width * pixel_ratio,
        padding=settings.padding,
        is_dark=settings.frame_is_dark,
        width=width,
        height=height,
        show_markers=settings.show_markers,
    )
    stats = route_stats(route) if (route is not None and settings.show_stats) else None

    return CanvasEngine.render(surface, points, options, colors,
                               title=settings.title, subtext=settings.subtext, stats=stats)


def render_poster(route: Optional[Route], points: Sequence[NormalizedPoint], settings: PosterSettings,
                  width: int = config.POSTER_WIDTH, height: int = config.POSTER_HEIGHT,
                  pixel_ratio: float = config.PIXEL_RATIO) -> Image.Image:
    """Render a poster onto a new surface of ``width x height`` logical pixels."""

    surface = create_surface(width, height, pixel_ratio)
    logger.debug(f"Rendering poster at {surface.size[0]}x{surface.size[1]} px")
    return paint_poster(surface, points, settings, route=route, pixel_ratio=pixel_ratio)


def export_png(image: Image.Image) -> bytes:
    """Encode a rendered poster as PNG bytes."""

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def save_poster(image: Image.Image, path: Union[str, Path]) -> Path:
    """Write a rendered poster to disk as PNG."""

    path = Path(path)
    image.save(path, "PNG")
    logger.info(f"Poster saved to: {path}")
    return path


@dataclass
class _RenderRequest:
    surface: Image.Image
    points: Sequence[NormalizedPoint]
    settings: PosterSettings
    route: Optional[Route]
    pixel_ratio: float


class RenderScheduler:
    """
    Coalesce render requests into one paint per frame

    ``request`` only records what to paint; a newer request replaces a
    pending one, which is then never painted. ``flush`` is called at the
    next paint opportunity and paints the latest request, if any.
    """

    def __init__(self):
        self._pending: Optional[_RenderRequest] = None
        self.frames_painted = 0
        self.requests_superseded = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self, surface: Image.Image, points: Sequence[NormalizedPoint], settings: PosterSettings,
                route: Optional[Route] = None, pixel_ratio: float = 1.0) -> None:
        if self._pending is not None:
            self.requests_superseded += 1
        self._pending = _RenderRequest(surface, points, settings, route, pixel_ratio)

    def cancel(self) -> None:
        self._pending = None

    def flush(self) -> Optional[Image.Image]:
        """Paint the latest pending request and return its surface."""

        job, self._pending = self._pending, None
        if job is None:
            return None
        paint_poster(job.surface, job.points, job.settings, route=job.route, pixel_ratio=job.pixel_ratio)
        self.frames_painted += 1
        return job.surface
