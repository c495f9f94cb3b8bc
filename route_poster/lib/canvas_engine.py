#!/usr/bin/env python3
"""
Stateless drawing procedures for route posters

Every procedure takes the surface to paint on (an RGBA PIL Image) and the
full set of inputs it needs. Nothing is kept between calls. The surface is
assumed to already be sized for the output pixel density: one surface unit
is one pixel.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from .. import config
from .models import NormalizedPoint

logger = logging.getLogger(__name__)

# Gallery frame layout, as fractions of the canvas
FRAME_MARGIN = 0.1  # of width, on every side
FRAME_HEIGHT = 0.75  # of height

FRAME_FILL_DARK = '#121212'
FRAME_FILL_LIGHT = '#ffffff'
FRAME_BORDER_DARK = (255, 255, 255, 38)  # 15% white
FRAME_BORDER_LIGHT = (0, 0, 0, 26)  # 10% black

# Caption layout
TEXT_ZONE_Y = 0.88  # of height
TITLE_SIZE = 0.04  # of width
SUBTITLE_SIZE = 0.025  # of width
STAT_LABEL_SIZE = 0.02  # of width
STAT_VALUE_SIZE = 0.026  # of width
HALF_OPACITY = 128

START_MARKER_RADIUS = 1.5  # x line width
FINISH_MARKER_RADIUS = 2.0  # x line width


@dataclass(frozen=True)
class ColorScheme:
    """Concrete colors a poster is painted with."""

    background: str
    stroke: str
    text: str


@dataclass(frozen=True)
class DrawOptions:
    """Inputs for drawing the route inside its frame."""

    color: str
    line_width: float
    padding: float
    is_dark: bool
    width: int
    height: int
    show_markers: bool = True


@dataclass(frozen=True)
class FrameGeometry:
    """Pixel rectangles of the gallery frame and the padded route area."""

    x: float
    y: float
    width: float
    height: float
    inner_x: float
    inner_y: float
    inner_width: float
    inner_height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height


def rgba(color, alpha: int = 255) -> Tuple[int, int, int, int]:
    """Resolve a color name, hex string or tuple to an RGBA tuple."""

    if isinstance(color, str):
        color = ImageColor.getrgb(color)
    if len(color) == 4:
        r, g, b, a = color
        return (r, g, b, a * alpha // 255)
    r, g, b = color
    return (r, g, b, alpha)


@lru_cache(maxsize=32)
def load_font(size: int, bold: bool = False):
    """Load the configured TrueType font, falling back to Pillow's bundled one."""

    name = config.FONT_BOLD if bold else config.FONT_REGULAR
    try:
        return ImageFont.truetype(name, size)
    except OSError:
        logger.debug(f"Font '{name}' not found, using the default font")
        return ImageFont.load_default(size=size)


@contextmanager
def _layer(surface: Image.Image):
    """Draw on a transparent layer that is alpha-composited onto the surface."""

    overlay = Image.new('RGBA', surface.size, (0, 0, 0, 0))
    yield ImageDraw.Draw(overlay)
    surface.alpha_composite(overlay)


def frame_geometry(width: int, height: int, padding: float) -> FrameGeometry:
    """
    Compute the gallery frame and the padded area the route is drawn in

    The inner padding is derived from the frame width and applied on both
    axes so margins look the same whatever the canvas aspect ratio.
    """
    margin = width * FRAME_MARGIN
    frame_width = width - margin * 2
    frame_height = height * FRAME_HEIGHT
    inner_padding = frame_width * padding

    return FrameGeometry(
        x=margin,
        y=margin,
        width=frame_width,
        height=frame_height,
        inner_x=margin + inner_padding,
        inner_y=margin + inner_padding,
        inner_width=frame_width - inner_padding * 2,
        inner_height=frame_height - inner_padding * 2,
    )


def to_pixels(points: Sequence[NormalizedPoint], frame: FrameGeometry):
    """Map unit-square points into the padded frame area."""

    return [
        (frame.inner_x + p.x * frame.inner_width, frame.inner_y + p.y * frame.inner_height)
        for p in points
    ]


class CanvasEngine:
    """Pure drawing functions for PIL surfaces"""

    @staticmethod
    def clear(surface: Image.Image, width: int, height: int) -> None:
        """Reset the given region of the surface to transparent."""
        surface.paste((0, 0, 0, 0), (0, 0, int(width), int(height)))

    @staticmethod
    def fill_background(surface: Image.Image, color, width: int, height: int) -> None:
        """Fill the given region of the surface with a solid color."""
        surface.paste(rgba(color), (0, 0, int(width), int(height)))

    @staticmethod
    def draw_frame(surface: Image.Image, frame: FrameGeometry, is_dark: bool) -> None:
        """Paint the gallery frame: a filled rectangle with a faint 1px border."""
        box = [frame.x, frame.y, frame.x + frame.width, frame.bottom]
        with _layer(surface) as draw:
            draw.rectangle(box, fill=rgba(FRAME_FILL_DARK if is_dark else FRAME_FILL_LIGHT))
        with _layer(surface) as draw:
            draw.rectangle(box, outline=FRAME_BORDER_DARK if is_dark else FRAME_BORDER_LIGHT, width=1)

    @staticmethod
    def draw_route(surface: Image.Image, points: Sequence[NormalizedPoint], options: DrawOptions) -> None:
        """
        Draw the route inside a gallery frame

        Args:
            surface: RGBA image to paint on
            points: Normalized points in recording order
            options: DrawOptions (color, line width, padding, frame tone, size)

        Fewer than two points paint the frame only: a route needs at least
        one segment, and a lone point is not an error.
        """
        frame = frame_geometry(options.width, options.height, options.padding)
        CanvasEngine.draw_frame(surface, frame, options.is_dark)

        if len(points) < 2:
            logger.debug(f"Only {len(points)} point(s), skipping route stroke")
            return

        xy = to_pixels(points, frame)
        color = rgba(options.color)
        line_width = max(1, round(options.line_width))
        cap_radius = line_width / 2

        with _layer(surface) as draw:
            draw.line(xy, fill=color, width=line_width, joint='curve')
            # Round caps
            for x, y in (xy[0], xy[-1]):
                draw.ellipse([x - cap_radius, y - cap_radius, x + cap_radius, y + cap_radius], fill=color)

            if options.show_markers:
                frame_fill = rgba(FRAME_FILL_DARK if options.is_dark else FRAME_FILL_LIGHT)

                start_x, start_y = xy[0]
                r = START_MARKER_RADIUS * options.line_width
                draw.ellipse([start_x - r, start_y - r, start_x + r, start_y + r], fill=color)

                end_x, end_y = xy[-1]
                r = FINISH_MARKER_RADIUS * options.line_width
                draw.ellipse([end_x - r, end_y - r, end_x + r, end_y + r],
                             fill=frame_fill, outline=color, width=line_width)

    @staticmethod
    def draw_text(surface: Image.Image, text: str, subtext: str, color, width: int, height: int) -> None:
        """
        Draw the title and subtitle centered in the footer

        Font sizes are proportional to the canvas width so the typography
        scales with the export resolution.
        """
        text_zone_y = height * TEXT_ZONE_Y
        font_size = max(1, int(width * TITLE_SIZE))
        sub_font_size = max(1, int(width * SUBTITLE_SIZE))

        with _layer(surface) as draw:
            if text:
                draw.text((width / 2, text_zone_y), text.upper(), fill=rgba(color),
                          font=load_font(font_size, bold=True), anchor='mm')
            if subtext:
                draw.text((width / 2, text_zone_y + font_size * 1.2), subtext.upper(),
                          fill=rgba(color, HALF_OPACITY), font=load_font(sub_font_size), anchor='mm')

    @staticmethod
    def draw_stats(surface: Image.Image, stats: Sequence[Tuple[str, str]], color,
                   width: int, height: int) -> None:
        """
        Draw a row of statistics between the frame and the caption

        Args:
            surface: RGBA image to paint on
            stats: (label, value) pairs, one column each
            color: Text color
            width, height: Canvas size in pixels
        """
        if not stats:
            return

        margin = width * FRAME_MARGIN
        frame_bottom = margin + height * FRAME_HEIGHT
        title_top = height * TEXT_ZONE_Y - width * TITLE_SIZE / 2
        band = title_top - frame_bottom

        label_size = max(1, int(width * STAT_LABEL_SIZE))
        value_size = max(1, int(width * STAT_VALUE_SIZE))
        if band < label_size * 1.3 + value_size:
            logger.debug("No room for the stats row, skipping it")
            return

        label_y = frame_bottom + band * 0.3
        value_y = label_y + label_size * 1.3
        col_width = (width - margin * 2) / len(stats)

        with _layer(surface) as draw:
            for i, (label, value) in enumerate(stats):
                col_x = margin + col_width * (i + 0.5)
                draw.text((col_x, label_y), label.upper(), fill=rgba(color, HALF_OPACITY),
                          font=load_font(label_size, bold=True), anchor='mt')
                draw.text((col_x, value_y), value.upper(), fill=rgba(color),
                          font=load_font(value_size, bold=True), anchor='mt')

    @staticmethod
    def render(surface: Image.Image, points: Sequence[NormalizedPoint], options: DrawOptions,
               colors: ColorScheme, title: str = '', subtext: str = '',
               stats: Optional[Sequence[Tuple[str, str]]] = None) -> Image.Image:
        """
        Paint a complete poster onto the surface

        Each call repaints everything from its arguments; calls are
        independent of each other.

        Returns:
            The surface, for chaining
        """
        CanvasEngine.clear(surface, options.width, options.height)
        CanvasEngine.fill_background(surface, colors.background, options.width, options.height)
        CanvasEngine.draw_route(surface, points, options)
        if stats:
            CanvasEngine.draw_stats(surface, stats, colors.text, options.width, options.height)
        CanvasEngine.draw_text(surface, title, subtext, colors.text, options.width, options.height)
        return surface
