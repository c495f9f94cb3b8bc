#!/usr/bin/env python3
"""
Route Poster CLI

Command-line interface for turning a GPX track into a minimalist poster.
"""

import argparse
import logging
import sys

from route_poster import config
from route_poster.lib.geometry import normalize
from route_poster.lib.poster import (
    THEMES,
    PosterSettings,
    format_pace,
    format_time,
    poster_filename,
    render_poster,
    save_poster,
    theme_from_name,
)
from route_poster.lib.track_parser import ParseError, parse_gpx_file


def display_route_info(route):
    """Print the route statistics"""
    print(f"\n{'='*60}")
    print(f"Route: {route.name}")
    print(f"Date: {route.date or 'Unknown date'}")
    print(f"Type: {route.activity_type.value}")
    print(f"Points: {len(route.points)}")
    print(f"Distance: {route.distance / 1000:.2f} km")
    print(f"Elevation gain: {route.elevation_gain:.0f} m")
    if route.min_elevation is not None:
        print(f"Elevation range: {route.min_elevation:.0f} - {route.max_elevation:.0f} m")
    print(f"Time: {format_time(route.moving_time)}")
    print(f"Average pace: {format_pace(route.average_speed)} /km "
          f"({route.average_speed * 3.6:.1f} km/h)")
    print(f"{'='*60}\n")


def build_parser():
    parser = argparse.ArgumentParser(
        description='Turn a GPX track into a minimalist route poster',
        epilog='Examples:\n'
               '  %(prog)s morning-run.gpx\n'
               '  %(prog)s ride.gpx --theme dark --stroke-width 3 -o ride.png\n'
               '  %(prog)s hike.gpx --theme custom --background "#f4efe6" --stroke "#1f3b2d"\n'
               '  %(prog)s hike.gpx --info\n',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('gpx_file', help='Path to the GPX file')
    parser.add_argument('--output', '-o', default=None,
                        help='Output PNG file (default: <title>-poster.png)')
    parser.add_argument('--info', action='store_true',
                        help='Print the route statistics and exit without rendering')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    text_group = parser.add_argument_group('typography')
    text_group.add_argument('--title', default=None, help='Poster title (default: track name)')
    text_group.add_argument('--subtext', default=None,
                            help='Poster subtitle (default: distance and date)')
    text_group.add_argument('--no-stats', action='store_true',
                            help='Hide the distance/elevation/time/pace row')

    style_group = parser.add_argument_group('style')
    style_group.add_argument('--theme', default='light', choices=THEMES,
                             help='Color theme (default: light)')
    style_group.add_argument('--background', default=None,
                             help='Background color for the custom theme (e.g. "#f4efe6")')
    style_group.add_argument('--stroke', default=None,
                             help='Line and text color for the custom theme')
    style_group.add_argument('--stroke-width', type=float, default=2.0,
                             help='Route line width in pixels, 0.5 to 10 (default: 2)')
    style_group.add_argument('--padding', type=float, default=0.15,
                             help='Padding inside the frame as a fraction of its width, 0.05 to 0.4 (default: 0.15)')
    style_group.add_argument('--no-markers', action='store_true', help='Hide start/finish markers')
    frame_group = style_group.add_mutually_exclusive_group()
    frame_group.add_argument('--dark-frame', dest='dark_frame', action='store_true', default=None,
                             help='Force a dark gallery frame')
    frame_group.add_argument('--light-frame', dest='dark_frame', action='store_false',
                             help='Force a light gallery frame')

    size_group = parser.add_argument_group('output size')
    size_group.add_argument('--width', type=int, default=config.POSTER_WIDTH,
                            help=f'Poster width in logical pixels (default: {config.POSTER_WIDTH})')
    size_group.add_argument('--height', type=int, default=config.POSTER_HEIGHT,
                            help=f'Poster height in logical pixels (default: {config.POSTER_HEIGHT})')
    size_group.add_argument('--pixel-ratio', type=float, default=config.PIXEL_RATIO,
                            help=f'Device pixel ratio of the export (default: {config.PIXEL_RATIO:g})')
    return parser


def main(argv=None):
    """Parse a GPX file and render its poster"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else config.LOG_LEVEL,
        format=config.LOG_FORMAT
    )

    try:
        route = parse_gpx_file(args.gpx_file)
    except OSError as e:
        print(f"❌ Could not read '{args.gpx_file}': {e}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"❌ Failed to parse GPX file: {e}", file=sys.stderr)
        return 1

    display_route_info(route)
    if args.info:
        return 0

    try:
        theme = theme_from_name(args.theme, background=args.background, stroke=args.stroke)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if args.width <= 0 or args.height <= 0 or args.pixel_ratio <= 0:
        print("❌ width, height and pixel_ratio must be positive", file=sys.stderr)
        return 1

    overrides = {
        'theme': theme,
        'stroke_width': args.stroke_width,
        'padding': args.padding,
        'dark_frame': args.dark_frame,
        'show_stats': not args.no_stats,
        'show_markers': not args.no_markers,
    }
    if args.title is not None:
        overrides['title'] = args.title
    if args.subtext is not None:
        overrides['subtext'] = args.subtext
    settings = PosterSettings.from_route(route, **overrides)

    points = normalize(route.points, route.bounding_box)
    image = render_poster(route, points, settings,
                          width=args.width, height=args.height, pixel_ratio=args.pixel_ratio)

    output = args.output or poster_filename(settings.title)
    try:
        save_poster(image, output)
    except (OSError, ValueError) as e:
        print(f"❌ Could not save poster: {e}", file=sys.stderr)
        return 1

    print(f"✅ Poster saved to: {output} ({image.size[0]}x{image.size[1]} px)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
