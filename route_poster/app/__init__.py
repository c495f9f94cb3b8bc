#!/usr/bin/env python3
"""
Route Poster Web Application

Flask application that turns uploaded GPX files into route summaries and posters.
"""

import logging
from io import BytesIO

from flask import Flask, jsonify, request, send_file
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from route_poster import config
from route_poster.lib.geometry import normalize
from route_poster.lib.poster import (
    PosterSettings,
    export_png,
    poster_filename,
    render_poster,
    theme_from_name,
)
from route_poster.lib.track_parser import ParseError, parse_gpx

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format=config.LOG_FORMAT
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = config.SECRET_KEY
app.config['MAX_CONTENT_LENGTH'] = config.MAX_UPLOAD_MB * 1024 * 1024


def read_uploaded_gpx():
    """Return the text of the uploaded GPX file, or raise ValueError."""
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        raise ValueError("No GPX file uploaded. Send it as the 'file' form field.")
    raw = upload.read()
    try:
        return raw.decode('utf-8')
    except UnicodeDecodeError:
        raise ValueError("GPX file is not valid UTF-8 text.") from None


def _form_float(name, default):
    value = request.form.get(name)
    if value in (None, ''):
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Invalid number for '{name}': {value}") from None


def _form_flag(name):
    value = request.form.get(name)
    if value in (None, ''):
        return None
    return value.lower() in ('1', 'true', 'on', 'yes')


def settings_from_form(route):
    """Build PosterSettings from the request form, defaulting to the route's."""
    overrides = {
        'theme': theme_from_name(
            request.form.get('theme', 'light'),
            background=request.form.get('background') or None,
            stroke=request.form.get('stroke') or None,
        ),
        'stroke_width': _form_float('stroke_width', 2.0),
        'padding': _form_float('padding', 0.15),
        'dark_frame': _form_flag('dark_frame'),
        'show_stats': _form_flag('show_stats') is not False,
    }
    if request.form.get('title'):
        overrides['title'] = request.form['title']
    if request.form.get('subtext'):
        overrides['subtext'] = request.form['subtext']
    return PosterSettings.from_route(route, **overrides)


@app.errorhandler(RequestEntityTooLarge)
def upload_too_large(e):
    logger.warning(f"❌ Rejected GPX upload: {e.description}")
    limit_mb = app.config['MAX_CONTENT_LENGTH'] / (1024 * 1024)
    return jsonify({'success': False, 'error': f"GPX file exceeds the {limit_mb:g} MB upload limit."}), 413


@app.route('/health')
def health():
    return jsonify({'status': 'ok'})


@app.route('/api/route', methods=['POST'])
def route_summary():
    """Parse an uploaded GPX file and return its stats and normalized points."""
    try:
        route = parse_gpx(read_uploaded_gpx())
        points = normalize(route.points, route.bounding_box)
        return jsonify({
            'success': True,
            'route': route.summary(),
            'points': [[p.x, p.y] for p in points],
        })
    except ValueError as e:
        logger.warning(f"❌ Rejected GPX upload: {e}")
        return jsonify({'success': False, 'error': str(e)}), 400
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unexpected error while parsing GPX")
        return jsonify({'success': False, 'error': f'Internal error: {str(e)}'}), 500


@app.route('/api/poster', methods=['POST'])
def poster():
    """Render an uploaded GPX file as a PNG poster."""
    try:
        route = parse_gpx(read_uploaded_gpx())
        settings = settings_from_form(route)
        width = int(_form_float('width', config.POSTER_WIDTH))
        height = int(_form_float('height', config.POSTER_HEIGHT))
        pixel_ratio = _form_float('pixel_ratio', config.PIXEL_RATIO)
        if width <= 0 or height <= 0 or pixel_ratio <= 0:
            raise ValueError("width, height and pixel_ratio must be positive")

        points = normalize(route.points, route.bounding_box)
        image = render_poster(route, points, settings, width=width, height=height, pixel_ratio=pixel_ratio)
        logger.info(f"✅ Rendered poster for '{route.name}' ({image.size[0]}x{image.size[1]})")

        return send_file(
            BytesIO(export_png(image)),
            mimetype='image/png',
            as_attachment=True,
            download_name=poster_filename(settings.title),
        )
    except ParseError as e:
        logger.warning(f"❌ Rejected GPX upload: {e}")
        return jsonify({'success': False, 'error': f"Failed to parse GPX file: {e}"}), 400
    except ValueError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unexpected error while rendering poster")
        return jsonify({'success': False, 'error': f'Internal error: {str(e)}'}), 500
