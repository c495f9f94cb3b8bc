#!/usr/bin/env python3
"""
Configuration for Route Poster, read from the environment and an optional .env file
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _get_int(name, default):
    value = os.getenv(name, '').strip()
    return int(value) if value else default


def _get_float(name, default):
    value = os.getenv(name, '').strip()
    return float(value) if value else default


# Poster canvas size in logical pixels (2:3 portrait by default)
POSTER_WIDTH = _get_int('ROUTE_POSTER_WIDTH', 1000)
POSTER_HEIGHT = _get_int('ROUTE_POSTER_HEIGHT', 1500)

# Device pixel ratio applied on export (2 = retina-quality PNG)
PIXEL_RATIO = _get_float('ROUTE_POSTER_PIXEL_RATIO', 2.0)

# Fonts are looked up by file name in the system font directories
FONT_REGULAR = os.getenv('ROUTE_POSTER_FONT', 'DejaVuSans.ttf').strip()
FONT_BOLD = os.getenv('ROUTE_POSTER_FONT_BOLD', 'DejaVuSans-Bold.ttf').strip()

LOG_LEVEL = os.getenv('ROUTE_POSTER_LOG_LEVEL', 'INFO').strip().upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Web app
MAX_UPLOAD_MB = _get_int('ROUTE_POSTER_MAX_UPLOAD_MB', 20)
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
FLASK_DEBUG = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
