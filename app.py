#!/usr/bin/env python3
"""
Simple script to run the Flask webapp
"""

from route_poster import config
from route_poster.app import app

if __name__ == '__main__':
    app.run(debug=config.FLASK_DEBUG, host='0.0.0.0', port=5555)
