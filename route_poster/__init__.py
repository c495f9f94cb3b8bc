"""
Route Poster - turn GPX activity tracks into minimalist posters
"""

__version__ = "1.0.0"
