"""
PaletteLab

Palette extraction from images: k-means and hue-histogram extractors, a
luminosity histogram analyzer, color tools and a small HTTP API.
"""

__version__ = "1.0.0"
