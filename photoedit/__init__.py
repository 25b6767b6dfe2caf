"""Pixel-processing and panorama-assembly core for the photo editor."""

__version__ = "1.0.0"
