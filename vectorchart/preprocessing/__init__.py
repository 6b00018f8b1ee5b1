"""Preprocessing package for vector chart extraction.

This package contains shape analysis helpers, shape filters and the
rasterizer used before OCR.
"""

__all__ = [
    "geometry",
    "shape_utils",
    "shape_filters",
    "rasterizer",
]
