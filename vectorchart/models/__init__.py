"""Models package for vector chart extraction.

This package contains the geometric primitives captured from a page and
the chart data model (axes, series, data table). Only the leaf types are
re-exported here; import ``axis``, ``chart_element`` and ``data_table``
from their modules.
"""
from .data_types import Point, Rectangle
from .transform import AffineTransform
from .shape_command import (
    ApproximateFontMetrics,
    ClipRegion,
    FontMetrics,
    PathOp,
    PathOpType,
    PathShape,
    ShapeCommand,
    ShapeStyle,
    TextMetrics,
    TextShape,
)
from .coordinates import AxisCoordinate1D, AxisCoordinate2D

__all__ = [
    # Data types
    "Point",
    "Rectangle",
    "AffineTransform",
    "ApproximateFontMetrics",
    "ClipRegion",
    "FontMetrics",
    "PathOp",
    "PathOpType",
    "PathShape",
    "ShapeCommand",
    "ShapeStyle",
    "TextMetrics",
    "TextShape",
    "AxisCoordinate1D",
    "AxisCoordinate2D",
    # Modules
    "axis",
    "chart_element",
    "data_table",
    "selection",
]
