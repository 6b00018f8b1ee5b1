"""Off-screen rendering of shapes for OCR.

This module provides :class:`ShapeRasterizer`, which draws vector shapes
onto a numpy canvas with OpenCV so that text drawn as outlines (no native
text runs) can be handed to an OCR engine.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import cv2
import numpy as np

from ..models.data_types import Rectangle
from ..models.shape_command import (
    DEFAULT_FONT_METRICS,
    PathOpType,
    PathShape,
    ShapeCommand,
    TextShape,
)
from ..models.transform import AffineTransform
from .shape_utils import Color, parse_color


logger = logging.getLogger(__name__)


def flatten_cubic(p0, p1, p2, p3, steps: int = 12) -> np.ndarray:
    """Sample a cubic Bezier curve, excluding its start point."""
    t = np.linspace(0.0, 1.0, steps + 1)[1:, None]
    p0, p1, p2, p3 = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2, p3))
    return (
        (1 - t) ** 3 * p0
        + 3 * (1 - t) ** 2 * t * p1
        + 3 * (1 - t) * t ** 2 * p2
        + t ** 3 * p3
    )


class ShapeRasterizer:
    """Render shapes onto an RGB canvas.

    Parameters
    ----------
    scale:
        Pixels per page unit. Values above 1 help OCR on small fonts.
    background:
        Canvas color as an RGB tuple.
    """

    def __init__(self, scale: float = 1.0, background: Color = (255, 255, 255)) -> None:
        self.scale = scale
        self.background = background

    def _polylines(self, shape: PathShape, view: AffineTransform) -> List[np.ndarray]:
        """Subpaths of a shape as integer point arrays in canvas space."""
        matrix = view.multiply(shape.transform)
        polylines: List[np.ndarray] = []
        current: List[np.ndarray] = []
        last = (0.0, 0.0)
        start = None

        def flush():
            if len(current) > 1:
                pts = matrix.apply_points(np.vstack(current))
                polylines.append(np.round(pts).astype(np.int32))

        for op in shape.path:
            if op.type == PathOpType.MOVETO:
                flush()
                last = op.end_point
                start = last
                current = [np.array([last])]
            elif op.type == PathOpType.LINETO:
                last = op.end_point
                current.append(np.array([last]))
            elif op.type == PathOpType.CURVETO:
                c1, c2 = op.control_points
                current.append(flatten_cubic(last, c1, c2, op.end_point))
                last = op.end_point
            elif op.type == PathOpType.CLOSE and start is not None:
                current.append(np.array([start]))
        flush()
        return polylines

    def _draw_path(self, canvas: np.ndarray, shape: PathShape, view: AffineTransform) -> None:
        polylines = self._polylines(shape, view)
        if not polylines:
            return
        if shape.is_filled:
            cv2.fillPoly(canvas, polylines, parse_color(shape.style.fill_style))
        else:
            thickness = max(1, int(round(shape.style.line_width * self.scale)))
            cv2.polylines(canvas, polylines, False, parse_color(shape.style.stroke_style),
                          thickness=thickness, lineType=cv2.LINE_AA)

    def _draw_text(self, canvas: np.ndarray, shape: TextShape, view: AffineTransform) -> None:
        # Hershey fonts are upright only; the anchor is transformed, the glyphs are not rotated
        x, y = view.multiply(shape.transform).apply(shape.x, shape.y)
        size = DEFAULT_FONT_METRICS.font_size(shape.style.font) * self.scale
        font_scale = size / 22.0
        thickness = max(1, int(round(font_scale)))
        cv2.putText(canvas, shape.display_text, (int(round(x)), int(round(y))),
                    cv2.FONT_HERSHEY_SIMPLEX, font_scale,
                    parse_color(shape.style.fill_style), thickness, cv2.LINE_AA)

    def render(self, shapes: Sequence[ShapeCommand], region: Rectangle) -> np.ndarray:
        """Draw ``shapes`` so that ``region``'s origin lands on pixel (0, 0).

        Parameters
        ----------
        shapes:
            Shapes to draw, in drawing order.
        region:
            Page-space area covered by the canvas.

        Returns
        -------
        np.ndarray
            RGB image of shape (H, W, 3), at least 1x1.
        """
        width = max(1, int(np.ceil(region.width * self.scale)))
        height = max(1, int(np.ceil(region.height * self.scale)))
        canvas = np.full((height, width, 3), self.background, dtype=np.uint8)

        view = AffineTransform.scaling(self.scale).multiply(
            AffineTransform.translation(-region.x, -region.y)
        )
        for shape in shapes:
            if shape.is_text:
                self._draw_text(canvas, shape, view)
            else:
                self._draw_path(canvas, shape, view)

        logger.debug(f"Rendered {len(shapes)} shape(s) on a {width}x{height} canvas")
        return canvas
