"""Error bar extraction."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from scipy.spatial import KDTree

from ..errors import ExtractionResult
from ..models.coordinates import AxisCoordinate1D, AxisCoordinate2D
from ..models.shape_command import ShapeCommand
from .base_extractor import BaseExtractor


class ErrorBarExtractor(BaseExtractor):
    """
    Reads one bound (upper or lower) of a series' error bars.

    Error bars are drawn as one to four shapes per point (stem, whiskers,
    sometimes split halves). Each selected shape is matched to the series
    point closest to its horizontal center; shapes further away than
    ERRORBAR_MAX_DISTANCE are ignored. A bound only ever widens: the upper
    bound keeps the topmost pixel seen, the lower bound the bottommost.
    """

    def get_name(self) -> str:
        return "ErrorBarExtractor"

    def on_shapes_selected(self, selected: Sequence[ShapeCommand],
                           all_shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        shapes = self._as_list(selected)
        error_bar = self.element
        serie_data = error_bar.serie.data

        matched = 0
        if serie_data and shapes:
            tree = KDTree(np.array([[pt.x.pixel] for pt in serie_data], dtype=float))
            centers = np.array([[shape.rect.center[0]] for shape in shapes], dtype=float)
            distances, indices = tree.query(centers, k=1)

            for shape, dist, idx in zip(shapes, distances, indices):
                if dist >= self.config.ERRORBAR_MAX_DISTANCE:
                    self.logger.debug(f"Shape {shape!r} is {dist:.2f}px from the series, skipped")
                    continue

                idx = int(idx)
                associated = serie_data[idx]
                current = error_bar.data[idx].y.pixel
                if error_bar.is_lower_bound():
                    bound = max(shape.rect.y2, current)
                else:
                    bound = min(shape.rect.y, current)

                error_bar.data[idx] = AxisCoordinate2D(
                    AxisCoordinate1D(associated.x.pixel, associated.x.axis),
                    AxisCoordinate1D(bound, associated.y.axis),
                )
                matched += 1

        result = self._finish(shapes, matched)
        if shapes and not matched:
            result.warn("No selected shape lies close to a point of the series")
        return result
