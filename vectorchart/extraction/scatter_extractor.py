"""Scatter series extraction."""

from __future__ import annotations

from typing import Optional, Sequence

from ..errors import ExtractionResult
from ..models.coordinates import AxisCoordinate2D
from ..models.shape_command import ShapeCommand
from .base_extractor import BaseExtractor
from .legend_extractor import detect_legend


class ScatterExtractor(BaseExtractor):
    """One data point at the box center of each selected marker."""

    def get_name(self) -> str:
        return "ScatterExtractor"

    def on_shapes_selected(self, selected: Sequence[ShapeCommand],
                           all_shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        shapes = self._as_list(selected)
        axis_x, axis_y = self.data_table.axis_x, self.data_table.axis_y
        for shape in shapes:
            cx, cy = shape.rect.center
            self.element.data.append(AxisCoordinate2D.from_pixels(cx, cy, axis_x, axis_y))

        result = self._finish(shapes, len(shapes))
        detect_legend(self, all_shapes, result)
        return result
