"""Line series extraction."""

from __future__ import annotations

from typing import Optional, Sequence

from ..errors import ExtractionResult
from ..models.shape_command import ShapeCommand
from ..preprocessing.shape_utils import shapes_to_points
from .base_extractor import BaseExtractor
from .legend_extractor import detect_legend


class LineExtractor(BaseExtractor):
    """One data point per path vertex of the selected shapes."""

    def get_name(self) -> str:
        return "LineExtractor"

    def on_shapes_selected(self, selected: Sequence[ShapeCommand],
                           all_shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        shapes = self._as_list(selected)
        points = shapes_to_points(shapes, self.data_table.axis_x, self.data_table.axis_y)
        self.element.data.extend(points)

        result = self._finish(shapes, len(points))
        detect_legend(self, all_shapes, result)
        return result
