"""Bar series extraction."""

from __future__ import annotations

from typing import Optional, Sequence

from ..errors import ExtractionResult
from ..models.coordinates import AxisCoordinate2D
from ..models.shape_command import ShapeCommand
from ..preprocessing.shape_utils import split_into_sub_shapes
from .base_extractor import BaseExtractor
from .legend_extractor import detect_legend


class BarExtractor(BaseExtractor):
    """
    One data point per bar, at the horizontal center of its top edge.

    A lone selected shape is split at its MOVETO boundaries first, since
    charting tools often draw every bar of a series as a single path.
    """

    def get_name(self) -> str:
        return "BarExtractor"

    def on_shapes_selected(self, selected: Sequence[ShapeCommand],
                           all_shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        to_link = self._as_list(selected)
        bars = to_link
        if len(to_link) == 1:
            bars = split_into_sub_shapes(to_link[0])
            self.logger.debug(f"Split one shape into {len(bars)} bar(s)")

        axis_x, axis_y = self.data_table.axis_x, self.data_table.axis_y
        for bar in bars:
            cx = bar.rect.center[0]
            self.element.data.append(AxisCoordinate2D.from_pixels(cx, bar.rect.y, axis_x, axis_y))

        # The original shapes are linked, not the split parts
        result = self._finish(to_link, len(bars))
        detect_legend(self, all_shapes, result)
        return result
