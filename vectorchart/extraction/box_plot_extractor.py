"""Box plot extraction."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..errors import ExtractionResult
from ..models.chart_element import ChartElement, ChartElementType, SubChartElement
from ..models.coordinates import AxisCoordinate2D
from ..models.shape_command import ShapeCommand
from ..preprocessing.shape_utils import is_line, is_rectangle, split_shapes_into_sub_shapes
from .base_extractor import BaseExtractor


# Linked element slot of each box plot value, after the two error bar slots
Q3_SLOT = 2
Q1_SLOT = 3
MIN_SLOT = 4
MAX_SLOT = 5

SUB_ELEMENTS = (
    (ChartElementType.BOX_PLOT_Q3, "↳ Q3"),
    (ChartElementType.BOX_PLOT_Q1, "↳ Q1"),
    (ChartElementType.BOX_PLOT_MIN, "↳ Min"),
    (ChartElementType.BOX_PLOT_MAX, "↳ Max"),
)


class BoxPlotExtractor(BaseExtractor):
    """
    Reads median, quartiles and whiskers of one or more box plots.

    Shapes are split into subpaths and grouped by horizontal center; each
    group is one box. The series itself holds the medians, four
    sub-elements hold Q3, Q1, Min and Max. Shapes selected earlier take
    part again, so a box can be completed over several selections.
    """

    def get_name(self) -> str:
        return "BoxPlotExtractor"

    def group_shapes_by_center_x(self, shapes: Sequence[ShapeCommand]) -> List[List[ShapeCommand]]:
        tolerance = self.config.BOX_PLOT_GROUP_TOLERANCE
        groups: List[List[ShapeCommand]] = []
        for shape in shapes:
            mx = shape.rect.center[0]
            for group in groups:
                if abs(group[0].rect.center[0] - mx) < tolerance:
                    group.append(shape)
                    break
            else:
                groups.append([shape])
        return groups

    def set_datapoint(self, element: ChartElement, datapoint: AxisCoordinate2D) -> None:
        """Update the point at the same X pixel, or append a new one."""
        for existing in element.data:
            if abs(existing.x.pixel - datapoint.x.pixel) < self.config.UPSERT_TOLERANCE:
                existing.x = datapoint.x
                existing.y = datapoint.y
                return
        element.data.append(datapoint)

    def _ensure_sub_elements(self) -> None:
        """Create every missing Q3/Q1/Min/Max sub-element, including ones
        removed from the table since the last extraction."""
        serie = self.element
        linked = serie.linked_elements
        for slot, (element_type, name) in enumerate(SUB_ELEMENTS, start=Q3_SLOT):
            if slot < len(linked) and linked[slot] is not None:
                continue
            self.logger.debug(f"Creating {name} for {serie.name!r}")
            self.data_table.insert_sub_element(
                serie, SubChartElement(element_type, serie, name), slot=slot
            )

    def on_shapes_selected(self, selected: Sequence[ShapeCommand],
                           all_shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        shapes = self._as_list(selected)
        groups = self.group_shapes_by_center_x(
            split_shapes_into_sub_shapes(shapes + self.element.shapes)
        )

        self._ensure_sub_elements()
        linked = self.element.linked_elements
        element_q3, element_q1 = linked[Q3_SLOT], linked[Q1_SLOT]
        element_min, element_max = linked[MIN_SLOT], linked[MAX_SLOT]
        axis_x, axis_y = self.data_table.axis_x, self.data_table.axis_y

        for group in groups:
            first = group[0].rect
            mx = first.center[0]
            low, high = first.y, first.y2
            q1, q3 = low, high
            medians = []

            for shape in group:
                rect = shape.rect
                if is_line(shape) and rect.width > rect.height:
                    medians.append(rect.center[1])
                if is_rectangle(shape):
                    q1, q3 = rect.y, rect.y2
                low = min(low, rect.y)
                high = max(high, rect.y2)

            median = next((m for m in medians if q1 < m < q3), (q1 + q3) / 2)
            self.logger.debug(
                f"Box at x={mx:.1f}: min={low} q1={q1} median={median} q3={q3} max={high}"
            )

            for element, pixel_y in (
                (self.element, median),
                (element_q3, q3),
                (element_q1, q1),
                (element_min, low),
                (element_max, high),
            ):
                self.set_datapoint(element, AxisCoordinate2D.from_pixels(mx, pixel_y, axis_x, axis_y))

        return self._finish(shapes, len(groups))
