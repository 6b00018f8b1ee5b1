"""
Extraction session: the editing operations on one chart.

A session holds the shapes of a page region, the data table being built
from them and its undo history. Every operation that changes the table
takes a restore point first.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..config import DEFAULT_CONFIG, ExtractionConfig
from ..errors import ExtractionResult
from ..extraction.axis_extractor import AxisExtractor
from ..extraction.extractor_factory import get_extractor
from ..extraction.text_merger import TextMerger
from ..models.axis import Axis, Interpolation, is_numeric
from ..models.chart_element import ChartElement, ChartElementType
from ..models.data_table import DataTable
from ..models.data_types import Rectangle
from ..models.selection import ShapeSelection
from ..models.shape_command import ShapeCommand
from ..preprocessing.shape_filters import FilterPipeline
from ..serialization import csv_export
from .history_manager import HistoryManager


logger = logging.getLogger(__name__)


class ExtractionSession:
    """
    Interactive extraction of one chart.

    Args:
        shapes: Every shape of the chart region, in drawing order
        data_table: Table to continue; a new one is created otherwise
        config: Heuristic constants shared by all extractors
        text_merger: Text reader shared by all extractors
        filters: Optional filter pipeline hiding shapes from selections
    """

    def __init__(self, shapes: Sequence[ShapeCommand], data_table: Optional[DataTable] = None,
                 config: Optional[ExtractionConfig] = None,
                 text_merger: Optional[TextMerger] = None,
                 filters: Optional[FilterPipeline] = None):
        self.shapes: List[ShapeCommand] = list(shapes)
        self.table = data_table or DataTable()
        self.config = config or DEFAULT_CONFIG
        self.text_merger = text_merger or TextMerger(language=self.config.OCR_LANGUAGE)
        self.filters = filters
        self.history = HistoryManager()
        self.selection = ShapeSelection()
        self._last_axis_extractor: Optional[AxisExtractor] = None
        self.logger = logging.getLogger(__name__)

    # ==================== Selection ====================

    def select(self, rect: Rectangle) -> List[ShapeCommand]:
        """Select the shapes strictly inside ``rect`` that pass the filters."""
        selection = ShapeSelection.from_rect(rect, self.shapes)
        if self.filters is not None:
            visible = {id(s) for s in self.filters.apply(self.shapes)}
            selection.shape_indices = [
                i for i in selection.shape_indices if id(self.shapes[i]) in visible
            ]
        self.selection = selection
        selected = selection.shapes(self.shapes)
        self.logger.debug(f"Selected {len(selected)} shape(s) in {rect.as_tuple()}")
        return selected

    def _resolve(self, shapes: Optional[Sequence[ShapeCommand]]) -> List[ShapeCommand]:
        if shapes is None:
            return self.selection.shapes(self.shapes)
        return list(shapes)

    # ==================== Series ====================

    def add_series(self, element_type: ChartElementType,
                   shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        """Create a series of ``element_type`` and extract the selection into it.

        Raises:
            UnsupportedElementError: before any change, if the type cannot
                be extracted
        """
        element = ChartElement(element_type, self.table.next_series_name(element_type))
        extractor = get_extractor(element, self.table, self.config, self.text_merger)

        self.history.add_restore_point(self.table)
        self.table.series.append(element)
        return extractor.on_shapes_selected(self._resolve(shapes), self.shapes)

    def extract_into(self, element: ChartElement,
                     shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        """Add the selection to an existing element.

        A failed extraction leaves the table as it was and adds no restore
        point.
        """
        extractor = get_extractor(element, self.table, self.config, self.text_merger)
        snapshot = self.table.clone()
        if isinstance(extractor, AxisExtractor):
            self._last_axis_extractor = extractor
            result = extractor.on_shapes_selected(self._resolve(shapes), self.shapes)
        else:
            result = extractor.on_shapes_selected(self._resolve(shapes))
        if result.success:
            self.history.push(snapshot)
        return result

    def add_error_bars(self, serie: ChartElement) -> List[ChartElement]:
        if not serie.can_have_error_bars:
            raise ValueError(f"{serie.name!r} cannot have error bars")
        self.history.add_restore_point(self.table)
        return self.table.add_error_bars(serie)

    def extract_error_bars(self, serie: ChartElement,
                           shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        """Create the error bars of ``serie`` if needed, then read both
        bounds from the same selection."""
        shapes = self._resolve(shapes)
        self.add_error_bars(serie)
        upper = self.extract_into(serie.upper_error_bar, shapes)
        lower = self.extract_into(serie.lower_error_bar, shapes)
        return ExtractionResult(
            success=upper.success and lower.success,
            warnings=upper.warnings + lower.warnings,
            points_added=upper.points_added + lower.points_added,
        )

    def remove_element(self, element: ChartElement) -> List[ChartElement]:
        self.history.add_restore_point(self.table)
        return self.table.remove_series(element)

    # ==================== Names ====================

    def _read_text(self, shapes: Optional[Sequence[ShapeCommand]]) -> Optional[str]:
        return self.text_merger.get_text_from_shapes(self._resolve(shapes))

    def rename_from_selection(self, target: Union[ChartElement, DataTable],
                              shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        """Name a series, an axis or the table after the selected text."""
        text = self._read_text(shapes)
        if text is None:
            self.logger.warning("No text found in selection")
            return ExtractionResult.failure("No text found in selection")
        self.history.add_restore_point(self.table)
        target.name = text
        return ExtractionResult(message=text)

    def set_name(self, target: Union[ChartElement, DataTable], name: str) -> None:
        self.history.add_restore_point(self.table)
        target.name = name

    # ==================== Cells ====================

    def edit_cell(self, element: ChartElement, tick: csv_export.TableTick, value: str) -> bool:
        """Set the value shown for ``element`` in the column of ``tick``.

        Returns:
            False if the element has no point in that column
        """
        point = csv_export.cell_value(element, tick)
        if point is None:
            return False
        self.history.add_restore_point(self.table)
        point.y.value = value
        return True

    def edit_tick(self, axis: Axis, index: int, value: str, pixel: bool = False) -> ExtractionResult:
        """Change the label (or the pixel) of tick ``index``.

        An index past the last tick adds a tick at pixel ``float(value)``.
        A label that is not a number makes the axis categorical.

        Returns:
            A failure, with the axis unchanged, if a pixel is not a number
        """
        new_tick = index >= len(axis.ticks)
        if (new_tick or pixel) and not is_numeric(value):
            self.logger.warning(f"Tick pixel {value!r} of axis {axis.name!r} is not a number")
            return ExtractionResult.failure(f"Tick pixel '{value}' is not a number")

        self.history.add_restore_point(self.table)
        if new_tick:
            axis.add_tick_value(value, float(value))
        elif pixel:
            axis.ticks[index].pixel = float(value)
            axis.ticks.sort(key=lambda t: t.pixel)
        else:
            axis.set_tick_label(index, value)
        return ExtractionResult()

    # ==================== Axes ====================

    def clear_axis(self, axis: Axis) -> None:
        self.history.add_restore_point(self.table)
        axis.clear()

    def toggle_interpolation(self, axis: Axis) -> Interpolation:
        self.history.add_restore_point(self.table)
        return axis.toggle_interpolation()

    def retry_axis_with_ocr(self) -> ExtractionResult:
        """Read the last axis selection again, from OCR only."""
        if self._last_axis_extractor is None:
            return ExtractionResult.failure("No axis extraction to retry")
        return self._last_axis_extractor.retry_with_ocr()

    # ==================== History ====================

    def _replace_table(self, table: Optional[DataTable]) -> bool:
        if table is None:
            return False
        self.table = table
        # Pending retries refer to elements of the replaced table
        self._last_axis_extractor = None
        return True

    def undo(self) -> bool:
        return self._replace_table(self.history.undo(self.table))

    def redo(self) -> bool:
        return self._replace_table(self.history.redo(self.table))

    # ==================== Export ====================

    def table_data(self, precision: Optional[int] = DEFAULT_CONFIG.DEFAULT_DECIMAL_PRECISION):
        return csv_export.table_data(self.table, precision)

    def export_csv(self, output_path: Union[str, Path], precision: Optional[int] = None) -> Path:
        return csv_export.export_csv(self.table, output_path, precision)
