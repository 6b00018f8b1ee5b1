"""
Axis tick extraction.

Tick labels are read from the selection (text runs first, OCR as fallback)
and positioned on the tick mark or gridline next to them when one exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..errors import ExtractionResult
from ..models.axis import Axis, Interpolation, Tick, is_numeric
from ..models.shape_command import ShapeCommand
from ..preprocessing.shape_utils import split_into_sub_shapes
from .base_extractor import BaseExtractor
from .text_merger import TextChunk


# Minus signs that float() does not accept, mapped to ASCII
MINUS_VARIANTS = ("âˆ’", "−")


def clean_tick_label(label: str) -> str:
    for variant in MINUS_VARIANTS:
        label = label.replace(variant, "-")
    return label


@dataclass
class _AxisSnapshot:
    ticks: List[Tick]
    shapes: List[ShapeCommand]
    interpolation: Interpolation


class AxisExtractor(BaseExtractor):
    """
    Adds the tick labels of a selection to an axis.

    When most labels are numbers, the few that are not are treated as
    reading errors and dropped with a warning. Each call remembers the axis
    state beforehand so that :meth:`retry_with_ocr` can redo the same
    selection from the rendered image instead of the text runs.
    """

    def __init__(self, data_table, element: Axis, config=None, text_merger=None):
        super().__init__(data_table, element, config, text_merger)
        self._snapshot: Optional[_AxisSnapshot] = None
        self._last_selection: Optional[Tuple[List[ShapeCommand], List[ShapeCommand]]] = None

    @property
    def axis(self) -> Axis:
        return self.element

    def get_name(self) -> str:
        return "AxisExtractor"

    # ==================== Tick positions ====================

    def get_accurate_tick_pos(self, label: TextChunk, shapes: Sequence[ShapeCommand]) -> float:
        """Position of a label on the axis.

        A short stroke (tick mark or gridline) starting just after the label
        and centered within its extent is the most accurate position; the
        label's own center is used otherwise.
        """
        vertical = self.axis.is_vertical()
        label_rect = label.rect
        max_dist = label_rect.width * self.config.TICK_SEARCH_FACTOR

        if vertical:
            label_low, label_high = label_rect.y, label_rect.y2
        else:
            label_low, label_high = label_rect.x, label_rect.x2

        for main_shape in shapes:
            for shape in split_into_sub_shapes(main_shape):
                if shape.is_text or len(shape.path) > self.config.TICK_MARK_MAX_OPS:
                    continue

                rect = shape.rect
                if vertical:
                    dist = rect.x - label_rect.x2
                else:
                    dist = label_rect.y - rect.y2
                if dist < 0 or dist > max_dist:
                    continue

                pos = rect.center[1] if vertical else rect.center[0]
                if label_low < pos < label_high:
                    return pos

        return (label_low + label_high) / 2

    # ==================== Extraction ====================

    def _take_snapshot(self) -> None:
        self._snapshot = _AxisSnapshot(
            ticks=[Tick(t.pixel, t.label) for t in self.axis.ticks],
            shapes=list(self.axis.shapes),
            interpolation=self.axis.interpolation,
        )

    def _restore_snapshot(self) -> None:
        snapshot = self._snapshot
        self.axis.ticks = [Tick(t.pixel, t.label) for t in snapshot.ticks]
        self.axis.shapes = list(snapshot.shapes)
        self.axis.interpolation = snapshot.interpolation

    def _apply_texts(self, texts: Optional[List[List[TextChunk]]], selected: List[ShapeCommand],
                     all_shapes: List[ShapeCommand]) -> ExtractionResult:
        if texts is None:
            self.logger.warning(f"No text found for axis {self.axis.name!r}")
            return ExtractionResult.failure("No text found in selection")

        numbered = []
        strings = []
        for line in texts:
            for word in line:
                label = clean_tick_label(word.text)
                if not label.strip():
                    continue
                position = self.get_accurate_tick_pos(word, all_shapes)
                if is_numeric(label):
                    numbered.append((label, position))
                else:
                    strings.append((label, position))

        result = ExtractionResult()
        if strings and len(numbered) / (len(numbered) + len(strings)) > self.config.NUMERIC_MAJORITY:
            ticks = numbered
            message = (
                "Tick(s) '" + ", ".join(label for label, _ in strings)
                + "' could not be parsed as numbers and were excluded from the selection."
            )
            self.logger.warning(message)
            result.warn(message)
        else:
            ticks = numbered + strings

        for label, position in ticks:
            self.axis.add_tick_value(label, position)

        finished = self._finish(selected, len(ticks))
        finished.warnings = result.warnings
        return finished

    def on_shapes_selected(self, selected: Sequence[ShapeCommand],
                           all_shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        selected = self._as_list(selected)
        all_shapes = self._as_list(all_shapes)
        self._take_snapshot()
        self._last_selection = (selected, all_shapes)

        texts = self.text_merger.get_texts_from_shapes(selected)
        return self._apply_texts(texts, selected, all_shapes)

    def retry_with_ocr(self) -> ExtractionResult:
        """Undo the last selection and read it again with OCR only.

        Useful when the text runs of a chart use a font encoding that does
        not decode to the visible digits.
        """
        if self._snapshot is None or self._last_selection is None:
            return ExtractionResult.failure("Nothing to retry")

        self._restore_snapshot()
        selected, all_shapes = self._last_selection
        self.logger.info(f"Retrying axis {self.axis.name!r} with OCR")
        texts = self.text_merger.get_texts_from_ocr(selected)
        return self._apply_texts(texts, selected, all_shapes)
