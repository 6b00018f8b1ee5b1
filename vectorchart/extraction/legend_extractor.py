"""Series naming from legend entries."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..errors import ExtractionResult
from ..models.shape_command import ShapeCommand
from .base_extractor import BaseExtractor


class LegendExtractor(BaseExtractor):
    """
    Finds the legend entry of a series and renames the series after it.

    The legend marker is a non-text shape, not part of the series, stroked
    in the series' main color; smaller markers win over larger ones. The
    name is the run of words directly to the right of the marker.
    """

    def get_name(self) -> str:
        return "LegendExtractor"

    def _texts_right_of(self, marker: ShapeCommand,
                        text_shapes: Sequence[ShapeCommand]) -> List[ShapeCommand]:
        marker_cy = marker.rect.center[1]
        return [
            t for t in text_shapes
            if t.rect.x > marker.rect.x2 and abs(marker_cy - t.rect.center[1]) < t.rect.height
        ]

    def on_shapes_selected(self, selected: Sequence[ShapeCommand],
                           all_shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        shapes = self._as_list(selected)
        text_shapes = [s for s in shapes if s.is_text]
        main_color = self.element.get_main_color()
        if main_color is None or not text_shapes:
            return ExtractionResult.failure("No legend candidates")

        own_shapes = self.element.shapes
        candidate = None
        words: List[str] = []
        for shape in shapes:
            if shape.is_text or shape.style.stroke_style != main_color:
                continue
            if any(shape is own for own in own_shapes):
                continue
            if candidate is not None and shape.rect.area > candidate.rect.area:
                continue

            nearby = self._texts_right_of(shape, text_shapes)
            if not nearby:
                continue

            for line in self.text_merger.get_texts_from_text_shapes(nearby) or []:
                start_x = shape.rect.x2
                for word in line:
                    char_width = word.rect.width / max(len(word.text), 1)
                    if word.rect.x - start_x < char_width * self.config.LEGEND_GAP_FACTOR:
                        if candidate is not shape:
                            candidate = shape
                            words = []
                        words.append(word.text)
                        start_x = word.rect.x2

        if not words:
            self.logger.debug(f"No legend found for {self.element.name!r}")
            return ExtractionResult.failure("No legend found")

        name = " ".join(words)
        self.logger.info(f"Legend: renamed {self.element.name!r} to {name!r}")
        self.element.name = name
        return ExtractionResult(success=True, message=name)


def detect_legend(extractor: BaseExtractor, all_shapes: Optional[Sequence[ShapeCommand]],
                  result: ExtractionResult) -> None:
    """Run legend detection for the element of ``extractor``."""
    if not all_shapes:
        return
    legend = LegendExtractor(
        extractor.data_table, extractor.element, extractor.config, extractor.text_merger
    )
    legend_result = legend.on_shapes_selected(all_shapes)
    if legend_result.success:
        result.message = f"Named from legend: {legend_result.message}"
