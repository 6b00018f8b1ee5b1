"""Common interface of the per-element extractors."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..config import DEFAULT_CONFIG, ExtractionConfig
from ..errors import ExtractionResult
from ..models.shape_command import ShapeCommand
from .text_merger import TextMerger

if TYPE_CHECKING:
    from ..models.chart_element import ChartElement
    from ..models.data_table import DataTable


class BaseExtractor(ABC):
    """
    Abstract base class for extractors.

    An extractor interprets selected shapes as data of one target element,
    mutates that element in place and attaches the shapes to it. Selecting
    the same shapes twice adds their data twice.
    """

    def __init__(self, data_table: Optional[DataTable], element: ChartElement,
                 config: Optional[ExtractionConfig] = None,
                 text_merger: Optional[TextMerger] = None):
        self.data_table = data_table
        self.element = element
        self.config = config or DEFAULT_CONFIG
        self._text_merger = text_merger
        self.logger = logging.getLogger(type(self).__module__)

    @property
    def text_merger(self) -> TextMerger:
        if self._text_merger is None:
            self._text_merger = TextMerger(language=self.config.OCR_LANGUAGE)
        return self._text_merger

    @abstractmethod
    def on_shapes_selected(self, selected: Sequence[ShapeCommand],
                           all_shapes: Optional[Sequence[ShapeCommand]] = None) -> ExtractionResult:
        """
        Extract data from ``selected`` into the target element.

        Args:
            selected: Shapes picked by the user
            all_shapes: Every shape in view, used for tick marks and legends

        Returns:
            ExtractionResult describing what was added
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return extractor name for logging"""
        pass

    def _finish(self, selected: Sequence[ShapeCommand], points_added: int) -> ExtractionResult:
        self.element.add_shapes(list(selected))
        self.logger.info(
            f"{self.get_name()}: {points_added} point(s) added to {self.element.name!r}"
        )
        return ExtractionResult(success=True, points_added=points_added)

    @staticmethod
    def _as_list(shapes: Optional[Sequence[ShapeCommand]]) -> List[ShapeCommand]:
        return list(shapes) if shapes else []
