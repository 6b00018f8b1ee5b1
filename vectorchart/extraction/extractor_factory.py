"""Selection of the extractor matching a chart element."""

from typing import Optional

from ..config import ExtractionConfig
from ..errors import UnsupportedElementError
from ..models.chart_element import ChartElement, ChartElementType
from ..models.data_table import DataTable, chart_type_to_string
from .axis_extractor import AxisExtractor
from .bar_extractor import BarExtractor
from .base_extractor import BaseExtractor
from .box_plot_extractor import BoxPlotExtractor
from .error_bar_extractor import ErrorBarExtractor
from .line_extractor import LineExtractor
from .scatter_extractor import ScatterExtractor
from .text_merger import TextMerger


EXTRACTORS = {
    ChartElementType.AXIS: AxisExtractor,
    ChartElementType.LINE: LineExtractor,
    ChartElementType.BAR: BarExtractor,
    ChartElementType.SCATTER: ScatterExtractor,
    ChartElementType.BOX_PLOT: BoxPlotExtractor,
    ChartElementType.ERRORBAR: ErrorBarExtractor,
}


def get_extractor(element: ChartElement, data_table: Optional[DataTable],
                  config: Optional[ExtractionConfig] = None,
                  text_merger: Optional[TextMerger] = None) -> BaseExtractor:
    """
    Build the extractor for the next selections on ``element``.

    Raises:
        UnsupportedElementError: for box plot quartile elements, which are
            only ever filled through their main series
    """
    extractor_cls = EXTRACTORS.get(element.type)
    if extractor_cls is None:
        raise UnsupportedElementError(
            f"No extractor for {chart_type_to_string(element.type)} element {element.name!r}"
        )
    return extractor_cls(data_table, element, config, text_merger)


__all__ = ["EXTRACTORS", "get_extractor", "chart_type_to_string"]
