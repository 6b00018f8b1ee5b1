"""
Chart elements: data series and the sub-elements attached to them.

A ChartElement owns its coordinates and references (without owning) the
page shapes it was extracted from. Sub-elements (error bars, box plot
quartiles) point back at their main series; the series keeps them in its
``linked_elements`` slots.
"""
from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from ..preprocessing.geometry import interpolate
from ..preprocessing.shape_utils import is_colorful

if TYPE_CHECKING:
    from .axis import Axis
    from .coordinates import AxisCoordinate1D, AxisCoordinate2D
    from .shape_command import ShapeCommand


logger = logging.getLogger(__name__)


class ChartElementType(Enum):
    AXIS = "axis"
    BAR = "bar"
    LINE = "line"
    SCATTER = "scatter"
    ERRORBAR = "errorbar"
    BOX_PLOT = "box_plot"
    BOX_PLOT_Q1 = "box_plot_q1"
    BOX_PLOT_Q3 = "box_plot_q3"
    BOX_PLOT_MIN = "box_plot_min"
    BOX_PLOT_MAX = "box_plot_max"


class Bound(Enum):
    UPPER = "upper"
    LOWER = "lower"


# Slots 0 and 1 of linked_elements are reserved for error bars
UPPER_ERRORBAR_SLOT = 0
LOWER_ERRORBAR_SLOT = 1


class ChartElement:
    """A data series (or axis) with its coordinates and source shapes."""

    def __init__(self, element_type: ChartElementType, name: str) -> None:
        self.type = element_type
        self.name = name
        self._data: List[AxisCoordinate2D] = []
        self._shapes: List[ShapeCommand] = []
        self.linked_elements: List[Optional[ChartElement]] = [None, None]
        self._shapes_version = 0
        self._main_color: Optional[str] = None
        self._main_color_version = -1

    # ==================== Data ====================

    @property
    def data(self) -> List[AxisCoordinate2D]:
        return self._data

    @data.setter
    def data(self, points: List[AxisCoordinate2D]) -> None:
        self._data = points

    @property
    def can_be_interpolated(self) -> bool:
        """Only lines can be read between their vertices."""
        return self.type == ChartElementType.LINE

    @property
    def can_have_error_bars(self) -> bool:
        return self.type != ChartElementType.BOX_PLOT

    def is_type(self, element_type: ChartElementType) -> bool:
        return self.type == element_type

    # ==================== Shapes ====================

    @property
    def shapes(self) -> List[ShapeCommand]:
        return self._shapes

    @shapes.setter
    def shapes(self, shapes: List[ShapeCommand]) -> None:
        self._shapes = list(shapes)
        self._shapes_version += 1

    def add_shapes(self, shapes: List[ShapeCommand]) -> None:
        """Attach source shapes. Duplicates are kept."""
        self._shapes.extend(shapes)
        self._shapes_version += 1

    def invalidate_main_color(self) -> None:
        self._main_color_version = -1

    def get_main_color(self) -> Optional[str]:
        """Most frequent effective color of the attached shapes.

        A colorful color wins over a more frequent gray, black or white one.
        The result is cached until the shape list changes.
        """
        if self._main_color_version == self._shapes_version:
            return self._main_color

        counts: Counter = Counter()
        main_color = None
        main_colorful = None
        for shape in self._shapes:
            color = shape.style.effective_color
            counts[color] += 1
            if main_color is None or counts[color] > counts[main_color]:
                main_color = color
            if is_colorful(color) and (
                main_colorful is None or counts[color] > counts[main_colorful]
            ):
                main_colorful = color

        self._main_color = main_colorful if main_colorful is not None else main_color
        self._main_color_version = self._shapes_version
        logger.debug(f"Main color of {self.name!r}: {self._main_color} over {len(self._shapes)} shapes")
        return self._main_color

    # ==================== Lookups ====================

    def get_at_tick_x(self, label: str) -> Optional[AxisCoordinate1D]:
        """Y coordinate of the first point whose X value equals ``label``."""
        for point in self.data:
            if point.x.value == label:
                return point.y
        return None

    def get_at_pixel_x(self, pixel: float, skip_count: int = 0) -> Optional[AxisCoordinate2D]:
        """Point at an X pixel.

        Lines are interpolated between their vertices. Other series need an
        exact pixel match; ``skip_count`` skips that many earlier matches so
        repeated X positions can be addressed one by one.
        """
        if self.can_be_interpolated:
            return interpolate(self.data, pixel)

        for point in self.data:
            if point.x.pixel == pixel:
                if skip_count == 0:
                    return point
                skip_count -= 1
        return None

    # ==================== Error bars ====================

    def has_error_bars(self) -> bool:
        return (
            self.linked_elements[UPPER_ERRORBAR_SLOT] is not None
            and self.linked_elements[LOWER_ERRORBAR_SLOT] is not None
        )

    @property
    def upper_error_bar(self) -> Optional["ErrorBar"]:
        return self.linked_elements[UPPER_ERRORBAR_SLOT]

    @upper_error_bar.setter
    def upper_error_bar(self, error_bar: Optional["ErrorBar"]) -> None:
        self.linked_elements[UPPER_ERRORBAR_SLOT] = error_bar

    @property
    def lower_error_bar(self) -> Optional["ErrorBar"]:
        return self.linked_elements[LOWER_ERRORBAR_SLOT]

    @lower_error_bar.setter
    def lower_error_bar(self, error_bar: Optional["ErrorBar"]) -> None:
        self.linked_elements[LOWER_ERRORBAR_SLOT] = error_bar

    def sub_elements(self) -> List["ChartElement"]:
        return [e for e in self.linked_elements if e is not None]

    # ==================== Copy ====================

    def copy_from(self, other: "ChartElement", axis_x: Optional[Axis],
                  axis_y: Optional[Axis]) -> None:
        """Take over name, data, links and shapes of ``other``.

        Coordinates are cloned against the given axes. Shapes and links are
        copied shallowly: shapes belong to the page, links are re-pointed by
        the owning table.
        """
        self.type = other.type
        self.name = other.name
        self._data = [point.clone(axis_x, axis_y) for point in other.data]
        self.linked_elements = list(other.linked_elements)
        self.shapes = list(other.shapes)

    def clone(self, axis_x: Optional[Axis] = None,
              axis_y: Optional[Axis] = None) -> "ChartElement":
        copy_ = ChartElement(self.type, self.name)
        copy_.copy_from(self, axis_x, axis_y)
        return copy_

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.type.name}, {self.name!r}, points={len(self._data)})"


class SubChartElement(ChartElement):
    """Element that only exists alongside a main series."""

    def __init__(self, element_type: ChartElementType, serie: ChartElement,
                 name: str) -> None:
        super().__init__(element_type, name)
        self.serie = serie

    @property
    def can_have_error_bars(self) -> bool:
        return False

    def get_main_color(self) -> Optional[str]:
        return self.serie.get_main_color()

    def get_main_serie(self) -> ChartElement:
        return self.serie

    def clone(self, axis_x: Optional[Axis] = None,
              axis_y: Optional[Axis] = None) -> "SubChartElement":
        copy_ = SubChartElement(self.type, self.serie, self.name)
        copy_.copy_from(self, axis_x, axis_y)
        return copy_


class ErrorBar(SubChartElement):
    """Upper or lower error bound of a series."""

    def __init__(self, serie: ChartElement, bound: Bound) -> None:
        symbol = "⏉" if bound == Bound.UPPER else "⏊"
        super().__init__(ChartElementType.ERRORBAR, serie, f"↳ Error {symbol}")
        self.bound = bound

    @property
    def data(self) -> List[AxisCoordinate2D]:
        # Never shorter than the series: missing bounds default to the value
        serie_data = self.serie.data
        for i in range(len(self._data), len(serie_data)):
            self._data.append(serie_data[i].clone())
        return self._data

    @data.setter
    def data(self, points: List[AxisCoordinate2D]) -> None:
        self._data = points

    def is_upper_bound(self) -> bool:
        return self.bound == Bound.UPPER

    def is_lower_bound(self) -> bool:
        return self.bound == Bound.LOWER

    def clone(self, axis_x: Optional[Axis] = None,
              axis_y: Optional[Axis] = None) -> "ErrorBar":
        copy_ = ErrorBar(self.serie, self.bound)
        copy_.copy_from(self, axis_x, axis_y)
        return copy_
