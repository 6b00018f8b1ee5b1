"""
Data table aggregate: two axes and the ordered list of chart elements.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ..errors import CloneInvariantError
from .axis import Axis, Direction, Interpolation
from .chart_element import Bound, ChartElement, ChartElementType, ErrorBar, SubChartElement


logger = logging.getLogger(__name__)


def chart_type_to_string(element_type: ChartElementType) -> str:
    """Human readable type name, e.g. ``BOX_PLOT`` -> ``"Box plot"``."""
    text = element_type.name.lower().replace("_", " ")
    return text[:1].upper() + text[1:]


class DataTable:
    """Axes plus series, with each series directly followed by its
    sub-elements (error bars, box plot quartiles)."""

    DEFAULT_NAME = "Chart Title"
    DEFAULT_X_AXIS_NAME = "Horizontal (X) Axis"
    DEFAULT_Y_AXIS_NAME = "Vertical (Y) Axis"

    def __init__(self, name: str = DEFAULT_NAME) -> None:
        self.name = name
        self.axis_x = Axis(self.DEFAULT_X_AXIS_NAME, Interpolation.LINEAR, Direction.HORIZONTAL)
        self.axis_y = Axis(self.DEFAULT_Y_AXIS_NAME, Interpolation.LINEAR, Direction.VERTICAL)
        self.series: List[ChartElement] = []

    # ==================== Cloning ====================

    def clone(self) -> "DataTable":
        """Deep copy in which every cross-reference points into the copy.

        Elements are cloned first against the new axes while remembering the
        originals; links and main-series references are then re-pointed by
        position.

        Raises:
            CloneInvariantError: if a link points outside this table
        """
        copy_ = DataTable(self.name)
        copy_.axis_x = self.axis_x.clone()
        copy_.axis_y = self.axis_y.clone()

        old_refs: List[ChartElement] = []
        for element in self.series:
            old_refs.append(element)
            copy_.series.append(element.clone(copy_.axis_x, copy_.axis_y))

        def remap(old: ChartElement) -> ChartElement:
            for idx, candidate in enumerate(old_refs):
                if candidate is old:
                    return copy_.series[idx]
            raise CloneInvariantError(
                f"Element {old.name!r} is referenced but not part of table {self.name!r}"
            )

        for old, new in zip(old_refs, copy_.series):
            for slot, linked in enumerate(old.linked_elements):
                if linked is not None:
                    new.linked_elements[slot] = remap(linked)
            if isinstance(old, SubChartElement):
                new.serie = remap(old.serie)

        return copy_

    # ==================== Series management ====================

    def index_of(self, element: ChartElement) -> int:
        for idx, candidate in enumerate(self.series):
            if candidate is element:
                return idx
        return -1

    def next_series_name(self, element_type: ChartElementType) -> str:
        return f"{chart_type_to_string(element_type)} {len(self.series) + 1}"

    def add_series(self, element_type: ChartElementType, name: Optional[str] = None) -> ChartElement:
        """Append a new, empty series of the given type."""
        element = ChartElement(element_type, name or self.next_series_name(element_type))
        self.series.append(element)
        logger.debug(f"Added series {element.name!r}")
        return element

    def add_error_bars(self, serie: ChartElement) -> List[ErrorBar]:
        """Create the missing upper/lower error bars of a series.

        The bars are inserted right after the series, upper first.
        """
        created = []
        idx = self.index_of(serie)
        if idx < 0:
            raise ValueError(f"Series {serie.name!r} is not part of this table")

        if serie.lower_error_bar is None:
            lower = ErrorBar(serie, Bound.LOWER)
            self.series.insert(idx + 1, lower)
            serie.lower_error_bar = lower
            created.append(lower)

        if serie.upper_error_bar is None:
            upper = ErrorBar(serie, Bound.UPPER)
            self.series.insert(idx + 1, upper)
            serie.upper_error_bar = upper
            created.append(upper)

        return created

    def insert_sub_element(self, serie: ChartElement, sub: SubChartElement,
                           slot: Optional[int] = None) -> None:
        """Link ``sub`` to ``serie`` and place it after the series' last
        sub-element already in the table.

        Without ``slot`` the link is appended. With it, ``linked_elements``
        is padded with None up to that slot first.
        """
        if slot is None:
            serie.linked_elements.append(sub)
        else:
            while len(serie.linked_elements) <= slot:
                serie.linked_elements.append(None)
            serie.linked_elements[slot] = sub
        position = self.index_of(serie)
        while (
            position + 1 < len(self.series)
            and isinstance(self.series[position + 1], SubChartElement)
            and self.series[position + 1].serie is serie
        ):
            position += 1
        self.series.insert(position + 1, sub)

    def remove_series(self, element: ChartElement) -> List[ChartElement]:
        """Remove an element and its sub-elements.

        Removing a sub-element clears its slot on the main series.

        Returns:
            All elements taken out of the table
        """
        idx = self.index_of(element)
        if idx < 0:
            return []

        removed = [self.series.pop(idx)]
        for sub in element.linked_elements:
            if sub is None:
                continue
            sub_idx = self.index_of(sub)
            if sub_idx > -1:
                removed.append(self.series.pop(sub_idx))

        if isinstance(element, SubChartElement):
            main = element.serie
            for slot, linked in enumerate(main.linked_elements):
                if linked is element:
                    main.linked_elements[slot] = None

        logger.debug(f"Removed {len(removed)} element(s) starting with {element.name!r}")
        return removed

    def __repr__(self) -> str:
        return f"DataTable({self.name!r}, series={len(self.series)})"
