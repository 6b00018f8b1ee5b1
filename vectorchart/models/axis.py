"""
Axis with tick labels and pixel/value mapping.

Ticks are kept sorted by pixel. A linear axis maps pixels to values by
projecting over its lowest- and highest-pixel ticks; a categorical axis
snaps to the nearest tick label.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..preprocessing.geometry import project
from .chart_element import ChartElement, ChartElementType
from .coordinates import AxisCoordinate1D


logger = logging.getLogger(__name__)


class Interpolation(Enum):
    LINEAR = "linear"
    CATEGORICAL = "categorical"


class Direction(Enum):
    HORIZONTAL = "x"
    VERTICAL = "y"


@dataclass
class Tick:
    """Label read at a pixel position of the axis."""

    pixel: float
    label: str


def is_numeric(label) -> bool:
    """True if the label parses as a finite or infinite number (not NaN)."""
    try:
        value = float(str(label).strip())
    except ValueError:
        return False
    return not math.isnan(value)


def format_number(value: float) -> str:
    """Render a number without a spurious trailing ``.0``."""
    value = float(value)
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


class Axis(ChartElement):
    """Horizontal or vertical chart axis."""

    def __init__(self, name: str, interpolation: Interpolation = Interpolation.LINEAR,
                 direction: Direction = Direction.HORIZONTAL) -> None:
        super().__init__(ChartElementType.AXIS, name)
        self.interpolation = interpolation
        self.direction = direction
        self.ticks: List[Tick] = []

    def clone(self, axis_x: Optional[Axis] = None,
              axis_y: Optional[Axis] = None) -> "Axis":
        copy_ = Axis(self.name, self.interpolation, self.direction)
        copy_.copy_from(self, None, None)
        copy_.ticks = [Tick(t.pixel, t.label) for t in self.ticks]
        return copy_

    # ==================== Properties ====================

    def is_horizontal(self) -> bool:
        return self.direction == Direction.HORIZONTAL

    def is_vertical(self) -> bool:
        return self.direction == Direction.VERTICAL

    def is_categorical(self) -> bool:
        return self.interpolation == Interpolation.CATEGORICAL

    @property
    def interpolation_name(self) -> str:
        return self.interpolation.value.replace("_", " ").capitalize()

    # ==================== Ticks ====================

    def add_tick_value(self, label: str, pixel: float) -> None:
        """Record a tick. A non-numeric label makes the axis categorical."""
        self.ticks.append(Tick(float(pixel), label))

        if not self.is_categorical() and not is_numeric(label):
            logger.debug(f"Axis {self.name!r} switched to categorical by label {label!r}")
            self.interpolation = Interpolation.CATEGORICAL

        self.ticks.sort(key=lambda t: t.pixel)

    def set_tick_label(self, index: int, label: str) -> None:
        """Replace a tick label. A non-numeric label makes the axis categorical."""
        self.ticks[index].label = label
        if not self.is_categorical() and not is_numeric(label):
            logger.debug(f"Axis {self.name!r} switched to categorical by label {label!r}")
            self.interpolation = Interpolation.CATEGORICAL

    def toggle_interpolation(self) -> Interpolation:
        """Switch between linear and categorical on explicit request."""
        self.interpolation = (
            Interpolation.LINEAR if self.is_categorical() else Interpolation.CATEGORICAL
        )
        return self.interpolation

    def clear(self) -> None:
        self.ticks = []
        self.shapes = []
        self.interpolation = Interpolation.LINEAR

    def get_ticks(self, n: Optional[int] = None) -> List[AxisCoordinate1D]:
        """Tick positions as coordinates, or ``n`` positions evenly spread
        between the first and last tick."""
        if n is None:
            return [AxisCoordinate1D(t.pixel, self) for t in self.ticks]

        if not self.ticks or n <= 0:
            return []

        low = self.ticks[0].pixel
        high = self.ticks[-1].pixel
        step = 0.0 if n <= 1 else (high - low) / (n - 1)
        return [AxisCoordinate1D(low + step * i, self) for i in range(n)]

    def _linear_range(self):
        """(min tick, max tick) when a linear projection is possible.

        Outer ticks with non-numeric labels rule out a projection even on an
        axis set to linear.
        """
        if self.is_categorical() or len(self.ticks) < 2:
            return None
        low, high = self.ticks[0], self.ticks[-1]
        if low.pixel == high.pixel or not (is_numeric(low.label) and is_numeric(high.label)):
            return None
        return low, high

    def _maps_by_label(self) -> bool:
        """Snap to the nearest label instead of projecting."""
        if len(self.ticks) < 2:
            return False
        return self.is_categorical() or not all(is_numeric(t.label) for t in self.ticks)

    # ==================== Mapping ====================

    def pixel_to_tick(self, pixel: float) -> str:
        """Value shown at ``pixel``.

        Without ticks the pixel itself is returned. Linear axes project over
        the outer ticks, categorical axes return the nearest label, a single
        tick is returned as is. A linear axis whose labels are not all
        numeric behaves as a categorical one.
        """
        if not self.ticks:
            return format_number(pixel)

        linear = self._linear_range()
        if linear is not None:
            low, high = linear
            value = project(pixel, low.pixel, high.pixel, float(low.label), float(high.label))
            return format_number(value)

        if self._maps_by_label():
            closest = min(self.ticks, key=lambda t: abs(t.pixel - pixel))
            return closest.label

        return self.ticks[0].label

    def tick_to_pixel(self, tick: str) -> float:
        """Pixel of a value. Inverse of :meth:`pixel_to_tick`.

        Raises:
            ValueError: if a linear axis with numeric labels receives a
                non-numeric value
        """
        if not self.ticks:
            return float(tick)

        linear = self._linear_range()
        if linear is not None:
            low, high = linear
            return project(float(tick), float(low.label), float(high.label), low.pixel, high.pixel)

        if self._maps_by_label():
            for t in self.ticks:
                if t.label == tick:
                    return t.pixel
            logger.warning(f"Label {tick!r} not found on axis {self.name!r}, using first tick")
            return self.ticks[0].pixel

        return self.ticks[0].pixel
