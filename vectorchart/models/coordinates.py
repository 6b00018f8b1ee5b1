"""Pixel positions bound to an axis."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .axis import Axis


class AxisCoordinate1D:
    """A pixel position along one axis; its value is read through the axis."""

    __slots__ = ("pixel", "axis")

    def __init__(self, pixel: float, axis: "Axis") -> None:
        self.pixel = pixel
        self.axis = axis

    @property
    def value(self) -> str:
        return self.axis.pixel_to_tick(self.pixel)

    @value.setter
    def value(self, new_value: str) -> None:
        self.pixel = self.axis.tick_to_pixel(new_value)

    def clone(self, axis: Optional["Axis"] = None) -> "AxisCoordinate1D":
        return AxisCoordinate1D(self.pixel, axis if axis is not None else self.axis)

    def __repr__(self) -> str:
        return f"AxisCoordinate1D(pixel={self.pixel})"


class AxisCoordinate2D:
    """An (x, y) pair of axis coordinates."""

    __slots__ = ("x", "y")

    def __init__(self, x: AxisCoordinate1D, y: AxisCoordinate1D) -> None:
        self.x = x
        self.y = y

    @classmethod
    def from_pixels(cls, px: float, py: float, axis_x: "Axis",
                    axis_y: "Axis") -> "AxisCoordinate2D":
        return cls(AxisCoordinate1D(px, axis_x), AxisCoordinate1D(py, axis_y))

    def clone(self, axis_x: Optional["Axis"] = None,
              axis_y: Optional["Axis"] = None) -> "AxisCoordinate2D":
        return AxisCoordinate2D(self.x.clone(axis_x), self.y.clone(axis_y))

    def __repr__(self) -> str:
        return f"AxisCoordinate2D(x={self.x.pixel}, y={self.y.pixel})"
