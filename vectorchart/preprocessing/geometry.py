"""Numeric helpers shared by axes and series."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..models.coordinates import AxisCoordinate1D, AxisCoordinate2D


def project(value: float, min_a: float, max_a: float, min_b: float, max_b: float) -> float:
    """Map ``value`` from [min_a, max_a] onto [min_b, max_b].

    A degenerate source range maps everything onto ``min_b``.
    """
    if max_a == min_a:
        return min_b
    return (value - min_a) / (max_a - min_a) * (max_b - min_b) + min_b


def interpolate(points: Sequence[AxisCoordinate2D], pixel_x: float) -> Optional[AxisCoordinate2D]:
    """Linear interpolation of a polyline at ``pixel_x``.

    Points do not need to be sorted. An exact X match is returned as is;
    positions outside the covered X range give None.
    """
    if not points:
        return None

    prev_pt = None
    next_pt = None
    for pt in points:
        px = pt.x.pixel
        if px == pixel_x:
            return pt
        if px < pixel_x and (prev_pt is None or px > prev_pt.x.pixel):
            prev_pt = pt
        if px > pixel_x and (next_pt is None or px < next_pt.x.pixel):
            next_pt = pt

    if prev_pt is None or next_pt is None:
        return None

    span = next_pt.x.pixel - prev_pt.x.pixel
    weight = (next_pt.x.pixel - pixel_x) / span
    pixel_y = prev_pt.y.pixel * weight + next_pt.y.pixel * (1 - weight)

    return AxisCoordinate2D(
        AxisCoordinate1D(pixel_x, prev_pt.x.axis),
        AxisCoordinate1D(pixel_y, prev_pt.y.axis),
    )


def min_unique_decimals(numbers: List[float], max_decimals: int = 20) -> int:
    """Fewest decimals for which rounding keeps all numbers distinct."""
    if not numbers:
        return 0

    target = len(set(numbers))
    decimals = 0
    while decimals < max_decimals:
        if len({round(n, decimals) for n in numbers}) == target:
            return decimals
        decimals += 1
    return max_decimals
