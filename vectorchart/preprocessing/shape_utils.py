"""
Shape analysis helpers.

Pure functions over shapes: subpath splitting, angle signatures, simple
shape classification, and color classification.
"""

from __future__ import annotations

import math
import re
from typing import List, Optional, Sequence, Tuple

from ..models.coordinates import AxisCoordinate2D
from ..models.shape_command import PathOpType, PathShape, ShapeCommand


Color = Tuple[int, int, int]

_RGB_PATTERN = re.compile(r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)")
_NAMED_COLORS = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "blue": (0, 0, 255),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
}


def shapes_to_points(shapes: Sequence[ShapeCommand], axis_x, axis_y) -> List[AxisCoordinate2D]:
    """One coordinate per MOVETO/LINETO vertex, in page space."""
    points = []
    for shape in shapes:
        if shape.is_text:
            continue
        vertices = [
            op.args for op in shape.path
            if op.type in (PathOpType.MOVETO, PathOpType.LINETO)
        ]
        if not vertices:
            continue
        for px, py in shape.transform.apply_points(vertices):
            points.append(AxisCoordinate2D.from_pixels(float(px), float(py), axis_x, axis_y))
    return points


def _sub_shape(shape: PathShape, ops) -> PathShape:
    sub = PathShape(list(ops))
    sub.style = shape.style.copy()
    sub.transform = shape.transform.copy()
    sub.clip_regions = [clip.copy() for clip in shape.clip_regions]
    sub.compute_bbox()
    return sub


def split_into_sub_shapes(shape: ShapeCommand) -> List[ShapeCommand]:
    """Split a path at its MOVETO boundaries.

    Several disjoint shapes are often drawn as one path. A MOVETO only
    starts a new subpath once the current one holds more than one op.
    Text shapes are returned as they are.
    """
    if shape.is_text:
        return [shape]

    sub_shapes = []
    current = []
    for op in shape.path:
        if op.type == PathOpType.MOVETO and len(current) > 1:
            sub_shapes.append(_sub_shape(shape, current))
            current = []
        current.append(op)

    if current:
        sub_shapes.append(_sub_shape(shape, current))
    return sub_shapes


def split_shapes_into_sub_shapes(shapes: Sequence[ShapeCommand]) -> List[ShapeCommand]:
    sub_shapes = []
    for shape in shapes:
        sub_shapes.extend(split_into_sub_shapes(shape))
    return sub_shapes


def shape_to_angles(shape: Optional[ShapeCommand], multiplicator: float = 180 / math.pi,
                    related_to_origin: bool = False) -> List[int]:
    """Angle signature of a path.

    By default, the signed turn between each pair of successive segments,
    skipping straight (0) and reversing (180 degrees) turns. With
    ``related_to_origin`` the direction of every segment is returned
    instead. Angles are multiplied by ``multiplicator`` and rounded.
    """
    angles: List[int] = []
    if shape is None or shape.is_text or len(shape.path) <= 2:
        return angles

    history: List[Tuple[float, float]] = []
    for op in shape.path:
        if op.type == PathOpType.BEGIN:
            continue
        if op.type == PathOpType.CLOSE:
            if not history:
                continue
            point = history[0]
        else:
            point = (op.args[0], op.args[1])
        history.append(point)

        if related_to_origin:
            if len(history) >= 2:
                (x1, y1), (x2, y2) = history[-2], history[-1]
                angles.append(round(math.atan2(y1 - y2, x1 - x2) * multiplicator))
        elif len(history) >= 3:
            (x1, y1), (x2, y2), (x3, y3) = history[-3:]
            dax, day = x2 - x1, y2 - y1
            dbx, dby = x3 - x2, y3 - y2
            angle = math.atan2(dax * dby - day * dbx, dax * dbx + day * dby)
            degrees = abs(math.degrees(angle))
            if degrees != 0 and degrees != 180:
                angles.append(round(angle * multiplicator))

    return angles


def is_line(shape: ShapeCommand) -> bool:
    return len(shape_to_angles(shape)) == 0


def is_rectangle(shape: ShapeCommand) -> bool:
    """Three right-angle turns (the closing fourth is implicit)."""
    angles = shape_to_angles(shape)
    return len(angles) == 3 and all(abs(a) == 90 for a in angles)


def color_hex_to_rgb(color: str) -> Tuple[int, int, int]:
    """``"#rrggbb"`` (or ``"#rgb"``) to an (r, g, b) tuple.

    Raises:
        ValueError: for strings that are not hex colors
    """
    hex_value = color[1:] if color.startswith("#") else color
    if len(hex_value) == 3:
        hex_value = "".join(c * 2 for c in hex_value)
    value = int(hex_value, 16)
    return ((value >> 16) & 255, (value >> 8) & 255, value & 255)


def parse_color(color: Optional[str], default: Optional[Color] = (0, 0, 0)) -> Optional[Color]:
    """Parse ``#rgb``, ``#rrggbb``, ``rgb()``/``rgba()`` or a basic color name."""
    if not color:
        return default
    color = color.strip().lower()
    if color.startswith("#"):
        try:
            return color_hex_to_rgb(color[:7])
        except ValueError:
            return default
    match = _RGB_PATTERN.match(color)
    if match:
        return tuple(int(v) for v in match.groups())
    return _NAMED_COLORS.get(color, default)


def is_colorful(color: Optional[str]) -> bool:
    """True unless the color is a gray (including black and white).

    Colors that cannot be parsed are not colorful.
    """
    rgb = parse_color(color, default=None)
    if rgb is None:
        return False
    r, g, b = rgb
    return not (r == g == b)


def effective_color(shape: ShapeCommand) -> str:
    return shape.style.effective_color
