"""
Drawing primitives captured from a page.

A shape is either a path (ordered path operations) or a text run; the two
are separate classes sharing style, transform, clip regions and a cached
bounding box in transformed (page) space.
"""
from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Protocol, Sequence, Tuple

from .data_types import Rectangle
from .transform import AffineTransform


class PathOpType(IntEnum):
    BEGIN = 0
    CLOSE = 1
    MOVETO = 2
    LINETO = 3
    CURVETO = 4


# Number of numeric arguments each op carries
_ARG_COUNTS = {
    PathOpType.BEGIN: 0,
    PathOpType.CLOSE: 0,
    PathOpType.MOVETO: 2,
    PathOpType.LINETO: 2,
    PathOpType.CURVETO: 6,
}


@dataclass(frozen=True)
class PathOp:
    """One path operation with its untransformed arguments."""

    type: PathOpType
    args: Tuple[float, ...] = ()

    def __post_init__(self):
        expected = _ARG_COUNTS[self.type]
        if len(self.args) != expected:
            raise ValueError(
                f"{self.type.name} expects {expected} arguments, got {len(self.args)}"
            )

    @property
    def end_point(self) -> Optional[Tuple[float, float]]:
        """Pen position after this op, or None for BEGIN/CLOSE."""
        if self.type in (PathOpType.MOVETO, PathOpType.LINETO):
            return (self.args[0], self.args[1])
        if self.type == PathOpType.CURVETO:
            return (self.args[4], self.args[5])
        return None

    @property
    def control_points(self) -> List[Tuple[float, float]]:
        if self.type == PathOpType.CURVETO:
            return [(self.args[0], self.args[1]), (self.args[2], self.args[3])]
        return []


def path_to_rect(path: Sequence[PathOp]) -> Optional[Rectangle]:
    """Untransformed extent of the drawn segments of a path.

    A segment contributes its start point, end point and, for curves, both
    control points. A path with no drawn segment has no extent.
    """
    last = (0.0, 0.0)
    points = []
    for op in path:
        if op.type == PathOpType.MOVETO:
            last = op.end_point
        elif op.type in (PathOpType.LINETO, PathOpType.CURVETO):
            points.append(last)
            points.extend(op.control_points)
            last = op.end_point
            points.append(last)
    if not points:
        return None
    return Rectangle.from_points(points)


# ==================== STYLE ====================

@dataclass
class ShapeStyle:
    """Canvas drawing state captured alongside a shape."""

    is_filled: bool = False
    fill_style: str = "#000"
    stroke_style: str = "#000"
    line_width: float = 1.0
    line_cap: str = "butt"
    line_join: str = "miter"
    miter_limit: float = 10.0
    line_dash: List[float] = field(default_factory=list)
    font: str = "10px sans-serif"
    text_align: str = "start"
    text_baseline: str = "alphabetic"
    global_alpha: float = 1.0
    composite_operation: str = "source-over"

    @property
    def effective_color(self) -> str:
        """Fill color for filled shapes, stroke color otherwise."""
        return self.fill_style if self.is_filled else self.stroke_style

    def copy(self) -> "ShapeStyle":
        return copy.deepcopy(self)


@dataclass
class ClipRegion:
    """Clip path with the transform active when it was set."""

    path: List[PathOp]
    transform: AffineTransform = field(default_factory=AffineTransform.identity)

    def rect(self) -> Optional[Rectangle]:
        local = path_to_rect(self.path)
        if local is None:
            return None
        return Rectangle.from_points(self.transform.apply_points(local.corners()))

    def copy(self) -> "ClipRegion":
        return ClipRegion(list(self.path), self.transform.copy())


# ==================== FONT METRICS ====================

@dataclass
class TextMetrics:
    """Ink extents of a text run around its anchor (all positive)."""

    left: float
    right: float
    ascent: float
    descent: float


class FontMetrics(Protocol):
    """Anything able to measure a text run in a given CSS font."""

    def measure(self, text: str, font: str, text_align: str = "start") -> TextMetrics:
        ...


class ApproximateFontMetrics:
    """Estimate text extents from the font size alone.

    Used when no real font measurer is available. Widths assume an average
    glyph advance proportional to the font size.
    """

    CHAR_WIDTH_RATIO = 0.55
    ASCENT_RATIO = 0.75
    DESCENT_RATIO = 0.2
    _SIZE_PATTERN = re.compile(r"([\d.]+)\s*(px|pt)")

    def font_size(self, font: str) -> float:
        match = self._SIZE_PATTERN.search(font or "")
        if not match:
            return 10.0
        size = float(match.group(1))
        return size * 4.0 / 3.0 if match.group(2) == "pt" else size

    def measure(self, text: str, font: str, text_align: str = "start") -> TextMetrics:
        size = self.font_size(font)
        width = len(text) * size * self.CHAR_WIDTH_RATIO
        if text_align == "center":
            left = width / 2
        elif text_align in ("right", "end"):
            left = width
        else:
            left = 0.0
        return TextMetrics(
            left=left,
            right=width - left,
            ascent=size * self.ASCENT_RATIO,
            descent=size * self.DESCENT_RATIO,
        )


DEFAULT_FONT_METRICS = ApproximateFontMetrics()


# ==================== SHAPES ====================

class ShapeCommand:
    """Common state of a drawn primitive."""

    def __init__(
        self,
        style: Optional[ShapeStyle] = None,
        transform: Optional[AffineTransform] = None,
        clip_regions: Optional[List[ClipRegion]] = None,
    ) -> None:
        self.style = style or ShapeStyle()
        self.transform = transform or AffineTransform.identity()
        self.clip_regions: List[ClipRegion] = list(clip_regions or [])
        self.bbox = Rectangle()

    @property
    def rect(self) -> Rectangle:
        return self.bbox

    @property
    def is_text(self) -> bool:
        return False

    @property
    def is_filled(self) -> bool:
        return self.style.is_filled

    def _local_rect(self, font_metrics: Optional[FontMetrics]) -> Optional[Rectangle]:
        raise NotImplementedError

    def compute_bbox(self, font_metrics: Optional[FontMetrics] = None) -> Rectangle:
        """Recompute and cache the bounding box in page space.

        All four corners of the local box go through the transform so that
        rotated or sheared shapes get their full axis-aligned hull. Each clip
        region then narrows the box in turn.
        """
        local = self._local_rect(font_metrics)
        if local is None:
            self.bbox = Rectangle()
            return self.bbox

        bbox = Rectangle.from_points(self.transform.apply_points(local.corners()))
        for clip in self.clip_regions:
            clip_rect = clip.rect()
            if clip_rect is not None:
                bbox = bbox.intersect(clip_rect)
        self.bbox = bbox
        return bbox

    def is_contained(self, rect: Rectangle) -> bool:
        """True if the bounding box lies strictly inside ``rect``."""
        return rect.strictly_contains(self.bbox)

    def _copy_state_to(self, other: "ShapeCommand") -> None:
        other.style = self.style.copy()
        other.transform = self.transform.copy()
        other.clip_regions = [clip.copy() for clip in self.clip_regions]
        other.bbox = self.bbox.clone()

    def clone(self) -> "ShapeCommand":
        raise NotImplementedError


class PathShape(ShapeCommand):
    """Shape made of path operations."""

    def __init__(self, path: Optional[List[PathOp]] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.path: List[PathOp] = list(path or [])

    def add_cmd(self, op_type: PathOpType, *args: float) -> None:
        self.path.append(PathOp(PathOpType(op_type), tuple(float(a) for a in args)))

    def _local_rect(self, font_metrics: Optional[FontMetrics]) -> Optional[Rectangle]:
        return path_to_rect(self.path)

    def clone(self) -> "PathShape":
        copy_ = PathShape(list(self.path))
        self._copy_state_to(copy_)
        return copy_

    def __repr__(self) -> str:
        return f"PathShape(ops={len(self.path)}, bbox={self.bbox.as_tuple()})"


class TextShape(ShapeCommand):
    """Text run anchored at (x, y) in local space."""

    def __init__(self, text: str, x: float = 0.0, y: float = 0.0,
                 unicode: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.text = text
        self.x = x
        self.y = y
        # Decoded text when the drawn glyph string is a font-specific encoding
        self.unicode = unicode

    @property
    def is_text(self) -> bool:
        return True

    @property
    def display_text(self) -> str:
        return self.unicode if self.unicode is not None else self.text

    def _local_rect(self, font_metrics: Optional[FontMetrics]) -> Optional[Rectangle]:
        metrics = (font_metrics or DEFAULT_FONT_METRICS).measure(
            self.text, self.style.font, self.style.text_align
        )
        return Rectangle(
            self.x - metrics.left,
            self.y - metrics.ascent,
            metrics.left + metrics.right,
            metrics.ascent + metrics.descent,
        )

    def clone(self) -> "TextShape":
        copy_ = TextShape(self.text, self.x, self.y, self.unicode)
        self._copy_state_to(copy_)
        return copy_

    def __repr__(self) -> str:
        return f"TextShape({self.display_text!r}, bbox={self.bbox.as_tuple()})"
