"""
JSON shape stream loader.

The capture front end records every drawing call of a page as a JSON
document::

    {
      "shapes": [
        {"type": "path",
         "ops": [["M", 10, 10], ["L", 50, 10], ["C", 1, 2, 3, 4, 5, 6], ["Z"]],
         "style": {"is_filled": true, "fill_style": "#ff0000"},
         "transform": [1, 0, 0, 1, 0, 0],
         "clips": [{"ops": [...], "transform": [...]}]},
        {"type": "text", "text": "Revenue", "x": 60, "y": 14,
         "unicode": null, "style": {"font": "12px sans-serif"}}
      ]
    }

Op names may be the canvas letters (B, Z, M, L, C) or the full names.
Bounding boxes are computed on load.
"""

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import InvalidShapeError
from ..models.shape_command import (
    ClipRegion,
    FontMetrics,
    PathOp,
    PathOpType,
    PathShape,
    ShapeCommand,
    ShapeStyle,
    TextShape,
)
from ..models.transform import AffineTransform


logger = logging.getLogger(__name__)


OP_NAMES = {
    "B": PathOpType.BEGIN,
    "BEGIN": PathOpType.BEGIN,
    "Z": PathOpType.CLOSE,
    "CLOSE": PathOpType.CLOSE,
    "M": PathOpType.MOVETO,
    "MOVETO": PathOpType.MOVETO,
    "L": PathOpType.LINETO,
    "LINETO": PathOpType.LINETO,
    "C": PathOpType.CURVETO,
    "CURVETO": PathOpType.CURVETO,
}

_STYLE_FIELDS = {f.name for f in fields(ShapeStyle)}


def parse_ops(raw_ops: List[Any]) -> List[PathOp]:
    ops = []
    for raw in raw_ops:
        if not isinstance(raw, (list, tuple)) or not raw:
            raise InvalidShapeError(f"Path op must be a non-empty list, got {raw!r}")
        name = str(raw[0]).upper()
        if name not in OP_NAMES:
            raise InvalidShapeError(f"Unknown path op {raw[0]!r}")
        try:
            ops.append(PathOp(OP_NAMES[name], tuple(float(v) for v in raw[1:])))
        except (TypeError, ValueError) as e:
            raise InvalidShapeError(f"Invalid path op {raw!r}: {e}") from e
    return ops


def parse_style(raw_style: Optional[Dict[str, Any]]) -> ShapeStyle:
    if not raw_style:
        return ShapeStyle()
    unknown = set(raw_style) - _STYLE_FIELDS
    if unknown:
        logger.debug(f"Ignoring unknown style keys: {sorted(unknown)}")
    return ShapeStyle(**{k: v for k, v in raw_style.items() if k in _STYLE_FIELDS})


def parse_transform(raw_transform: Optional[List[float]]) -> AffineTransform:
    if raw_transform is None:
        return AffineTransform.identity()
    try:
        return AffineTransform.from_sequence(raw_transform)
    except (TypeError, ValueError) as e:
        raise InvalidShapeError(f"Invalid transform {raw_transform!r}: {e}") from e


def parse_shape(entry: Dict[str, Any],
                font_metrics: Optional[FontMetrics] = None) -> ShapeCommand:
    """Build one shape from its JSON entry and compute its bounding box.

    Raises:
        InvalidShapeError: if the entry is not a path or text description
    """
    if not isinstance(entry, dict):
        raise InvalidShapeError(f"Shape entry must be an object, got {type(entry).__name__}")

    clips = [
        ClipRegion(parse_ops(clip.get("ops", [])), parse_transform(clip.get("transform")))
        for clip in entry.get("clips", [])
    ]
    common = dict(
        style=parse_style(entry.get("style")),
        transform=parse_transform(entry.get("transform")),
        clip_regions=clips,
    )

    shape_type = entry.get("type")
    if shape_type == "path":
        shape = PathShape(parse_ops(entry.get("ops", [])), **common)
    elif shape_type == "text":
        if "text" not in entry:
            raise InvalidShapeError("Text shape without 'text'")
        shape = TextShape(
            str(entry["text"]),
            float(entry.get("x", 0.0)),
            float(entry.get("y", 0.0)),
            entry.get("unicode"),
            **common,
        )
    else:
        raise InvalidShapeError(f"Unknown shape type {shape_type!r}")

    shape.compute_bbox(font_metrics)
    return shape


def load_shapes(document: Dict[str, Any],
                font_metrics: Optional[FontMetrics] = None) -> List[ShapeCommand]:
    """Shapes of a parsed shape stream document, in drawing order."""
    raw_shapes = document.get("shapes")
    if not isinstance(raw_shapes, list):
        raise InvalidShapeError("Document has no 'shapes' list")

    shapes = []
    for idx, entry in enumerate(raw_shapes):
        try:
            shapes.append(parse_shape(entry, font_metrics))
        except InvalidShapeError as e:
            raise InvalidShapeError(f"Shape #{idx}: {e}") from e
    logger.debug(f"Loaded {len(shapes)} shape(s)")
    return shapes


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_shapes_file(path: Union[str, Path],
                     font_metrics: Optional[FontMetrics] = None) -> List[ShapeCommand]:
    return load_shapes(load_document(path), font_metrics)


def dump_shape(shape: ShapeCommand) -> Dict[str, Any]:
    """JSON entry of a shape, the inverse of :func:`parse_shape`."""
    style = {f.name: getattr(shape.style, f.name) for f in fields(ShapeStyle)}
    entry: Dict[str, Any] = {"style": style, "transform": shape.transform.as_sequence()}
    if shape.clip_regions:
        entry["clips"] = [
            {"ops": _dump_ops(clip.path), "transform": clip.transform.as_sequence()}
            for clip in shape.clip_regions
        ]
    if shape.is_text:
        entry.update(type="text", text=shape.text, x=shape.x, y=shape.y, unicode=shape.unicode)
    else:
        entry.update(type="path", ops=_dump_ops(shape.path))
    return entry


def _dump_ops(ops: List[PathOp]) -> List[List[Any]]:
    return [[op.type.name] + list(op.args) for op in ops]
