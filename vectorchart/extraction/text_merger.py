"""
Text reconstruction from shapes.

Groups text runs (single glyphs or longer chunks) into lines and words
using their de-rotated bounding boxes. When a selection holds no text
runs, the shapes are rendered and read with OCR instead.
"""
from __future__ import annotations

import asyncio
import logging
import math
from typing import List, Optional, Sequence

from ..config import DEFAULT_CONFIG
from ..models.data_types import Rectangle
from ..models.shape_command import ShapeCommand, TextShape
from ..models.transform import AffineTransform
from ..preprocessing.rasterizer import ShapeRasterizer
from .ocr_engine import OCREngine


logger = logging.getLogger(__name__)


def extract_angle(shape: ShapeCommand) -> float:
    """Rotation of a shape: angle of the transformed unit X vector."""
    x0, y0 = shape.transform.apply(0.0, 0.0)
    x1, y1 = shape.transform.apply(1.0, 0.0)
    return math.atan2(y1 - y0, x1 - x0)


def aligned_bounds(rect: Rectangle, angle: float) -> Rectangle:
    """Box ``rect`` re-expressed in a frame rotated by ``angle``."""
    if angle == 0:
        return rect.clone()
    rotation = AffineTransform.rotation(-angle)
    return Rectangle.from_points(rotation.apply_points(rect.corners()))


class TextChunk:
    """Piece of text with its page box and its de-rotated box."""

    def __init__(self, text: str, rect: Rectangle, aligned_rect: Optional[Rectangle] = None):
        self.text = text
        self.rect = rect
        self.aligned_rect = aligned_rect if aligned_rect is not None else rect.clone()

    @classmethod
    def from_shape(cls, shape: TextShape) -> "TextChunk":
        return cls(
            shape.display_text,
            shape.rect.clone(),
            aligned_bounds(shape.rect, extract_angle(shape)),
        )

    def letter_width(self) -> float:
        if not self.text:
            return 0.0
        return self.aligned_rect.width / len(self.text)

    def merged_with(self, other: "TextChunk") -> "TextChunk":
        return TextChunk(
            self.text + other.text,
            self.rect.union(other.rect),
            self.aligned_rect.union(other.aligned_rect),
        )

    def clone(self) -> "TextChunk":
        return TextChunk(self.text, self.rect.clone(), self.aligned_rect.clone())

    def __repr__(self) -> str:
        return f"TextChunk({self.text!r}, {self.rect.as_tuple()})"


class TextLine:
    """Chunks sharing a vertical band."""

    def __init__(self, chunk: TextChunk):
        self.chunks = [chunk]
        self.aligned_rect = chunk.aligned_rect.clone()
        self._total_letter_width = chunk.letter_width()

    def add(self, chunk: TextChunk) -> None:
        self.chunks.append(chunk)
        self.aligned_rect = self.aligned_rect.union(chunk.aligned_rect)
        self._total_letter_width += chunk.letter_width()

    def is_on_line(self, chunk: TextChunk) -> bool:
        """Non-zero vertical overlap with the line's band."""
        top = max(chunk.aligned_rect.y, self.aligned_rect.y)
        bottom = min(chunk.aligned_rect.y2, self.aligned_rect.y2)
        return max(0.0, bottom - top) != 0

    def words(self) -> List[TextChunk]:
        """Split at gaps of at least one average letter width."""
        average = self._total_letter_width / len(self.chunks)
        words = [self.chunks[0].clone()]
        for chunk in self.chunks[1:]:
            gap = chunk.aligned_rect.x - words[-1].aligned_rect.x2
            if gap >= average:
                words.append(chunk.clone())
            else:
                words[-1] = words[-1].merged_with(chunk)
        return words


def chunks_to_lines(chunks: Sequence[TextChunk]) -> List[List[TextChunk]]:
    """Lines (top to bottom) of words (left to right)."""
    if not chunks:
        return []

    ordered = sorted(chunks, key=lambda c: c.aligned_rect.x)
    lines = [TextLine(ordered[0])]
    for chunk in ordered[1:]:
        for line in lines:
            if line.is_on_line(chunk):
                line.add(chunk)
                break
        else:
            lines.append(TextLine(chunk))

    lines.sort(key=lambda line: line.aligned_rect.y)
    return [line.words() for line in lines]


class TextMerger:
    """Turns a selection of shapes into lines of words.

    Args:
        ocr_engine: Backend used when a selection has no text runs.
            Created on first use.
        language: OCR language hint
        rasterizer: Renderer used to build the OCR bitmap
    """

    def __init__(self, ocr_engine: Optional[OCREngine] = None,
                 language: str = DEFAULT_CONFIG.OCR_LANGUAGE,
                 rasterizer: Optional[ShapeRasterizer] = None):
        self._ocr = ocr_engine
        self.language = language
        self.rasterizer = rasterizer or ShapeRasterizer(scale=DEFAULT_CONFIG.OCR_RENDER_SCALE)

    @property
    def ocr(self) -> OCREngine:
        if self._ocr is None:
            self._ocr = OCREngine(languages=[self.language])
        return self._ocr

    def get_texts_from_text_shapes(self, shapes: Sequence[ShapeCommand]) -> Optional[List[List[TextChunk]]]:
        """Lines of words from the text runs only; None if there are none."""
        chunks = [TextChunk.from_shape(s) for s in shapes if s.is_text]
        if not chunks:
            return None
        return chunks_to_lines(chunks)

    def parse_rendered_text(self, shapes: Sequence[ShapeCommand]) -> List[TextChunk]:
        """Render the shapes and OCR them; boxes are returned in page space."""
        if not shapes:
            return []

        region = shapes[0].rect.clone()
        for shape in shapes[1:]:
            region = region.union(shape.rect)

        image = self.rasterizer.render(shapes, region)
        scale = self.rasterizer.scale
        chunks = []
        for symbol in self.ocr.read_symbols(image, language=self.language):
            box = symbol.bbox
            chunks.append(TextChunk(
                symbol.text,
                Rectangle(box.x / scale + region.x, box.y / scale + region.y,
                          box.width / scale, box.height / scale),
            ))
        return chunks

    def get_texts_from_shapes(self, shapes: Sequence[ShapeCommand],
                              try_ocr: bool = True) -> Optional[List[List[TextChunk]]]:
        """Lines of words from text runs, falling back to OCR.

        Returns None when nothing could be read.
        """
        result = self.get_texts_from_text_shapes(shapes)
        if result is None and try_ocr:
            logger.debug(f"No text runs in {len(shapes)} shape(s), trying OCR")
            chunks = self.parse_rendered_text(shapes)
            if chunks:
                return chunks_to_lines(chunks)
            return None
        return result

    def get_texts_from_ocr(self, shapes: Sequence[ShapeCommand]) -> Optional[List[List[TextChunk]]]:
        """OCR only, ignoring any text runs."""
        chunks = self.parse_rendered_text(shapes)
        return chunks_to_lines(chunks) if chunks else None

    async def get_texts_from_shapes_async(self, shapes: Sequence[ShapeCommand],
                                          try_ocr: bool = True) -> Optional[List[List[TextChunk]]]:
        """Same as :meth:`get_texts_from_shapes`, run in a worker thread."""
        return await asyncio.to_thread(self.get_texts_from_shapes, shapes, try_ocr)

    def get_text_from_shapes(self, shapes: Sequence[ShapeCommand], word_separator: str = " ",
                             line_separator: str = "\n", try_ocr: bool = True) -> Optional[str]:
        """Single string of the selection's text, or None."""
        texts = self.get_texts_from_shapes(shapes, try_ocr=try_ocr)
        if texts is None:
            return None
        return line_separator.join(
            word_separator.join(word.text for word in line) for line in texts
        )
