"""
Exceptions and result types for vector chart extraction.
"""
from dataclasses import dataclass, field
from typing import List


# ==================== CUSTOM EXCEPTIONS ====================

class ChartExtractionError(Exception):
    """Base exception for chart extraction failures"""
    pass


class UnsupportedElementError(ChartExtractionError):
    """Raised when no extractor exists for a chart element type"""
    pass


class InvalidShapeError(ChartExtractionError):
    """Raised when a shape stream entry cannot be interpreted"""
    pass


class CloneInvariantError(ChartExtractionError):
    """Raised when a cloned table holds a reference outside itself"""
    pass


class OCREngineError(ChartExtractionError):
    """Raised when an OCR backend fails"""
    pass


class NoTextFoundError(ChartExtractionError):
    """Raised when an OCR input image is empty or unusable"""
    pass


# ==================== RESULT TYPES ====================

@dataclass
class ExtractionResult:
    """Outcome of one extraction step.

    Failures the user can recover from (no text in the selection, labels
    that had to be discarded) are reported here instead of raised.
    """

    success: bool = True
    message: str = ""
    warnings: List[str] = field(default_factory=list)
    points_added: int = 0

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    @classmethod
    def failure(cls, message: str) -> "ExtractionResult":
        return cls(success=False, message=message)
