"""
Extraction configuration for vector chart data extraction.

Centralizes all magic numbers used by the extractors, the text merger
and the exporters.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for shape interpretation heuristics.

    All distances are in page pixels (transformed space, y grows downward)
    unless otherwise noted.
    """

    # ==================== Axis Ticks ====================
    # Tick marks are short strokes (at most MOVETO + LINETO + slack)
    TICK_MARK_MAX_OPS: int = 3
    # Tick mark must start within this many label extents of the label
    TICK_SEARCH_FACTOR: float = 4.0
    # Share of numeric labels above which non-numeric labels are discarded
    NUMERIC_MAJORITY: float = 0.5

    # ==================== Box Plots ====================
    # Shapes whose horizontal centers differ less than this form one box
    BOX_PLOT_GROUP_TOLERANCE: float = 1.0
    # Existing data points closer than this are updated instead of appended
    UPSERT_TOLERANCE: float = 0.1

    # ==================== Error Bars ====================
    # Max horizontal distance between a whisker and its series point
    ERRORBAR_MAX_DISTANCE: float = 1.0

    # ==================== Legend ====================
    # Words further apart than this many character widths end the name
    LEGEND_GAP_FACTOR: float = 2.0

    # ==================== OCR ====================
    OCR_LANGUAGE: str = "eng"
    OCR_METHOD: str = "tesseract"
    OCR_MIN_CONFIDENCE: float = 0.3
    # Rendering scale used when rasterizing shapes for OCR
    OCR_RENDER_SCALE: float = 1.0
    VALID_OCR_METHODS: tuple = ("tesseract", "easyocr")

    # ==================== Shape Filters ====================
    MAX_FILTER_GROUPS: int = 25
    SIGNATURE_ANGLE_MULTIPLICATOR: float = 45.0  # divided by pi at use site

    # ==================== Export ====================
    DEFAULT_DECIMAL_PRECISION: int = 2
    MAX_HEADER_DECIMALS: int = 10


# Default instance
DEFAULT_CONFIG = ExtractionConfig()
