"""Extraction package for vectorchart.

This package turns shape selections into chart data: one extractor per
element type, the text merger that reads labels, and the OCR wrappers it
falls back to.
"""

__all__ = [
    "axis_extractor",
    "bar_extractor",
    "base_extractor",
    "box_plot_extractor",
    "error_bar_extractor",
    "extractor_factory",
    "legend_extractor",
    "line_extractor",
    "ocr_engine",
    "scatter_extractor",
    "text_merger",
]
