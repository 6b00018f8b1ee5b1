"""Input and output formats: the JSON shape stream and CSV tables."""

__all__ = [
    "csv_export",
    "shape_loader",
]
