"""Vector chart data extraction.

Rebuilds an editable data table (axes, series, error bars, box plots,
legend names) from the vector drawing commands of a chart selected on a
document page.
"""

__version__ = "0.3.0"

__all__ = [
    "config",
    "errors",
    "models",
    "preprocessing",
    "extraction",
    "session",
    "serialization",
]
