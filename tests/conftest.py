"""
Pytest fixtures for vectorchart tests.

Provides:
- Shape builders (paths, rectangles, text runs) with computed bounding boxes
- Data tables with calibrated axes
- A stub OCR engine returning canned symbols
- A small bar chart shape stream with its selection rectangles
"""
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from vectorchart.models.data_types import Rectangle
from vectorchart.models.shape_command import PathOpType, PathShape, ShapeStyle, TextShape
from vectorchart.models.data_table import DataTable


# ==================== SHAPE BUILDERS ====================

def make_path(points, close=False, color="#000000", filled=False, transform=None):
    """Polyline through ``points`` (first point is the MOVETO)."""
    style = ShapeStyle(is_filled=filled, fill_style=color, stroke_style=color)
    shape = PathShape(style=style, transform=transform)
    shape.add_cmd(PathOpType.MOVETO, *points[0])
    for point in points[1:]:
        shape.add_cmd(PathOpType.LINETO, *point)
    if close:
        shape.add_cmd(PathOpType.CLOSE)
    shape.compute_bbox()
    return shape


def make_rect(x, y, w, h, color="#000000", filled=True):
    return make_path([(x, y), (x + w, y), (x + w, y + h), (x, y + h)], close=True,
                     color=color, filled=filled)


def make_line(x1, y1, x2, y2, color="#000000"):
    return make_path([(x1, y1), (x2, y2)], color=color)


def make_text(text, x, y, size=10, align="start"):
    """Text run; with the default metrics a glyph is 0.55 * size wide."""
    shape = TextShape(text, x, y, style=ShapeStyle(font=f"{size}px sans-serif", text_align=align))
    shape.compute_bbox()
    return shape


@pytest.fixture
def shape_builders():
    """Access to the shape builder helpers from tests."""
    return Mock(path=make_path, rect=make_rect, line=make_line, text=make_text)


# ==================== TABLE FIXTURES ====================

@pytest.fixture
def empty_table():
    return DataTable()


@pytest.fixture
def calibrated_table():
    """
    Table whose axes map pixels to values.

    X: pixel 100 -> 0, pixel 200 -> 10 (linear)
    Y: pixel 300 -> 0, pixel 100 -> 100 (linear, y grows downward)
    """
    table = DataTable()
    table.axis_x.add_tick_value("0", 100)
    table.axis_x.add_tick_value("10", 200)
    table.axis_y.add_tick_value("0", 300)
    table.axis_y.add_tick_value("100", 100)
    return table


# ==================== OCR FIXTURES ====================

@pytest.fixture
def stub_ocr_engine():
    """
    OCR engine stand-in with no backend.

    Set ``stub_ocr_engine.read_symbols.return_value`` to a list of
    OCRSymbol to simulate what the backend reads.
    """
    engine = Mock()
    engine.read_symbols.return_value = []
    return engine


@pytest.fixture
def selection_rect():
    return Rectangle(0, 0, 1000, 1000)


# ==================== CHART FIXTURES ====================

BAR_COLOR = "#3366cc"


@pytest.fixture
def bar_chart():
    """
    A two-bar chart as a shape stream, with the selection rectangles a
    user would draw.

    X: "0" at pixel 100, "10" at pixel 200 (tick marks below the plot)
    Y: "0" at pixel 300, "100" at pixel 100 (tick marks left of the plot)
    Bars: tops at (120, 200) and (180, 150), i.e. x=2 -> 50 and x=8 -> 75
    """
    x_labels = [make_text("0", 100, 320, align="center"), make_text("10", 200, 320, align="center")]
    x_ticks = [make_line(100, 305, 100, 310), make_line(200, 305, 200, 310)]
    y_labels = [make_text("0", 50, 302.75, align="right"), make_text("100", 50, 102.75, align="right")]
    y_ticks = [make_line(52, 300, 60, 300), make_line(52, 100, 60, 100)]
    bars = [make_rect(110, 200, 20, 100, BAR_COLOR), make_rect(170, 150, 20, 150, BAR_COLOR)]
    title = make_text("Sales", 100, 20)

    shapes = x_labels + x_ticks + y_labels + y_ticks + bars + [title]
    return Mock(
        shapes=shapes,
        bars=bars,
        title=title,
        x_rect=Rectangle(80, 300, 150, 30),
        y_rect=Rectangle(0, 80, 62, 240),
        plot_rect=Rectangle(100, 140, 100, 165),
        title_rect=Rectangle(90, 5, 100, 25),
    )
