"""
Tests for the table view and CSV export.

Tests cover:
- Columns from the X pixels of all series, with duplicate columns
- Header formatting for linear and categorical X axes
- Cell precision and error bar distances
- CSV text and file output
"""
import csv
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from vectorchart.models.chart_element import ChartElementType
from vectorchart.models.coordinates import AxisCoordinate2D
from vectorchart.models.data_table import DataTable
from vectorchart.serialization.csv_export import (
    cell_value,
    export_csv,
    table_data,
    table_ticks,
    to_csv,
    write_csv,
)


def add_points(table, element, pixels):
    for px, py in pixels:
        element.data.append(AxisCoordinate2D.from_pixels(px, py, table.axis_x, table.axis_y))


@pytest.fixture
def bar_table(calibrated_table):
    """One bar series: x=2 -> 50, x=5 -> 75."""
    bar = calibrated_table.add_series(ChartElementType.BAR)
    add_points(calibrated_table, bar, [(150, 150), (120, 200)])
    return calibrated_table


# ==================== TestTableTicks ====================

class TestTableTicks:
    """Test column building."""

    def test_sorted_by_pixel(self, bar_table):
        assert [t.coord.pixel for t in table_ticks(bar_table)] == [120, 150]

    def test_union_of_series(self, bar_table):
        line = bar_table.add_series(ChartElementType.LINE)
        add_points(bar_table, line, [(120, 250), (180, 250)])
        assert [t.coord.pixel for t in table_ticks(bar_table)] == [120, 150, 180]

    def test_duplicate_columns(self, calibrated_table):
        scatter = calibrated_table.add_series(ChartElementType.SCATTER)
        add_points(calibrated_table, scatter, [(120, 200), (120, 150), (130, 100)])

        ticks = table_ticks(calibrated_table)

        assert [(t.coord.pixel, t.duplicate_id) for t in ticks] == [(120, 0), (120, 1), (130, 0)]
        assert cell_value(scatter, ticks[1]).y.pixel == 150

    def test_empty(self, empty_table):
        assert table_ticks(empty_table) == []


# ==================== TestTableData ====================

class TestTableData:
    """Test table_data."""

    def test_default_precision(self, bar_table):
        assert table_data(bar_table) == [
            ["Name", "2", "5"],
            ["Bar 1", "50.00", "75.00"],
        ]

    def test_full_precision(self, bar_table):
        assert table_data(bar_table, precision=None)[1] == ["Bar 1", "50", "75"]

    def test_missing_cell_is_empty(self, bar_table):
        scatter = bar_table.add_series(ChartElementType.SCATTER)
        add_points(bar_table, scatter, [(150, 100)])
        assert table_data(bar_table, precision=0)[2] == ["Scatter 2", "", "100"]

    def test_line_interpolated_in_other_columns(self, bar_table):
        line = bar_table.add_series(ChartElementType.LINE)
        add_points(bar_table, line, [(100, 300), (200, 100)])
        rows = table_data(bar_table, precision=0)
        assert rows[0] == ["Name", "0", "2", "5", "10"]
        assert rows[2] == ["Line 2", "0", "20", "50", "100"]

    def test_categorical_x_headers(self, calibrated_table):
        calibrated_table.axis_x.clear()
        calibrated_table.axis_x.add_tick_value("Jan", 100)
        calibrated_table.axis_x.add_tick_value("Feb", 200)
        bar = calibrated_table.add_series(ChartElementType.BAR)
        add_points(calibrated_table, bar, [(101, 200), (199, 150)])

        assert table_data(calibrated_table)[0] == ["Name", "Jan", "Feb"]

    def test_categorical_y_cells(self, calibrated_table):
        calibrated_table.axis_y.clear()
        calibrated_table.axis_y.add_tick_value("Low", 300)
        calibrated_table.axis_y.add_tick_value("High", 100)
        bar = calibrated_table.add_series(ChartElementType.BAR)
        add_points(calibrated_table, bar, [(120, 120)])

        assert table_data(calibrated_table, precision=2)[1] == ["Bar 1", "High"]

    def test_text_labels_on_linear_axes(self, calibrated_table):
        """Axes switched back to linear over text labels still export."""
        for axis, labels in ((calibrated_table.axis_x, ("Jan", "Feb")),
                             (calibrated_table.axis_y, ("High", "Low"))):
            axis.set_tick_label(0, labels[0])
            axis.set_tick_label(1, labels[1])
            axis.toggle_interpolation()
        bar = calibrated_table.add_series(ChartElementType.BAR)
        add_points(calibrated_table, bar, [(120, 120)])
        calibrated_table.add_error_bars(bar)

        assert table_data(calibrated_table, precision=2) == [
            ["Name", "Jan"],
            ["Bar 1", "High"],
            ["↳ Error ⏉", "High"],
            ["↳ Error ⏊", "High"],
        ]
        assert to_csv(calibrated_table).splitlines()[0] == "Name,Jan"

    def test_header_decimals(self):
        """Headers get the fewest decimals keeping columns apart."""
        table = DataTable()
        table.axis_x.add_tick_value("0", 0)
        table.axis_x.add_tick_value("1", 1)
        line = table.add_series(ChartElementType.SCATTER)
        add_points(table, line, [(1.2, 0), (1.3, 0)])

        assert table_data(table)[0] == ["Name", "1.2", "1.3"]

    def test_no_columns(self, empty_table):
        empty_table.add_series(ChartElementType.LINE)
        assert table_data(empty_table) == [["Line 1"]]


# ==================== TestErrorBarCells ====================

class TestErrorBarCells:
    """Test error bar rows."""

    def test_distance_to_series(self, bar_table):
        bar = bar_table.series[0]
        bar_table.add_error_bars(bar)
        bar.upper_error_bar.data[1].y.pixel = 180  # x=2: 60 against 50

        rows = table_data(bar_table, precision=None)

        assert rows[2] == ["↳ Error ⏉", "10", "0"]
        assert rows[3] == ["↳ Error ⏊", "0", "0"]

    def test_precision_applies(self, bar_table):
        bar = bar_table.series[0]
        bar_table.add_error_bars(bar)
        bar.lower_error_bar.data[0].y.pixel = 160  # x=5: 70 against 75
        assert table_data(bar_table, precision=1)[3] == ["↳ Error ⏊", "0.0", "5.0"]

    def test_no_series_point(self, bar_table):
        bar = bar_table.series[0]
        bar_table.add_error_bars(bar)
        extra = AxisCoordinate2D.from_pixels(190, 100, bar_table.axis_x, bar_table.axis_y)
        bar.upper_error_bar.data.append(extra)

        rows = table_data(bar_table, precision=None)

        assert rows[0][-1] == "9"
        assert rows[1][-1] == ""
        assert rows[2][-1] == ""


# ==================== TestCSVOutput ====================

class TestCSVOutput:
    """Test CSV text and files."""

    def test_to_csv(self, bar_table):
        assert to_csv(bar_table) == "Name,2,5\nBar 1,50,75\n"

    def test_names_are_quoted(self, bar_table):
        bar_table.series[0].name = "Sales, EU"
        assert to_csv(bar_table).splitlines()[1] == '"Sales, EU",50,75'

    def test_write_csv_counts_rows(self, bar_table, tmp_path):
        with open(tmp_path / "out.csv", "w", newline="", encoding="utf-8") as f:
            assert write_csv(bar_table, f) == 2

    def test_export_creates_directories(self, bar_table, tmp_path):
        path = export_csv(bar_table, tmp_path / "nested" / "table.csv", precision=1)

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows == [["Name", "2", "5"], ["Bar 1", "50.0", "75.0"]]
