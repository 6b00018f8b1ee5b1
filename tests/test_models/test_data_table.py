"""
Tests for ChartElement, ErrorBar and DataTable.

Tests cover:
- Main color vote and its cache
- Error bar padding
- Lookups by tick and pixel
- Series management (naming, error bars, sub-elements, removal)
- Clone isolation and reference re-pointing
"""
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from conftest import make_line, make_rect
from vectorchart.errors import CloneInvariantError
from vectorchart.extraction.box_plot_extractor import BoxPlotExtractor
from vectorchart.extraction.text_merger import TextMerger
from vectorchart.models.chart_element import (
    Bound,
    ChartElement,
    ChartElementType,
    ErrorBar,
    SubChartElement,
)
from vectorchart.models.coordinates import AxisCoordinate2D
from vectorchart.models.data_table import chart_type_to_string


def add_points(element, table, pixels):
    for px, py in pixels:
        element.data.append(AxisCoordinate2D.from_pixels(px, py, table.axis_x, table.axis_y))


# ==================== TestMainColor ====================

class TestMainColor:
    """Test the main color vote."""

    def test_majority_color(self):
        element = ChartElement(ChartElementType.LINE, "L")
        element.add_shapes([make_line(0, 0, 1, 1, "#ff0000")] * 2 + [make_line(0, 0, 1, 1, "#00ff00")])
        assert element.get_main_color() == "#ff0000"

    def test_colorful_beats_more_frequent_gray(self):
        element = ChartElement(ChartElementType.BAR, "B")
        element.add_shapes([make_rect(0, 0, 5, 5, "#000000")] * 5 + [make_rect(0, 0, 5, 5, "#3366cc")])
        assert element.get_main_color() == "#3366cc"

    def test_translucent_color_is_colorful(self):
        element = ChartElement(ChartElementType.BAR, "B")
        element.add_shapes([make_rect(0, 0, 5, 5, "#000000")] * 5
                           + [make_rect(0, 0, 5, 5, "rgba(51, 102, 204, 0.5)")])
        assert element.get_main_color() == "rgba(51, 102, 204, 0.5)"

    def test_no_shapes(self):
        assert ChartElement(ChartElementType.LINE, "L").get_main_color() is None

    def test_cache_refreshes_when_shapes_change(self):
        element = ChartElement(ChartElementType.LINE, "L")
        element.add_shapes([make_line(0, 0, 1, 1, "#ff0000")])
        assert element.get_main_color() == "#ff0000"

        element.shapes = [make_line(0, 0, 1, 1, "#0000ff")]
        assert element.get_main_color() == "#0000ff"

    def test_invalidate_after_style_edit(self):
        """Editing a shape's style in place needs an explicit invalidation."""
        line = make_line(0, 0, 1, 1, "#ff0000")
        element = ChartElement(ChartElementType.LINE, "L")
        element.add_shapes([line])
        element.get_main_color()

        line.style.stroke_style = "#00ff00"
        element.invalidate_main_color()
        assert element.get_main_color() == "#00ff00"

    def test_sub_element_uses_series_color(self):
        serie = ChartElement(ChartElementType.LINE, "L")
        serie.add_shapes([make_line(0, 0, 1, 1, "#ff0000")])
        assert ErrorBar(serie, Bound.UPPER).get_main_color() == "#ff0000"


# ==================== TestErrorBar ====================

class TestErrorBar:
    """Test error bar data padding."""

    def test_pads_with_series_values(self, empty_table):
        serie = empty_table.add_series(ChartElementType.BAR)
        add_points(serie, empty_table, [(10, 50), (20, 60)])
        error_bar = ErrorBar(serie, Bound.LOWER)

        assert [p.y.pixel for p in error_bar.data] == [50, 60]
        assert error_bar.data[0] is not serie.data[0]

    def test_names_and_bounds(self):
        serie = ChartElement(ChartElementType.BAR, "B")
        upper, lower = ErrorBar(serie, Bound.UPPER), ErrorBar(serie, Bound.LOWER)
        assert upper.name == "↳ Error ⏉" and upper.is_upper_bound()
        assert lower.name == "↳ Error ⏊" and lower.is_lower_bound()
        assert upper.can_have_error_bars is False


# ==================== TestLookups ====================

class TestLookups:
    """Test get_at_tick_x and get_at_pixel_x."""

    def test_line_interpolates(self, empty_table):
        line = empty_table.add_series(ChartElementType.LINE)
        add_points(line, empty_table, [(0, 0), (10, 100)])
        assert line.get_at_pixel_x(2.5).y.pixel == pytest.approx(25)
        assert line.get_at_pixel_x(20) is None

    def test_scatter_needs_exact_pixel(self, empty_table):
        scatter = empty_table.add_series(ChartElementType.SCATTER)
        add_points(scatter, empty_table, [(5, 1), (5, 2), (8, 3)])
        assert scatter.get_at_pixel_x(6) is None
        assert scatter.get_at_pixel_x(5).y.pixel == 1
        assert scatter.get_at_pixel_x(5, skip_count=1).y.pixel == 2
        assert scatter.get_at_pixel_x(5, skip_count=2) is None

    def test_get_at_tick_x(self, calibrated_table):
        bar = calibrated_table.add_series(ChartElementType.BAR)
        add_points(bar, calibrated_table, [(150, 200)])
        assert bar.get_at_tick_x("5").value == "50"
        assert bar.get_at_tick_x("6") is None


# ==================== TestSeriesManagement ====================

class TestSeriesManagement:
    """Test adding and removing elements."""

    def test_type_names(self):
        assert chart_type_to_string(ChartElementType.BOX_PLOT) == "Box plot"
        assert chart_type_to_string(ChartElementType.LINE) == "Line"

    def test_default_series_names(self, empty_table):
        first = empty_table.add_series(ChartElementType.LINE)
        second = empty_table.add_series(ChartElementType.BAR)
        assert first.name == "Line 1"
        assert second.name == "Bar 2"

    def test_error_bars_follow_series(self, empty_table):
        """Order is series, upper bound, lower bound."""
        serie = empty_table.add_series(ChartElementType.BAR)
        other = empty_table.add_series(ChartElementType.LINE)
        empty_table.add_error_bars(serie)

        assert empty_table.series[0] is serie
        assert empty_table.series[1] is serie.upper_error_bar
        assert empty_table.series[2] is serie.lower_error_bar
        assert empty_table.series[3] is other
        assert serie.has_error_bars()

    def test_error_bars_are_not_duplicated(self, empty_table):
        serie = empty_table.add_series(ChartElementType.BAR)
        empty_table.add_error_bars(serie)
        assert empty_table.add_error_bars(serie) == []
        assert len(empty_table.series) == 3

    def test_error_bars_need_a_member(self, empty_table):
        with pytest.raises(ValueError):
            empty_table.add_error_bars(ChartElement(ChartElementType.BAR, "stray"))

    def test_insert_sub_element_after_existing_subs(self, empty_table):
        serie = empty_table.add_series(ChartElementType.BOX_PLOT)
        tail = empty_table.add_series(ChartElementType.LINE)
        q3 = SubChartElement(ChartElementType.BOX_PLOT_Q3, serie, "↳ Q3")
        q1 = SubChartElement(ChartElementType.BOX_PLOT_Q1, serie, "↳ Q1")
        empty_table.insert_sub_element(serie, q3)
        empty_table.insert_sub_element(serie, q1)

        assert empty_table.series == [serie, q3, q1, tail]
        assert serie.linked_elements[2:] == [q3, q1]

    def test_remove_series_takes_sub_elements(self, empty_table):
        serie = empty_table.add_series(ChartElementType.BAR)
        empty_table.add_error_bars(serie)
        removed = empty_table.remove_series(serie)
        assert len(removed) == 3
        assert empty_table.series == []

    def test_remove_sub_element_unlinks(self, empty_table):
        serie = empty_table.add_series(ChartElementType.BAR)
        empty_table.add_error_bars(serie)
        upper = serie.upper_error_bar

        empty_table.remove_series(upper)
        assert serie.upper_error_bar is None
        assert serie.lower_error_bar is not None
        assert upper not in empty_table.series

    def test_removed_box_quartile_is_recreated(self, empty_table, stub_ocr_engine):
        """Extracting after removing Q3 refills the emptied slot."""
        serie = empty_table.add_series(ChartElementType.BOX_PLOT)
        extractor = BoxPlotExtractor(empty_table, serie, text_merger=TextMerger(ocr_engine=stub_ocr_engine))
        extractor.on_shapes_selected([make_rect(90, 20, 20, 20), make_line(100, 10, 100, 20)])
        old_q3 = serie.linked_elements[2]

        empty_table.remove_series(old_q3)
        assert serie.linked_elements[2] is None

        result = extractor.on_shapes_selected([make_rect(190, 25, 20, 10)])

        assert result.success
        new_q3 = serie.linked_elements[2]
        assert new_q3 is not None and new_q3 is not old_q3
        assert new_q3.type == ChartElementType.BOX_PLOT_Q3
        assert new_q3 in empty_table.series
        assert sorted(p.x.pixel for p in new_q3.data) == [100, 200]
        assert len(serie.linked_elements) == 6

    def test_insert_sub_element_into_slot(self, empty_table):
        serie = empty_table.add_series(ChartElementType.BOX_PLOT)
        q1 = SubChartElement(ChartElementType.BOX_PLOT_Q1, serie, "↳ Q1")
        empty_table.insert_sub_element(serie, q1, slot=3)

        assert serie.linked_elements == [None, None, None, q1]
        assert empty_table.series == [serie, q1]


# ==================== TestClone ====================

class TestClone:
    """Test deep cloning."""

    @pytest.fixture
    def populated_table(self, calibrated_table):
        serie = calibrated_table.add_series(ChartElementType.BAR)
        add_points(serie, calibrated_table, [(120, 200), (180, 150)])
        serie.add_shapes([make_rect(110, 200, 20, 100)])
        calibrated_table.add_error_bars(serie)
        return calibrated_table

    def test_clone_isolation(self, populated_table):
        """Mutating the clone leaves the original unchanged."""
        copy_ = populated_table.clone()
        copy_.series[0].data[0].y.pixel = 0
        copy_.series[0].name = "changed"
        copy_.axis_x.add_tick_value("20", 300)

        assert populated_table.series[0].data[0].y.pixel == 200
        assert populated_table.series[0].name == "Bar 1"
        assert len(populated_table.axis_x.ticks) == 2

    def test_references_point_into_clone(self, populated_table):
        copy_ = populated_table.clone()
        serie, upper, lower = copy_.series

        assert serie.upper_error_bar is upper
        assert serie.lower_error_bar is lower
        assert upper.serie is serie
        assert lower.get_main_serie() is serie

    def test_coordinates_use_cloned_axes(self, populated_table):
        copy_ = populated_table.clone()
        point = copy_.series[0].data[0]
        assert point.x.axis is copy_.axis_x
        assert point.y.axis is copy_.axis_y
        assert point.y.value == "50"

    def test_shapes_are_shared(self, populated_table):
        """Shapes belong to the page and are not copied."""
        copy_ = populated_table.clone()
        assert copy_.series[0].shapes[0] is populated_table.series[0].shapes[0]

    def test_dangling_reference_raises(self, populated_table):
        serie = populated_table.series[0]
        serie.linked_elements.append(ChartElement(ChartElementType.LINE, "outside"))
        with pytest.raises(CloneInvariantError):
            populated_table.clone()

    def test_box_plot_links_survive(self, empty_table):
        serie = empty_table.add_series(ChartElementType.BOX_PLOT)
        for element_type in (ChartElementType.BOX_PLOT_Q3, ChartElementType.BOX_PLOT_Q1):
            empty_table.insert_sub_element(serie, SubChartElement(element_type, serie, "sub"))

        copy_ = empty_table.clone()
        new_serie = copy_.series[0]
        assert new_serie.linked_elements[2] is copy_.series[1]
        assert new_serie.linked_elements[3] is copy_.series[2]
        assert copy_.series[1].serie is new_serie
