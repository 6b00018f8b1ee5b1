"""
Tabular view of a data table and its CSV export.

Columns are the X pixels used by any series. A series holding several
points at the same X pixel (common for scatter plots) gets extra columns
for that pixel, addressed by a duplicate index.
"""

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Union

from ..config import DEFAULT_CONFIG
from ..models.axis import Axis, format_number, is_numeric
from ..models.chart_element import ChartElement, ChartElementType
from ..models.coordinates import AxisCoordinate1D, AxisCoordinate2D
from ..models.data_table import DataTable
from ..preprocessing.geometry import min_unique_decimals


logger = logging.getLogger(__name__)


@dataclass
class TableTick:
    """One column: an X coordinate, plus which repetition of it."""

    coord: AxisCoordinate1D
    duplicate_id: int = 0


def table_ticks(table: DataTable) -> List[TableTick]:
    """Columns of the table view, sorted by pixel."""
    unique_pixels = []
    seen = set()
    duplicates: Dict[float, int] = {}

    for serie in table.series:
        serie_seen = set()
        serie_duplicates: Dict[float, int] = {}
        for point in serie.data:
            pixel = point.x.pixel
            if pixel in serie_seen:
                serie_duplicates[pixel] = serie_duplicates.get(pixel, 0) + 1
            serie_seen.add(pixel)
            if pixel not in seen:
                seen.add(pixel)
                unique_pixels.append(pixel)
        for pixel, count in serie_duplicates.items():
            duplicates[pixel] = max(duplicates.get(pixel, 0), count)

    ticks = [TableTick(AxisCoordinate1D(pixel, table.axis_x)) for pixel in unique_pixels]
    for pixel, count in duplicates.items():
        for duplicate_id in range(1, count + 1):
            ticks.append(TableTick(AxisCoordinate1D(pixel, table.axis_x), duplicate_id))

    # Stable: a pixel's original column stays before its duplicates
    ticks.sort(key=lambda tick: tick.coord.pixel)
    return ticks


def cell_value(serie: ChartElement, tick: TableTick) -> Optional[AxisCoordinate2D]:
    return serie.get_at_pixel_x(tick.coord.pixel, tick.duplicate_id)


def _format_value(serie: ChartElement, tick: TableTick, point: AxisCoordinate2D,
                  precision: Optional[int]) -> str:
    value = point.y.value
    if point.y.axis.is_categorical() or not is_numeric(value):
        return value

    number = float(value)
    if serie.is_type(ChartElementType.ERRORBAR):
        # Error bars are shown as the distance to the main series
        main_point = cell_value(serie.get_main_serie(), tick)
        if main_point is None:
            return ""
        if not is_numeric(main_point.y.value):
            return value
        number = abs(number - float(main_point.y.value))
        value = format_number(number)

    if precision is not None:
        return f"{number:.{precision}f}"
    return value


def _headers(axis_x: Axis, ticks: List[TableTick]) -> List[str]:
    labels = [tick.coord.value for tick in ticks]
    if axis_x.is_categorical() or not all(is_numeric(label) for label in labels):
        return ["Name"] + labels

    # Full precision is noise in headers
    values = [float(tick.coord.value) for tick in ticks if tick.duplicate_id == 0]
    decimals = min_unique_decimals(values, DEFAULT_CONFIG.MAX_HEADER_DECIMALS)
    return ["Name"] + [f"{float(tick.coord.value):.{decimals}f}" for tick in ticks]


def table_data(table: DataTable,
               precision: Optional[int] = DEFAULT_CONFIG.DEFAULT_DECIMAL_PRECISION) -> List[List[str]]:
    """
    Rows of the table view.

    Args:
        table: Table to render
        precision: Decimals of numeric cells, None for full precision

    Returns:
        Header row (omitted when there are no columns) followed by one row
        per element, in table order
    """
    ticks = table_ticks(table)
    rows = []
    if ticks:
        rows.append(_headers(table.axis_x, ticks))

    for serie in table.series:
        row = [serie.name]
        for tick in ticks:
            point = cell_value(serie, tick)
            row.append("" if point is None else _format_value(serie, tick, point, precision))
        rows.append(row)

    return rows


def write_csv(table: DataTable, stream: TextIO, precision: Optional[int] = None) -> int:
    """Write the table view to an open text stream; returns the row count."""
    rows = table_data(table, precision)
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerows(rows)
    return len(rows)


def to_csv(table: DataTable, precision: Optional[int] = None) -> str:
    buffer = io.StringIO()
    write_csv(table, buffer, precision)
    return buffer.getvalue()


def export_csv(table: DataTable, output_path: Union[str, Path],
               precision: Optional[int] = None) -> Path:
    """Save the table as ``output_path``; full precision unless told otherwise."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        count = write_csv(table, f, precision)
    logger.info(f"Exported {count} row(s) of {table.name!r} to {output_path}")
    return output_path
