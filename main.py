"""
Vector Chart - Data Extraction from Drawing Commands

Rebuild the data table of a chart from its captured vector shapes.

Usage:
    python main.py <shapes.json> [--output table.csv] [--precision N] [--ocr easyocr|tesseract]

The input document holds the shape stream and the selections to apply::

    {
      "shapes": [...],
      "steps": [
        {"action": "axis", "axis": "x", "rect": [40, 300, 400, 30]},
        {"action": "axis", "axis": "y", "rect": [0, 20, 40, 280]},
        {"action": "series", "type": "line", "rect": [40, 20, 400, 280]},
        {"action": "error_bars", "series": "Line 1", "rect": [40, 20, 400, 280]},
        {"action": "rename", "target": "table", "rect": [100, 0, 200, 20]},
        {"action": "toggle", "axis": "x"}
      ]
    }

Examples:
    python main.py chart.json
    python main.py chart.json -o table.csv --precision 2
"""
import argparse
import logging
import sys
from pathlib import Path

from vectorchart.errors import ChartExtractionError
from vectorchart.extraction.ocr_engine import OCREngine
from vectorchart.extraction.text_merger import TextMerger
from vectorchart.models.chart_element import ChartElementType
from vectorchart.models.data_types import Rectangle
from vectorchart.serialization.csv_export import to_csv
from vectorchart.serialization.shape_loader import load_document, load_shapes
from vectorchart.session import ExtractionSession


def _axis(session, name):
    return session.table.axis_x if name == "x" else session.table.axis_y


def _find_series(session, ref):
    if isinstance(ref, int):
        try:
            return session.table.series[ref]
        except IndexError:
            raise ChartExtractionError(
                f"No series at index {ref} ({len(session.table.series)} in table)"
            ) from None
    for element in session.table.series:
        if element.name == ref:
            return element
    raise ChartExtractionError(f"No series named {ref!r}")


def run_step(session: ExtractionSession, step: dict):
    """Apply one step of the input document to the session."""
    action = step.get("action")
    if "rect" in step:
        session.select(Rectangle.from_tuple(tuple(step["rect"])))

    if action == "axis":
        return session.extract_into(_axis(session, step.get("axis", "x")))
    if action == "series":
        return session.add_series(ChartElementType(step.get("type")))
    if action == "extend":
        return session.extract_into(_find_series(session, step.get("series")))
    if action == "error_bars":
        return session.extract_error_bars(_find_series(session, step.get("series")))
    if action == "rename":
        target = step.get("target", "table")
        if target == "table":
            return session.rename_from_selection(session.table)
        if target in ("x", "y"):
            return session.rename_from_selection(_axis(session, target))
        return session.rename_from_selection(_find_series(session, target))
    if action == "toggle":
        return session.toggle_interpolation(_axis(session, step.get("axis", "x")))
    if action == "retry_ocr":
        return session.retry_axis_with_ocr()
    if action == "undo":
        return session.undo()
    raise ChartExtractionError(f"Unknown step action {action!r}")


def main(argv=None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Extract the data table of a vector chart",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py chart.json                    # Print CSV to stdout
  python main.py chart.json -o table.csv       # Save to file
  python main.py chart.json --precision 2      # Round values to 2 decimals
  python main.py chart.json --ocr easyocr      # OCR fallback through EasyOCR
        """
    )
    parser.add_argument(
        "input",
        type=str,
        help="Path to the JSON shape stream with its extraction steps"
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output CSV file path (default: print to stdout)"
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Decimals of numeric cells (default: full precision)"
    )
    parser.add_argument(
        "--ocr",
        type=str,
        choices=["easyocr", "tesseract"],
        default="tesseract",
        help="OCR engine used when a selection has no text (default: tesseract)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every extraction step"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input not found: {args.input}", file=sys.stderr)
        return 1

    try:
        document = load_document(input_path)
        shapes = load_shapes(document)
        session = ExtractionSession(
            shapes, text_merger=TextMerger(ocr_engine=OCREngine(method=args.ocr))
        )
        for step in document.get("steps", []):
            result = run_step(session, step)
            for warning in getattr(result, "warnings", []):
                print(f"Warning: {warning}", file=sys.stderr)
            if getattr(result, "success", True) is False:
                print(f"Warning: step {step.get('action')!r}: {result.message}", file=sys.stderr)
        output_csv = to_csv(session.table, args.precision)
    except ValueError as e:
        print(f"Error: Invalid input: {e}", file=sys.stderr)
        return 1
    except ChartExtractionError as e:
        print(f"Error: Failed to extract data: {e}", file=sys.stderr)
        return 1

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.write_text(output_csv, encoding="utf-8")
            print(f"Table saved to: {args.output}")
        except IOError as e:
            print(f"Error: Failed to write output file: {e}", file=sys.stderr)
            return 1
    else:
        print(output_csv, end="")

    return 0


if __name__ == "__main__":
    sys.exit(main())
