"""
Synthetic vector chart dataset generator for vectorchart.

Usage (from the project root):
    python -m scripts.generate_dataset [--count N] [--seed S]

Writes one shape stream per chart, with the selection steps a user would
make, plus the ground truth of every chart:
- Shapes:  data/shapes/chart_0001.json, ...
- JSON:    data/annotations/charts.json
"""

from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SHAPES_DIR = PROJECT_ROOT / "data" / "shapes"
ANNOTATION_DIR = PROJECT_ROOT / "data" / "annotations"
ANNOTATION_FILE = ANNOTATION_DIR / "charts.json"


TITLES = [
    "Monthly Sales",
    "Student Performance",
    "Product Revenue",
    "Website Traffic",
    "Quarterly Profits",
]

COLORS = ["#4285f4", "#34a853", "#fbbc05", "#ea4335", "#9c27b0"]

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Plot area in page pixels (y grows downward)
PLOT_LEFT = 60.0
PLOT_TOP = 40.0
PLOT_WIDTH = 480.0
PLOT_HEIGHT = 300.0
FONT = "10px sans-serif"


def _text(text: str, x: float, y: float, align: str = "start") -> Dict[str, Any]:
    return {"type": "text", "text": text, "x": x, "y": y,
            "style": {"font": FONT, "text_align": align}}


def _line(x1: float, y1: float, x2: float, y2: float, color: str = "#000000") -> Dict[str, Any]:
    return {"type": "path", "ops": [["M", x1, y1], ["L", x2, y2]],
            "style": {"stroke_style": color}}


def _rect(x: float, y: float, w: float, h: float, color: str) -> Dict[str, Any]:
    return {"type": "path",
            "ops": [["M", x, y], ["L", x + w, y], ["L", x + w, y + h], ["L", x, y + h], ["Z"]],
            "style": {"is_filled": True, "fill_style": color, "stroke_style": color}}


def _y_ticks(max_value: float, count: int = 5) -> List[float]:
    step = float(np.ceil(max_value / count / 10.0) * 10.0)
    return [step * i for i in range(count + 1)]


def _generate_single_chart(index: int, chart_type: str) -> Dict[str, Any]:
    """Build the shape stream document and ground truth of one chart."""
    num_points = random.randint(3, 8)
    start = random.randint(0, len(MONTHS) - num_points)
    categories = MONTHS[start:start + num_points]
    values = np.random.uniform(low=5.0, high=100.0, size=num_points).round(2).tolist()
    title = random.choice(TITLES)
    color = random.choice(COLORS)

    baseline = PLOT_TOP + PLOT_HEIGHT
    ticks = _y_ticks(max(values))
    y_max = ticks[-1]

    def to_pixel(value: float) -> float:
        return baseline - value / y_max * PLOT_HEIGHT

    shapes: List[Dict[str, Any]] = [_text(title, PLOT_LEFT + PLOT_WIDTH / 2, 20.0, "center")]

    # Y axis: right aligned labels, tick marks to their right
    for tick in ticks:
        py = to_pixel(tick)
        shapes.append(_text(f"{tick:g}", 50.0, py + 2.75, "right"))
        shapes.append(_line(52.0, py, PLOT_LEFT, py))

    # X axis: centered labels below short tick marks
    slot = PLOT_WIDTH / num_points
    centers = [PLOT_LEFT + slot * (i + 0.5) for i in range(num_points)]
    for label, cx in zip(categories, centers):
        shapes.append(_line(cx, baseline, cx, baseline + 5.0))
        shapes.append(_text(label, cx, baseline + 15.5, "center"))

    if chart_type == "bar":
        bar_width = slot * 0.6
        for cx, value in zip(centers, values):
            top = to_pixel(value)
            shapes.append(_rect(cx - bar_width / 2, top, bar_width, baseline - top, color))
    else:
        ops = [["M" if i == 0 else "L", cx, to_pixel(v)]
               for i, (cx, v) in enumerate(zip(centers, values))]
        shapes.append({"type": "path", "ops": ops, "style": {"stroke_style": color, "line_width": 2}})

    steps = [
        {"action": "axis", "axis": "x", "rect": [PLOT_LEFT - 20, baseline + 3, PLOT_WIDTH + 40, 20]},
        {"action": "axis", "axis": "y", "rect": [0, PLOT_TOP - 20, 51, PLOT_HEIGHT + 30]},
        {"action": "series", "type": chart_type,
         "rect": [PLOT_LEFT + 1, PLOT_TOP - 10, PLOT_WIDTH, PLOT_HEIGHT + 12]},
        {"action": "rename", "target": "table", "rect": [0, 0, PLOT_LEFT * 2 + PLOT_WIDTH, 25]},
    ]

    filename = f"chart_{index:04d}.json"
    rel_path = Path("data") / "shapes" / filename
    abs_path = SHAPES_DIR / filename
    abs_path.parent.mkdir(parents=True, exist_ok=True)
    with abs_path.open("w", encoding="utf-8") as f:
        json.dump({"shapes": shapes, "steps": steps}, f, indent=2)

    return {
        "shapes": str(rel_path.as_posix()),
        "metadata": {
            "type": chart_type,
            "title": title,
            "categories": categories,
            "values": values,
            "color": color,
        },
    }


def generate_dataset(num_charts: int = 100) -> None:
    """Generate the whole synthetic dataset."""
    ANNOTATION_DIR.mkdir(parents=True, exist_ok=True)

    annotations: List[Dict[str, Any]] = []
    errors: List[str] = []

    print(f"Generating {num_charts} charts into {SHAPES_DIR} ...")

    for i in range(1, num_charts + 1):
        chart_type = random.choice(["bar", "line"])
        try:
            annotations.append(_generate_single_chart(i, chart_type))
            print(f"[{i}/{num_charts}] Generated {chart_type} chart", flush=True)
        except (OSError, ValueError) as exc:
            msg = f"Error generating chart {i}: {exc}"
            errors.append(msg)
            print(msg, file=sys.stderr, flush=True)

    with ANNOTATION_FILE.open("w", encoding="utf-8") as f:
        json.dump(annotations, f, indent=2, ensure_ascii=False)
    print(f"\nSaved annotations to {ANNOTATION_FILE}")

    if errors:
        print(f"\nCompleted with {len(errors)} error(s). See stderr for details.")
    else:
        print("\nCompleted without errors.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate synthetic vector chart shape streams")
    parser.add_argument("--count", type=int, default=100, help="Number of charts")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    args = parser.parse_args(argv)

    if args.seed is not None:
        random.seed(args.seed)
        np.random.seed(args.seed)

    generate_dataset(num_charts=args.count)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
