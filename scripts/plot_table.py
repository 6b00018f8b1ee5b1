"""
Re-plot an extracted table with matplotlib.

Usage:
    python scripts/plot_table.py table.csv [--output plot.png] [--kind line|bar|scatter]

Reads the CSV written by ``main.py`` (header ``Name`` + one column per X
position) and draws every row that is not a sub-element.
"""

from __future__ import annotations

import argparse
import csv
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np


SUB_ELEMENT_PREFIX = "↳"


def read_table(path: Path) -> Tuple[List[str], List[Tuple[str, List[Optional[float]]]]]:
    """Header labels and (name, values) rows; empty cells become None."""
    with path.open("r", encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    if not rows:
        return [], []

    header = rows[0][1:]
    series = []
    for row in rows[1:]:
        if not row or row[0].startswith(SUB_ELEMENT_PREFIX):
            continue
        values = []
        for cell in row[1:]:
            try:
                values.append(float(cell))
            except ValueError:
                values.append(None)
        series.append((row[0], values))
    return header, series


def plot_table(header: List[str], series, kind: str = "line", title: str = ""):
    fig, ax = plt.subplots(figsize=(6, 4), dpi=120)
    x = np.arange(len(header))
    width = 0.8 / max(len(series), 1)

    for i, (name, values) in enumerate(series):
        y = np.array([np.nan if v is None else v for v in values], dtype=float)
        if kind == "bar":
            ax.bar(x + i * width - 0.4 + width / 2, y, width=width, label=name)
        elif kind == "scatter":
            ax.scatter(x, y, label=name)
        else:
            ax.plot(x, y, marker="o", label=name)

    ax.set_xticks(x)
    ax.set_xticklabels(header, rotation=20, ha="right")
    ax.set_title(title)
    if series:
        ax.legend()
    fig.tight_layout()
    return fig


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Plot a table extracted by vectorchart")
    parser.add_argument("table", type=Path, help="CSV table")
    parser.add_argument("--output", "-o", type=Path, default=None,
                        help="Image file to write (default: show a window)")
    parser.add_argument("--kind", choices=["line", "bar", "scatter"], default="line")
    args = parser.parse_args(argv)

    if not args.table.exists():
        print(f"Error: Table not found: {args.table}", file=sys.stderr)
        return 1

    header, series = read_table(args.table)
    fig = plot_table(header, series, args.kind, title=args.table.stem)
    if args.output:
        fig.savefig(args.output)
        print(f"Plot saved to: {args.output}")
    else:
        plt.show()
    plt.close(fig)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
