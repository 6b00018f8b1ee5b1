#!/usr/bin/env python3
"""
Benchmarking script for vectorchart extraction.

Replays the selection steps of each generated chart and compares the
extracted table with the ground truth annotations.

Usage:
    python scripts/benchmark.py [--limit N] [--output results.csv] [--verbose]

Example:
    python scripts/benchmark.py --limit 10 --verbose
    python scripts/benchmark.py --output benchmark_results.csv
"""
import argparse
import csv
import json
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from main import run_step
from vectorchart.errors import ChartExtractionError
from vectorchart.serialization.shape_loader import load_document, load_shapes
from vectorchart.session import ExtractionSession


@dataclass
class BenchmarkResult:
    """Result for a single chart benchmark."""
    shapes_path: str
    success: bool = False
    error_message: Optional[str] = None
    processing_time_ms: float = 0.0

    # Ground truth
    gt_point_count: int = 0
    gt_values: List[float] = field(default_factory=list)
    gt_categories: List[str] = field(default_factory=list)
    gt_title: Optional[str] = None

    # Predicted
    pred_point_count: int = 0
    pred_values: List[float] = field(default_factory=list)
    pred_categories: List[str] = field(default_factory=list)
    pred_title: Optional[str] = None

    # Metrics
    point_count_correct: bool = False
    value_mae: Optional[float] = None
    category_accuracy: Optional[float] = None
    title_match: bool = False


@dataclass
class BenchmarkSummary:
    """Summary statistics for benchmark run."""
    total_charts: int = 0
    successful_extractions: int = 0
    failed_extractions: int = 0

    point_count_accuracy: float = 0.0
    avg_value_mae: float = 0.0
    avg_category_accuracy: float = 0.0
    title_match_rate: float = 0.0

    avg_processing_time_ms: float = 0.0


def calculate_mae(gt_values: List[float], pred_values: List[float]) -> Optional[float]:
    """Mean absolute error, matching values by position."""
    n = min(len(gt_values), len(pred_values))
    if n == 0:
        return None
    return sum(abs(gt_values[i] - pred_values[i]) for i in range(n)) / n


def calculate_category_accuracy(gt_categories: List[str],
                                pred_categories: List[str]) -> Optional[float]:
    """Share of categories read exactly, in percent."""
    n = min(len(gt_categories), len(pred_categories))
    if n == 0:
        return None
    matches = sum(
        1 for i in range(n)
        if gt_categories[i].strip().lower() == pred_categories[i].strip().lower()
    )
    return matches / n * 100


def extract_chart(shapes_path: Path) -> ExtractionSession:
    document = load_document(shapes_path)
    session = ExtractionSession(load_shapes(document))
    for step in document.get("steps", []):
        run_step(session, step)
    return session


def benchmark_single_chart(shapes_path: Path, annotation: Dict[str, Any],
                           verbose: bool = False) -> BenchmarkResult:
    """Benchmark extraction on a single chart."""
    result = BenchmarkResult(shapes_path=str(shapes_path))

    metadata = annotation.get('metadata', {})
    result.gt_values = metadata.get('values', [])
    result.gt_point_count = len(result.gt_values)
    result.gt_categories = metadata.get('categories', [])
    result.gt_title = metadata.get('title')

    start_time = time.perf_counter()
    try:
        session = extract_chart(shapes_path)
        result.success = bool(session.table.series)
        if result.success:
            data = sorted(session.table.series[0].data, key=lambda p: p.x.pixel)
            result.pred_point_count = len(data)
            result.pred_values = [float(p.y.value) for p in data]
            result.pred_categories = [p.x.value for p in data]
            result.pred_title = session.table.name
        else:
            result.error_message = "No series extracted"
    except (ChartExtractionError, ValueError) as e:
        result.success = False
        result.error_message = str(e)
        if verbose:
            print(f"  ERROR: {e}")

    result.processing_time_ms = (time.perf_counter() - start_time) * 1000

    if result.success:
        result.point_count_correct = result.gt_point_count == result.pred_point_count
        result.value_mae = calculate_mae(result.gt_values, result.pred_values)
        result.category_accuracy = calculate_category_accuracy(
            result.gt_categories, result.pred_categories
        )
        result.title_match = (result.gt_title or "").strip() == (result.pred_title or "").strip()

    return result


def run_benchmark(annotations_path: Path, data_dir: Path, limit: Optional[int] = None,
                  verbose: bool = False) -> Tuple[List[BenchmarkResult], BenchmarkSummary]:
    with open(annotations_path, 'r', encoding='utf-8') as f:
        annotations = json.load(f)
    if limit:
        annotations = annotations[:limit]

    print(f"Loaded {len(annotations)} annotations")
    print("-" * 60)

    results: List[BenchmarkResult] = []
    for i, annotation in enumerate(annotations):
        shapes_path = data_dir / annotation.get('shapes', '')
        if not shapes_path.exists():
            if verbose:
                print(f"[{i+1}/{len(annotations)}] SKIP: {shapes_path} (not found)")
            continue

        result = benchmark_single_chart(shapes_path, annotation, verbose)
        results.append(result)

        if verbose:
            status = "OK" if result.success else "FAIL"
            print(f"[{i+1}/{len(annotations)}] [{status}] points: "
                  f"{result.pred_point_count}/{result.gt_point_count}, "
                  f"{result.processing_time_ms:.0f}ms")

    return results, calculate_summary(results)


def calculate_summary(results: List[BenchmarkResult]) -> BenchmarkSummary:
    summary = BenchmarkSummary(total_charts=len(results))
    successful = [r for r in results if r.success]
    summary.successful_extractions = len(successful)
    summary.failed_extractions = summary.total_charts - len(successful)
    if not successful:
        return summary

    summary.point_count_accuracy = sum(r.point_count_correct for r in successful) / len(successful) * 100
    maes = [r.value_mae for r in successful if r.value_mae is not None]
    summary.avg_value_mae = sum(maes) / len(maes) if maes else 0.0
    accs = [r.category_accuracy for r in successful if r.category_accuracy is not None]
    summary.avg_category_accuracy = sum(accs) / len(accs) if accs else 0.0
    summary.title_match_rate = sum(r.title_match for r in successful) / len(successful) * 100
    summary.avg_processing_time_ms = sum(r.processing_time_ms for r in successful) / len(successful)
    return summary


def print_summary(summary: BenchmarkSummary) -> None:
    print("\n" + "=" * 60)
    print("BENCHMARK SUMMARY")
    print("=" * 60)
    print(f"\nCharts processed: {summary.total_charts}")
    print(f"  Successful: {summary.successful_extractions}")
    print(f"  Failed: {summary.failed_extractions}")

    if summary.successful_extractions > 0:
        print("\nAccuracy Metrics:")
        print(f"  Point count accuracy: {summary.point_count_accuracy:.1f}%")
        print(f"  Value MAE: {summary.avg_value_mae:.4f}")
        print(f"  Category accuracy: {summary.avg_category_accuracy:.1f}%")
        print(f"  Title match rate: {summary.title_match_rate:.1f}%")
        print(f"\nAvg processing time: {summary.avg_processing_time_ms:.1f}ms")
    print("=" * 60)


def export_results_csv(results: List[BenchmarkResult], output_path: Path) -> None:
    fieldnames = [
        'shapes_path', 'success', 'error_message', 'processing_time_ms',
        'gt_point_count', 'pred_point_count', 'value_mae', 'category_accuracy', 'title_match',
    ]
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for r in results:
            writer.writerow({
                'shapes_path': r.shapes_path,
                'success': r.success,
                'error_message': r.error_message or '',
                'processing_time_ms': f"{r.processing_time_ms:.1f}",
                'gt_point_count': r.gt_point_count,
                'pred_point_count': r.pred_point_count,
                'value_mae': f"{r.value_mae:.4f}" if r.value_mae is not None else '',
                'category_accuracy': f"{r.category_accuracy:.1f}" if r.category_accuracy is not None else '',
                'title_match': r.title_match,
            })
    print(f"\nResults exported to: {output_path}")


def main():
    parser = argparse.ArgumentParser(
        description='Benchmark vectorchart extraction against ground truth'
    )
    parser.add_argument('--annotations', type=Path, default=Path('data/annotations/charts.json'),
                        help='Path to annotations JSON file')
    parser.add_argument('--data-dir', type=Path, default=Path('.'),
                        help='Base directory for shape stream paths')
    parser.add_argument('--limit', type=int, default=None,
                        help='Limit number of charts to process')
    parser.add_argument('--output', type=Path, default=None,
                        help='Output CSV file for detailed results')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print verbose output')
    args = parser.parse_args()

    if not args.annotations.exists():
        print(f"Error: Annotations file not found: {args.annotations}")
        sys.exit(1)

    results, summary = run_benchmark(args.annotations, args.data_dir, args.limit, args.verbose)
    print_summary(summary)
    if args.output:
        export_results_csv(results, args.output)


if __name__ == '__main__':
    main()
