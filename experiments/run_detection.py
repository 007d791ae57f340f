#!/usr/bin/env python3
"""
Batch Anomaly Detection.

Reads a climate CSV, runs two-stage detection and writes the ranked
results to a CSV file.

Usage:
    uv run python experiments/run_detection.py data.csv
    uv run python experiments/run_detection.py data.csv --threshold 3.0 --radius 0.75
    uv run python experiments/run_detection.py data.csv --no-directional -o out.csv
"""

import sys
import os
import argparse
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from analysis.summary import results_summary
from data.export import export_results_csv
from data.ingestion import IngestionError, load_observations_csv
from detection.errors import DetectionError
from detection.pipeline import run_detection
from detection.settings import DetectionConfig
from config import (
    DEFAULT_MAGNITUDE_THRESHOLD,
    DEFAULT_SPATIAL_RADIUS_DEG,
    DEFAULT_MINIMUM_NEIGHBORS,
    DEFAULT_NEIGHBOR_INDEX,
    NEIGHBOR_INDEX_STRATEGIES,
    EXPORT_FILENAME,
    LOG_FORMAT,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vector-aware precipitation anomaly detection")
    parser.add_argument("input", help="Climate CSV (Lat,Lon,Year,Month,Date,WS10M,WD10M,QV2M,Prec)")
    parser.add_argument("-o", "--output", default=EXPORT_FILENAME, help="Output CSV path")
    parser.add_argument("--threshold", type=float, default=DEFAULT_MAGNITUDE_THRESHOLD,
                        help="Z-score screening threshold")
    parser.add_argument("--radius", type=float, default=DEFAULT_SPATIAL_RADIUS_DEG,
                        help="Neighbor radius (degrees)")
    parser.add_argument("--min-neighbors", type=int, default=DEFAULT_MINIMUM_NEIGHBORS,
                        help="Neighbors required for the directional check")
    parser.add_argument("--no-directional", action="store_true",
                        help="Disable the directional consistency check")
    parser.add_argument("--index", choices=NEIGHBOR_INDEX_STRATEGIES,
                        default=DEFAULT_NEIGHBOR_INDEX, help="Spatial index strategy")
    parser.add_argument("--workers", type=int, default=None,
                        help="Threads for the per-candidate phase")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = DetectionConfig(
            magnitude_threshold=args.threshold,
            spatial_radius=args.radius,
            minimum_neighbors=args.min_neighbors,
            enable_directional_consistency=not args.no_directional,
            neighbor_index=args.index,
            max_workers=args.workers,
        )
        observations = load_observations_csv(args.input)
        report = run_detection(observations, config)
    except (IngestionError, DetectionError, ValueError, FileNotFoundError) as exc:
        raise SystemExit(f"error: {exc}")

    export_results_csv(report.results, args.output)

    stats = report.statistics
    print(f"Observations: {len(observations)}")
    print(f"Precipitation mean={stats.mean:.3f} std={stats.std:.3f} median={stats.median:.3f}")
    print(f"Candidates:   {report.candidate_count}")
    summary = results_summary(report.results)
    if summary:
        print(f"True:         {summary['true_count']} ({summary['true_percentage']:.1f}%)")
        print(f"Filtered:     {summary['false_count']}")
        print(f"Avg conf:     {summary['avg_confidence']:.3f}")
    print(f"Results written to {args.output}")


if __name__ == "__main__":
    main()
