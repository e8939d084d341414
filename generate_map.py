#!/usr/bin/env python3
"""
PawTrack - Generate Report Map
Fetches every stray report and saves an interactive map of one category.
"""
import argparse
import os
import sys
from datetime import datetime

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from pawtrack.app.services import build_services  # noqa: E402
from pawtrack.core.constants import STATUS_LABELS  # noqa: E402
from pawtrack.core.logging import setup_logging  # noqa: E402
from pawtrack.visualization.map_generator import save_report_map  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Save a map of stray reports")
    parser.add_argument("--category", choices=["community", "rescuer"], default="community")
    parser.add_argument(
        "--output",
        default=os.path.join(os.path.dirname(os.path.abspath(__file__)), "pawtrack_reports.html"),
    )
    args = parser.parse_args()

    setup_logging(level="WARNING")

    print("=" * 60)
    print("PawTrack - Generating Report Map")
    print("=" * 60)

    services = build_services()
    home = services.home

    print("\nFetching reports...")
    result = home.mount()
    home.unmount()

    if not result.succeeded:
        print(f"ERROR: {result.error.message}")
        sys.exit(1)

    snapshot = result.snapshot
    reports = snapshot.for_category(args.category)

    print(f"\nTotal reports: {len(snapshot.all_reports)}")
    print(f"{args.category.title()} reports: {len(reports)}")

    print("\nStatus:")
    for status, label in STATUS_LABELS.items():
        print(f"  - {label + ':':<10} {snapshot.status_counts[status]}")

    if not reports:
        print(f"\nNo {args.category} reports to map.")
        return

    print("\nGenerating interactive map...")
    output_path = save_report_map(
        list(reports),
        output_path=args.output,
        title=f"PawTrack - {args.category.title()} Reports ({datetime.now().strftime('%Y-%m-%d %H:%M')})",
    )

    print(f"\nMap saved to: {output_path}")
    print("=" * 60)


if __name__ == "__main__":
    main()
