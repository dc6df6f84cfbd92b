#!/usr/bin/env python3
"""Collect driver packs and OS images from all configured vendor catalogs.

Usage:
    python collect_all.py                           # Run all collectors
    python collect_all.py --sources dell hp
    python collect_all.py --min-items 500           # Fail if fewer packs
    python collect_all.py --list                    # List available collectors
"""

import argparse
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

# Add scripts directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from collectors.base import BaseCollector
from collectors.dell import DellCollector
from collectors.hp import HpCollector
from collectors.lenovo import LenovoCollector
from collectors.microsoft import MicrosoftCollector
from collectors.windows import WindowsEsdCollector
from errors import ThresholdNotMet
from unify import check_threshold


COLLECTORS = {
    "dell": DellCollector,
    "hp": HpCollector,
    "lenovo": LenovoCollector,
    "microsoft": MicrosoftCollector,
    "windows": WindowsEsdCollector,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Collect driver pack catalogs from vendor sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s                              # Run all collectors
    %(prog)s --sources dell lenovo        # Run specific collectors
    %(prog)s --skip windows               # Skip the ESD catalog
    %(prog)s --output-dir /tmp/raw        # Write vendor files elsewhere
        """,
    )
    parser.add_argument(
        "--sources",
        nargs="+",
        choices=list(COLLECTORS.keys()) + ["all"],
        default=["all"],
        help="Sources to collect from (default: all)",
    )
    parser.add_argument(
        "--skip",
        nargs="+",
        choices=list(COLLECTORS.keys()),
        default=[],
        help="Sources to skip",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=BaseCollector.output_dir,
        help="Directory for per-vendor JSON files (default: data/raw)",
    )
    parser.add_argument(
        "--min-items",
        type=int,
        default=0,
        help="Fail without writing if fewer items are collected in total",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available collectors and exit",
    )
    return parser


def collect_sources(sources: list[str], collectors: dict = COLLECTORS) -> dict[str, tuple]:
    """Run collectors in parallel.

    Returns:
        Mapping of source name to (collector, items), in ``sources`` order.
    """
    results = {}
    with ThreadPoolExecutor(max_workers=len(sources)) as executor:
        futures = {}
        for name in sources:
            collector = collectors[name]()
            futures[executor.submit(collector.collect)] = (name, collector)

        for future in as_completed(futures):
            name, collector = futures[future]
            try:
                items = future.result()
            except Exception as e:
                collector.errors.append(f"{name} collector crashed: {e}")
                items = []
            results[name] = (collector, items)
            status = "OK" if items else "SKIPPED"
            print(f"  {name}: {len(items)} items [{status}]")

    return {name: results[name] for name in sources}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.list:
        print("Available collectors:")
        for name in COLLECTORS:
            print(f"  - {name}")
        return 0

    # Determine which collectors to run
    if "all" in args.sources:
        sources_to_run = list(COLLECTORS.keys())
    else:
        sources_to_run = args.sources

    # Remove skipped sources
    sources_to_run = [s for s in sources_to_run if s not in args.skip]

    if not sources_to_run:
        print("No sources selected to run")
        return 1

    print(f"Running collectors: {', '.join(sources_to_run)}\n")
    results = collect_sources(sources_to_run)

    total = sum(len(items) for _, items in results.values())
    try:
        check_threshold("collect_all", total, args.min_items)
    except ThresholdNotMet as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    outputs = {}
    for name, (collector, items) in results.items():
        if items or not collector.errors:
            outputs[name] = collector.save(items, args.output_dir)

    # Print summary
    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    for name, (collector, items) in results.items():
        status = "OK" if name in outputs else "SKIPPED"
        print(f"  {name}: {len(items)} items [{status}]")
        for error in collector.errors:
            print(f"    - {error}")

    print(f"\nTotal: {total} items collected")
    return 0


if __name__ == "__main__":
    sys.exit(main())
