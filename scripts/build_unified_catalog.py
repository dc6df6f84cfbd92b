#!/usr/bin/env python3
"""Merge per-vendor driver pack outputs into unified Win and WinPE catalogs.

Reads the files written by collect_all.py and writes
DriverPacks.<category>.{json,xml,md} for each category.
"""

import argparse
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Add scripts directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from collectors.base import load_vendor_catalog
from errors import ThresholdNotMet
from models import DriverPack, UnifiedCatalog
from unify import CATEGORIES, merge, unify
from writers import write_unified_catalog

VENDOR_FILES = ("dell", "hp", "lenovo", "microsoft")


def load_vendor_outputs(data_dir: Path) -> tuple[list[DriverPack], list[str]]:
    """Load and merge every vendor output found in ``data_dir``.

    Returns:
        Tuple of (merged packs, skip reasons).
    """
    groups = []
    skipped = []
    for name in VENDOR_FILES:
        catalog = load_vendor_catalog(data_dir / f"{name}.json")
        if catalog is None:
            skipped.append(f"{name}: no collected output in {data_dir}")
            continue
        print(f"Loaded {catalog.total_count} driver packs from {name}")
        skipped.extend(f"{name}: {error}" for error in catalog.errors)
        groups.append(catalog.items)
    return merge(*groups), skipped


def build_catalogs(
    packs: list[DriverPack],
    categories: list[str],
    min_items: int = 0,
    now: Optional[datetime] = None,
) -> list[UnifiedCatalog]:
    """Unify every requested category, raising before anything is written."""
    now = now or datetime.now(timezone.utc)
    return [unify(packs, category, min_items=min_items, now=now) for category in categories]


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Build unified driver pack catalogs")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=Path(__file__).parent / "data" / "raw",
        help="Directory containing per-vendor JSON files",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(__file__).parent / "data" / "unified",
        help="Directory for the unified catalogs",
    )
    parser.add_argument(
        "--category",
        choices=list(CATEGORIES) + ["all"],
        default="all",
        help="Catalog category to build (default: all)",
    )
    parser.add_argument(
        "--min-items",
        type=int,
        default=0,
        help="Fail without writing if any catalog has fewer items",
    )
    args = parser.parse_args(argv)

    started = time.monotonic()
    categories = list(CATEGORIES) if args.category == "all" else [args.category]

    print(f"\nLoading vendor outputs from {args.data_dir}...")
    packs, skipped = load_vendor_outputs(args.data_dir)

    try:
        catalogs = build_catalogs(packs, categories, args.min_items)
    except ThresholdNotMet as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    duration = time.monotonic() - started
    for catalog in catalogs:
        paths = write_unified_catalog(catalog, args.output_dir, duration, skipped)
        print(f"{catalog.category}: {catalog.total_items} items -> {paths['json']}")

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    for catalog in catalogs:
        print(f"{catalog.category}:")
        for source in catalog.sources.values():
            print(f"  {source.manufacturer:<10} {source.item_count:5} items")
    for reason in skipped:
        print(f"  skipped - {reason}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
