"""Merge per-vendor driver packs into deterministic cross-vendor catalogs."""

from collections import defaultdict
from datetime import datetime, time, timezone
from typing import Callable, Hashable, Iterable, Optional, TypeVar

from adapters import DellAdapter, HpAdapter, LenovoAdapter, MicrosoftAdapter
from errors import ThresholdNotMet
from models import CatalogSource, DriverPack, OsImage, UnifiedCatalog

T = TypeVar("T")

CATEGORIES = ("Win", "WinPE")

CATALOG_URLS = {
    adapter.manufacturer: adapter.catalog_url
    for adapter in (DellAdapter, HpAdapter, LenovoAdapter, MicrosoftAdapter)
}


def merge(*groups: Iterable[DriverPack]) -> list[DriverPack]:
    """Concatenate adapter outputs in the order given."""
    merged: list[DriverPack] = []
    for group in groups:
        merged.extend(group)
    return merged


def partition(records: Iterable[DriverPack]) -> dict[str, list[DriverPack]]:
    """Split records by type into ``Win`` and ``WinPE`` lists."""
    parts: dict[str, list[DriverPack]] = {category: [] for category in CATEGORIES}
    for record in records:
        parts[record.pack_type].append(record)
    return parts


def dedupe(items: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    """Keep the first item for each key; later duplicates are dropped."""
    seen = set()
    result = []
    for item in items:
        item_key = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        result.append(item)
    return result


def dedupe_by_id(records: Iterable[DriverPack]) -> list[DriverPack]:
    return dedupe(records, lambda record: (record.manufacturer, record.id))


def content_key(item: OsImage | DriverPack) -> str:
    """Identity of a downloadable file: sha256, then sha1, then url+name."""
    sha256 = getattr(item, "sha256", None) or getattr(item, "hash_sha256", None)
    if sha256:
        return f"sha256:{sha256.lower()}"
    sha1 = getattr(item, "sha1", None)
    if sha1:
        return f"sha1:{sha1.lower()}"
    return f"url:{item.download_url.lower()}|{(item.file_name or '').lower()}"


def sort_key(record: DriverPack) -> tuple:
    return (
        record.manufacturer,
        (record.name or "").casefold(),
        record.id,
    )


def sort_records(records: Iterable[DriverPack]) -> list[DriverPack]:
    """Order by manufacturer, then name, then id."""
    return sorted(records, key=sort_key)


def build_sources(
    records: Iterable[DriverPack], run_time: datetime
) -> dict[str, CatalogSource]:
    """One ``CatalogSource`` per manufacturer that has records.

    ``last_updated`` is the newest release date among the manufacturer's
    records, or ``run_time`` when none of them carries a date.
    """
    by_manufacturer: dict[str, list[DriverPack]] = defaultdict(list)
    for record in records:
        by_manufacturer[record.manufacturer].append(record)

    sources = {}
    for manufacturer in sorted(by_manufacturer):
        items = by_manufacturer[manufacturer]
        dates = [item.release_date for item in items if item.release_date]
        if dates:
            last_updated = datetime.combine(max(dates), time(), tzinfo=timezone.utc)
        else:
            last_updated = run_time
        sources[manufacturer] = CatalogSource(
            manufacturer=manufacturer,
            catalog_url=CATALOG_URLS.get(manufacturer, ""),
            last_updated=last_updated,
            item_count=len(items),
        )
    return sources


def check_threshold(label: str, count: int, minimum: int) -> None:
    if minimum and count < minimum:
        raise ThresholdNotMet(label, count, minimum)


def unify(
    records: Iterable[DriverPack],
    category: str,
    min_items: int = 0,
    now: Optional[datetime] = None,
) -> UnifiedCatalog:
    """Build the unified catalog for one category.

    Args:
        records: Canonical records from every adapter, in any mix of
            categories.
        category: ``Win`` or ``WinPE``.
        min_items: Raise ThresholdNotMet when fewer items remain.
        now: Run timestamp; defaults to the current UTC time.

    Returns:
        UnifiedCatalog with deduplicated, sorted items and per-manufacturer
        sources.
    """
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category: {category}")
    run_time = now or datetime.now(timezone.utc)

    items = sort_records(dedupe_by_id(partition(records)[category]))
    check_threshold(f"DriverPacks.{category}", len(items), min_items)

    return UnifiedCatalog(
        generated_at_utc=run_time,
        category=category,
        total_items=len(items),
        sources=build_sources(items, run_time),
        items=items,
    )


def os_sort_key(image: OsImage) -> tuple:
    return (
        image.os_name,
        int(image.build or 0),
        image.architecture,
        image.language_code or "",
        image.edition or "",
        image.file_name,
    )


def unify_images(images: Iterable[OsImage]) -> list[OsImage]:
    """Deduplicate ESD images by content key and sort them."""
    return sorted(dedupe(images, content_key), key=os_sort_key)
