"""Tests for merging, deduplication and ordering of unified catalogs."""

from datetime import datetime, timezone

import pytest

from adapters.dell import DellAdapter
from adapters.hp import HpAdapter
from errors import ThresholdNotMet
from models import DriverPack, OsImage
from unify import (
    build_sources,
    content_key,
    dedupe,
    dedupe_by_id,
    merge,
    partition,
    sort_records,
    unify,
    unify_images,
)
from writers import to_json

NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _pack(manufacturer="Dell", id="1", name=None, pack_type="Win", release_date=None, **kwargs):
    return DriverPack(
        id=id,
        package_id=id,
        manufacturer=manufacturer,
        name=name,
        download_url=f"https://example.com/{manufacturer}/{id}.exe",
        pack_type=pack_type,
        release_date=release_date,
        **kwargs,
    )


def test_end_to_end_dell_and_hp(dell_manifest, hp_catalog):
    records = merge(HpAdapter().adapt(hp_catalog), DellAdapter().adapt(dell_manifest))
    catalog = unify(records, "Win", now=NOW)

    assert catalog.total_items == 3
    assert catalog.sources["Dell"].item_count == 2
    assert catalog.sources["HP"].item_count == 1
    assert [p.manufacturer for p in catalog.items] == ["Dell", "Dell", "HP"]
    dell_names = [p.name for p in catalog.items[:2]]
    assert dell_names == sorted(dell_names)


def test_unify_is_deterministic(dell_manifest, hp_catalog):
    first = unify(
        merge(DellAdapter().adapt(dell_manifest), HpAdapter().adapt(hp_catalog)),
        "Win",
        now=NOW,
    )
    second = unify(
        merge(HpAdapter().adapt(hp_catalog), DellAdapter().adapt(dell_manifest)),
        "Win",
        now=NOW,
    )
    assert to_json(first) == to_json(second)


def test_partition_splits_by_type():
    parts = partition([_pack(id="a"), _pack(id="b", pack_type="WinPE"), _pack(id="c")])
    assert [p.id for p in parts["Win"]] == ["a", "c"]
    assert [p.id for p in parts["WinPE"]] == ["b"]


def test_unify_only_keeps_requested_category():
    catalog = unify([_pack(id="a"), _pack(id="b", pack_type="WinPE")], "WinPE", now=NOW)
    assert [p.id for p in catalog.items] == ["b"]
    assert catalog.category == "WinPE"


def test_dedupe_by_id_is_scoped_to_manufacturer():
    records = [
        _pack(id="1", name="first"),
        _pack(id="1", name="second"),
        _pack(manufacturer="HP", id="1"),
    ]
    result = dedupe_by_id(records)
    assert [(p.manufacturer, p.name) for p in result] == [("Dell", "first"), ("HP", None)]


def test_sort_records_by_manufacturer_then_name():
    records = [
        _pack(manufacturer="Lenovo", id="l1", name="a"),
        _pack(manufacturer="Dell", id="d2", name="zeta"),
        _pack(manufacturer="Dell", id="d1", name="Alpha"),
        _pack(manufacturer="HP", id="h1", name=None),
    ]
    assert [p.id for p in sort_records(records)] == ["d1", "d2", "h1", "l1"]


def test_build_sources_uses_latest_release_date():
    sources = build_sources(
        [
            _pack(id="1", release_date="2023-01-01"),
            _pack(id="2", release_date="2024-06-30"),
            _pack(manufacturer="HP", id="3"),
        ],
        NOW,
    )
    assert sources["Dell"].last_updated == datetime(2024, 6, 30, tzinfo=timezone.utc)
    assert sources["HP"].last_updated == NOW
    assert sources["Dell"].catalog_url.startswith("https://downloads.dell.com/")
    assert list(sources) == ["Dell", "HP"]


def test_unify_threshold():
    with pytest.raises(ThresholdNotMet) as excinfo:
        unify([_pack(id="1")], "Win", min_items=2, now=NOW)
    assert excinfo.value.count == 1
    assert excinfo.value.minimum == 2


def test_unify_rejects_unknown_category():
    with pytest.raises(ValueError):
        unify([], "Linux", now=NOW)


def test_content_key_prefers_strongest_hash():
    strong = OsImage(file_name="a.esd", download_url="https://x/a.esd", sha1="S1", sha256="AB")
    sha1_only = OsImage(file_name="a.esd", download_url="https://x/a.esd", sha1="S1")
    bare = OsImage(file_name="a.esd", download_url="https://x/A.esd")

    assert content_key(strong) == "sha256:ab"
    assert content_key(sha1_only) == "sha1:s1"
    assert content_key(bare) == "url:https://x/a.esd|a.esd"
    assert content_key(_pack(hash_sha256="FF")) == "sha256:ff"


def test_dedupe_keeps_first_claim():
    items = ["a1", "b1", "a2"]
    assert dedupe(items, key=lambda s: s[0]) == ["a1", "b1"]


def test_unify_images_dedupes_and_sorts():
    images = [
        OsImage(file_name="22631_b.esd", download_url="https://x/b", sha1="2", build="22631", os_name="Windows 11"),
        OsImage(file_name="19045_a.esd", download_url="https://x/a", sha1="1", build="19045", os_name="Windows 10"),
        OsImage(file_name="19045_a_copy.esd", download_url="https://y/a", sha1="1", build="19045", os_name="Windows 10"),
    ]
    result = unify_images(images)
    assert [image.file_name for image in result] == ["19045_a.esd", "22631_b.esd"]
