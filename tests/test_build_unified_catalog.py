"""End-to-end tests for the unified catalog builder."""

import json
from datetime import datetime, timezone

import build_unified_catalog
from adapters.dell import DellAdapter
from adapters.hp import HpAdapter
from models import VendorCatalog
from writers import atomic_write, to_json


def _write_vendor(data_dir, name, adapter, raw, errors=()):
    packs = adapter.adapt(raw)
    catalog = VendorCatalog(
        manufacturer=adapter.manufacturer,
        catalog_url=adapter.catalog_url,
        collected_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        total_count=len(packs),
        items=packs,
        errors=list(errors),
    )
    atomic_write(data_dir / f"{name}.json", to_json(catalog))


def test_builds_win_and_winpe_catalogs(tmp_path, dell_manifest, hp_catalog):
    data_dir = tmp_path / "raw"
    out_dir = tmp_path / "unified"
    _write_vendor(data_dir, "dell", DellAdapter(), dell_manifest)
    _write_vendor(data_dir, "hp", HpAdapter(), hp_catalog)

    code = build_unified_catalog.main(
        ["--data-dir", str(data_dir), "--output-dir", str(out_dir)]
    )

    assert code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == [
        "DriverPacks.Win.json",
        "DriverPacks.Win.md",
        "DriverPacks.Win.xml",
        "DriverPacks.WinPE.json",
        "DriverPacks.WinPE.md",
        "DriverPacks.WinPE.xml",
    ]
    win = json.loads((out_dir / "DriverPacks.Win.json").read_text(encoding="utf-8"))
    assert win["totalItems"] == 3
    assert sorted(win["sources"]) == ["Dell", "HP"]
    winpe = json.loads((out_dir / "DriverPacks.WinPE.json").read_text(encoding="utf-8"))
    assert winpe["totalItems"] == 0

    summary = (out_dir / "DriverPacks.Win.md").read_text(encoding="utf-8")
    assert "lenovo: no collected output" in summary


def test_threshold_failure_writes_nothing(tmp_path, dell_manifest, capsys):
    data_dir = tmp_path / "raw"
    out_dir = tmp_path / "unified"
    _write_vendor(data_dir, "dell", DellAdapter(), dell_manifest)

    code = build_unified_catalog.main(
        [
            "--data-dir", str(data_dir),
            "--output-dir", str(out_dir),
            "--category", "Win",
            "--min-items", "10",
        ]
    )

    assert code == 1
    assert not out_dir.exists()
    assert "expected at least 10" in capsys.readouterr().err


def test_vendor_errors_are_carried_into_summary(tmp_path, hp_catalog):
    data_dir = tmp_path / "raw"
    _write_vendor(data_dir, "hp", HpAdapter(), hp_catalog, errors=["Platform list unavailable"])

    packs, skipped = build_unified_catalog.load_vendor_outputs(data_dir)

    assert len(packs) == 1
    assert "hp: Platform list unavailable" in skipped
    assert "dell: no collected output in " + str(data_dir) in skipped
