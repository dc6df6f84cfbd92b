"""Serialize catalogs to JSON, XML and a Markdown summary."""

import hashlib
import json
import os
import tempfile
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel
from tabulate import tabulate

from models import DriverPack, UnifiedCatalog


def atomic_write(path: Path, content: str) -> Path:
    """Write ``content`` to ``path`` through a temp file and rename.

    A reader never sees a half-written file, and a failure leaves any
    previous version of ``path`` in place.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def to_json(model: BaseModel) -> str:
    """Render a catalog model as indented camelCase JSON."""
    data = model.model_dump(mode="json", by_alias=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return str(value)


def _sub(parent: ET.Element, tag: str, value) -> None:
    text = _text(value)
    if text is not None:
        ET.SubElement(parent, tag).text = text


def _driver_pack_element(pack: DriverPack) -> ET.Element:
    element = ET.Element("DriverPack")
    _sub(element, "Id", pack.id)
    _sub(element, "PackageId", pack.package_id)
    _sub(element, "Manufacturer", pack.manufacturer)
    _sub(element, "Name", pack.name)
    _sub(element, "Version", pack.version)
    _sub(element, "FileName", pack.file_name)
    _sub(element, "DownloadUrl", pack.download_url)
    _sub(element, "SizeBytes", pack.size_bytes)
    _sub(element, "Format", pack.format)
    _sub(element, "Type", pack.pack_type)
    _sub(element, "ReleaseDate", pack.release_date)

    if pack.models:
        models = ET.SubElement(element, "Models")
        for model in pack.models:
            model_element = ET.SubElement(models, "Model")
            if model.name:
                model_element.set("name", model.name)
            if model.system_id:
                model_element.set("systemId", model.system_id)

    os_info = ET.SubElement(element, "OsInfo")
    _sub(os_info, "Name", pack.os_name)
    _sub(os_info, "ReleaseId", pack.os_release_id)
    _sub(os_info, "Build", pack.os_build)
    _sub(os_info, "Architecture", pack.os_architecture)

    if pack.hash_md5 or pack.hash_sha256 or pack.hash_crc:
        hashes = ET.SubElement(element, "Hashes")
        _sub(hashes, "MD5", pack.hash_md5)
        _sub(hashes, "SHA256", pack.hash_sha256)
        _sub(hashes, "CRC", pack.hash_crc)

    return element


def to_xml(catalog: UnifiedCatalog) -> str:
    """Render a unified catalog as an XML document."""
    root = ET.Element(
        "DriverPackCatalog",
        {
            "schemaVersion": catalog.schema_version,
            "generatedAtUtc": _text(catalog.generated_at_utc),
            "totalItems": str(catalog.total_items),
            "category": catalog.category,
        },
    )

    sources = ET.SubElement(root, "Sources")
    for source in catalog.sources.values():
        if not source.item_count:
            continue
        ET.SubElement(
            sources,
            "Source",
            {
                "manufacturer": source.manufacturer,
                "catalogUrl": source.catalog_url,
                "lastUpdated": _text(source.last_updated),
                "itemCount": str(source.item_count),
            },
        )

    packs = ET.SubElement(root, "DriverPacks")
    for pack in catalog.items:
        packs.append(_driver_pack_element(pack))

    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="utf-8"?>\n{body}\n'


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def to_markdown(
    title: str,
    status: str,
    item_count: int,
    duration_seconds: float,
    output_hash: Optional[str] = None,
    sources: Optional[list[tuple]] = None,
    errors: Optional[list[str]] = None,
) -> str:
    """Render the human-readable run summary."""
    lines = [
        f"# {title}",
        "",
        f"- **Status:** {status}",
        f"- **Items:** {item_count}",
        f"- **Duration:** {duration_seconds:.1f}s",
    ]
    if output_hash:
        lines.append(f"- **SHA256:** `{output_hash}`")

    if sources:
        lines += [
            "",
            "## Sources",
            "",
            tabulate(
                sources,
                headers=["Manufacturer", "Items", "Last Updated", "Catalog URL"],
                tablefmt="github",
            ),
        ]

    if errors:
        lines += ["", "## Errors", ""]
        lines += [f"- {error}" for error in errors]

    return "\n".join(lines) + "\n"


def write_unified_catalog(
    catalog: UnifiedCatalog,
    output_dir: Path,
    duration_seconds: float,
    errors: Optional[list[str]] = None,
) -> dict[str, Path]:
    """Write the JSON, XML and Markdown files for one unified catalog.

    Returns:
        Mapping of format name ("json", "xml", "md") to the written path.
    """
    stem = f"DriverPacks.{catalog.category}"
    json_text = to_json(catalog)
    xml_text = to_xml(catalog)
    source_rows = [
        (
            source.manufacturer,
            source.item_count,
            _text(source.last_updated),
            source.catalog_url,
        )
        for source in catalog.sources.values()
    ]
    summary = to_markdown(
        title=f"Driver Packs ({catalog.category})",
        status="Success",
        item_count=catalog.total_items,
        duration_seconds=duration_seconds,
        output_hash=content_hash(json_text),
        sources=source_rows,
        errors=errors,
    )

    return {
        "json": atomic_write(output_dir / f"{stem}.json", json_text),
        "xml": atomic_write(output_dir / f"{stem}.xml", xml_text),
        "md": atomic_write(output_dir / f"{stem}.md", summary),
    }
