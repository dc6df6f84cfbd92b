"""Lenovo driver pack adapter (catalogv2.xml, flattened)."""

import re
from dataclasses import dataclass
from typing import Optional

from adapters.base import BaseAdapter
from models import DriverPack, ModelInfo
from normalize import (
    clean,
    content_id,
    detect_architecture,
    file_name_from_url,
    infer_format,
    lenovo_os_name,
    resolve_download_url,
    to_iso_date,
)
from releases import release_from_text, winpe_release

# Lenovo file names carry the OS and bitness together, e.g. "_w1164_".
_OS_BITNESS = re.compile(r"w1[01](32|64)(?!\d)", re.IGNORECASE)


@dataclass(frozen=True)
class LenovoDriverPack:
    """One ``SCCM`` or ``WinPE`` element with its parent model's fields."""

    model_name: Optional[str] = None
    machine_types: tuple[str, ...] = ()
    kind: Optional[str] = None
    os: Optional[str] = None
    version: Optional[str] = None
    date: Optional[str] = None
    crc: Optional[str] = None
    url: Optional[str] = None


def lenovo_architecture(file_name: Optional[str]) -> str:
    if file_name:
        match = _OS_BITNESS.search(file_name)
        if match:
            return "x64" if match.group(1) == "64" else "x86"
    return detect_architecture(file_name, default="x64")


class LenovoAdapter(BaseAdapter):
    manufacturer = "Lenovo"
    catalog_url = "https://download.lenovo.com/cdrt/td/catalogv2.xml"

    def adapt(self, raw: list[LenovoDriverPack]) -> list[DriverPack]:
        packs = []
        for record in raw:
            url = resolve_download_url(record.url)
            if not url:
                self.rejected += 1
                continue

            file_name = file_name_from_url(url)
            stem = file_name.rsplit(".", 1)[0] if file_name else None
            models = [
                ModelInfo(name=clean(record.model_name), system_id=machine_type)
                for machine_type in record.machine_types
            ] or (
                [ModelInfo(name=clean(record.model_name))]
                if clean(record.model_name)
                else []
            )

            if (record.kind or "").strip().lower() == "winpe":
                pack_type = "WinPE"
                os_name = "WinPE"
                release = winpe_release(record.version) or winpe_release(record.os)
            else:
                pack_type = "Win"
                os_name = lenovo_os_name(record.os)
                release = release_from_text(record.version) or release_from_text(
                    file_name
                )

            pack_id = stem or content_id(self.manufacturer, url)
            pack = self.build(
                id=pack_id,
                package_id=pack_id,
                name=clean(record.model_name),
                version=clean(record.version),
                file_name=file_name,
                download_url=url,
                format=infer_format(None, file_name, url),
                pack_type=pack_type,
                release_date=to_iso_date(record.date),
                models=models,
                os_name=os_name,
                os_release_id=release,
                os_architecture=lenovo_architecture(file_name),
                hash_crc=clean(record.crc),
            )
            if pack:
                packs.append(pack)
        return packs
