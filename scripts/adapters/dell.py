"""Dell driver pack adapter (DriverPackCatalog.xml schema)."""

from dataclasses import dataclass, field
from typing import Optional

from adapters.base import BaseAdapter, unique_models
from models import DriverPack, ModelInfo
from normalize import (
    clean,
    content_id,
    dell_os_name,
    file_name_from_url,
    infer_format,
    normalize_architecture,
    parse_size,
    resolve_download_url,
    to_iso_date,
)
from releases import release_from_text


@dataclass(frozen=True)
class DellOsEntry:
    """One ``SupportedOperatingSystems/OperatingSystem`` element."""

    os_code: Optional[str] = None
    os_arch: Optional[str] = None
    display: Optional[str] = None


@dataclass(frozen=True)
class DellModel:
    name: Optional[str] = None
    system_id: Optional[str] = None


@dataclass(frozen=True)
class DellPackage:
    """One ``DriverPackage`` element; every field may be absent."""

    release_id: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    path: Optional[str] = None
    format: Optional[str] = None
    pack_type: Optional[str] = None
    size: Optional[str] = None
    hash_md5: Optional[str] = None
    date_time: Optional[str] = None
    models: tuple[DellModel, ...] = ()
    operating_systems: tuple[DellOsEntry, ...] = ()


@dataclass(frozen=True)
class DellManifest:
    """The parsed manifest: ``baseLocation`` plus its packages."""

    base_location: Optional[str] = None
    packages: tuple[DellPackage, ...] = field(default_factory=tuple)


class DellAdapter(BaseAdapter):
    """Fan Dell packages out into one canonical record per supported OS."""

    manufacturer = "Dell"
    catalog_url = "https://downloads.dell.com/catalog/DriverPackCatalog.cab"

    def adapt(self, raw: DellManifest) -> list[DriverPack]:
        packs: list[DriverPack] = []
        emitted: set[str] = set()

        for package in raw.packages:
            url = resolve_download_url(package.path, raw.base_location)
            if not url:
                self.rejected += 1
                continue

            package_id = clean(package.release_id)
            entries = package.operating_systems or (DellOsEntry(),)
            multi_os = len(entries) > 1
            file_name = file_name_from_url(url)
            models = unique_models(
                ModelInfo(name=clean(m.name), system_id=clean(m.system_id))
                for m in package.models
            )
            is_winpe_package = (package.pack_type or "").strip().lower() == "winpe"

            for entry in entries:
                arch = normalize_architecture(entry.os_arch)
                os_name = dell_os_name(entry.os_code)
                pack_type = "WinPE" if is_winpe_package or os_name == "WinPE" else "Win"
                if pack_type == "WinPE":
                    os_name = "WinPE"

                pack_id = self._pack_id(package_id, url, arch, multi_os, emitted)
                pack = self.build(
                    id=pack_id,
                    package_id=package_id or pack_id,
                    name=clean(package.name),
                    version=clean(package.version),
                    file_name=file_name,
                    download_url=url,
                    size_bytes=parse_size(package.size),
                    format=infer_format(package.format, file_name, url),
                    pack_type=pack_type,
                    release_date=to_iso_date(package.date_time),
                    models=models,
                    os_name=os_name,
                    os_release_id=release_from_text(entry.os_code),
                    os_architecture=arch,
                    hash_md5=clean(package.hash_md5),
                )
                if pack:
                    emitted.add(pack.id)
                    packs.append(pack)

        return packs

    def _pack_id(
        self,
        package_id: Optional[str],
        url: str,
        arch: str,
        multi_os: bool,
        emitted: set[str],
    ) -> str:
        base = package_id or content_id(self.manufacturer, url)
        if not multi_os:
            return base
        candidate = f"{base}|{arch}"
        sequence = 2
        while candidate in emitted:
            candidate = f"{base}|{arch}|{sequence}"
            sequence += 1
        return candidate
