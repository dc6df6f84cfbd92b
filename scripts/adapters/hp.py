"""HP driver pack adapter (HPClientDriverPackCatalog + platformList)."""

from collections import defaultdict
from dataclasses import dataclass
from typing import Optional

from adapters.base import BaseAdapter, unique_models
from models import DriverPack, ModelInfo
from normalize import (
    clean,
    detect_architecture,
    file_name_from_url,
    hp_os_name,
    infer_format,
    os_major,
    parse_size,
    resolve_download_url,
    to_iso_date,
)
from releases import preferred_release, release_from_text, winpe_release


@dataclass(frozen=True)
class HpSoftPaq:
    """One ``SoftPaqList/SoftPaq`` row."""

    id: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    category: Optional[str] = None
    date_released: Optional[str] = None
    url: Optional[str] = None
    size: Optional[str] = None
    md5: Optional[str] = None
    sha256: Optional[str] = None


@dataclass(frozen=True)
class HpProductMapping:
    """One ``ProductOSDriverPackList/ProductOSDriverPack`` row."""

    softpaq_id: Optional[str] = None
    system_id: Optional[str] = None
    system_name: Optional[str] = None
    os_name: Optional[str] = None


@dataclass(frozen=True)
class HpPlatform:
    """Supported releases per platform, from ``platformList.xml``.

    The release lists are comma-separated, e.g. ``"22H2,23H2"``.
    """

    system_id: Optional[str] = None
    windows11_releases: Optional[str] = None
    windows10_releases: Optional[str] = None


@dataclass(frozen=True)
class HpCatalog:
    softpaqs: tuple[HpSoftPaq, ...] = ()
    mappings: tuple[HpProductMapping, ...] = ()
    platforms: tuple[HpPlatform, ...] = ()


def is_winpe(softpaq: HpSoftPaq) -> bool:
    text = f"{softpaq.name or ''} {softpaq.category or ''}".lower()
    return "winpe" in text.replace(" ", "")


class HpAdapter(BaseAdapter):
    """Join SoftPaqs with their product mappings by SoftPaq id."""

    manufacturer = "HP"
    catalog_url = (
        "https://hpia.hpcloud.hp.com/downloads/driverpackcatalog/"
        "HPClientDriverPackCatalog.cab"
    )

    def adapt(self, raw: HpCatalog) -> list[DriverPack]:
        mappings_by_softpaq: dict[str, list[HpProductMapping]] = defaultdict(list)
        for mapping in raw.mappings:
            key = (mapping.softpaq_id or "").strip().lower()
            if key:
                mappings_by_softpaq[key].append(mapping)

        platforms: dict[str, HpPlatform] = {}
        for platform in raw.platforms:
            key = (platform.system_id or "").strip().upper()
            if key and key not in platforms:
                platforms[key] = platform

        packs = []
        for softpaq in raw.softpaqs:
            softpaq_id = clean(softpaq.id)
            url = resolve_download_url(softpaq.url)
            if not softpaq_id or not url:
                self.rejected += 1
                continue

            mappings = mappings_by_softpaq.get(softpaq_id.lower(), [])
            pack = self._adapt_softpaq(softpaq, softpaq_id, url, mappings, platforms)
            if pack:
                packs.append(pack)
        return packs

    def _adapt_softpaq(
        self,
        softpaq: HpSoftPaq,
        softpaq_id: str,
        url: str,
        mappings: list[HpProductMapping],
        platforms: dict[str, HpPlatform],
    ) -> Optional[DriverPack]:
        raw_os = next((clean(m.os_name) for m in mappings if clean(m.os_name)), None)
        file_name = file_name_from_url(url)
        models = unique_models(
            ModelInfo(name=clean(m.system_name), system_id=clean(m.system_id))
            for m in mappings
        )

        if is_winpe(softpaq):
            pack_type = "WinPE"
            os_name = "WinPE"
            release = winpe_release(softpaq.name)
        else:
            pack_type = "Win"
            os_name = hp_os_name(raw_os)
            release = release_from_text(raw_os) or self._platform_release(
                os_major(os_name), mappings, platforms
            )

        return self.build(
            id=softpaq_id,
            package_id=softpaq_id,
            name=clean(softpaq.name),
            version=clean(softpaq.version),
            file_name=file_name,
            download_url=url,
            size_bytes=parse_size(softpaq.size),
            format=infer_format(None, file_name, url),
            pack_type=pack_type,
            release_date=to_iso_date(softpaq.date_released),
            models=models,
            os_name=os_name,
            os_release_id=release,
            os_architecture=detect_architecture(
                raw_os or softpaq.name, default="x64"
            ),
            hash_md5=clean(softpaq.md5),
            hash_sha256=clean(softpaq.sha256),
        )

    @staticmethod
    def _platform_release(
        major: Optional[str],
        mappings: list[HpProductMapping],
        platforms: dict[str, HpPlatform],
    ) -> Optional[str]:
        """Resolve a release from the platform list of the mapped systems."""
        win11 = win10 = None
        for mapping in mappings:
            platform = platforms.get((mapping.system_id or "").strip().upper())
            if not platform:
                continue
            win11 = win11 or clean(platform.windows11_releases)
            win10 = win10 or clean(platform.windows10_releases)

        if major == "11" and win11:
            return preferred_release(win11)
        if major == "10" and win10:
            return preferred_release(win10)
        if win11:
            return preferred_release(win11)
        if win10:
            return preferred_release(win10)
        return None
