"""Microsoft Surface driver pack adapter.

Surface downloads carry no structured OS metadata, so the OS family and
release are inferred from the file name and the page's "supported operating
systems" text.
"""

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
    microsoft_os_name,
    parse_size,
    resolve_download_url,
    to_iso_date,
)
from releases import (
    build_from_text,
    os_name_from_build,
    release_from_build,
    release_from_text,
)


@dataclass(frozen=True)
class SurfaceDownload:
    """One file listed on a Surface download details page."""

    model_name: Optional[str] = None
    download_id: Optional[str] = None
    file_name: Optional[str] = None
    url: Optional[str] = None
    size: Optional[str] = None
    version: Optional[str] = None
    date_published: Optional[str] = None
    supported_os: Optional[str] = None


@dataclass(frozen=True)
class SurfaceOs:
    name: str
    release_id: Optional[str]
    build: Optional[int]


def infer_surface_os(file_name: Optional[str], supported_os: Optional[str]) -> SurfaceOs:
    """Resolve OS family, release id and build from Surface metadata."""
    os_name = microsoft_os_name(file_name) or microsoft_os_name(supported_os)

    build = build_from_text(file_name)
    release = release_from_build(build) if build else None
    if not release:
        release = release_from_text(file_name)

    if not os_name and build:
        os_name = os_name_from_build(build)

    return SurfaceOs(name=os_name or "Windows", release_id=release, build=build)


class MicrosoftAdapter(BaseAdapter):
    manufacturer = "Microsoft"
    catalog_url = (
        "https://learn.microsoft.com/en-us/surface/"
        "manage-surface-driver-and-firmware-updates"
    )

    def adapt(self, raw: list[SurfaceDownload]) -> list[DriverPack]:
        packs = []
        for download in raw:
            url = resolve_download_url(download.url)
            if not url:
                self.rejected += 1
                continue

            file_name = clean(download.file_name) or file_name_from_url(url)
            surface_os = infer_surface_os(file_name, download.supported_os)
            stem = file_name.rsplit(".", 1)[0] if file_name else None
            pack_id = stem or content_id(self.manufacturer, url)
            model_name = clean(download.model_name)

            pack = self.build(
                id=pack_id,
                package_id=clean(download.download_id) or pack_id,
                name=model_name,
                version=clean(download.version),
                file_name=file_name,
                download_url=url,
                size_bytes=parse_size(download.size),
                format=infer_format(None, file_name, url),
                pack_type="Win",
                release_date=to_iso_date(download.date_published),
                models=[ModelInfo(name=model_name)] if model_name else [],
                os_name=surface_os.name,
                os_release_id=surface_os.release_id,
                os_build=str(surface_os.build) if surface_os.build else None,
                os_architecture=detect_architecture(file_name, default="x64"),
            )
            if pack:
                packs.append(pack)
        return packs
