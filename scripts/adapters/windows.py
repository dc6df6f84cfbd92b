"""Windows ESD image adapter (products.xml ``File`` entries)."""

from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from models import OsImage
from normalize import (
    clean,
    file_name_from_url,
    normalize_architecture,
    parse_size,
    resolve_download_url,
)
from releases import build_from_text, os_name_from_build, release_from_build


@dataclass(frozen=True)
class EsdFile:
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    size: Optional[str] = None
    sha1: Optional[str] = None
    sha256: Optional[str] = None
    language_code: Optional[str] = None
    language: Optional[str] = None
    edition: Optional[str] = None
    architecture: Optional[str] = None


class WindowsEsdAdapter:
    """Map ESD entries to ``OsImage`` records.

    Build, release and family all come from the ESD file name, which starts
    with the full build string (``22631.2861.231204-0538.23H2_NI_...``).
    """

    catalog_url = "https://go.microsoft.com/fwlink/?LinkId=2156292"

    def __init__(self):
        self.rejected = 0

    def adapt(self, raw: list[EsdFile]) -> list[OsImage]:
        images = []
        for entry in raw:
            url = resolve_download_url(entry.file_path)
            file_name = clean(entry.file_name) or file_name_from_url(url)
            if not url or not file_name:
                self.rejected += 1
                continue

            build = build_from_text(file_name)
            try:
                images.append(
                    OsImage(
                        file_name=file_name,
                        download_url=url,
                        size_bytes=parse_size(entry.size),
                        sha1=_hash(entry.sha1),
                        sha256=_hash(entry.sha256),
                        language_code=clean(entry.language_code),
                        language=clean(entry.language),
                        edition=clean(entry.edition),
                        architecture=normalize_architecture(entry.architecture),
                        build=str(build) if build else None,
                        os_name=os_name_from_build(build) or "Windows",
                        os_release_id=release_from_build(build),
                    )
                )
            except ValidationError:
                self.rejected += 1
        return images


def _hash(value: Optional[str]) -> Optional[str]:
    value = clean(value)
    return value.lower() if value else None
