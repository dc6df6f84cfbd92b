"""Windows ESD image collector (Media Creation Tool products.cab)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from adapters.windows import EsdFile, WindowsEsdAdapter
from collectors.base import (
    BaseCollector,
    child_text,
    descendants,
    extract_cab,
    parse_xml,
)
from errors import MalformedInput, SourceUnavailable
from models import OsCatalog, OsImage
from unify import unify_images
from writers import atomic_write, to_json


def parse_products(content: bytes) -> list[EsdFile]:
    """Parse products.xml ``File`` entries.

    Raises:
        MalformedInput: The document contains no ``Files`` list.
    """
    root = parse_xml(content, "windows")
    file_lists = descendants(root, "Files")
    if not file_lists:
        raise MalformedInput("windows", "no Files element in products.xml")

    entries = []
    for file_list in file_lists:
        for node in file_list:
            entries.append(
                EsdFile(
                    file_name=child_text(node, "FileName"),
                    file_path=child_text(node, "FilePath"),
                    size=child_text(node, "Size"),
                    sha1=child_text(node, "Sha1"),
                    sha256=child_text(node, "Sha256"),
                    language_code=child_text(node, "LanguageCode"),
                    language=child_text(node, "Language"),
                    edition=child_text(node, "Edition"),
                    architecture=child_text(node, "Architecture"),
                )
            )
    return entries


class WindowsEsdCollector(BaseCollector):
    """Collect Windows ESD images, deduplicated by content hash."""

    source_name = "windows"
    CATALOG_URL = "https://go.microsoft.com/fwlink/?LinkId=2156292"
    CATALOG_MEMBER = "products.xml"

    def create_adapter(self) -> WindowsEsdAdapter:
        return WindowsEsdAdapter()

    def fetch(self) -> list[EsdFile]:
        content = self.download(self.CATALOG_URL)
        xml_bytes = extract_cab(content, self.CATALOG_MEMBER, self.source_name)
        return parse_products(xml_bytes)

    def collect(self) -> list[OsImage]:
        try:
            raw = self.fetch()
        except (SourceUnavailable, MalformedInput) as e:
            self.errors.append(f"Skipped {self.source_name}: {e}")
            return []

        images = unify_images(self.adapter.adapt(raw))
        print(f"Collected {len(images)} ESD images from {self.source_name}")
        return images

    def save(self, images: list[OsImage], output_dir: Optional[Path] = None) -> Path:
        output_path = (output_dir or self.output_dir) / f"{self.source_name}.json"
        catalog = OsCatalog(
            generated_at_utc=datetime.now(timezone.utc),
            catalog_url=self.CATALOG_URL,
            total_items=len(images),
            items=images,
            errors=self.errors,
        )
        return atomic_write(output_path, to_json(catalog))
