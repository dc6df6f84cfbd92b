"""Dell driver pack collector (DriverPackCatalog.cab)."""

import xml.etree.ElementTree as ET
from typing import Optional

from adapters.dell import DellAdapter, DellManifest, DellModel, DellOsEntry, DellPackage
from collectors.base import (
    BaseCollector,
    child_text,
    children,
    descendants,
    extract_cab,
    local_name,
    parse_xml,
)
from errors import MalformedInput


def _display(element: Optional[ET.Element]) -> Optional[str]:
    """Text of a ``Display`` child, or of ``element`` itself."""
    if element is None:
        return None
    text = child_text(element, "Display")
    if text:
        return text
    return (element.text or "").strip() or None


def _package_name(package: ET.Element) -> Optional[str]:
    for name in children(package, "Name"):
        text = _display(name)
        if text:
            return text
    return package.get("name")


def _models(package: ET.Element) -> tuple[DellModel, ...]:
    models = []
    for brand in descendants(package, "Brand"):
        brand_name = child_text(brand, "Display")
        for model in children(brand, "Model"):
            model_name = model.get("name") or _display(model)
            full_name = " ".join(part for part in (brand_name, model_name) if part)
            models.append(
                DellModel(name=full_name or None, system_id=model.get("systemID"))
            )
    return tuple(models)


def _operating_systems(package: ET.Element) -> tuple[DellOsEntry, ...]:
    return tuple(
        DellOsEntry(
            os_code=os_element.get("osCode"),
            os_arch=os_element.get("osArch"),
            display=_display(os_element),
        )
        for os_element in descendants(package, "OperatingSystem")
    )


def parse_manifest(content: bytes) -> DellManifest:
    """Parse DriverPackCatalog.xml into a DellManifest.

    Raises:
        MalformedInput: The document is not a DriverPackManifest.
    """
    root = parse_xml(content, "dell")
    if local_name(root.tag) != "DriverPackManifest":
        raise MalformedInput("dell", f"unexpected root element {local_name(root.tag)}")

    packages = []
    for package in children(root, "DriverPackage"):
        packages.append(
            DellPackage(
                release_id=package.get("releaseID"),
                name=_package_name(package),
                version=package.get("dellVersion") or package.get("vendorVersion"),
                path=package.get("path"),
                format=package.get("format"),
                pack_type=package.get("type"),
                size=package.get("size"),
                hash_md5=package.get("hashMD5"),
                date_time=package.get("dateTime"),
                models=_models(package),
                operating_systems=_operating_systems(package),
            )
        )

    return DellManifest(base_location=root.get("baseLocation"), packages=tuple(packages))


class DellCollector(BaseCollector):
    """Collect driver packs from Dell's DriverPackCatalog."""

    source_name = "dell"
    CATALOG_URL = "https://downloads.dell.com/catalog/DriverPackCatalog.cab"
    CATALOG_MEMBER = "DriverPackCatalog.xml"

    def create_adapter(self) -> DellAdapter:
        return DellAdapter()

    def fetch(self) -> DellManifest:
        content = self.download(self.CATALOG_URL)
        xml_bytes = extract_cab(content, self.CATALOG_MEMBER, self.source_name)
        return parse_manifest(xml_bytes)
