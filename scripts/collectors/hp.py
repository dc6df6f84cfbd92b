"""HP driver pack collector (HPClientDriverPackCatalog + platformList)."""

from adapters.hp import HpAdapter, HpCatalog, HpPlatform, HpProductMapping, HpSoftPaq
from collectors.base import (
    BaseCollector,
    child_text,
    children,
    descendants,
    extract_cab,
    parse_xml,
)
from errors import MalformedInput, SourceUnavailable


def parse_driver_pack_catalog(content: bytes) -> tuple[list[HpSoftPaq], list[HpProductMapping]]:
    """Parse HPClientDriverPackCatalog.xml into SoftPaq and mapping rows.

    Raises:
        MalformedInput: The SoftPaq or product mapping lists are missing.
    """
    root = parse_xml(content, "hp")
    softpaq_lists = descendants(root, "SoftPaqList")
    mapping_lists = descendants(root, "ProductOSDriverPackList")
    if not softpaq_lists or not mapping_lists:
        raise MalformedInput("hp", "SoftPaqList or ProductOSDriverPackList missing")

    softpaqs = [
        HpSoftPaq(
            id=child_text(node, "Id"),
            name=child_text(node, "Name"),
            version=child_text(node, "Version"),
            category=child_text(node, "Category"),
            date_released=child_text(node, "DateReleased"),
            url=child_text(node, "Url"),
            size=child_text(node, "Size"),
            md5=child_text(node, "MD5"),
            sha256=child_text(node, "SHA256"),
        )
        for node in children(softpaq_lists[0], "SoftPaq")
    ]
    mappings = [
        HpProductMapping(
            softpaq_id=child_text(node, "SoftPaqId"),
            system_id=child_text(node, "SystemId"),
            system_name=child_text(node, "SystemName"),
            os_name=child_text(node, "OSName"),
        )
        for node in children(mapping_lists[0], "ProductOSDriverPack")
    ]
    return softpaqs, mappings


def parse_platform_list(content: bytes) -> list[HpPlatform]:
    """Parse platformList.xml into supported release lists per system id."""
    root = parse_xml(content, "hp")
    platforms = []
    for platform in descendants(root, "Platform"):
        win11: list[str] = []
        win10: list[str] = []
        for os_node in children(platform, "OS"):
            release = child_text(os_node, "OSReleaseIdFileName") or child_text(
                os_node, "OSReleaseId"
            )
            if not release:
                continue
            release = release.upper()
            target = win11 if (child_text(os_node, "IsWindows11") or "").lower() == "true" else win10
            if release not in target:
                target.append(release)

        for system_id in (child_text(platform, "SystemID") or "").split(","):
            if system_id.strip():
                platforms.append(
                    HpPlatform(
                        system_id=system_id.strip(),
                        windows11_releases=",".join(win11) or None,
                        windows10_releases=",".join(win10) or None,
                    )
                )
    return platforms


class HpCollector(BaseCollector):
    """Collect driver packs from HP's client driver pack catalog."""

    source_name = "hp"
    CATALOG_URL = (
        "https://hpia.hpcloud.hp.com/downloads/driverpackcatalog/"
        "HPClientDriverPackCatalog.cab"
    )
    CATALOG_MEMBER = "HPClientDriverPackCatalog.xml"
    PLATFORM_LIST_URL = "https://hpia.hpcloud.hp.com/ref/platformList.cab"
    PLATFORM_LIST_MEMBER = "platformList.xml"

    def create_adapter(self) -> HpAdapter:
        return HpAdapter()

    def fetch(self) -> HpCatalog:
        content = self.download(self.CATALOG_URL)
        xml_bytes = extract_cab(content, self.CATALOG_MEMBER, self.source_name)
        softpaqs, mappings = parse_driver_pack_catalog(xml_bytes)

        # The platform list only refines release ids; carry on without it.
        platforms: list[HpPlatform] = []
        try:
            content = self.download(self.PLATFORM_LIST_URL)
            platform_xml = extract_cab(content, self.PLATFORM_LIST_MEMBER, self.source_name)
            platforms = parse_platform_list(platform_xml)
        except (SourceUnavailable, MalformedInput) as e:
            self.errors.append(f"Platform list unavailable: {e}")

        return HpCatalog(
            softpaqs=tuple(softpaqs),
            mappings=tuple(mappings),
            platforms=tuple(platforms),
        )
