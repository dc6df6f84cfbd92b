"""Lenovo driver pack collector (catalogv2.xml)."""

from adapters.lenovo import LenovoAdapter, LenovoDriverPack
from collectors.base import BaseCollector, children, descendants, local_name, parse_xml
from errors import MalformedInput

PACK_ELEMENTS = ("SCCM", "WinPE")


def parse_catalog(content: bytes) -> list[LenovoDriverPack]:
    """Flatten catalogv2.xml into one record per SCCM/WinPE element.

    Raises:
        MalformedInput: The document is not a ModelList.
    """
    root = parse_xml(content, "lenovo")
    if local_name(root.tag) != "ModelList":
        raise MalformedInput("lenovo", f"unexpected root element {local_name(root.tag)}")

    records = []
    for model in children(root, "Model"):
        machine_types = tuple(
            (node.text or "").strip()
            for node in descendants(model, "Type")
            if (node.text or "").strip()
        )
        for element in model:
            kind = local_name(element.tag)
            if kind not in PACK_ELEMENTS:
                continue
            records.append(
                LenovoDriverPack(
                    model_name=model.get("name"),
                    machine_types=machine_types,
                    kind=kind,
                    os=element.get("os"),
                    version=element.get("version"),
                    date=element.get("date"),
                    crc=element.get("crc"),
                    url=(element.text or "").strip() or None,
                )
            )
    return records


class LenovoCollector(BaseCollector):
    """Collect driver packs from Lenovo's catalogv2.xml."""

    source_name = "lenovo"
    CATALOG_URL = "https://download.lenovo.com/cdrt/td/catalogv2.xml"

    def create_adapter(self) -> LenovoAdapter:
        return LenovoAdapter()

    def fetch(self) -> list[LenovoDriverPack]:
        return parse_catalog(self.download(self.CATALOG_URL))
