"""Shared pytest fixtures."""

import pytest

from adapters.dell import DellManifest, DellModel, DellOsEntry, DellPackage
from adapters.hp import HpCatalog, HpProductMapping, HpSoftPaq


@pytest.fixture
def dell_manifest() -> DellManifest:
    """One Dell package declaring Windows 10 and Windows 11 x64."""
    return DellManifest(
        base_location="downloads.dell.com",
        packages=(
            DellPackage(
                release_id="R123",
                name="Latitude 5420 Windows 10/11 Driver Pack",
                version="A05",
                path="FOLDER09/5420-win10-win11-A05.cab",
                format="cab",
                pack_type="win",
                size="1048576",
                hash_md5="ABC123",
                date_time="2023-05-16T09:13:17-05:00",
                models=(DellModel(name="Latitude 5420", system_id="0A1B"),),
                operating_systems=(
                    DellOsEntry(os_code="Windows10", os_arch="x64"),
                    DellOsEntry(os_code="Windows11", os_arch="x64"),
                ),
            ),
        ),
    )


@pytest.fixture
def hp_catalog() -> HpCatalog:
    """One HP SoftPaq with its product mapping row."""
    return HpCatalog(
        softpaqs=(
            HpSoftPaq(
                id="sp999",
                name="HP EliteBook 840 G8 Windows 11 Driver Pack",
                version="1.00 A 1",
                category="Manageability - Driver Pack",
                date_released="2024-10-01",
                url="http://ftp.hp.com/pub/softpaq/sp999/sp999.exe",
                size="734003200",
                md5="d41d8cd98f00b204e9800998ecf8427e",
                sha256="e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
            ),
        ),
        mappings=(
            HpProductMapping(
                softpaq_id="sp999",
                system_id="880D",
                system_name="HP EliteBook 840 G8 Notebook PC",
                os_name="Windows 11 24H2",
            ),
        ),
    )
