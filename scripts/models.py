"""Unified data models for driver pack and OS image catalogs."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Manufacturer = Literal["Dell", "HP", "Lenovo", "Microsoft"]
Architecture = Literal["x86", "x64", "arm64"]
PackFormat = Literal["cab", "exe", "msi", "zip"]
PackType = Literal["Win", "WinPE"]

SCHEMA_VERSION = "1.0"


class CatalogModel(BaseModel):
    """Base for catalog models: camelCase on the wire, immutable once built."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ModelInfo(CatalogModel):
    """A hardware model targeted by a driver pack."""

    name: Optional[str] = Field(default=None, description="Model display name")
    system_id: Optional[str] = Field(
        default=None, description="Vendor system/machine type identifier"
    )


class DriverPack(CatalogModel):
    """Canonical driver pack record shared by every manufacturer."""

    id: str = Field(description="Unique within manufacturer and category")
    package_id: str = Field(description="Vendor's native package identifier")
    manufacturer: Manufacturer
    name: Optional[str] = None
    version: Optional[str] = None
    file_name: Optional[str] = None
    download_url: str = Field(description="Absolute download URL")
    size_bytes: Optional[int] = Field(default=None, ge=0)
    format: PackFormat = "exe"
    pack_type: PackType = Field(default="Win", alias="type")
    release_date: Optional[date] = None
    models: list[ModelInfo] = Field(default_factory=list)

    os_name: str = "Windows"
    os_release_id: Optional[str] = None
    os_build: Optional[str] = None
    os_architecture: Architecture = "x64"

    hash_md5: Optional[str] = Field(default=None, alias="hashMD5")
    hash_sha256: Optional[str] = Field(default=None, alias="hashSHA256")
    hash_crc: Optional[str] = Field(default=None, alias="hashCRC")


class CatalogSource(CatalogModel):
    """Per-manufacturer metadata for a unified catalog."""

    manufacturer: Manufacturer
    catalog_url: str
    last_updated: datetime = Field(
        description="Most recent release date among the manufacturer's items"
    )
    item_count: int = Field(ge=0)


class UnifiedCatalog(CatalogModel):
    """Cross-vendor catalog for one category, ready for serialization."""

    schema_version: str = SCHEMA_VERSION
    generated_at_utc: datetime
    category: PackType
    total_items: int
    sources: dict[str, CatalogSource] = Field(default_factory=dict)
    items: list[DriverPack] = Field(default_factory=list)


class VendorCatalog(CatalogModel):
    """Per-vendor output of a collection run."""

    manufacturer: Manufacturer
    catalog_url: str
    collected_at: datetime
    total_count: int
    items: list[DriverPack] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class OsImage(CatalogModel):
    """A Windows ESD image published in Microsoft's products catalog."""

    file_name: str
    download_url: str
    size_bytes: Optional[int] = Field(default=None, ge=0)
    sha1: Optional[str] = None
    sha256: Optional[str] = None
    language_code: Optional[str] = None
    language: Optional[str] = None
    edition: Optional[str] = None
    architecture: Architecture = "x64"
    build: Optional[str] = None
    os_name: str = "Windows"
    os_release_id: Optional[str] = None


class OsCatalog(CatalogModel):
    """Deduplicated Windows ESD catalog."""

    schema_version: str = SCHEMA_VERSION
    generated_at_utc: datetime
    catalog_url: str
    total_items: int
    items: list[OsImage] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
