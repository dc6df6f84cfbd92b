"""Base collector class and HTTP/CAB utilities."""

import json
import shutil
import subprocess
import sys
import tempfile
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from adapters.base import BaseAdapter
from errors import MalformedInput, SourceUnavailable
from models import DriverPack, VendorCatalog
from writers import atomic_write, to_json

USER_AGENT = "driverpack-catalogs/1.0"


def get_session(retries: int = 3) -> requests.Session:
    """Create a requests session with retry logic."""
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=0.5,
        status_forcelist=[429, 500, 502, 503, 504],
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers["User-Agent"] = USER_AGENT
    return session


def find_cab_tool() -> Optional[list[str]]:
    """Command prefix for the CAB extractor available on this machine."""
    if sys.platform == "win32":
        expand = shutil.which("expand")
        return [expand] if expand else None
    cabextract = shutil.which("cabextract")
    return [cabextract, "-q"] if cabextract else None


def extract_cab(content: bytes, member: str, source: str) -> bytes:
    """Extract ``member`` from CAB ``content`` using an external tool.

    Raises:
        SourceUnavailable: No extractor is installed, it failed, or the
            member is not in the archive.
    """
    tool = find_cab_tool()
    if not tool:
        raise SourceUnavailable(source, "no CAB extractor (cabextract/expand) on PATH")

    with tempfile.TemporaryDirectory() as tmp:
        tmp_dir = Path(tmp)
        cab_path = tmp_dir / "catalog.cab"
        cab_path.write_bytes(content)
        out_dir = tmp_dir / "out"
        out_dir.mkdir()

        if sys.platform == "win32":
            command = tool + [str(cab_path), f"-F:{member}", str(out_dir)]
        else:
            command = tool + ["-d", str(out_dir), "-F", member, str(cab_path)]

        try:
            subprocess.run(command, check=True, capture_output=True, timeout=120)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode(errors="replace")[:200]
            raise SourceUnavailable(source, f"CAB extraction failed: {stderr}") from e
        except subprocess.TimeoutExpired as e:
            raise SourceUnavailable(source, "CAB extraction timed out") from e

        matches = [p for p in out_dir.rglob("*") if p.name.lower() == member.lower()]
        if not matches:
            raise SourceUnavailable(source, f"{member} not found in CAB")
        return matches[0].read_bytes()


def parse_xml(content: bytes, source: str) -> ET.Element:
    """Parse XML bytes, mapping syntax errors to MalformedInput."""
    try:
        return ET.fromstring(content)
    except ET.ParseError as e:
        raise MalformedInput(source, f"invalid XML: {e}") from e


def local_name(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def child_text(element: Optional[ET.Element], name: str) -> Optional[str]:
    """Text of the first direct child named ``name``, ignoring namespaces."""
    if element is None:
        return None
    for child in element:
        if local_name(child.tag) == name:
            return (child.text or "").strip() or None
    return None


def children(element: Optional[ET.Element], name: str) -> list[ET.Element]:
    if element is None:
        return []
    return [child for child in element if local_name(child.tag) == name]


def descendants(element: ET.Element, name: str) -> list[ET.Element]:
    return [node for node in element.iter() if local_name(node.tag) == name]


class BaseCollector(ABC):
    """Fetch one vendor catalog and adapt it into canonical records."""

    source_name: str = "unknown"
    timeout: int = 60
    output_dir: Path = Path(__file__).parent.parent / "data" / "raw"

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or get_session()
        self.errors: list[str] = []
        self.adapter = self.create_adapter()

    @abstractmethod
    def create_adapter(self) -> BaseAdapter:
        pass

    @abstractmethod
    def fetch(self) -> Any:
        """Download and parse the vendor catalog into raw records.

        Raises:
            SourceUnavailable: The catalog could not be retrieved.
            MalformedInput: The catalog is missing required structure.
        """
        pass

    def download(self, url: str, timeout: Optional[int] = None) -> bytes:
        """GET ``url`` and return the body, raising SourceUnavailable."""
        print(f"Fetching {self.source_name} catalog from {url}...")
        try:
            response = self.session.get(url, timeout=timeout or self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SourceUnavailable(self.source_name, f"failed to fetch {url}: {e}") from e
        return response.content

    def collect(self) -> list[DriverPack]:
        """Fetch and adapt the vendor catalog.

        Unavailable or malformed catalogs are recorded in ``errors`` and yield
        no records.

        Returns:
            List of DriverPack objects.
        """
        try:
            raw = self.fetch()
        except (SourceUnavailable, MalformedInput) as e:
            self.errors.append(f"Skipped {self.source_name}: {e}")
            return []

        packs = self.adapter.adapt(raw)
        if self.adapter.rejected:
            print(f"  {self.source_name}: {self.adapter.rejected} records without a usable download URL")
        print(f"Collected {len(packs)} driver packs from {self.source_name}")
        return packs

    def save(self, packs: list[DriverPack], output_dir: Optional[Path] = None) -> Path:
        """Save collected packs to ``<output_dir>/<source>.json``.

        Args:
            packs: List of packs to save.
            output_dir: Overrides the class-level output directory.

        Returns:
            Path to the saved file.
        """
        output_path = (output_dir or self.output_dir) / f"{self.source_name}.json"
        result = VendorCatalog(
            manufacturer=self.adapter.manufacturer,
            catalog_url=self.adapter.catalog_url,
            collected_at=datetime.now(timezone.utc),
            total_count=len(packs),
            items=packs,
            errors=self.errors,
        )
        return atomic_write(output_path, to_json(result))

    def run(self, output_dir: Optional[Path] = None) -> tuple[list[DriverPack], Optional[Path]]:
        """Run collection and save results.

        Nothing is written when the source was skipped, so the previous run's
        output stays in place.

        Returns:
            Tuple of (packs, output_path or None).
        """
        packs = self.collect()
        if not packs and self.errors:
            return packs, None
        return packs, self.save(packs, output_dir)


def load_vendor_catalog(path: Path) -> Optional[VendorCatalog]:
    """Load a per-vendor output file written by ``BaseCollector.save``."""
    if not path.exists():
        print(f"Warning: {path} not found")
        return None
    with open(path, encoding="utf-8") as f:
        return VendorCatalog.model_validate(json.load(f))
