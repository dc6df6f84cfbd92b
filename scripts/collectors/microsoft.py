"""Microsoft Surface driver pack collector.

Scrapes the Surface driver/firmware page for Download Center links, then
reads the file list embedded in each Download Center details page.
"""

import json
import re
from typing import Optional
from urllib.parse import parse_qs, urljoin, urlsplit

import requests
from bs4 import BeautifulSoup

from adapters.microsoft import MicrosoftAdapter, SurfaceDownload
from collectors.base import BaseCollector
from errors import MalformedInput, SourceUnavailable

DETAILS_JSON = re.compile(r"window\.__DLCDetails__\s*=\s*(\{.*\})\s*;?\s*$", re.DOTALL)


def parse_surface_index(html: str, base_url: str) -> list[tuple[str, str]]:
    """Return ``(model name, details URL)`` pairs from the Surface index page.

    Raises:
        MalformedInput: The page has no table rows with Download Center links.
    """
    soup = BeautifulSoup(html, "html.parser")
    entries = []
    seen = set()

    for row in soup.find_all("tr"):
        cells = row.find_all("td")
        if len(cells) < 2:
            continue
        link = row.find("a", href=re.compile(r"download/details\.aspx", re.IGNORECASE))
        if not link:
            continue
        url = urljoin(base_url, link.get("href", ""))
        if url in seen:
            continue
        seen.add(url)
        model_name = " ".join(cells[0].get_text(" ").split())
        entries.append((model_name, url))

    if not entries:
        raise MalformedInput("microsoft", "no Surface download links found")
    return entries


def _download_id(url: str) -> Optional[str]:
    values = parse_qs(urlsplit(url).query).get("id")
    return values[0] if values else None


def parse_details_page(html: str, model_name: str, details_url: str) -> list[SurfaceDownload]:
    """Read the files listed on one Download Center details page."""
    soup = BeautifulSoup(html, "html.parser")
    download_id = _download_id(details_url)

    details = None
    for script in soup.find_all("script"):
        match = DETAILS_JSON.search(script.string or "")
        if match:
            try:
                details = json.loads(match.group(1))
            except json.JSONDecodeError:
                details = None
            break

    if details:
        view = details.get("dlcDetailsView", {})
        supported_os = view.get("supportedOperatingSystems")
        if isinstance(supported_os, list):
            supported_os = ", ".join(str(item) for item in supported_os)
        if not supported_os:
            supported_os = BeautifulSoup(
                view.get("systemRequirementsSection", "") or "", "html.parser"
            ).get_text(" ")
        return [
            SurfaceDownload(
                model_name=model_name,
                download_id=download_id,
                file_name=item.get("name"),
                url=item.get("url"),
                size=str(item["size"]) if item.get("size") is not None else None,
                version=item.get("version") or view.get("version"),
                date_published=item.get("datePublished") or view.get("datePublished"),
                supported_os=supported_os or None,
            )
            for item in details.get("downloadFile", [])
        ]

    # Older pages link the files directly.
    return [
        SurfaceDownload(
            model_name=model_name,
            download_id=download_id,
            url=urljoin(details_url, link["href"]),
        )
        for link in soup.find_all("a", href=re.compile(r"\.(msi|zip)$", re.IGNORECASE))
    ]


class MicrosoftCollector(BaseCollector):
    """Collect Surface driver and firmware packs."""

    source_name = "microsoft"
    INDEX_URL = (
        "https://learn.microsoft.com/en-us/surface/"
        "manage-surface-driver-and-firmware-updates"
    )

    def create_adapter(self) -> MicrosoftAdapter:
        return MicrosoftAdapter()

    def fetch(self) -> list[SurfaceDownload]:
        html = self.download(self.INDEX_URL).decode("utf-8", errors="replace")
        entries = parse_surface_index(html, self.INDEX_URL)
        print(f"Found {len(entries)} Surface download pages, fetching details...")

        downloads = []
        for model_name, details_url in entries:
            try:
                page = self.session.get(details_url, timeout=self.timeout)
                page.raise_for_status()
            except requests.RequestException as e:
                self.errors.append(f"Failed to fetch {details_url}: {e}")
                continue
            downloads.extend(parse_details_page(page.text, model_name, details_url))

        if not downloads:
            raise SourceUnavailable(self.source_name, "no Surface downloads retrieved")
        return downloads
