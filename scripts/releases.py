"""Windows release-id inference from build numbers and free text."""

import re
from typing import Optional, Union

# Scanned top to bottom; the first threshold the build meets wins.
# Windows 10 19041-19045 are servicing releases of one code base.
BUILD_RELEASES: tuple[tuple[int, str], ...] = (
    (26200, "25H2"),
    (26100, "24H2"),
    (22631, "23H2"),
    (22621, "22H2"),
    (22000, "21H2"),
    (19045, "22H2"),
    (19044, "21H2"),
    (19043, "21H1"),
    (19042, "20H2"),
    (19041, "2004"),
    (18363, "1909"),
    (18362, "1903"),
    (17763, "1809"),
    (17134, "1803"),
    (16299, "1709"),
    (15063, "1703"),
    (14393, "1607"),
    (10586, "1511"),
    (10240, "1507"),
)

WINDOWS_11_FIRST_BUILD = 22000

RELEASE_TOKEN = re.compile(
    r"(25H2|24H2|23H2|22H2|21H2|21H1|20H2|2004|1909|1903|1809|1803|1709|1703|1607|1511|1507)",
    re.IGNORECASE,
)

_HALF_YEAR = re.compile(r"^(\d{2})H([12])$", re.IGNORECASE)
_CALENDAR = re.compile(r"^(\d{2})(\d{2})$")
_BUILD_TOKEN = re.compile(r"(?<!\d)(\d{5})(?!\d)")

_WINPE_COMBINED = re.compile(r"10\s*/\s*11")
_WINPE_CODE = re.compile(r"winpe(\d+)x", re.IGNORECASE)
_WINPE_VERSION = re.compile(r"winpe\s*(\d+)(?:\.\d+)?", re.IGNORECASE)
_WINPE_FALLBACK = re.compile(r"(?<![\d.])(11|10|5|4|3)(?![\d.])")


def parse_build(value: Union[int, str, None]) -> Optional[int]:
    """Build major from ``22631``, ``"22631"`` or ``"22631.2861"``."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    match = re.match(r"\s*(\d+)", str(value))
    return int(match.group(1)) if match else None


def release_from_build(build: Union[int, str, None]) -> Optional[str]:
    """Public release id for a Windows build major, e.g. 22631 -> "23H2"."""
    major = parse_build(build)
    if major is None:
        return None
    for threshold, release in BUILD_RELEASES:
        if major >= threshold:
            return release
    return None


def release_from_text(text: Optional[str]) -> Optional[str]:
    """First literal release-id token found in ``text``."""
    if not text:
        return None
    match = RELEASE_TOKEN.search(text)
    return match.group(1).upper() if match else None


def build_from_text(text: Optional[str]) -> Optional[int]:
    """First standalone five-digit token that is a plausible Windows build."""
    if not text:
        return None
    for match in _BUILD_TOKEN.finditer(text):
        build = int(match.group(1))
        if build >= BUILD_RELEASES[-1][0]:
            return build
    return None


def os_name_from_build(build: Optional[int]) -> Optional[str]:
    if build is None:
        return None
    return "Windows 11" if build >= WINDOWS_11_FIRST_BUILD else "Windows 10"


def _release_score(candidate: str) -> int:
    half = _HALF_YEAR.match(candidate)
    if half:
        return int(half.group(1)) * 10 + int(half.group(2))
    calendar = _CALENDAR.match(candidate)
    if calendar:
        return int(calendar.group(1))
    return -1


def preferred_release(candidates: Optional[str]) -> Optional[str]:
    """Pick the newest release from a comma-separated candidate list.

    ``23H2`` scores 232 and calendar-style ``1909`` scores its year, 19.
    Unranked tokens score -1. Ties, and lists where nothing is ranked, go to
    the first candidate.
    """
    if not candidates:
        return None
    tokens = [token.strip() for token in candidates.split(",") if token.strip()]
    if not tokens:
        return None
    best = tokens[0]
    best_score = _release_score(best)
    for token in tokens[1:]:
        score = _release_score(token)
        if score > best_score:
            best, best_score = token, score
    return best


def winpe_release(text: Optional[str]) -> Optional[str]:
    """WinPE generation named in a driver pack family string."""
    if not text:
        return None
    if _WINPE_COMBINED.search(text):
        return "10/11"
    match = _WINPE_CODE.search(text)
    if match:
        return match.group(1)
    match = _WINPE_VERSION.search(text)
    if match:
        return str(int(match.group(1)))
    match = _WINPE_FALLBACK.search(text)
    if match:
        return match.group(1)
    return None
