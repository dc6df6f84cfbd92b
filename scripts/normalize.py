"""Field normalizers shared by the vendor adapters.

Every function here is pure and tolerant of missing input: absent or
unrecognized values map to a default or None instead of raising.
"""

import hashlib
import re
import time
from datetime import date, datetime, timezone
from types import MappingProxyType
from typing import Optional
from urllib.parse import unquote, urlsplit

ARCHITECTURE_SYNONYMS = MappingProxyType(
    {
        "x64": "x64",
        "amd64": "x64",
        "64-bit": "x64",
        "64bit": "x64",
        "64": "x64",
        "x86_64": "x64",
        "x86-64": "x64",
        "win64": "x64",
        "x86": "x86",
        "86": "x86",
        "32-bit": "x86",
        "32bit": "x86",
        "32": "x86",
        "ia32": "x86",
        "i386": "x86",
        "i686": "x86",
        "win32": "x86",
        "arm64": "arm64",
        "aarch64": "arm64",
    }
)

FORMATS = ("cab", "exe", "msi", "zip")

_ARM64_TOKEN = re.compile(r"arm64|aarch64", re.IGNORECASE)
_X64_TOKEN = re.compile(r"x64|amd64|x86[_-]64|64[\s-]?bit", re.IGNORECASE)
_X86_TOKEN = re.compile(r"x86|ia32|i[36]86|32[\s-]?bit", re.IGNORECASE)

_WINDOWS_FAMILY = re.compile(
    r"win(?:dows)?[\s_-]*(11|10|8\.?1|8|7)(?![\d])", re.IGNORECASE
)
_DELL_SHORT_CODE = re.compile(r"^w(11|10|7)[a-z]?\d*$", re.IGNORECASE)
_LENOVO_CODE = re.compile(r"^(?:win)?(10|11)$", re.IGNORECASE)

_COMPACT_DATE = re.compile(r"\d{8}")

# Numeric formats a locale-invariant parser accepts after ISO-8601.
_INVARIANT_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M:%S",
)

# English month names, independent of LC_TIME.
_MONTHS = MappingProxyType(
    {
        name: number
        for number, names in enumerate(
            (
                ("january", "jan"),
                ("february", "feb"),
                ("march", "mar"),
                ("april", "apr"),
                ("may",),
                ("june", "jun"),
                ("july", "jul"),
                ("august", "aug"),
                ("september", "sep", "sept"),
                ("october", "oct"),
                ("november", "nov"),
                ("december", "dec"),
            ),
            start=1,
        )
        for name in names
    }
)

# "16 May 2023", "May 16, 2023" and RFC 1123 "Tue, 16 May 2023 09:13:17 GMT".
_DAY_MONTH_YEAR = re.compile(
    r"(?:[a-z]{3},\s*)?(\d{1,2})\s+([a-z]+)\.?\s+(\d{4})(?:\s+\d{1,2}:\d{2}:\d{2}(?:\s+\S+)?)?",
    re.IGNORECASE,
)
_MONTH_DAY_YEAR = re.compile(r"([a-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})", re.IGNORECASE)

# Formats of the process's LC_TIME locale, tried last. Nothing here calls
# locale.setlocale, so this is the C locale unless the host program sets one.
_LOCALE_DATE_FORMATS = ("%x", "%c", "%x %X")


def normalize_architecture(value: Optional[str], default: str = "x64") -> str:
    """Map a vendor architecture token to x86, x64 or arm64.

    Matching is exact and case-insensitive after trimming; anything
    unrecognized returns ``default``.
    """
    if not value:
        return default
    return ARCHITECTURE_SYNONYMS.get(value.strip().lower(), default)


def detect_architecture(text: Optional[str], default: str = "x64") -> str:
    """Find an architecture token inside free text such as a file name."""
    if not text:
        return default
    if _ARM64_TOKEN.search(text):
        return "arm64"
    if _X64_TOKEN.search(text):
        return "x64"
    if _X86_TOKEN.search(text):
        return "x86"
    return default


def _windows_family(text: str) -> Optional[str]:
    match = _WINDOWS_FAMILY.search(text)
    if not match:
        return None
    version = match.group(1)
    # Surface file names spell 8.1 as "Win81".
    if version == "81":
        version = "8.1"
    return f"Windows {version}"


def dell_os_name(os_code: Optional[str]) -> str:
    """Normalize a Dell ``osCode`` such as ``Windows10`` or ``W11P4``."""
    code = (os_code or "").strip()
    if not code:
        return "Windows"
    if "winpe" in code.lower():
        return "WinPE"
    family = _windows_family(code)
    if family:
        return family
    short = _DELL_SHORT_CODE.match(code)
    if short:
        return f"Windows {short.group(1)}"
    return f"Windows {code}"


def hp_os_name(os_name: Optional[str]) -> str:
    """Normalize an HP OS name such as ``Windows 11 64-bit, 22H2``."""
    text = (os_name or "").strip()
    if not text:
        return "Windows"
    if "winpe" in text.lower().replace(" ", ""):
        return "WinPE"
    family = _windows_family(text)
    if family:
        return family
    return f"Windows {text}"


def lenovo_os_name(os_code: Optional[str]) -> str:
    """Normalize a Lenovo ``os`` attribute (``win10``, ``11``, ...)."""
    code = (os_code or "").strip()
    if not code:
        return "Windows"
    match = _LENOVO_CODE.match(code)
    if match:
        return f"Windows {match.group(1)}"
    return f"Windows {code}"


def microsoft_os_name(text: Optional[str]) -> Optional[str]:
    """Return the Windows family named in ``text``, or None.

    Unlike the other vendors, Surface data has no OS field to fall back on,
    so no best-effort prefix is applied here.
    """
    if not text:
        return None
    return _windows_family(text)


def os_major(os_name: Optional[str]) -> Optional[str]:
    """Return ``"11"`` for ``"Windows 11"`` etc."""
    if not os_name:
        return None
    match = re.match(r"Windows (\S+)$", os_name)
    return match.group(1) if match else None


def _to_utc_date(parsed: datetime) -> str:
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%d")


def _named_month_date(text: str) -> Optional[str]:
    match = _DAY_MONTH_YEAR.fullmatch(text)
    if match:
        day, month_name, year = match.groups()
    else:
        match = _MONTH_DAY_YEAR.fullmatch(text)
        if not match:
            return None
        month_name, day, year = match.groups()

    month = _MONTHS.get(month_name.lower())
    if not month:
        return None
    try:
        return date(int(year), month, int(day)).isoformat()
    except ValueError:
        return None


def to_iso_date(value: Optional[str]) -> Optional[str]:
    """Normalize a vendor date string to ``yyyy-MM-dd``.

    Strategies are tried in a fixed order: exactly eight digits as
    ``yyyyMMdd``, then locale-invariant parsing (ISO-8601, a fixed format
    list and English month names), then the current locale's date formats.
    Offsets are converted to UTC.
    """
    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    if _COMPACT_DATE.fullmatch(text):
        try:
            return _to_utc_date(datetime.strptime(text, "%Y%m%d"))
        except ValueError:
            pass

    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _to_utc_date(datetime.fromisoformat(iso_text))
    except ValueError:
        pass

    for fmt in _INVARIANT_DATE_FORMATS:
        try:
            return _to_utc_date(datetime.strptime(text, fmt))
        except ValueError:
            continue

    named = _named_month_date(text)
    if named:
        return named

    for fmt in _LOCALE_DATE_FORMATS:
        try:
            parsed = time.strptime(text, fmt)
        except ValueError:
            continue
        return time.strftime("%Y-%m-%d", parsed)

    return None


def normalize_url(url: Optional[str]) -> Optional[str]:
    """Upgrade an ``http://`` URL to ``https://``; leave anything else alone."""
    if url is None:
        return None
    if url[:7].lower() == "http://":
        return "https://" + url[7:]
    return url


def resolve_download_url(
    url: Optional[str], base: Optional[str] = None
) -> Optional[str]:
    """Build an absolute https download URL, or None if that is impossible.

    ``base`` is a host or URL prefix that relative paths are joined to
    (Dell's ``baseLocation``).
    """
    if not url or not url.strip():
        return None
    url = url.strip().replace("\\", "/")
    scheme = urlsplit(url).scheme.lower()
    if scheme in ("http", "https"):
        return normalize_url(url)
    if scheme:
        return None
    if url.startswith("//"):
        return "https:" + url
    if not base or not base.strip():
        return None
    base = base.strip().rstrip("/")
    if not urlsplit(base).scheme:
        base = "https://" + base.lstrip("/")
    return normalize_url(f"{base}/{url.lstrip('/')}")


def file_name_from_url(url: Optional[str]) -> Optional[str]:
    """Last path segment of a URL, percent-decoded."""
    if not url:
        return None
    path = urlsplit(url).path
    name = unquote(path.rsplit("/", 1)[-1])
    return name or None


def _extension(value: Optional[str]) -> Optional[str]:
    if not value or "." not in value:
        return None
    ext = value.rsplit(".", 1)[-1].lower()
    return ext if ext in FORMATS else None


def infer_format(
    explicit: Optional[str] = None,
    file_name: Optional[str] = None,
    url: Optional[str] = None,
) -> str:
    """Pick the package format: explicit value, file extension, URL, or exe."""
    if explicit and explicit.strip().lower() in FORMATS:
        return explicit.strip().lower()
    ext = _extension(file_name)
    if ext:
        return ext
    if url:
        ext = _extension(urlsplit(url).path)
        if ext:
            return ext
    return "exe"


def parse_size(value) -> Optional[int]:
    """Parse a byte count; negative or non-numeric values give None."""
    if value is None:
        return None
    try:
        size = int(str(value).strip().replace(",", ""))
    except ValueError:
        return None
    return size if size >= 0 else None


def content_id(manufacturer: str, url: str) -> str:
    """Stable identifier for records without a usable vendor id."""
    digest = hashlib.sha256(f"{manufacturer}|{url}".encode("utf-8")).hexdigest()
    return digest[:16]


def clean(value: Optional[str]) -> Optional[str]:
    """Strip whitespace, mapping empty strings to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None
