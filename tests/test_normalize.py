"""Tests for the field normalizers."""

import pytest

from normalize import (
    content_id,
    dell_os_name,
    detect_architecture,
    file_name_from_url,
    hp_os_name,
    infer_format,
    lenovo_os_name,
    microsoft_os_name,
    normalize_architecture,
    normalize_url,
    parse_size,
    resolve_download_url,
    to_iso_date,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("x64", "x64"),
        ("AMD64", "x64"),
        ("64-bit", "x64"),
        ("64", "x64"),
        ("x86", "x86"),
        ("86", "x86"),
        ("32-bit", "x86"),
        ("32", "x86"),
        ("IA32", "x86"),
        ("arm64", "arm64"),
        ("aarch64", "arm64"),
        (" x64 ", "x64"),
    ],
)
def test_normalize_architecture_synonyms(value, expected):
    assert normalize_architecture(value) == expected


@pytest.mark.parametrize("value", ["", None, "bogus"])
def test_normalize_architecture_falls_back_to_default(value):
    assert normalize_architecture(value) == "x64"
    assert normalize_architecture(value, default="x86") == "x86"


def test_normalize_architecture_is_closed():
    inputs = ["x64", "amd64", "64-bit", "64", "x86", "86", "32-bit", "32",
              "ia32", "arm64", "aarch64", "", None, "bogus"]
    for value in inputs:
        assert normalize_architecture(value) in {"x86", "x64", "arm64"}


@pytest.mark.parametrize(
    "text,expected",
    [
        ("SurfacePro9_Win11_22621_arm64.msi", "arm64"),
        ("Windows 11 64-bit, 22H2", "x64"),
        ("driver_x86.msi", "x86"),
        ("SurfaceLaptop5_Win11_22621_23.073.5419.0.msi", "x64"),
        (None, "x64"),
    ],
)
def test_detect_architecture(text, expected):
    assert detect_architecture(text) == expected


@pytest.mark.parametrize(
    "code,expected",
    [
        ("Windows10", "Windows 10"),
        ("Windows11", "Windows 11"),
        ("Windows8.1", "Windows 8.1"),
        ("W10P4", "Windows 10"),
        ("WinPE10.0", "WinPE"),
        ("Vista", "Windows Vista"),
        ("", "Windows"),
        (None, "Windows"),
    ],
)
def test_dell_os_name(code, expected):
    assert dell_os_name(code) == expected


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Windows 11 64-bit, 22H2", "Windows 11"),
        ("Windows 10 64-bit, 21H2", "Windows 10"),
        ("WinPE 10", "WinPE"),
        ("Server 2022", "Windows Server 2022"),
    ],
)
def test_hp_os_name(name, expected):
    assert hp_os_name(name) == expected


@pytest.mark.parametrize(
    "code,expected",
    [
        ("win10", "Windows 10"),
        ("WIN11", "Windows 11"),
        ("10", "Windows 10"),
        ("11", "Windows 11"),
        ("win7", "Windows win7"),
        ("", "Windows"),
    ],
)
def test_lenovo_os_name(code, expected):
    assert lenovo_os_name(code) == expected


def test_microsoft_os_name_has_no_fallback():
    assert microsoft_os_name("SurfaceBook3_Win10_19041.msi") == "Windows 10"
    assert microsoft_os_name("Windows 8.1 Pro") == "Windows 8.1"
    assert microsoft_os_name("SurfaceHub2.msi") is None


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2023-05-16", "2023-05-16"),
        ("20230516", "2023-05-16"),
        ("2023-05-16T09:13:17", "2023-05-16"),
        ("2023-05-16T21:30:00-05:00", "2023-05-17"),
        ("2023-05-16T01:00:00Z", "2023-05-16"),
        ("5/16/2023", "2023-05-16"),
        ("5/16/2023 3:04:05 PM", "2023-05-16"),
        ("not a date", None),
        ("", None),
        (None, None),
    ],
)
def test_to_iso_date(value, expected):
    assert to_iso_date(value) == expected


@pytest.mark.parametrize("value", ["2023516", "2023111"])
def test_compact_date_requires_eight_digits(value):
    assert to_iso_date(value) is None


@pytest.mark.parametrize(
    "value,expected",
    [
        ("16 May 2023", "2023-05-16"),
        ("May 16, 2023", "2023-05-16"),
        ("Sept 1, 2023", "2023-09-01"),
        ("Tue, 16 May 2023 09:13:17 GMT", "2023-05-16"),
        ("31 Feb 2023", None),
        ("16 Mai 2023", None),
    ],
)
def test_month_names_are_english_regardless_of_locale(value, expected):
    assert to_iso_date(value) == expected


def test_windows_81_compact_token():
    assert microsoft_os_name("SurfacePro3_Win81_150407.zip") == "Windows 8.1"
    assert microsoft_os_name("Windows 8.1 Pro") == "Windows 8.1"
    assert microsoft_os_name("Surface_Win8_x64.zip") == "Windows 8"
    assert dell_os_name("Windows81") == "Windows 8.1"


def test_normalize_url_upgrades_http_only():
    assert normalize_url("http://a/b") == "https://a/b"
    assert normalize_url("HTTP://a/B?x=1") == "https://a/B?x=1"
    assert normalize_url("https://a/b") == "https://a/b"
    assert normalize_url("//a/b") == "//a/b"
    assert normalize_url(None) is None


@pytest.mark.parametrize("url", ["http://a/b", "https://a/b", "//a/b", "ftp://x", "", "http://"])
def test_normalize_url_is_idempotent(url):
    assert normalize_url(normalize_url(url)) == normalize_url(url)


def test_resolve_download_url():
    assert resolve_download_url("http://x/y.cab") == "https://x/y.cab"
    assert resolve_download_url("//x/y.cab") == "https://x/y.cab"
    assert (
        resolve_download_url("FOLDER01/pack.cab", "downloads.dell.com")
        == "https://downloads.dell.com/FOLDER01/pack.cab"
    )
    assert (
        resolve_download_url("/FOLDER01/pack.cab", "http://downloads.dell.com/")
        == "https://downloads.dell.com/FOLDER01/pack.cab"
    )
    assert resolve_download_url("FOLDER01/pack.cab") is None
    assert resolve_download_url("") is None
    assert resolve_download_url(None) is None
    assert resolve_download_url("ftp://x/y.cab") is None


def test_infer_format():
    assert infer_format("CAB", "x.exe", None) == "cab"
    assert infer_format("iso", "pack.zip", None) == "zip"
    assert infer_format(None, None, "https://x/a/pack.MSI") == "msi"
    assert infer_format(None, "readme.txt", "https://x/a/download") == "exe"


def test_file_name_from_url():
    assert file_name_from_url("https://x/a/My%20Pack.cab") == "My Pack.cab"
    assert file_name_from_url("https://x/") is None


def test_parse_size():
    assert parse_size("1,024") == 1024
    assert parse_size(42) == 42
    assert parse_size("-1") is None
    assert parse_size("big") is None


def test_content_id_is_stable():
    first = content_id("Lenovo", "https://x/y.exe")
    assert first == content_id("Lenovo", "https://x/y.exe")
    assert first != content_id("HP", "https://x/y.exe")
    assert len(first) == 16
