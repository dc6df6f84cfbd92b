"""Tests for Windows release-id inference."""

import pytest

from releases import (
    build_from_text,
    os_name_from_build,
    parse_build,
    preferred_release,
    release_from_build,
    release_from_text,
    winpe_release,
)


@pytest.mark.parametrize(
    "build,expected",
    [
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
        (17763, "1809"),
        (10240, "1507"),
        (9999, None),
        (None, None),
        ("22631.2861", "23H2"),
    ],
)
def test_release_from_build(build, expected):
    assert release_from_build(build) == expected


def test_release_from_build_first_match_wins():
    # 19045 also meets the 19041 threshold further down the table.
    assert release_from_build(19045) == "22H2"
    assert release_from_build(22630) == "22H2"


def test_parse_build():
    assert parse_build("19045.3803") == 19045
    assert parse_build(" 22000") == 22000
    assert parse_build("n/a") is None


@pytest.mark.parametrize(
    "text,expected",
    [
        ("tp_x1carbon_w1164_22h2_202303.exe", "22H2"),
        ("Windows 10 x64 1909", "1909"),
        ("Windows11-23H2-then-24H2", "23H2"),
        ("Windows10", None),
        (None, None),
    ],
)
def test_release_from_text(text, expected):
    assert release_from_text(text) == expected


@pytest.mark.parametrize(
    "candidates,expected",
    [
        ("23H2,1909", "23H2"),
        ("1909,21H1", "21H1"),
        ("22H2,23H2,21H2", "23H2"),
        ("bogus,alsobogus", "bogus"),
        ("bogus,22H2", "22H2"),
        ("22H2, 22H2", "22H2"),
        ("", None),
        (None, None),
    ],
)
def test_preferred_release(candidates, expected):
    assert preferred_release(candidates) == expected


@pytest.mark.parametrize(
    "text,expected",
    [
        ("HP WinPE 10/11 Driver Pack", "10/11"),
        ("WinPE10x64 drivers", "10"),
        ("HP WinPE 10.0 Driver Pack", "10"),
        ("WinPE 5.0", "5"),
        ("Driver pack for PE 4", "4"),
        ("no generation here", None),
        (None, None),
    ],
)
def test_winpe_release(text, expected):
    assert winpe_release(text) == expected


def test_build_from_text():
    assert build_from_text("SurfacePro7_Win10_18362_21.022.29148.0.msi") == 18362
    assert build_from_text("22631.2861.231204-0538.23H2_NI_RELEASE.esd") == 22631
    assert build_from_text("pack_12345.msi") == 12345
    assert build_from_text("pack_09999.msi") is None
    assert build_from_text("SurfaceHub2.msi") is None


def test_os_name_from_build():
    assert os_name_from_build(22000) == "Windows 11"
    assert os_name_from_build(19045) == "Windows 10"
    assert os_name_from_build(None) is None
