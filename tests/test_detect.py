from __future__ import annotations

from pathlib import Path

import pytest

from termkit.detect import detect_os, detect_package_manager, detect_platform, require_supported
from termkit.errors import PackageManagerNotFound
from termkit.models import PACKAGE_MANAGERS, OsKind, PackageManager


def _sysroot(tmp_path: Path, *markers: str) -> Path:
    root = tmp_path / "sysroot"
    (root / "etc").mkdir(parents=True)
    for marker in markers:
        (root / "etc" / marker).write_text("\n")
    return root


def test_debian_marker_maps_to_apt(debian_root: Path) -> None:
    detected = detect_platform("Linux", root=debian_root, which=lambda _name: None)

    assert detected.os_kind is OsKind.DEBIAN
    assert detected.package_manager is PackageManager.APT


@pytest.mark.parametrize(
    ("marker", "expected"),
    [
        ("arch-release", OsKind.ARCH),
        ("debian_version", OsKind.DEBIAN),
        ("fedora-release", OsKind.FEDORA),
    ],
)
def test_linux_markers(tmp_path: Path, marker: str, expected: OsKind) -> None:
    assert detect_os("Linux", root=_sysroot(tmp_path, marker)) is expected


def test_arch_marker_wins_over_debian(tmp_path: Path) -> None:
    root = _sysroot(tmp_path, "debian_version", "arch-release")
    assert detect_os("Linux", root=root) is OsKind.ARCH


def test_linux_without_markers_is_generic(tmp_path: Path) -> None:
    root = _sysroot(tmp_path)
    detected = detect_platform("Linux", root=root, which=lambda _name: "/usr/bin/x")

    assert detected.os_kind is OsKind.LINUX
    assert detected.package_manager is PackageManager.UNKNOWN
    assert not detected.supported


@pytest.mark.parametrize(
    ("kernel", "expected"),
    [
        ("Darwin", OsKind.MACOS),
        ("Windows", OsKind.WINDOWS),
        ("MINGW64_NT-10.0", OsKind.WINDOWS),
        ("FreeBSD", OsKind.UNKNOWN),
    ],
)
def test_kernel_names(tmp_path: Path, kernel: str, expected: OsKind) -> None:
    assert detect_os(kernel, root=tmp_path) is expected


def test_windows_prefers_scoop_when_available() -> None:
    available = {"scoop", "winget"}
    manager = detect_package_manager(OsKind.WINDOWS, lambda name: name if name in available else None)
    assert manager is PackageManager.SCOOP


def test_windows_falls_back_to_winget() -> None:
    manager = detect_package_manager(OsKind.WINDOWS, lambda name: name if name == "winget" else None)
    assert manager is PackageManager.WINGET


def test_windows_without_manager_is_unknown() -> None:
    assert detect_package_manager(OsKind.WINDOWS, lambda _name: None) is PackageManager.UNKNOWN


def test_every_os_has_a_mapping() -> None:
    assert set(PACKAGE_MANAGERS) == set(OsKind)


def test_require_supported_raises_for_unknown(tmp_path: Path) -> None:
    detected = detect_platform("Plan9", root=tmp_path, which=lambda _name: None)

    with pytest.raises(PackageManagerNotFound):
        require_supported(detected)
