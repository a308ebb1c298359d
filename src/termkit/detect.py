"""Operating system and package manager detection."""

from __future__ import annotations

import logging
import platform as _platform
import shutil
from pathlib import Path
from typing import Callable, Optional

from .errors import PackageManagerNotFound
from .models import PACKAGE_MANAGERS, OsKind, PackageManager, Platform

logger = logging.getLogger(__name__)

Which = Callable[[str], Optional[str]]

# Checked in order; Ubuntu and friends ship debian_version too.
LINUX_MARKERS: tuple[tuple[str, OsKind], ...] = (
    ("etc/arch-release", OsKind.ARCH),
    ("etc/debian_version", OsKind.DEBIAN),
    ("etc/fedora-release", OsKind.FEDORA),
)


def detect_os(system: str | None = None, *, root: Path = Path("/")) -> OsKind:
    """Classify the host from its kernel name and distro marker files.

    Args:
        system: Kernel name as reported by ``uname -s``. Defaults to
            :func:`platform.system`.
        root: Filesystem root the marker files are looked up under.
    """

    kernel = (system if system is not None else _platform.system()).strip().lower()

    if kernel == "darwin":
        return OsKind.MACOS
    if kernel == "windows" or kernel.startswith(("mingw", "msys", "cygwin")):
        return OsKind.WINDOWS
    if kernel == "linux":
        for marker, kind in LINUX_MARKERS:
            if (root / marker).is_file():
                return kind
        return OsKind.LINUX
    return OsKind.UNKNOWN


def detect_package_manager(os_kind: OsKind, which: Which = shutil.which) -> PackageManager:
    """Map ``os_kind`` to its package manager.

    Single-candidate platforms map unconditionally. When several candidates
    exist the first one resolvable on PATH is chosen.
    """

    candidates = PACKAGE_MANAGERS[os_kind]
    if len(candidates) == 1:
        return candidates[0]
    for candidate in candidates:
        if which(candidate.value):
            return candidate
    return PackageManager.UNKNOWN


def detect_platform(
    system: str | None = None,
    *,
    root: Path = Path("/"),
    which: Which = shutil.which,
) -> Platform:
    os_kind = detect_os(system, root=root)
    manager = detect_package_manager(os_kind, which)
    logger.debug("Detected OS %s with package manager %s", os_kind.value, manager.value)
    return Platform(os_kind=os_kind, package_manager=manager)


def require_supported(detected: Platform) -> Platform:
    """Return ``detected`` or raise when no package manager was found."""

    if not detected.supported:
        raise PackageManagerNotFound(
            f"Could not detect a package manager for OS '{detected.os_kind.value}'. Manual installation required."
        )
    return detected
