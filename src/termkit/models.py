"""Shared models and enums for termkit."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class OsKind(str, Enum):
    """Operating systems termkit knows how to provision."""

    MACOS = "macos"
    ARCH = "arch"
    DEBIAN = "debian"
    FEDORA = "fedora"
    LINUX = "linux"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


class PackageManager(str, Enum):
    """Package managers termkit can drive."""

    BREW = "brew"
    PACMAN = "pacman"
    APT = "apt"
    DNF = "dnf"
    SCOOP = "scoop"
    WINGET = "winget"
    UNKNOWN = "unknown"


# Candidates in order of preference. The first one found on PATH wins when
# an OS lists more than one.
PACKAGE_MANAGERS: dict[OsKind, tuple[PackageManager, ...]] = {
    OsKind.MACOS: (PackageManager.BREW,),
    OsKind.ARCH: (PackageManager.PACMAN,),
    OsKind.DEBIAN: (PackageManager.APT,),
    OsKind.FEDORA: (PackageManager.DNF,),
    OsKind.LINUX: (PackageManager.UNKNOWN,),
    OsKind.WINDOWS: (PackageManager.SCOOP, PackageManager.WINGET),
    OsKind.UNKNOWN: (PackageManager.UNKNOWN,),
}

_unmapped = set(OsKind) - set(PACKAGE_MANAGERS)
if _unmapped:  # pragma: no cover - guards edits to the enum above
    raise AssertionError(f"OS kinds without a package manager mapping: {sorted(k.value for k in _unmapped)}")


@dataclass(frozen=True, slots=True)
class Platform:
    """Detected host operating system and its package manager."""

    os_kind: OsKind
    package_manager: PackageManager

    @property
    def is_windows(self) -> bool:
        return self.os_kind is OsKind.WINDOWS

    @property
    def supported(self) -> bool:
        return self.package_manager is not PackageManager.UNKNOWN


class LinkState(str, Enum):
    """State of a symlink destination before termkit touches it."""

    MISSING = "missing"
    LINKED = "linked"
    FOREIGN_LINK = "foreign_link"
    OCCUPIED = "occupied"


class LinkAction(str, Enum):
    """Outcome of processing a single symlink mapping."""

    CREATED = "created"
    ALREADY_LINKED = "already_linked"
    REPLACED = "replaced"
    BACKED_UP = "backed_up"
    DECLINED = "declined"
    SOURCE_MISSING = "source_missing"


class StepStatus(str, Enum):
    """Outcome of an installer step."""

    OK = "ok"
    INSTALLED = "installed"
    SKIPPED = "skipped"
    DECLINED = "declined"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class StepResult:
    """Result emitted for every item an installer stage processes."""

    stage: str
    subject: str
    status: StepStatus
    details: str | None = None
    returncode: int | None = None

    @property
    def failed(self) -> bool:
        return self.status is StepStatus.FAILED


@dataclass(frozen=True, slots=True)
class InstallReport:
    """Everything an installer run produced."""

    platform: Platform
    results: tuple[StepResult, ...]
    aborted: bool = False

    @property
    def failures(self) -> tuple[StepResult, ...]:
        return tuple(result for result in self.results if result.failed)

    @property
    def exit_code(self) -> int:
        """The first failing command's status, ``1`` for other failures, else ``0``."""

        failures = self.failures
        if not failures:
            return 0
        return failures[0].returncode or 1


@dataclass(frozen=True, slots=True)
class LinkResult:
    """Result of evaluating one symlink mapping."""

    source: Path
    destination: Path
    state: LinkState | None
    action: LinkAction
    backup: Path | None = None
