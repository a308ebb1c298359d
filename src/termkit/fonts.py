"""Nerd Font installation.

macOS and Arch delegate to their package managers, Debian and Fedora get the
release archive unpacked into the user font directory, and Windows goes
through scoop or winget.
"""

from __future__ import annotations

import logging
import tempfile
import zipfile
from pathlib import Path
from typing import Iterator

from .context import InstallContext
from .downloads import verify_sha256
from .errors import TermkitError
from .models import OsKind, PackageManager, StepResult, StepStatus
from .packages import install_command, install_package

logger = logging.getLogger(__name__)

STAGE = "font"


def install_font(ctx: InstallContext) -> Iterator[StepResult]:
    font = ctx.config.font
    kind = ctx.platform.os_kind
    if not ctx.confirm(f"Install {font.name}?"):
        yield StepResult(STAGE, font.name, StepStatus.DECLINED)
        return

    ctx.info(f"Installing {font.name}...")

    try:
        if kind is OsKind.MACOS:
            result = _install_brew_cask(ctx)
        elif kind is OsKind.ARCH:
            result = _install_pacman_package(ctx)
        elif kind in (OsKind.DEBIAN, OsKind.FEDORA):
            result = install_font_archive(ctx)
        elif kind is OsKind.WINDOWS:
            result = _install_windows(ctx)
        else:
            ctx.warn(f"No font installation procedure for {kind.value}")
            result = StepResult(STAGE, font.name, StepStatus.SKIPPED, f"unsupported OS '{kind.value}'")
    except (TermkitError, OSError) as exc:
        ctx.error(f"Failed to install {font.name}: {exc}")
        yield StepResult(STAGE, font.name, StepStatus.FAILED, str(exc), getattr(exc, "returncode", None))
        return

    yield result


def install_font_archive(ctx: InstallContext) -> StepResult:
    """Download and unpack the font archive into the user font directory.

    The temporary download directory is removed whether or not extraction
    succeeds.
    """

    font = ctx.config.font
    settings = ctx.config.settings
    font_dir = settings.home / font.font_dir
    font_dir.mkdir(parents=True, exist_ok=True)

    marker = font_dir / font.marker
    if marker.exists():
        ctx.success(f"{font.name} already installed")
        return StepResult(STAGE, font.name, StepStatus.OK, str(marker))

    if settings.tmp_root is not None:
        settings.tmp_root.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory(prefix="termkit-font-", dir=settings.tmp_root) as tmp_name:
        archive = Path(tmp_name) / font.archive_url.rsplit("/", 1)[-1]
        ctx.downloader.fetch(font.archive_url, archive)
        verify_sha256(archive, font.sha256)
        extract_archive(archive, font_dir)

    ctx.runner.run(["fc-cache", "-f"])

    if not marker.exists():
        ctx.warn(f"Archive did not contain {font.marker}; the font may be incomplete")
    ctx.success(f"{font.name} installed")
    return StepResult(STAGE, font.name, StepStatus.INSTALLED, str(font_dir))


def extract_archive(archive: Path, destination: Path) -> list[str]:
    try:
        with zipfile.ZipFile(archive) as bundle:
            names = bundle.namelist()
            bundle.extractall(destination)
    except zipfile.BadZipFile as exc:
        raise TermkitError(f"Cannot extract '{archive.name}': {exc}") from exc
    logger.debug("Extracted %d entries into %s", len(names), destination)
    return names


def _install_brew_cask(ctx: InstallContext) -> StepResult:
    font = ctx.config.font
    listed = ctx.runner.run(["brew", "list", "--cask", font.brew_cask], check=False, capture=True)
    if listed.ok:
        ctx.success(f"{font.name} already installed")
        return StepResult(STAGE, font.name, StepStatus.OK, font.brew_cask)

    ctx.runner.run(["brew", "install", "--cask", font.brew_cask])
    ctx.success(f"{font.name} installed")
    return StepResult(STAGE, font.name, StepStatus.INSTALLED, font.brew_cask)


def _install_pacman_package(ctx: InstallContext) -> StepResult:
    font = ctx.config.font
    queried = ctx.runner.run(["pacman", "-Q", font.pacman_package], check=False, capture=True)
    if queried.ok:
        ctx.success(f"{font.name} already installed")
        return StepResult(STAGE, font.name, StepStatus.OK, font.pacman_package)

    install_package(ctx, font.pacman_package)
    ctx.success(f"{font.name} installed")
    return StepResult(STAGE, font.name, StepStatus.INSTALLED, font.pacman_package)


def _install_windows(ctx: InstallContext) -> StepResult:
    font = ctx.config.font
    manager = ctx.platform.package_manager

    if manager is PackageManager.SCOOP:
        listed = ctx.runner.run(["scoop", "list", font.scoop_package], check=False, capture=True)
        if listed.ok and font.scoop_package.lower() in listed.stdout.lower():
            ctx.success(f"{font.name} already installed")
            return StepResult(STAGE, font.name, StepStatus.OK, font.scoop_package)
        # Adding a bucket that is already known exits non-zero.
        ctx.runner.run(["scoop", "bucket", "add", font.scoop_bucket], check=False)
        package = f"{font.scoop_bucket}/{font.scoop_package}"
        ctx.runner.run(install_command(manager, package))
        ctx.success(f"{font.name} installed")
        return StepResult(STAGE, font.name, StepStatus.INSTALLED, package)

    if manager is PackageManager.WINGET:
        listed = ctx.runner.run(["winget", "list", "--exact", "--id", font.winget_id], check=False, capture=True)
        if listed.ok:
            ctx.success(f"{font.name} already installed")
            return StepResult(STAGE, font.name, StepStatus.OK, font.winget_id)
        ctx.runner.run(install_command(manager, font.winget_id))
        ctx.success(f"{font.name} installed")
        return StepResult(STAGE, font.name, StepStatus.INSTALLED, font.winget_id)

    ctx.warn(f"Install {font.name} manually from {font.manual_url}")
    return StepResult(STAGE, font.name, StepStatus.SKIPPED, font.manual_url)
