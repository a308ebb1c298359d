"""Installing required command-line tools through the host package manager."""

from __future__ import annotations

import logging
from typing import Iterator

from .commands import CmdResult
from .context import InstallContext
from .errors import CommandError, PackageManagerNotFound
from .models import PackageManager, StepResult, StepStatus

logger = logging.getLogger(__name__)

STAGE = "dependencies"

_INSTALL_COMMANDS: dict[PackageManager, tuple[tuple[str, ...], bool]] = {
    # manager: (argv prefix, needs root)
    PackageManager.BREW: (("brew", "install"), False),
    PackageManager.PACMAN: (("pacman", "-S", "--noconfirm"), True),
    PackageManager.APT: (("apt", "install", "-y"), True),
    PackageManager.DNF: (("dnf", "install", "-y"), True),
    PackageManager.SCOOP: (("scoop", "install"), False),
    PackageManager.WINGET: (
        ("winget", "install", "--exact", "--accept-source-agreements", "--accept-package-agreements", "--id"),
        False,
    ),
}


def install_command(manager: PackageManager, package: str, *, as_root: bool = False) -> list[str]:
    """Return the argv that installs ``package`` with ``manager``."""

    try:
        prefix, needs_root = _INSTALL_COMMANDS[manager]
    except KeyError:
        raise PackageManagerNotFound(f"Cannot install packages with '{manager.value}'") from None

    argv = [*prefix, package]
    if needs_root and not as_root:
        argv.insert(0, "sudo")
    return argv


def install_package(ctx: InstallContext, package: str) -> CmdResult:
    argv = install_command(ctx.platform.package_manager, package, as_root=ctx.runner.is_root)
    return ctx.runner.run(argv)


def install_dependencies(ctx: InstallContext) -> Iterator[StepResult]:
    """Check each configured tool and offer to install the missing ones."""

    manager = ctx.platform.package_manager
    ctx.info("Checking dependencies...")

    for tool in ctx.config.tools:
        if ctx.runner.has(tool.name):
            ctx.success(f"{tool.name} is installed")
            yield StepResult(STAGE, tool.name, StepStatus.OK)
            continue

        package = tool.package_for(manager)
        if package is None:
            ctx.warn(f"{tool.name} is not installed and is not available via {manager.value}")
            yield StepResult(STAGE, tool.name, StepStatus.SKIPPED, f"no {manager.value} package")
            continue

        ctx.warn(f"{tool.name} is not installed")
        if not ctx.confirm(f"Install {tool.name}?"):
            yield StepResult(STAGE, tool.name, StepStatus.DECLINED)
            continue

        try:
            install_package(ctx, package)
        except CommandError as exc:
            ctx.error(f"Failed to install {tool.name} ({package})")
            yield StepResult(STAGE, tool.name, StepStatus.FAILED, str(exc), exc.returncode)
            continue

        ctx.success(f"{tool.name} installed")
        yield StepResult(STAGE, tool.name, StepStatus.INSTALLED, package)
