"""High level orchestration of an installer run."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator

from rich.console import Console

from .commands import CommandRunner
from .config import Config
from .context import InstallContext, Prompt
from .detect import detect_platform, require_supported
from .downloads import Downloader
from .fonts import install_font
from .links import link_all
from .models import InstallReport, Platform, StepResult
from .packages import install_dependencies
from .plugins import bootstrap_plugin_manager
from .terminal import deploy_config

logger = logging.getLogger(__name__)

Stage = Callable[[InstallContext], Iterator[StepResult]]

POSIX_STAGES: tuple[Stage, ...] = (install_dependencies, install_font, link_all, bootstrap_plugin_manager)
WINDOWS_STAGES: tuple[Stage, ...] = (install_dependencies, install_font, deploy_config)


class Installer:
    """Runs the provisioning stages in order against one :class:`InstallContext`."""

    def __init__(self, ctx: InstallContext) -> None:
        self.ctx = ctx

    @classmethod
    def create(
        cls,
        config: Config,
        *,
        runner: CommandRunner | None = None,
        downloader: Downloader | None = None,
        console: Console | None = None,
        prompt: Prompt | None = None,
        system: str | None = None,
        root: Path = Path("/"),
    ) -> "Installer":
        """Detect the platform and build an installer for it.

        Raises :class:`~termkit.errors.PackageManagerNotFound` before anything
        is touched when the host has no supported package manager.
        """

        runner = runner or CommandRunner()
        detected = require_supported(detect_platform(system, root=root, which=runner.which))
        ctx = InstallContext(
            config=config,
            platform=detected,
            runner=runner,
            downloader=downloader or Downloader(),
            console=console or Console(),
            prompt=prompt,
        )
        return cls(ctx)

    @property
    def platform(self) -> Platform:
        return self.ctx.platform

    def stages(self) -> tuple[Stage, ...]:
        return WINDOWS_STAGES if self.platform.is_windows else POSIX_STAGES

    def run(self, stages: tuple[Stage, ...] | None = None) -> InstallReport:
        ctx = self.ctx
        fail_fast = ctx.config.settings.fail_fast
        results: list[StepResult] = []

        ctx.info(f"Detected OS: {self.platform.os_kind.value}")
        ctx.info(f"Package manager: {self.platform.package_manager.value}")

        for stage in stages if stages is not None else self.stages():
            logger.debug("Running stage %s", stage.__name__)
            ctx.console.print()
            for result in stage(ctx):
                results.append(result)
                if result.failed and fail_fast:
                    ctx.error("Stopping after the first failure (fail-fast)")
                    return InstallReport(self.platform, tuple(results), aborted=True)

        return InstallReport(self.platform, tuple(results))
