"""Cloning the tmux plugin manager."""

from __future__ import annotations

from typing import Iterator

from .context import InstallContext
from .errors import CommandError
from .models import StepResult, StepStatus

STAGE = "plugins"


def bootstrap_plugin_manager(ctx: InstallContext) -> Iterator[StepResult]:
    """Clone the plugin manager unless its directory already exists.

    An existing checkout is left alone; updating it is the plugin
    manager's job.
    """

    plugin = ctx.config.plugin
    target = ctx.config.settings.home / plugin.destination
    ctx.info("Setting up tmux plugin manager...")

    if target.is_dir():
        ctx.success(f"{plugin.name} already installed")
        yield StepResult(STAGE, plugin.name, StepStatus.OK, str(target))
        return

    if not ctx.confirm(f"Install {plugin.name} (Tmux Plugin Manager)?"):
        yield StepResult(STAGE, plugin.name, StepStatus.DECLINED)
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        ctx.runner.run(["git", "clone", plugin.repository, str(target)])
    except CommandError as exc:
        ctx.error(f"Failed to clone {plugin.repository}")
        yield StepResult(STAGE, plugin.name, StepStatus.FAILED, str(exc), exc.returncode)
        return

    ctx.success(f"{plugin.name} installed")
    ctx.info("Run 'tmux' and press 'prefix + I' to install tmux plugins")
    yield StepResult(STAGE, plugin.name, StepStatus.INSTALLED, str(target))
