"""Linking repository config files into the home directory.

Each mapping is classified into a :class:`~termkit.models.LinkState` and
dispatched through ``TRANSITIONS``:

=============  ==========================================================
MISSING        create the symlink
LINKED         nothing to do
FOREIGN_LINK   ask to replace; unlink the old link and create ours
OCCUPIED       ask to back up; rename to ``<dest>.backup.<ts>`` and link
=============  ==========================================================

Declining a question leaves the destination untouched.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterator

from .config import LinkSpec
from .context import InstallContext
from .filesystem import backup_entry, create_symlink, remove_path, symlink_points_to
from .models import LinkAction, LinkResult, LinkState, StepResult, StepStatus

logger = logging.getLogger(__name__)

STAGE = "symlinks"


def classify(source: Path, destination: Path) -> LinkState:
    if destination.is_symlink():
        if symlink_points_to(destination, source):
            return LinkState.LINKED
        return LinkState.FOREIGN_LINK
    if destination.exists():
        return LinkState.OCCUPIED
    return LinkState.MISSING


def _on_missing(ctx: InstallContext, source: Path, destination: Path) -> LinkResult:
    create_symlink(destination, source)
    ctx.success(f"Created symlink: {destination} -> {source}")
    return LinkResult(source, destination, LinkState.MISSING, LinkAction.CREATED)


def _on_linked(ctx: InstallContext, source: Path, destination: Path) -> LinkResult:
    ctx.success(f"Symlink already exists: {destination} -> {source}")
    return LinkResult(source, destination, LinkState.LINKED, LinkAction.ALREADY_LINKED)


def _on_foreign_link(ctx: InstallContext, source: Path, destination: Path) -> LinkResult:
    ctx.warn(f"Symlink exists but points elsewhere: {destination} -> {os.readlink(destination)}")
    if not ctx.confirm("Replace symlink?"):
        return LinkResult(source, destination, LinkState.FOREIGN_LINK, LinkAction.DECLINED)

    remove_path(destination)
    create_symlink(destination, source)
    ctx.success(f"Created symlink: {destination} -> {source}")
    return LinkResult(source, destination, LinkState.FOREIGN_LINK, LinkAction.REPLACED)


def _on_occupied(ctx: InstallContext, source: Path, destination: Path) -> LinkResult:
    ctx.warn(f"File exists at {destination}")
    if not ctx.confirm("Backup and replace?"):
        return LinkResult(source, destination, LinkState.OCCUPIED, LinkAction.DECLINED)

    backup = backup_entry(destination)
    ctx.info(f"Backed up to {backup}")
    create_symlink(destination, source)
    ctx.success(f"Created symlink: {destination} -> {source}")
    return LinkResult(source, destination, LinkState.OCCUPIED, LinkAction.BACKED_UP, backup)


TRANSITIONS: dict[LinkState, Callable[[InstallContext, Path, Path], LinkResult]] = {
    LinkState.MISSING: _on_missing,
    LinkState.LINKED: _on_linked,
    LinkState.FOREIGN_LINK: _on_foreign_link,
    LinkState.OCCUPIED: _on_occupied,
}


def apply_link(ctx: InstallContext, source: Path, destination: Path) -> LinkResult:
    """Bring ``destination`` to a symlink pointing at ``source``."""

    if not source.exists():
        ctx.warn(f"Source not found -> {source}")
        return LinkResult(source, destination, None, LinkAction.SOURCE_MISSING)

    state = classify(source, destination)
    logger.debug("%s is %s", destination, state.value)
    return TRANSITIONS[state](ctx, source, destination)


def link_result_to_step(result: LinkResult) -> StepResult:
    subject = str(result.destination)
    if result.action is LinkAction.SOURCE_MISSING:
        return StepResult(STAGE, subject, StepStatus.SKIPPED, f"source not found: {result.source}")
    if result.action is LinkAction.DECLINED:
        return StepResult(STAGE, subject, StepStatus.DECLINED, f"left {result.state.value} destination untouched")
    if result.action is LinkAction.ALREADY_LINKED:
        return StepResult(STAGE, subject, StepStatus.OK, str(result.source))
    details = f"backup: {result.backup}" if result.backup else str(result.source)
    return StepResult(STAGE, subject, StepStatus.INSTALLED, details)


def link_all(ctx: InstallContext, links: tuple[LinkSpec, ...] | None = None) -> Iterator[StepResult]:
    """Offer every configured mapping, one confirmation per link."""

    settings = ctx.config.settings
    ctx.info("Setting up symlinks...")

    for spec in links if links is not None else ctx.config.links:
        source = spec.source_path(settings.repo_root)
        destination = spec.destination_path(settings.home)

        if not ctx.confirm(f"Create symlink for {destination.name}?"):
            yield StepResult(STAGE, str(destination), StepStatus.DECLINED)
            continue

        try:
            result = apply_link(ctx, source, destination)
        except OSError as exc:
            ctx.error(f"Failed to link {destination}: {exc}")
            yield StepResult(STAGE, str(destination), StepStatus.FAILED, str(exc))
            continue

        yield link_result_to_step(result)
