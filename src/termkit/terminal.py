"""Alacritty config deployment for Windows hosts."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Iterator

import tomli_w

from .config import TerminalSpec
from .context import InstallContext
from .errors import TermkitError
from .filesystem import backup_entry
from .models import StepResult, StepStatus

logger = logging.getLogger(__name__)

STAGE = "terminal"
CONFIG_FILENAME = "alacritty.toml"

KEY_BINDINGS: tuple[dict[str, str], ...] = (
    {"key": "C", "mods": "Control|Shift", "action": "Copy"},
    {"key": "V", "mods": "Control|Shift", "action": "Paste"},
    {"key": "N", "mods": "Control|Shift", "action": "CreateNewWindow"},
    {"key": "Return", "mods": "Alt", "action": "ToggleFullscreen"},
)


def config_dir(ctx: InstallContext) -> Path:
    return ctx.config.settings.appdata / "alacritty"


def render_config(spec: TerminalSpec, theme_path: Path) -> str:
    """Render ``alacritty.toml``; the theme path is the only dynamic value."""

    data: dict[str, Any] = {
        "general": {"import": [theme_path.absolute().as_posix()]},
        "font": {"size": spec.font_size, "normal": {"family": spec.font_family, "style": "Regular"}},
        "mouse": {"hide_when_typing": True},
        "window": {
            "decorations": "Full",
            "opacity": spec.opacity,
            "padding": {"x": 8, "y": 8},
        },
        "keyboard": {"bindings": [dict(binding) for binding in KEY_BINDINGS]},
    }
    return "# Generated by termkit\n\n" + tomli_w.dumps(data)


def ensure_theme(ctx: InstallContext, themes_dir: Path) -> Path:
    """Make sure the theme file exists, preferring the repository copy."""

    spec = ctx.config.terminal
    theme = themes_dir / spec.theme_filename
    if theme.is_file():
        logger.debug("Theme already present at %s", theme)
        return theme

    local = ctx.config.settings.repo_root / spec.repo_theme
    if local.is_file():
        shutil.copy2(local, theme)
        ctx.info(f"Copied theme from {local}")
    else:
        ctx.info(f"Downloading theme {spec.theme}...")
        ctx.downloader.fetch(spec.theme_url, theme)
    return theme


def deploy_config(ctx: InstallContext) -> Iterator[StepResult]:
    target_dir = config_dir(ctx)
    target = target_dir / CONFIG_FILENAME
    ctx.info("Deploying Alacritty configuration...")

    try:
        themes_dir = target_dir / "themes"
        themes_dir.mkdir(parents=True, exist_ok=True)
        theme = ensure_theme(ctx, themes_dir)
        rendered = render_config(ctx.config.terminal, theme)

        if target.exists():
            if target.read_text(encoding="utf-8") == rendered:
                ctx.success(f"{target} is up to date")
                yield StepResult(STAGE, str(target), StepStatus.OK)
                return
            if not ctx.confirm(f"{target} exists. Overwrite?"):
                ctx.info("Skipping Alacritty configuration")
                yield StepResult(STAGE, str(target), StepStatus.DECLINED)
                return
            backup = backup_entry(target)
            ctx.info(f"Backed up to {backup}")

        target.write_text(rendered, encoding="utf-8")
    except (TermkitError, OSError) as exc:
        ctx.error(f"Failed to deploy {target}: {exc}")
        yield StepResult(STAGE, str(target), StepStatus.FAILED, str(exc))
        return

    ctx.success(f"Wrote {target}")
    yield StepResult(STAGE, str(target), StepStatus.INSTALLED, str(theme))
