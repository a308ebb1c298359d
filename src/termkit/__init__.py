"""Core package for the termkit project."""

from .cli import app, run
from .config import Config, FontSource, LinkSpec, PluginSpec, Settings, TerminalSpec, ToolSpec, load_config
from .errors import CommandError, ConfigError, DownloadError, PackageManagerNotFound, TermkitError
from .installer import Installer
from .models import (
    InstallReport,
    LinkAction,
    LinkState,
    OsKind,
    PackageManager,
    Platform,
    StepResult,
    StepStatus,
)

__all__ = [
    "Config",
    "FontSource",
    "LinkSpec",
    "PluginSpec",
    "Settings",
    "TerminalSpec",
    "ToolSpec",
    "load_config",
    "Installer",
    "TermkitError",
    "ConfigError",
    "CommandError",
    "DownloadError",
    "PackageManagerNotFound",
    "InstallReport",
    "LinkAction",
    "LinkState",
    "OsKind",
    "PackageManager",
    "Platform",
    "StepResult",
    "StepStatus",
    "app",
    "run",
]
