"""Configuration models and TOML loading for termkit."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .models import PackageManager

DEFAULT_CONFIG_FILENAME = "termkit.toml"


def _expand_path(raw: str | os.PathLike[str] | Path, *, base_dir: Path) -> Path:
    """Return an absolute ``Path`` by expanding env vars and user segments."""

    text = str(raw)
    expanded = Path(os.path.expandvars(text)).expanduser()
    if expanded.is_absolute():
        return expanded.resolve(strict=False)
    return (base_dir / expanded).resolve(strict=False)


def _relative_entry(raw: Any, *, field: str) -> Path:
    candidate = Path(str(raw))
    if candidate.is_absolute():
        raise ConfigError(f"Link {field} '{candidate}' must be a relative path")
    if ".." in candidate.parts:
        raise ConfigError(f"Link {field} '{candidate}' must not escape its base directory")
    return candidate


class ToolSpec(BaseModel):
    """A command-line tool and its package name for each package manager."""

    model_config = ConfigDict(frozen=True)

    name: str
    packages: Dict[PackageManager, str]

    def package_for(self, manager: PackageManager) -> str | None:
        return self.packages.get(manager)


class LinkSpec(BaseModel):
    """A repository file and where its symlink lives under the home directory."""

    model_config = ConfigDict(frozen=True)

    source: Path
    destination: Path

    def source_path(self, repo_root: Path) -> Path:
        return repo_root / self.source

    def destination_path(self, home: Path) -> Path:
        return home / self.destination


class FontSource(BaseModel):
    """Where the Nerd Font comes from on each platform."""

    model_config = ConfigDict(frozen=True)

    name: str = "JetBrains Mono Nerd Font"
    archive_url: str = "https://github.com/ryanoasis/nerd-fonts/releases/latest/download/JetBrainsMono.zip"
    marker: str = "JetBrainsMonoNerdFont-Regular.ttf"
    sha256: str | None = None
    font_dir: Path = Path(".local/share/fonts")
    brew_cask: str = "font-jetbrains-mono-nerd-font"
    pacman_package: str = "ttf-jetbrains-mono-nerd"
    scoop_bucket: str = "nerd-fonts"
    scoop_package: str = "JetBrainsMono-NF"
    winget_id: str = "DEVCOM.JetBrainsMonoNerdFont"
    manual_url: str = "https://www.nerdfonts.com/font-downloads"


class PluginSpec(BaseModel):
    """The tmux plugin manager checkout."""

    model_config = ConfigDict(frozen=True)

    name: str = "TPM"
    repository: str = "https://github.com/tmux-plugins/tpm"
    destination: Path = Path(".tmux/plugins/tpm")


class TerminalSpec(BaseModel):
    """The Alacritty config deployed on Windows hosts."""

    model_config = ConfigDict(frozen=True)

    theme: str = "catppuccin_mocha"
    theme_url: str = "https://raw.githubusercontent.com/alacritty/alacritty-theme/master/themes/catppuccin_mocha.toml"
    repo_theme: Path = Path("alacritty/themes/catppuccin_mocha.toml")
    font_family: str = "JetBrainsMono Nerd Font"
    font_size: float = 12.0
    opacity: float = 0.95

    @property
    def theme_filename(self) -> str:
        return f"{self.theme}.toml"


class Settings(BaseModel):
    """Run-wide options."""

    model_config = ConfigDict(frozen=True)

    repo_root: Path
    home: Path
    appdata: Path
    force: bool = Field(False, strict=True)
    fail_fast: bool = Field(False, strict=True)
    tmp_root: Path | None = None


def _tool(name: str, **packages: str) -> ToolSpec:
    return ToolSpec(name=name, packages={PackageManager(key): value for key, value in packages.items()})


DEFAULT_TOOLS: tuple[ToolSpec, ...] = (
    _tool("git", brew="git", pacman="git", apt="git", dnf="git", scoop="git", winget="Git.Git"),
    _tool("fzf", brew="fzf", pacman="fzf", apt="fzf", dnf="fzf", scoop="fzf", winget="junegunn.fzf"),
    _tool(
        "zoxide",
        brew="zoxide",
        pacman="zoxide",
        apt="zoxide",
        dnf="zoxide",
        scoop="zoxide",
        winget="ajeetdsouza.zoxide",
    ),
    _tool(
        "nvim",
        brew="neovim",
        pacman="neovim",
        apt="neovim",
        dnf="neovim",
        scoop="neovim",
        winget="Neovim.Neovim",
    ),
    _tool("tmux", brew="tmux", pacman="tmux", apt="tmux", dnf="tmux"),
    _tool("zsh", brew="zsh", pacman="zsh", apt="zsh", dnf="zsh"),
)

DEFAULT_LINKS: tuple[LinkSpec, ...] = (
    LinkSpec(source=Path("git/.gitconfig"), destination=Path(".gitconfig")),
    LinkSpec(source=Path("zsh/.zshrc"), destination=Path(".zshrc")),
)


class Config(BaseModel):
    """Everything a run needs, threaded explicitly through each stage."""

    model_config = ConfigDict(frozen=True)

    config_path: Path | None = None
    settings: Settings
    tools: tuple[ToolSpec, ...] = DEFAULT_TOOLS
    links: tuple[LinkSpec, ...] = DEFAULT_LINKS
    font: FontSource = Field(default_factory=FontSource)
    plugin: PluginSpec = Field(default_factory=PluginSpec)
    terminal: TerminalSpec = Field(default_factory=TerminalSpec)


def load_config(
    path: Path | None = None,
    *,
    repo_root: Path | None = None,
    home: Path | None = None,
    force: bool | None = None,
    fail_fast: bool | None = None,
) -> Config:
    """Build a :class:`Config` from defaults, an optional TOML file and CLI overrides.

    Args:
        path: Optional path to a ``termkit.toml`` file or the directory holding it.
            Defaults to ``termkit.toml`` inside ``repo_root`` when that file exists.
        repo_root: The dotfiles checkout. Defaults to the current working directory.
        home: Home directory the links and plugins are installed into.
        force: Answer every confirmation with yes. Overrides the file setting.
        fail_fast: Stop at the first failing step. Overrides the file setting.
    """

    root = (repo_root or Path.cwd()).expanduser().resolve(strict=False)
    home_dir = (home or Path.home()).expanduser()
    config_path = _resolve_config_path(path, root)

    data: Mapping[str, Any] = {}
    if config_path is not None:
        try:
            with config_path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Configuration file '{config_path}' is not valid TOML: {exc}") from exc

    settings_raw = _section(data, "settings")
    appdata_raw = settings_raw.get("appdata") or os.environ.get("APPDATA")
    appdata = (
        _expand_path(appdata_raw, base_dir=home_dir) if appdata_raw else home_dir / "AppData" / "Roaming"
    )
    tmp_raw = settings_raw.get("tmp_root")

    try:
        settings = Settings(
            repo_root=root,
            home=home_dir,
            appdata=appdata,
            force=settings_raw.get("force", False) if force is None else force,
            fail_fast=settings_raw.get("fail_fast", False) if fail_fast is None else fail_fast,
            tmp_root=_expand_path(tmp_raw, base_dir=root) if tmp_raw else None,
        )

        overrides: dict[str, Any] = {}
        if "tools" in data:
            overrides["tools"] = _parse_tools(data["tools"])
        if "links" in data:
            overrides["links"] = _parse_links(data["links"])
        for section, model in (("font", FontSource), ("plugin", PluginSpec), ("terminal", TerminalSpec)):
            if section in data:
                overrides[section] = model(**_section(data, section))

        return Config(config_path=config_path, settings=settings, **overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = data.get(name, {})
    if not isinstance(raw, Mapping):
        raise ConfigError(f"[{name}] must be a table, not {type(raw).__name__}")
    return raw


def _parse_tools(raw: Any) -> tuple[ToolSpec, ...]:
    if not isinstance(raw, Mapping) or not raw:
        raise ConfigError("[tools] must contain at least one [tools.<command>] table")

    tools: list[ToolSpec] = []
    for name, packages in raw.items():
        if not isinstance(packages, Mapping):
            raise ConfigError(f"Tool '{name}' must map package managers to package names")
        mapping: dict[PackageManager, str] = {}
        for manager, package in packages.items():
            try:
                key = PackageManager(manager)
            except ValueError as exc:
                raise ConfigError(f"Tool '{name}' references unknown package manager '{manager}'") from exc
            if key is PackageManager.UNKNOWN:
                raise ConfigError(f"Tool '{name}' cannot define a package for '{manager}'")
            mapping[key] = str(package)
        tools.append(ToolSpec(name=name, packages=mapping))
    return tuple(tools)


def _parse_links(raw: Any) -> tuple[LinkSpec, ...]:
    if not isinstance(raw, list):
        raise ConfigError("Links must be declared as [[links]] tables")

    links: list[LinkSpec] = []
    for item in raw:
        if not isinstance(item, Mapping) or "source" not in item or "destination" not in item:
            raise ConfigError("Each [[links]] entry needs a 'source' and a 'destination'")
        links.append(
            LinkSpec(
                source=_relative_entry(item["source"], field="source"),
                destination=_relative_entry(item["destination"], field="destination"),
            )
        )
    return tuple(links)


def _resolve_config_path(path: Path | None, repo_root: Path) -> Path | None:
    if path is None:
        candidate = repo_root / DEFAULT_CONFIG_FILENAME
        return candidate if candidate.is_file() else None

    path = Path(path).expanduser()
    if not path.exists():
        raise ConfigError(f"Configuration file '{path}' does not exist")
    if path.is_dir():
        candidate = path / DEFAULT_CONFIG_FILENAME
        if not candidate.exists():
            raise ConfigError(f"Expected to find '{DEFAULT_CONFIG_FILENAME}' inside '{path}', but none was located")
        path = candidate

    return path.resolve(strict=False)
