"""Command-line interface for termkit."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ConfigError, load_config
from .context import InstallContext
from .detect import detect_platform
from .errors import CommandError, PackageManagerNotFound, TermkitError
from .installer import Installer
from .log import configure_logging
from .models import InstallReport, StepResult, StepStatus
from .terminal import deploy_config

app = typer.Typer(
    help="Provision a terminal environment from a dotfiles checkout",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)
console = Console()

STATUS_STYLES = {
    StepStatus.OK: "green",
    StepStatus.INSTALLED: "green",
    StepStatus.SKIPPED: "yellow",
    StepStatus.DECLINED: "yellow",
    StepStatus.FAILED: "red",
}


def _build_installer(
    config_path: Path | None,
    repo: Path | None,
    *,
    force: bool | None,
    fail_fast: bool | None,
) -> Installer:
    config = load_config(config_path, repo_root=repo, force=force, fail_fast=fail_fast)
    return Installer.create(config, console=console)


def _build_context(config_path: Path | None, repo: Path | None, *, force: bool | None) -> InstallContext:
    config = load_config(config_path, repo_root=repo, force=force)
    detected = detect_platform()
    if not detected.is_windows:
        raise TermkitError(
            f"The Alacritty config is only deployed on Windows (detected {detected.os_kind.value}); "
            "link it from the dotfiles checkout instead."
        )
    return InstallContext(config=config, platform=detected, console=console)


def _handle_error(exc: Exception) -> None:
    if isinstance(exc, PermissionError):
        console.print("[red]Permission denied.[/red] Re-run the command with elevated privileges (e.g. `sudo`).")
        raise typer.Exit(code=1)
    if isinstance(exc, ConfigError):
        message = str(exc)
        console.print(f"[red]{escape(message)}[/red]")
        if "Expected to find" in message:
            console.print(
                "[yellow]Make sure you pointed to the directory containing the config file, or to the file itself.[/yellow]"
            )
        raise typer.Exit(code=1)
    if isinstance(exc, PackageManagerNotFound):
        console.print(f"[red]\\[ERROR][/red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    if isinstance(exc, CommandError):
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=exc.returncode or 1)
    if isinstance(exc, TermkitError):
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1)
    raise exc


def _format_results(results: Iterable[StepResult]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Stage")
    table.add_column("Item", overflow="fold")
    table.add_column("Status")
    table.add_column("Details", overflow="fold")

    for result in results:
        style = STATUS_STYLES.get(result.status, "white")
        table.add_row(
            result.stage,
            result.subject,
            f"[{style}]{result.status.value}[/{style}]",
            result.details or "",
        )

    console.print(table)


def _print_next_steps(report: InstallReport) -> None:
    console.print()
    if report.failures:
        console.print(f"[yellow]Finished with {len(report.failures)} failed step(s).[/yellow]")
        return

    console.print("[bold green]Installation complete![/bold green]")
    console.print("Next steps:")
    if report.platform.is_windows:
        console.print("  1. Restart Alacritty to pick up the new configuration")
    else:
        console.print("  1. Restart your terminal or run: source ~/.zshrc")
        console.print("  2. If using tmux, press prefix + I to install plugins")
        console.print("  3. Run 'p10k configure' if you want to customize the prompt")


@app.command()
def install(
    force: bool = typer.Option(False, "--force", "-f", help="Force install without prompts"),
    fail_fast: bool | None = typer.Option(
        None,
        "--fail-fast/--keep-going",
        help="Stop at the first failing step instead of carrying on",
        show_default=False,
    ),
    repo: Path | None = typer.Option(None, "--repo", "-r", help="Dotfiles checkout (defaults to the current directory)"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to termkit.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every command and decision"),
) -> None:
    """Install tools, the font, symlinks and plugins for this machine."""

    configure_logging(verbose=verbose)
    try:
        installer = _build_installer(config, repo, force=force or None, fail_fast=fail_fast)
        report = installer.run()
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return

    console.print()
    _format_results(report.results)
    _print_next_steps(report)
    if report.exit_code:
        raise typer.Exit(code=report.exit_code)


@app.command()
def detect() -> None:
    """Show the detected operating system and package manager."""

    detected = detect_platform()
    console.print(f"OS: {detected.os_kind.value}")
    console.print(f"Package manager: {detected.package_manager.value}")
    if not detected.supported:
        console.print("[red]No supported package manager found.[/red]")
        raise typer.Exit(code=1)


@app.command("deploy-config")
def deploy_config_command(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config without asking"),
    repo: Path | None = typer.Option(None, "--repo", "-r", help="Dotfiles checkout (defaults to the current directory)"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Path to termkit.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every command and decision"),
) -> None:
    """Write the Alacritty config and theme."""

    configure_logging(verbose=verbose)
    try:
        ctx = _build_context(config, repo, force=force or None)
        results = list(deploy_config(ctx))
    except Exception as exc:  # noqa: BLE001
        _handle_error(exc)
        return

    _format_results(results)
    if any(result.failed for result in results):
        raise typer.Exit(code=1)


def run() -> None:
    """Entry point used for console_script bindings."""

    app()
