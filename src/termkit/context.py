"""Per-run state shared by every installer stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

from .commands import CommandRunner
from .config import Config
from .downloads import Downloader
from .models import Platform

Prompt = Callable[[str], bool]


@dataclass
class InstallContext:
    """Configuration plus the collaborators a stage talks to.

    ``prompt`` answers yes/no questions; it is never consulted when the
    run is forced.
    """

    config: Config
    platform: Platform
    runner: CommandRunner = field(default_factory=CommandRunner)
    downloader: Downloader = field(default_factory=Downloader)
    console: Console = field(default_factory=Console)
    prompt: Prompt | None = None

    def confirm(self, question: str) -> bool:
        if self.config.settings.force:
            return True
        if self.prompt is not None:
            return self.prompt(question)
        try:
            return Confirm.ask(question, console=self.console, default=False)
        except EOFError:
            # closed stdin counts as "no"
            self.console.print()
            return False

    def info(self, message: str) -> None:
        self.console.print(f"[blue]\\[INFO][/blue] {escape(message)}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]\\[OK][/green] {escape(message)}")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]\\[WARN][/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]\\[ERROR][/red] {escape(message)}")
