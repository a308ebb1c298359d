"""Exception hierarchy for termkit."""

from __future__ import annotations

from typing import Sequence


class TermkitError(RuntimeError):
    """Raised when termkit encounters an unrecoverable state."""


class ConfigError(TermkitError):
    """Raised when a configuration file cannot be parsed or validated."""


class PackageManagerNotFound(TermkitError):
    """Raised when no supported package manager could be determined."""


class CommandError(TermkitError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed ({returncode}): {' '.join(self.argv)}"
        if stderr.strip():
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)


class DownloadError(TermkitError):
    """Raised when a remote asset cannot be fetched or fails verification."""
