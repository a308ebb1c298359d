"""Running external commands with consistent logging."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Sequence

from .errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


class CommandRunner:
    """Thin wrapper around :mod:`subprocess` and :func:`shutil.which`.

    Stages never call ``subprocess`` directly so tests can swap in a runner
    that records calls instead of executing them.
    """

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def has(self, name: str) -> bool:
        return self.which(name) is not None

    @property
    def is_root(self) -> bool:
        geteuid = getattr(os, "geteuid", None)
        return geteuid is not None and geteuid() == 0

    def run(self, argv: Sequence[str], *, check: bool = True, capture: bool = False) -> CmdResult:
        """Run ``argv`` and wait for it.

        - Always logs the command.
        - ``capture`` keeps output off the terminal (used for presence checks).
        - ``check`` raises :class:`CommandError` carrying the exit status.
        """

        argv_list = list(argv)
        logger.info("CMD %s", format_argv(argv_list))

        try:
            p = subprocess.run(
                argv_list,
                text=True,
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.PIPE if capture else None,
            )
        except FileNotFoundError as exc:
            if check:
                raise CommandError(argv_list, 127, str(exc)) from exc
            return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(exc))

        stdout = p.stdout or ""
        stderr = p.stderr or ""
        if stdout:
            logger.debug("STDOUT %s", stdout.strip())
        if stderr:
            logger.debug("STDERR %s", stderr.strip())

        if check and p.returncode != 0:
            raise CommandError(argv_list, p.returncode, stderr)

        return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
