"""Run shell commands on the local host."""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """A command exited non-zero or did not finish in time."""


class CommandExecutor(Protocol):
    def execute(self, command: str) -> bytes:
        """Run the command and return its standard output, undecoded."""
        ...


class ShellCommandExecutor:
    """Runs commands through the shell, bounded by a timeout."""

    def __init__(self, timeout: float = 300.0) -> None:
        self.timeout = timeout

    def execute(self, command: str) -> bytes:
        logger.info("Execute command %s", command)
        try:
            result = subprocess.run(
                command,
                shell=True,
                check=False,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandError(f"{command!r} timed out after {self.timeout}s") from e
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise CommandError(f"{command!r} exited with code {result.returncode}: {stderr}")
        return result.stdout
