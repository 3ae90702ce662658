# src/nginx_controller/runner.py

"""Run external commands with captured output.

CommandRunner executes commands. DryRunRunner only records them.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence

from .errors import SubprocessError


class CommandRunner:
    """Execute commands, capturing stdout and stderr in full.

    Usage:
        runner = CommandRunner(timeout=30)
        runner.run(["nginx", "-t"])

    Args:
        timeout: Seconds to wait before giving up. None blocks until the
                 command exits.
        logger: Diagnostic logger.
    """

    def __init__(
        self, timeout: float | None = None, logger: logging.Logger | None = None
    ):
        self.timeout = timeout
        self.log = logger or logging.getLogger(__name__)

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        """Run a command and wait for it to finish.

        Raises:
            SubprocessError: If the command cannot be started, times out or
                exits non-zero. Carries the command and captured output.
        """
        cmd = list(args)
        command = shlex.join(cmd)
        self.log.debug("executing %s", command)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise SubprocessError(
                command,
                stdout=_text(e.stdout),
                stderr=_text(e.stderr),
                reason=f"timed out after {self.timeout}s",
            ) from e
        except OSError as e:
            raise SubprocessError(command, reason=f"failed to execute: {e}") from e

        if result.returncode != 0:
            raise SubprocessError(
                command,
                stdout=result.stdout,
                stderr=result.stderr,
                returncode=result.returncode,
            )
        return result


class DryRunRunner:
    """Record commands instead of running them."""

    def __init__(self, logger: logging.Logger | None = None):
        self.log = logger or logging.getLogger(__name__)
        self.commands: list[list[str]] = []

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        cmd = list(args)
        self.log.info("Would execute %s", shlex.join(cmd))
        self.commands.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


def _text(output: str | bytes | None) -> str:
    # TimeoutExpired may carry bytes even with text=True
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output
