# src/nginx_controller/process.py

"""Start nginx and reload it only after its configuration validates.

Reload is a two-step protocol:

    validate (nginx -t)         -- failure: REJECTED_INVALID_CONFIG,
                                   live config untouched, apply never runs
    apply    (nginx -s reload)  -- failure: RELOAD_FAILED,
                                   nginx may be partially updated
    both succeed                -- APPLIED

There is no rollback or restart after RELOAD_FAILED; callers should check
nginx health out of band.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path

from .errors import ReloadError, StartError, SubprocessError, ValidationError
from .runner import CommandRunner, DryRunRunner


class ReloadState(enum.Enum):
    IDLE = "idle"
    REJECTED_INVALID_CONFIG = "rejected-invalid-config"
    RELOAD_FAILED = "reload-failed"
    APPLIED = "applied"


class NginxProcess:
    """Supervise the nginx process through its command line."""

    def __init__(
        self,
        runner: CommandRunner | DryRunRunner,
        binary: str = "nginx",
        main_config_path: Path = Path("/etc/nginx/nginx.conf"),
        logger: logging.Logger | None = None,
    ):
        self.runner = runner
        self.binary = binary
        self.main_config_path = main_config_path
        self.log = logger or logging.getLogger(__name__)
        # Outcome of the last reload attempt
        self.state = ReloadState.IDLE
        self.validated = False

    def _command(self, *args: str) -> list[str]:
        return [self.binary, *args, "-c", str(self.main_config_path)]

    def validate(self) -> None:
        """Run nginx's syntax check.

        Raises:
            ValidationError: If nginx rejects the configuration.
        """
        try:
            self.runner.run(self._command("-t"))
        except SubprocessError as e:
            raise ValidationError(e) from e

    def reload(self) -> ReloadState:
        """Validate, then signal nginx to re-read its configuration.

        Raises:
            ValidationError: Configuration rejected; nginx was not signalled.
            ReloadError: Configuration valid but nginx failed to apply it.
        """
        self.validated = False
        try:
            self.validate()
        except ValidationError as e:
            self.state = ReloadState.REJECTED_INVALID_CONFIG
            self.log.error("%s", e)
            raise
        self.validated = True

        try:
            self.runner.run(self._command("-s", "reload"))
        except SubprocessError as e:
            self.state = ReloadState.RELOAD_FAILED
            err = ReloadError(e, validated=True)
            self.log.error("%s", err)
            raise err from e

        self.state = ReloadState.APPLIED
        self.log.debug("NGINX configuration reloaded")
        return self.state

    def start(self) -> None:
        """Start nginx.

        Raises:
            StartError: nginx did not start. Not retried; without a running
                nginx there is nothing to configure.
        """
        self.log.debug("Starting nginx")
        try:
            self.runner.run(self._command())
        except SubprocessError as e:
            raise StartError(e) from e
