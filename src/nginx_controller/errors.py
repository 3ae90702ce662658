# src/nginx_controller/errors.py

"""Error taxonomy for the apply pipeline.

Construction failures mean the controller cannot be used at all. Everything
else is raised per operation and left to the caller, except best-effort
deletion which only logs.
"""

from __future__ import annotations

from pathlib import Path


class ControllerError(Exception):
    """Base class for nginx controller errors."""


class ConstructionError(ControllerError):
    """The controller cannot be built (templates, directories, main config)."""


class TemplateError(ConstructionError):
    """A template could not be located or parsed."""


class RenderError(ControllerError):
    """A model value is incompatible with the template it was rendered with."""


class InvalidModelError(ControllerError, ValueError):
    """A model value breaks one of its invariants."""


class InvalidNameError(InvalidModelError):
    """A configuration or certificate name cannot be mapped to a file."""


class PersistenceError(ControllerError):
    """Writing or deleting a file failed."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class SubprocessError(ControllerError):
    """An external command exited non-zero or could not be run."""

    def __init__(
        self,
        command: str,
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = None,
        reason: str | None = None,
    ):
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        if reason is None:
            reason = f"exit status {returncode}"
        super().__init__(
            f"Command {command} stdout: {stdout!r}\n"
            f"stderr: {stderr!r}\n"
            f"finished with error: {reason}"
        )


class ValidationError(ControllerError):
    """nginx rejected the candidate configuration; the live one is untouched."""

    def __init__(self, error: SubprocessError):
        super().__init__(
            f"Invalid nginx configuration detected, not reloading: {error}"
        )
        self.error = error


class ReloadError(ControllerError):
    """Validation passed but nginx failed to apply the configuration.

    The running process may be partially updated. Nothing is rolled back.
    """

    def __init__(self, error: SubprocessError, validated: bool = True):
        super().__init__(f"Reloading nginx failed: {error}")
        self.error = error
        self.validated = validated


class StartError(ControllerError):
    """nginx could not be started. Not retried."""

    def __init__(self, error: SubprocessError):
        super().__init__(f"Failed to start nginx: {error}")
        self.error = error
