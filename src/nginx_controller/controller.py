# src/nginx_controller/controller.py

"""The controller facade consumed by the routing system.

    controller = NginxController(Config())
    controller.add_or_update_certificate("site1", cert, key)
    controller.add_or_update("default-site1", unit)
    controller.reload()

All operations are synchronous and serialized by one lock per controller, so
a write can never interleave with a reload reading the same directory.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TextIO

from .certificates import CertificateStore
from .config import Config
from .errors import ConstructionError, ControllerError, InvalidModelError
from .files import DryRunFilesystem, Filesystem
from .models import IngressConfig, MainConfig
from .process import NginxProcess, ReloadState
from .renderer import Renderer
from .runner import CommandRunner, DryRunRunner
from .sync import ConfigSynchronizer


class NginxController:
    """Update nginx configuration, start and reload nginx.

    Args:
        cfg: Paths and settings. ``cfg.local`` selects dry-run mode for the
             lifetime of the controller.
        main_config: Initial main config. Defaults to ``cfg.main_config()``.
        logger: Diagnostic logger.
        files: File system capability. Chosen from ``cfg.local`` if omitted.
        runner: Command runner. Chosen from ``cfg.local`` if omitted.
        stream: Where dry-run mode echoes would-be file content.

    Raises:
        ConstructionError: Templates missing, directories uncreatable, or the
            main config cannot be written.
    """

    def __init__(
        self,
        cfg: Config,
        main_config: MainConfig | None = None,
        logger: logging.Logger | None = None,
        files: Filesystem | DryRunFilesystem | None = None,
        runner: CommandRunner | DryRunRunner | None = None,
        stream: TextIO | None = None,
    ):
        self.cfg = cfg
        self.log = logger or logging.getLogger(__name__)
        if files is None:
            files = DryRunFilesystem(stream, self.log) if cfg.local else Filesystem(self.log)
        if runner is None:
            runner = (
                DryRunRunner(self.log)
                if cfg.local
                else CommandRunner(cfg.command_timeout, self.log)
            )
        self.files = files
        self.runner = runner
        self._lock = threading.RLock()

        renderer = Renderer(cfg.template_dir, conf_d_dir=cfg.conf_d_dir)
        self.certificates = CertificateStore(cfg, files, self.log)
        self.configs = ConfigSynchronizer(cfg, renderer, files, self.log)
        self.nginx = NginxProcess(runner, cfg.nginx_binary, cfg.main_config_path, self.log)

        try:
            files.makedirs(cfg.conf_d_dir)
            files.makedirs(cfg.ssl_dir)
            self.update_main_config(main_config or cfg.main_config())
        except ControllerError as e:
            raise ConstructionError(f"Failed to initialize nginx configuration: {e}") from e

    @property
    def local(self) -> bool:
        return self.cfg.local

    @property
    def renderer(self) -> Renderer:
        return self.configs.renderer

    def path_for(self, name: str) -> Path:
        return self.configs.path_for(name)

    def add_or_update(self, name: str, unit: IngressConfig) -> Path:
        """Create or replace the configuration file for name.

        Raises:
            InvalidModelError: A TLS server references a missing bundle.
            RenderError: The unit does not fit the template.
            PersistenceError: The file cannot be written.
        """
        self.log.debug("Updating NGINX configuration %s", name)
        with self._lock:
            self._check_certificates(unit)
            return self.configs.upsert(name, unit)

    def delete(self, name: str) -> None:
        """Remove the configuration file for name. Best-effort."""
        with self._lock:
            self.configs.remove(name)

    def add_or_update_certificate(self, name: str, certificate: str, key: str) -> Path:
        """Write ssl/{name}.pem and return its path."""
        with self._lock:
            return self.certificates.put(name, certificate, key)

    def update_main_config(self, main: MainConfig) -> Path:
        with self._lock:
            return self.configs.upsert_main(main)

    def start(self) -> None:
        """Start nginx. Raises StartError, which callers should treat as fatal."""
        with self._lock:
            self.nginx.start()

    def reload(self) -> ReloadState:
        """Validate and reload. See NginxProcess.reload."""
        with self._lock:
            return self.nginx.reload()

    def apply(self, name: str, unit: IngressConfig) -> ReloadState:
        """Write the configuration for name and reload, holding the lock throughout."""
        with self._lock:
            self.add_or_update(name, unit)
            return self.reload()

    def _check_certificates(self, unit: IngressConfig) -> None:
        for server in unit.servers:
            if not server.ssl:
                continue
            for path in (server.ssl_certificate, server.ssl_certificate_key):
                if not self.files.exists(Path(path)):
                    raise InvalidModelError(
                        f"Server {server.name!r} references missing certificate file {path}"
                    )
