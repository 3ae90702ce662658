# src/nginx_controller/sync.py

"""Keep rendered configuration in sync with the nginx configuration directory.

Every ingress configuration maps to conf.d/{name}.conf. The main nginx.conf
lives at a fixed path. Writes replace files atomically; deletions are
best-effort.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import Config
from .errors import PersistenceError
from .files import DryRunFilesystem, Filesystem
from .models import IngressConfig, MainConfig
from .renderer import Renderer


class ConfigSynchronizer:
    def __init__(
        self,
        cfg: Config,
        renderer: Renderer,
        files: Filesystem | DryRunFilesystem,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self.renderer = renderer
        self.files = files
        self.log = logger or logging.getLogger(__name__)

    def path_for(self, name: str) -> Path:
        return self.cfg.conf_file(name)

    def upsert(self, name: str, unit: IngressConfig) -> Path:
        """Render unit and write it to conf.d/{name}.conf.

        Raises:
            InvalidNameError: If name cannot be used as a file name.
            RenderError: If the unit does not fit the template.
            PersistenceError: If the file cannot be written.
        """
        path = self.path_for(name)
        content = self.renderer.render_ingress(unit)
        self.log.debug("Writing NGINX conf to %s:\n%s", path, content)
        self.files.write(path, content)
        self.log.debug("NGINX configuration file %s has been updated", path)
        return path

    def remove(self, name: str) -> None:
        """Delete conf.d/{name}.conf. Never raises for I/O failures."""
        path = self.path_for(name)
        self.log.debug("deleting %s", path)
        try:
            if not self.files.remove(path):
                self.log.debug("%s was already absent", path)
        except PersistenceError as e:
            self.log.warning("Failed to delete %s: %s", path, e)

    def upsert_main(self, main: MainConfig) -> Path:
        """Render and write the main nginx.conf."""
        path = self.cfg.main_config_path
        content = self.renderer.render_main(main)
        self.log.debug("Writing NGINX conf to %s:\n%s", path, content)
        self.files.write(path, content)
        self.log.debug("The main NGINX configuration file has been updated")
        return path
