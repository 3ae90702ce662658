# src/nginx_controller/certificates.py

from __future__ import annotations

import logging
from pathlib import Path

from .config import Config
from .files import DryRunFilesystem, Filesystem
from .models import CertificateBundle

# Bundles hold private keys
PEM_MODE = 0o600


class CertificateStore:
    """Persist certificate and key bundles as ssl/{name}.pem."""

    def __init__(
        self,
        cfg: Config,
        files: Filesystem | DryRunFilesystem,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self.files = files
        self.log = logger or logging.getLogger(__name__)

    def path_for(self, name: str) -> Path:
        return self.cfg.pem_file(name)

    def put(self, name: str, certificate: str, key: str) -> Path:
        """Write the private key, a newline, then the certificate.

        Replaces any previous bundle with the same name. Returns the path in
        dry-run mode too, so server blocks can reference it.
        """
        bundle = CertificateBundle(name=name, certificate=certificate, key=key)
        path = self.path_for(name)
        self.log.debug("Updating certificate bundle %s", path)
        self.files.write(path, bundle.content, mode=PEM_MODE)
        return path
