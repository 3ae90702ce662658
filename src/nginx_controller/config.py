# src/nginx_controller/config.py

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import ConstructionError, InvalidNameError

if TYPE_CHECKING:
    from .models import MainConfig

# Location defaults
DEFAULT_PROXY_CONNECT_TIMEOUT = "60s"
DEFAULT_PROXY_READ_TIMEOUT = "60s"
DEFAULT_CLIENT_MAX_BODY_SIZE = "1m"

# Main config defaults
DEFAULT_SERVER_NAMES_HASH_MAX_SIZE = "512"

# Upstream used when a route has no live backends; nginx.conf answers 502 here
DEFAULT_BACKEND_ADDRESS = "127.0.0.1"
DEFAULT_BACKEND_PORT = 8181


def _env_path(name: str) -> Path | None:
    value = os.environ.get(name)
    return Path(value) if value else None


def _env_timeout() -> float | None:
    value = os.environ.get("NGINX_COMMAND_TIMEOUT")
    return float(value) if value else None


def check_name(name: str) -> str:
    """Reject names that would escape the managed directory."""
    if not name or name in (".", "..") or "/" in name or "\0" in name:
        raise InvalidNameError(f"Invalid configuration name: {name!r}")
    return name


@dataclass
class Config:
    """nginx installation paths and controller settings.

    Directory layout:
        {conf_dir}/conf.d/{name}.conf  - One file per ingress configuration
        {conf_dir}/ssl/{name}.pem      - Private key + certificate bundles
        {main_config_path}             - Process-wide nginx.conf
    """

    conf_dir: Path = field(
        default_factory=lambda: _env_path("NGINX_CONF_DIR") or Path("/etc/nginx")
    )
    main_config_path: Path = field(
        default_factory=lambda: _env_path("NGINX_MAIN_CONFIG")
        or Path("/etc/nginx/nginx.conf")
    )
    nginx_binary: str = field(
        default_factory=lambda: os.environ.get("NGINX_BINARY", "nginx")
    )
    template_dir: Path | None = field(
        default_factory=lambda: _env_path("NGINX_TEMPLATE_DIR")
    )
    command_timeout: float | None = field(default_factory=_env_timeout)
    server_names_hash_max_size: str = field(
        default_factory=lambda: os.environ.get(
            "NGINX_SERVER_NAMES_HASH_MAX_SIZE", DEFAULT_SERVER_NAMES_HASH_MAX_SIZE
        )
    )
    server_names_hash_bucket_size: str = field(
        default_factory=lambda: os.environ.get("NGINX_SERVER_NAMES_HASH_BUCKET_SIZE", "")
    )
    # YAML main config; overrides the hash sizing fields when set
    main_settings: Path | None = field(
        default_factory=lambda: _env_path("NGINX_MAIN_SETTINGS")
    )
    # Dry-run: no files written, no commands executed
    local: bool = False

    @property
    def conf_d_dir(self) -> Path:
        """Per-ingress configuration files."""
        return self.conf_dir / "conf.d"

    @property
    def ssl_dir(self) -> Path:
        """Certificate bundles."""
        return self.conf_dir / "ssl"

    def conf_file(self, name: str) -> Path:
        return self.conf_d_dir / f"{check_name(name)}.conf"

    def pem_file(self, name: str) -> Path:
        return self.ssl_dir / f"{check_name(name)}.pem"

    def main_config(self) -> MainConfig:
        """Main config loaded from main_settings, or built from the hash sizing.

        Raises:
            InvalidModelError: If main_settings cannot be read or parsed.
        """
        from .models import MainConfig, load_main_config

        if self.main_settings is not None:
            return load_main_config(self.main_settings)
        return MainConfig(
            server_names_hash_bucket_size=self.server_names_hash_bucket_size,
            server_names_hash_max_size=self.server_names_hash_max_size,
        )

    def validate(self) -> None:
        if self.local:
            return
        if not self.conf_dir.is_dir():
            raise ConstructionError(f"nginx configuration directory not found: {self.conf_dir}")
