# src/nginx_controller/models.py
"""
Routing model rendered into nginx configuration.

All entities are frozen value types. Sequence fields accept any iterable and
are stored as tuples in the order given, since server and location order
decides routing precedence in nginx.

Each Location embeds its own Upstream value. Two locations only share an
upstream pool when the caller gives both the same value.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .config import (
    DEFAULT_BACKEND_ADDRESS,
    DEFAULT_BACKEND_PORT,
    DEFAULT_CLIENT_MAX_BODY_SIZE,
    DEFAULT_PROXY_CONNECT_TIMEOUT,
    DEFAULT_PROXY_READ_TIMEOUT,
    DEFAULT_SERVER_NAMES_HASH_MAX_SIZE,
)
from .errors import InvalidModelError


def _freeze(obj: Any, name: str, items: Iterable[Any]) -> None:
    object.__setattr__(obj, name, tuple(items))


@dataclass(frozen=True)
class UpstreamServer:
    """One backend endpoint."""

    address: str
    port: int


@dataclass(frozen=True)
class Upstream:
    """Named pool of backend endpoints. Never empty."""

    name: str
    upstream_servers: tuple[UpstreamServer, ...]

    def __post_init__(self):
        _freeze(self, "upstream_servers", self.upstream_servers)
        if not self.upstream_servers:
            raise InvalidModelError(
                f"Upstream {self.name!r} has no servers; "
                "use new_upstream_with_default_server()"
            )


@dataclass(frozen=True)
class Location:
    """Path rule bound to one upstream pool."""

    path: str
    upstream: Upstream
    proxy_connect_timeout: str = DEFAULT_PROXY_CONNECT_TIMEOUT
    proxy_read_timeout: str = DEFAULT_PROXY_READ_TIMEOUT
    client_max_body_size: str = DEFAULT_CLIENT_MAX_BODY_SIZE
    websocket: bool = False


@dataclass(frozen=True)
class Server:
    """Virtual host, optionally TLS-terminated."""

    name: str
    locations: tuple[Location, ...] = ()
    ssl: bool = False
    ssl_certificate: str = ""
    ssl_certificate_key: str = ""

    def __post_init__(self):
        _freeze(self, "locations", self.locations)
        if self.ssl and not (self.ssl_certificate and self.ssl_certificate_key):
            raise InvalidModelError(
                f"Server {self.name!r} enables TLS without certificate and key paths"
            )


@dataclass(frozen=True)
class IngressConfig:
    """One configuration unit, rendered to conf.d/{name}.conf."""

    upstreams: tuple[Upstream, ...] = ()
    servers: tuple[Server, ...] = ()

    def __post_init__(self):
        _freeze(self, "upstreams", self.upstreams)
        _freeze(self, "servers", self.servers)
        seen = set()
        for upstream in self.upstreams:
            if upstream.name in seen:
                raise InvalidModelError(f"Duplicate upstream {upstream.name!r}")
            seen.add(upstream.name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IngressConfig:
        """Build a unit from a plain mapping (as loaded from YAML).

        Locations reference a declared upstream by name, or define one inline:

            upstreams:
              - name: svc-a
                servers: ["10.0.0.5:8080"]
            servers:
              - name: example.com
                locations:
                  - path: /
                    upstream: svc-a
        """
        if not isinstance(data, Mapping):
            raise InvalidModelError("Ingress configuration must be a mapping")

        upstreams = [
            _upstream_from_dict(_mapping(u, "upstream")) for u in data.get("upstreams") or []
        ]
        by_name = {}
        for u in upstreams:
            if u.name in by_name:
                raise InvalidModelError(f"Duplicate upstream {u.name!r}")
            by_name[u.name] = u

        servers = []
        for s in data.get("servers") or []:
            s = _mapping(s, "server")
            locations = []
            for loc in s.get("locations") or []:
                loc = _mapping(loc, "location")
                ref = loc.get("upstream")
                if isinstance(ref, str):
                    if ref not in by_name:
                        raise InvalidModelError(f"Unknown upstream {ref!r} for location {loc.get('path')!r}")
                    upstream = by_name[ref]
                elif isinstance(ref, Mapping):
                    upstream = _upstream_from_dict(ref)
                else:
                    raise InvalidModelError(f"Location {loc.get('path')!r} has no upstream")
                locations.append(
                    Location(
                        path=_require(loc, "path"),
                        upstream=upstream,
                        proxy_connect_timeout=str(
                            loc.get("proxy_connect_timeout", DEFAULT_PROXY_CONNECT_TIMEOUT)
                        ),
                        proxy_read_timeout=str(
                            loc.get("proxy_read_timeout", DEFAULT_PROXY_READ_TIMEOUT)
                        ),
                        client_max_body_size=str(
                            loc.get("client_max_body_size", DEFAULT_CLIENT_MAX_BODY_SIZE)
                        ),
                        websocket=bool(loc.get("websocket", False)),
                    )
                )
            servers.append(
                Server(
                    name=_require(s, "name"),
                    locations=locations,
                    ssl=bool(s.get("ssl", False)),
                    ssl_certificate=s.get("ssl_certificate", ""),
                    ssl_certificate_key=s.get("ssl_certificate_key", ""),
                )
            )
        return cls(upstreams=upstreams, servers=servers)


@dataclass(frozen=True)
class MainConfig:
    """Process-wide nginx.conf settings. Empty values keep nginx's defaults."""

    server_names_hash_bucket_size: str = ""
    server_names_hash_max_size: str = DEFAULT_SERVER_NAMES_HASH_MAX_SIZE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MainConfig:
        if not isinstance(data, Mapping):
            raise InvalidModelError("Main configuration must be a mapping")
        return cls(
            server_names_hash_bucket_size=str(data.get("server_names_hash_bucket_size", "")),
            server_names_hash_max_size=str(
                data.get("server_names_hash_max_size", DEFAULT_SERVER_NAMES_HASH_MAX_SIZE)
            ),
        )


@dataclass(frozen=True)
class CertificateBundle:
    """Certificate and private key persisted as ssl/{name}.pem."""

    name: str
    certificate: str
    key: str

    @property
    def content(self) -> str:
        return f"{self.key}\n{self.certificate}"


def new_upstream_with_default_server(name: str) -> Upstream:
    """Upstream for a route without live backends.

    proxy_pass to it hits the default backend in nginx.conf, which returns 502.
    """
    return Upstream(
        name=name,
        upstream_servers=[UpstreamServer(DEFAULT_BACKEND_ADDRESS, DEFAULT_BACKEND_PORT)],
    )


def _require(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise InvalidModelError(f"Missing required field {key!r}") from None


def _mapping(value: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidModelError(f"Each {kind} must be a mapping, got {value!r}")
    return value


def _parse_server(value: Any) -> UpstreamServer:
    if isinstance(value, Mapping):
        address = str(_require(value, "address"))
        port = _require(value, "port")
        try:
            return UpstreamServer(address, int(port))
        except (TypeError, ValueError):
            raise InvalidModelError(f"Invalid port {port!r} for upstream server") from None
    # "host:port"
    address, sep, port = str(value).rpartition(":")
    if not sep or not address or not port.isdigit():
        raise InvalidModelError(f"Invalid upstream server {value!r}, expected ADDRESS:PORT")
    return UpstreamServer(address, int(port))


def _upstream_from_dict(data: Mapping[str, Any]) -> Upstream:
    name = _require(data, "name")
    servers = [_parse_server(s) for s in data.get("servers") or []]
    if not servers:
        return new_upstream_with_default_server(name)
    return Upstream(name=name, upstream_servers=servers)


def _load_yaml(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidModelError(f"Invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidModelError(f"Cannot read {path}: {e}") from e


def load_ingress_config(path: Path | str) -> IngressConfig:
    """Load an IngressConfig from a YAML file."""
    return IngressConfig.from_dict(_load_yaml(Path(path)) or {})


def load_main_config(path: Path | str) -> MainConfig:
    """Load a MainConfig from a YAML file."""
    return MainConfig.from_dict(_load_yaml(Path(path)) or {})
