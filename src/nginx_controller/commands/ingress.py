# src/nginx_controller/commands/ingress.py
"""Ingress configuration commands.

YAML files stand in for the routing system: each describes one ingress
configuration (upstreams and servers) written to conf.d/{name}.conf.
"""

from pathlib import Path
from typing import Annotated

import cyclopts

from ..config import Config
from ..errors import ControllerError
from ..models import load_ingress_config
from ..renderer import Renderer
from ._helpers import build_controller
from .common import DryRun, Reload, Verbose

app = cyclopts.App(name="ingress", help="Manage per-ingress nginx configuration files")

Name = Annotated[str, cyclopts.Parameter(help="Configuration name (conf.d/NAME.conf)")]
File = Annotated[Path, cyclopts.Parameter(help="YAML ingress configuration")]


@app.command
def apply(
    name: Name,
    file: File,
    reload: Reload = True,
    dry_run: DryRun = False,
    verbose: Verbose = False,
) -> None:
    """Render FILE into conf.d/NAME.conf, then validate and reload nginx."""
    try:
        controller = build_controller(dry_run, verbose)
        unit = load_ingress_config(file)
        if reload:
            controller.apply(name, unit)
            print(f"[ok] Applied {file} -> {controller.path_for(name)} and reloaded nginx")
        else:
            path = controller.add_or_update(name, unit)
            print(f"[ok] Rendered {file} -> {path}")
    except ControllerError as e:
        raise SystemExit(f"[error] {e}") from e


@app.command
def delete(
    name: Name,
    reload: Reload = True,
    dry_run: DryRun = False,
    verbose: Verbose = False,
) -> None:
    """Remove conf.d/NAME.conf, then validate and reload nginx."""
    try:
        controller = build_controller(dry_run, verbose)
        controller.delete(name)
        if reload:
            controller.reload()
        print(f"[ok] Deleted {controller.path_for(name)}")
    except ControllerError as e:
        raise SystemExit(f"[error] {e}") from e


@app.command
def render(file: File) -> None:
    """Print the configuration FILE renders to. Touches nothing."""
    cfg = Config()
    try:
        renderer = Renderer(cfg.template_dir, conf_d_dir=cfg.conf_d_dir)
        print(renderer.render_ingress(load_ingress_config(file)), end="")
    except ControllerError as e:
        raise SystemExit(f"[error] {e}") from e
