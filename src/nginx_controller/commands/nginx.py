# src/nginx_controller/commands/nginx.py
"""nginx process commands."""

import cyclopts

from ..errors import ControllerError
from ._helpers import build_controller
from .common import DryRun, Verbose

app = cyclopts.App(name="nginx", help="Start, test and reload nginx")


@app.command
def start(dry_run: DryRun = False, verbose: Verbose = False) -> None:
    """Write the main config and start nginx."""
    try:
        build_controller(dry_run, verbose).start()
        print("[ok] nginx started")
    except ControllerError as e:
        raise SystemExit(f"[error] {e}") from e


@app.command(name="test")
def check(dry_run: DryRun = False, verbose: Verbose = False) -> None:
    """Check the configuration with 'nginx -t' without reloading."""
    try:
        build_controller(dry_run, verbose).nginx.validate()
        print("[ok] nginx configuration is valid")
    except ControllerError as e:
        raise SystemExit(f"[error] {e}") from e


@app.command
def reload(dry_run: DryRun = False, verbose: Verbose = False) -> None:
    """Validate with 'nginx -t', then 'nginx -s reload'."""
    try:
        build_controller(dry_run, verbose).reload()
        print("[ok] nginx reloaded")
    except ControllerError as e:
        raise SystemExit(f"[error] {e}") from e
