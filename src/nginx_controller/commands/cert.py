# src/nginx_controller/commands/cert.py
"""Certificate bundle commands."""

from pathlib import Path
from typing import Annotated

import cyclopts

from ..errors import ControllerError
from ._helpers import build_controller
from .common import DryRun, Verbose

app = cyclopts.App(name="cert", help="Manage TLS certificate bundles")


@app.command
def put(
    name: Annotated[str, cyclopts.Parameter(help="Bundle name (ssl/NAME.pem)")],
    cert: Annotated[
        Path, cyclopts.Parameter(name=["--cert", "-c"], help="PEM certificate file")
    ],
    key: Annotated[
        Path, cyclopts.Parameter(name=["--key", "-k"], help="PEM private key file")
    ],
    dry_run: DryRun = False,
    verbose: Verbose = False,
) -> None:
    """Write KEY and CERT into ssl/NAME.pem, replacing any previous bundle."""
    try:
        certificate = cert.read_text()
        private_key = key.read_text()
    except OSError as e:
        raise SystemExit(f"[error] {e}") from e

    try:
        controller = build_controller(dry_run, verbose)
        path = controller.add_or_update_certificate(name, certificate, private_key)
        print(f"[ok] Wrote {path}")
    except ControllerError as e:
        raise SystemExit(f"[error] {e}") from e
