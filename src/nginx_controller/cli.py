# src/nginx_controller/cli.py

"""
Render nginx configuration and reload nginx safely.

Usage:

    nginx-controller cert put site1 --cert site1.crt --key site1.key
    nginx-controller ingress apply default-site1 site1.yaml
    nginx-controller ingress render site1.yaml
    nginx-controller ingress delete default-site1
    nginx-controller nginx start
    nginx-controller nginx reload

    # Preview without touching /etc/nginx or running nginx:
    $ nginx-controller ingress apply default-site1 site1.yaml --dry-run
"""

import cyclopts

from . import __version__
from .commands import cert, ingress, nginx

app = cyclopts.App(
    name="nginx-controller",
    help="Render nginx configuration and reload nginx safely",
    version=__version__,
)

# Register topic sub-apps
app.command(ingress.app)
app.command(cert.app)
app.command(nginx.app)


@app.default
def _default():
    """Show help when no command is specified."""
    app.help_print([])


def main():
    app()


if __name__ == "__main__":
    main()
