# src/nginx_controller/commands/_helpers.py
"""Internal helpers shared by CLI commands."""

import logging

from nginx_controller.config import Config
from nginx_controller.controller import NginxController


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_controller(dry_run: bool, verbose: bool) -> NginxController:
    """Configure logging and build a controller from the environment."""
    setup_logging(verbose)
    cfg = Config(local=dry_run)
    cfg.validate()
    return NginxController(cfg)
