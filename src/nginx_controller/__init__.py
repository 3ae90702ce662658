# src/nginx_controller/__init__.py

"""Render, persist and hot-reload nginx configuration for a routing controller."""

__version__ = "0.1.0"
