# src/nginx_controller/renderer.py

"""Jinja2 rendering of model values into nginx configuration text.

Rendering is pure: the same value always yields the same text, and the
renderer never touches the file system after construction.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any

import jinja2

from .config import DEFAULT_BACKEND_ADDRESS, DEFAULT_BACKEND_PORT
from .errors import RenderError, TemplateError
from .models import IngressConfig, MainConfig

INGRESS_TEMPLATE = "ingress.conf.j2"
MAIN_TEMPLATE = "nginx.conf.j2"

REQUIRED_TEMPLATES = (INGRESS_TEMPLATE, MAIN_TEMPLATE)


class Renderer:
    """Render model values with the controller templates.

    Args:
        template_dir: Directory holding the templates. Defaults to the
            templates shipped with the package.
        conf_d_dir: Directory included by the main configuration.

    Raises:
        TemplateError: If a required template is missing or does not parse.
    """

    def __init__(
        self,
        template_dir: Path | None = None,
        conf_d_dir: Path = Path("/etc/nginx/conf.d"),
    ):
        if template_dir is not None:
            loader: jinja2.BaseLoader = jinja2.FileSystemLoader(str(template_dir))
        else:
            loader = jinja2.PackageLoader("nginx_controller", "templates")
        self.env = jinja2.Environment(
            loader=loader,
            undefined=jinja2.StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.globals["conf_d_dir"] = str(conf_d_dir)
        self.env.globals["default_backend"] = f"{DEFAULT_BACKEND_ADDRESS}:{DEFAULT_BACKEND_PORT}"
        self._templates: dict[str, jinja2.Template] = {}
        for template_id in REQUIRED_TEMPLATES:
            self._get(template_id)

    def _get(self, template_id: str) -> jinja2.Template:
        if template_id not in self._templates:
            try:
                self._templates[template_id] = self.env.get_template(template_id)
            except jinja2.TemplateNotFound as e:
                raise TemplateError(f"Template not found: {template_id}") from e
            except jinja2.TemplateSyntaxError as e:
                raise TemplateError(
                    f"Failed to parse template {template_id}: {e.message} (line {e.lineno})"
                ) from e
        return self._templates[template_id]

    def render(self, template_id: str, value: Any) -> str:
        """Render a dataclass value; its fields become template variables.

        Raises:
            TemplateError: Unknown or unparseable template.
            RenderError: The value does not fit the template.
        """
        template = self._get(template_id)
        if not is_dataclass(value) or isinstance(value, type):
            raise RenderError(
                f"Cannot render {type(value).__name__} with {template_id}: not a model value"
            )
        context = {f.name: getattr(value, f.name) for f in fields(value)}
        try:
            return template.render(context)
        except jinja2.UndefinedError as e:
            raise RenderError(f"Failed to render {template_id}: {e}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise RenderError(f"Failed to render {template_id}: {e}") from e

    def render_ingress(self, unit: IngressConfig) -> str:
        return self.render(INGRESS_TEMPLATE, unit)

    def render_main(self, main: MainConfig) -> str:
        return self.render(MAIN_TEMPLATE, main)
