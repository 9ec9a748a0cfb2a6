"""Application export – Jinja2 template rendering for PDF and print views."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Protocol

import jinja2

from table_export.kernel.errors import EncodingError

__all__ = ["BUNDLED_TEMPLATES_DIR", "Jinja2TemplateRenderer", "TemplateRenderer"]

BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "templates"


class TemplateRenderer(Protocol):
    """Port: render a named template with a context mapping to markup."""

    def render(self, template_name: str, context: Mapping[str, Any]) -> str: ...


class Jinja2TemplateRenderer:
    """Renders ``{template_name}.html.j2`` templates.

    Lookup order: *templates_dir* (when given) first, then the bundled
    ``pdf`` and ``print`` templates, so an application can override either
    by dropping a file with the same name into its own directory.
    """

    suffix = ".html.j2"

    def __init__(self, templates_dir: str | Path | None = None) -> None:
        search_path = [str(BUNDLED_TEMPLATES_DIR)]
        if templates_dir:
            search_path.insert(0, str(templates_dir))
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(search_path),
            autoescape=jinja2.select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @property
    def environment(self) -> jinja2.Environment:
        return self._env

    def render(self, template_name: str, context: Mapping[str, Any]) -> str:
        try:
            template = self._env.get_template(f"{template_name}{self.suffix}")
            return template.render(**context)
        except jinja2.TemplateError as exc:
            raise EncodingError(
                f"Failed to render template '{template_name}': {exc}",
                cause=exc,
            ) from exc
