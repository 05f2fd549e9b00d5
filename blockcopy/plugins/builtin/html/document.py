"""Standalone HTML document rendering with Jinja2."""

from __future__ import annotations

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    TemplateNotFound,
    select_autoescape,
)
from markupsafe import Markup

from blockcopy.errors import ExportError

from .config import (
    DOCUMENT_TEMPLATE,
    TEMPLATE_DIRNAME,
    TEMPLATE_PACKAGE,
    HtmlPluginConfig,
)


class HtmlDocumentRenderer:
    """Wrap converted HTML fragments in a complete page."""

    def __init__(self, config: HtmlPluginConfig) -> None:
        self.config = config
        loader: BaseLoader
        if config.templates_dir is not None:
            loader = FileSystemLoader(str(config.templates_dir))
        else:
            loader = PackageLoader(TEMPLATE_PACKAGE, TEMPLATE_DIRNAME)
        self._env = Environment(
            loader=loader,
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def __call__(self, content: str, *, title: str) -> str:
        try:
            template = self._env.get_template(DOCUMENT_TEMPLATE)
        except TemplateNotFound as exc:
            location = self.config.templates_dir or TEMPLATE_PACKAGE
            raise ExportError(
                f"Template '{exc.name}' not found in {location}"
            ) from exc

        # the fragment is already escaped by the generator
        return template.render(
            title=title,
            lang=self.config.lang,
            body_html=Markup(content),
        )


__all__ = ["HtmlDocumentRenderer"]
