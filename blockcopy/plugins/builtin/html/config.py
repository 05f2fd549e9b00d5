"""Configuration helpers for the built-in HTML format plugin."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from blockcopy.config import DEFAULT_CONFIG_DIR

if TYPE_CHECKING:
    from blockcopy.config import BlockcopyConfig

PLUGIN_ID = "blockcopy-builtin-html"

TEMPLATE_PACKAGE = "blockcopy.plugins.builtin.html"
TEMPLATE_DIRNAME = "templates"
DOCUMENT_TEMPLATE = "document.html"
DEFAULT_LANG = "en"


@dataclass(frozen=True)
class HtmlPluginConfig:
    """Resolved configuration data for the HTML format plugin."""

    lang: str = DEFAULT_LANG
    templates_dir: Path | None = None


def resolve_plugin_config(config: "BlockcopyConfig") -> HtmlPluginConfig:
    """Convert configuration data into plugin configuration.

    ``templates_dir`` may be absolute or relative to the configuration file.
    When unset, the template bundled with the package is used.
    """

    config_dir = (
        config.source_path.parent
        if config.source_path is not None
        else DEFAULT_CONFIG_DIR
    )

    raw_settings = config.plugins.get(PLUGIN_ID, {})

    lang = str(raw_settings.get("lang", DEFAULT_LANG)).strip() or DEFAULT_LANG

    templates_dir_raw = raw_settings.get("templates_dir")
    if templates_dir_raw is None:
        templates_dir = None
    else:
        dir_path = Path(str(templates_dir_raw)).expanduser()
        if not dir_path.is_absolute():
            dir_path = (config_dir / dir_path).resolve()
        templates_dir = dir_path

    return HtmlPluginConfig(lang=lang, templates_dir=templates_dir)


__all__ = [
    "DEFAULT_LANG",
    "DOCUMENT_TEMPLATE",
    "HtmlPluginConfig",
    "PLUGIN_ID",
    "TEMPLATE_DIRNAME",
    "TEMPLATE_PACKAGE",
    "resolve_plugin_config",
]
