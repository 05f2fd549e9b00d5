"""blockcopy plugin infrastructure based on pluggy."""

from __future__ import annotations

from ._markers import ENTRY_POINT_GROUP, PLUGIN_NAMESPACE, hookimpl, hookspec
from .manager import (
    PluginRegistrationError,
    get_plugin_manager,
    load_format_contributions,
    reset_plugin_manager_cache,
)
from .types import Converter, DocumentRenderer, FormatContribution

__all__ = [
    "Converter",
    "DocumentRenderer",
    "ENTRY_POINT_GROUP",
    "FormatContribution",
    "PLUGIN_NAMESPACE",
    "PluginRegistrationError",
    "get_plugin_manager",
    "hookimpl",
    "hookspec",
    "load_format_contributions",
    "reset_plugin_manager_cache",
]
