"""Configuration for the prettier editor integration.

Two kinds of configuration are involved:
- Editor settings (EditorSettings): how the integration behaves, resolved
  per document from defaults, files, environment and the host.
- Formatting options: what the engine is told, resolved from prettier
  configuration files and .editorconfig (PrettierConfigResolver).
"""

from .audit import SourceTracker, summarize_origins
from .editorconfig import resolve_editorconfig_options
from .file_loader import FileSettingsLoader
from .prettierrc import (
    PRETTIER_CONFIG_FILES,
    PrettierConfigResolver,
    find_config_file,
    load_config_file,
)
from .resolver import SettingsResolver
from .schema import EditorSettings
from .types import ResolvedSettings, SettingsOrigin, SourceMap

__all__ = [  # noqa: RUF022
    "EditorSettings",
    "ResolvedSettings",
    "SettingsResolver",
    "SettingsOrigin",
    "SourceMap",
    "SourceTracker",
    "summarize_origins",
    "FileSettingsLoader",
    "PRETTIER_CONFIG_FILES",
    "PrettierConfigResolver",
    "find_config_file",
    "load_config_file",
    "resolve_editorconfig_options",
]
