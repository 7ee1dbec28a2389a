"""Formatting options resolution from prettier configuration files.

Configuration is discovered by walking up from the formatted file, the way
the engine itself does. JavaScript configuration files are recognized but
not evaluated here; the engine loads them when it formats the file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from prettier_edit.core.exceptions import ConfigFileError, OptionsResolutionError
from prettier_edit.core.types import (
    ConfigOverrides,
    OptionsResolution,
    RangeFormattingOptions,
)

from .editorconfig import path_matches, resolve_editorconfig_options

if TYPE_CHECKING:
    from .schema import EditorSettings

log = logging.getLogger(__name__)

# Basenames that change how files are formatted; watched for re-registration
PRETTIER_CONFIG_FILES = (
    ".prettierrc",
    ".prettierrc.json",
    ".prettierrc.yaml",
    ".prettierrc.yml",
    ".prettierrc.js",
    "package.json",
    "prettier.config.js",
    ".editorconfig",
)

# Lookup order within one directory
CONFIG_SEARCH_ORDER = (
    "package.json",
    ".prettierrc",
    ".prettierrc.json",
    ".prettierrc.yaml",
    ".prettierrc.yml",
    ".prettierrc.js",
    "prettier.config.js",
)

JS_CONFIG_SUFFIXES = (".js", ".cjs", ".mjs")


def _package_json_config(path: Path) -> Any:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigFileError(path, f"Failed to parse JSON: {e}", cause=e) from e
    return data.get("prettier") if isinstance(data, dict) else None


def find_config_file(file_path: str | Path) -> Path | None:
    """Return the nearest prettier configuration file above ``file_path``."""
    for directory in Path(file_path).resolve().parents:
        for name in CONFIG_SEARCH_ORDER:
            candidate = directory / name
            if not candidate.is_file():
                continue
            if name == "package.json":
                try:
                    if _package_json_config(candidate) is None:
                        continue
                except ConfigFileError as e:
                    log.debug("Skipping unreadable %s: %s", candidate, e)
                    continue
            return candidate
    return None


def load_config_file(path: Path) -> dict[str, Any] | None:
    """Load options from a configuration file.

    Returns:
        The options mapping, or None for JavaScript files left to the engine.

    Raises:
        ConfigFileError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigFileError(path, "Configuration file not found")
    if path.suffix in JS_CONFIG_SUFFIXES:
        log.info("Configuration %s is evaluated by the engine", path)
        return None

    if path.name == "package.json":
        data = _package_json_config(path)
        if isinstance(data, str):
            log.info("Shared configuration '%s' is resolved by the engine", data)
            return None
    else:
        try:
            text = path.read_text(encoding="utf-8")
            # YAML is a superset of the JSON used in .prettierrc files
            data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigFileError(path, f"Failed to parse: {e}", cause=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(path, "Configuration must be a mapping of options")
    return data


def apply_overrides(
    config: dict[str, Any], config_path: Path, file_path: str | None
) -> dict[str, Any]:
    """Flatten the ``overrides`` list of a config for one file."""
    options = {k: v for k, v in config.items() if k != "overrides"}
    if not file_path:
        return options
    try:
        relative = Path(file_path).resolve().relative_to(config_path.parent.resolve())
    except ValueError:
        return options
    target = relative.as_posix()

    for override in config.get("overrides") or []:
        files = override.get("files", [])
        excluded = override.get("excludeFiles", [])
        files = [files] if isinstance(files, str) else files
        excluded = [excluded] if isinstance(excluded, str) else excluded
        if any(path_matches(p, target) for p in files) and not any(
            path_matches(p, target) for p in excluded
        ):
            options.update(override.get("options") or {})
    return options


class PrettierConfigResolver:
    """Resolves the formatting options that apply to a file."""

    async def check_has_prettier_config(self, file_path: str | None) -> bool:
        if not file_path:
            return False
        config_file = find_config_file(file_path)
        log.debug("Config file for %s: %s", file_path, config_file)
        return config_file is not None

    async def get_prettier_options(
        self,
        file_path: str | None,
        parser: str,
        settings: EditorSettings,
        overrides: ConfigOverrides,
        range_options: RangeFormattingOptions | None = None,
    ) -> OptionsResolution:
        try:
            config_options = self._resolve_config(file_path, overrides)
        except ConfigFileError as e:
            return OptionsResolution.failed(OptionsResolutionError(str(e), cause=e))

        fallback = config_options is None
        if fallback:
            log.info(
                "No local configuration (i.e. .prettierrc or .editorconfig) "
                "detected, falling back to editor settings"
            )
        else:
            log.info(
                "Detected local configuration (i.e. .prettierrc or .editorconfig), "
                "editor settings will not be used"
            )

        options: dict[str, Any] = {
            **(settings.to_prettier_options() if fallback else {}),
            **(config_options or {}),
            "parser": parser,
        }
        if file_path:
            options["filepath"] = file_path
        if range_options is not None:
            options.update(range_options.to_options())
        return OptionsResolution(options=options)

    def _resolve_config(
        self, file_path: str | None, overrides: ConfigOverrides
    ) -> dict[str, Any] | None:
        file_options: dict[str, Any] | None = None
        config_path: Path | None = None
        if overrides.config:
            config_path = Path(overrides.config)
        elif file_path:
            config_path = find_config_file(file_path)

        if config_path is not None:
            loaded = load_config_file(config_path)
            # A JavaScript config still counts as local configuration
            file_options = apply_overrides(loaded or {}, config_path, file_path)

        editor_options: dict[str, Any] = {}
        if overrides.editorconfig and file_path:
            editor_options = resolve_editorconfig_options(file_path)

        if file_options is None and not editor_options:
            return None
        return {**editor_options, **(file_options or {})}
