"""File-based settings loading.

Settings can live in a home-level file (``~/.config/prettier_edit.toml``) and
in the ``[tool.prettier_edit]`` table of the nearest ``pyproject.toml`` above
the document being formatted.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

from prettier_edit.core.exceptions import ConfigFileError

HOME_CONFIG_ENV = "PRETTIER_EDIT_CONFIG_HOME"
PYPROJECT_ENV = "PRETTIER_EDIT_PYPROJECT_PATH"
TOOL_TABLE = "prettier_edit"


class FileSettingsLoader:
    """Loads settings tables from TOML files."""

    def load_project_settings(self, start_dir: Path | None = None) -> dict[str, Any]:
        """Load ``[tool.prettier_edit]`` from the nearest pyproject.toml.

        Args:
            start_dir: Directory to start searching from. If None, uses the
                current directory.

        Returns:
            The settings table, or an empty dict when there is no file or table.

        Raises:
            ConfigFileError: If the file exists but cannot be parsed.
        """
        pyproject_path = self._find_pyproject_toml(start_dir)
        if pyproject_path is None:
            return {}
        data = self._read_toml(pyproject_path)
        table = data.get("tool", {}).get(TOOL_TABLE, {})
        if not isinstance(table, dict):
            raise ConfigFileError(
                pyproject_path, f"[tool.{TOOL_TABLE}] must be a table"
            )
        return dict(table)

    def load_home_settings(self) -> dict[str, Any]:
        """Load the home-level settings file, or an empty dict if absent.

        Raises:
            ConfigFileError: If the file exists but cannot be parsed.
        """
        home_path = self.home_settings_path()
        if not home_path.exists():
            return {}
        return self._read_toml(home_path)

    def home_settings_path(self) -> Path:
        override = os.getenv(HOME_CONFIG_ENV)
        if override:
            return Path(override)
        return Path.home() / ".config" / "prettier_edit.toml"

    def _read_toml(self, path: Path) -> dict[str, Any]:
        try:
            with path.open(mode="rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e

    def _find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        override = os.getenv(PYPROJECT_ENV)
        if override:
            path = Path(override)
            return path if path.exists() else None

        current = Path(start_dir if start_dir is not None else Path.cwd()).resolve()
        while True:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            if current == current.parent:
                return None
            current = current.parent
