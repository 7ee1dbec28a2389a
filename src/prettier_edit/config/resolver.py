"""Editor settings resolution with precedence handling.

Settings are merged from all sources according to this precedence order:
Programmatic (host) > Environment > Project file > Home file > Defaults
"""

from collections.abc import Callable, Mapping
import logging
from pathlib import Path
from typing import Any

from prettier_edit.core.exceptions import ConfigFileError

from .audit import SourceTracker
from .env_loader import EnvironmentSettingsLoader
from .file_loader import FileSettingsLoader
from .schema import EditorSettings
from .types import ResolvedSettings

log = logging.getLogger(__name__)

HostSettings = Callable[[str | None], Mapping[str, Any]]


def _schema_defaults() -> dict[str, Any]:
    return {
        name: field.get_default(call_default_factory=True)
        for name, field in EditorSettings.model_fields.items()
    }


class SettingsResolver:
    """Resolves per-document editor settings from every source.

    Args:
        host_settings: Optional callback returning the host editor's settings
            for a document path; applied with programmatic precedence.
    """

    def __init__(self, host_settings: HostSettings | None = None) -> None:
        self.file_loader = FileSettingsLoader()
        self.env_loader = EnvironmentSettingsLoader()
        self._host_settings = host_settings

    def resolve(
        self,
        file_path: str | None = None,
        programmatic: Mapping[str, Any] | None = None,
    ) -> ResolvedSettings:
        """Resolve settings for a document.

        Args:
            file_path: The document being formatted; the project file is
                searched for upward from its directory.
            programmatic: Explicit overrides (highest precedence).

        Returns:
            ResolvedSettings with merged values and source tracking.

        Raises:
            ValueError: If validation fails or the environment is invalid.
            ConfigFileError: If the project settings file is malformed.
        """
        source_tracker = SourceTracker()
        merged: dict[str, Any] = {}

        # Step 1: schema defaults
        for field, value in _schema_defaults().items():
            merged[field] = value
            source_tracker.set_origin(field, "default")

        # Step 2: home file
        try:
            self._apply(merged, self.file_loader.load_home_settings(), source_tracker, "home")
        except ConfigFileError as e:
            # A broken home file must not block formatting in every project
            log.warning("Ignoring home settings: %s", e)

        # Step 3: project file nearest to the document
        start_dir = Path(file_path).parent if file_path else None
        self._apply(
            merged,
            self.file_loader.load_project_settings(start_dir),
            source_tracker,
            "project",
        )

        # Step 4: environment
        self._apply(merged, self.env_loader.load_env_settings(), source_tracker, "env")

        # Step 5: host settings, then explicit overrides
        if self._host_settings is not None:
            self._apply(merged, self._host_settings(file_path), source_tracker, "programmatic")
        if programmatic:
            self._apply(merged, programmatic, source_tracker, "programmatic")

        try:
            settings = EditorSettings(**merged)
        except Exception as e:
            raise ValueError(f"Settings validation failed: {e}") from e

        return ResolvedSettings(settings=settings, origin=source_tracker.get_source_map())

    def get_config(self, file_path: str | None = None) -> EditorSettings:
        return self.resolve(file_path).settings

    @staticmethod
    def _apply(
        merged: dict[str, Any],
        values: Mapping[str, Any],
        tracker: SourceTracker,
        origin: Any,
    ) -> None:
        for field, value in values.items():
            if field in merged:  # Only override known fields
                merged[field] = value
                tracker.set_origin(field, origin)
