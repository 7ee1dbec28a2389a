"""Ignore-file resolution."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from prettier_edit.utils import find_workspace_folder

if TYPE_CHECKING:
    from prettier_edit.config.schema import EditorSettings
    from prettier_edit.core.types import WorkspaceFolder

log = logging.getLogger(__name__)


class IgnoreResolver:
    """Finds the ignore file that applies to a document.

    A relative ``ignore_path`` setting is resolved against the workspace folder
    containing the document; outside any workspace the nearest directory
    above the document holding such a file wins.
    """

    def __init__(
        self,
        workspace_folders: Callable[[], Sequence[WorkspaceFolder] | None] = lambda: None,
    ) -> None:
        self._workspace_folders = workspace_folders

    def get_ignore_path(
        self, file_path: str | None, settings: EditorSettings | None = None
    ) -> str | None:
        ignore_setting = settings.ignore_path if settings else ".prettierignore"
        if not file_path or not ignore_setting:
            return None

        configured = Path(ignore_setting).expanduser()
        if configured.is_absolute():
            return str(configured)

        folder = find_workspace_folder(file_path, self._workspace_folders())
        if folder is not None:
            return str(folder.path / configured)

        for directory in Path(file_path).resolve().parents:
            candidate = directory / configured
            if candidate.is_file():
                return str(candidate)
        log.debug("No ignore file %s found for %s", ignore_setting, file_path)
        return None
