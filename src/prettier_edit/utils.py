"""Path helpers shared by the resolvers."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prettier_edit.core.types import WorkspaceFolder


def find_workspace_folder(
    file_path: str | None, folders: Sequence[WorkspaceFolder] | None
) -> WorkspaceFolder | None:
    """Return the innermost workspace folder containing ``file_path``."""
    if not file_path or not folders:
        return None
    path = PurePath(file_path)
    containing = [f for f in folders if path.is_relative_to(f.path)]
    if not containing:
        return None
    return max(containing, key=lambda f: len(f.path.parts))


def get_workspace_relative_path(
    file_path: str | None,
    path_for_file: str,
    folders: Sequence[WorkspaceFolder] | None,
) -> str | None:
    """Resolve a configured path for a document.

    Absolute (and ``~``) paths are returned as is. Relative paths are joined
    to the workspace folder containing the document; None when there is none.
    """
    configured = Path(path_for_file).expanduser()
    if configured.is_absolute():
        return str(configured)
    folder = find_workspace_folder(file_path, folders)
    if folder is None:
        return None
    return str(folder.path / configured)
