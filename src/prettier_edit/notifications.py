"""One-time user notifications.

Warnings are shown at most once per key until the service is disposed, so a
misconfigured workspace does not nag on every format request.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from prettier_edit.core.documents import DocumentUri
    from prettier_edit.core.protocols import SettingsProvider

log = logging.getLogger(__name__)

Level = Literal["info", "warning", "error"]

LEGACY_SETTINGS = {
    "eslint_integration": "prettier-eslint",
    "tslint_integration": "prettier-tslint",
    "stylelint_integration": "prettier-stylelint",
}

LEGACY_CONFIG_MESSAGE = (
    "Your project is configured with legacy integration settings ({settings}). "
    "These settings are deprecated; install the matching module ({modules}) in "
    "your project instead and it will be used automatically."
)
OUTDATED_PRETTIER_VERSION_MESSAGE = (
    "Your project is configured to use an outdated version of prettier ({version}) "
    "that cannot be used. Upgrade to prettier {minimum} or later."
)
FALLBACK_PRETTIER_MESSAGE = (
    "No local prettier was found for {file_path}; using the prettier at {module_path}."
)


def _log_sink(level: Level, message: str) -> None:
    getattr(log, level)(message)


class NotificationService:
    """Shows one-time messages through a host-provided sink."""

    def __init__(
        self,
        settings_provider: SettingsProvider,
        notify: Callable[[Level, str], None] | None = None,
    ) -> None:
        self._settings_provider = settings_provider
        self._notify = notify or _log_sink
        self._shown: set[str] = set()

    def _show_once(self, key: str, level: Level, message: str) -> bool:
        if key in self._shown:
            return False
        self._shown.add(key)
        self._notify(level, message)
        return True

    def warn_if_legacy_configuration(self, uri: DocumentUri) -> None:
        settings = self._settings_provider.get_config(uri.fs_path)
        enabled = [name for name in LEGACY_SETTINGS if getattr(settings, name, False)]
        if not enabled:
            return
        self._show_once(
            "legacy-configuration",
            "warning",
            LEGACY_CONFIG_MESSAGE.format(
                settings=", ".join(enabled),
                modules=", ".join(LEGACY_SETTINGS[name] for name in enabled),
            ),
        )

    def warn_outdated_prettier_version(
        self, module_path: str, version: str, minimum: str
    ) -> None:
        self._show_once(
            f"outdated:{module_path}",
            "error",
            OUTDATED_PRETTIER_VERSION_MESSAGE.format(version=version, minimum=minimum),
        )

    def warn_fallback_prettier(self, file_path: str | None, module_path: str) -> None:
        self._show_once(
            f"fallback:{module_path}",
            "info",
            FALLBACK_PRETTIER_MESSAGE.format(
                file_path=file_path or "untitled documents", module_path=module_path
            ),
        )

    def dispose(self) -> None:
        self._shown.clear()
