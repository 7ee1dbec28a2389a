"""Contracts for the collaborators the formatting core depends on.

The orchestrator only talks to these protocols; the package ships default
implementations, and hosts or tests are free to substitute their own.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from prettier_edit.config.schema import EditorSettings
    from prettier_edit.core.documents import DocumentUri
    from prettier_edit.core.types import (
        ConfigOverrides,
        DocumentSelector,
        FileInfo,
        OptionsResolution,
        RangeFormattingOptions,
        WorkspaceFolder,
    )
    from prettier_edit.status import FormattingResult


@runtime_checkable
class Disposable(Protocol):
    def dispose(self) -> None: ...


class EngineHandle(Protocol):
    """A loaded formatting engine."""

    def format(self, text: str, options: dict[str, Any]) -> str: ...

    async def get_file_info(
        self,
        file_path: str,
        *,
        ignore_path: str | None = None,
        resolve_config: bool = True,
    ) -> FileInfo: ...


class ModuleProvider(Protocol):
    def get_prettier_instance(
        self, file_path: str | None, warn_if_outdated: bool = False
    ) -> EngineHandle: ...

    def get_module_instance(self, file_path: str | None, module_name: str) -> Any | None: ...

    def dispose(self) -> None: ...


class CapabilityResolver(Protocol):
    def all_enabled_languages(self, scope_path: str | None = None) -> Sequence[str]: ...

    def range_supported_languages(self) -> Sequence[str]: ...

    def get_parsers_from_language_id(
        self, file_path: str | None, language_id: str
    ) -> Sequence[str]: ...

    def does_language_support_eslint(self, language_id: str) -> bool: ...

    def does_parser_support_stylelint(self, parser: str) -> bool: ...


class IgnorePathResolver(Protocol):
    def get_ignore_path(
        self, file_path: str | None, settings: EditorSettings | None = None
    ) -> str | None: ...


class ConfigProvider(Protocol):
    async def check_has_prettier_config(self, file_path: str | None) -> bool: ...

    async def get_prettier_options(
        self,
        file_path: str | None,
        parser: str,
        settings: EditorSettings,
        overrides: ConfigOverrides,
        range_options: RangeFormattingOptions | None = None,
    ) -> OptionsResolution: ...


class SettingsProvider(Protocol):
    def get_config(self, file_path: str | None = None) -> EditorSettings: ...


class StatusReporter(Protocol):
    def update_status_bar(self, result: FormattingResult) -> None: ...


class Notifier(Protocol):
    def warn_if_legacy_configuration(self, uri: DocumentUri) -> None: ...

    def dispose(self) -> None: ...


class ConfigurationChangeEvent(Protocol):
    def affects_configuration(self, section: str) -> bool: ...


class FileSystemWatcher(Disposable, Protocol):
    def on_did_change(self, listener: Callable[[str], None]) -> Disposable: ...

    def on_did_create(self, listener: Callable[[str], None]) -> Disposable: ...

    def on_did_delete(self, listener: Callable[[str], None]) -> Disposable: ...


class EditorHost(Protocol):
    """The host editor's document, registration and event APIs."""

    @property
    def workspace_folders(self) -> Sequence[WorkspaceFolder] | None: ...

    def register_document_formatting_edit_provider(
        self, selector: DocumentSelector, provider: Any
    ) -> Disposable: ...

    def register_document_range_formatting_edit_provider(
        self, selector: DocumentSelector, provider: Any
    ) -> Disposable: ...

    def create_file_system_watcher(self, glob_pattern: str) -> FileSystemWatcher: ...

    def on_did_change_configuration(
        self, listener: Callable[[ConfigurationChangeEvent], None]
    ) -> Disposable: ...

    def on_did_change_workspace_folders(
        self, listener: Callable[[Any], None]
    ) -> Disposable: ...
