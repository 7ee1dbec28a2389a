"""Fake collaborators shared by the test suite."""

import dataclasses
from typing import Any

from prettier_edit.config.schema import EditorSettings
from prettier_edit.core.documents import DocumentUri
from prettier_edit.core.exceptions import EngineUnavailableError
from prettier_edit.core.types import FileInfo, OptionsResolution, RangeFormattingOptions
from prettier_edit.orchestrator import FormattingOrchestrator
from prettier_edit.status import StatusBarService


class FakeEngine:
    """Engine double: formats through a lookup table and records calls."""

    def __init__(
        self,
        formatted: dict[str, str] | None = None,
        file_info: FileInfo | None = None,
    ) -> None:
        self.formatted = formatted or {}
        self.file_info = file_info or FileInfo()
        self.format_calls: list[tuple[str, dict[str, Any]]] = []
        self.file_info_calls: list[dict[str, Any]] = []

    def format(self, text: str, options: dict[str, Any]) -> str:
        self.format_calls.append((text, dict(options)))
        return self.formatted.get(text, text)

    async def get_file_info(
        self,
        file_path: str,
        *,
        ignore_path: str | None = None,
        resolve_config: bool = True,
    ) -> FileInfo:
        self.file_info_calls.append(
            {
                "file_path": file_path,
                "ignore_path": ignore_path,
                "resolve_config": resolve_config,
            }
        )
        return self.file_info


class FakeModules:
    """Module provider double; ``modules`` maps module names to handles."""

    def __init__(
        self, engine: FakeEngine | None = None, modules: dict[str, Any] | None = None
    ) -> None:
        self.engine = engine
        self.modules = modules or {}
        self.instance_calls: list[tuple[str | None, bool]] = []
        self.module_calls: list[str] = []
        self.dispose_count = 0

    def get_prettier_instance(
        self, file_path: str | None, warn_if_outdated: bool = False
    ) -> FakeEngine:
        self.instance_calls.append((file_path, warn_if_outdated))
        if self.engine is None:
            raise EngineUnavailableError("no prettier")
        return self.engine

    def get_module_instance(self, file_path: str | None, module_name: str) -> Any:  # noqa: ARG002
        self.module_calls.append(module_name)
        return self.modules.get(module_name)

    def dispose(self) -> None:
        self.dispose_count += 1


class FakeSettings:
    def __init__(self, **values: Any) -> None:
        self.settings = EditorSettings(**values)
        self.requested: list[str | None] = []

    def get_config(self, file_path: str | None = None) -> EditorSettings:
        self.requested.append(file_path)
        return self.settings


class FakeIgnore:
    def __init__(self, ignore_path: str | None = None) -> None:
        self.ignore_path = ignore_path

    def get_ignore_path(self, file_path: str | None, settings: Any = None) -> str | None:  # noqa: ARG002
        return self.ignore_path if file_path else None


class FakeConfig:
    """Config provider double returning fixed options or an error."""

    def __init__(
        self,
        *,
        has_config: bool = False,
        options: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.has_config = has_config
        self.options = options or {}
        self.error = error
        self.option_calls: list[dict[str, Any]] = []
        self.check_calls = 0

    async def check_has_prettier_config(self, file_path: str | None) -> bool:  # noqa: ARG002
        self.check_calls += 1
        return self.has_config

    async def get_prettier_options(
        self,
        file_path: str | None,
        parser: str,
        settings: EditorSettings,
        overrides: Any,
        range_options: RangeFormattingOptions | None = None,
    ) -> OptionsResolution:
        self.option_calls.append(
            {
                "file_path": file_path,
                "parser": parser,
                "settings": settings,
                "overrides": overrides,
                "range_options": range_options,
            }
        )
        if self.error is not None:
            return OptionsResolution.failed(self.error)
        options = {**self.options, "parser": parser}
        if range_options is not None:
            options.update(range_options.to_options())
        return OptionsResolution(options=options)


class FakeNotifier:
    def __init__(self) -> None:
        self.legacy_checks: list[DocumentUri] = []
        self.dispose_count = 0

    def warn_if_legacy_configuration(self, uri: DocumentUri) -> None:
        self.legacy_checks.append(uri)

    def dispose(self) -> None:
        self.dispose_count += 1


class RecordingModule:
    """A lint-integrated module double exposing ``format`` (and call)."""

    def __init__(
        self,
        result: str | None = None,
        error: Exception | None = None,
        asynchronous: bool = False,
    ) -> None:
        self.result = result
        self.error = error
        self.asynchronous = asynchronous
        self.calls: list[dict[str, Any]] = []

    def format(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.asynchronous:
            return self._respond_later()
        return self._respond(kwargs)

    __call__ = format

    def _respond(self, kwargs: dict[str, Any]) -> str:
        if self.error is not None:
            raise self.error
        return self.result if self.result is not None else kwargs["text"]

    async def _respond_later(self) -> str:
        if self.error is not None:
            raise self.error
        return self.result if self.result is not None else self.calls[-1]["text"]


@dataclasses.dataclass
class PipelineHarness:
    orchestrator: FormattingOrchestrator
    engine: FakeEngine | None
    modules: FakeModules
    settings: FakeSettings
    config: FakeConfig
    notifier: FakeNotifier
    status: StatusBarService
    statuses: list[Any]

    @property
    def last_status(self) -> Any:
        return self.status.last_result


