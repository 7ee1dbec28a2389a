"""
Global test configuration: environment isolation, markers and pipeline factories.
"""

from collections.abc import Callable
import logging
import os
from pathlib import Path
from typing import Any

import pytest

from prettier_edit.core.documents import DocumentUri
from prettier_edit.core.types import FormattingRequest, RangeFormattingOptions
from prettier_edit.languages import LanguageResolver
from prettier_edit.orchestrator import FormattingOrchestrator
from prettier_edit.status import StatusBarService
from tests.helpers import (
    FakeConfig,
    FakeEngine,
    FakeIgnore,
    FakeModules,
    FakeNotifier,
    FakeSettings,
    PipelineHarness,
)


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_prettier_edit_env(request, monkeypatch):
    """Ensure a clean PRETTIER_EDIT_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("PRETTIER_EDIT_"):
            monkeypatch.delenv(key, raising=False)
    # Avoid DEBUG toggles affecting telemetry
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def neutral_config_files(request, monkeypatch, tmp_path):
    """Point the home and project settings files at isolated temp paths.

    Prevents reading a developer's real ~/.config/prettier_edit.toml or the
    repository's own pyproject.toml during tests.

    Escape hatch: @pytest.mark.allow_real_config_files.
    """
    if request.node.get_closest_marker("allow_real_config_files"):
        return
    isolated = tmp_path / "settings_isolated"
    isolated.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("PRETTIER_EDIT_CONFIG_HOME", str(isolated / "prettier_edit.toml"))
    monkeypatch.setenv("PRETTIER_EDIT_PYPROJECT_PATH", str(isolated / "pyproject.toml"))


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with fake collaborators",
        "allow_env_pollution: Keep PRETTIER_EDIT_* variables from the real environment",
        "allow_real_config_files: Read the real home and project settings files",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


@pytest.fixture
def make_harness() -> Callable[..., PipelineHarness]:
    """Factory for an orchestrator wired to fake collaborators.

    Usage:
        harness = make_harness(engine=FakeEngine({"a": "b"}), settings={"require_config": True})
    """

    def _make(
        *,
        engine: FakeEngine | None = None,
        modules: dict[str, Any] | None = None,
        settings: dict[str, Any] | None = None,
        config: FakeConfig | None = None,
        ignore_path: str | None = None,
        language_resolver: Any = None,
        **orchestrator_kwargs: Any,
    ) -> PipelineHarness:
        module_provider = FakeModules(engine, modules)
        settings_provider = FakeSettings(**(settings or {}))
        config_provider = config or FakeConfig()
        notifier = FakeNotifier()
        statuses: list[Any] = []
        status = StatusBarService(statuses.append)
        orchestrator = FormattingOrchestrator(
            module_resolver=module_provider,
            language_resolver=language_resolver or LanguageResolver(),
            ignore_resolver=FakeIgnore(ignore_path),
            config_resolver=config_provider,
            settings_provider=settings_provider,
            notification_service=notifier,
            status_bar_service=status,
            **orchestrator_kwargs,
        )
        return PipelineHarness(
            orchestrator=orchestrator,
            engine=engine,
            modules=module_provider,
            settings=settings_provider,
            config=config_provider,
            notifier=notifier,
            status=status,
            statuses=statuses,
        )

    return _make


@pytest.fixture
def make_request(tmp_path) -> Callable[..., FormattingRequest]:
    """Factory for formatting requests on files under ``tmp_path``."""

    def _make(
        text: str = "const x=1",
        language_id: str = "javascript",
        name: str | None = "index.js",
        range_options: RangeFormattingOptions | None = None,
    ) -> FormattingRequest:
        if name is None:
            return FormattingRequest(
                text=text,
                language_id=language_id,
                uri=DocumentUri.untitled("Untitled-1"),
                range_options=range_options,
            )
        path = Path(tmp_path) / name
        return FormattingRequest(
            text=text,
            language_id=language_id,
            uri=DocumentUri.file(path),
            file_path=str(path),
            range_options=range_options,
        )

    return _make
