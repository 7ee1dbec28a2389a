"""Provider registration lifecycle."""

from collections.abc import Callable
from typing import Any

import pytest

from prettier_edit.core.documents import DocumentUri, TextDocument
from prettier_edit.core.types import WorkspaceFolder
from prettier_edit.edit_provider import PrettierEditProvider
from prettier_edit.languages import LanguageResolver
from prettier_edit.service import PrettierEditService, RegistrationSlot, create_service
from tests.helpers import FakeEngine, FakeModules, FakeNotifier, FakeSettings

pytestmark = pytest.mark.unit


class Handle:
    def __init__(self, label: str, log: list[str]) -> None:
        self.label = label
        self.log = log
        self.disposed = False

    def dispose(self) -> None:
        self.disposed = True
        self.log.append(f"dispose:{self.label}")


class FakeWatcher(Handle):
    def __init__(self, glob_pattern: str, log: list[str]) -> None:
        super().__init__(glob_pattern, log)
        self.listeners: dict[str, Callable[..., Any]] = {}

    def on_did_change(self, listener):
        self.listeners["change"] = listener
        return Handle("change", self.log)

    def on_did_create(self, listener):
        self.listeners["create"] = listener
        return Handle("create", self.log)

    def on_did_delete(self, listener):
        self.listeners["delete"] = listener
        return Handle("delete", self.log)


class ConfigChange:
    def __init__(self, section: str) -> None:
        self.section = section

    def affects_configuration(self, section: str) -> bool:
        return section == self.section


class FakeHost:
    def __init__(self, folders: list[WorkspaceFolder] | None = None) -> None:
        self.workspace_folders = folders
        self.log: list[str] = []
        self.registrations: list[tuple[str, Any, Any, Handle]] = []
        self.watchers: dict[str, FakeWatcher] = {}
        self.configuration_listener: Callable[..., Any] | None = None
        self.folder_listener: Callable[..., Any] | None = None
        self._count = 0

    def _register(self, kind, selector, provider) -> Handle:
        self._count += 1
        handle = Handle(f"{kind}{self._count}", self.log)
        self.log.append(f"register:{handle.label}")
        self.registrations.append((kind, selector, provider, handle))
        return handle

    def register_document_formatting_edit_provider(self, selector, provider):
        return self._register("full", selector, provider)

    def register_document_range_formatting_edit_provider(self, selector, provider):
        return self._register("range", selector, provider)

    def create_file_system_watcher(self, glob_pattern):
        watcher = FakeWatcher(glob_pattern, self.log)
        self.watchers[glob_pattern] = watcher
        return watcher

    def on_did_change_configuration(self, listener):
        self.configuration_listener = listener
        return Handle("configuration", self.log)

    def on_did_change_workspace_folders(self, listener):
        self.folder_listener = listener
        return Handle("folders", self.log)

    def active(self) -> list[tuple[str, Any, Any, Handle]]:
        return [r for r in self.registrations if not r[3].disposed]


@pytest.fixture
def host() -> FakeHost:
    return FakeHost([WorkspaceFolder.at("/work/app")])


@pytest.fixture
def service_parts(host, make_harness):
    harness = make_harness(engine=FakeEngine({"a=1": "a = 1;\n"}))
    modules = FakeModules()
    notifier = FakeNotifier()
    service = PrettierEditService(
        host,
        harness.orchestrator,
        module_resolver=modules,
        language_resolver=LanguageResolver(),
        settings_provider=FakeSettings(disable_languages=["markdown"]),
        notification_service=notifier,
    )
    return service, modules, notifier


# --- RegistrationSlot ---


def test_slot_disposes_previous_handles_before_registering_new_ones():
    log: list[str] = []
    slot = RegistrationSlot()

    slot.acquire(lambda: (Handle("a", log), Handle("b", log)))

    def second():
        log.append("register:c")
        return (Handle("c", log),)

    slot.acquire(second)

    assert log == ["dispose:a", "dispose:b", "register:c"]
    assert slot.active


def test_slot_release_is_safe_when_empty():
    slot = RegistrationSlot()
    slot.release()
    slot.release()
    assert not slot.active


def test_slot_disposes_handles_created_before_a_failed_registration():
    log: list[str] = []
    slot = RegistrationSlot()

    def register():
        yield Handle("range", log)
        raise RuntimeError("full provider rejected")

    with pytest.raises(RuntimeError, match="rejected"):
        slot.acquire(register)

    assert log == ["dispose:range"]
    assert not slot.active


def test_slot_release_disposes_every_handle_when_one_raises():
    log: list[str] = []

    class Broken(Handle):
        def dispose(self) -> None:
            super().dispose()
            raise RuntimeError("dispose failed")

    slot = RegistrationSlot()
    slot.acquire(lambda: (Broken("a", log), Handle("b", log)))

    with pytest.raises(RuntimeError, match="dispose failed"):
        slot.release()

    assert log == ["dispose:a", "dispose:b"]
    assert not slot.active


# --- register_formatter ---


def test_register_formatter_registers_one_range_and_one_full_provider(host, service_parts):
    service, _, _ = service_parts

    selectors = service.register_formatter()

    kinds = [r[0] for r in host.active()]
    assert kinds == ["range", "full"]
    (_, range_selector, range_provider, _), (_, full_selector, full_provider, _) = host.active()
    assert range_provider is full_provider
    assert isinstance(full_provider, PrettierEditProvider)
    assert full_selector == selectors.language_selector
    assert range_selector == selectors.range_language_selector
    assert "markdown" not in {f.language for f in full_selector}
    assert service.is_registered


def test_failed_full_registration_leaves_no_range_provider_behind(host, service_parts):
    service, _, _ = service_parts

    def reject(selector, provider):
        raise RuntimeError("host refused the provider")

    host.register_document_formatting_edit_provider = reject

    with pytest.raises(RuntimeError, match="refused"):
        service.register_formatter()

    assert [r[0] for r in host.registrations] == ["range"]
    assert host.active() == []
    assert not service.is_registered


def test_register_formatter_is_idempotent(host, service_parts):
    service, modules, notifier = service_parts

    service.register_formatter()
    service.register_formatter()
    service.register_formatter()

    assert len(host.registrations) == 6
    assert len(host.active()) == 2
    assert modules.dispose_count == 3
    assert notifier.dispose_count == 3
    # Old providers are disposed before the next pair is registered
    assert host.log[:6] == [
        "register:range1",
        "register:full2",
        "dispose:range1",
        "dispose:full2",
        "register:range3",
        "register:full4",
    ]


def test_dispose_releases_everything_and_is_safe_when_unregistered(host, service_parts):
    service, modules, notifier = service_parts

    service.dispose()
    service.register_formatter()
    service.dispose()

    assert host.active() == []
    assert not service.is_registered
    assert modules.dispose_count == 3
    assert notifier.dispose_count == 3


@pytest.mark.asyncio
async def test_registered_provider_formats_through_the_orchestrator(host, service_parts):
    service, _, _ = service_parts
    service.register_formatter()
    provider = host.active()[1][2]

    edits = await provider.provide_document_formatting_edits(
        TextDocument(DocumentUri.file("/work/app/a.js"), "javascript", "a=1")
    )

    assert edits[0].new_text == "a = 1;\n"


# --- register_disposables ---


def test_register_disposables_watches_manifests_settings_and_config_files(host, service_parts):
    service, _, _ = service_parts

    disposables = service.register_disposables()

    assert len(disposables) == 4
    assert set(host.watchers) == {
        "**/package.json",
        "**/{.prettierrc,.prettierrc.json,.prettierrc.yaml,.prettierrc.yml,"
        ".prettierrc.js,package.json,prettier.config.js,.editorconfig}",
    }
    for watcher in host.watchers.values():
        assert set(watcher.listeners) == {"change", "create", "delete"}


@pytest.mark.parametrize("event", ["change", "create", "delete"])
def test_file_events_reregister(host, service_parts, event):
    service, _, _ = service_parts
    service.register_disposables()

    host.watchers["**/package.json"].listeners[event]("file:///work/app/package.json")

    assert len(host.active()) == 2
    assert service.is_registered


def test_configuration_changes_reregister_only_for_own_section(host, service_parts):
    service, _, _ = service_parts
    service.register_disposables()

    host.configuration_listener(ConfigChange("editor"))
    assert host.registrations == []

    host.configuration_listener(ConfigChange("prettier"))
    assert len(host.active()) == 2


def test_workspace_folder_changes_recompute_selectors(host, service_parts):
    service, _, _ = service_parts
    service.register_disposables()
    service.register_formatter()

    host.workspace_folders = [WorkspaceFolder.at("/work/app"), WorkspaceFolder.at("/work/lib")]
    host.folder_listener(object())

    full_selector = host.active()[1][1]
    assert {f.pattern.base for f in full_selector if f.pattern} == {
        WorkspaceFolder.at("/work/app").path,
        WorkspaceFolder.at("/work/lib").path,
    }


def test_create_service_wires_default_collaborators(host):
    service = create_service(host)

    assert service.orchestrator.stage_names[0] == "EngineLoader"
    service.register_formatter()
    assert len(host.active()) == 2
    service.dispose()
    assert host.active() == []
