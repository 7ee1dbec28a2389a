"""Formatting backends, tried in priority order.

Each backend decides whether it applies to a request and whether its module
can be loaded; the first one that does wins. The base engine always applies,
so it closes the chain.
"""

from __future__ import annotations

from collections.abc import Sequence
import dataclasses
import logging
from typing import TYPE_CHECKING, Any, ClassVar, Protocol

from prettier_edit.core.exceptions import InvariantViolationError

if TYPE_CHECKING:
    from prettier_edit.core.protocols import CapabilityResolver, ModuleProvider
    from prettier_edit.core.types import ConfiguredCommand

    from .safe_executor import FormatCall

log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class BackendChoice:
    name: str
    call: FormatCall


class FormatterBackend(Protocol):
    name: str

    def select(self, command: ConfiguredCommand) -> BackendChoice | None: ...


class LintModuleBackend:
    """A lint-integrated formatter module, used only when it can be loaded."""

    name: ClassVar[str]

    def __init__(
        self, module_resolver: ModuleProvider, language_resolver: CapabilityResolver
    ) -> None:
        self._modules = module_resolver
        self._languages = language_resolver

    def applies_to(self, command: ConfiguredCommand) -> bool:
        raise NotImplementedError

    def bind(self, module: Any, command: ConfiguredCommand) -> FormatCall:
        raise NotImplementedError

    def select(self, command: ConfiguredCommand) -> BackendChoice | None:
        if not self.applies_to(command):
            return None
        module = self._modules.get_module_instance(command.request.file_path, self.name)
        if module is None:
            return None
        log.info("Formatting using '%s'", self.name)
        return BackendChoice(self.name, self.bind(module, command))


class TslintBackend(LintModuleBackend):
    name = "prettier-tslint"

    def applies_to(self, command: ConfiguredCommand) -> bool:
        return command.parser == "typescript"

    def bind(self, module: Any, command: ConfiguredCommand) -> FormatCall:
        return lambda: module.format(
            fallback_prettier_options=dict(command.options),
            file_path=command.request.file_path,
            text=command.request.text,
        )


class EslintBackend(LintModuleBackend):
    name = "prettier-eslint"

    def applies_to(self, command: ConfiguredCommand) -> bool:
        return self._languages.does_language_support_eslint(command.request.language_id)

    def bind(self, module: Any, command: ConfiguredCommand) -> FormatCall:
        # The module itself is the format function
        return lambda: module(
            fallback_prettier_options=dict(command.options),
            file_path=command.request.file_path,
            text=command.request.text,
        )


class StylelintBackend(LintModuleBackend):
    name = "prettier-stylelint"

    def applies_to(self, command: ConfiguredCommand) -> bool:
        return self._languages.does_parser_support_stylelint(command.parser)

    def bind(self, module: Any, command: ConfiguredCommand) -> FormatCall:
        # The module hands back an awaitable
        return lambda: module.format(
            file_path=command.request.file_path,
            prettier_options=dict(command.options),
            text=command.request.text,
        )


class EngineBackend:
    name = "prettier"

    def select(self, command: ConfiguredCommand) -> BackendChoice:
        engine, text, options = command.engine, command.request.text, dict(command.options)
        return BackendChoice(self.name, lambda: engine.format(text, options))


def default_backends(
    module_resolver: ModuleProvider, language_resolver: CapabilityResolver
) -> tuple[FormatterBackend, ...]:
    return (
        TslintBackend(module_resolver, language_resolver),
        EslintBackend(module_resolver, language_resolver),
        StylelintBackend(module_resolver, language_resolver),
        EngineBackend(),
    )


def select_backend(
    backends: Sequence[FormatterBackend], command: ConfiguredCommand
) -> BackendChoice:
    for backend in backends:
        choice = backend.select(command)
        if choice is not None:
            return choice
    raise InvariantViolationError(
        "No formatting backend selected; the chain must end with the engine."
    )
