"""Locating and driving the Node formatting engine and its companion modules.

Modules are resolved the way Node resolves packages: the nearest
``node_modules/<name>`` above the formatted file. Calls go through a small
Node script run in a subprocess that exchanges JSON on stdin/stdout, either
blocking (``subprocess``) or awaitable (``asyncio`` subprocess).
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from pathlib import Path
import re
import shutil
import subprocess
from typing import TYPE_CHECKING, Any

from prettier_edit.core.exceptions import BackendExecutionError, EngineUnavailableError
from prettier_edit.core.types import FileInfo

if TYPE_CHECKING:
    from prettier_edit.core.protocols import SettingsProvider
    from prettier_edit.notifications import NotificationService

log = logging.getLogger(__name__)

MIN_PRETTIER_VERSION = "1.13.0"

_BRIDGE_SCRIPT = r"""
const chunks = [];
process.stdin.on("data", (chunk) => chunks.push(chunk));
process.stdin.on("end", async () => {
  const request = JSON.parse(Buffer.concat(chunks).toString("utf8"));
  try {
    const mod = require(request.module);
    const target = request.method ? mod[request.method].bind(mod) : mod;
    const value = await target(...request.args);
    process.stdout.write(JSON.stringify({ ok: true, value }));
  } catch (err) {
    process.stdout.write(JSON.stringify({ ok: false, error: String((err && err.stack) || err) }));
  }
});
"""

# module name -> (exported function, returns an awaitable)
MODULE_EXPORTS: dict[str, tuple[str | None, bool]] = {
    "prettier-tslint": ("format", False),
    "prettier-eslint": (None, False),
    "prettier-stylelint": ("format", True),
}


def _parse_version(version: str) -> tuple[int, ...]:
    return tuple(int(part) for part in re.findall(r"\d+", version.split("-")[0])[:3])


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclasses.dataclass(frozen=True, slots=True)
class NodePackage:
    name: str
    path: Path
    version: str

    @classmethod
    def read(cls, path: Path) -> NodePackage | None:
        manifest = path / "package.json"
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        return cls(
            name=str(data.get("name", path.name)),
            path=path,
            version=str(data.get("version", "0.0.0")),
        )


def find_node_module(file_path: str | None, module_name: str) -> NodePackage | None:
    """Nearest ``node_modules/<module_name>`` above ``file_path``."""
    if not file_path:
        return None
    for directory in Path(file_path).resolve().parents:
        package = NodePackage.read(directory / "node_modules" / module_name)
        if package is not None:
            return package
    return None


class NodeBridge:
    """Runs one exported function of a Node module per subprocess."""

    def __init__(self, node_path: str | None = None, timeout: float = 30.0) -> None:
        self._node_path = node_path
        self._timeout = timeout

    def _command(self) -> list[str]:
        node = self._node_path or shutil.which("node")
        if not node:
            raise EngineUnavailableError("Node.js executable not found on PATH")
        return [node, "-e", _BRIDGE_SCRIPT]

    @staticmethod
    def _payload(module: Path, method: str | None, args: tuple[Any, ...]) -> str:
        return json.dumps({"module": str(module), "method": method, "args": list(args)})

    @staticmethod
    def _parse(stdout: str, stderr: str, module: Path) -> Any:
        try:
            response = json.loads(stdout)
        except ValueError as e:
            raise BackendExecutionError(
                f"Invalid response from {module}: {stderr.strip() or stdout[:200]}"
            ) from e
        if not response.get("ok"):
            raise BackendExecutionError(response.get("error", "unknown error"))
        return response.get("value")

    def call(self, module: Path, method: str | None, *args: Any) -> Any:
        try:
            completed = subprocess.run(
                self._command(),
                input=self._payload(module, method, args),
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise BackendExecutionError(f"{module} timed out after {self._timeout}s") from e
        return self._parse(completed.stdout, completed.stderr, module)

    async def acall(self, module: Path, method: str | None, *args: Any) -> Any:
        process = await asyncio.create_subprocess_exec(
            *self._command(),
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(self._payload(module, method, args).encode("utf-8")),
                timeout=self._timeout,
            )
        except TimeoutError as e:
            process.kill()
            await process.wait()
            raise BackendExecutionError(f"{module} timed out after {self._timeout}s") from e
        return self._parse(stdout.decode("utf-8"), stderr.decode("utf-8"), module)


class PrettierEngine:
    """The formatting engine loaded from a prettier package."""

    def __init__(self, package: NodePackage, bridge: NodeBridge) -> None:
        self.package = package
        self._bridge = bridge

    @property
    def version(self) -> str:
        return self.package.version

    def format(self, text: str, options: dict[str, Any]) -> str:
        return self._bridge.call(self.package.path, "format", text, dict(options))

    async def get_file_info(
        self,
        file_path: str,
        *,
        ignore_path: str | None = None,
        resolve_config: bool = True,
    ) -> FileInfo:
        info = await self._bridge.acall(
            self.package.path,
            "getFileInfo",
            file_path,
            {"ignorePath": ignore_path, "resolveConfig": resolve_config},
        )
        info = info or {}
        return FileInfo(
            ignored=bool(info.get("ignored")),
            inferred_parser=info.get("inferredParser"),
        )

    def __repr__(self) -> str:
        return f"PrettierEngine({self.package.path}, version={self.version})"


class NodeModuleHandle:
    """A lint-integrated formatter module.

    Keyword arguments are passed to the module as one camelCased options
    object, e.g. ``format(text=..., file_path=...)`` becomes
    ``format({text, filePath})``.
    """

    def __init__(
        self,
        package: NodePackage,
        bridge: NodeBridge,
        method: str | None = None,
        asynchronous: bool = False,
    ) -> None:
        self.package = package
        self._bridge = bridge
        self._method = method
        self._asynchronous = asynchronous

    def format(self, **kwargs: Any) -> Any:
        options = {_camel(key): value for key, value in kwargs.items()}
        if self._asynchronous:
            return self._bridge.acall(self.package.path, self._method, options)
        return self._bridge.call(self.package.path, self._method, options)

    __call__ = format


class ModuleResolver:
    """Loads the engine and optional companion modules for a file."""

    def __init__(
        self,
        settings_provider: SettingsProvider,
        notification_service: NotificationService,
        bridge: NodeBridge | None = None,
    ) -> None:
        self._settings_provider = settings_provider
        self._notifications = notification_service
        self._bridge = bridge or NodeBridge()
        self._engines: dict[Path, PrettierEngine] = {}
        self._modules: dict[tuple[str, Path], NodeModuleHandle] = {}
        self._global_root: Path | None = None

    def get_prettier_instance(
        self, file_path: str | None, warn_if_outdated: bool = False
    ) -> PrettierEngine:
        """Return the engine for a file.

        Raises:
            EngineUnavailableError: If no usable prettier package exists.
        """
        local = find_node_module(file_path, "prettier")
        if local is not None:
            if _parse_version(local.version) >= _parse_version(MIN_PRETTIER_VERSION):
                return self._engine(local)
            log.warning("Local prettier %s at %s is outdated", local.version, local.path)
            if warn_if_outdated:
                self._notifications.warn_outdated_prettier_version(
                    str(local.path), local.version, MIN_PRETTIER_VERSION
                )

        fallback = self._fallback_package(file_path)
        if fallback is None:
            raise EngineUnavailableError(
                f"No prettier package found for {file_path or 'untitled document'}"
            )
        if warn_if_outdated:
            self._notifications.warn_fallback_prettier(file_path, str(fallback.path))
        return self._engine(fallback)

    def get_module_instance(
        self, file_path: str | None, module_name: str
    ) -> NodeModuleHandle | None:
        package = find_node_module(file_path, module_name)
        if package is None:
            return None
        key = (module_name, package.path)
        if key not in self._modules:
            method, asynchronous = MODULE_EXPORTS.get(module_name, (None, False))
            self._modules[key] = NodeModuleHandle(
                package, self._bridge, method=method, asynchronous=asynchronous
            )
            log.info("Loaded %s %s from %s", module_name, package.version, package.path)
        return self._modules[key]

    def dispose(self) -> None:
        self._engines.clear()
        self._modules.clear()
        self._global_root = None

    def _engine(self, package: NodePackage) -> PrettierEngine:
        if package.path not in self._engines:
            self._engines[package.path] = PrettierEngine(package, self._bridge)
            log.info("Loaded prettier %s from %s", package.version, package.path)
        return self._engines[package.path]

    def _fallback_package(self, file_path: str | None) -> NodePackage | None:
        configured = self._settings_provider.get_config(file_path).prettier_path
        if configured:
            package = NodePackage.read(Path(configured).expanduser())
            if package is not None:
                return package
            log.warning("Configured prettier_path %s is not a package", configured)

        root = self._global_modules_root()
        return NodePackage.read(root / "prettier") if root else None

    def _global_modules_root(self) -> Path | None:
        if self._global_root is None:
            npm = shutil.which("npm")
            if npm is None:
                return None
            try:
                completed = subprocess.run(
                    [npm, "root", "-g"],
                    capture_output=True,
                    text=True,
                    timeout=10,
                    check=True,
                )
            except (OSError, subprocess.SubprocessError) as e:
                log.debug("Could not locate global node_modules: %s", e)
                return None
            self._global_root = Path(completed.stdout.strip())
        return self._global_root
