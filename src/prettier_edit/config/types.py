"""Configuration data types.

Settings are resolved once per document, then frozen into the pipeline
state; the origin map records which source supplied each value.
"""

from collections.abc import Mapping
from typing import Literal, NamedTuple

from .schema import EditorSettings

SettingsOrigin = Literal["programmatic", "env", "project", "home", "default"]
SourceMap = Mapping[str, SettingsOrigin]


class ResolvedSettings(NamedTuple):
    """Validated editor settings plus the origin of every field."""

    settings: EditorSettings
    origin: SourceMap

    def audit(self) -> str:
        """Human-readable report of each field's value and origin."""
        lines = []
        for field, value in self.settings.to_dict().items():
            origin = self.origin.get(field, "default")
            lines.append(f"{field}: {value!r} ({origin})")
        return "\n".join(lines)
