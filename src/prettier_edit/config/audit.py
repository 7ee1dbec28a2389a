"""Source tracking for resolved settings."""

from .types import SettingsOrigin, SourceMap


class SourceTracker:
    """Tracks the origin of settings values during resolution."""

    def __init__(self) -> None:
        self._origins: dict[str, SettingsOrigin] = {}

    def set_origin(self, field: str, origin: SettingsOrigin) -> None:
        self._origins[field] = origin

    def get_source_map(self) -> SourceMap:
        return dict(self._origins)


def summarize_origins(source_map: SourceMap) -> dict[str, int]:
    """Count fields per origin, e.g. ``{"default": 20, "env": 1}``."""
    counts: dict[str, int] = {}
    for origin in source_map.values():
        counts[origin] = counts.get(origin, 0) + 1
    return counts
