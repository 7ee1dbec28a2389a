"""Settings introspection for debugging which values apply to a document."""

import json
import sys
from typing import Any

from .audit import summarize_origins
from .prettierrc import find_config_file
from .resolver import SettingsResolver


def get_settings_info(file_path: str | None = None) -> dict[str, Any]:
    """Effective settings, their origins and the config file for a document."""
    resolved = SettingsResolver().resolve(file_path)
    config_file = find_config_file(file_path) if file_path else None
    return {
        "file": file_path,
        "settings": resolved.settings.to_dict(),
        "origin": dict(resolved.origin),
        "origin_summary": summarize_origins(resolved.origin),
        "config_file": str(config_file) if config_file else None,
    }


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for settings introspection."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Inspect prettier-edit settings for a document",
        prog="python -m prettier_edit.config",
    )
    parser.add_argument("path", nargs="?", help="Document path to resolve settings for")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON instead of human-readable format",
    )
    args = parser.parse_args(argv)

    try:
        info = get_settings_info(args.path)
    except ValueError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(info, indent=2, default=str))
        return 0

    print(f"Settings for {info['file'] or '<no document>'}")
    print(f"Prettier config file: {info['config_file'] or 'none'}")
    for field, value in info["settings"].items():
        print(f"  {field:<28} {value!r:<24} ({info['origin'].get(field, 'default')})")
    return 0
