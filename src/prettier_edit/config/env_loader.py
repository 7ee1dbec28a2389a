"""Environment variable settings loading (``PRETTIER_EDIT_*``)."""

import os
from typing import Any

from .schema import EditorSettings

ENV_PREFIX = "PRETTIER_EDIT_"


class EnvironmentSettingsLoader:
    """Reads the settings fields that are explicitly set in the environment."""

    def load_env_settings(self) -> dict[str, Any]:
        """Return validated values for every ``PRETTIER_EDIT_<FIELD>`` present.

        Raises:
            ValueError: If an environment variable holds an invalid value.
        """
        env_values = {
            field: os.environ[f"{ENV_PREFIX}{field.upper()}"]
            for field in EditorSettings.model_fields
            if f"{ENV_PREFIX}{field.upper()}" in os.environ
        }
        if not env_values:
            return {}
        try:
            settings = EditorSettings(**env_values)
        except Exception as e:
            names = ", ".join(f"{ENV_PREFIX}{field.upper()}" for field in env_values)
            raise ValueError(f"Invalid environment variable values ({names}): {e}") from e
        return {field: getattr(settings, field) for field in env_values}
