"""Locate and persist the per-user analysis settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from .config import AppConfig

logger = logging.getLogger(__name__)


class SettingsStore:
    """Load and save :class:`AppConfig` at a well-known per-user path."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self, **overrides: Any) -> AppConfig:
        """Return the stored settings (or defaults) with ``overrides`` applied.

        ``None`` overrides are ignored so CLI flags that were not given keep the
        stored value.
        """
        if self._path.exists():
            config = AppConfig.load(self._path)
        else:
            logger.debug("No settings file at %s; using defaults.", self._path)
            config = AppConfig()
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return config
        return AppConfig.model_validate({**config.as_dict(), **changes})

    def save(self, config: AppConfig) -> None:
        config.save(self._path)


def default_settings_path() -> Path:
    if os.name == "nt":
        base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    else:
        base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base.expanduser() / "photo_insight" / "settings.yaml"
