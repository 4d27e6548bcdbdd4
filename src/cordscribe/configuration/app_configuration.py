from __future__ import annotations

import fcntl
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from cordscribe.configuration.fetch_settings import FetchSettings
from cordscribe.datatypes.errors import ConfigError
from cordscribe.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path(os.getenv("CORDSCRIBE_CONFIG") or "./config/app_config.yml").resolve()
TOKEN_ENV_VAR = "DISCORD_TOKEN"


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` (or the file
    named by ``CORDSCRIBE_CONFIG``), exposes dictionary-like access helpers and
    resolves the fetch loop settings through :class:`FetchSettings`.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.debug("[APP CONFIGURATION] Config file %s not found, using defaults.", self.config_path)
            return {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns an empty dict when the file is missing or malformed.
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def fetch_settings(self) -> FetchSettings:
        settings = self._data.get("fetch", {})
        if not isinstance(settings, dict):
            settings = {}
        return FetchSettings(settings)

    @property
    def output_dir(self) -> Path | None:
        """Directory for snapshots and outputs, or None to use a fresh temp dir."""
        value = self._data.get("output_dir")
        return Path(str(value)).expanduser() if value else None


def load_environment(env_path: Path | None = None) -> str:
    """Load ``.env`` and return the Discord token.

    Raises
    ------
    ConfigError
        If ``DISCORD_TOKEN`` is missing or empty.
    """
    load_dotenv(dotenv_path=env_path)
    token = (os.getenv(TOKEN_ENV_VAR) or "").strip()
    if not token:
        raise ConfigError(f"{TOKEN_ENV_VAR} not found in environment variables.")
    return token


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
