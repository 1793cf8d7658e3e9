"""
Singleton configuration loader for imghasher.

Layered config, later layers win:
    1. imghasher/config.yaml shipped with the package
    2. user-settings.yaml ($IMGHASHER_USER_SETTINGS_PATH or
       $XDG_CONFIG_HOME/imghasher/user-settings.yaml)
    3. IMGHASHER_* environment variables
"""

import os
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).parent.parent
_CONFIG_PATH = _PACKAGE_DIR / "config.yaml"

# env key → config.yaml dotted path
_ENV_OVERRIDES = {
    "IMGHASHER_RESAMPLE": "hashing.resample",
    "IMGHASHER_DUPLICATE_THRESHOLD": "hashing.duplicate_threshold",
    "IMGHASHER_LOG_LEVEL": "logging.level",
}

_instance: Optional["AppConfig"] = None


def _user_settings_path() -> Path:
    env_path = os.environ.get("IMGHASHER_USER_SETTINGS_PATH")
    if env_path:
        return Path(env_path)
    xdg = os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg) / "imghasher" / "user-settings.yaml"


def _read_yaml(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


class AppConfig:
    """Package defaults, then user settings, then environment."""

    def __init__(self, path: Path = _CONFIG_PATH,
                 user_settings_path: Optional[Path] = None):
        self._layers: list = []

        if path.exists():
            self._layers.append(_read_yaml(path))
            logger.debug(f"Loaded system config from {path}")
        else:
            logger.warning(f"config.yaml not found at {path}, using defaults")

        user_path = user_settings_path or _user_settings_path()
        if user_path.exists():
            try:
                self._layers.append(_read_yaml(user_path))
                logger.info(f"Loaded user settings from {user_path}")
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load user settings: {e}")

        env: dict = {}
        for env_key, dotted_path in _ENV_OVERRIDES.items():
            val = os.environ.get(env_key)
            if val is not None:
                _set_dotted(env, dotted_path, val)
                logger.debug(f"env override: {env_key} -> {dotted_path}")
        self._layers.append(env)

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """
        Retrieve a value by dotted path from the highest layer that sets it.

        Example:
            cfg.get("hashing.resample")                -> "box"
            cfg.get("hashing.duplicate_threshold", 10) -> 10
        """
        for layer in reversed(self._layers):
            val = _get_dotted(layer, dotted_key)
            if val is not None:
                return val
        return default


def _get_dotted(data: dict, dotted_key: str) -> Any:
    """Traverse nested dict by dotted key. Returns None if not found."""
    node = data
    for p in dotted_key.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(p)
        if node is None:
            return None
    return node


def _set_dotted(data: dict, dotted_key: str, value: Any):
    parts = dotted_key.split(".")
    node = data
    for p in parts[:-1]:
        node = node.setdefault(p, {})
    node[parts[-1]] = value


def get_config() -> AppConfig:
    """Return the singleton AppConfig instance."""
    global _instance
    if _instance is None:
        _instance = AppConfig()
    return _instance


def reset_config():
    """Drop the cached singleton so the next get_config() reloads."""
    global _instance
    _instance = None
