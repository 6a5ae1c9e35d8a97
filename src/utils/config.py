"""
Configuration management utilities for visor-fullereno.

Settings are resolved with priority:
environment variable > config file (~/.visor_fullereno/config.json) > default.

The front ends call ``load_dotenv()`` before reading settings, so values in a
local ``.env`` file behave like environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Tuple

from src.utils.logger import get_logger

logger = get_logger(__name__)

# Configuration file path (stored in user's home directory)
CONFIG_DIR = Path.home() / ".visor_fullereno"
CONFIG_FILE_PATH = CONFIG_DIR / "config.json"

# Type alias for setting source
SettingSource = Literal["env", "config", None]

API_KEY_ENV_VAR = "VISOR_API_KEY"
MAX_UPLOAD_ENV_VAR = "VISOR_MAX_UPLOAD_MB"
UPLOAD_DIR_ENV_VAR = "VISOR_UPLOAD_DIR"
LOG_LEVEL_ENV_VAR = "VISOR_LOG_LEVEL"

DEFAULT_MAX_UPLOAD_MB = 60
DEFAULT_UPLOAD_DIR = "uploads"
DEFAULT_LOG_LEVEL = "INFO"


def load_config() -> dict:
    """
    Load configuration from the JSON config file.

    Returns:
        dict: Configuration dictionary, or empty dict if file doesn't exist.
    """
    if not CONFIG_FILE_PATH.exists():
        return {}

    try:
        with open(CONFIG_FILE_PATH, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError):
        logger.warning(f"Ignoring unreadable config file {CONFIG_FILE_PATH}")
        return {}


def save_config(config: dict) -> bool:
    """
    Save configuration to the JSON config file.

    Args:
        config: Configuration dictionary to save.

    Returns:
        bool: True if save was successful, False otherwise.
    """
    try:
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)

        with open(CONFIG_FILE_PATH, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2, ensure_ascii=False)
        return True
    except IOError:
        return False


def _resolve(env_var: str, config_key: str) -> Tuple[Optional[str], SettingSource]:
    env_value = os.environ.get(env_var)
    if env_value:
        return (env_value, "env")

    config_value = load_config().get(config_key)
    if config_value not in (None, ""):
        return (str(config_value), "config")

    return (None, None)


def get_api_key() -> Tuple[Optional[str], SettingSource]:
    """
    Get the upload API key from available sources.

    Priority order:
    1. Environment variable (VISOR_API_KEY)
    2. Config file (~/.visor_fullereno/config.json -> api_key)
    3. None (uploads are refused)

    Returns:
        Tuple of (api_key, source) where source is "env", "config", or None.
    """
    return _resolve(API_KEY_ENV_VAR, "api_key")


def save_api_key(api_key: str) -> bool:
    """
    Save the upload API key to the config file.

    Args:
        api_key: The API key to save.

    Returns:
        bool: True if save was successful, False otherwise.
    """
    config = load_config()
    config["api_key"] = api_key
    return save_config(config)


def is_env_key_set() -> bool:
    """True if the API key is set via environment variable."""
    return bool(os.environ.get(API_KEY_ENV_VAR))


def get_max_upload_mb() -> int:
    value, source = _resolve(MAX_UPLOAD_ENV_VAR, "max_upload_mb")
    if value is None:
        return DEFAULT_MAX_UPLOAD_MB
    try:
        size = int(value)
    except ValueError:
        size = 0
    if size <= 0:
        logger.warning(
            f"Invalid max upload size {value!r} from {source}; "
            f"using {DEFAULT_MAX_UPLOAD_MB} MB"
        )
        return DEFAULT_MAX_UPLOAD_MB
    return size


def get_upload_dir() -> str:
    value, _ = _resolve(UPLOAD_DIR_ENV_VAR, "upload_dir")
    return value or DEFAULT_UPLOAD_DIR


def get_log_level() -> int:
    """
    Logging level from VISOR_LOG_LEVEL or the config file.

    Unknown names fall back to INFO.
    """
    value, _ = _resolve(LOG_LEVEL_ENV_VAR, "log_level")
    level = logging.getLevelName((value or DEFAULT_LOG_LEVEL).upper())
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {value!r}; using {DEFAULT_LOG_LEVEL}")
        return logging.INFO
    return level


@dataclass
class ServerSettings:
    """
    Settings for the upload handler.

    Attributes:
        api_key: Expected API key; None refuses every upload
        max_upload_bytes: Largest accepted upload
        upload_dir: Directory for temporary upload files
    """

    api_key: Optional[str] = None
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024
    upload_dir: str = DEFAULT_UPLOAD_DIR


def load_server_settings() -> ServerSettings:
    api_key, source = get_api_key()
    if api_key is None:
        logger.warning("No API key configured; all uploads will be refused")
    else:
        logger.info(f"API key loaded from {source}")
    return ServerSettings(
        api_key=api_key,
        max_upload_bytes=get_max_upload_mb() * 1024 * 1024,
        upload_dir=get_upload_dir(),
    )
