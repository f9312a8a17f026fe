"""
Settings for kinonote.

Settings are read from a YAML file, then overridden from environment
variables. A missing file is not an error: defaults are used and a warning is
logged.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError
from .i18n import SUPPORTED_LANGUAGES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/kinonote_config.yaml"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_OVERRIDES = {
    "KINOPOISK_API_TOKEN": "api_token",
    "KINONOTE_LANGUAGE": "language",
    "KINONOTE_VAULT": "vault_path",
}


class LoggingSettings(BaseModel):
    """Logging section of the settings file."""

    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        level = str(v).upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown logging level: {v}")
        return level


class KinonoteSettings(BaseModel):
    """All user settings."""

    language: str = "en"
    api_token: str = ""
    vault_path: str = "."

    movie_file_name_format: str = ""
    movie_folder: str = ""
    movie_template_file: str = ""

    series_file_name_format: str = ""
    series_folder: str = ""
    series_template_file: str = ""

    images_folder: str = "attachments/kinopoisk"
    save_images_locally: bool = False
    save_poster_image: bool = True
    save_cover_image: bool = False
    save_logo_image: bool = False

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("language")
    @classmethod
    def validate_language(cls, v):
        if v not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {v}. Supported: {', '.join(SUPPORTED_LANGUAGES)}")
        return v

    @property
    def vault_root(self) -> Path:
        return Path(self.vault_path)


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides."""
    for env_name, setting in ENV_OVERRIDES.items():
        if env_name in os.environ:
            config[setting] = os.environ[env_name]
    return config


def load_settings(config_path: Optional[Union[str, Path]] = None) -> KinonoteSettings:
    """
    Load settings from YAML with environment overrides.

    Args:
        config_path: Path to the settings file

    Returns:
        Validated settings

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    config_path = Path(config_path or DEFAULT_CONFIG_PATH)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"Config file not found: {config_path}, using defaults")
        config = {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing config file: {e}")

    if not isinstance(config, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    config = _apply_env_overrides(config)

    try:
        return KinonoteSettings.model_validate(config)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {config_path}: {e}")


def setup_logging(settings: KinonoteSettings) -> None:
    """Configure root logging from the settings' logging section."""
    log_config = settings.logging
    handlers = [logging.StreamHandler()]

    if log_config.file:
        log_file = Path(log_config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, log_config.level),
        format=log_config.format,
        handlers=handlers,
    )
