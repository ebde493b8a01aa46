# ABOUTME: Configuration module for application settings.
# ABOUTME: Uses pydantic-settings for environment overrides and loads relay/selector JSON files.

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from linkedin_relay.errors import LinkedInRelayError
from linkedin_relay.models.config import RelayConfig
from linkedin_relay.parsing.selectors import SelectorConfig


class ConfigError(LinkedInRelayError):
    """Raised when a configuration file exists but cannot be used."""

    pass


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the
    LINKEDIN_RELAY_ prefix (e.g., LINKEDIN_RELAY_CONFIG_FILE).
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKEDIN_RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    config_file: Annotated[
        Path, Field(description="Path to the relay configuration JSON file")
    ] = Path.home() / ".linkedin-relay" / "config.json"

    log_level: Annotated[str, Field(description="Root log level for the CLI")] = "WARNING"

    selectors_file: Annotated[
        Path | None, Field(description="Optional JSON file with selector overrides")
    ] = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings.

    Returns a cached Settings instance. Use get_settings.cache_clear()
    to clear the cache if needed.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def _read_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e


def load_relay_config(settings: Settings | None = None) -> RelayConfig:
    """Load the relay configuration named by the settings.

    A missing file yields the defaults (no endpoints).

    Args:
        settings: Settings to read the path from; defaults to get_settings().

    Returns:
        The validated RelayConfig.

    Raises:
        ConfigError: If the file is unreadable or fails validation.
    """
    settings = settings or get_settings()
    path = settings.config_file.expanduser()
    if not path.exists():
        return RelayConfig()
    try:
        return RelayConfig.model_validate(_read_json(path))
    except ValidationError as e:
        raise ConfigError(f"Invalid relay configuration in {path}: {e}") from e


def load_selector_config(settings: Settings | None = None) -> SelectorConfig:
    """Load selector tables, applying overrides from ``selectors_file`` if set.

    The file maps section -> field -> list of candidate selectors, e.g.
    ``{"connection": {"name": [".new-name-class"]}}``.

    Raises:
        ConfigError: If the override file is unreadable or malformed.
    """
    settings = settings or get_settings()
    selectors = SelectorConfig()
    if settings.selectors_file is None:
        return selectors

    data = _read_json(settings.selectors_file.expanduser())
    if not isinstance(data, dict):
        raise ConfigError(f"Selector overrides in {settings.selectors_file} must be an object")
    try:
        return selectors.with_overrides(data)
    except (ValueError, AttributeError) as e:
        raise ConfigError(f"Invalid selector overrides: {e}") from e
