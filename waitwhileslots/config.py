"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Optional

import pendulum
import yaml
from pydantic import BaseModel, field_validator

DEFAULT_BASE_URL = "https://api.waitwhile.com/v1/"


class AppConfig(BaseModel):
    """Application configuration."""
    waitlist_id: str
    api_key: Optional[str] = None  # Falls back to WAITWHILE_API_KEY or the keyring
    base_url: str = DEFAULT_BASE_URL
    booking_length_minutes: int = 30
    timezone: str = "Europe/Berlin"
    cache_ttl_seconds: int = 300  # 0 disables response caching
    request_timeout_seconds: float = 30
    default_country_code: Optional[str] = None

    @field_validator("waitlist_id")
    @classmethod
    def validate_waitlist_id(cls, value: str) -> str:
        """Ensure a waitlist is configured."""
        value = value.strip()
        if not value:
            raise ValueError("waitlist_id must not be empty")
        return value

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        """Relative endpoints are joined onto the base URL, so keep a trailing slash."""
        return value if value.endswith("/") else f"{value}/"

    @field_validator("booking_length_minutes")
    @classmethod
    def validate_booking_length(cls, value: int) -> int:
        """Ensure booking length is positive."""
        if value <= 0:
            raise ValueError("booking_length_minutes must be greater than zero")
        return value

    @field_validator("cache_ttl_seconds")
    @classmethod
    def validate_cache_ttl(cls, value: int) -> int:
        if value < 0:
            raise ValueError("cache_ttl_seconds must not be negative")
        return value

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Validate the IANA timezone name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("default_country_code")
    @classmethod
    def validate_country_code(cls, value: Optional[str]) -> Optional[str]:
        """Country codes are digits only, an optional leading + is dropped."""
        if value is None:
            return None
        value = value.strip().lstrip("+")
        if not value.isdigit():
            raise ValueError(f"default_country_code must be numeric, got '{value}'")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """The default configuration file, config.yaml in the working directory."""
    return Path.cwd() / "config.yaml"
