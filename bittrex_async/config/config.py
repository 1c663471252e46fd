"""
Configuration models for the Bittrex client.

Uses Pydantic for validation and type safety.
"""
from typing import Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml
from pathlib import Path
import os
import re

from bittrex_async.constants import (
    BITTREX_BASE_URL,
    DEFAULT_API_TIMEOUT,
    MAX_RETRY_ATTEMPTS,
    RETRY_BASE_DELAY_SECONDS,
    RETRY_MAX_BACKOFF_SECONDS,
)


class ExchangeConfig(BaseSettings):
    """Exchange connection configuration."""
    model_config = SettingsConfigDict(env_prefix="BITTREX_EXCHANGE__", extra="ignore")

    # Credentials (loaded from env or yaml); absent for public-only use
    api_key: Optional[str] = None
    api_secret: Optional[str] = None

    base_url: str = BITTREX_BASE_URL
    request_timeout_seconds: float = Field(default=float(DEFAULT_API_TIMEOUT), gt=0.0, le=300.0)

    @field_validator("base_url")
    @classmethod
    def _ensure_trailing_slash(cls, v: str) -> str:
        return v if v.endswith("/") else v + "/"

    @field_validator("api_key", "api_secret")
    @classmethod
    def _blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        # Unexpanded ${VAR} placeholders count as missing
        if v is None or not v.strip() or v.startswith("${"):
            return None
        return v.strip()

    def has_credentials(self) -> bool:
        """Check if both API key and secret are present."""
        return bool(self.api_key and self.api_secret)


class RetryConfig(BaseSettings):
    """Transport retry policy (bounded exponential backoff)."""
    model_config = SettingsConfigDict(env_prefix="BITTREX_RETRY__", extra="ignore")

    max_retries: int = Field(default=MAX_RETRY_ATTEMPTS, ge=0, le=10)
    base_delay: float = Field(default=RETRY_BASE_DELAY_SECONDS, ge=0.0, le=60.0)
    max_backoff: float = Field(default=RETRY_MAX_BACKOFF_SECONDS, ge=0.0, le=300.0)


class MonitoringConfig(BaseSettings):
    """Logging configuration."""
    model_config = SettingsConfigDict(env_prefix="BITTREX_MONITORING__", extra="ignore")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Optional[str] = None


class Config(BaseSettings):
    """Main configuration class."""
    model_config = SettingsConfigDict(
        env_prefix="BITTREX_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # live: orders go to the exchange; simulation: orders hit the local ledger
    mode: Literal["live", "simulation"] = "simulation"
    exchange: ExchangeConfig = Field(default_factory=ExchangeConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """Load configuration from YAML file."""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, "r") as f:
            raw_content = f.read()

        # Regex to find ${VAR} or $VAR
        pattern = re.compile(r'\$\{([^}]+)\}|\$([a-zA-Z_][a-zA-Z0-9_]*)')

        def replace_match(match):
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, match.group(0))  # Return original if not found

        expanded_content = pattern.sub(replace_match, raw_content)
        config_dict = yaml.safe_load(expanded_content) or {}

        return cls(**config_dict)


def load_config(config_path: str | Path | None = None) -> Config:
    """
    Load and validate configuration.

    Args:
        config_path: Path to config.yaml file. If None, uses the packaged config.yaml

    Returns:
        Validated Config object

    Raises:
        FileNotFoundError: If config file not found
        pydantic.ValidationError: If configuration validation fails
    """
    if config_path is None:
        config_path = Path(__file__).parent / "config.yaml"

    return Config.from_yaml(config_path)
