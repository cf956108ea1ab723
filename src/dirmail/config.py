"""Configuration management for dirmail."""

import json
from pathlib import Path
import os
from typing import Any, Dict, Mapping, Optional, Tuple, Type

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from .exceptions import ConfigurationError

TRANSPORTS = ("mail", "smtp", "sendgrid", "mock")


class MailAppConfig(BaseModel):
    """Mail application (osascript) transport configuration."""

    osascript_path: str = Field("osascript", description="osascript executable")
    settle_seconds: float = Field(5.0, ge=0, description="Wait after the attachment appears, before sending")
    attach_timeout: float = Field(30.0, gt=0, description="Maximum wait for the attachment to appear")
    poll_interval: float = Field(0.5, gt=0, description="Interval between attachment checks")
    timeout: float = Field(120.0, gt=0, description="Maximum duration of one osascript call")
    empty_response_is_success: bool = Field(False, description="Treat an empty client response as sent")


class SMTPConfig(BaseModel):
    """SMTP transport configuration."""

    host: Optional[str] = None
    port: int = 465
    username: Optional[str] = None
    password: Optional[str] = None
    use_ssl: bool = True
    use_starttls: bool = False
    timeout: int = 30


class SendGridConfig(BaseModel):
    """SendGrid configuration."""

    api_key: Optional[str] = Field(None, description="SendGrid API key")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Logging level")
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    file_path: Optional[str] = Field(None, description="Path to log file")
    max_file_size: int = Field(10 * 1024 * 1024, description="Maximum log file size in bytes")
    backup_count: int = Field(5, description="Number of backup log files to keep")
    console_output: bool = Field(True, description="Enable console logging")


class Settings(BaseSettings):
    """Main application settings."""

    transport: str = Field("mail", description="Transport name: mail, smtp, sendgrid or mock")
    subject: str = Field("attached file", description="Default subject")
    body_template: Optional[str] = Field(None, description="Body template, may use {{ subject }}")
    verbose: bool = Field(False, description="Also report successful sends")
    fail_on_error: bool = Field(False, description="Exit non-zero when any recipient failed")

    mail: MailAppConfig = Field(default_factory=MailAppConfig)
    smtp: SMTPConfig = Field(default_factory=SMTPConfig)
    sendgrid: SendGridConfig = Field(default_factory=SendGridConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="DIRMAIL_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    @field_validator("transport")
    @classmethod
    def _known_transport(cls, value: str) -> str:
        value = value.lower()
        if value not in TRANSPORTS:
            raise ValueError(f"unknown transport {value!r}, expected one of {', '.join(TRANSPORTS)}")
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # load_settings merges every source itself, see _env_layer
        return (init_settings,)


def _load_config_file(config_file: Path) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file."""
    with open(config_file, "r") as f:
        if config_file.suffix.lower() in [".yaml", ".yml"]:
            data = yaml.safe_load(f) or {}
        elif config_file.suffix.lower() == ".json":
            data = json.load(f)
        else:
            raise ConfigurationError(f"Unsupported config file format: {config_file.suffix}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {config_file}")
    return data


def _env_layer(environ: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    """Turn DIRMAIL_ variables into a nested settings dictionary.

    ``DIRMAIL_SMTP__HOST`` becomes ``{"smtp": {"host": ...}}``.
    """
    prefix = Settings.model_config["env_prefix"].lower()
    delimiter = Settings.model_config["env_nested_delimiter"]
    result: Dict[str, Any] = {}
    for key, value in environ.items():
        if value is None or not key.lower().startswith(prefix):
            continue
        parts = key[len(prefix):].lower().split(delimiter)
        if parts[0] not in Settings.model_fields:
            continue
        node = result
        for part in parts[:-1]:
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                break
            node = child
        else:
            if not isinstance(node.get(parts[-1]), dict):
                node[parts[-1]] = value
    return result


def _merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
    """Merge multiple configuration dictionaries."""
    result = {}
    for config in configs:
        if config:
            for key, value in config.items():
                if isinstance(value, dict) and key in result and isinstance(result[key], dict):
                    result[key] = _merge_configs(result[key], value)
                else:
                    result[key] = value
    return result


def load_settings(
    config_dir: Optional[Path] = None,
    env_file: Optional[str] = None,
    config_file: Optional[str] = None,
    **overrides: Any,
) -> Settings:
    """
    Load application settings from multiple sources.

    Sources are loaded in order of precedence (later sources override earlier):
    1. Default values
    2. Environment file (.env), read without touching os.environ
    3. Configuration file (YAML/JSON)
    4. Environment variables
    5. Explicit overrides (command line options)

    None of the sources is required.

    Args:
        config_dir: Directory containing config files (default: current directory)
        env_file: Path to environment file (default: .env in config_dir)
        config_file: Path to configuration file (default: dirmail.yaml in config_dir)
        **overrides: Top-level settings that win over every other source

    Returns:
        Loaded settings instance

    Raises:
        ConfigurationError: If a source cannot be read or values are invalid
    """
    if config_dir is None:
        config_dir = Path.cwd()

    env_path = Path(env_file) if env_file else config_dir / ".env"
    config_path = Path(config_file) if config_file else config_dir / "dirmail.yaml"

    if config_file and not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    dotenv_config = _env_layer(dotenv_values(env_path)) if env_path.exists() else {}

    try:
        file_config = _load_config_file(config_path) if config_path.exists() else {}
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error reading config file {config_path}: {e}") from e

    env_config = _env_layer(os.environ)
    overrides = {k: v for k, v in overrides.items() if v is not None}

    try:
        settings = Settings(**_merge_configs(dotenv_config, file_config, env_config, overrides))
    except ValidationError as e:
        raise ConfigurationError(f"Failed to load configuration: {e}") from e

    return settings
