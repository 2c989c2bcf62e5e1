"""
Configuration for docsan.

Uses Pydantic Settings for type-safe environment variable loading, optionally
overlaid with a JSON config file:

    {
        "logging": {"filename": "docsan.log", "level": "INFO"},
        "meta_tags": ["docid", "description", "collection"]
    }
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from docsan.exceptions import ConfigurationError

DEFAULT_CONFIG_FILE = "docsan.json"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "DEBUG"


def parse_comma_separated(v: str | list[str]) -> list[str]:
    """
    Parse comma-separated string into list.

    Args:
        v: Either a comma-separated string or already a list of strings

    Returns:
        List of trimmed strings

    Examples:
        >>> parse_comma_separated("docid, description")
        ['docid', 'description']
    """
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


@dataclass(frozen=True)
class MetaNamePolicy:
    """Allow-list of ``<meta name=...>`` values, matched exactly (case-sensitive).

    Instances are immutable and callable, so one policy is shared by every
    request:

        policy = MetaNamePolicy.of(["docid"])
        policy("docid")   # True
        policy("DocID")   # False
    """

    allowed: frozenset[str]

    @classmethod
    def of(cls, names: list[str] | tuple[str, ...] | set[str] | frozenset[str]) -> "MetaNamePolicy":
        """Build a policy from any collection of names."""
        return cls(frozenset(names))

    def __call__(self, name: str) -> bool:
        return name in self.allowed


class DocsanSettings(BaseSettings):
    """docsan service settings."""

    model_config = SettingsConfigDict(
        env_prefix="DOCSAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Meta allow-list
    meta_tags: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Meta names copied to the output (metas without a name are always kept)",
    )

    # Logging
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")
    log_file: str | None = Field(default=None, description="Also write logs to this file")
    log_json: bool = Field(default=False, description="Write structured JSON log lines")

    # HTTP service
    host: str = Field(default="0.0.0.0", description="Host to bind the HTTP service to")
    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("port", "PORT", "DOCSAN_PORT"),
        description="Port of the HTTP service (PORT is honoured for container platforms)",
    )
    max_body_bytes: int = Field(default=10 * 1024 * 1024, ge=1, description="Largest accepted request body")

    # Output
    json_pretty: bool = Field(default=False, description="Indent output JSON")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper

    @field_validator("meta_tags", mode="before")
    @classmethod
    def validate_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated string into list."""
        return parse_comma_separated(v)

    def meta_name_policy(self) -> MetaNamePolicy:
        """Get the immutable meta name allow-list."""
        return MetaNamePolicy.of(self.meta_tags)


def _settings_kwargs(data: dict[str, Any]) -> dict[str, Any]:
    """Flatten the config file layout into settings field names."""
    kwargs = {key: value for key, value in data.items() if key != "logging"}
    logging_def = data.get("logging") or {}
    if not isinstance(logging_def, dict):
        raise ValueError("'logging' must be an object")
    if logging_def.get("filename"):
        kwargs["log_file"] = logging_def["filename"]
    if logging_def.get("level"):
        kwargs["log_level"] = logging_def["level"]
    return kwargs


def load_settings(config_path: str | Path | None = None) -> DocsanSettings:
    """
    Load settings from the environment and a JSON config file.

    Values in the config file take precedence over environment variables.

    Args:
        config_path: Path to the JSON config file. When None, ``docsan.json``
            in the working directory is used if it exists.

    Returns:
        Validated settings.

    Raises:
        ConfigurationError: If an explicit config file is missing, or the file
            cannot be read, is not valid JSON, or holds invalid values.
    """
    path = Path(config_path) if config_path is not None else Path(DEFAULT_CONFIG_FILE)

    if not path.exists():
        if config_path is not None:
            raise ConfigurationError(f"Config file not found: {path}", config_path=str(path))
        try:
            return DocsanSettings()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file {path}: {e}", config_path=str(path)) from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse config file {path}: {e}", config_path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object", config_path=str(path))

    try:
        return DocsanSettings(**_settings_kwargs(data))
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}", config_path=str(path)) from e
