# cosdata/config.py
"""
Client configuration.

Connection settings can come from three places:

    # Keyword arguments
    client = Client(host="https://db.example.com:8443", password="secret")

    # Environment (COSDATA_HOST, COSDATA_USERNAME, COSDATA_PASSWORD,
    # COSDATA_VERIFY_SSL, COSDATA_TIMEOUT)
    client = Client.from_config(ClientConfig.from_env())

    # YAML file
    client = Client.from_config(load_config("cosdata.yaml"))

Example YAML:
    cosdata:
      host: "https://db.example.com:8443"
      username: "admin"
      password: "secret"
      verify_ssl: true
      timeout: 30
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from cosdata.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HOST = "http://127.0.0.1:8443"

ENV_PREFIX = "COSDATA_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# =============================================================================
# Errors
# =============================================================================


class ConfigError(Exception):
    """Base error for configuration issues."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when a config file doesn't exist."""

    pass


class ConfigParseError(ConfigError):
    """Raised when YAML parsing fails."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when config values don't match the schema."""

    pass


# =============================================================================
# Schema
# =============================================================================


class ClientConfig(BaseModel):
    """Connection settings for a Cosdata server."""

    host: str = Field(
        default=DEFAULT_HOST,
        description="Server URL, without the /vectordb suffix",
    )

    username: str = Field(
        default="admin",
        description="Username for the session login",
    )

    password: str = Field(
        default="admin",
        description="Password for the session login",
        repr=False,
    )

    verify_ssl: bool = Field(
        default=False,
        description="Verify TLS certificates (disable for self-signed servers)",
    )

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a config from COSDATA_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ConfigValidationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        for field_name in cls.model_fields:
            raw = env.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is None or raw == "":
                continue
            if field_name == "verify_ssl":
                data[field_name] = _parse_bool(raw, f"{ENV_PREFIX}VERIFY_SSL")
            else:
                data[field_name] = raw

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid environment configuration: {e}") from e


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigValidationError(f"{name} must be a boolean, got {raw!r}")


# =============================================================================
# Loading
# =============================================================================


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML file and return it as a dictionary.

    Raises:
        ConfigNotFoundError: If file doesn't exist
        ConfigParseError: If YAML is invalid or the root is not a mapping
    """
    p = Path(path)

    if not p.exists():
        raise ConfigNotFoundError("Config file not found", path=p)

    if p.is_dir():
        raise ConfigError("Config path is a directory, not a file", path=p)

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}", path=p) from e

    if not isinstance(data, dict):
        raise ConfigParseError("Config root must be a mapping (dict)", path=p)

    logger.debug(f"Loaded config from {p}")
    return data


def load_config(path: Union[str, Path]) -> ClientConfig:
    """
    Load and validate a client config file.

    Settings may sit at the top level or under a ``cosdata:`` section.

    Raises:
        ConfigNotFoundError: If file doesn't exist
        ConfigParseError: If YAML is invalid
        ConfigValidationError: If values don't match ClientConfig
    """
    p = Path(path)
    data = load_yaml(p)

    section = data.get("cosdata", data)
    if not isinstance(section, dict):
        raise ConfigParseError("'cosdata' section must be a mapping", path=p)

    try:
        return ClientConfig(**section)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}", path=p) from e
