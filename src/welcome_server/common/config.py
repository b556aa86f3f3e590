"""Server configuration: YAML file, then environment, then explicit overrides."""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

LOGGER = logging.getLogger("welcome.config")

DEFAULT_CFG_PATH = "configs/server.yaml"

# env var -> config field
ENV_VARS = {
    "HOST": "host",
    "PORT": "port",
    "WELCOME_PREFIX": "prefix",
    "ESCAPE_NAMES": "escape",
    "LOG_LEVEL": "log_level",
}

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(ValueError):
    """Raised when the server configuration cannot be loaded or is invalid."""


def normalize_prefix(prefix: str) -> str:
    """
    Normalize a mount prefix to "/segment" form.

    "welcome" and "/welcome/" both become "/welcome"; "/" and "" mean the
    application root and become "".
    """
    prefix = prefix.strip()
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix.rstrip("/")


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0", min_length=1)
    port: int = Field(default=3000, ge=1, le=65535)
    prefix: str = "/welcome"
    escape: bool = False
    log_level: str = "INFO"

    @field_validator("prefix")
    @classmethod
    def _normalize_prefix(cls, v: str) -> str:
        return normalize_prefix(v)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v


def load_cfg(path: str) -> dict[str, Any]:
    """Read a YAML mapping; a missing file yields an empty mapping."""
    if not Path(path).exists():
        LOGGER.debug("Config file %s not found, using defaults", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, str]:
    environ = os.environ if environ is None else environ
    return {field: environ[var] for var, field in ENV_VARS.items() if var in environ}


def load_config(
    path: str = DEFAULT_CFG_PATH,
    environ: dict[str, str] | None = None,
    **overrides: Any,
) -> ServerConfig:
    """
    Build the server configuration.

    Args:
        path: YAML config path.
        environ: Environment mapping, defaults to ``os.environ``.
        overrides: Explicit values (e.g. CLI flags); ``None`` values are ignored.

    Raises:
        ConfigError: If the file is malformed or a value fails validation.
    """
    values: dict[str, Any] = {}
    values.update(load_cfg(path))
    values.update(env_overrides(environ))
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return ServerConfig(**values)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
