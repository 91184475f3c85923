from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator

from httprest.core.common.exceptions import ConfigurationError
from httprest.core.interfaces.model_bases import DomainModel

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def _env_to_bool(name: str, default: bool, env: Mapping[str, str]) -> bool:
    """Return an environment variable parsed as a boolean flag."""
    value = env.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_to_positive_float(name: str, default: float, env: Mapping[str, str]) -> float:
    """Return an environment variable parsed as a finite float greater than zero."""
    value = env.get(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = math.nan
    if not math.isfinite(parsed) or parsed <= 0:
        logger.warning("Ignoring invalid value for %s: %r", name, value)
        return default
    return parsed


def _merge_dicts(base: dict[str, Any], override: Mapping[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _merge_dicts(base[key], value)
        else:
            base[key] = value


class RestClientConfig(DomainModel):
    """Settings of the HTTP client used by the dispatcher."""

    base_url: str | None = None
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    accept_language: str | None = None
    default_headers: dict[str, str] = Field(default_factory=dict)
    enable_logging: bool = True
    log_request_body: bool = False
    log_response_body: bool = False

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @classmethod
    def from_env(cls, *, environ: Mapping[str, str] | None = None) -> RestClientConfig:
        """Create the configuration from ``HTTPREST_*`` environment variables.

        Unparseable or non-positive timeouts fall back to the default.

        Raises:
            ConfigurationError: If the resulting settings are invalid
        """
        env: Mapping[str, str] = environ if environ is not None else os.environ
        try:
            return cls.model_validate(_env_overrides(env, cls().model_dump()))
        except ValidationError as exc:
            raise ConfigurationError(
                "Invalid client configuration", details={"errors": exc.errors()}
            ) from exc


def _env_overrides(env: Mapping[str, str], data: dict[str, Any]) -> dict[str, Any]:
    if "HTTPREST_BASE_URL" in env:
        data["base_url"] = env["HTTPREST_BASE_URL"]
    if "HTTPREST_ACCEPT_LANGUAGE" in env:
        data["accept_language"] = env["HTTPREST_ACCEPT_LANGUAGE"]
    data["timeout"] = _env_to_positive_float("HTTPREST_TIMEOUT", data["timeout"], env)
    data["enable_logging"] = _env_to_bool(
        "HTTPREST_ENABLE_LOGGING", data["enable_logging"], env
    )
    data["log_request_body"] = _env_to_bool(
        "HTTPREST_LOG_REQUEST_BODY", data["log_request_body"], env
    )
    data["log_response_body"] = _env_to_bool(
        "HTTPREST_LOG_RESPONSE_BODY", data["log_response_body"], env
    )
    return data


def load_config(
    config_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> RestClientConfig:
    """
    Load configuration from a YAML file and the environment.

    Environment variables take precedence over the file.

    Args:
        config_path: Optional path to a ``.yaml``/``.yml`` file

    Returns:
        RestClientConfig instance

    Raises:
        ConfigurationError: If the file is not YAML or holds invalid settings
    """
    env = environ if environ is not None else os.environ
    config_data: dict[str, Any] = RestClientConfig().model_dump()

    if config_path:
        path = Path(config_path)
        if path.suffix.lower() not in (".yaml", ".yml"):
            raise ConfigurationError(
                f"Unsupported configuration file format: {path.suffix}. "
                "Use YAML (.yaml/.yml).",
                details={"path": str(path)},
            )
        if not path.exists():
            logger.warning("Configuration file not found: %s", config_path)
        else:
            with open(path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
            if not isinstance(file_config, Mapping):
                raise ConfigurationError(
                    "Configuration file must contain a mapping",
                    details={"path": str(path)},
                )
            _merge_dicts(config_data, file_config)

    try:
        return RestClientConfig.model_validate(_env_overrides(env, config_data))
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid client configuration", details={"errors": exc.errors()}
        ) from exc
