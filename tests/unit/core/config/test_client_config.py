"""
Tests for RestClientConfig and load_config.
"""

from pathlib import Path

import pytest
import yaml
from httprest.core.common.exceptions import ConfigurationError
from httprest.core.config.app_config import DEFAULT_TIMEOUT, RestClientConfig, load_config


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    cfg = {
        "base_url": "https://file.example.com",
        "timeout": 12,
        "default_headers": {"X-Client": "httprest"},
    }
    path = tmp_path / "client.yaml"
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(cfg, f)
    return path


def test_defaults() -> None:
    config = RestClientConfig()

    assert config.base_url is None
    assert config.timeout == DEFAULT_TIMEOUT == 30.0
    assert config.enable_logging is True
    assert config.log_request_body is False
    assert repr(config) == "<RestClientConfig>"


def test_from_env_reads_prefixed_variables() -> None:
    env = {
        "HTTPREST_BASE_URL": " https://api.example.com ",
        "HTTPREST_TIMEOUT": "5.5",
        "HTTPREST_ACCEPT_LANGUAGE": "fr-FR",
        "HTTPREST_ENABLE_LOGGING": "false",
        "HTTPREST_LOG_REQUEST_BODY": "yes",
        "HTTPREST_LOG_RESPONSE_BODY": "1",
    }

    config = RestClientConfig.from_env(environ=env)

    assert config.base_url == "https://api.example.com"
    assert config.timeout == 5.5
    assert config.accept_language == "fr-FR"
    assert config.enable_logging is False
    assert config.log_request_body is True
    assert config.log_response_body is True
    assert repr(config) == '<RestClientConfig base_url="https://api.example.com">'


def test_from_env_ignores_invalid_timeout() -> None:
    config = RestClientConfig.from_env(environ={"HTTPREST_TIMEOUT": "soon"})

    assert config.timeout == DEFAULT_TIMEOUT


@pytest.mark.parametrize("value", ["0", "-1", "nan", "inf"])
def test_from_env_ignores_non_positive_or_non_finite_timeout(value: str) -> None:
    config = RestClientConfig.from_env(environ={"HTTPREST_TIMEOUT": value})

    assert config.timeout == DEFAULT_TIMEOUT


def test_load_config_keeps_file_timeout_when_environment_is_invalid(
    config_file: Path,
) -> None:
    config = load_config(config_file, environ={"HTTPREST_TIMEOUT": "0"})

    assert config.timeout == 12.0


def test_load_config_merges_file_under_environment(config_file: Path) -> None:
    config = load_config(config_file, environ={"HTTPREST_TIMEOUT": "3"})

    assert config.base_url == "https://file.example.com"
    assert config.default_headers == {"X-Client": "httprest"}
    assert config.timeout == 3.0


def test_load_config_without_file_uses_environment() -> None:
    config = load_config(environ={"HTTPREST_BASE_URL": "https://env.example.com"})

    assert config.base_url == "https://env.example.com"


def test_load_config_missing_file_falls_back_to_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.yml", environ={})

    assert config == RestClientConfig()


def test_load_config_rejects_non_yaml(tmp_path: Path) -> None:
    path = tmp_path / "client.json"
    path.write_text("{}", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path, environ={})


def test_load_config_rejects_invalid_values(tmp_path: Path) -> None:
    path = tmp_path / "client.yml"
    path.write_text("timeout: -1\n", encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(path, environ={})
    assert exc_info.value.status_code == 400


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "client.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path, environ={})
