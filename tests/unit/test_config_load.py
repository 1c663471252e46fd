"""
Configuration loading and validation tests.

Verifies that the packaged config loads, that ${VAR} references expand from
the environment, and that BITTREX_* variables override defaults.
"""
from pathlib import Path

import pydantic
import pytest

from bittrex_async.config.config import Config, ExchangeConfig, load_config
from bittrex_async.config.dotenv_loader import load_dotenv_files
from bittrex_async.constants import BITTREX_BASE_URL


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # setenv first so teardown also removes values written by load_dotenv
    for name in ("BITTREX_API_KEY", "BITTREX_API_SECRET", "BITTREX_MODE", "BITTREX_RETRY__MAX_RETRIES"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_packaged_config_loads():
    config = load_config()

    assert config.mode == "simulation"
    assert config.exchange.base_url == BITTREX_BASE_URL
    assert config.retry.max_retries == 3
    assert config.monitoring.log_format == "json"


def test_unset_credentials_are_none():
    config = load_config()

    assert config.exchange.api_key is None
    assert config.exchange.api_secret is None
    assert not config.exchange.has_credentials()


def test_credentials_expand_from_environment(monkeypatch):
    monkeypatch.setenv("BITTREX_API_KEY", "env-key")
    monkeypatch.setenv("BITTREX_API_SECRET", "env-secret")

    config = load_config()

    assert config.exchange.api_key == "env-key"
    assert config.exchange.has_credentials()


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_yaml_values_and_trailing_slash(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "mode: live\n"
        "exchange:\n"
        "  base_url: https://example.test/api/v1.1\n"
        "retry:\n"
        "  max_retries: 0\n"
    )

    config = load_config(path)

    assert config.mode == "live"
    assert config.exchange.base_url == "https://example.test/api/v1.1/"
    assert config.retry.max_retries == 0


def test_invalid_mode_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("mode: paper\n")

    with pytest.raises(pydantic.ValidationError):
        load_config(path)


def test_retry_bounds_enforced(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("retry:\n  max_retries: 50\n")

    with pytest.raises(pydantic.ValidationError):
        load_config(path)


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("BITTREX_RETRY__MAX_RETRIES", "5")

    assert Config().retry.max_retries == 5


def test_blank_credentials_are_none():
    exchange = ExchangeConfig(api_key="  ", api_secret="${BITTREX_API_SECRET}")
    assert exchange.api_key is None
    assert exchange.api_secret is None


def test_dotenv_files_loaded_with_local_override(tmp_path, monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    (tmp_path / ".env").write_text("BITTREX_API_KEY=from-env\nBITTREX_API_SECRET=from-env\n")
    (tmp_path / ".env.local").write_text("BITTREX_API_KEY=from-local\n")

    load_dotenv_files(root=tmp_path)

    config = load_config()
    assert config.exchange.api_key == "from-local"
    assert config.exchange.api_secret == "from-env"


def test_dotenv_skipped_in_prod(tmp_path, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "prod")
    (tmp_path / ".env").write_text("BITTREX_API_KEY=should-not-load\n")

    load_dotenv_files(root=tmp_path)

    assert load_config().exchange.api_key is None


def test_packaged_config_ships_with_package():
    import bittrex_async.config.config as config_module

    assert (Path(config_module.__file__).parent / "config.yaml").exists()
