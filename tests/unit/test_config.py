"""Unit tests for config.py"""

import pytest

from mdstudy.config import load_config


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Run from an empty directory with no MDSTUDY_* variables set."""
    monkeypatch.chdir(tmp_path)
    for name in ("BASE_URL", "STORAGE_URL", "REQUEST_TIMEOUT", "LOG_LEVEL", "SEARCH_LIMIT"):
        monkeypatch.delenv(f"MDSTUDY_{name}", raising=False)


def test_load_config_defaults():
    """Settings defaults apply when no config.yaml, env var, or override exists."""
    settings = load_config()
    assert settings.storage_url == "sqlite:///mdstudy.db"
    assert settings.storage_prefix == "frontend-master-"
    assert settings.manifest_path == "manifest.json"


def test_load_config_uses_env_base_url(monkeypatch):
    """MDSTUDY_BASE_URL env var is picked up by load_config."""
    monkeypatch.setenv("MDSTUDY_BASE_URL", "https://example.org/prep/")
    assert load_config().base_url == "https://example.org/prep/"


def test_load_config_reads_config_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("storage_prefix: 'demo-'\nsearch_limit: 5\n")
    settings = load_config()
    assert settings.storage_prefix == "demo-"
    assert settings.search_limit == 5


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDSTUDY_STORAGE_URL takes precedence over config.yaml storage_url."""
    (tmp_path / "config.yaml").write_text("storage_url: 'sqlite:///project.db'\n")
    monkeypatch.setenv("MDSTUDY_STORAGE_URL", "sqlite:///override.db")
    assert load_config().storage_url == "sqlite:///override.db"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDSTUDY_BASE_URL", "http://env.local/")
    assert load_config(overrides={"base_url": "http://cli.local/"}).base_url == "http://cli.local/"
    assert load_config(overrides={"base_url": None}).base_url == "http://env.local/"


def test_load_config_env_coerces_numbers(monkeypatch):
    monkeypatch.setenv("MDSTUDY_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("MDSTUDY_SEARCH_LIMIT", "3")
    settings = load_config()
    assert settings.request_timeout == 2.5
    assert settings.search_limit == 3


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("- a\n- b\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


def test_load_config_rejects_bad_log_level(monkeypatch):
    monkeypatch.setenv("MDSTUDY_LOG_LEVEL", "LOUD")
    with pytest.raises(ValueError):
        load_config()
