"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from eventsearch.config import (
    Config,
    ServiceConfig,
    load_config,
    parse_setting,
    render_toml,
    set_value,
)
from eventsearch.errors import ConfigError


def test_default_config() -> None:
    """Default config should have sensible defaults."""
    config = Config()
    assert config.service.api_version == "2023-11-01"
    assert config.service.timeout == 30.0
    assert config.documents.sample_count == 1000
    assert config.documents.batch_size == 1000
    assert config.console.log_level == "warning"
    assert config.session.default_index == ""


def test_load_config_no_file(tmp_path: Path) -> None:
    """Loading config without a file should return defaults."""
    config = load_config(tmp_path / "nonexistent.toml")
    assert config == Config()


def test_load_config_from_toml(tmp_path: Path) -> None:
    """Loading config from a TOML file should override defaults."""
    config_file = tmp_path / "config.toml"
    config_file.write_text("""
[service]
service_name = "my-search"
api_key = "secret"

[documents]
sample_count = 50

[console]
color = false
""")
    config = load_config(config_file)
    assert config.service.service_name == "my-search"
    assert config.service.api_key == "secret"
    assert config.documents.sample_count == 50
    assert config.console.color is False
    # Unset values remain default
    assert config.documents.batch_size == 1000


def test_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables should override TOML values."""
    config_file = tmp_path / "config.toml"
    config_file.write_text("[documents]\nsample_count = 10\n")

    monkeypatch.setenv("EVENTSEARCH_DOCUMENTS_SAMPLE_COUNT", "20")
    monkeypatch.setenv("EVENTSEARCH_SERVICE_TIMEOUT", "5")
    monkeypatch.setenv("EVENTSEARCH_CONSOLE_COLOR", "no")
    config = load_config(config_file)
    assert config.documents.sample_count == 20
    assert config.service.timeout == 5.0
    assert config.console.color is False


def test_out_of_range_values_clamped(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text("[documents]\nbatch_size = 5000\n\n[service]\ntimeout = 0.5\n")
    config = load_config(config_file)
    assert config.documents.batch_size == 1000
    assert config.service.timeout == 1.0


def test_invalid_log_level_uses_default(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text('[console]\nlog_level = "verbose"\n')
    assert load_config(config_file).console.log_level == "warning"


# ─── ServiceConfig ───────────────────────────────────────────


def test_base_url_from_service_name() -> None:
    cfg = ServiceConfig(service_name="demo", api_key="k")
    assert cfg.base_url == "https://demo.search.windows.net"
    assert cfg.is_configured


def test_endpoint_wins() -> None:
    cfg = ServiceConfig(endpoint="http://localhost:8080/", service_name="demo")
    assert cfg.base_url == "http://localhost:8080"
    assert not cfg.is_configured  # no api key


def test_unconfigured() -> None:
    assert ServiceConfig().base_url == ""
    assert not ServiceConfig(api_key="k").is_configured


# ─── typed settings ──────────────────────────────────────────


def test_toml_value_typed_by_field(tmp_path: Path) -> None:
    """Numeric TOML values for string settings are read as strings."""
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        "[session]\ndefault_index = 2024\n\n[service]\napi_key = 12345\ntimeout = 10\n"
    )
    config = load_config(config_file)
    assert config.session.default_index == "2024"
    assert config.service.api_key == "12345"
    assert config.service.timeout == 10.0


def test_toml_wrong_type_uses_default(tmp_path: Path) -> None:
    config_file = tmp_path / "config.toml"
    config_file.write_text(
        '[documents]\nsample_count = "many"\n\n[console]\ncolor = 1\n'
    )
    config = load_config(config_file)
    assert config.documents.sample_count == 1000
    assert config.console.color is True


def test_parse_setting_uses_field_type() -> None:
    assert parse_setting("session", "default_index", "2024") == "2024"
    assert parse_setting("service", "api_key", "12345") == "12345"
    assert parse_setting("service", "timeout", "15") == 15.0
    assert parse_setting("documents", "batch_size", "10") == 10
    assert parse_setting("console", "color", "false") is False


@pytest.mark.parametrize(
    ("section", "key", "text"),
    [
        ("documents", "batch_size", "ten"),
        ("console", "color", "maybe"),
        ("console", "log_level", "verbose"),
        ("service", "nope", "x"),
        ("nope", "key", "x"),
    ],
)
def test_parse_setting_rejects(section: str, key: str, text: str) -> None:
    with pytest.raises(ConfigError):
        parse_setting(section, key, text)


def test_set_value_keeps_other_settings(tmp_path: Path) -> None:
    path = tmp_path / "sub" / "config.toml"
    set_value("service", "service_name", "demo", path)
    set_value("session", "default_index", "2024", path)
    set_value("documents", "sample_count", "25", path)
    config = load_config(path)
    assert config.service.service_name == "demo"
    assert config.session.default_index == "2024"
    assert config.documents.sample_count == 25
    assert 'default_index = "2024"' in path.read_text()


def test_render_toml_types() -> None:
    text = render_toml({"console": {"color": False, "log_level": "info"}})
    assert "color = false" in text
    assert 'log_level = "info"' in text
