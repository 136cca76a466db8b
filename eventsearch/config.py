"""Configuration management for eventsearch.

Loads settings from ~/.eventsearch/config.toml with environment variable overrides.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, field
from dataclasses import fields as dataclass_fields
from pathlib import Path
from typing import TypeVar

import structlog

from eventsearch.errors import ConfigError

logger = structlog.get_logger()

# Default paths
DEFAULT_DATA_DIR = Path.home() / ".eventsearch"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.toml"

SERVICE_DOMAIN = "search.windows.net"


@dataclass(frozen=True)
class ServiceConfig:
    """Search service connection settings."""

    endpoint: str = ""  # overrides service_name when set
    service_name: str = ""
    api_key: str = ""
    api_version: str = "2023-11-01"
    timeout: float = 30.0

    @property
    def base_url(self) -> str:
        if self.endpoint:
            return self.endpoint.rstrip("/")
        if self.service_name:
            return f"https://{self.service_name}.{SERVICE_DOMAIN}"
        return ""

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url and self.api_key)


@dataclass(frozen=True)
class SessionConfig:
    """Interactive session defaults."""

    default_index: str = ""


@dataclass(frozen=True)
class DocumentsConfig:
    """Sample document upload settings."""

    sample_count: int = 1000
    batch_size: int = 1000


@dataclass(frozen=True)
class ConsoleConfig:
    """Console output settings."""

    log_level: str = "warning"
    color: bool = True


@dataclass(frozen=True)
class Config:
    """Root configuration container."""

    service: ServiceConfig = field(default_factory=ServiceConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    documents: DocumentsConfig = field(default_factory=DocumentsConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)


def _env_override(section: str, key: str) -> str | None:
    """Check for EVENTSEARCH_{SECTION}_{KEY} environment variable."""
    env_key = f"EVENTSEARCH_{section.upper()}_{key.upper()}"
    return os.environ.get(env_key)


def _coerce(value: str, target_type: type) -> object:
    """Coerce a string value to the target type."""
    if target_type is bool:
        return value.lower() in ("true", "1", "yes")
    if target_type is int:
        return int(value)
    if target_type is float:
        return float(value)
    return value


_BOOL_WORDS = frozenset({"true", "false", "1", "0", "yes", "no"})


def _conform(key: str, value: object, target_type: type) -> object:
    """Check a TOML value against the setting's type; None means use the default."""
    if isinstance(value, bool) == (target_type is bool):
        if isinstance(value, target_type):
            return value
        if target_type is float and isinstance(value, int):
            return float(value)
        if target_type is str and isinstance(value, int | float):
            return str(value)
    logger.warning(
        "config_wrong_type",
        key=key,
        value=value,
        expected=target_type.__name__,
    )
    return None


# Configuration value constraints
_VALUE_CONSTRAINTS: dict[str, tuple[float, float]] = {
    "timeout": (1.0, 600.0),
    "sample_count": (1, 100000),
    "batch_size": (1, 1000),
}

# Allowed values for string enums
_ALLOWED_VALUES: dict[str, frozenset[str]] = {
    "log_level": frozenset({"debug", "info", "warning", "error", "critical"}),
}


def _validate_value(key: str, value: object) -> object:
    """Validate a config value against known constraints."""
    if key in _VALUE_CONSTRAINTS and isinstance(value, (int, float)):
        lo, hi = _VALUE_CONSTRAINTS[key]
        if not (lo <= value <= hi):
            logger.warning(
                "config_value_out_of_range",
                key=key,
                value=value,
                min=lo,
                max=hi,
            )
            # Clamp to valid range
            return type(value)(max(lo, min(hi, value)))
    if (
        key in _ALLOWED_VALUES
        and isinstance(value, str)
        and value.lower() not in _ALLOWED_VALUES[key]
    ):
        logger.warning(
            "config_invalid_value",
            key=key,
            value=value,
            allowed=sorted(_ALLOWED_VALUES[key]),
        )
        return None  # Will use default
    return value


T = TypeVar("T")


def _build_section(
    cls: type[T], toml_section: dict[str, object], section_name: str
) -> T:
    """Build a dataclass instance from TOML data + env overrides."""
    kwargs: dict[str, object] = {}
    for f in dataclass_fields(cls):  # type: ignore[arg-type]
        target_type = f.type if isinstance(f.type, type) else type(f.default)
        # TOML value
        raw = toml_section.get(f.name)
        if raw is not None:
            raw = _conform(f.name, raw, target_type)
        # env override
        env_val = _env_override(section_name, f.name)
        if env_val is not None:
            raw = _coerce(env_val, target_type)
        if raw is not None:
            validated = _validate_value(f.name, raw)
            if validated is not None:
                kwargs[f.name] = validated
    return cls(**kwargs)


_SECTIONS: tuple[tuple[str, type], ...] = (
    ("service", ServiceConfig),
    ("session", SessionConfig),
    ("documents", DocumentsConfig),
    ("console", ConsoleConfig),
)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from TOML file with environment variable overrides.

    Priority: env vars > config.toml > defaults.

    Args:
        config_path: Path to config file. Defaults to ~/.eventsearch/config.toml.

    Returns:
        Populated Config instance.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    raw: dict[str, object] = {}

    if path.exists():
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        logger.info("config_loaded", path=str(path))
    else:
        logger.info("config_default", path=str(path), reason="file not found")

    sections = {
        name: _build_section(cls, raw.get(name, {}), name)  # type: ignore[arg-type]
        for name, cls in _SECTIONS
    }
    return Config(**sections)


def parse_setting(section: str, key: str, text: str) -> object:
    """Convert command-line text to the type of setting ``section.key``.

    Raises:
        ConfigError: The setting is unknown, or *text* is not a valid
            value for it.
    """
    defaults: dict[str, dict[str, object]] = asdict(Config())
    if key not in defaults.get(section, {}):
        raise ConfigError(f"Unknown setting '{section}.{key}'")
    target_type = type(defaults[section][key])
    if target_type is bool and text.lower() not in _BOOL_WORDS:
        raise ConfigError(f"Setting '{section}.{key}' expects true or false")
    try:
        value = _coerce(text, target_type)
    except ValueError:
        raise ConfigError(
            f"Setting '{section}.{key}' expects {target_type.__name__}, got {text!r}"
        ) from None
    validated = _validate_value(key, value)
    if validated is None:
        raise ConfigError(f"Invalid value {text!r} for '{section}.{key}'")
    return validated


def set_value(
    section: str, key: str, text: str, config_path: Path | None = None
) -> object:
    """Write one setting into the TOML file, keeping the others.

    Returns:
        The typed value that was written.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    value = parse_setting(section, key, text)

    raw: dict[str, dict[str, object]] = {}
    if path.exists():
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    raw.setdefault(section, {})[key] = value

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_toml(raw), encoding="utf-8")
    logger.info("config_saved", path=str(path), setting=f"{section}.{key}")
    return value


def render_toml(sections: dict[str, dict[str, object]]) -> str:
    """Render a two-level mapping as TOML (tomllib is read-only)."""
    lines: list[str] = ["# eventsearch configuration", ""]
    for section_name, section_dict in sections.items():
        lines.append(f"[{section_name}]")
        for key, value in section_dict.items():
            if isinstance(value, bool):
                lines.append(f"{key} = {str(value).lower()}")
            elif isinstance(value, str):
                escaped = value.replace("\\", "\\\\").replace('"', '\\"')
                lines.append(f'{key} = "{escaped}"')
            elif isinstance(value, (float, int)):
                lines.append(f"{key} = {value}")
        lines.append("")
    return "\n".join(lines)
