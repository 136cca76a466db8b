"""CLI commands: config show, config set."""

from __future__ import annotations

from dataclasses import asdict

import click

from eventsearch.cli.common import CliState, pass_state
from eventsearch.config import set_value
from eventsearch.errors import ConfigError

_SECRET_KEYS = frozenset({"api_key"})


@click.group("config")
def config_group() -> None:
    """Configuration management."""


@config_group.command("show")
@pass_state
def config_show(state: CliState) -> None:
    """Show current configuration."""
    cfg = asdict(state.config)
    for section_name, section in cfg.items():
        click.echo(f"[{section_name}]")
        for key, value in section.items():
            if key in _SECRET_KEYS and value:
                value = "********"
            click.echo(f"  {key} = {value}")
        click.echo()


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@pass_state
def config_set(state: CliState, key: str, value: str) -> None:
    """Set a configuration value (section.key = value).

    Example: eventsearch config set service.service_name my-search
    """
    if "." not in key:
        raise click.BadParameter(
            "Key must be in 'section.key' format (e.g., service.api_key)",
            param_hint="KEY",
        )

    section, field_name = key.split(".", 1)
    try:
        written = set_value(section, field_name, value, state.config_path)
    except ConfigError as exc:
        raise click.BadParameter(str(exc), param_hint="KEY VALUE") from exc
    shown = "********" if field_name in _SECRET_KEYS else written
    click.echo(f"Set {section}.{field_name} = {shown}")
