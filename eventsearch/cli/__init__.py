"""eventsearch CLI — Click command groups and sub-commands.

Running ``eventsearch`` with no sub-command starts the interactive menu.
The non-interactive sub-commands are split by concern:

- ``menu`` — the numbered tutorial menu
- ``index`` — ``index create``, ``index delete``, ``index count``, ``index list``
- ``docs`` — ``docs upload``, ``docs get``
- ``profile`` — ``profile apply``
- ``query`` — run one of the six query use cases
- ``config`` — ``config show``, ``config set``
"""

from __future__ import annotations

from pathlib import Path

import click

from eventsearch import __version__
from eventsearch.cli.common import CliState, configure_logging
from eventsearch.config import DEFAULT_CONFIG_PATH, load_config

# Configure structlog once at CLI entry; the group callback re-applies
# the configured level.
configure_logging()


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="eventsearch")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to config.toml",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """eventsearch — walk through a hosted search service from the console."""
    config = load_config(config_path)
    configure_logging(config.console.log_level)
    ctx.obj = CliState(config=config, config_path=config_path)
    if ctx.invoked_subcommand is None:
        ctx.invoke(menu)


# Register sub-command modules
from eventsearch.cli.config import config_group  # noqa: E402
from eventsearch.cli.index import docs_group, index_group, profile_group  # noqa: E402
from eventsearch.cli.menu import menu  # noqa: E402
from eventsearch.cli.query import query  # noqa: E402

cli.add_command(menu)
cli.add_command(index_group)
cli.add_command(docs_group)
cli.add_command(profile_group)
cli.add_command(query)
cli.add_command(config_group)
