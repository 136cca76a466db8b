"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

import click
import structlog

from eventsearch.client import SearchServiceClient
from eventsearch.config import DEFAULT_CONFIG_PATH, Config
from eventsearch.errors import EventSearchError
from eventsearch.types import SearchServiceLike


@dataclass(frozen=True)
class CliState:
    """Loaded configuration plus where it came from."""

    config: Config
    config_path: Path = DEFAULT_CONFIG_PATH


pass_state = click.make_pass_decorator(CliState)


def _stderr_logger(*args: object) -> structlog.PrintLogger:
    # sys.stderr is looked up per logger so redirected streams are honoured
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str = "warning") -> None:
    """Configure structlog to write filtered, human-readable lines to stderr."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.WARNING)
        ),
        context_class=dict,
        logger_factory=_stderr_logger,
    )


def make_client(config: Config) -> SearchServiceClient:
    """Create the service client for *config*."""
    return SearchServiceClient(config.service)


T = TypeVar("T")


def run_with_client(
    config: Config,
    operation: Callable[[SearchServiceLike], Awaitable[T]],
) -> T:
    """Run one async operation against a fresh client.

    eventsearch errors become ``click.ClickException`` so the command
    prints ``Error: ...`` and exits with status 1.
    """

    async def _run() -> T:
        async with make_client(config) as client:
            return await operation(client)

    try:
        return asyncio.run(_run())
    except EventSearchError as exc:
        raise click.ClickException(str(exc)) from exc
