"""Interactive numbered menu.

Each loop prints the service's index state and the menu, reads a
choice and runs the matching operation.  A failing operation is
reported in red and the loop carries on; only ``0. Exit`` ends it.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import click
import structlog
from rich.console import Console

from eventsearch import services
from eventsearch.cli.common import CliState, make_client, pass_state
from eventsearch.config import Config
from eventsearch.errors import EventSearchError
from eventsearch.formatter import format_results, record_lines
from eventsearch.query import Clock, RuntimeInput, RuntimeInputs, UseCase
from eventsearch.records import GeoPoint
from eventsearch.sample_data import generate_events
from eventsearch.scoring import ProfileKind
from eventsearch.services import Session
from eventsearch.types import SearchServiceLike

logger = structlog.get_logger()

ENABLED_STYLE = "white"  # items expected to succeed
DISABLED_STYLE = "grey50"  # items expected to fail
STATE_STYLE = "yellow"
SUCCESS_STYLE = "green"
ERROR_STYLE = "bold red"


@dataclass(frozen=True)
class MenuContext:
    """Everything a menu handler needs besides the session."""

    client: SearchServiceLike
    console: Console
    config: Config
    clock: Clock | None = None
    rng: random.Random | None = None


Handler = Callable[[MenuContext, Session], Awaitable[Session]]
Selector = Callable[[Session], Session]


def _ask(prompt: str) -> str:
    return str(click.prompt(prompt, default="", show_default=False))


def _ensure_index(session: Session) -> Session:
    if session.index_name:
        return session
    return session.with_index(_ask("What's the index's name"))


def _new_index(session: Session) -> Session:
    return session.with_index(_ask("What's the index's name"))


@dataclass(frozen=True)
class MenuItem:
    """A menu entry.

    ``select`` picks the target index before ``handler`` runs; the
    selection is kept even when the handler fails.
    """

    label: str
    handler: Handler
    select: Selector = _ensure_index
    always_enabled: bool = False


# ── Handlers ───────────────────────────────────────────────────────


async def _create_index(ctx: MenuContext, session: Session) -> Session:
    session = await services.create_index(
        ctx.client, session, session.require_index()
    )
    ctx.console.print(
        f"Index {session.index_name} added successfully.", style=SUCCESS_STYLE
    )
    return session


async def _add_documents(ctx: MenuContext, session: Session) -> Session:
    records = generate_events(
        ctx.config.documents.sample_count,
        rng=ctx.rng,
        clock=ctx.clock,
    )
    ctx.console.print(
        f"Adding {len(records)} documents into index {session.index_name}..."
    )
    count = await services.add_documents(
        ctx.client, session, records, batch_size=ctx.config.documents.batch_size
    )
    ctx.console.print(
        f"Added {count} documents into index {session.index_name} successfully.",
        style=SUCCESS_STYLE,
    )
    return session


async def _count_documents(ctx: MenuContext, session: Session) -> Session:
    count = await services.count_documents(ctx.client, session)
    ctx.console.print(
        f"Index {session.index_name} has {count} documents.", style=SUCCESS_STYLE
    )
    return session


def _read_inputs(use_case: UseCase) -> RuntimeInputs:
    location: GeoPoint | None = None
    favorite_tag: str | None = None
    for required in use_case.shape.requires:
        if required is RuntimeInput.LOCATION:
            text = _ask("Where are you searching from? (latitude,longitude)")
            location = GeoPoint.parse(text) if text.strip() else None
        elif required is RuntimeInput.FAVORITE_TAG:
            favorite_tag = _ask("Which is your favourite team?")
    return RuntimeInputs(location=location, favorite_tag=favorite_tag)


def _query(use_case: UseCase) -> Handler:
    async def handler(ctx: MenuContext, session: Session) -> Session:
        search_text = _ask("What would you like to search?")
        inputs = _read_inputs(use_case)
        result = await services.run_query(
            ctx.client,
            session,
            use_case,
            search_text=search_text,
            inputs=inputs,
            clock=ctx.clock,
        )
        ctx.console.print(format_results(result), markup=False)
        return session

    return handler


def _update_profile(kind: ProfileKind) -> Handler:
    async def handler(ctx: MenuContext, session: Session) -> Session:
        profile = await services.apply_profile(ctx.client, session, kind)
        ctx.console.print(
            f"Index {session.index_name} updated successfully "
            f"(scoring profile '{profile.name}').",
            style=SUCCESS_STYLE,
        )
        return session

    return handler


async def _lookup_document(ctx: MenuContext, session: Session) -> Session:
    key = _ask("What's the document's key?")
    record = await services.lookup_document(ctx.client, session, key)
    ctx.console.print(f"Document {key.strip()}:", style=SUCCESS_STYLE, markup=False)
    ctx.console.print("\n".join(record_lines(record)), markup=False)
    return session


async def _delete_index(ctx: MenuContext, session: Session) -> Session:
    name = session.index_name
    session = await services.delete_index(ctx.client, session)
    ctx.console.print(f"Index {name} deleted successfully.", style=SUCCESS_STYLE)
    return session


MENU: dict[int, MenuItem] = {
    1: MenuItem(
        "Create index", _create_index, select=_new_index, always_enabled=True
    ),
    2: MenuItem("Add documents", _add_documents),
    3: MenuItem("Count index", _count_documents),
    4: MenuItem("Query index - ALL (simple)", _query(UseCase.SIMPLE_ALL)),
    5: MenuItem("Query index - ANY (simple)", _query(UseCase.SIMPLE_ANY)),
    6: MenuItem("Query index - ALL (with facets)", _query(UseCase.FACETED)),
    7: MenuItem("Index update", _update_profile(ProfileKind.FRESHNESS)),
    8: MenuItem(
        "Query index - ALL (using scoring profiles)",
        _query(UseCase.FRESHNESS_RANKED),
    ),
    9: MenuItem(
        "Index update (geo-location scoring profile)",
        _update_profile(ProfileKind.GEO),
    ),
    10: MenuItem(
        "Query index - ALL (using geo-location scoring profile)",
        _query(UseCase.GEO_RANKED),
    ),
    11: MenuItem(
        "Index update (freshness + tag scoring profile)",
        _update_profile(ProfileKind.FRESHNESS_TAG),
    ),
    12: MenuItem(
        "Query index - ALL (using freshness + tag scoring profile)",
        _query(UseCase.TAG_RANKED),
    ),
    13: MenuItem("Document lookup", _lookup_document),
    14: MenuItem("Delete index", _delete_index),
}


# ── Loop ───────────────────────────────────────────────────────────


def _report_error(console: Console, exc: Exception) -> None:
    console.print(str(exc), style=ERROR_STYLE, markup=False)
    if isinstance(exc, EventSearchError):
        console.print(exc.info.format(), style=DISABLED_STYLE, markup=False)


async def _print_index_state(ctx: MenuContext) -> bool:
    """Print every index with its document count; returns True if any exist."""
    ctx.console.print("Current indexes state:", style=STATE_STYLE)
    try:
        states = await services.index_state(ctx.client)
    except EventSearchError as exc:
        _report_error(ctx.console, exc)
        return False
    if not states:
        ctx.console.print(
            "\tService doesn't contain any indexes.", style=STATE_STYLE
        )
    for state in states:
        ctx.console.print(
            f"\t{state.name} ({state.document_count})",
            style=STATE_STYLE,
            markup=False,
        )
    return bool(states)


def _print_menu(console: Console, has_indexes: bool) -> None:
    for number, item in MENU.items():
        style = ENABLED_STYLE if item.always_enabled or has_indexes else DISABLED_STYLE
        console.print(f"{number}. {item.label}", style=style)
    console.print("0. Exit", style=ENABLED_STYLE)


async def run_menu(ctx: MenuContext, session: Session) -> Session:
    """Run the menu until the operator picks Exit; returns the final session."""
    while True:
        has_indexes = await _print_index_state(ctx)
        ctx.console.print()
        _print_menu(ctx.console, has_indexes)
        ctx.console.print()

        choice = click.prompt(
            f"Enter an option [0-{len(MENU)}] and press ENTER",
            type=click.IntRange(0, len(MENU)),
        )
        if choice == 0:
            return session

        item = MENU[choice]
        try:
            session = item.select(session)
            session = await item.handler(ctx, session)
        except EventSearchError as exc:
            logger.info("operation_failed", item=item.label, error=str(exc))
            _report_error(ctx.console, exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("operation_crashed", item=item.label)
            _report_error(ctx.console, exc)
        ctx.console.print()


@click.command("menu")
@pass_state
def menu(state: CliState) -> None:
    """Run the interactive tutorial menu."""
    config = state.config
    console = Console(no_color=not config.console.color, highlight=False)
    session = Session(index_name=config.session.default_index or None)

    async def _run() -> None:
        async with make_client(config) as client:
            ctx = MenuContext(client=client, console=console, config=config)
            await run_menu(ctx, session)

    try:
        asyncio.run(_run())
    except EventSearchError as exc:
        raise click.ClickException(str(exc)) from exc
