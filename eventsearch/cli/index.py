"""CLI commands: index create/delete/count/list, docs upload/get, profile apply."""

from __future__ import annotations

import random
from datetime import timedelta

import click

from eventsearch import services
from eventsearch.cli.common import CliState, pass_state, run_with_client
from eventsearch.formatter import format_record
from eventsearch.sample_data import generate_events
from eventsearch.scoring import ProfileKind, ProfileParameters
from eventsearch.services import Session

# ── index ──────────────────────────────────────────────────────────


@click.group("index")
def index_group() -> None:
    """Index management."""


@index_group.command("create")
@click.argument("name")
@pass_state
def index_create(state: CliState, name: str) -> None:
    """Create the event index NAME."""
    session = run_with_client(
        state.config, lambda client: services.create_index(client, Session(), name)
    )
    click.secho(f"Index {session.index_name} added successfully.", fg="green")


@index_group.command("delete")
@click.argument("name")
@click.confirmation_option(prompt="Delete the index and all of its documents?")
@pass_state
def index_delete(state: CliState, name: str) -> None:
    """Delete index NAME."""
    run_with_client(
        state.config,
        lambda client: services.delete_index(client, Session(index_name=name)),
    )
    click.secho(f"Index {name} deleted successfully.", fg="green")


@index_group.command("count")
@click.argument("name")
@pass_state
def index_count(state: CliState, name: str) -> None:
    """Show how many documents index NAME holds."""
    count = run_with_client(
        state.config,
        lambda client: services.count_documents(client, Session(index_name=name)),
    )
    click.echo(f"Index {name} has {count} documents.")


@index_group.command("list")
@pass_state
def index_list(state: CliState) -> None:
    """List indexes with their document counts."""
    states = run_with_client(state.config, services.index_state)
    if not states:
        click.echo("Service doesn't contain any indexes.")
        return
    for s in states:
        click.echo(f"{s.name} ({s.document_count})")


# ── docs ───────────────────────────────────────────────────────────


@click.group("docs")
def docs_group() -> None:
    """Document upload and lookup."""


@docs_group.command("upload")
@click.argument("name")
@click.option("--count", "-n", type=int, default=None, help="Events to generate")
@click.option("--seed", type=int, default=None, help="Seed for reproducible data")
@pass_state
def docs_upload(state: CliState, name: str, count: int | None, seed: int | None) -> None:
    """Upload randomly generated sample events into index NAME."""
    documents = state.config.documents
    rng = random.Random(seed) if seed is not None else None
    records = generate_events(count or documents.sample_count, rng=rng)
    click.echo(f"Adding {len(records)} documents into index {name}...")
    uploaded = run_with_client(
        state.config,
        lambda client: services.add_documents(
            client,
            Session(index_name=name),
            records,
            batch_size=documents.batch_size,
        ),
    )
    click.secho(
        f"Added {uploaded} documents into index {name} successfully.", fg="green"
    )


@docs_group.command("get")
@click.argument("name")
@click.argument("key")
@pass_state
def docs_get(state: CliState, name: str, key: str) -> None:
    """Look up the document KEY in index NAME."""
    record = run_with_client(
        state.config,
        lambda client: services.lookup_document(
            client, Session(index_name=name), key
        ),
    )
    click.echo(format_record(record))


# ── profile ────────────────────────────────────────────────────────


@click.group("profile")
def profile_group() -> None:
    """Scoring profile management."""


@profile_group.command("apply")
@click.argument("name")
@click.argument("kind", type=click.Choice([k.value for k in ProfileKind]))
@click.option(
    "--half-life",
    type=float,
    default=5.0,
    show_default=True,
    help="Freshness half-life in minutes",
)
@click.option(
    "--max-distance",
    type=float,
    default=150.0,
    show_default=True,
    help="Geo boosting distance in km",
)
@pass_state
def profile_apply(
    state: CliState,
    name: str,
    kind: str,
    half_life: float,
    max_distance: float,
) -> None:
    """Add or replace a scoring profile of KIND on index NAME."""
    parameters = ProfileParameters(
        half_life=timedelta(minutes=half_life),
        max_distance=max_distance,
    )
    profile = run_with_client(
        state.config,
        lambda client: services.apply_profile(
            client, Session(index_name=name), ProfileKind(kind), parameters
        ),
    )
    click.secho(
        f"Index {name} updated successfully (scoring profile '{profile.name}').",
        fg="green",
    )
