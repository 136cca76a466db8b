"""CLI command: query (one of the six use cases)."""

from __future__ import annotations

import click

from eventsearch import services
from eventsearch.cli.common import CliState, pass_state, run_with_client
from eventsearch.errors import InvalidParameter
from eventsearch.formatter import format_results, format_results_json
from eventsearch.query import RuntimeInputs, UseCase
from eventsearch.records import GeoPoint
from eventsearch.services import Session

_USE_CASE_HELP = "; ".join(f"{u.value}={u.shape.label}" for u in UseCase)


@click.command()
@click.argument("name")
@click.argument("text", default="")
@click.option(
    "--use-case",
    "-u",
    type=click.IntRange(1, len(UseCase)),
    default=1,
    show_default=True,
    help=_USE_CASE_HELP,
)
@click.option("--location", default=None, help="Reference point as 'lat,lon'")
@click.option("--tag", default=None, help="Favourite tag for tag ranking")
@click.option("--json", "as_json", is_flag=True, default=False, help="JSON output")
@pass_state
def query(
    state: CliState,
    name: str,
    text: str,
    use_case: int,
    location: str | None,
    tag: str | None,
    as_json: bool,
) -> None:
    """Search index NAME for TEXT."""
    try:
        inputs = RuntimeInputs(
            location=GeoPoint.parse(location) if location else None,
            favorite_tag=tag,
        )
    except InvalidParameter as exc:
        raise click.BadParameter(str(exc), param_hint="--location") from exc

    result = run_with_client(
        state.config,
        lambda client: services.run_query(
            client,
            Session(index_name=name),
            UseCase(use_case),
            search_text=text,
            inputs=inputs,
        ),
    )
    click.echo(format_results_json(result) if as_json else format_results(result))
