"""Random sample events used by the "Add documents" operation.

Each event is a match between two football teams at a stadium, dated
up to 100 days in the future, with the teams' tags attached so that
tag-boosted queries have something to match.
"""

from __future__ import annotations

import random
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from eventsearch.records import EventRecord, GeoPoint

DESCRIPTION = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Suspendisse "
    "interdum purus nec lectus viverra, consequat auctor nunc maximus. Mauris "
    "porttitor urna dignissim risus laoreet, ut vulputate purus malesuada. "
    "Vestibulum ipsum odio, pharetra eget erat vitae, ullamcorper hendrerit "
    "justo. In gravida tincidunt turpis. Proin at sodales justo, a varius justo."
)

CATEGORY = "sport"
MAX_DAYS_AHEAD = 100


@dataclass(frozen=True)
class Venue:
    name: str
    location: GeoPoint


@dataclass(frozen=True)
class Team:
    name: str
    tags: tuple[str, str]


VENUES: tuple[Venue, ...] = (
    Venue("MetLife Stadium", GeoPoint(40.8135378, -74.0744119)),
    Venue("Lambeau Field", GeoPoint(44.501341, -88.062208)),
    Venue("AT&T Stadium", GeoPoint(32.747284, -97.094494)),
    Venue("FedEx Field", GeoPoint(38.907699, -76.866338)),
    Venue("Arrowhead Stadium", GeoPoint(39.048939, -94.483916)),
    Venue("Sports Authority Field at Mile High", GeoPoint(39.743948, -105.020084)),
    Venue("Sun Life Stadium", GeoPoint(25.957966, -80.23886)),
    Venue("Bank of America Stadium", GeoPoint(35.2259943, -80.8531416)),
    Venue("Mercedes-Benz Superdome", GeoPoint(29.951061, -90.081244)),
    Venue("FirstEnergy Stadium", GeoPoint(41.506054, -81.699548)),
    Venue("Ralph Wilson Stadium", GeoPoint(42.773698, -78.786948)),
    Venue("Georgia Dome", GeoPoint(33.75769, -84.400829)),
    Venue("NRG Stadium", GeoPoint(29.684722, -95.410707)),
    Venue("Qualcomm Stadium", GeoPoint(32.783994, -117.11997)),
    Venue("LP Field", GeoPoint(42.090946, -71.264346)),
    Venue("Lincoln Financial Field", GeoPoint(39.900732, -75.167535)),
    Venue("Levi's Stadium", GeoPoint(37.404108, -121.970274)),
    Venue("EverBank Field", GeoPoint(30.324662, -81.637074)),
    Venue("CenturyLink Field", GeoPoint(47.595152, -122.331639)),
    Venue("Edward Jones Dome", GeoPoint(38.6328042, -90.1884177)),
    Venue("Raymond James Stadium", GeoPoint(27.975959, -82.504133)),
    Venue("Paul Brown Stadium", GeoPoint(39.095442, -84.516039)),
    Venue("Heinz Field", GeoPoint(40.446765, -80.01576)),
    Venue("Ford Field", GeoPoint(42.340006, -83.045603)),
    Venue("University of Phoenix Stadium", GeoPoint(33.527625, -112.262559)),
    Venue("Lucas Oil Stadium", GeoPoint(39.760101, -86.163888)),
    Venue("Soldier Field", GeoPoint(41.862313, -87.616688)),
    Venue("O.co Coliseum", GeoPoint(37.751595, -122.200546)),
)

TEAMS: tuple[Team, ...] = (
    Team("Falcons", ("falcons", "atlanta")),
    Team("Jaguars", ("jaguars", "jacksonville")),
    Team("Bengals", ("bengals", "cincinnati")),
    Team("Colts", ("colts", "indianapolis")),
    Team("Packers", ("packers", "green bay")),
    Team("Chiefs", ("chiefs", "kansas")),
    Team("Dolphins", ("dolphins", "miami")),
    Team("Rams", ("rams", "st. louis")),
    Team("Jets", ("jets", "new york")),
    Team("Eagles", ("eagles", "philadelphia")),
    Team("Patriots", ("patriots", "new england")),
    Team("Giants", ("giants", "new york")),
    Team("Panthers", ("panthers", "carolina")),
    Team("Steelers", ("steelers", "pittsburgh")),
    Team("Redskins", ("redskins", "washington")),
    Team("Buccaneers", ("buccaneers", "tampa bay")),
    Team("Bears", ("bears", "chicago")),
    Team("Browns", ("browns", "cleveland")),
    Team("Broncos", ("broncos", "denver")),
    Team("Cowboys", ("cowboys", "dallas")),
    Team("49ers", ("49ers", "san francisco")),
    Team("Texans", ("texans", "houston")),
    Team("Ravens", ("ravens", "baltimore")),
    Team("Saints", ("saints", "new orleans")),
    Team("Vikings", ("vikings", "minnesota")),
    Team("Titans", ("titans", "tennessee")),
    Team("Seahawks", ("seahawks", "seattle")),
    Team("Raiders", ("raiders", "oakland")),
    Team("Cardinals", ("cardinals", "arizona")),
    Team("Chargers", ("chargers", "san diego")),
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def generate_events(
    count: int,
    *,
    rng: random.Random | None = None,
    clock: Callable[[], datetime] | None = None,
) -> list[EventRecord]:
    """Generate *count* random match events.

    Args:
        count: Number of events to create.
        rng: Random source (seed it for reproducible output).
        clock: Source of "now" for ``dateadded`` and the event dates
            (UTC wall clock when None).

    Returns:
        List of EventRecord objects with unique keys.
    """
    rng = rng or random.Random()
    clock = clock or _utcnow
    events: list[EventRecord] = []
    for _ in range(count):
        now = clock()
        venue = rng.choice(VENUES)
        home, away = rng.choice(TEAMS), rng.choice(TEAMS)
        events.append(
            EventRecord(
                key=str(uuid.UUID(int=rng.getrandbits(128), version=4)),
                name=f"{home.name} vs {away.name}",
                category=CATEGORY,
                description=DESCRIPTION,
                location=venue.name,
                geolocation=venue.location,
                date=now + timedelta(days=rng.random() * MAX_DAYS_AHEAD),
                date_added=now,
                rating=rng.randrange(10),
                tags=home.tags + away.tags,
            )
        )
    return events
