"""Query request construction.

Every query the tutorial runs is one of six fixed use cases.  Each use
case declares its shape (match mode, projected fields, facets, page
size, scoring profile) and the runtime inputs its scoring profile
needs.  :func:`build_query` turns a use case plus those inputs into a
complete :class:`QueryRequest`, failing locally when an input is
missing so an incomplete request never reaches the service.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import IntEnum, StrEnum

import structlog

from eventsearch.errors import MissingRuntimeInput
from eventsearch.records import GeoPoint, format_datetime
from eventsearch.scoring import (
    DEFAULT_PROFILE,
    GEO_PROFILE,
    LOCATION_PARAMETER,
    TAGS_PARAMETER,
)

logger = structlog.get_logger()

Clock = Callable[[], datetime]

# Date facet buckets are split at these offsets from "now".
DATE_BUCKET_OFFSETS = (timedelta(days=10), timedelta(days=20))
RATING_FACET_COUNT = 5
RANKED_PAGE_SIZE = 10


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SearchMode(StrEnum):
    """Whether all or any of the query terms must match."""

    ALL = "all"
    ANY = "any"


class RuntimeInput(StrEnum):
    """Values an operator supplies at query time."""

    LOCATION = "location"
    FAVORITE_TAG = "favorite_tag"


@dataclass(frozen=True)
class FacetSpec:
    """A facet request: a field plus an optional bucket spec."""

    field: str
    count: int | None = None
    sort: str | None = None
    values: tuple[datetime | int | float, ...] = ()

    def to_expression(self) -> str:
        """Render as a facet expression, e.g. ``rating,count:5,sort:count``."""
        parts = [self.field]
        if self.count is not None:
            parts.append(f"count:{self.count}")
        if self.sort is not None:
            parts.append(f"sort:{self.sort}")
        if self.values:
            rendered = [
                format_datetime(v) if isinstance(v, datetime) else str(v)
                for v in self.values
            ]
            parts.append("values:" + "|".join(rendered))
        return ",".join(parts)


@dataclass(frozen=True)
class RuntimeInputs:
    """Runtime values a ranked query may need."""

    location: GeoPoint | None = None
    favorite_tag: str | None = None


@dataclass(frozen=True)
class QueryShape:
    """Fixed parameters of one use case."""

    label: str
    mode: SearchMode
    select: tuple[str, ...]
    faceted: bool = False
    top: int | None = None
    scoring_profile: str | None = None
    requires: tuple[RuntimeInput, ...] = ()


class UseCase(IntEnum):
    """The six query shapes the tutorial demonstrates."""

    SIMPLE_ALL = 1
    SIMPLE_ANY = 2
    FACETED = 3
    FRESHNESS_RANKED = 4
    GEO_RANKED = 5
    TAG_RANKED = 6

    @property
    def shape(self) -> QueryShape:
        return QUERY_SHAPES[self]


QUERY_SHAPES: dict[UseCase, QueryShape] = {
    UseCase.SIMPLE_ALL: QueryShape(
        label="ALL (simple)",
        mode=SearchMode.ALL,
        select=("key", "name"),
    ),
    UseCase.SIMPLE_ANY: QueryShape(
        label="ANY (simple)",
        mode=SearchMode.ANY,
        select=("key", "name"),
    ),
    UseCase.FACETED: QueryShape(
        label="ALL (with facets)",
        mode=SearchMode.ALL,
        select=("key", "name", "date"),
        faceted=True,
    ),
    UseCase.FRESHNESS_RANKED: QueryShape(
        label="ALL (using scoring profiles)",
        mode=SearchMode.ALL,
        select=("key", "name", "date", "dateadded", "rating"),
        faceted=True,
        top=RANKED_PAGE_SIZE,
        scoring_profile=DEFAULT_PROFILE,
    ),
    UseCase.GEO_RANKED: QueryShape(
        label="ALL (using geo-location scoring profile)",
        mode=SearchMode.ALL,
        select=("key", "name", "date", "location"),
        faceted=True,
        top=RANKED_PAGE_SIZE,
        scoring_profile=GEO_PROFILE,
        requires=(RuntimeInput.LOCATION,),
    ),
    UseCase.TAG_RANKED: QueryShape(
        label="ALL (using freshness + tag scoring profile)",
        mode=SearchMode.ALL,
        select=("key", "name", "date", "location"),
        faceted=True,
        top=RANKED_PAGE_SIZE,
        scoring_profile=DEFAULT_PROFILE,
        requires=(RuntimeInput.FAVORITE_TAG,),
    ),
}


@dataclass(frozen=True)
class QueryRequest:
    """A complete, validated query."""

    search_text: str
    mode: SearchMode
    select: tuple[str, ...]
    facets: tuple[FacetSpec, ...] = ()
    include_total_count: bool = True
    top: int | None = None
    scoring_profile: str | None = None
    scoring_parameters: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Request body for the service's search endpoint."""
        body: dict[str, object] = {
            "search": self.search_text or "*",
            "searchMode": self.mode.value,
            "count": self.include_total_count,
            "select": ",".join(self.select),
        }
        if self.facets:
            body["facets"] = [f.to_expression() for f in self.facets]
        if self.top is not None:
            body["top"] = self.top
        if self.scoring_profile:
            body["scoringProfile"] = self.scoring_profile
        if self.scoring_parameters:
            body["scoringParameters"] = [
                f"{name}-{value}" for name, value in self.scoring_parameters.items()
            ]
        return body


def build_facets(now: datetime) -> tuple[FacetSpec, ...]:
    """Rating value facet plus date buckets relative to *now*."""
    return (
        FacetSpec("rating", count=RATING_FACET_COUNT, sort="count"),
        FacetSpec("date", values=tuple(now + d for d in DATE_BUCKET_OFFSETS)),
    )


def _scoring_parameters(
    use_case: UseCase, inputs: RuntimeInputs
) -> dict[str, str]:
    params: dict[str, str] = {}
    for required in use_case.shape.requires:
        if required is RuntimeInput.LOCATION:
            if inputs.location is None:
                raise MissingRuntimeInput(
                    LOCATION_PARAMETER, "reference coordinate for geo ranking"
                )
            params[LOCATION_PARAMETER] = inputs.location.scoring_value()
        elif required is RuntimeInput.FAVORITE_TAG:
            tag = (inputs.favorite_tag or "").strip()
            if not tag:
                raise MissingRuntimeInput(
                    TAGS_PARAMETER, "favourite tag for tag ranking"
                )
            params[TAGS_PARAMETER] = tag
    return params


def build_query(
    use_case: UseCase,
    inputs: RuntimeInputs | None = None,
    *,
    search_text: str = "",
    clock: Clock | None = None,
) -> QueryRequest:
    """Build the query request for a use case.

    Args:
        use_case: Which of the six query shapes to build.
        inputs: Runtime values; only ranked use cases read them.
        search_text: Free-text query typed by the operator.
        clock: Source of "now" for date facet boundaries (UTC wall clock
            when None).

    Returns:
        A QueryRequest ready to send.

    Raises:
        MissingRuntimeInput: The use case's scoring profile needs a value
            that *inputs* does not provide.
    """
    shape = use_case.shape
    params = _scoring_parameters(use_case, inputs or RuntimeInputs())
    facets = build_facets((clock or _utcnow)()) if shape.faceted else ()

    request = QueryRequest(
        search_text=search_text,
        mode=shape.mode,
        select=shape.select,
        facets=facets,
        top=shape.top,
        scoring_profile=shape.scoring_profile,
        scoring_parameters=params,
    )
    logger.debug(
        "query_built",
        use_case=use_case.name,
        mode=shape.mode.value,
        profile=shape.scoring_profile,
        parameters=sorted(params),
    )
    return request
