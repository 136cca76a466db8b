"""Scoring profile construction.

A scoring profile is a named ranking formula attached to an index.
Three kinds are supported, each a fixed combination of boost
functions whose contributions are summed by the service:

- ``FRESHNESS``: recent ``dateadded`` values score higher.
- ``FRESHNESS_TAG``: freshness plus overlap between a record's tags
  and a tag passed at query time.
- ``GEO``: records near a coordinate passed at query time score higher.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum

import structlog

from eventsearch.errors import InvalidParameter
from eventsearch.schema import DataType, get_field

logger = structlog.get_logger()

DEFAULT_PROFILE = "default"
GEO_PROFILE = "defaultgeo"
TAGS_PARAMETER = "tagsParameter"
LOCATION_PARAMETER = "mylocation"


class Interpolation(StrEnum):
    LINEAR = "linear"
    CONSTANT = "constant"
    QUADRATIC = "quadratic"
    LOGARITHMIC = "logarithmic"


class ProfileKind(StrEnum):
    FRESHNESS = "freshness"
    FRESHNESS_TAG = "freshness-tag"
    GEO = "geo"


def iso_duration(value: timedelta) -> str:
    """Render a positive timedelta as an ISO 8601 duration (``PT5M``)."""
    total = value.total_seconds()
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    out = "P"
    if days:
        out += f"{int(days)}D"
    time_part = ""
    if hours:
        time_part += f"{int(hours)}H"
    if minutes:
        time_part += f"{int(minutes)}M"
    if seconds:
        secs = int(seconds) if seconds == int(seconds) else round(seconds, 3)
        time_part += f"{secs}S"
    if time_part:
        out += "T" + time_part
    return out


# ── Scoring functions ──────────────────────────────────────────────


@dataclass(frozen=True)
class FreshnessFunction:
    """Boost records whose date field is close to the current time."""

    field_name: str
    boost: float
    half_life: timedelta
    interpolation: Interpolation = Interpolation.LOGARITHMIC

    def to_dict(self) -> dict[str, object]:
        return {
            "type": "freshness",
            "fieldName": self.field_name,
            "boost": self.boost,
            "interpolation": self.interpolation.value,
            "freshness": {"boostingDuration": iso_duration(self.half_life)},
        }


@dataclass(frozen=True)
class DistanceFunction:
    """Boost records within ``max_distance`` km of a reference point."""

    field_name: str
    boost: float
    reference_parameter: str
    max_distance: float
    interpolation: Interpolation = Interpolation.CONSTANT

    def to_dict(self) -> dict[str, object]:
        return {
            "type": "distance",
            "fieldName": self.field_name,
            "boost": self.boost,
            "interpolation": self.interpolation.value,
            "distance": {
                "referencePointParameter": self.reference_parameter,
                "boostingDistance": self.max_distance,
            },
        }


@dataclass(frozen=True)
class TagFunction:
    """Boost records sharing tags with a query-time parameter."""

    field_name: str
    boost: float
    tags_parameter: str
    interpolation: Interpolation = Interpolation.LINEAR

    def to_dict(self) -> dict[str, object]:
        return {
            "type": "tag",
            "fieldName": self.field_name,
            "boost": self.boost,
            "interpolation": self.interpolation.value,
            "tag": {"tagsParameter": self.tags_parameter},
        }


ScoringFunction = FreshnessFunction | DistanceFunction | TagFunction


@dataclass(frozen=True)
class ScoringProfile:
    """Named set of scoring functions, aggregated by summation."""

    name: str
    functions: tuple[ScoringFunction, ...]
    aggregation: str = "sum"

    @property
    def parameters(self) -> list[str]:
        """Names of the query-time parameters this profile references."""
        names: list[str] = []
        for fn in self.functions:
            if isinstance(fn, DistanceFunction):
                names.append(fn.reference_parameter)
            elif isinstance(fn, TagFunction):
                names.append(fn.tags_parameter)
        return names

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "functions": [fn.to_dict() for fn in self.functions],
            "functionAggregation": self.aggregation,
        }


# ── Builder ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProfileParameters:
    """Tunable inputs for :func:`build_profile`.

    Defaults reproduce the tutorial profiles.
    """

    freshness_field: str = "dateadded"
    freshness_boost: float = 200.0
    half_life: timedelta = field(default_factory=lambda: timedelta(minutes=5))
    tag_field: str = "tags"
    tag_boost: float = 500.0
    tags_parameter: str = TAGS_PARAMETER
    geo_field: str = "geolocation"
    geo_boost: float = 10000.0
    location_parameter: str = LOCATION_PARAMETER
    max_distance: float = 150.0
    name: str | None = None


def _require_positive(parameter: str, value: float) -> None:
    if value <= 0:
        raise InvalidParameter(
            f"{parameter} must be greater than 0, got {value}", parameter=parameter
        )


def _require_field(name: str, allowed: set[DataType], purpose: str) -> None:
    f = get_field(name)
    if f.type not in allowed:
        raise InvalidParameter(
            f"Field '{name}' of type {f.type.value} cannot be used for {purpose}",
            parameter=name,
        )


def _freshness(params: ProfileParameters) -> FreshnessFunction:
    _require_positive("freshness_boost", params.freshness_boost)
    _require_positive("half_life", params.half_life.total_seconds())
    _require_field(params.freshness_field, {DataType.DATE}, "freshness scoring")
    return FreshnessFunction(
        field_name=params.freshness_field,
        boost=params.freshness_boost,
        half_life=params.half_life,
    )


def _tag(params: ProfileParameters) -> TagFunction:
    _require_positive("tag_boost", params.tag_boost)
    _require_field(
        params.tag_field,
        {DataType.STRING, DataType.STRING_COLLECTION},
        "tag scoring",
    )
    if not params.tags_parameter:
        raise InvalidParameter(
            "tags_parameter must not be empty", parameter="tags_parameter"
        )
    return TagFunction(
        field_name=params.tag_field,
        boost=params.tag_boost,
        tags_parameter=params.tags_parameter,
    )


def _distance(params: ProfileParameters) -> DistanceFunction:
    _require_positive("geo_boost", params.geo_boost)
    _require_positive("max_distance", params.max_distance)
    _require_field(params.geo_field, {DataType.GEO_POINT}, "distance scoring")
    if not params.location_parameter:
        raise InvalidParameter(
            "location_parameter must not be empty", parameter="location_parameter"
        )
    return DistanceFunction(
        field_name=params.geo_field,
        boost=params.geo_boost,
        reference_parameter=params.location_parameter,
        max_distance=params.max_distance,
    )


def build_profile(
    kind: ProfileKind,
    parameters: ProfileParameters | None = None,
) -> ScoringProfile:
    """Build a scoring profile of the given kind.

    Args:
        kind: Which profile to build.
        parameters: Boosts, durations and field names; defaults when None.

    Returns:
        The validated ScoringProfile.

    Raises:
        InvalidParameter: A boost, half-life or distance is not positive,
            or a referenced field is missing from the schema or has the
            wrong type.
    """
    params = parameters or ProfileParameters()
    functions: tuple[ScoringFunction, ...]
    if kind is ProfileKind.FRESHNESS:
        functions = (_freshness(params),)
        default_name = DEFAULT_PROFILE
    elif kind is ProfileKind.FRESHNESS_TAG:
        functions = (_freshness(params), _tag(params))
        default_name = DEFAULT_PROFILE
    elif kind is ProfileKind.GEO:
        functions = (_distance(params),)
        default_name = GEO_PROFILE
    else:
        raise InvalidParameter(f"Unknown profile kind: {kind}", parameter="kind")

    profile = ScoringProfile(name=params.name or default_name, functions=functions)
    logger.debug(
        "scoring_profile_built",
        kind=str(kind),
        name=profile.name,
        functions=len(functions),
    )
    return profile


def merge_profiles(
    existing: Iterable[Mapping[str, object]],
    profiles: Iterable[ScoringProfile],
) -> list[dict[str, object]]:
    """Merge new profiles into an index's existing profile list.

    A profile replaces an existing one with the same name; profiles
    with other names are kept in their original order.
    """
    new = {p.name: p.to_dict() for p in profiles}
    merged = [dict(p) for p in existing if p.get("name") not in new]
    merged.extend(new.values())
    return merged
