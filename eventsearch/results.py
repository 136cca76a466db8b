"""Result sets returned by the search service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from eventsearch.records import EventRecord, parse_datetime

FacetValue = str | int | float | datetime


@dataclass(frozen=True)
class FacetBucket:
    """One facet bucket: a single value or a range, with its count.

    Range buckets carry ``start`` and/or ``end``; value buckets carry
    ``value``.
    """

    count: int
    value: FacetValue | None = None
    start: FacetValue | None = None
    end: FacetValue | None = None


@dataclass(frozen=True)
class SearchHit:
    """A ranked record projection."""

    record: EventRecord
    score: float


@dataclass(frozen=True)
class ResultSet:
    """Ranked hits plus optional facet buckets and total count."""

    hits: list[SearchHit] = field(default_factory=list)
    facets: dict[str, list[FacetBucket]] | None = None
    total_count: int | None = None

    @property
    def returned(self) -> int:
        return len(self.hits)


def _facet_value(raw: Any) -> FacetValue:
    if isinstance(raw, str):
        try:
            return parse_datetime(raw)
        except ValueError:
            return raw
    return raw


def _parse_bucket(raw: dict[str, Any]) -> FacetBucket:
    count = int(raw.get("count", 0))
    if "value" in raw:
        return FacetBucket(count=count, value=_facet_value(raw["value"]))
    start = raw.get("from")
    end = raw.get("to")
    return FacetBucket(
        count=count,
        start=_facet_value(start) if start is not None else None,
        end=_facet_value(end) if end is not None else None,
    )


def parse_search_response(payload: dict[str, Any]) -> ResultSet:
    """Build a ResultSet from a search endpoint response body."""
    hits = [
        SearchHit(
            record=EventRecord.from_document(doc),
            score=float(doc.get("@search.score", 0.0)),
        )
        for doc in payload.get("value", [])
    ]
    raw_facets = payload.get("@search.facets")
    facets = None
    if raw_facets is not None:
        facets = {
            name: [_parse_bucket(b) for b in buckets]
            for name, buckets in raw_facets.items()
        }
    total = payload.get("@odata.count")
    return ResultSet(
        hits=hits,
        facets=facets,
        total_count=int(total) if total is not None else None,
    )
