"""Tests for result parsing and formatting."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

from eventsearch.formatter import (
    FACETS_RULE,
    RESULTS_RULE,
    format_bucket,
    format_record,
    format_results,
    format_results_json,
    record_lines,
)
from eventsearch.records import EventRecord, GeoPoint
from eventsearch.results import FacetBucket, ResultSet, SearchHit, parse_search_response

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


class TestParseSearchResponse:
    def test_hits_facets_count(self) -> None:
        result = parse_search_response(
            {
                "@odata.count": 7,
                "@search.facets": {
                    "rating": [{"value": 5, "count": 3}],
                    "date": [
                        {"to": "2024-03-11T12:00:00+00:00", "count": 1},
                        {"from": "2024-03-21T12:00:00+00:00", "count": 4},
                    ],
                },
                "value": [{"@search.score": 2.5, "key": "a", "name": "Jets vs Rams"}],
            }
        )
        assert result.total_count == 7
        assert result.returned == 1
        assert result.hits[0].score == 2.5
        assert result.hits[0].record.name == "Jets vs Rams"
        assert result.facets is not None
        assert result.facets["rating"] == [FacetBucket(count=3, value=5)]
        below, above = result.facets["date"]
        assert below.end == NOW + timedelta(days=10)
        assert below.value is None
        assert above.start == NOW + timedelta(days=20)

    def test_without_facets_or_count(self) -> None:
        result = parse_search_response({"value": []})
        assert result.facets is None
        assert result.total_count is None
        assert result.returned == 0


class TestRecordLines:
    def test_only_set_fields(self) -> None:
        lines = record_lines(EventRecord(key="k1", name="Jets vs Rams"))
        assert lines == ["\tKey: k1", "\tName: Jets vs Rams"]

    def test_order_and_rendering(self) -> None:
        record = EventRecord(
            key="k1",
            name="n",
            rating=0,
            date=NOW,
            geolocation=GeoPoint(1.0, 2.0),
            tags=("jets", "rams"),
        )
        assert record_lines(record) == [
            "\tKey: k1",
            "\tName: n",
            "\tDate: 2024-03-01 12:00:00+00:00",
            "\tGeolocation: (1.0, 2.0)",
            "\tRating: 0",
            "\tTags: jets, rams",
        ]

    def test_format_record(self) -> None:
        text = format_record(EventRecord(key="k1", location="Soldier Field"))
        assert text == "Document k1:\n\tKey: k1\n\tLocation: Soldier Field"


class TestFormatBucket:
    def test_value(self) -> None:
        assert format_bucket(FacetBucket(count=3, value=5)) == "\t5 (3)"

    def test_range(self) -> None:
        bucket = FacetBucket(count=2, start=NOW, end=NOW + timedelta(days=10))
        assert format_bucket(bucket) == (
            "\t2024-03-01 12:00:00+00:00 - 2024-03-11 12:00:00+00:00 (2)"
        )

    def test_open_ranges(self) -> None:
        assert format_bucket(FacetBucket(count=1, start=NOW)).startswith("\t>2024-03-01")
        assert format_bucket(FacetBucket(count=1, end=NOW)).startswith("\t<2024-03-01")


class TestFormatResults:
    def test_with_facets(self) -> None:
        start = NOW + timedelta(days=10)
        end = NOW + timedelta(days=20)
        result = ResultSet(
            hits=[SearchHit(EventRecord(key="a", name="Jets vs Rams"), 1.5)],
            facets={
                "rating": [FacetBucket(3, value=5), FacetBucket(1, value=8)],
                "date": [FacetBucket(2, start=start, end=end)],
            },
            total_count=12,
        )
        lines = format_results(result).splitlines()
        assert lines[:5] == [
            "Results: 1/12",
            RESULTS_RULE,
            "Score: 1.5",
            "\tKey: a",
            "\tName: Jets vs Rams",
        ]
        assert lines[5:] == [
            FACETS_RULE,
            "Facets:",
            "rating",
            "\t5 (3)",
            "\t8 (1)",
            "date",
            "\t2024-03-11 12:00:00+00:00 - 2024-03-21 12:00:00+00:00 (2)",
            RESULTS_RULE,
        ]

    def test_unknown_total(self) -> None:
        text = format_results(ResultSet())
        assert text.splitlines() == ["Results: 0/?", RESULTS_RULE, RESULTS_RULE]

    def test_json(self) -> None:
        result = ResultSet(
            hits=[SearchHit(EventRecord(key="a"), 0.5)],
            facets={"date": [FacetBucket(1, end=NOW)]},
            total_count=1,
        )
        data = json.loads(format_results_json(result))
        assert data["returned"] == 1
        assert data["total"] == 1
        assert data["results"] == [{"score": 0.5, "document": {"key": "a"}}]
        assert data["facets"]["date"] == [
            {"count": 1, "to": "2024-03-01T12:00:00+00:00"}
        ]
