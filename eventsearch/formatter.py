"""Result formatting — shared by the interactive menu and the CLI commands.

Supports both plain-text and JSON output formats.  Plain text lists
each hit's score and its non-empty fields in a fixed order, followed by
the facet buckets when the query asked for any.
"""

from __future__ import annotations

import json
from datetime import datetime

from eventsearch.records import EventRecord
from eventsearch.results import FacetBucket, FacetValue, ResultSet

RESULTS_RULE = "*" * 58
FACETS_RULE = "-" * 58

# (label, attribute) in display order
RECORD_FIELDS: tuple[tuple[str, str], ...] = (
    ("Key", "key"),
    ("Name", "name"),
    ("Date", "date"),
    ("DateAdded", "date_added"),
    ("Category", "category"),
    ("Description", "description"),
    ("Location", "location"),
    ("Geolocation", "geolocation"),
    ("Rating", "rating"),
    ("Tags", "tags"),
)


def _format_value(value: object) -> str:
    if isinstance(value, datetime):
        return value.isoformat(sep=" ", timespec="seconds")
    if isinstance(value, tuple | list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, tuple | list):
        return len(value) == 0
    return False


def record_lines(record: EventRecord) -> list[str]:
    """Tab-indented ``Label: value`` lines for the record's set fields."""
    lines: list[str] = []
    for label, attr in RECORD_FIELDS:
        value = getattr(record, attr)
        if _is_empty(value):
            continue
        lines.append(f"\t{label}: {_format_value(value)}")
    return lines


def format_record(record: EventRecord) -> str:
    """Format a single looked-up document."""
    return "\n".join([f"Document {record.key}:", *record_lines(record)])


def format_bucket(bucket: FacetBucket) -> str:
    """Render a bucket as ``value``, ``X - Y``, ``>X`` or ``<Y`` plus its count."""
    if bucket.value is not None:
        label = _format_value(bucket.value)
    elif bucket.start is not None and bucket.end is not None:
        label = f"{_format_value(bucket.start)} - {_format_value(bucket.end)}"
    elif bucket.start is not None:
        label = f">{_format_value(bucket.start)}"
    elif bucket.end is not None:
        label = f"<{_format_value(bucket.end)}"
    else:
        label = ""
    return f"\t{label} ({bucket.count})"


def format_results(result: ResultSet) -> str:
    """Format a result set as plain text.

    Args:
        result: Parsed search response.

    Returns:
        Formatted multi-line string.
    """
    total = "?" if result.total_count is None else str(result.total_count)
    lines = [f"Results: {result.returned}/{total}", RESULTS_RULE]
    for hit in result.hits:
        lines.append(f"Score: {hit.score}")
        lines.extend(record_lines(hit.record))
    if result.facets:
        lines.extend([FACETS_RULE, "Facets:"])
        for name, buckets in result.facets.items():
            lines.append(name)
            lines.extend(format_bucket(b) for b in buckets)
    lines.append(RESULTS_RULE)
    return "\n".join(lines)


# ── JSON formatters ────────────────────────────────────────────────


def _json_value(value: FacetValue | None) -> object:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _bucket_to_dict(bucket: FacetBucket) -> dict[str, object]:
    d: dict[str, object] = {"count": bucket.count}
    if bucket.value is not None:
        d["value"] = _json_value(bucket.value)
    if bucket.start is not None:
        d["from"] = _json_value(bucket.start)
    if bucket.end is not None:
        d["to"] = _json_value(bucket.end)
    return d


def format_results_json(result: ResultSet) -> str:
    """Format a result set as JSON."""
    data: dict[str, object] = {
        "returned": result.returned,
        "total": result.total_count,
        "results": [
            {"score": hit.score, "document": hit.record.to_document()}
            for hit in result.hits
        ],
    }
    if result.facets is not None:
        data["facets"] = {
            name: [_bucket_to_dict(b) for b in buckets]
            for name, buckets in result.facets.items()
        }
    return json.dumps(data, ensure_ascii=False)
