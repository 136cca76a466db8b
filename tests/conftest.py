"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from eventsearch.client import IndexAction, IndexingResult
from eventsearch.errors import ServiceError
from eventsearch.query import QueryRequest
from eventsearch.records import EventRecord
from eventsearch.results import ResultSet
from eventsearch.scoring import ScoringProfile, merge_profiles

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


class FakeSearchService:
    """In-memory stand-in for the search service.

    Records every call in ``calls`` and raises ``ServiceError`` for any
    method named in ``fail``.
    """

    def __init__(self) -> None:
        self.indexes: dict[str, dict[str, Any]] = {}
        self.documents: dict[str, dict[str, EventRecord]] = {}
        self.calls: list[tuple[str, object]] = []
        self.fail: set[str] = set()
        self.search_result = ResultSet()
        self.closed = False

    def _record(self, name: str, arg: object = None) -> None:
        self.calls.append((name, arg))
        if name in self.fail:
            raise ServiceError("simulated failure", operation=name, status_code=400)

    def _index(self, name: str) -> dict[str, Any]:
        if name not in self.indexes:
            raise ServiceError(
                f"The index '{name}' was not found.", operation="lookup", status_code=404
            )
        return self.indexes[name]

    async def create_index(self, definition: dict[str, Any]) -> dict[str, Any]:
        self._record("create_index", definition)
        self.indexes[str(definition["name"])] = definition
        self.documents[str(definition["name"])] = {}
        return definition

    async def list_indexes(self) -> list[str]:
        self._record("list_indexes")
        return list(self.indexes)

    async def get_document_count(self, index_name: str) -> int:
        self._record("get_document_count", index_name)
        self._index(index_name)
        return len(self.documents[index_name])

    async def delete_index(self, index_name: str) -> None:
        self._record("delete_index", index_name)
        self._index(index_name)
        del self.indexes[index_name]
        del self.documents[index_name]

    async def submit_documents(
        self, index_name: str, actions: Sequence[IndexAction]
    ) -> list[IndexingResult]:
        self._record("submit_documents", (index_name, len(actions)))
        self._index(index_name)
        for action in actions:
            record = EventRecord.from_document(dict(action.document))
            self.documents[index_name][record.key] = record
        return [
            IndexingResult(key=str(a.document["key"]), succeeded=True, status_code=201)
            for a in actions
        ]

    async def get_document(self, index_name: str, key: str) -> EventRecord:
        self._record("get_document", (index_name, key))
        self._index(index_name)
        try:
            return self.documents[index_name][key]
        except KeyError:
            raise ServiceError(
                "Not Found", operation="get_document", status_code=404
            ) from None

    async def update_scoring_profiles(
        self, index_name: str, profiles: Iterable[ScoringProfile]
    ) -> dict[str, Any]:
        profiles = list(profiles)
        self._record("update_scoring_profiles", (index_name, profiles))
        definition = self._index(index_name)
        definition["scoringProfiles"] = merge_profiles(
            definition.get("scoringProfiles") or [], profiles
        )
        return definition

    async def search(self, index_name: str, request: QueryRequest) -> ResultSet:
        self._record("search", (index_name, request))
        self._index(index_name)
        return self.search_result

    async def __aenter__(self) -> FakeSearchService:
        return self

    async def __aexit__(self, *args: object) -> None:
        self.closed = True


@pytest.fixture
def fake_service() -> FakeSearchService:
    return FakeSearchService()


@pytest.fixture
def fixed_clock():
    """A clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """Create a temporary data directory for tests."""
    data_dir = tmp_path / ".eventsearch"
    data_dir.mkdir()
    return data_dir
