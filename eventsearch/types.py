"""Shared Protocol types for eventsearch.

Defines the structural interface of the search service adapter so the
operation layer and its tests depend on the contract, never on the
concrete httpx client.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from eventsearch.client import IndexAction, IndexingResult
    from eventsearch.query import QueryRequest
    from eventsearch.records import EventRecord
    from eventsearch.results import ResultSet
    from eventsearch.scoring import ScoringProfile


@runtime_checkable
class SearchServiceLike(Protocol):
    """Structural interface for the remote search service.

    Every method raises :class:`~eventsearch.errors.ServiceError` when
    the service rejects the call or cannot be reached.
    """

    async def create_index(self, definition: dict[str, Any]) -> dict[str, Any]:
        """Create an index from a full definition payload."""
        ...

    async def list_indexes(self) -> list[str]:
        """Return the names of all indexes."""
        ...

    async def get_document_count(self, index_name: str) -> int:
        """Return the number of documents in an index."""
        ...

    async def delete_index(self, index_name: str) -> None:
        """Delete an index and all of its documents."""
        ...

    async def submit_documents(
        self, index_name: str, actions: Sequence[IndexAction]
    ) -> list[IndexingResult]:
        """Submit one batch of upload/merge/delete actions."""
        ...

    async def get_document(self, index_name: str, key: str) -> EventRecord:
        """Fetch a single document by key."""
        ...

    async def update_scoring_profiles(
        self, index_name: str, profiles: Iterable[ScoringProfile]
    ) -> dict[str, Any]:
        """Add or replace scoring profiles on an existing index."""
        ...

    async def search(self, index_name: str, request: QueryRequest) -> ResultSet:
        """Execute a query."""
        ...
