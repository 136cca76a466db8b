"""Service layer: the tutorial's operations as plain async functions.

CLI commands and the interactive menu are thin wrappers that collect
input and format output; the operations themselves live here, one
function per menu item.  The index an operation targets comes from an
explicit :class:`Session` value, and operations that change the
selected index return the updated session.

Requests are fully built before the first network call, so a
:class:`~eventsearch.errors.ValidationError` always means nothing was
sent.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace

import structlog

from eventsearch.client import IndexAction
from eventsearch.errors import InvalidParameter, NoIndexSelected
from eventsearch.query import Clock, RuntimeInputs, UseCase, build_query
from eventsearch.records import EventRecord
from eventsearch.results import ResultSet
from eventsearch.schema import build_index_definition
from eventsearch.scoring import (
    ProfileKind,
    ProfileParameters,
    ScoringProfile,
    build_profile,
)
from eventsearch.types import SearchServiceLike

logger = structlog.get_logger()

MAX_BATCH_SIZE = 1000


@dataclass(frozen=True)
class Session:
    """Per-session state: the currently selected index."""

    index_name: str | None = None

    def with_index(self, index_name: str) -> Session:
        return replace(self, index_name=_check_index_name(index_name))

    def require_index(self) -> str:
        if not self.index_name:
            raise NoIndexSelected("No index selected for this session")
        return self.index_name


@dataclass(frozen=True)
class IndexState:
    """An index and how many documents it holds."""

    name: str
    document_count: int


def _check_index_name(index_name: str) -> str:
    name = index_name.strip()
    if not name:
        raise InvalidParameter("Index name must not be empty", parameter="index_name")
    return name


def _batches(
    records: Sequence[EventRecord], size: int
) -> Iterator[Sequence[EventRecord]]:
    for start in range(0, len(records), size):
        yield records[start : start + size]


async def index_state(client: SearchServiceLike) -> list[IndexState]:
    """List every index with its document count."""
    return [
        IndexState(name=name, document_count=await client.get_document_count(name))
        for name in await client.list_indexes()
    ]


async def create_index(
    client: SearchServiceLike,
    session: Session,
    index_name: str,
    profiles: Sequence[ScoringProfile] = (),
) -> Session:
    """Create the event index and select it for the session."""
    session = session.with_index(index_name)
    definition = build_index_definition(session.require_index(), profiles)
    await client.create_index(definition)
    return session


async def add_documents(
    client: SearchServiceLike,
    session: Session,
    records: Sequence[EventRecord],
    *,
    batch_size: int = MAX_BATCH_SIZE,
) -> int:
    """Upload records in batches; returns the number uploaded.

    A failing batch stops the upload.  Batches already accepted stay in
    the index.
    """
    index_name = session.require_index()
    if not 1 <= batch_size <= MAX_BATCH_SIZE:
        raise InvalidParameter(
            f"batch_size must be between 1 and {MAX_BATCH_SIZE}",
            parameter="batch_size",
        )
    uploaded = 0
    for batch in _batches(records, batch_size):
        await client.submit_documents(
            index_name, [IndexAction.upload(r) for r in batch]
        )
        uploaded += len(batch)
    logger.info("documents_added", index=index_name, count=uploaded)
    return uploaded


async def count_documents(client: SearchServiceLike, session: Session) -> int:
    return await client.get_document_count(session.require_index())


async def run_query(
    client: SearchServiceLike,
    session: Session,
    use_case: UseCase,
    *,
    search_text: str = "",
    inputs: RuntimeInputs | None = None,
    clock: Clock | None = None,
) -> ResultSet:
    """Build the use case's request and execute it."""
    index_name = session.require_index()
    request = build_query(use_case, inputs, search_text=search_text, clock=clock)
    return await client.search(index_name, request)


async def apply_profile(
    client: SearchServiceLike,
    session: Session,
    kind: ProfileKind,
    parameters: ProfileParameters | None = None,
) -> ScoringProfile:
    """Build a scoring profile and add it to the selected index."""
    index_name = session.require_index()
    profile = build_profile(kind, parameters)
    await client.update_scoring_profiles(index_name, [profile])
    return profile


async def lookup_document(
    client: SearchServiceLike, session: Session, key: str
) -> EventRecord:
    key = key.strip()
    if not key:
        raise InvalidParameter("Document key must not be empty", parameter="key")
    return await client.get_document(session.require_index(), key)


async def delete_index(client: SearchServiceLike, session: Session) -> Session:
    """Delete the selected index and clear it from the session."""
    await client.delete_index(session.require_index())
    return replace(session, index_name=None)
