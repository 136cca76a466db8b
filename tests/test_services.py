"""Tests for eventsearch.services — session-scoped operations."""

from __future__ import annotations

import random

import pytest

from eventsearch import services
from eventsearch.errors import (
    InvalidParameter,
    MissingRuntimeInput,
    NoIndexSelected,
    ServiceError,
)
from eventsearch.query import RuntimeInputs, UseCase
from eventsearch.records import EventRecord
from eventsearch.sample_data import generate_events
from eventsearch.scoring import ProfileKind, ProfileParameters
from eventsearch.services import Session
from eventsearch.types import SearchServiceLike


class TestSession:
    def test_with_index_strips(self) -> None:
        assert Session().with_index("  events ").index_name == "events"

    def test_with_blank_index(self) -> None:
        with pytest.raises(InvalidParameter):
            Session().with_index("   ")

    def test_require_index(self) -> None:
        with pytest.raises(NoIndexSelected):
            Session().require_index()
        assert Session(index_name="events").require_index() == "events"

    def test_immutable(self) -> None:
        session = Session()
        session.with_index("events")
        assert session.index_name is None


def test_fake_matches_protocol(fake_service) -> None:
    assert isinstance(fake_service, SearchServiceLike)


@pytest.mark.asyncio
class TestOperations:
    async def test_create_index_selects_it(self, fake_service) -> None:
        session = await services.create_index(fake_service, Session(), "events")
        assert session.index_name == "events"
        definition = fake_service.indexes["events"]
        assert definition["suggesters"][0]["name"] == "sg"

    async def test_index_state(self, fake_service) -> None:
        await services.create_index(fake_service, Session(), "a")
        await services.create_index(fake_service, Session(), "b")
        states = await services.index_state(fake_service)
        assert [(s.name, s.document_count) for s in states] == [("a", 0), ("b", 0)]

    async def test_add_documents_batches(self, fake_service) -> None:
        session = await services.create_index(fake_service, Session(), "events")
        records = generate_events(25, rng=random.Random(0))
        uploaded = await services.add_documents(
            fake_service, session, records, batch_size=10
        )
        assert uploaded == 25
        batches = [arg for name, arg in fake_service.calls if name == "submit_documents"]
        assert batches == [("events", 10), ("events", 10), ("events", 5)]
        assert await services.count_documents(fake_service, session) == 25

    async def test_add_documents_invalid_batch_size(self, fake_service) -> None:
        session = Session(index_name="events")
        with pytest.raises(InvalidParameter):
            await services.add_documents(
                fake_service, session, [EventRecord(key="a")], batch_size=1001
            )
        assert fake_service.calls == []

    async def test_add_documents_stops_on_failure(self, fake_service) -> None:
        session = await services.create_index(fake_service, Session(), "events")
        fake_service.fail.add("submit_documents")
        with pytest.raises(ServiceError):
            await services.add_documents(
                fake_service, session, generate_events(3), batch_size=1
            )
        batches = [c for c in fake_service.calls if c[0] == "submit_documents"]
        assert len(batches) == 1

    async def test_operations_need_index(self, fake_service) -> None:
        with pytest.raises(NoIndexSelected):
            await services.count_documents(fake_service, Session())
        with pytest.raises(NoIndexSelected):
            await services.run_query(fake_service, Session(), UseCase.SIMPLE_ALL)
        assert fake_service.calls == []

    async def test_run_query_validates_before_network(
        self, fake_service, fixed_clock
    ) -> None:
        session = await services.create_index(fake_service, Session(), "events")
        fake_service.calls.clear()
        with pytest.raises(MissingRuntimeInput):
            await services.run_query(
                fake_service, session, UseCase.GEO_RANKED, clock=fixed_clock
            )
        assert fake_service.calls == []

    async def test_run_query(self, fake_service, fixed_clock) -> None:
        session = await services.create_index(fake_service, Session(), "events")
        result = await services.run_query(
            fake_service,
            session,
            UseCase.TAG_RANKED,
            search_text="football",
            inputs=RuntimeInputs(favorite_tag="packers"),
            clock=fixed_clock,
        )
        assert result is fake_service.search_result
        name, (index_name, request) = fake_service.calls[-1]
        assert name == "search"
        assert index_name == "events"
        assert request.search_text == "football"
        assert request.scoring_parameters == {"tagsParameter": "packers"}

    async def test_apply_profile_keeps_other_profiles(self, fake_service) -> None:
        session = await services.create_index(fake_service, Session(), "events")
        geo = await services.apply_profile(fake_service, session, ProfileKind.GEO)
        fresh = await services.apply_profile(
            fake_service, session, ProfileKind.FRESHNESS
        )
        tag = await services.apply_profile(
            fake_service, session, ProfileKind.FRESHNESS_TAG
        )
        assert (geo.name, fresh.name, tag.name) == ("defaultgeo", "default", "default")
        profiles = fake_service.indexes["events"]["scoringProfiles"]
        assert [p["name"] for p in profiles] == ["defaultgeo", "default"]
        assert len(profiles[1]["functions"]) == 2

    async def test_apply_profile_invalid_sends_nothing(self, fake_service) -> None:
        session = Session(index_name="events")
        with pytest.raises(InvalidParameter):
            await services.apply_profile(
                fake_service,
                session,
                ProfileKind.GEO,
                ProfileParameters(max_distance=-5),
            )
        assert fake_service.calls == []

    async def test_lookup_document(self, fake_service) -> None:
        session = await services.create_index(fake_service, Session(), "events")
        await services.add_documents(
            fake_service, session, [EventRecord(key="k1", name="Jets vs Rams")]
        )
        record = await services.lookup_document(fake_service, session, " k1 ")
        assert record.name == "Jets vs Rams"
        with pytest.raises(InvalidParameter):
            await services.lookup_document(fake_service, session, "")
        with pytest.raises(ServiceError):
            await services.lookup_document(fake_service, session, "missing")

    async def test_delete_index_clears_session(self, fake_service) -> None:
        session = await services.create_index(fake_service, Session(), "events")
        session = await services.delete_index(fake_service, session)
        assert session.index_name is None
        assert "events" not in fake_service.indexes
