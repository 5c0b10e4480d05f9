"""Unit tests for Firestore repositories using FakeFirestoreClient."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from google.api_core.exceptions import RetryError

from travelprint.contracts.enums import FuelType, UserType, VehicleType
from travelprint.contracts.event import Event
from travelprint.contracts.segment import SegmentRecord
from travelprint.contracts.submission import SubmissionRecord
from travelprint.persistence.errors import EventNotFoundError, PersistenceError
from travelprint.persistence.repositories.base import store_call
from travelprint.persistence.repositories.event_repo import DuplicateEventError, EventRepository
from travelprint.persistence.repositories.submission_repo import SubmissionRepository
from tests.persistence.fake_firestore import FakeFirestoreClient


@pytest.fixture
def fake_client():
    return FakeFirestoreClient()


@pytest.fixture(autouse=True)
def patch_firestore(fake_client):
    with patch(
        "travelprint.persistence.repositories.base.get_firestore_client",
        return_value=fake_client,
    ):
        # Also patch in each repo module that imports it
        with patch(
            "travelprint.persistence.repositories.submission_repo.get_firestore_client",
            return_value=fake_client,
        ):
            yield


def _make_event(slug: str, start_date: str | None = None, is_active: bool = True) -> Event:
    return Event(
        slug=slug,
        name=slug.replace("-", " ").title(),
        start_date=start_date,
        is_active=is_active,
    )


def _make_segment(order: int, origin: str, destination: str) -> SegmentRecord:
    return SegmentRecord(
        submission_id="pending",
        vehicle_type=VehicleType.CAR,
        fuel_type=FuelType.DIESEL,
        passengers=2,
        distance=500.0,
        origin=origin,
        destination=destination,
        calculated_carbon_footprint=42.75,
        segment_order=order,
    )


# ------------------------------------------------------------------
# EventRepository
# ------------------------------------------------------------------


class TestEventRepository:
    async def test_create_and_get_by_slug(self):
        repo = EventRepository()
        event_id = await repo.create_event(_make_event("congreso-2026", "2026-05-10"))

        fetched = await repo.get_by_slug("congreso-2026")
        assert fetched is not None
        assert fetched.id == event_id
        assert fetched.name == "Congreso 2026"
        assert fetched.start_date == "2026-05-10"

    async def test_get_by_slug_missing(self):
        repo = EventRepository()
        assert await repo.get_by_slug("nowhere") is None

    async def test_require_by_slug_raises(self):
        repo = EventRepository()
        with pytest.raises(EventNotFoundError) as exc_info:
            await repo.require_by_slug("nowhere")
        assert exc_info.value.slug == "nowhere"

    async def test_duplicate_slug_rejected(self):
        repo = EventRepository()
        await repo.create_event(_make_event("fiesta"))
        with pytest.raises(DuplicateEventError):
            await repo.create_event(_make_event("fiesta"))

    async def test_list_active_sorted_by_start_date(self):
        repo = EventRepository()
        await repo.create_event(_make_event("later", "2026-09-01"))
        await repo.create_event(_make_event("undated"))
        await repo.create_event(_make_event("sooner", "2026-03-01"))
        await repo.create_event(_make_event("closed", "2026-01-01", is_active=False))

        slugs = [e.slug for e in await repo.list_active()]
        assert slugs == ["sooner", "later", "undated"]

    async def test_delete(self):
        repo = EventRepository()
        event_id = await repo.create_event(_make_event("gone"))
        await repo.delete(event_id)
        assert await repo.get(event_id) is None


# ------------------------------------------------------------------
# SubmissionRepository
# ------------------------------------------------------------------


class TestSubmissionRepository:
    async def test_create_submission_and_get(self):
        repo = SubmissionRepository()
        record = SubmissionRecord(
            event_id="evt-1",
            user_type=UserType.OTHER,
            user_type_other_details="volunteer",
            total_hotel_nights=2,
            comments="see you there",
        )
        sid = await repo.create_submission(record)

        fetched = await repo.get(sid)
        assert fetched is not None
        assert fetched.id == sid
        assert fetched.user_type == "other"
        assert fetched.user_type_other_details == "volunteer"
        assert fetched.total_hotel_nights == 2
        assert fetched.created_at == record.created_at

    async def test_segments_keep_order(self):
        repo = SubmissionRepository()
        sid = await repo.create_submission(
            SubmissionRecord(event_id="evt-1", user_type=UserType.PUBLIC)
        )
        segments = [
            _make_segment(2, "Pontevedra", "Madrid"),
            _make_segment(0, "Madrid", "Vigo"),
            _make_segment(1, "Vigo", "Pontevedra"),
        ]
        await repo.create_segments(sid, segments)

        stored = await repo.list_segments(sid)
        assert [s.segment_order for s in stored] == [0, 1, 2]
        assert [s.origin for s in stored] == ["Madrid", "Vigo", "Pontevedra"]
        assert all(s.submission_id == sid for s in stored)

    async def test_segments_persist_explicit_nulls(self, fake_client):
        repo = SubmissionRepository()
        await repo.create_segments("sub-1", [_make_segment(0, "A", "B")])

        doc = fake_client.store["submissions/sub-1/segments/0"]
        assert "vehicle_type_other_details" in doc
        assert doc["vehicle_type_other_details"] is None

    async def test_rewriting_segments_overwrites(self):
        repo = SubmissionRepository()
        await repo.create_segments("sub-1", [_make_segment(0, "A", "B")])
        await repo.create_segments("sub-1", [_make_segment(0, "C", "D")])

        stored = await repo.list_segments("sub-1")
        assert len(stored) == 1
        assert stored[0].origin == "C"

    async def test_list_with_segments_filters_by_event(self):
        repo = SubmissionRepository()
        sid = await repo.create_submission(
            SubmissionRecord(event_id="evt-1", user_type=UserType.PARTICIPANT)
        )
        await repo.create_segments(sid, [_make_segment(0, "A", "B")])
        await repo.create_submission(
            SubmissionRecord(event_id="evt-2", user_type=UserType.PUBLIC)
        )

        joined = await repo.list_with_segments("evt-1")
        assert len(joined) == 1
        assert joined[0].id == sid
        assert joined[0].user_type == "participant"
        assert len(joined[0].segments) == 1


# ------------------------------------------------------------------
# Store failures
# ------------------------------------------------------------------


class TestStoreFailures:
    async def test_write_failure_becomes_persistence_error(self, fake_client):
        fake_client.fail_writes = True
        repo = SubmissionRepository()
        with pytest.raises(PersistenceError):
            await repo.create_submission(
                SubmissionRecord(event_id="evt-1", user_type=UserType.PUBLIC)
            )
        assert fake_client.store == {}

    async def test_batch_failure_becomes_persistence_error(self, fake_client):
        fake_client.fail_batches = True
        repo = SubmissionRepository()
        with pytest.raises(PersistenceError):
            await repo.create_segments("sub-1", [_make_segment(0, "A", "B")])
        assert fake_client.store == {}

    async def test_retry_timeout_becomes_persistence_error(self, fake_client):
        fake_client.write_error = RetryError("Timeout of 60.0s exceeded", None)
        repo = SubmissionRepository()
        with pytest.raises(PersistenceError) as exc_info:
            await repo.create_submission(
                SubmissionRecord(event_id="evt-1", user_type=UserType.PUBLIC)
            )
        assert isinstance(exc_info.value.__cause__, RetryError)

    async def test_retry_timeout_on_batch_becomes_persistence_error(self, fake_client):
        fake_client.write_error = RetryError("Timeout of 60.0s exceeded", None)
        repo = SubmissionRepository()
        with pytest.raises(PersistenceError):
            await repo.create_segments("sub-1", [_make_segment(0, "A", "B")])
        assert fake_client.store == {}

    def test_store_call_wraps_any_google_api_error(self):
        with pytest.raises(PersistenceError, match="create events failed"):
            with store_call("create events"):
                raise RetryError("Timeout of 60.0s exceeded", None)

    def test_store_call_leaves_other_errors_alone(self):
        with pytest.raises(KeyError):
            with store_call("create events"):
                raise KeyError("id")
