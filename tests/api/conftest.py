"""Shared fixtures for API tests."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from travelprint.api.app import app
from travelprint.api.auth import UserClaims
from travelprint.api.deps import get_current_user
from tests.persistence.fake_firestore import FakeFirestoreClient

TEST_ADMIN = UserClaims(uid="api-test-admin", email="admin@test", is_admin=True)


@pytest.fixture
def fake_client():
    """In-memory Firestore fake, shared across all repos in a single test."""
    return FakeFirestoreClient()


@pytest.fixture
def test_app(fake_client):
    """FastAPI app with dependency overrides for testing."""
    # Override auth to return a fixed admin user
    app.dependency_overrides[get_current_user] = lambda: TEST_ADMIN

    # Patch get_firestore_client everywhere it's imported
    with patch(
        "travelprint.persistence.repositories.base.get_firestore_client",
        return_value=fake_client,
    ), patch(
        "travelprint.persistence.repositories.submission_repo.get_firestore_client",
        return_value=fake_client,
    ):
        yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def event(client):
    """A stored, active event."""
    resp = await client.post(
        "/api/events",
        json={"slug": "congreso-2026", "name": "Congreso 2026", "start_date": "2026-05-10"},
    )
    assert resp.status_code == 201
    return resp.json()
