"""Event catalogue endpoints. Reads are public, writes need the admin role."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from travelprint.api.auth import UserClaims
from travelprint.api.deps import get_event_repo, require_admin
from travelprint.contracts.event import Event
from travelprint.persistence.repositories.event_repo import EventRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def _dump(event: Event) -> dict:
    data = event.to_firestore()
    data["id"] = event.id
    return data


@router.get("")
async def list_events(
    repo: EventRepository = Depends(get_event_repo),
) -> list[dict]:
    return [_dump(e) for e in await repo.list_active()]


@router.get("/{slug}")
async def get_event(
    slug: str,
    repo: EventRepository = Depends(get_event_repo),
) -> dict:
    return _dump(await repo.require_by_slug(slug))


@router.post("", status_code=201)
async def create_event(
    event: Event,
    admin: UserClaims = Depends(require_admin),
    repo: EventRepository = Depends(get_event_repo),
) -> dict:
    event.id = await repo.create_event(event)
    return _dump(event)


@router.delete("/{event_id}", status_code=204, response_class=Response)
async def delete_event(
    event_id: str,
    admin: UserClaims = Depends(require_admin),
    repo: EventRepository = Depends(get_event_repo),
) -> Response:
    await repo.delete(event_id)
    logger.info("Event %s deleted by %s", event_id, admin.uid)
    return Response(status_code=204)
