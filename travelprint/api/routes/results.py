"""Aggregated footprint report per event."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from travelprint.api.auth import UserClaims
from travelprint.api.deps import get_current_user, get_event_repo, get_submission_repo
from travelprint.persistence.repositories.event_repo import EventRepository
from travelprint.persistence.repositories.submission_repo import SubmissionRepository
from travelprint.services.aggregation import aggregate
from travelprint.services.errors import EmptyResultError

router = APIRouter(tags=["results"])


@router.get("/events/{slug}/results")
async def get_results(
    slug: str,
    user: UserClaims = Depends(get_current_user),
    events: EventRepository = Depends(get_event_repo),
    repo: SubmissionRepository = Depends(get_submission_repo),
) -> dict:
    """Event report, or ``status: no_data`` while nobody has submitted yet."""
    event = await events.require_by_slug(slug)
    submissions = await repo.list_with_segments(event.id)
    try:
        result = aggregate(submissions)
    except EmptyResultError:
        return {"event": event.name, "status": "no_data", "results": None}
    return {"event": event.name, "status": "ok", "results": result.to_report()}
