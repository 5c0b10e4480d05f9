"""Travel submission intake endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from travelprint.api.deps import get_event_repo, get_submission_repo
from travelprint.contracts.segment import Segment
from travelprint.contracts.submission import Submission
from travelprint.persistence.repositories.event_repo import EventRepository
from travelprint.persistence.repositories.submission_repo import SubmissionRepository
from travelprint.services.footprint import compute_footprint, emission_factor
from travelprint.services.intake import IntakeForm

router = APIRouter(tags=["submissions"])


class SubmissionRequest(Submission):
    """A complete intake form, sent in one request."""

    mirror_return: bool = False


@router.post("/events/{slug}/submissions", status_code=201)
async def create_submission(
    slug: str,
    body: SubmissionRequest,
    events: EventRepository = Depends(get_event_repo),
    repo: SubmissionRepository = Depends(get_submission_repo),
) -> dict:
    """Run the intake form on *body* and store it for the event.

    The form's own checks apply: 422 on missing fields, 404 for an unknown
    event, 503 when the store fails (safe to resend).
    """
    event = await events.require_by_slug(slug)
    submission = Submission.model_validate(body.model_dump(exclude={"mirror_return"}))
    form = IntakeForm.from_submission(submission, mirror=body.mirror_return)
    result = await form.submit(event.id, repo)

    data = result.model_dump(mode="json")
    data["total_footprint_kg"] = round(
        sum(s.calculated_carbon_footprint for s in result.segments), 4
    )
    return data


@router.post("/footprint")
async def estimate_footprint(segment: Segment) -> dict:
    """Footprint of a single segment, for live display while filling the form."""
    return {
        "footprint_kg": compute_footprint(segment),
        "factor_kg_per_km": emission_factor(segment),
    }
