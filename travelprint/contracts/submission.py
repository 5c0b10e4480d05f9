"""Submission — one respondent's travel record for one event.

``Submission`` is the in-memory draft owned by the intake form.
``SubmissionRecord`` is stored at: ``/submissions/{submission_id}``
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from travelprint.contracts.common import FirestoreModel
from travelprint.contracts.enums import UserType
from travelprint.contracts.segment import Segment, SegmentRecord


class Submission(FirestoreModel):
    """Everything a respondent enters in the intake form.

    The outbound list ("ida") and the return list ("vuelta") must each hold
    at least one segment at submit time.
    """

    user_type: UserType = UserType.PUBLIC
    other_user_type_details: str | None = None
    outbound_segments: list[Segment] = Field(default_factory=list)
    return_segments: list[Segment] = Field(default_factory=list)
    hotel_nights: int | None = Field(default=None, ge=0)
    comments: str | None = None


class SubmissionRecord(FirestoreModel):
    """Submission header as persisted, without its segments."""

    id: str | None = None
    event_id: str = Field(..., min_length=1)
    user_type: UserType
    user_type_other_details: str | None = None
    total_hotel_nights: int | None = Field(default=None, ge=0)
    comments: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))

    def to_firestore(self) -> dict[str, Any]:
        """Dump every persisted column, keeping explicit nulls."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})


class SubmissionWithSegments(SubmissionRecord):
    """A stored submission joined with its ordered segments.

    Input of the aggregation engine; never written back as one document.
    """

    segments: list[SegmentRecord] = Field(default_factory=list)
