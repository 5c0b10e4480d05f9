"""Event — a gathering whose attendees report their travel.

Stored at: ``/events/{event_id}``
"""

from pydantic import Field

from travelprint.contracts.common import FirestoreModel


class Event(FirestoreModel):
    """An event, addressed publicly by its ``slug``."""

    id: str | None = None
    slug: str = Field(..., min_length=1, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    name: str = Field(..., min_length=1)
    description: str | None = None
    start_date: str | None = Field(default=None, description="YYYY-MM-DD")
    end_date: str | None = Field(default=None, description="YYYY-MM-DD")
    is_active: bool = True
