"""Repository for events."""

from __future__ import annotations

import logging

from travelprint.contracts.event import Event
from travelprint.persistence.errors import EventNotFoundError, PersistenceError
from travelprint.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class DuplicateEventError(PersistenceError):
    """Raised when creating an event whose slug is already taken."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"An event with slug {slug!r} already exists")


class EventRepository(BaseRepository[Event]):
    def __init__(self):
        super().__init__(Event, "events")

    async def get_by_slug(self, slug: str) -> Event | None:
        """Return the event addressed by *slug*, or *None*."""
        matches = await self.find_by("slug", slug)
        return matches[0] if matches else None

    async def require_by_slug(self, slug: str) -> Event:
        """Like ``get_by_slug`` but raises ``EventNotFoundError``."""
        event = await self.get_by_slug(slug)
        if event is None:
            raise EventNotFoundError(slug)
        return event

    async def list_active(self) -> list[Event]:
        """Active events, soonest first (undated events last)."""
        events = await self.find_by("is_active", True)
        return sorted(events, key=lambda e: (e.start_date is None, e.start_date or ""))

    async def create_event(self, event: Event) -> str:
        """Create *event*, refusing a slug that is already in use."""
        if await self.get_by_slug(event.slug) is not None:
            raise DuplicateEventError(event.slug)
        event_id = await self.create(event)
        logger.info("Created event %s (%s)", event.slug, event_id)
        return event_id
