"""Repository for submissions and their segments (subcollection)."""

from __future__ import annotations

import logging

from travelprint.contracts.segment import SegmentRecord
from travelprint.contracts.submission import SubmissionRecord, SubmissionWithSegments
from travelprint.persistence.firestore_client import get_firestore_client
from travelprint.persistence.repositories.base import BaseRepository, store_call

logger = logging.getLogger(__name__)


class SubmissionRepository(BaseRepository[SubmissionRecord]):
    def __init__(self):
        super().__init__(SubmissionRecord, "submissions")

    async def create_submission(self, record: SubmissionRecord) -> str:
        """Store a submission header. Returns the submission ID."""
        return await self.create(record)

    # ------------------------------------------------------------------
    # Subcollection: segments
    # ------------------------------------------------------------------

    def _segment_collection(self, submission_id: str):
        return (
            self._collection_ref()
            .document(submission_id)
            .collection("segments")
        )

    async def create_segments(
        self, submission_id: str, segments: list[SegmentRecord]
    ) -> None:
        """Write every segment of a submission in one batch.

        Documents are keyed by ``segment_order`` so a retried write
        overwrites instead of duplicating.
        """
        db = get_firestore_client()
        batch = db.batch()
        col = self._segment_collection(submission_id)
        for segment in segments:
            data = segment.to_firestore()
            data["submission_id"] = submission_id
            batch.set(col.document(str(segment.segment_order)), data)
        with store_call(f"write segments of submissions/{submission_id}"):
            await batch.commit()
        logger.debug("Wrote %d segments for submission %s", len(segments), submission_id)

    async def list_segments(self, submission_id: str) -> list[SegmentRecord]:
        """Segments of one submission, ordered by ``segment_order``."""
        results: list[SegmentRecord] = []
        with store_call(f"list segments of submissions/{submission_id}"):
            async for doc in self._segment_collection(submission_id).stream():
                data = doc.to_dict()
                data["id"] = doc.id
                results.append(SegmentRecord.from_firestore(data))
        return sorted(results, key=lambda s: s.segment_order)

    async def list_with_segments(self, event_id: str) -> list[SubmissionWithSegments]:
        """Every submission of an event, each joined with its segments."""
        results: list[SubmissionWithSegments] = []
        for record in await self.find_by("event_id", event_id):
            segments = await self.list_segments(record.id)
            results.append(
                SubmissionWithSegments(**record.model_dump(), segments=segments)
            )
        return results
