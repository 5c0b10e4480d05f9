"""Event report aggregation.

Reduces an event's stored submissions (with their segments) into an
``EventResult``. Footprints are the values computed at submit time; nothing
is recomputed here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from travelprint.contracts.report import (
    EventResult,
    FuelTypeStats,
    TransportTypeStats,
    UserTypeStats,
)
from travelprint.contracts.segment import SegmentRecord
from travelprint.contracts.submission import SubmissionWithSegments
from travelprint.services.categories import DEFAULT_RULES, CategoryRules
from travelprint.services.errors import EmptyResultError

logger = logging.getLogger(__name__)


def aggregate(
    submissions: Iterable[SubmissionWithSegments],
    rules: CategoryRules = DEFAULT_RULES,
) -> EventResult:
    """Build the event report.

    Raises ``EmptyResultError`` when there is nothing to aggregate, so
    "no data yet" never looks like a report that summed to zero.
    """
    submissions = list(submissions)
    if not submissions:
        raise EmptyResultError("No submissions to aggregate")

    result = EventResult(total_participants=len(submissions))

    for submission in submissions:
        result.total_hotel_nights += submission.total_hotel_nights or 0

        user_key = rules.user_type.group_key(
            submission.user_type, submission.user_type_other_details
        )
        user_stats = result.by_user_type.setdefault(user_key, UserTypeStats())
        user_stats.participants += 1

        for segment in submission.segments:
            footprint = segment.calculated_carbon_footprint or 0.0
            distance = segment.distance or 0.0

            result.total_footprint_kg += footprint
            result.total_distance_km += distance
            user_stats.footprint_kg += footprint
            user_stats.distance_km += distance

            transport_key = rules.vehicle_type.group_key(
                segment.vehicle_type, segment.vehicle_type_other_details
            )
            transport = result.by_transport_type.setdefault(transport_key, TransportTypeStats())
            transport.distance_km += distance
            transport.trips += 1

            if segment.fuel_type:
                fuel_key = rules.fuel_type.group_key(
                    segment.fuel_type, segment.fuel_type_other_details
                )
                fuel = result.by_fuel_type.setdefault(fuel_key, FuelTypeStats())
                fuel.distance_km += distance
                fuel.trips += 1
                fuel.footprint_kg += footprint

    logger.debug(
        "Aggregated %d submissions: %.2f kg CO2e over %.1f km",
        result.total_participants, result.total_footprint_kg, result.total_distance_km,
    )
    return result


def group_rows(rows: Iterable[dict[str, Any]]) -> list[SubmissionWithSegments]:
    """Regroup flat joined rows into submissions with their segments.

    Each row is a stored segment with its parent submission embedded under
    ``submission`` (the shape a SQL-style join returns). Submissions keep
    first-seen order; segments are sorted by ``segment_order``.
    """
    grouped: dict[str, SubmissionWithSegments] = {}
    for row in rows:
        row = dict(row)
        parent = row.pop("submission")
        submission_id = str(parent["id"])
        if submission_id not in grouped:
            grouped[submission_id] = SubmissionWithSegments.model_validate(
                {**parent, "id": submission_id}
            )
        row["submission_id"] = submission_id
        grouped[submission_id].segments.append(SegmentRecord.model_validate(row))

    for submission in grouped.values():
        submission.segments.sort(key=lambda s: s.segment_order)
    return list(grouped.values())
