"""Segment and SegmentRecord — one directional leg of a trip.

Segments are edited in memory by the intake form and persisted at:
``/submissions/{submission_id}/segments/{segment_order}``
"""

from typing import Any

from pydantic import Field

from travelprint.contracts.common import FirestoreModel
from travelprint.contracts.enums import FuelType, VehicleSize, VehicleType


class Segment(FirestoreModel):
    """One leg of a trip: one vehicle, one origin/destination pair.

    Type-level constraints (ranges, enum membership) are enforced here.
    Conditional requirements (details for ``other``, van/truck sizes,
    non-blank endpoints) are checked at submit time by
    ``travelprint.services.validation`` so a draft can be edited freely.
    """

    vehicle_type: VehicleType = VehicleType.CAR
    vehicle_type_other_details: str | None = None
    fuel_type: FuelType | None = None
    fuel_type_other_details: str | None = None

    passengers: int | None = Field(default=None, ge=1, description="Travellers sharing the vehicle")
    number_of_vehicles: int = Field(default=1, ge=1, description="Vehicles travelling together")
    van_size: VehicleSize | None = None
    truck_size: VehicleSize | None = None

    carbon_compensated: bool = Field(
        default=False, description="Informational only; never netted against the footprint"
    )

    date: str | None = Field(default=None, description="Travel date, YYYY-MM-DD")
    origin: str = ""
    destination: str = ""
    distance: float | None = Field(default=None, ge=0, description="Leg distance in km")

    return_trip: bool = False
    frequency: int = Field(default=1, ge=1, description="Number of times the leg is travelled")


class SegmentRecord(Segment):
    """A segment as stored, with its computed footprint and position.

    ``segment_order`` runs across the whole submission: outbound segments
    first, then return segments, starting at 0.
    """

    id: str | None = None
    submission_id: str
    calculated_carbon_footprint: float = Field(default=0.0, ge=0, description="kg CO2e")
    segment_order: int = Field(..., ge=0)

    def to_firestore(self) -> dict[str, Any]:
        """Dump every persisted column, keeping explicit nulls."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})
