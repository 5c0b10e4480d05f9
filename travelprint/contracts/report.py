"""EventResult and grouping keys — the aggregated footprint report.

Calculated on demand from stored submissions, never persisted.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from travelprint.contracts.enums import GroupKind

# kg CO2 absorbed by one tree in one year
TREE_ABSORPTION_KG_PER_YEAR = 22.0

_OTHER = "other"


class GroupKey(BaseModel):
    """Structured key for report breakdowns.

    A plain category (``kind=known``) or an "other" bucket optionally
    refined by the respondent's free text (``kind=other``). Equality and
    hashing use all three fields, so free text containing ``": "`` can never
    collide with a plain category.
    """

    kind: GroupKind
    value: str
    detail: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def known(cls, value: str) -> "GroupKey":
        return cls(kind=GroupKind.KNOWN, value=value)

    @classmethod
    def other(cls, detail: str | None = None) -> "GroupKey":
        detail = detail.strip() if detail else None
        return cls(kind=GroupKind.OTHER, value=_OTHER, detail=detail or None)

    @property
    def label(self) -> str:
        """Display form: ``"other: <detail>"`` for refined keys, else the value."""
        if self.kind == GroupKind.OTHER and self.detail:
            return f"{_OTHER}: {self.detail}"
        return self.value


class UserTypeStats(BaseModel):
    footprint_kg: float = 0.0
    distance_km: float = 0.0
    participants: int = 0


class TransportTypeStats(BaseModel):
    distance_km: float = 0.0
    trips: int = 0


class FuelTypeStats(BaseModel):
    distance_km: float = 0.0
    trips: int = 0
    footprint_kg: float = 0.0


class EventResult(BaseModel):
    """Aggregate view over every submission of one event.

    ``total_participants`` counts submissions, not segments.
    """

    total_footprint_kg: float = Field(default=0.0, ge=0)
    total_distance_km: float = Field(default=0.0, ge=0)
    total_hotel_nights: int = Field(default=0, ge=0)
    total_participants: int = Field(default=0, ge=0)

    by_user_type: dict[GroupKey, UserTypeStats] = Field(default_factory=dict)
    by_transport_type: dict[GroupKey, TransportTypeStats] = Field(default_factory=dict)
    by_fuel_type: dict[GroupKey, FuelTypeStats] = Field(default_factory=dict)

    @property
    def trees_needed(self) -> int:
        """Trees needed for one year to absorb the total footprint."""
        return math.ceil(self.total_footprint_kg / TREE_ABSORPTION_KG_PER_YEAR)

    def to_report(self) -> dict[str, Any]:
        """JSON-safe dict with breakdowns keyed by display label."""

        def _render(groups: dict[GroupKey, BaseModel]) -> dict[str, dict[str, Any]]:
            return {key.label: stats.model_dump() for key, stats in groups.items()}

        return {
            "total_footprint_kg": self.total_footprint_kg,
            "total_distance_km": self.total_distance_km,
            "total_hotel_nights": self.total_hotel_nights,
            "total_participants": self.total_participants,
            "trees_needed": self.trees_needed,
            "by_user_type": _render(self.by_user_type),
            "by_transport_type": _render(self.by_transport_type),
            "by_fuel_type": _render(self.by_fuel_type),
        }
