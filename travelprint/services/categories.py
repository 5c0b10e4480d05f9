"""Rules for categorical fields that have an "other" escape hatch.

Each categorical field (user type, vehicle type, fuel type) gets one
``CategoryRule`` saying which values need free-text details and whether
report breakdowns split those values by detail. Validation, field clearing
and aggregation all read the same table.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from travelprint.contracts.enums import FuelType, UserType, VehicleType
from travelprint.contracts.report import GroupKey

_OTHER = "other"


def raw_value(value: str | Enum | None) -> str | None:
    """Plain string value of an enum member or string (models store raw values)."""
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class CategoryRule:
    """Policy for one categorical field and its free-text details field."""

    field: str
    details_field: str
    requires_details: frozenset[str]
    expand_in_reports: bool = True

    def needs_details(self, value: str | Enum | None) -> bool:
        return raw_value(value) in self.requires_details

    def group_key(self, value: str | Enum, details: str | None) -> GroupKey:
        """Build the breakdown key for *value*.

        ``other`` with non-blank details becomes a refined key when the rule
        expands; blank details fall back to the plain ``other`` bucket.
        """
        value = raw_value(value)
        if value != _OTHER:
            return GroupKey.known(value)
        if self.expand_in_reports:
            return GroupKey.other(details)
        return GroupKey.other()


@dataclass(frozen=True)
class CategoryRules:
    user_type: CategoryRule
    vehicle_type: CategoryRule
    fuel_type: CategoryRule


DEFAULT_RULES = CategoryRules(
    user_type=CategoryRule(
        field="user_type",
        details_field="other_user_type_details",
        requires_details=frozenset({UserType.OTHER.value}),
    ),
    vehicle_type=CategoryRule(
        field="vehicle_type",
        details_field="vehicle_type_other_details",
        requires_details=frozenset({VehicleType.OTHER.value}),
        # Transport breakdown stays one bucket per vehicle type
        expand_in_reports=False,
    ),
    fuel_type=CategoryRule(
        field="fuel_type",
        details_field="fuel_type_other_details",
        # "unknown" is a complete answer on its own
        requires_details=frozenset({FuelType.OTHER.value}),
    ),
)
