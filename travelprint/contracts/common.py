"""Base classes and shared types for travelprint contracts.

Unit conventions (all contracts and API responses):
- **Distances**: kilometers — ``distance`` on segments, ``_km`` suffix elsewhere
- **Emissions**: kilograms CO2-equivalent — ``_kg`` suffix, or
  ``calculated_carbon_footprint`` on persisted segments
- **Dates**: ISO 8601 strings (``YYYY-MM-DD``) for trip and event dates
- **Datetimes**: always UTC, ISO 8601 in serialized form

Field names are the persisted snake_case names; Firestore documents and API
payloads share them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class FirestoreModel(BaseModel):
    """Base model with Firestore-friendly serialization.

    - Enums serialize as string values (Firestore stores strings).
    - ``to_firestore()`` produces a JSON-safe dict (datetimes as ISO 8601).
    - ``from_firestore()`` hydrates from a Firestore document dict.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_firestore(self) -> dict[str, Any]:
        """Dump to Firestore-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_firestore(cls, data: dict[str, Any]) -> "FirestoreModel":
        """Create model instance from Firestore document dict."""
        return cls.model_validate(data)
