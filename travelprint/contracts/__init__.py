"""travelprint data contracts — Pydantic v2 models for event travel footprints.

Data authority
--------------

**Firestore** (source of truth):
- ``Event`` — ``/events/{id}``
- ``SubmissionRecord`` — ``/submissions/{id}``
- ``SegmentRecord`` — ``/submissions/{sid}/segments/{segment_order}``

In memory only
--------------
- ``Submission`` / ``Segment`` — the intake form draft, before submit

Calculated (never persisted)
----------------------------
- ``EventResult`` — aggregated report, rebuilt from stored submissions on demand
- ``SegmentRecord.calculated_carbon_footprint`` is computed once, at submit,
  and stored; reports aggregate the stored value
"""

from travelprint.contracts.enums import (
    VAN_SIZES,
    Direction,
    FormStep,
    FuelType,
    GroupKind,
    UserType,
    VehicleSize,
    VehicleType,
)
from travelprint.contracts.common import FirestoreModel
from travelprint.contracts.event import Event
from travelprint.contracts.segment import Segment, SegmentRecord
from travelprint.contracts.submission import (
    Submission,
    SubmissionRecord,
    SubmissionWithSegments,
)
from travelprint.contracts.report import (
    TREE_ABSORPTION_KG_PER_YEAR,
    EventResult,
    FuelTypeStats,
    GroupKey,
    TransportTypeStats,
    UserTypeStats,
)

__all__ = [
    # Enums
    "Direction",
    "FormStep",
    "FuelType",
    "GroupKind",
    "UserType",
    "VAN_SIZES",
    "VehicleSize",
    "VehicleType",
    # Common
    "FirestoreModel",
    # Domain models
    "Event",
    "Segment",
    "SegmentRecord",
    "Submission",
    "SubmissionRecord",
    "SubmissionWithSegments",
    # Report
    "EventResult",
    "FuelTypeStats",
    "GroupKey",
    "TransportTypeStats",
    "TREE_ABSORPTION_KG_PER_YEAR",
    "UserTypeStats",
]
