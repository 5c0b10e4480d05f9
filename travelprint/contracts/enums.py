"""Enumerations shared across all travelprint contracts."""

from enum import Enum


class VehicleType(str, Enum):
    """Means of transport for one trip segment."""
    WALKING = "walking"
    BICYCLE = "bicycle"
    MOTORCYCLE = "motorcycle"
    CAR = "car"
    VAN = "van"
    BUS = "bus"
    TRUCK = "truck"
    TRAIN = "train"
    PLANE = "plane"
    OTHER = "other"


class FuelType(str, Enum):
    GASOLINE = "gasoline"
    DIESEL = "diesel"
    HYBRID = "hybrid"
    PLUGIN_HYBRID = "pluginHybrid"
    ELECTRIC = "electric"
    UNKNOWN = "unknown"
    OTHER = "other"


class VehicleSize(str, Enum):
    """Gross weight bracket for vans and trucks."""
    UNDER_7_5T = "<7.5t"
    FROM_7_5_TO_12T = "7.5-12t"
    FROM_20_TO_26T = "20-26t"
    FROM_34_TO_40T = "34-40t"
    FROM_50_TO_60T = "50-60t"


# Vans only come in the two lightest brackets
VAN_SIZES = frozenset({VehicleSize.UNDER_7_5T, VehicleSize.FROM_7_5_TO_12T})


class UserType(str, Enum):
    """Role of the respondent at the event."""
    PUBLIC = "public"
    PARTICIPANT = "participant"
    LOGISTICS = "logistics"
    PROVIDER = "provider"
    STAFF = "staff"
    OTHER = "other"


class Direction(str, Enum):
    """Which half of the trip a segment belongs to."""
    OUTBOUND = "outbound"
    RETURN = "return"


class FormStep(str, Enum):
    """Lifecycle of an intake form session."""
    USER_TYPE = "user_type"
    SEGMENTS = "segments"
    ACCOMMODATION = "accommodation"
    COMMENTS = "comments"
    SUBMITTING = "submitting"
    COMPLETE = "complete"
    FAILED = "failed"


class GroupKind(str, Enum):
    """Whether a report grouping key is a plain category or an 'other' detail."""
    KNOWN = "known"
    OTHER = "other"
