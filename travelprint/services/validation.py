"""Submit-time checks for intake form drafts.

Every check returns a ``{field_path: message_key}`` mapping; an empty mapping
means valid. Message keys are translation keys for the presentation layer.
Field paths look like ``outbound.0.origin`` for segment fields.
"""

from __future__ import annotations

from travelprint.contracts.enums import VAN_SIZES, Direction, FormStep, VehicleSize, VehicleType
from travelprint.contracts.segment import Segment
from travelprint.contracts.submission import Submission
from travelprint.services.categories import DEFAULT_RULES, CategoryRules, raw_value

FIELD_REQUIRED = "error.fieldRequired"
OUTBOUND_REQUIRED = "error.idaSegmentsRequired"
RETURN_REQUIRED = "error.vueltaSegmentsRequired"
VEHICLE_DETAILS_REQUIRED = "vehicleType.specifyOther"
FUEL_DETAILS_REQUIRED = "fuelType.specifyOther"
USER_DETAILS_REQUIRED = "userType.specifyOther"
SIZE_REQUIRED = "vehicleSize.required"
SIZE_INVALID = "vehicleSize.invalid"
NIGHTS_INVALID = "accommodation.nightsInvalid"


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def segment_path(direction: Direction, index: int, field: str | None = None) -> str:
    path = f"{raw_value(direction)}.{index}"
    return f"{path}.{field}" if field else path


def validate_segment(
    segment: Segment,
    direction: Direction,
    index: int,
    rules: CategoryRules = DEFAULT_RULES,
) -> dict[str, str]:
    """Check the conditional requirements of one segment."""
    errors: dict[str, str] = {}

    def fail(field: str, message: str) -> None:
        errors[segment_path(direction, index, field)] = message

    if _blank(segment.origin):
        fail("origin", FIELD_REQUIRED)
    if _blank(segment.destination):
        fail("destination", FIELD_REQUIRED)

    if rules.vehicle_type.needs_details(segment.vehicle_type) and _blank(
        segment.vehicle_type_other_details
    ):
        fail(rules.vehicle_type.details_field, VEHICLE_DETAILS_REQUIRED)

    if rules.fuel_type.needs_details(segment.fuel_type) and _blank(
        segment.fuel_type_other_details
    ):
        fail(rules.fuel_type.details_field, FUEL_DETAILS_REQUIRED)

    vehicle = raw_value(segment.vehicle_type)
    if vehicle == VehicleType.VAN.value:
        if segment.van_size is None:
            fail("van_size", SIZE_REQUIRED)
        elif VehicleSize(segment.van_size) not in VAN_SIZES:
            fail("van_size", SIZE_INVALID)
    elif vehicle == VehicleType.TRUCK.value and segment.truck_size is None:
        fail("truck_size", SIZE_REQUIRED)

    return errors


def validate_user_type(
    submission: Submission, rules: CategoryRules = DEFAULT_RULES
) -> dict[str, str]:
    if rules.user_type.needs_details(submission.user_type) and _blank(
        submission.other_user_type_details
    ):
        return {rules.user_type.details_field: USER_DETAILS_REQUIRED}
    return {}


def validate_segments(
    submission: Submission, rules: CategoryRules = DEFAULT_RULES
) -> dict[str, str]:
    errors: dict[str, str] = {}
    for direction, segments, empty_message in (
        (Direction.OUTBOUND, submission.outbound_segments, OUTBOUND_REQUIRED),
        (Direction.RETURN, submission.return_segments, RETURN_REQUIRED),
    ):
        if not segments:
            errors[direction.value] = empty_message
        for index, segment in enumerate(segments):
            errors.update(validate_segment(segment, direction, index, rules))
    return errors


def validate_accommodation(submission: Submission) -> dict[str, str]:
    if submission.hotel_nights is not None and submission.hotel_nights < 0:
        return {"hotel_nights": NIGHTS_INVALID}
    return {}


def validate_step(
    step: FormStep, submission: Submission, rules: CategoryRules = DEFAULT_RULES
) -> dict[str, str]:
    """Check only the fields owned by *step*."""
    if step == FormStep.USER_TYPE:
        return validate_user_type(submission, rules)
    if step == FormStep.SEGMENTS:
        return validate_segments(submission, rules)
    if step == FormStep.ACCOMMODATION:
        return validate_accommodation(submission)
    return {}


def validate_submission(
    submission: Submission, rules: CategoryRules = DEFAULT_RULES
) -> dict[str, str]:
    """Check every required field of a complete draft."""
    errors: dict[str, str] = {}
    errors.update(validate_user_type(submission, rules))
    errors.update(validate_segments(submission, rules))
    errors.update(validate_accommodation(submission))
    return errors
