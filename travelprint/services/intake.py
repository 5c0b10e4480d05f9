"""Intake form state machine.

Holds one respondent's in-progress submission and exposes the transitions
the presentation layer drives: user type, outbound/return segment lists
(with the "return trip is the same" mirror), accommodation, comments and
submit.

Step flow::

    user_type -> segments -> accommodation -> comments -> submitting
                                                              |
                                                   complete <-+-> failed

Mirroring is an explicit derivation: the return list is recomputed from the
outbound list when the mirror is switched on and after every outbound change
while it stays on. Nothing else writes the return list in that mode.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from travelprint.contracts.enums import Direction, FormStep, FuelType, UserType, VehicleType
from travelprint.contracts.segment import Segment, SegmentRecord
from travelprint.contracts.submission import (
    Submission,
    SubmissionRecord,
    SubmissionWithSegments,
)
from travelprint.persistence.errors import PersistenceError
from travelprint.services.categories import DEFAULT_RULES, CategoryRule, CategoryRules
from travelprint.services.errors import (
    InvalidTransitionError,
    SubmitInProgressError,
    ValidationError,
)
from travelprint.services.footprint import compute_footprint
from travelprint.services.validation import segment_path, validate_step, validate_submission

if TYPE_CHECKING:
    from travelprint.persistence.repositories.submission_repo import SubmissionRepository

logger = logging.getLogger(__name__)

# Steps the user moves through with next/previous
EDIT_STEPS: list[FormStep] = [
    FormStep.USER_TYPE,
    FormStep.SEGMENTS,
    FormStep.ACCOMMODATION,
    FormStep.COMMENTS,
]

DEFAULT_ORIGIN = "Madrid"
DEFAULT_DESTINATION = "Pontevedra"
DEFAULT_DISTANCE_KM = 500.0


def default_segment(direction: Direction) -> Segment:
    """A pre-filled segment: one diesel car, one traveller, today."""
    origin, destination = DEFAULT_ORIGIN, DEFAULT_DESTINATION
    if direction == Direction.RETURN:
        origin, destination = destination, origin
    return Segment(
        vehicle_type=VehicleType.CAR,
        fuel_type=FuelType.DIESEL,
        passengers=1,
        number_of_vehicles=1,
        date=date.today().isoformat(),
        distance=DEFAULT_DISTANCE_KM,
        origin=origin,
        destination=destination,
        return_trip=False,
        frequency=1,
    )


def derive_return_segments(outbound: list[Segment]) -> list[Segment]:
    """Mirror an outbound list into a return list.

    Order is reversed, origin and destination are swapped and
    ``return_trip`` is forced off. Every other field is copied verbatim.
    """
    return [
        segment.model_copy(
            update={
                "origin": segment.destination,
                "destination": segment.origin,
                "return_trip": False,
            }
        )
        for segment in reversed(outbound)
    ]


def _clear_hidden_details(model: Any, rule: CategoryRule) -> None:
    """Blank *rule*'s details field on *model* when its value no longer needs it."""
    if not rule.needs_details(getattr(model, rule.field)):
        setattr(model, rule.details_field, None)


class IntakeForm:
    """One respondent's form session.

    Segment lists never drop below one element. A submit that fails on the
    store leaves the form in ``failed`` with every entered value intact;
    calling ``submit()`` again retries.
    """

    def __init__(self, rules: CategoryRules = DEFAULT_RULES):
        self._rules = rules
        self._draft = Submission(
            outbound_segments=[default_segment(Direction.OUTBOUND)],
            return_segments=[default_segment(Direction.RETURN)],
            hotel_nights=0,
            comments="",
        )
        self.step: FormStep = FormStep.USER_TYPE
        self.mirror: bool = False
        self.errors: dict[str, str] = {}
        self.result: SubmissionWithSegments | None = None
        self.last_error: str | None = None
        self._in_flight = False
        # Set once the header is stored, so a retry after a segment write
        # failure overwrites it instead of creating a second submission.
        self._stored_submission_id: str | None = None

    @classmethod
    def from_submission(
        cls,
        submission: Submission,
        *,
        mirror: bool = False,
        rules: CategoryRules = DEFAULT_RULES,
    ) -> "IntakeForm":
        """Load a complete draft and position the form on its last step."""
        form = cls(rules)
        form._draft = submission.model_copy(deep=True)
        _clear_hidden_details(form._draft, rules.user_type)
        for segment in form._draft.outbound_segments + form._draft.return_segments:
            _clear_hidden_details(segment, rules.vehicle_type)
            _clear_hidden_details(segment, rules.fuel_type)
        # An empty list stays empty so submit reports it
        form.mirror = mirror
        if mirror:
            form._sync_mirror()
        form.step = FormStep.COMMENTS
        return form

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @property
    def draft(self) -> Submission:
        """A copy of the current draft."""
        return self._draft.model_copy(deep=True)

    @property
    def is_submitting(self) -> bool:
        return self._in_flight

    def segments(self, direction: Direction) -> list[Segment]:
        return list(self._segment_list(direction))

    def _segment_list(self, direction: Direction) -> list[Segment]:
        if direction == Direction.OUTBOUND:
            return self._draft.outbound_segments
        return self._draft.return_segments

    # ------------------------------------------------------------------
    # Editing guards
    # ------------------------------------------------------------------

    def _ensure_editable(self) -> None:
        if self._in_flight:
            raise InvalidTransitionError("The form cannot change while submitting")
        if self.step == FormStep.COMPLETE:
            raise InvalidTransitionError("The submission is already complete")

    def _ensure_list_editable(self, direction: Direction) -> None:
        self._ensure_editable()
        if direction == Direction.RETURN and self.mirror:
            raise InvalidTransitionError("The return trip mirrors the outbound trip")

    def _drop_errors(self, *paths: str) -> None:
        for path in paths:
            self.errors.pop(path, None)

    def _drop_errors_with_prefix(self, prefix: str) -> None:
        for path in [p for p in self.errors if p == prefix or p.startswith(prefix + ".")]:
            del self.errors[path]

    # ------------------------------------------------------------------
    # User type
    # ------------------------------------------------------------------

    def set_user_type(self, user_type: UserType | str, details: str | None = None) -> None:
        self._ensure_editable()
        try:
            self._draft.user_type = UserType(user_type).value
        except ValueError as exc:
            raise ValidationError({"user_type": "error.fieldRequired"}) from exc
        if details is not None:
            self._draft.other_user_type_details = details
        rule = self._rules.user_type
        _clear_hidden_details(self._draft, rule)
        self._drop_errors("user_type")
        if not rule.needs_details(self._draft.user_type) or details:
            self._drop_errors(rule.details_field)

    # ------------------------------------------------------------------
    # Segments
    # ------------------------------------------------------------------

    def add_segment(self, direction: Direction, segment: Segment | None = None) -> Segment:
        """Append *segment* (or a default one) to *direction*; returns it."""
        self._ensure_list_editable(direction)
        segment = segment.model_copy() if segment is not None else default_segment(direction)
        _clear_hidden_details(segment, self._rules.vehicle_type)
        _clear_hidden_details(segment, self._rules.fuel_type)
        self._segment_list(direction).append(segment)
        self._drop_errors(Direction(direction).value)
        self._outbound_changed(direction)
        return segment

    def remove_segment(self, direction: Direction, index: int) -> None:
        self._ensure_list_editable(direction)
        segments = self._segment_list(direction)
        if not 0 <= index < len(segments):
            raise IndexError(f"No {Direction(direction).value} segment at index {index}")
        if len(segments) <= 1:
            raise InvalidTransitionError("At least one segment is required")
        del segments[index]
        # Indices shift, stale paths would point at the wrong segment
        self._drop_errors_with_prefix(Direction(direction).value)
        self._outbound_changed(direction)

    def update_segment(self, direction: Direction, index: int, **changes: Any) -> Segment:
        """Merge *changes* into one segment and return the updated segment.

        Type errors (negative distance, unknown vehicle...) raise
        ``ValidationError`` and leave the segment untouched.
        """
        self._ensure_list_editable(direction)
        segments = self._segment_list(direction)
        if not 0 <= index < len(segments):
            raise IndexError(f"No {Direction(direction).value} segment at index {index}")

        unknown = set(changes) - set(Segment.model_fields)
        if unknown:
            raise ValidationError(
                {segment_path(direction, index, field): "error.unknownField" for field in unknown}
            )

        merged = segments[index].model_dump()
        merged.update(changes)
        try:
            updated = Segment.model_validate(merged)
        except PydanticValidationError as exc:
            field_errors = {
                segment_path(direction, index, str(err["loc"][0])): err["msg"]
                for err in exc.errors()
            }
            raise ValidationError(field_errors) from exc

        for rule in (self._rules.vehicle_type, self._rules.fuel_type):
            if not rule.needs_details(getattr(updated, rule.field)):
                _clear_hidden_details(updated, rule)
                self._drop_errors(segment_path(direction, index, rule.details_field))
        self._drop_errors(*(segment_path(direction, index, field) for field in changes))

        segments[index] = updated
        self._outbound_changed(direction)
        return updated

    def set_mirror(self, enabled: bool) -> None:
        """Switch the "return trip is the same as the outbound trip" option."""
        self._ensure_editable()
        self.mirror = enabled
        if enabled:
            self._sync_mirror()
        elif not self._draft.return_segments:
            self._draft.return_segments = [default_segment(Direction.RETURN)]

    def _outbound_changed(self, direction: Direction) -> None:
        if direction == Direction.OUTBOUND and self.mirror:
            self._sync_mirror()

    def _sync_mirror(self) -> None:
        derived = derive_return_segments(self._draft.outbound_segments)
        self._draft.return_segments = derived or [default_segment(Direction.RETURN)]
        self._drop_errors_with_prefix(Direction.RETURN.value)
        logger.debug("Mirrored %d outbound segments", len(derived))

    # ------------------------------------------------------------------
    # Accommodation and comments
    # ------------------------------------------------------------------

    def set_accommodation(self, hotel_nights: int | None) -> None:
        self._ensure_editable()
        if hotel_nights is not None and hotel_nights < 0:
            raise ValidationError({"hotel_nights": "accommodation.nightsInvalid"})
        self._draft.hotel_nights = hotel_nights
        self._drop_errors("hotel_nights")

    def set_comments(self, comments: str | None) -> None:
        self._ensure_editable()
        self._draft.comments = comments

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def next_step(self) -> FormStep:
        """Advance one step after checking the fields the current step owns."""
        self._ensure_editable()
        if self.step not in EDIT_STEPS[:-1]:
            raise InvalidTransitionError(f"Cannot advance from {self.step.value}")
        errors = validate_step(self.step, self._draft, self._rules)
        if errors:
            self.errors.update(errors)
            raise ValidationError(errors)
        self.step = EDIT_STEPS[EDIT_STEPS.index(self.step) + 1]
        return self.step

    def previous_step(self) -> FormStep:
        self._ensure_editable()
        if self.step == FormStep.FAILED:
            self.step = FormStep.COMMENTS
        elif self.step in EDIT_STEPS[1:]:
            self.step = EDIT_STEPS[EDIT_STEPS.index(self.step) - 1]
        else:
            raise InvalidTransitionError(f"Cannot go back from {self.step.value}")
        return self.step

    # ------------------------------------------------------------------
    # Submit
    # ------------------------------------------------------------------

    def build_submission_record(self, event_id: str) -> SubmissionRecord:
        draft = self._draft
        details = None
        if self._rules.user_type.needs_details(draft.user_type):
            details = draft.other_user_type_details
        return SubmissionRecord(
            event_id=event_id,
            user_type=draft.user_type,
            user_type_other_details=details,
            total_hotel_nights=draft.hotel_nights,
            comments=draft.comments,
        )

    def build_segment_records(self, submission_id: str) -> list[SegmentRecord]:
        """Footprinted records, outbound first, ``segment_order`` from 0."""
        ordered = self._draft.outbound_segments + self._draft.return_segments
        records: list[SegmentRecord] = []
        for order, segment in enumerate(ordered):
            data = segment.model_dump()
            for rule in (self._rules.vehicle_type, self._rules.fuel_type):
                if not rule.needs_details(data[rule.field]):
                    data[rule.details_field] = None
            records.append(
                SegmentRecord(
                    **data,
                    submission_id=submission_id,
                    calculated_carbon_footprint=compute_footprint(segment),
                    segment_order=order,
                )
            )
        return records

    async def submit(self, event_id: str, repo: "SubmissionRepository") -> SubmissionWithSegments:
        """Validate, footprint and store the draft.

        Raises ``SubmitInProgressError`` if a submit is already outstanding,
        ``ValidationError`` before any store call when fields are missing,
        and re-raises any store failure after moving to ``failed``.
        """
        if self._in_flight:
            raise SubmitInProgressError()
        if self.step not in (FormStep.COMMENTS, FormStep.FAILED):
            raise InvalidTransitionError(f"Cannot submit from {self.step.value}")

        errors = validate_submission(self._draft, self._rules)
        if errors:
            self.errors = errors
            raise ValidationError(errors)
        self.errors = {}
        record = self.build_submission_record(event_id)

        self._in_flight = True
        self.step = FormStep.SUBMITTING
        self.last_error = None
        try:
            if self._stored_submission_id is None:
                self._stored_submission_id = await repo.create_submission(record)
            else:
                await repo.update(self._stored_submission_id, record)
            submission_id = self._stored_submission_id
            segments = self.build_segment_records(submission_id)
            await repo.create_segments(submission_id, segments)
        except PersistenceError as exc:
            self.step = FormStep.FAILED
            self.last_error = str(exc)
            logger.warning("Submission for event %s failed: %s", event_id, exc)
            raise
        except Exception as exc:
            # Unexpected failure: still leave the draft retryable
            self.step = FormStep.FAILED
            self.last_error = str(exc)
            logger.exception("Submission for event %s failed unexpectedly", event_id)
            raise
        finally:
            self._in_flight = False

        self.result = SubmissionWithSegments(
            **record.model_dump(exclude={"id"}), id=submission_id, segments=segments
        )
        self.step = FormStep.COMPLETE
        logger.info(
            "Stored submission %s for event %s (%d segments)",
            submission_id, event_id, len(segments),
        )
        return self.result
