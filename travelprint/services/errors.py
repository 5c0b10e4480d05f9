"""Domain exceptions raised by the intake form and the aggregation engine."""


class TravelprintError(Exception):
    """Base exception for all domain errors."""


class ValidationError(TravelprintError):
    """Raised when required fields are missing or conditional requirements are unmet.

    ``field_errors`` maps a field path (``outbound.0.origin``,
    ``other_user_type_details``...) to a message key.
    """

    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = dict(field_errors)
        fields = ", ".join(sorted(self.field_errors))
        super().__init__(f"Invalid fields: {fields}")


class InvalidTransitionError(TravelprintError):
    """Raised when a form operation is not allowed in the current state."""


class SubmitInProgressError(InvalidTransitionError):
    """Raised when a submit is attempted while another one is outstanding."""

    def __init__(self):
        super().__init__("A submission is already in flight")


class EmptyResultError(TravelprintError):
    """Raised when an event has no submissions to aggregate yet."""
