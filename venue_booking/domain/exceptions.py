

class VenueBookingError(Exception):
    """
    Base exception for all domain-level errors
    inside the venue booking engine.
    """


class ValidationError(VenueBookingError):
    """
    Raised when input fields are missing or invalid.
    `fields` lists the offending field names so callers
    can render per-field messages.
    """

    def __init__(self, fields: list[str], message: str | None = None):
        self.fields = list(fields)

        if message is None:
            message = f"Invalid or missing fields: {', '.join(self.fields)}"
        super().__init__(message)

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        """Collapse a pydantic ValidationError into field names."""
        fields = []
        messages = []

        for error in exc.errors():
            name = ".".join(str(part) for part in error["loc"]) or "record"
            if name not in fields:
                fields.append(name)
            messages.append(f"{name}: {error['msg']}")

        return cls(fields, "; ".join(messages))


class NotFoundError(VenueBookingError):
    """Raised when an identifier does not resolve to a record."""

    entity = "Record"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"{self.entity} not found: {record_id}")


class VenueNotFoundError(NotFoundError):
    entity = "Venue"


class PackageNotFoundError(NotFoundError):
    entity = "Service package"


class BookingNotFoundError(NotFoundError):
    entity = "Booking"


class ConsistencyViolationError(VenueBookingError):
    """
    Raised when a mutation is blocked by a cross-entity rule,
    e.g. deleting a venue that still has bookings.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class InvalidStateTransitionError(VenueBookingError):
    """
    Raised when an illegal booking state transition is attempted.
    """

    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state

        message = (
            f"Illegal state transition attempted: "
            f"{from_state} -> {to_state}"
        )
        super().__init__(message)


class IdempotencyConflictError(VenueBookingError):
    """Raised when an idempotent request conflicts with previous data."""
