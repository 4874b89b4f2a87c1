"""Domain errors raised by the service layer.

Routes translate them into the response envelope; ``code`` ends up in the
``error`` field so clients can tell the failures apart.
"""


class BookingError(ValueError):
    code = "bad_request"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationFailedError(BookingError):
    code = "validation_error"


class ProfileIncompleteError(ValidationFailedError):
    code = "profile_incomplete"

    def __init__(self, missing_fields: list[str]):
        super().__init__(
            "Please complete your profile before booking. Missing: "
            + ", ".join(missing_fields)
        )
        self.missing_fields = missing_fields


class ConflictError(BookingError):
    code = "conflict"


class DuplicateBookingError(ConflictError):
    code = "duplicate_booking"

    def __init__(self, message: str = "You already have a pending booking request for this property."):
        super().__init__(message)


class InvalidTransitionError(ConflictError):
    code = "invalid_transition"


class PaymentWindowClosedError(InvalidTransitionError):
    code = "payment_window_closed"


class DuplicateRatingError(ConflictError):
    code = "duplicate_rating"

    def __init__(self, message: str = "You have already rated this booking."):
        super().__init__(message)


class NotFoundError(BookingError):
    code = "not_found"


class PermissionDeniedError(BookingError):
    code = "forbidden"
