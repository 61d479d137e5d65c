"""
Domain errors for the court booking core.

Services raise these; the HTTP layer maps ``status_code`` onto an
HTTPException. Every class carries a stable ``code`` string so callers can
branch without parsing messages.
"""
from typing import Optional


class CourtBookingError(Exception):
    """Base exception for court booking errors"""

    code = "COURT_BOOKING_ERROR"
    status_code = 400
    default_message = "Court booking error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"code": self.code, "message": self.message}


# ============================================================================
# Validation errors: rejected input, nothing persisted
# ============================================================================


class BookingValidationError(CourtBookingError):
    code = "VALIDATION_ERROR"
    status_code = 400


class RequestWindowError(BookingValidationError):
    code = "INVALID_REQUEST_WINDOW"
    default_message = "Requests must be made between 2 and 5 days in advance"


class DirectBookingWindowError(BookingValidationError):
    code = "INVALID_DIRECT_BOOKING_WINDOW"
    default_message = "Direct bookings are only allowed less than 2 days in advance"


class PlayerCountError(BookingValidationError):
    code = "INVALID_NUMBER_OF_PLAYERS"
    default_message = "Number of players must be between 2 and 4"


class InvalidTimeSlotError(BookingValidationError):
    code = "INVALID_TIME_SLOT"
    default_message = "End time must be after start time"


class ParticipantError(BookingValidationError):
    code = "INVALID_PARTICIPANTS"
    default_message = "Participants must list every other player exactly once"


class WeightPolicyError(BookingValidationError):
    code = "INVALID_WEIGHT"
    default_message = "Draw weights must be finite and greater than 0"


# ============================================================================
# Resource errors: the referenced entity is missing or unusable
# ============================================================================


class ResourceError(CourtBookingError):
    code = "RESOURCE_ERROR"
    status_code = 404


class CourtNotFoundError(ResourceError):
    code = "COURT_NOT_FOUND"
    default_message = "Court not found"


class CourtInactiveError(ResourceError):
    code = "COURT_INACTIVE"
    status_code = 409
    default_message = "Court is not active"


class CourtNotAvailableError(ResourceError):
    code = "COURT_NOT_AVAILABLE"
    status_code = 409
    default_message = "Court is already booked for this date and time slot"


class CourtHasActiveBookingsError(ResourceError):
    code = "COURT_HAS_ACTIVE_BOOKINGS"
    status_code = 409
    default_message = "Court has active bookings"


class UserNotFoundError(ResourceError):
    code = "USER_NOT_FOUND"
    default_message = "User not found"


class BookingNotFoundError(ResourceError):
    code = "BOOKING_NOT_FOUND"
    default_message = "Booking not found"


class RequestNotFoundError(ResourceError):
    code = "REQUEST_NOT_FOUND"
    default_message = "Booking request not found"


class DuplicateRequestError(ResourceError):
    code = "DUPLICATE_REQUEST"
    status_code = 409
    default_message = "User already has a pending request for this date and time slot"


class NoActiveCourtsError(ResourceError):
    code = "NO_ACTIVE_COURTS"
    status_code = 409
    default_message = "No active courts are configured"


# ============================================================================
# Domain-state errors: illegal status transitions
# ============================================================================


class DomainStateError(CourtBookingError):
    code = "INVALID_STATE"
    status_code = 422


class CannotCancelCompletedBookingError(DomainStateError):
    code = "CANNOT_CANCEL_COMPLETED_BOOKING"
    default_message = "Completed bookings cannot be cancelled"


class InvalidStateTransitionError(DomainStateError):
    code = "INVALID_STATE_TRANSITION"
    default_message = "Status transition not allowed"


# ============================================================================
# Concurrency errors
# ============================================================================


class LotteryConflictError(CourtBookingError):
    code = "LOTTERY_CONFLICT"
    status_code = 409


class LotteryInProgressError(LotteryConflictError):
    code = "LOTTERY_IN_PROGRESS"
    default_message = "A lottery for this date and time slot is already running"


class AllocationConflictError(LotteryConflictError):
    code = "ALLOCATION_CONFLICT"
    default_message = "Every drawn court was taken before the lottery could commit"
