"""Errors raised by the booking workflow.

Validation and conflict errors are recoverable by the caller (re-prompt or
re-fetch). Persistence errors abort the operation. Dispatch errors are only
reported: the status change that triggered them has already been committed.
"""


class BookingError(Exception):
    """Base class for booking workflow errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookingValidationError(BookingError):
    """A request failed validation and nothing was persisted."""

    def __init__(self, rejection):
        super().__init__(rejection.message)
        self.rejection = rejection


class ConfirmationBlockedError(BookingValidationError):
    """The appointment date became a holiday before it was confirmed."""


class AppointmentNotFoundError(BookingError):
    pass


class InvalidTransitionError(BookingError):
    def __init__(self, current_status: str, target_status: str, message: str | None = None):
        super().__init__(message or f'Cannot change an appointment from {current_status} to {target_status}.')
        self.current_status = current_status
        self.target_status = target_status


class ConflictError(BookingError):
    """The appointment was changed by someone else since it was read."""

    def __init__(self, message: str = 'This appointment has already been processed.'):
        super().__init__(message)


class PersistenceError(BookingError):
    pass


class DispatchError(BookingError):
    pass
