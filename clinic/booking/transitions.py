from enum import Enum

from clinic.booking.errors import ConflictError, InvalidTransitionError


class AppointmentStatus(str, Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    REJECTED = 'rejected'


ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.REJECTED,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.REJECTED: frozenset(),
}


def is_terminal(status: AppointmentStatus | str) -> bool:
    return not ALLOWED_TRANSITIONS[AppointmentStatus(status)]


def can_transition(current: AppointmentStatus | str, target: AppointmentStatus | str) -> bool:
    return AppointmentStatus(target) in ALLOWED_TRANSITIONS[AppointmentStatus(current)]


def ensure_transition(current: AppointmentStatus | str, target: AppointmentStatus | str) -> None:
    current_status = AppointmentStatus(current)
    target_status = AppointmentStatus(target)

    # A repeated request for the same status lost a race with an earlier one.
    if current_status == target_status:
        raise ConflictError()

    if is_terminal(current_status):
        raise InvalidTransitionError(
            current_status.value,
            target_status.value,
            f'This appointment is already {current_status.value} and can no longer be changed.',
        )

    if not can_transition(current_status, target_status):
        raise InvalidTransitionError(current_status.value, target_status.value)
