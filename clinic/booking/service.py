import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic.booking.availability import HolidayResolver, build_resolver
from clinic.booking.errors import (
    AppointmentNotFoundError,
    BookingValidationError,
    ConfirmationBlockedError,
    ConflictError,
    PersistenceError,
)
from clinic.booking.requests import AppointmentRequest
from clinic.booking.transitions import AppointmentStatus, ensure_transition
from clinic.booking.validation import Accepted, booking_window, check_holiday, validate_request
from clinic.models.appointment import Appointment
from clinic.notifications.dispatcher import DispatchResult, NotificationDispatcher, NotificationMode

logger = logging.getLogger(__name__)

STATUS_NOTIFICATIONS = {
    AppointmentStatus.CONFIRMED: NotificationMode.CONFIRMED,
    AppointmentStatus.CANCELLED: NotificationMode.CANCELLED,
    AppointmentStatus.REJECTED: NotificationMode.REJECTED,
}


@dataclass
class BookingOutcome:
    appointment: Appointment
    notification: DispatchResult | None = None


class AppointmentService:
    """Creates appointments and moves them through their lifecycle.

    Status changes are written with a single conditional UPDATE on the
    expected prior status, so only one of several concurrent staff actions
    on the same appointment can win. Notifications are sent after the
    commit and their failures are reported, never rolled back.
    """

    def __init__(
        self,
        db: Session,
        dispatcher: NotificationDispatcher,
        resolver_factory: Callable[[Session], HolidayResolver] = build_resolver,
        today: Callable[[], date] = date.today,
    ):
        self.db = db
        self.dispatcher = dispatcher
        self._resolver_factory = resolver_factory
        self._today = today

    def _resolver(self) -> HolidayResolver:
        return self._resolver_factory(self.db)

    def submit(self, request: AppointmentRequest) -> BookingOutcome:
        result = validate_request(request, self._resolver(), self._today())
        if not isinstance(result, Accepted):
            raise BookingValidationError(result)

        now = datetime.now()
        appointment = Appointment(
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            phone=request.phone,
            age=request.age,
            gender=request.gender,
            specialty=request.specialty.value,
            doctor=request.doctor,
            clinic=request.clinic,
            date=request.date.isoformat(),
            time=request.time,
            reason=request.reason,
            additional_info=request.additional_info,
            status=AppointmentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

        try:
            self.db.add(appointment)
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception('Could not store appointment request for %s', request.email)
            raise PersistenceError('The appointment request could not be saved.') from exc

        logger.info('Stored %s appointment request %s for %s', appointment.specialty, appointment.id, appointment.date)
        notification = self.dispatcher.send(appointment, NotificationMode.REQUESTED)
        return BookingOutcome(appointment=appointment, notification=notification)

    def get(self, appointment_id: str) -> Appointment:
        try:
            appointment = self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception('Could not load appointment %s', appointment_id)
            raise PersistenceError('Appointments are unavailable.') from exc

        if appointment is None:
            raise AppointmentNotFoundError('Appointment not found.')
        return appointment

    def confirm(self, appointment_id: str) -> BookingOutcome:
        return self.transition(appointment_id, AppointmentStatus.CONFIRMED)

    def cancel(self, appointment_id: str) -> BookingOutcome:
        return self.transition(appointment_id, AppointmentStatus.CANCELLED)

    def reject(self, appointment_id: str) -> BookingOutcome:
        return self.transition(appointment_id, AppointmentStatus.REJECTED)

    def complete(self, appointment_id: str) -> BookingOutcome:
        return self.transition(appointment_id, AppointmentStatus.COMPLETED)

    def transition(self, appointment_id: str, target: AppointmentStatus) -> BookingOutcome:
        appointment = self.get(appointment_id)
        current = AppointmentStatus(appointment.status)
        ensure_transition(current, target)

        if target == AppointmentStatus.CONFIRMED:
            self._ensure_date_open(appointment)

        self._compare_and_set(appointment.id, current, target)
        self.db.refresh(appointment)
        logger.info('Appointment %s moved from %s to %s', appointment.id, current.value, target.value)

        mode = STATUS_NOTIFICATIONS.get(target)
        if mode is None:
            return BookingOutcome(appointment=appointment)
        return BookingOutcome(appointment=appointment, notification=self.dispatcher.send(appointment, mode))

    def _ensure_date_open(self, appointment: Appointment) -> None:
        appointment_date = date.fromisoformat(appointment.date)
        rejection = check_holiday(self._resolver(), appointment_date, appointment.specialty)
        if rejection:
            raise ConfirmationBlockedError(rejection)

    def _compare_and_set(self, appointment_id: str, expected: AppointmentStatus, target: AppointmentStatus) -> None:
        statement = (
            update(Appointment)
            .where(Appointment.id == appointment_id, Appointment.status == expected.value)
            .values(status=target.value, updated_at=datetime.now())
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(statement)
            if result.rowcount != 1:
                self.db.rollback()
                raise ConflictError()
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception('Could not update appointment %s to %s', appointment_id, target.value)
            raise PersistenceError('The appointment status could not be saved.') from exc


def list_appointments(
    db: Session,
    specialty: str | None = None,
    status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[Appointment]:
    try:
        query = db.query(Appointment)
        if specialty:
            query = query.filter(Appointment.specialty == specialty)
        if status:
            query = query.filter(Appointment.status == status)
        # ISO text dates compare in calendar order.
        if date_from:
            query = query.filter(Appointment.date >= date_from.isoformat())
        if date_to:
            query = query.filter(Appointment.date <= date_to.isoformat())
        return query.order_by(Appointment.date.asc(), Appointment.created_at.asc()).all()
    except SQLAlchemyError as exc:
        raise PersistenceError('Appointments are unavailable.') from exc


def disabled_booking_dates(db: Session, specialty: str, today: date) -> list:
    window_start, window_end = booking_window(today)
    resolver = build_resolver(db, window_start, window_end)
    return resolver.disabled_dates(specialty, window_start, window_end)
