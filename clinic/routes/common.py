from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from clinic.booking.errors import (
    AppointmentNotFoundError,
    BookingError,
    BookingValidationError,
    ConfirmationBlockedError,
    ConflictError,
    InvalidTransitionError,
)
from clinic.core import config
from clinic.database import SessionLocal, ensure_appointment_schema, ensure_holiday_schema
from clinic.notifications.dispatcher import NotificationDispatcher

DATABASE_UNAVAILABLE = 'Database unavailable. Verify DATABASE_URL and database credentials.'


def ensure_database_ready() -> None:
    try:
        ensure_holiday_schema()
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher(config.get_notification_settings())


def http_error_for(exc: BookingError) -> HTTPException:
    if isinstance(exc, ConfirmationBlockedError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message)
    if isinstance(exc, BookingValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    if isinstance(exc, AppointmentNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, (ConflictError, InvalidTransitionError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message)
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=DATABASE_UNAVAILABLE)
