from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from clinic.auth.dependencies import require_staff
from clinic.booking.errors import BookingError
from clinic.booking.requests import AppointmentRequest
from clinic.booking.service import AppointmentService, BookingOutcome, list_appointments
from clinic.booking.specialties import Specialty
from clinic.booking.transitions import AppointmentStatus
from clinic.models.user import User
from clinic.notifications.dispatcher import DispatchResult, NotificationDispatcher
from clinic.routes.common import ensure_database_ready, get_db, get_dispatcher, http_error_for
from clinic.services.export import appointments_to_csv, appointments_to_json, export_filename

router = APIRouter(tags=['appointments'])


class AppointmentResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    age: int | None = None
    gender: str | None = None
    specialty: str
    doctor: str
    clinic: str
    date: str
    time: str
    reason: str
    additional_info: str | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class NotificationResponse(BaseModel):
    mode: str
    success: bool
    errors: list[str]
    attachments: int


class BookingResponse(BaseModel):
    appointment: AppointmentResponse
    notification: NotificationResponse | None = None


def _notification_response(result: DispatchResult | None) -> NotificationResponse | None:
    if result is None:
        return None
    return NotificationResponse(
        mode=result.mode.value,
        success=result.success,
        errors=result.errors,
        attachments=result.attachment_count,
    )


def _booking_response(outcome: BookingOutcome) -> BookingResponse:
    return BookingResponse(
        appointment=AppointmentResponse.model_validate(outcome.appointment),
        notification=_notification_response(outcome.notification),
    )


def _change_status(
    appointment_id: str,
    target: AppointmentStatus,
    db: Session,
    dispatcher: NotificationDispatcher,
) -> BookingResponse:
    ensure_database_ready()

    try:
        outcome = AppointmentService(db, dispatcher).transition(appointment_id, target)
    except BookingError as exc:
        raise http_error_for(exc) from exc

    return _booking_response(outcome)


@router.post('', response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentRequest,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    ensure_database_ready()

    try:
        outcome = AppointmentService(db, dispatcher).submit(data)
    except BookingError as exc:
        raise http_error_for(exc) from exc

    return _booking_response(outcome)


@router.get('', response_model=list[AppointmentResponse])
def list_staff_appointments(
    specialty: Specialty | None = Query(default=None),
    appointment_status: AppointmentStatus | None = Query(default=None, alias='status'),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    db: Session = Depends(get_db),
    _staff: User = Depends(require_staff),
):
    ensure_database_ready()

    try:
        appointments = list_appointments(
            db,
            specialty=specialty.value if specialty else None,
            status=appointment_status.value if appointment_status else None,
            date_from=date_from,
            date_to=date_to,
        )
    except BookingError as exc:
        raise http_error_for(exc) from exc

    return appointments


@router.get('/export')
def export_appointments(
    export_format: str = Query(default='csv', alias='format'),
    specialty: Specialty | None = Query(default=None),
    db: Session = Depends(get_db),
    _staff: User = Depends(require_staff),
):
    normalized_format = export_format.strip().lower()
    if normalized_format not in {'csv', 'json'}:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Export format must be csv or json.',
        )

    ensure_database_ready()

    specialty_value = specialty.value if specialty else None
    try:
        appointments = list_appointments(db, specialty=specialty_value)
    except BookingError as exc:
        raise http_error_for(exc) from exc

    if not appointments:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='There are no appointments to export.',
        )

    filename = export_filename(specialty_value, normalized_format, date.today())
    if normalized_format == 'csv':
        content, media_type = appointments_to_csv(appointments), 'text/csv'
    else:
        content, media_type = appointments_to_json(appointments), 'application/json'

    return Response(
        content=content,
        media_type=media_type,
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )


@router.post('/{appointment_id}/confirm', response_model=BookingResponse)
def confirm_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    _staff: User = Depends(require_staff),
):
    return _change_status(appointment_id, AppointmentStatus.CONFIRMED, db, dispatcher)


@router.post('/{appointment_id}/cancel', response_model=BookingResponse)
def cancel_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    _staff: User = Depends(require_staff),
):
    return _change_status(appointment_id, AppointmentStatus.CANCELLED, db, dispatcher)


@router.post('/{appointment_id}/reject', response_model=BookingResponse)
def reject_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    _staff: User = Depends(require_staff),
):
    return _change_status(appointment_id, AppointmentStatus.REJECTED, db, dispatcher)


@router.post('/{appointment_id}/complete', response_model=BookingResponse)
def complete_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    _staff: User = Depends(require_staff),
):
    return _change_status(appointment_id, AppointmentStatus.COMPLETED, db, dispatcher)
