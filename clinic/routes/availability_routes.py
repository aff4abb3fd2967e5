import datetime as dt

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from clinic.booking.errors import BookingError
from clinic.booking.service import disabled_booking_dates
from clinic.booking.specialties import Specialty, get_profile
from clinic.booking.validation import booking_window
from clinic.routes.common import ensure_database_ready, get_db, http_error_for

router = APIRouter(tags=['availability'])


class BookingOptionsResponse(BaseModel):
    specialty: str
    doctor: str
    clinic: str
    time_slots: list[str]
    reasons: list[str]
    closed_weekdays: list[int]
    earliest_date: dt.date
    latest_date: dt.date


class DisabledDateResponse(BaseModel):
    date: dt.date
    reason: str
    doctor_specific: bool
    source: str


@router.get('/options', response_model=BookingOptionsResponse)
def get_booking_options(specialty: Specialty = Query(...)):
    profile = get_profile(specialty)
    earliest, latest = booking_window(dt.date.today())
    return BookingOptionsResponse(
        specialty=profile.specialty.value,
        doctor=profile.doctor_title,
        clinic=profile.clinic,
        time_slots=list(profile.time_slots),
        reasons=list(profile.reasons),
        closed_weekdays=sorted(profile.closed_weekdays),
        earliest_date=earliest,
        latest_date=latest,
    )


@router.get('/disabled-dates', response_model=list[DisabledDateResponse])
def list_disabled_dates(
    specialty: Specialty = Query(...),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        holidays = disabled_booking_dates(db, specialty.value, dt.date.today())
    except BookingError as exc:
        raise http_error_for(exc) from exc

    return [
        DisabledDateResponse(
            date=holiday.date,
            reason=holiday.reason,
            doctor_specific=holiday.is_doctor_specific,
            source=holiday.source,
        )
        for holiday in holidays
    ]
