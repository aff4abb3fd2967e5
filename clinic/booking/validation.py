"""Booking request validation.

Rules run in a fixed order and the first failing rule decides the result:
date, time slot, reason, holiday block, then booking horizon and closed weekdays.
"""

from dataclasses import dataclass
from datetime import date

from dateutil.relativedelta import relativedelta

from clinic.booking.availability import HolidayRecord, HolidayResolver
from clinic.booking.requests import AppointmentRequest
from clinic.booking.specialties import Specialty, get_profile
from clinic.core import config

DATE_REQUIRED = 'date_required'
TIME_REQUIRED = 'time_required'
REASON_REQUIRED = 'reason_required'
HOLIDAY = 'holiday'
OUT_OF_RANGE = 'out_of_range'


@dataclass(frozen=True)
class Accepted:
    accepted = True


@dataclass(frozen=True)
class Rejected:
    code: str
    message: str
    holiday: HolidayRecord | None = None
    doctor_specific: bool = False

    accepted = False


ValidationResult = Accepted | Rejected


def booking_window(today: date, months: int | None = None) -> tuple[date, date]:
    horizon = config.BOOKING_HORIZON_MONTHS if months is None else months
    return today, today + relativedelta(months=horizon)


def holiday_message(holiday: HolidayRecord, specialty: Specialty | str) -> str:
    if holiday.is_doctor_specific:
        doctor = get_profile(specialty).doctor_title
        return f'{doctor} is unavailable on this date: {holiday.reason}. Please select another date.'
    return f'The clinic is closed on this date: {holiday.reason}. Please select another date.'


def check_holiday(resolver: HolidayResolver, day: date, specialty: Specialty | str) -> Rejected | None:
    holiday = resolver.holiday_for(day, specialty)
    if holiday is None:
        return None
    return Rejected(
        code=HOLIDAY,
        message=holiday_message(holiday, specialty),
        holiday=holiday,
        doctor_specific=holiday.is_doctor_specific,
    )


def validate_request(request: AppointmentRequest, resolver: HolidayResolver, today: date) -> ValidationResult:
    profile = get_profile(request.specialty)

    if request.date is None:
        return Rejected(DATE_REQUIRED, 'A date is required to book an appointment.')

    if request.time not in profile.time_slots:
        return Rejected(TIME_REQUIRED, 'A time slot is required to book an appointment.')

    if not request.reason:
        return Rejected(REASON_REQUIRED, 'A reason is required to book an appointment.')

    rejection = check_holiday(resolver, request.date, request.specialty)
    if rejection:
        return rejection

    window_start, window_end = booking_window(today)
    if request.date < window_start or request.date > window_end:
        return Rejected(
            OUT_OF_RANGE,
            f'Appointments can only be booked between {window_start:%B %d, %Y} and {window_end:%B %d, %Y}.',
        )

    if request.date.weekday() in profile.closed_weekdays:
        return Rejected(OUT_OF_RANGE, f'The {profile.clinic} is closed on {request.date:%A}s.')

    return Accepted()
