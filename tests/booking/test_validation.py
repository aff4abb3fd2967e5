from datetime import date

import pytest
from pydantic import ValidationError

from clinic.booking import validation
from clinic.booking.availability import HolidayRecord, HolidayResolver
from clinic.booking.validation import Accepted, Rejected, booking_window, validate_request
from factories import TODAY, make_request

CHRISTMAS = date(2025, 12, 25)


def test_holiday_for_all_specialties_rejects_booking() -> None:
    resolver = HolidayResolver([HolidayRecord(date=CHRISTMAS, reason='Christmas', scope='all')])

    result = validate_request(make_request(date=CHRISTMAS), resolver, TODAY)

    assert isinstance(result, Rejected)
    assert result.code == validation.HOLIDAY
    assert result.doctor_specific is False
    assert result.holiday.reason == 'Christmas'
    assert result.message == 'The clinic is closed on this date: Christmas. Please select another date.'


def test_holiday_for_other_specialty_does_not_block() -> None:
    resolver = HolidayResolver([HolidayRecord(date=CHRISTMAS, reason='Christmas', scope='gynecology')])

    result = validate_request(make_request(date=CHRISTMAS, specialty='eyecare'), resolver, TODAY)

    assert isinstance(result, Accepted)


def test_doctor_specific_holiday_names_the_doctor() -> None:
    resolver = HolidayResolver([
        HolidayRecord(date=date(2025, 12, 12), reason='Medical conference', scope='gynecology', source='doctor'),
    ])
    request = make_request(specialty='gynecology', date=date(2025, 12, 12), time='Morning (9 AM - 12 PM)',
                           reason='Pregnancy Care')

    result = validate_request(request, resolver, TODAY)

    assert result.code == validation.HOLIDAY
    assert result.doctor_specific is True
    assert result.message == (
        'Dr. Nisha Bhatnagar is unavailable on this date: Medical conference. Please select another date.'
    )


def test_missing_time_is_rejected_even_when_everything_else_is_valid() -> None:
    result = validate_request(make_request(time=None), HolidayResolver([]), TODAY)

    assert result.code == validation.TIME_REQUIRED


def test_time_must_be_a_slot_of_the_specialty() -> None:
    # Gynecology opens at 9 AM; the eye clinic does not.
    result = validate_request(make_request(time='Morning (9 AM - 12 PM)'), HolidayResolver([]), TODAY)

    assert result.code == validation.TIME_REQUIRED


@pytest.mark.parametrize(
    ('overrides', 'expected_code'),
    [
        ({'date': None, 'time': None, 'reason': None}, validation.DATE_REQUIRED),
        ({'time': '', 'reason': None}, validation.TIME_REQUIRED),
        ({'reason': '   '}, validation.REASON_REQUIRED),
        ({'date': CHRISTMAS, 'reason': None}, validation.REASON_REQUIRED),
    ],
)
def test_first_failing_rule_wins(overrides: dict, expected_code: str) -> None:
    resolver = HolidayResolver([HolidayRecord(date=CHRISTMAS, reason='Christmas')])

    result = validate_request(make_request(**overrides), resolver, TODAY)

    assert result.code == expected_code


def test_holiday_is_reported_before_booking_horizon() -> None:
    past_holiday = date(2025, 11, 1)
    resolver = HolidayResolver([HolidayRecord(date=past_holiday, reason='Diwali')])

    result = validate_request(make_request(date=past_holiday), resolver, TODAY)

    assert result.code == validation.HOLIDAY


@pytest.mark.parametrize('booking_date', [date(2025, 11, 30), date(2026, 3, 2)])
def test_dates_outside_booking_horizon_are_rejected(booking_date: date) -> None:
    result = validate_request(make_request(date=booking_date), HolidayResolver([]), TODAY)

    assert result.code == validation.OUT_OF_RANGE


def test_booking_horizon_includes_today_and_last_day() -> None:
    start, end = booking_window(TODAY, months=3)

    assert (start, end) == (TODAY, date(2026, 3, 1))
    assert isinstance(validate_request(make_request(date=TODAY), HolidayResolver([]), TODAY), Accepted)
    gynecology_request = make_request(specialty='gynecology', date=end, time='Evening (3 PM - 6 PM)',
                                      reason='Fertility Consultation')
    assert isinstance(validate_request(gynecology_request, HolidayResolver([]), TODAY), Accepted)


def test_eye_clinic_is_closed_on_sundays() -> None:
    sunday = date(2025, 12, 7)

    eyecare = validate_request(make_request(date=sunday), HolidayResolver([]), TODAY)
    gynecology = validate_request(
        make_request(specialty='gynecology', date=sunday, time='Afternoon (12 PM - 3 PM)', reason='PCOS Management'),
        HolidayResolver([]),
        TODAY,
    )

    assert eyecare.code == validation.OUT_OF_RANGE
    assert isinstance(gynecology, Accepted)


def test_validation_is_idempotent() -> None:
    resolver = HolidayResolver([HolidayRecord(date=CHRISTMAS, reason='Christmas')])
    request = make_request(date=CHRISTMAS)

    assert validate_request(request, resolver, TODAY) == validate_request(request, resolver, TODAY)


def test_request_rejects_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        make_request(status='confirmed')


def test_request_normalizes_contact_fields() -> None:
    request = make_request(email=' ASHA@Example.COM ', first_name=' Asha ', additional_info='   ')

    assert request.email == 'asha@example.com'
    assert request.first_name == 'Asha'
    assert request.additional_info is None
    assert request.doctor == 'Sanjeev Lehri'
    assert request.clinic == 'Eyefem Eye Care Clinic'


def test_request_requires_patient_name() -> None:
    with pytest.raises(ValidationError):
        make_request(last_name='  ')
