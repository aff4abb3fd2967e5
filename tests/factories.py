from datetime import date

from clinic.booking.requests import AppointmentRequest
from clinic.models.appointment import Appointment
from clinic.models.holiday import Holiday

TODAY = date(2025, 12, 1)
CLINIC_EMAIL = 'clinic@eyefem.example'


class FakeEmailSender:
    def __init__(self, fail_for: set[str] | None = None):
        self.sent: list[dict] = []
        self.fail_for = fail_for or set()

    def __call__(self, params: dict) -> dict:
        if self.fail_for.intersection(params['to']):
            raise RuntimeError('Resend rejected the message')
        self.sent.append(params)
        return {'id': f'email-{len(self.sent)}'}


def make_request(**overrides) -> AppointmentRequest:
    payload = {
        'first_name': 'Asha',
        'last_name': 'Verma',
        'email': 'asha@example.com',
        'phone': '+91 90000 00000',
        'specialty': 'eyecare',
        'date': date(2025, 12, 10),
        'time': 'Morning (10 AM - 12 PM)',
        'reason': 'Routine Eye Examination',
    }
    payload.update(overrides)
    return AppointmentRequest(**payload)


def make_appointment(db, **overrides) -> Appointment:
    values = {
        'first_name': 'Asha',
        'last_name': 'Verma',
        'email': 'asha@example.com',
        'phone': '+91 90000 00000',
        'specialty': 'eyecare',
        'doctor': 'Sanjeev Lehri',
        'clinic': 'Eyefem Eye Care Clinic',
        'date': '2025-12-10',
        'time': 'Morning (10 AM - 12 PM)',
        'reason': 'Routine Eye Examination',
        'status': 'pending',
    }
    values.update(overrides)
    appointment = Appointment(**values)
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


def add_holiday(db, holiday_date: date, name: str, scope: str = 'all', source: str = 'manual') -> Holiday:
    holiday = Holiday(date=holiday_date, name=name, scope=scope, source=source)
    db.add(holiday)
    db.commit()
    db.refresh(holiday)
    return holiday
