from datetime import datetime

from clinic.notifications.receipt import build_receipt, receipt_filename, receipt_reference
from factories import make_appointment


def test_receipt_reference_uses_specialty_prefix(db) -> None:
    appointment = make_appointment(db, id='ab12cd34-0000-4000-8000-000000000000')

    assert receipt_reference(appointment) == 'EYE-AB12CD34'


def test_receipt_filenames(db) -> None:
    appointment = make_appointment(
        db,
        id='ab12cd34-0000-4000-8000-000000000000',
        specialty='gynecology',
        last_name="D'Souza",
    )

    assert receipt_filename(appointment) == 'patient_copy_DSouza_GYN-AB12CD34.pdf'
    assert receipt_filename(appointment, for_doctor=True) == 'doctor_copy_DSouza_GYN-AB12CD34.pdf'


def test_build_receipt_returns_pdf(db) -> None:
    appointment = make_appointment(db, status='confirmed', age=41, gender='Male',
                                   additional_info='Previous surgery in 2019. ' * 20)

    patient_copy = build_receipt(appointment, generated_at=datetime(2025, 12, 1, 9, 30))
    doctor_copy = build_receipt(appointment, for_doctor=True, generated_at=datetime(2025, 12, 1, 9, 30))

    assert patient_copy.startswith(b'%PDF')
    assert doctor_copy.startswith(b'%PDF')
    assert patient_copy != doctor_copy
