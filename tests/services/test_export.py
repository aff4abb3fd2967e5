import csv
import io
import json
from datetime import date, datetime

from clinic.models.appointment import Appointment
from clinic.services.export import (
    EXPORT_COLUMNS,
    appointments_to_csv,
    appointments_to_json,
    export_filename,
)
from factories import make_appointment


def test_export_filename() -> None:
    assert export_filename('eyecare', 'csv', date(2025, 12, 1)) == 'appointments-eyecare-2025-12-01.csv'
    assert export_filename(None, 'json', date(2025, 12, 1)) == 'appointments-all-2025-12-01.json'


def test_csv_export_has_header_and_rows(db) -> None:
    make_appointment(db, age=29, created_at=datetime(2025, 11, 30, 8, 0))
    make_appointment(db, first_name='Meera', additional_info='Follow-up, "urgent"')

    rows = list(csv.reader(io.StringIO(appointments_to_csv(
        db.query(Appointment).order_by(Appointment.first_name).all()
    ))))

    assert rows[0] == [header for _, header in EXPORT_COLUMNS]
    assert len(rows) == 3
    assert rows[1][1] == 'Asha'
    assert rows[1][5] == '29'
    assert rows[1][15] == '2025-11-30T08:00:00'
    assert rows[2][13] == 'Follow-up, "urgent"'
    assert rows[2][5] == ''


def test_json_export(db) -> None:
    appointment = make_appointment(db, status='confirmed')

    exported = json.loads(appointments_to_json([appointment]))

    assert exported[0]['id'] == appointment.id
    assert exported[0]['status'] == 'confirmed'
    assert exported[0]['date'] == '2025-12-10'
    assert exported[0]['age'] is None
    assert set(exported[0]) == {attribute for attribute, _ in EXPORT_COLUMNS}
