"""CSV and JSON exports of appointment lists for clinic staff."""

import csv
import io
import json
from datetime import date

from clinic.models.appointment import Appointment

EXPORT_COLUMNS = [
    ('id', 'ID'),
    ('first_name', 'First Name'),
    ('last_name', 'Last Name'),
    ('email', 'Email'),
    ('phone', 'Phone'),
    ('age', 'Age'),
    ('gender', 'Gender'),
    ('specialty', 'Specialty'),
    ('doctor', 'Doctor'),
    ('clinic', 'Clinic'),
    ('date', 'Date'),
    ('time', 'Time'),
    ('reason', 'Reason'),
    ('additional_info', 'Additional Info'),
    ('status', 'Status'),
    ('created_at', 'Created At'),
]


def appointment_to_dict(appointment: Appointment) -> dict:
    row = {}
    for attribute, _ in EXPORT_COLUMNS:
        value = getattr(appointment, attribute)
        if hasattr(value, 'isoformat'):
            value = value.isoformat()
        row[attribute] = value
    return row


def export_filename(specialty: str | None, extension: str, today: date) -> str:
    return f"appointments-{specialty or 'all'}-{today.isoformat()}.{extension}"


def appointments_to_csv(appointments: list[Appointment]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC)
    writer.writerow([header for _, header in EXPORT_COLUMNS])
    for appointment in appointments:
        row = appointment_to_dict(appointment)
        writer.writerow(['' if row[attribute] is None else row[attribute] for attribute, _ in EXPORT_COLUMNS])
    return buffer.getvalue()


def appointments_to_json(appointments: list[Appointment]) -> str:
    return json.dumps([appointment_to_dict(appointment) for appointment in appointments], indent=2)
