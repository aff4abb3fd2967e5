"""
Appointment receipt PDF.

One A4 page with patient and appointment details. The doctor copy adds a
notes area and a reference-only banner; the patient copy ends with arrival
instructions.
"""

import io
import logging
from datetime import datetime

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from clinic.booking.specialties import get_profile

logger = logging.getLogger(__name__)

LEFT_MARGIN = 50
LINE_HEIGHT = 20


def receipt_reference(appointment) -> str:
    prefix = str(appointment.specialty)[:3].upper()
    return f"{prefix}-{str(appointment.id).split('-')[0].upper()}"


def receipt_filename(appointment, for_doctor: bool = False) -> str:
    kind = "doctor_copy" if for_doctor else "patient_copy"
    last_name = "".join(ch for ch in (appointment.last_name or "patient") if ch.isalnum()) or "patient"
    return f"{kind}_{last_name}_{receipt_reference(appointment)}.pdf"


def _wrap(text: str, pdf: canvas.Canvas, font: str, size: int, max_width: float) -> list[str]:
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}".strip()
        if pdf.stringWidth(candidate, font, size) <= max_width:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def build_receipt(appointment, for_doctor: bool = False, generated_at: datetime | None = None) -> bytes:
    """Render the receipt and return the PDF bytes."""
    profile = get_profile(appointment.specialty)
    header_color = colors.HexColor(profile.header_color)
    generated_at = generated_at or datetime.now()

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    pdf.setFillColor(header_color, alpha=0.2)
    pdf.rect(0, height - 140, width, 70, stroke=0, fill=1)

    title = "DOCTOR COPY: Patient Appointment Details" if for_doctor else "Appointment Confirmation"
    pdf.setFillColor(header_color)
    pdf.setFont("Helvetica-Bold", 18)
    pdf.drawString(LEFT_MARGIN, height - 100, title)
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawString(LEFT_MARGIN, height - 130, f"Eyefem {profile.display_name} Clinic")

    pdf.setFillColor(colors.black)
    pdf.setFont("Helvetica", 10)
    pdf.drawString(LEFT_MARGIN, height - 160, f"Reference: {receipt_reference(appointment)}")
    pdf.drawString(LEFT_MARGIN, height - 180, f"Generated: {generated_at:%d %b %Y %H:%M}")

    right_column = width / 2 + 20
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawString(LEFT_MARGIN, height - 220, "Patient Information")
    pdf.drawString(right_column, height - 220, "Appointment Details")

    patient_lines = [
        f"Name: {appointment.patient_name}",
        f"Email: {appointment.email}",
        f"Phone: {appointment.phone}",
    ]
    if appointment.age:
        patient_lines.append(f"Age: {appointment.age}")
    if appointment.gender:
        patient_lines.append(f"Gender: {appointment.gender}")

    appointment_lines = [
        f"Date: {appointment.date}",
        f"Time: {appointment.time}",
        f"Department: {profile.display_name}",
        f"Doctor: {profile.doctor_title}",
        f"Clinic: {appointment.clinic}",
        f"Status: {(appointment.status or 'pending').capitalize()}",
    ]

    pdf.setFont("Helvetica", 10)
    for index, line in enumerate(patient_lines):
        pdf.drawString(LEFT_MARGIN, height - 250 - index * LINE_HEIGHT, line)
    for index, line in enumerate(appointment_lines):
        pdf.drawString(right_column, height - 250 - index * LINE_HEIGHT, line)

    text_width = width - 2 * LEFT_MARGIN
    cursor = height - 390
    pdf.setFont("Helvetica-Bold", 12)
    pdf.drawString(LEFT_MARGIN, cursor, "Reason for visit:")
    pdf.setFont("Helvetica", 10)
    for line in _wrap(appointment.reason or "", pdf, "Helvetica", 10, text_width):
        cursor -= 15
        pdf.drawString(LEFT_MARGIN, cursor, line)

    if appointment.additional_info:
        cursor -= 30
        pdf.setFont("Helvetica-Bold", 12)
        pdf.drawString(LEFT_MARGIN, cursor, "Additional Information:")
        pdf.setFont("Helvetica", 10)
        for line in _wrap(appointment.additional_info, pdf, "Helvetica", 10, text_width)[:6]:
            cursor -= 15
            pdf.drawString(LEFT_MARGIN, cursor, line)

    if for_doctor:
        notes_top = min(cursor - 30, height - 500)
        pdf.setFont("Helvetica-Bold", 12)
        pdf.drawString(LEFT_MARGIN, notes_top, "Doctor Notes:")
        pdf.setStrokeColor(colors.Color(0.7, 0.7, 0.7))
        pdf.setFillColor(colors.Color(0.98, 0.98, 0.98))
        pdf.rect(LEFT_MARGIN, notes_top - 150, text_width, 130, stroke=1, fill=1)

        pdf.setFillColor(colors.Color(0.8, 0, 0))
        pdf.setFont("Helvetica-Bold", 14)
        pdf.drawCentredString(width / 2, 120, "FOR DOCTOR'S REFERENCE ONLY")
    else:
        pdf.setFont("Helvetica", 10)
        pdf.drawCentredString(
            width / 2,
            100,
            "Thank you for choosing Eyefem Clinic. Please arrive 10-15 minutes before your appointment.",
        )
        pdf.drawCentredString(
            width / 2,
            80,
            "If you need to reschedule, please call us at least 24 hours in advance.",
        )

    pdf.showPage()
    pdf.save()

    data = buffer.getvalue()
    logger.info("Generated %s receipt for appointment %s (%d bytes)",
                "doctor" if for_doctor else "patient", appointment.id, len(data))
    return data
