"""HTML email bodies for appointment notifications."""

from datetime import datetime
from html import escape

from clinic.booking.specialties import SpecialtyProfile, get_profile


def _detail_rows(rows: list[tuple[str, object]]) -> str:
    return ''.join(
        f'<p style="margin: 5px 0;"><strong>{label}:</strong> {escape(str(value))}</p>'
        for label, value in rows
        if value not in (None, '')
    )


def _detail_box(profile: SpecialtyProfile, rows: list[tuple[str, object]]) -> str:
    return (
        f'<div style="background-color: {profile.background_color}; padding: 15px; border-radius: 5px; '
        f'margin: 20px 0; border-left: 4px solid {profile.header_color};">'
        f'{_detail_rows(rows)}</div>'
    )


def _layout(profile: SpecialtyProfile, logo_url: str, heading: str, body: str) -> str:
    logo = ''
    if logo_url:
        logo = (
            '<div style="text-align: center; margin-bottom: 20px;">'
            f'<img src="{escape(logo_url)}" alt="Eyefem Clinic Logo" style="max-width: 200px;"></div>'
        )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">'
        f'{logo}'
        f'<div style="text-align: center; margin-bottom: 20px; background-color: {profile.background_color}; '
        'padding: 20px; border-radius: 5px;">'
        f'<h1 style="color: {profile.header_color}; margin: 0;">Eyefem {profile.display_name} Clinic</h1></div>'
        f'<h2 style="color: {profile.header_color}; text-align: center;">{heading}</h2>'
        f'{body}'
        '<div style="margin-top: 40px; padding-top: 20px; border-top: 1px solid #eaeaea; text-align: center;">'
        f'<p style="color: #666; font-size: 12px;">&copy; {datetime.now().year} Eyefem Clinic. All rights reserved.</p>'
        '</div></div>'
    )


def _signature() -> str:
    return '<p style="margin-top: 30px;">Best regards,<br>The Eyefem Clinic Team</p>'


def _contact_line(clinic_phone: str, prefix: str) -> str:
    if not clinic_phone:
        return ''
    return f'<p>{prefix} {escape(clinic_phone)}.</p>'


def request_received_patient(appointment, logo_url: str = '', clinic_phone: str = '') -> tuple[str, str]:
    profile = get_profile(appointment.specialty)
    name = escape(appointment.patient_name)
    body = (
        f'<p>Dear {name},</p>'
        f'<p>Thank you for requesting an appointment with <strong>{profile.doctor_title}</strong>. '
        'We have received your request and will contact you shortly to confirm it.</p>'
        + _detail_box(profile, [
            ('Date', appointment.date),
            ('Time', appointment.time),
            ('Department', profile.display_name),
            ('Reason', appointment.reason),
        ])
        + _contact_line(clinic_phone, 'If you have any questions, please contact us at')
        + _signature()
    )
    subject = f'Appointment Request Received - {appointment.patient_name}'
    return subject, _layout(profile, logo_url, 'Appointment Request Received', body)


def request_received_clinic(appointment, logo_url: str = '') -> tuple[str, str]:
    profile = get_profile(appointment.specialty)
    body = (
        '<p>A new appointment request is waiting for review:</p>'
        + _detail_box(profile, [
            ('Patient', appointment.patient_name),
            ('Age', appointment.age),
            ('Gender', appointment.gender),
            ('Date', appointment.date),
            ('Time', appointment.time),
            ('Department', profile.display_name),
            ('Reason', appointment.reason),
            ('Additional Information', appointment.additional_info),
            ('Contact', f'{appointment.email} / {appointment.phone}'),
        ])
    )
    subject = f'New Appointment Request - {appointment.patient_name}'
    return subject, _layout(profile, logo_url, 'New Appointment Request', body)


def confirmed_patient(appointment, logo_url: str = '', clinic_phone: str = '') -> tuple[str, str]:
    profile = get_profile(appointment.specialty)
    name = escape(appointment.patient_name)
    body = (
        f'<p>Dear {name},</p>'
        f'<p>Your appointment with <strong>{profile.doctor_title}</strong> has been confirmed.</p>'
        + _detail_box(profile, [
            ('Date', appointment.date),
            ('Time', appointment.time),
            ('Department', profile.display_name),
            ('Location', appointment.clinic),
            ('Reason', appointment.reason),
        ])
        + '<p>Please find your appointment receipt attached to this email. '
        'We recommend arriving 10-15 minutes before your scheduled appointment time.</p>'
        + _contact_line(clinic_phone, 'If you need to reschedule or have any questions, please contact us at')
        + _signature()
    )
    subject = f'Your Appointment Has Been Confirmed - {appointment.patient_name}'
    return subject, _layout(profile, logo_url, 'Your Appointment Has Been Confirmed', body)


def confirmed_clinic(appointment, logo_url: str = '') -> tuple[str, str]:
    profile = get_profile(appointment.specialty)
    body = (
        '<p>A patient appointment has been confirmed:</p>'
        + _detail_box(profile, [
            ('Patient', appointment.patient_name),
            ('Age', appointment.age),
            ('Gender', appointment.gender),
            ('Date', appointment.date),
            ('Time', appointment.time),
            ('Department', profile.display_name),
            ('Reason', appointment.reason),
            ('Contact', f'{appointment.email} / {appointment.phone}'),
        ])
        + "<p>Both the patient's receipt and your detailed copy are attached to this email.</p>"
    )
    subject = f'Appointment Confirmed - {appointment.patient_name}'
    return subject, _layout(profile, logo_url, 'Appointment Confirmed - Patient Receipt Attached', body)


def rejected_patient(appointment, logo_url: str = '', clinic_phone: str = '') -> tuple[str, str]:
    profile = get_profile(appointment.specialty)
    name = escape(appointment.patient_name)
    body = (
        f'<p>Dear {name},</p>'
        f'<p>Thank you for your interest in booking an appointment with {profile.doctor_title}. '
        'We regret to inform you that we are unable to accommodate your appointment request '
        'for the following time slot:</p>'
        + _detail_box(profile, [
            ('Date', appointment.date),
            ('Time', appointment.time),
            ('Department', profile.display_name),
        ])
        + '<p>We encourage you to try booking a different time slot or date.</p>'
        + _contact_line(clinic_phone, 'If you need assistance with rebooking, please contact us at')
        + _signature()
    )
    return 'Appointment Request - Unable to Accommodate', _layout(profile, logo_url, 'Appointment Request Update', body)


def cancelled_patient(appointment, logo_url: str = '', clinic_phone: str = '') -> tuple[str, str]:
    profile = get_profile(appointment.specialty)
    name = escape(appointment.patient_name)
    body = (
        f'<p>Dear {name},</p>'
        '<p>We regret to inform you that your appointment scheduled for:</p>'
        + _detail_box(profile, [
            ('Date', appointment.date),
            ('Time', appointment.time),
            ('Department', profile.display_name),
        ])
        + '<p>has been cancelled. We sincerely apologize for any inconvenience and encourage you '
        'to book a new appointment for another available date.</p>'
        + _contact_line(clinic_phone, 'You can also reach us at')
        + _signature()
    )
    return 'Appointment Cancelled', _layout(profile, logo_url, 'Your Appointment Has Been Cancelled', body)
