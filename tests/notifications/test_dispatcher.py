import base64
from dataclasses import replace

import pytest

from clinic.notifications.dispatcher import NotificationDispatcher, NotificationMode
from factories import CLINIC_EMAIL, FakeEmailSender, make_appointment


def test_requested_notifies_patient_and_clinic(db, dispatcher, email_sender) -> None:
    appointment = make_appointment(db)

    result = dispatcher.send(appointment, 'requested')

    assert result.mode == NotificationMode.REQUESTED
    assert result.success is True
    assert result.attachment_count == 0
    assert [delivery.message_id for delivery in result.deliveries] == ['email-1', 'email-2']
    patient_email, clinic_email = email_sender.sent
    assert patient_email['subject'] == 'Appointment Request Received - Asha Verma'
    assert patient_email['from'] == 'Eyefem Clinic <no-reply@eyefem.example>'
    assert 'bcc' not in patient_email
    assert clinic_email['to'] == [CLINIC_EMAIL]
    assert clinic_email['subject'] == 'New Appointment Request - Asha Verma'


def test_confirmed_attaches_patient_and_doctor_copies(db, dispatcher, email_sender) -> None:
    appointment = make_appointment(db, status='confirmed')

    result = dispatcher.send(appointment, NotificationMode.CONFIRMED)

    assert result.success is True
    assert result.attachment_count == 3
    patient_email, clinic_email = email_sender.sent
    assert patient_email['bcc'] == [CLINIC_EMAIL]
    assert len(patient_email['attachments']) == 1
    assert [attachment['filename'].split('_')[0] for attachment in clinic_email['attachments']] == [
        'doctor',
        'patient',
    ]
    pdf_bytes = base64.b64decode(patient_email['attachments'][0]['content'])
    assert pdf_bytes.startswith(b'%PDF')


@pytest.mark.parametrize(
    ('mode', 'subject'),
    [
        (NotificationMode.REJECTED, 'Appointment Request - Unable to Accommodate'),
        (NotificationMode.CANCELLED, 'Appointment Cancelled'),
    ],
)
def test_rejected_and_cancelled_only_email_the_patient(db, dispatcher, email_sender, mode, subject) -> None:
    appointment = make_appointment(db)

    result = dispatcher.send(appointment, mode)

    assert result.success is True
    assert len(email_sender.sent) == 1
    assert email_sender.sent[0]['subject'] == subject
    assert email_sender.sent[0]['to'] == ['asha@example.com']
    assert email_sender.sent[0]['bcc'] == [CLINIC_EMAIL]


def test_patient_content_is_escaped(db, dispatcher, email_sender) -> None:
    appointment = make_appointment(db, first_name='<b>Asha</b>', reason='Check <script>')

    dispatcher.send(appointment, NotificationMode.REQUESTED)

    html = email_sender.sent[0]['html']
    assert '<script>' not in html
    assert '&lt;b&gt;Asha&lt;/b&gt;' in html


def test_failed_delivery_is_reported_not_raised(db, notification_settings) -> None:
    sender = FakeEmailSender(fail_for={CLINIC_EMAIL})
    dispatcher = NotificationDispatcher(notification_settings, email_sender=sender)
    appointment = make_appointment(db)

    result = dispatcher.send(appointment, NotificationMode.REQUESTED)

    assert result.success is False
    assert len(sender.sent) == 1
    assert result.errors == [f'{CLINIC_EMAIL}: Resend rejected the message']


def test_missing_admin_email_only_fails_clinic_delivery(db, notification_settings, email_sender) -> None:
    settings = replace(notification_settings, admin_email='')
    dispatcher = NotificationDispatcher(settings, email_sender=email_sender)
    appointment = make_appointment(db)

    result = dispatcher.send(appointment, NotificationMode.REQUESTED)

    assert result.success is False
    assert [params['to'] for params in email_sender.sent] == [['asha@example.com']]
    assert result.errors == ['clinic: Clinic admin email is not configured.']


def test_receipt_failure_is_reported(db, notification_settings, email_sender) -> None:
    def broken_receipt(appointment, for_doctor=False):
        raise RuntimeError('font missing')

    dispatcher = NotificationDispatcher(notification_settings, email_sender=email_sender,
                                        receipt_builder=broken_receipt)
    appointment = make_appointment(db, status='confirmed')

    result = dispatcher.send(appointment, NotificationMode.CONFIRMED)

    assert result.success is False
    assert result.errors == ['asha@example.com: font missing']
    assert email_sender.sent == []


def test_missing_resend_key_fails_every_delivery(db, notification_settings) -> None:
    dispatcher = NotificationDispatcher(replace(notification_settings, api_key=''))
    appointment = make_appointment(db)

    result = dispatcher.send(appointment, NotificationMode.REQUESTED)

    assert result.success is False
    assert len(result.errors) == 2
    assert all('RESEND_API_KEY' in error for error in result.errors)
