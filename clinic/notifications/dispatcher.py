import base64
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import resend

from clinic.booking.errors import DispatchError
from clinic.core.config import NotificationSettings
from clinic.notifications import templates
from clinic.notifications.receipt import build_receipt, receipt_filename

logger = logging.getLogger(__name__)

EmailSender = Callable[[dict], dict]
ReceiptBuilder = Callable[..., bytes]


class NotificationMode(str, Enum):
    REQUESTED = 'requested'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    REJECTED = 'rejected'


@dataclass
class DeliveryResult:
    recipient: str
    subject: str
    success: bool
    message_id: str | None = None
    error: str | None = None
    attachments: list[str] = field(default_factory=list)


@dataclass
class DispatchResult:
    mode: NotificationMode
    deliveries: list[DeliveryResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.deliveries) and all(delivery.success for delivery in self.deliveries)

    @property
    def errors(self) -> list[str]:
        return [
            f'{delivery.recipient}: {delivery.error}'
            for delivery in self.deliveries
            if not delivery.success
        ]

    @property
    def attachment_count(self) -> int:
        return sum(len(delivery.attachments) for delivery in self.deliveries)


def _attachment(filename: str, content: bytes) -> dict:
    return {'filename': filename, 'content': base64.b64encode(content).decode('ascii')}


class NotificationDispatcher:
    """Sends patient and clinic emails for an appointment status.

    `send` never raises: every failure is logged and returned as a failed
    delivery so the caller's committed status change stands.
    """

    def __init__(
        self,
        settings: NotificationSettings,
        email_sender: EmailSender | None = None,
        receipt_builder: ReceiptBuilder = build_receipt,
    ):
        self.settings = settings
        self._email_sender = email_sender or self._send_via_resend
        self._receipt_builder = receipt_builder

    def _send_via_resend(self, params: dict) -> dict:
        if not self.settings.api_key:
            raise DispatchError('Email service not configured: RESEND_API_KEY is missing.')
        resend.api_key = self.settings.api_key
        return resend.Emails.send(params)

    def send(self, appointment, mode: NotificationMode | str) -> DispatchResult:
        mode = NotificationMode(mode)
        result = DispatchResult(mode=mode)

        try:
            messages = self._build_messages(appointment, mode)
        except Exception as exc:
            logger.exception('Could not prepare %s notification for appointment %s', mode.value, appointment.id)
            result.deliveries.append(
                DeliveryResult(recipient=appointment.email, subject='', success=False, error=str(exc))
            )
            return result

        for params in messages:
            result.deliveries.append(self._deliver(params))

        if result.success:
            logger.info('Sent %s notification for appointment %s', mode.value, appointment.id)
        else:
            logger.warning(
                'Notification %s for appointment %s needs manual follow-up: %s',
                mode.value,
                appointment.id,
                '; '.join(result.errors),
            )
        return result

    def _deliver(self, params: dict) -> DeliveryResult:
        recipient = ', '.join(params['to']) or 'clinic'
        attachments = [attachment['filename'] for attachment in params.get('attachments', [])]
        try:
            if not params['to']:
                raise DispatchError('Clinic admin email is not configured.')
            response = self._email_sender(params)
        except Exception as exc:
            logger.error('Email send error to %s: %s', recipient, exc)
            return DeliveryResult(
                recipient=recipient,
                subject=params['subject'],
                success=False,
                error=str(exc),
                attachments=attachments,
            )

        message_id = response.get('id') if isinstance(response, dict) else None
        return DeliveryResult(
            recipient=recipient,
            subject=params['subject'],
            success=True,
            message_id=message_id,
            attachments=attachments,
        )

    def _message(self, to: str, subject: str, html: str, bcc_clinic: bool = False,
                 attachments: list[dict] | None = None) -> dict:
        params = {
            'from': self.settings.from_address,
            'to': [to],
            'subject': subject,
            'html': html,
        }
        if bcc_clinic and self.settings.admin_email:
            params['bcc'] = [self.settings.admin_email]
        if attachments:
            params['attachments'] = attachments
        return params

    def _clinic_message(self, subject: str, html: str, attachments: list[dict] | None = None) -> dict:
        params = self._message(self.settings.admin_email, subject, html, attachments=attachments)
        if not self.settings.admin_email:
            params['to'] = []
        return params

    def _build_messages(self, appointment, mode: NotificationMode) -> list[dict]:
        logo_url = self.settings.logo_url
        phone = self.settings.clinic_phone

        if mode == NotificationMode.REQUESTED:
            patient_subject, patient_html = templates.request_received_patient(appointment, logo_url, phone)
            clinic_subject, clinic_html = templates.request_received_clinic(appointment, logo_url)
            return [
                self._message(appointment.email, patient_subject, patient_html),
                self._clinic_message(clinic_subject, clinic_html),
            ]

        if mode == NotificationMode.CONFIRMED:
            patient_copy = _attachment(
                receipt_filename(appointment),
                self._receipt_builder(appointment, for_doctor=False),
            )
            doctor_copy = _attachment(
                receipt_filename(appointment, for_doctor=True),
                self._receipt_builder(appointment, for_doctor=True),
            )
            patient_subject, patient_html = templates.confirmed_patient(appointment, logo_url, phone)
            clinic_subject, clinic_html = templates.confirmed_clinic(appointment, logo_url)
            return [
                self._message(appointment.email, patient_subject, patient_html, bcc_clinic=True,
                              attachments=[patient_copy]),
                self._clinic_message(clinic_subject, clinic_html, attachments=[doctor_copy, patient_copy]),
            ]

        if mode == NotificationMode.REJECTED:
            subject, html = templates.rejected_patient(appointment, logo_url, phone)
        else:
            subject, html = templates.cancelled_patient(appointment, logo_url, phone)
        return [self._message(appointment.email, subject, html, bcc_clinic=True)]
