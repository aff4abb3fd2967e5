import datetime as dt

from pydantic import BaseModel, Field, field_validator

from clinic.booking.specialties import Specialty, get_profile

MAX_ADDITIONAL_INFO_LENGTH = 1000


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


class AppointmentRequest(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: str
    age: int | None = Field(default=None, ge=0, le=120)
    gender: str | None = None
    specialty: Specialty
    date: dt.date | None = None
    time: str | None = None
    reason: str | None = None
    additional_info: str | None = None

    class Config:
        extra = 'forbid'

    @field_validator('first_name', 'last_name', 'phone')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('This field is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError('Email is required.')
        if '@' not in normalized or normalized.startswith('@') or normalized.endswith('@'):
            raise ValueError('Email address is invalid.')
        return normalized

    @field_validator('gender', 'time', 'reason')
    @classmethod
    def validate_optional_text(cls, value: str | None) -> str | None:
        return _blank_to_none(value)

    @field_validator('additional_info')
    @classmethod
    def validate_additional_info(cls, value: str | None) -> str | None:
        normalized = _blank_to_none(value)
        if normalized and len(normalized) > MAX_ADDITIONAL_INFO_LENGTH:
            raise ValueError(f'Additional information must be {MAX_ADDITIONAL_INFO_LENGTH} characters or fewer.')
        return normalized

    @property
    def doctor(self) -> str:
        return get_profile(self.specialty).doctor

    @property
    def clinic(self) -> str:
        return get_profile(self.specialty).clinic
