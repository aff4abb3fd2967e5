import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:8080"])

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

BOOKING_HORIZON_MONTHS = int(os.getenv("BOOKING_HORIZON_MONTHS", "3"))
HOLIDAY_LOOKUP_FAIL_OPEN = _get_bool(os.getenv("HOLIDAY_LOOKUP_FAIL_OPEN"), default=True)

RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
CLINIC_ADMIN_EMAIL = os.getenv("CLINIC_ADMIN_EMAIL", "")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "Eyefem Clinic <no-reply@resend.dev>")
CLINIC_PHONE = os.getenv("CLINIC_PHONE", "+91 98765 43210")
CLINIC_LOGO_URL = os.getenv("CLINIC_LOGO_URL", "")

CALENDARIFIC_API_KEY = os.getenv("CALENDARIFIC_API_KEY", "")
CALENDARIFIC_COUNTRY = os.getenv("CALENDARIFIC_COUNTRY", "IN")
CALENDARIFIC_TIMEOUT_SECONDS = float(os.getenv("CALENDARIFIC_TIMEOUT_SECONDS", "15"))


@dataclass(frozen=True)
class NotificationSettings:
    admin_email: str
    api_key: str
    from_address: str
    clinic_phone: str = ""
    logo_url: str = ""


def get_notification_settings() -> NotificationSettings:
    return NotificationSettings(
        admin_email=CLINIC_ADMIN_EMAIL,
        api_key=RESEND_API_KEY,
        from_address=EMAIL_FROM_ADDRESS,
        clinic_phone=CLINIC_PHONE,
        logo_url=CLINIC_LOGO_URL,
    )


def validate_runtime_config() -> None:
    if APP_ENV.lower() != "production":
        return
    if JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if not RESEND_API_KEY or not CLINIC_ADMIN_EMAIL:
        raise RuntimeError("RESEND_API_KEY and CLINIC_ADMIN_EMAIL must be set in production.")
