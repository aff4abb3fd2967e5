"""National holiday import from the Calendarific API.

Imported holidays apply to both clinics (scope "all", source "national").
Days already stored with the same date and name are skipped.
"""

import logging
from dataclasses import dataclass
from datetime import date

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic.booking.errors import BookingError, PersistenceError
from clinic.booking.specialties import ALL_SCOPE
from clinic.core import config
from clinic.models.holiday import Holiday

logger = logging.getLogger(__name__)

CALENDARIFIC_URL = 'https://calendarific.com/api/v2/holidays'
NATIONAL_SOURCE = 'national'

EXCLUDED_OBSERVANCES = (
    'Hanukkah',
    "Valentine's Day",
    'Lunar New Year',
    'March Equinox',
    'June Solstice',
    'September Equinox',
    'December Solstice',
)


class HolidayImportError(BookingError):
    pass


@dataclass
class ImportedHoliday:
    date: date
    name: str
    description: str | None = None


@dataclass
class HolidayImportResult:
    year: int
    fetched: int
    created: int


def fetch_national_holidays(year: int, client: httpx.Client | None = None) -> list[ImportedHoliday]:
    if not config.CALENDARIFIC_API_KEY:
        raise HolidayImportError('CALENDARIFIC_API_KEY is not configured.')

    params = {
        'api_key': config.CALENDARIFIC_API_KEY,
        'country': config.CALENDARIFIC_COUNTRY,
        'year': year,
    }
    owns_client = client is None
    client = client or httpx.Client(timeout=config.CALENDARIFIC_TIMEOUT_SECONDS)
    try:
        response = client.get(CALENDARIFIC_URL, params=params)
        response.raise_for_status()
        payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise HolidayImportError(f'Holiday API call failed: {exc}') from exc
    finally:
        if owns_client:
            client.close()

    holidays = (payload.get('response') or {}).get('holidays')
    if not isinstance(holidays, list):
        raise HolidayImportError('Invalid response format from holiday API.')

    imported: list[ImportedHoliday] = []
    for holiday in holidays:
        name = (holiday.get('name') or '').strip()
        iso_date = ((holiday.get('date') or {}).get('iso') or '')[:10]
        if not name or not iso_date:
            continue
        if any(excluded.lower() in name.lower() for excluded in EXCLUDED_OBSERVANCES):
            continue
        try:
            holiday_date = date.fromisoformat(iso_date)
        except ValueError:
            logger.warning('Skipping holiday %r with malformed date %r', name, iso_date)
            continue
        imported.append(
            ImportedHoliday(
                date=holiday_date,
                name=name,
                description=holiday.get('description') or None,
            )
        )

    logger.info('Received %d national holidays for %d', len(imported), year)
    return imported


def import_national_holidays(db: Session, year: int, client: httpx.Client | None = None) -> HolidayImportResult:
    holidays = fetch_national_holidays(year, client=client)

    try:
        existing = {
            (holiday_date, name)
            for holiday_date, name in db.query(Holiday.date, Holiday.name).filter(
                Holiday.source == NATIONAL_SOURCE,
            ).all()
        }

        created = 0
        for holiday in holidays:
            key = (holiday.date, holiday.name)
            if key in existing:
                continue
            db.add(
                Holiday(
                    date=holiday.date,
                    name=holiday.name,
                    description=holiday.description,
                    scope=ALL_SCOPE,
                    source=NATIONAL_SOURCE,
                )
            )
            existing.add(key)
            created += 1

        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError('Holidays could not be saved.') from exc

    logger.info('Imported %d new national holidays for %d', created, year)
    return HolidayImportResult(year=year, fetched=len(holidays), created=created)
