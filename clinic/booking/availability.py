import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic.booking.errors import PersistenceError
from clinic.booking.specialties import ALL_SCOPE, Specialty
from clinic.core import config
from clinic.models.holiday import Holiday

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HolidayRecord:
    date: date
    reason: str
    scope: str = ALL_SCOPE
    source: str = 'manual'
    id: str | None = None

    @property
    def is_doctor_specific(self) -> bool:
        return self.scope != ALL_SCOPE

    def covers(self, specialty: Specialty | str) -> bool:
        return self.scope == ALL_SCOPE or self.scope == Specialty(specialty).value

    @classmethod
    def from_model(cls, holiday: Holiday) -> 'HolidayRecord':
        return cls(
            date=holiday.date,
            reason=holiday.name,
            scope=holiday.scope or ALL_SCOPE,
            source=holiday.source or 'manual',
            id=holiday.id,
        )


def _calendar_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


class HolidayResolver:
    """Answers whether a calendar day is bookable for a specialty.

    A holiday always blocks the whole day. When several holidays fall on the
    same day, a doctor-specific one is reported ahead of a clinic-wide one,
    and list order decides within each group.
    """

    def __init__(self, holidays: list[HolidayRecord]):
        self._holidays = list(holidays)

    def holiday_for(self, day: date | datetime, specialty: Specialty | str) -> HolidayRecord | None:
        target = _calendar_day(day)
        matches = [
            holiday for holiday in self._holidays
            if holiday.date == target and holiday.covers(specialty)
        ]
        if not matches:
            return None

        for holiday in matches:
            if holiday.is_doctor_specific:
                return holiday
        return matches[0]

    def is_blocked(self, day: date | datetime, specialty: Specialty | str) -> bool:
        return self.holiday_for(day, specialty) is not None

    def reason_for(self, day: date | datetime, specialty: Specialty | str) -> str:
        holiday = self.holiday_for(day, specialty)
        return holiday.reason if holiday else ''

    def disabled_dates(self, specialty: Specialty | str, start: date, end: date) -> list[HolidayRecord]:
        blocked: list[HolidayRecord] = []
        current = start
        while current <= end:
            holiday = self.holiday_for(current, specialty)
            if holiday:
                blocked.append(holiday)
            current += timedelta(days=1)
        return blocked


def load_holidays(db: Session, start: date | None = None, end: date | None = None) -> list[HolidayRecord]:
    try:
        query = db.query(Holiday)
        if start is not None:
            query = query.filter(Holiday.date >= start)
        if end is not None:
            query = query.filter(Holiday.date <= end)
        holidays = query.order_by(Holiday.date.asc(), Holiday.created_at.asc()).all()
    except SQLAlchemyError as exc:
        db.rollback()
        if not config.HOLIDAY_LOOKUP_FAIL_OPEN:
            raise PersistenceError('Holiday calendar is unavailable.') from exc
        logger.warning('Holiday lookup failed; treating every date as open.', exc_info=True)
        return []

    return [HolidayRecord.from_model(holiday) for holiday in holidays]


def build_resolver(db: Session, start: date | None = None, end: date | None = None) -> HolidayResolver:
    return HolidayResolver(load_holidays(db, start, end))
