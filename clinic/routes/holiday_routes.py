import datetime as dt
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic.auth.dependencies import require_staff
from clinic.booking.errors import BookingError
from clinic.booking.specialties import ALL_SCOPE, Specialty, is_valid_scope
from clinic.models.holiday import Holiday
from clinic.models.user import User
from clinic.routes.common import DATABASE_UNAVAILABLE, ensure_database_ready, get_db, http_error_for
from clinic.services.holiday_import import HolidayImportError, import_national_holidays

router = APIRouter(tags=['holidays'])

logger = logging.getLogger(__name__)

MANUAL_SOURCE = 'manual'
DOCTOR_SOURCE = 'doctor'


class CreateHolidayRequest(BaseModel):
    date: dt.date
    name: str
    description: str | None = None
    scope: str = ALL_SCOPE

    class Config:
        extra = 'forbid'

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('A reason is required for the holiday.')
        return normalized

    @field_validator('description')
    @classmethod
    def validate_description(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator('scope')
    @classmethod
    def validate_scope(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not is_valid_scope(normalized):
            raise ValueError('Scope must be all, eyecare or gynecology.')
        return normalized


class HolidayResponse(BaseModel):
    id: str
    date: dt.date
    name: str
    description: str | None = None
    scope: str
    source: str

    class Config:
        from_attributes = True


class ImportNationalHolidaysRequest(BaseModel):
    year: int | None = None


class ImportNationalHolidaysResponse(BaseModel):
    year: int
    fetched: int
    created: int


@router.get('', response_model=list[HolidayResponse])
def list_holidays(
    specialty: Specialty | None = Query(default=None),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        query = db.query(Holiday)
        if specialty:
            query = query.filter(or_(Holiday.scope == ALL_SCOPE, Holiday.scope == specialty.value))
        return query.order_by(Holiday.date.asc()).all()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc


@router.post('', response_model=HolidayResponse, status_code=status.HTTP_201_CREATED)
def create_holiday(
    data: CreateHolidayRequest,
    db: Session = Depends(get_db),
    _staff: User = Depends(require_staff),
):
    ensure_database_ready()

    try:
        duplicate = db.query(Holiday).filter(
            Holiday.date == data.date,
            Holiday.scope == data.scope,
        ).first()
        if duplicate:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail='A holiday already exists for this date.',
            )

        holiday = Holiday(
            date=data.date,
            name=data.name,
            description=data.description,
            scope=data.scope,
            source=MANUAL_SOURCE if data.scope == ALL_SCOPE else DOCTOR_SOURCE,
        )
        db.add(holiday)
        db.commit()
        db.refresh(holiday)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc

    logger.info('Added %s holiday on %s for %s', holiday.source, holiday.date, holiday.scope)
    return holiday


@router.delete('/{holiday_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_holiday(
    holiday_id: str,
    db: Session = Depends(get_db),
    _staff: User = Depends(require_staff),
):
    ensure_database_ready()

    try:
        holiday = db.query(Holiday).filter(Holiday.id == holiday_id).first()
        if not holiday:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='Holiday not found.',
            )

        db.delete(holiday)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc


@router.post('/import-national', response_model=ImportNationalHolidaysResponse)
def import_holidays(
    data: ImportNationalHolidaysRequest,
    db: Session = Depends(get_db),
    _staff: User = Depends(require_staff),
):
    ensure_database_ready()

    year = data.year or dt.date.today().year
    try:
        result = import_national_holidays(db, year)
    except HolidayImportError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    except BookingError as exc:
        raise http_error_for(exc) from exc

    return ImportNationalHolidaysResponse(year=result.year, fetched=result.fetched, created=result.created)
