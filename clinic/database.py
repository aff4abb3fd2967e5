import os
from dotenv import load_dotenv
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker


load_dotenv()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./clinic.db")

engine = create_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_holiday_schema_checked = False
_appointment_schema_checked = False


def ensure_holiday_schema() -> None:
    global _holiday_schema_checked

    if _holiday_schema_checked:
        return

    with _schema_lock:
        if _holiday_schema_checked:
            return

        inspector = inspect(engine)

        if 'holidays' not in inspector.get_table_names():
            _holiday_schema_checked = True
            return

        with engine.begin() as connection:
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_holidays_date_scope ON holidays(date, scope)')
            )

        _holiday_schema_checked = True


def ensure_appointment_schema() -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked:
        return

    with _schema_lock:
        if _appointment_schema_checked:
            return

        inspector = inspect(engine)

        if 'appointments' not in inspector.get_table_names():
            _appointment_schema_checked = True
            return

        with engine.begin() as connection:
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_specialty_status ON appointments(specialty, status)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_specialty_date ON appointments(specialty, date)')
            )

        _appointment_schema_checked = True
