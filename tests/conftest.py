import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')

from clinic.core.config import NotificationSettings  # noqa: E402
from clinic.database import Base  # noqa: E402
from clinic.models.appointment import Appointment  # noqa: E402
from clinic.models.holiday import Holiday  # noqa: E402
from clinic.models.user import User  # noqa: E402
from clinic.notifications.dispatcher import NotificationDispatcher  # noqa: E402
from factories import CLINIC_EMAIL, FakeEmailSender  # noqa: E402


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(f'sqlite:///{tmp_path / "clinic.db"}')
    tables = [User.__table__, Holiday.__table__, Appointment.__table__]
    Base.metadata.create_all(bind=engine, tables=tables)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine, tables=tables)
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notification_settings() -> NotificationSettings:
    return NotificationSettings(
        admin_email=CLINIC_EMAIL,
        api_key='re_test',
        from_address='Eyefem Clinic <no-reply@eyefem.example>',
        clinic_phone='+91 98765 43210',
    )


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def dispatcher(notification_settings, email_sender) -> NotificationDispatcher:
    return NotificationDispatcher(notification_settings, email_sender=email_sender)
