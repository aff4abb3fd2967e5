"""Holiday model definitions."""

import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, String
from clinic.database import Base


class Holiday(Base):
    """Represents a calendar day on which bookings are not accepted."""
    __tablename__ = "holidays"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    date = Column(Date, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String)
    scope = Column(String, nullable=False, default="all")  # all/eyecare/gynecology
    source = Column(String, nullable=False, default="manual")  # manual/national/doctor
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
