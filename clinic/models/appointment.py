"""Appointment model definitions."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String
from clinic.database import Base


class Appointment(Base):
    """Represents a booking request and its lifecycle status."""
    __tablename__ = "appointments"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    age = Column(Integer)
    gender = Column(String)
    specialty = Column(String, nullable=False)
    doctor = Column(String, nullable=False)
    clinic = Column(String, nullable=False)
    date = Column(String, nullable=False)  # ISO YYYY-MM-DD
    time = Column(String, nullable=False)  # slot label
    reason = Column(String, nullable=False)
    additional_info = Column(String)
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    @property
    def patient_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
