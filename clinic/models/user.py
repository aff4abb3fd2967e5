"""User model definitions."""

from sqlalchemy import Column, Integer, String
from clinic.database import Base


class User(Base):
    """Represents a clinic staff account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    hashed_password = Column(String)
    role = Column(String)  # admin/staff
