"""Create or update a clinic staff account.

Usage:
    python -m clinic.create_staff_user EMAIL [--role admin]

The password is read from the CLINIC_STAFF_PASSWORD environment variable or
prompted for.
"""
import argparse
import getpass
import os
import sys

from clinic.auth.passwords import hash_password
from clinic.database import Base, SessionLocal, engine
from clinic.models.user import User


def upsert_staff_user(db, email: str, password: str, role: str) -> User:
    normalized_email = email.strip().lower()
    user = db.query(User).filter(User.email == normalized_email).first()
    if user is None:
        user = User(email=normalized_email)
        db.add(user)
    user.hashed_password = hash_password(password)
    user.role = role
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create or update a clinic staff account.")
    parser.add_argument("email")
    parser.add_argument("--role", choices=["admin", "staff"], default="admin")
    args = parser.parse_args(argv)

    password = os.getenv("CLINIC_STAFF_PASSWORD") or getpass.getpass("Password: ")
    if len(password) < 8:
        print("Password must be at least 8 characters.", file=sys.stderr)
        sys.exit(1)

    Base.metadata.create_all(bind=engine, tables=[User.__table__])
    db = SessionLocal()
    try:
        user = upsert_staff_user(db, args.email, password, args.role)
    finally:
        db.close()
    print(f"Saved {user.role} account for {user.email}")


if __name__ == "__main__":
    main()
