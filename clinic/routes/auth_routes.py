from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from clinic.auth import jwt_handler
from clinic.auth.dependencies import get_current_user
from clinic.auth.passwords import verify_password
from clinic.core import config
from clinic.models.user import User
from clinic.routes.common import get_db

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    role: str


class UserResponse(BaseModel):
    id: int
    email: str
    role: str | None = None

    class Config:
        from_attributes = True


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()
    if user is None or not verify_password(data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    role = user.role or "staff"
    token = jwt_handler.create_access_token(subject=user.email, role=role)
    return TokenResponse(
        access_token=token,
        expires_in=config.JWT_EXPIRES_MINUTES * 60,
        role=role,
    )


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
