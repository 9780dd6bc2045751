from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from metabolic_health.schemas.base import CamelModel

PASSWORD_MIN_LENGTH = 6


def _normalise_email(value: str) -> str:
    return value.strip().lower()


class Preferences(CamelModel):
    food_allergies: Optional[List[str]] = None
    exercise_level: Optional[str] = None
    energy_levels: Optional[str] = None


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    condition: Optional[str] = Field(default=None, max_length=200)
    preferences: Optional[Preferences] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=128)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalise_email(v)


class UserPublic(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    condition: Optional[str] = None


class UserRecord(UserPublic):
    """Stored user, including the password hash. Never returned to clients."""

    password_hash: str
    preferences: Optional[Preferences] = None
    created_at: Optional[datetime] = None

    def public(self) -> UserPublic:
        return UserPublic(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            condition=self.condition,
        )


class AuthSession(CamelModel):
    token: str
    user: UserPublic


class AuthResponse(AuthSession):
    message: str


class VerifyResponse(CamelModel):
    user: UserPublic
