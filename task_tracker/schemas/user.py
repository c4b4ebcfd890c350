from datetime import datetime

from pydantic import EmailStr, Field, field_validator
from task_tracker.schemas.common import CamelModel
from task_tracker.utils.sanitization import clean_text, is_blank, normalize_email


def _blank_to_none(v):
    return None if is_blank(v) else v


class RegisterRequest(CamelModel):
    name: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    password: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def sanitize_name(cls, v):
        return _blank_to_none(clean_text(v))

    @field_validator("email", mode="before")
    @classmethod
    def sanitize_email(cls, v):
        return _blank_to_none(normalize_email(v))

    @field_validator("password", mode="before")
    @classmethod
    def blank_password(cls, v):
        return _blank_to_none(v)


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def sanitize_email(cls, v):
        return _blank_to_none(normalize_email(v))

    @field_validator("password", mode="before")
    @classmethod
    def blank_password(cls, v):
        return _blank_to_none(v)


class RefreshRequest(CamelModel):
    refresh_token: str | None = None


class ProfileUpdate(CamelModel):
    name: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    password: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def sanitize_name(cls, v):
        return clean_text(v)

    @field_validator("email", mode="before")
    @classmethod
    def sanitize_email(cls, v):
        return normalize_email(v)


class UserPublic(CamelModel):
    id: int
    name: str
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


# Identity attached to a request by the auth gate
CurrentUser = UserPublic


class AuthData(CamelModel):
    user: UserPublic
    access_token: str
    refresh_token: str


class AccessTokenData(CamelModel):
    access_token: str
