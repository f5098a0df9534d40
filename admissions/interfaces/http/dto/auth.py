from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from admissions.domain.users.entities import normalize_email
from admissions.shared.errors.validation_types import ValidationErrorType

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_USERNAME_RE = re.compile(r"^[\w .'-]+$")


def _validate_email(value: str) -> str:
    value = normalize_email(value)
    if not value:
        raise PydanticCustomError(ValidationErrorType.MISSING, "Email cannot be empty", {})
    if not _EMAIL_RE.match(value):
        raise PydanticCustomError(
            ValidationErrorType.EMAIL_INVALID,
            "Email address is not valid",
            {},
        )
    return value


def _validate_password(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_BLANK,
            "Password cannot be blank",
            {},
        )
    return value


class RegisterRequestDTO(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(min_length=6, max_length=128)
    username: str = Field(min_length=1, max_length=64)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _validate_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _validate_password(value)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError(
                ValidationErrorType.MISSING,
                "Username cannot be empty",
                {}
            )

        if not _USERNAME_RE.match(value):
            raise PydanticCustomError(
                ValidationErrorType.USERNAME_INVALID_CHARS,
                "Username may contain letters, digits, spaces and . ' - _",
                {"pattern": _USERNAME_RE.pattern}
            )

        return value


class LoginRequestDTO(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _validate_email(value)


class ForgotPasswordRequestDTO(BaseModel):
    email: str = Field(max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _validate_email(value)


class ResetPasswordRequestDTO(BaseModel):
    email: str = Field(max_length=255)
    otp: str = Field(min_length=1, max_length=16)
    new_password: str = Field(alias="newPassword", min_length=6, max_length=128)

    model_config = ConfigDict(validate_by_name=True)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _validate_email(value)

    @field_validator("new_password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _validate_password(value)

    @field_validator("otp")
    @classmethod
    def strip_otp(cls, value: str) -> str:
        return value.strip()


class MessageDTO(BaseModel):
    message: str


class TokenDTO(BaseModel):
    token: str


class UserDTO(BaseModel):
    id: int
    email: str
    username: str


class VerifyTokenDTO(BaseModel):
    user: UserDTO
