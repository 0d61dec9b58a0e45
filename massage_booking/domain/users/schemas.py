"""User domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import UserRole
from ...security_utils import check_password_policy
from ...shared.validators import validate_email


def _validate_password(value: str) -> str:
    problems = check_password_policy(value)
    if problems:
        raise ValueError("; ".join(problems))
    return value


class UserCreate(BaseModel):
    """Schema for registering a new account"""

    email: str
    password: str
    firstname: Optional[str] = None
    name: Optional[str] = None
    phoneNumber: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return _validate_password(v)


class UserUpdate(BaseModel):
    """Schema for updating an account"""

    email: Optional[str] = None
    password: Optional[str] = None
    firstname: Optional[str] = None
    name: Optional[str] = None
    phoneNumber: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        if v is None:
            return v
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        if v is None:
            return v
        return _validate_password(v)


class RoleUpdate(BaseModel):
    role: UserRole


class UserResponse(BaseModel):
    """Schema for user response, never carries the password hash"""

    id: str
    email: str
    firstname: Optional[str] = None
    name: Optional[str] = None
    phoneNumber: Optional[str] = None
    role: UserRole
    createdAt: Optional[str] = None
