"""Auth domain schemas - Pydantic models for login"""

from pydantic import BaseModel

from ..users.schemas import UserResponse


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    user: UserResponse
