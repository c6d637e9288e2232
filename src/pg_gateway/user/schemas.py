"""Auth request/response bodies. Routers wrap responses in ApiResponse."""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

_PASSWORD_RULES = (
    (r"[A-Z]", "an uppercase letter"),
    (r"[a-z]", "a lowercase letter"),
    (r"\d", "a digit"),
)


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_]+$")
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    mobile: str | None = Field(None, max_length=15, pattern=r"^\+?[0-9]{6,14}$")

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        missing = [label for pattern, label in _PASSWORD_RULES if not re.search(pattern, v)]
        if missing:
            raise ValueError(f"Password must contain {', '.join(missing)}")
        return v


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str


class UserInfo(BaseModel):
    user_id: str
    username: str
    usercode: str
    email: str
    mobile: str | None = None
    is_admin: bool = False


class RegisterResponse(BaseModel):
    user_id: str
    username: str
    usercode: str
    email: str
    mobile: str | None = None
    created_at: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserInfo


class RefreshResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int
