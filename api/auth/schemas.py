"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


# Emptiness is checked by the service so it reports the same error for
# missing and blank fields.
class RegisterRequest(BaseModel):
    username: str = Field(default="", max_length=64)
    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=128)


class LoginRequest(BaseModel):
    username: str = Field(default="", max_length=64)
    password: str = Field(default="", max_length=128)


class UserResponse(BaseModel):
    id: UUID
    username: str
    email: str
    role: Role
    created_at: datetime


class UserSummary(BaseModel):
    username: str
    email: str


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    user: UserResponse


class TokenResponse(BaseModel):
    message: str = "User logged in successfully"
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class UserListResponse(BaseModel):
    users: list[UserSummary]
