"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictStr


class LoginRequest(BaseModel):
    username: StrictStr = Field(..., min_length=1)
    password: StrictStr = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: str
    username: str


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


class MeResponse(BaseModel):
    userId: str
    username: str
