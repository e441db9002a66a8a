"""
Notes API — Account Request/Response Schemas
==============================================

What:  JSON contract of POST /auth/register and POST /auth/login.

`email` is a plain string here: the address pattern and the password length
are checked by AuthService so a bad value is a 400 validation_error, the same
as every other business-rule failure. No response model has a password field.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    email: str = Field(description="Login email; stored trimmed and lower-cased")
    name: str = Field(default="", max_length=200, description="Display name")
    password: str = Field(description="At least 8 characters")


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    """Public view of an account."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    created_at: datetime


class LoginResponse(BaseModel):
    """
    Successful login.

    `token` goes into `Authorization: Bearer <token>` on later requests and is
    valid for 24 hours by default.
    """

    user: UserResponse
    token: str
    token_type: str = "bearer"
