"""Pydantic schemas for users and auth.

Separate "Create"/"Update" schemas (input) from "Read" schemas (output).
No Read schema carries the password.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field

from coursehub.auth.policy import Role


# ─── Users (admin/self API) ─────────────────────────────

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: Optional[str] = Field(None, min_length=1)
    role: Optional[Role] = None


class UserUpdate(BaseModel):
    """Partial update. Omitted or empty fields are left alone."""
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = None
    role: Optional[Role] = None


class UserRead(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: str

    model_config = {"from_attributes": True}


# ─── Auth ───────────────────────────────────────────────

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)
    # free text on purpose: unknown values fall back to the default role
    role: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(UserRead):
    redirect: str
