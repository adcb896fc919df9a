"""Pydantic schemas for courses."""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class CourseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    topic: Optional[str] = Field(None, max_length=200)
    # honoured for admins only; everyone else owns what they create
    owner_id: Optional[uuid.UUID] = Field(None, alias="ownerId")

    model_config = {"populate_by_name": True}


class CourseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    topic: Optional[str] = Field(None, max_length=200)


class OwnerRead(BaseModel):
    id: uuid.UUID
    name: str
    email: str

    model_config = {"from_attributes": True}


class CourseRead(BaseModel):
    id: uuid.UUID
    name: str
    topic: Optional[str] = None
    # None when the owning account no longer exists
    owner: Optional[OwnerRead] = None

    model_config = {"from_attributes": True}
