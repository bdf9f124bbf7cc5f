"""Pydantic DTOs (Data Transfer Objects) for the Example feature."""

from datetime import datetime

from pydantic import Field

from crud_template.application.schemas.base import ApiSchema


class ExampleCreate(ApiSchema):
    """Schema for creating a new example."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Hydraulic pump"])
    description: str = Field(..., min_length=1, examples=["Quarterly maintenance"])


class ExampleUpdate(ExampleCreate):
    """Schema for updating an existing example; the id travels in the body."""

    id: int


class ExampleResponse(ExampleUpdate):
    """Schema returned to the client, including the audit timestamps."""

    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
