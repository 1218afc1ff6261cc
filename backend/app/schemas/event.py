"""
Pydantic schemas for event-related request/response validation.

Dates cross the boundary in one format only: an ISO 8601 string. Numbers and
other date spellings are rejected instead of being coerced.
"""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from app.schemas.common import UtcDatetime


class EventCreate(BaseModel):
    # Any owner field in the request body is ignored.
    name: str = Field(..., min_length=3, max_length=255)
    description: str = Field(..., min_length=10, max_length=1000)
    date: UtcDatetime
    location: str = Field(..., min_length=1, max_length=255)

    @field_validator("date", mode="before")
    @classmethod
    def _require_iso8601(cls, value):
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str):
            raise ValueError("date must be an ISO 8601 string")
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError("date must be an ISO 8601 string") from e


class EventUpdate(EventCreate):
    """Full replacement of the mutable event fields."""


class EventResponse(BaseModel):
    id: int
    owner_id: int = Field(serialization_alias="ownerId")
    name: str
    description: str
    date: UtcDatetime
    location: str

    model_config = {"from_attributes": True}


class EventListResponse(BaseModel):
    events: list[EventResponse]
    total: int
    page: int
    page_size: int
