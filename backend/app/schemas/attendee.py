"""
Pydantic schemas for attendee responses.
"""

from pydantic import BaseModel


class AttendeeResponse(BaseModel):
    id: int
    event_id: int
    user_id: int

    model_config = {"from_attributes": True}
