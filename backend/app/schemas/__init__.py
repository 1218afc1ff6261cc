from app.schemas.user import UserCreate, UserResponse, UserLogin, UserUpdate, Token
from app.schemas.event import EventCreate, EventUpdate, EventResponse, EventListResponse
from app.schemas.attendee import AttendeeResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "UserUpdate", "Token",
    "EventCreate", "EventUpdate", "EventResponse", "EventListResponse",
    "AttendeeResponse",
]
