from app.models.user import User
from app.models.event import Event
from app.models.attendee import Attendee

__all__ = ["User", "Event", "Attendee"]
