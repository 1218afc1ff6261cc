"""
Ownership-based authorization.

`ensure_owner` is the one rule every event and attendee operation goes
through: the acting user must be the resource owner. `get_owned_event`
checks existence first so that a missing event is always a 404, never a 403.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, NotFound
from app.core.logging import get_logger
from app.core.metrics import record_authorization_denied
from app.models.event import Event
from app.models.user import User
from app.repositories.events import EventRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity resolved from the bearer token for the current request."""

    id: int
    email: str
    name: str

    @classmethod
    def from_model(cls, user: User) -> "AuthenticatedUser":
        return cls(id=user.id, email=user.email, name=user.name)


def ensure_owner(actor: AuthenticatedUser, owner_id: int, action: str) -> None:
    if actor.id != owner_id:
        record_authorization_denied(action)
        logger.warning("authorization_denied", actor_id=actor.id, owner_id=owner_id, action=action)
        raise Forbidden(f"You do not have permission to {action}")


async def get_owned_event(
    db: AsyncSession,
    event_id: int,
    actor: AuthenticatedUser,
    action: str,
) -> Event:
    event = await EventRepository(db).get(event_id)
    if event is None:
        raise NotFound("Event not found")
    ensure_owner(actor, event.owner_id, action)
    return event
