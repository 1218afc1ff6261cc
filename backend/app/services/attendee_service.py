"""
Attendee roster management. Only the event owner may list, add or remove
attendees.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Conflict, NotFound
from app.core.logging import get_logger
from app.db.session import atomic
from app.models.attendee import Attendee
from app.models.user import User
from app.repositories.attendees import AttendeeRepository
from app.repositories.users import UserRepository
from app.services.authorization import AuthenticatedUser, get_owned_event

logger = get_logger(__name__)


async def add_attendee(
    db: AsyncSession,
    actor: AuthenticatedUser,
    event_id: int,
    user_id: int,
) -> Attendee:
    """
    Register a user for an event.
    404 if the event or user is missing, 403 if the actor does not own the
    event, 409 if the user already attends.
    """
    event = await get_owned_event(db, event_id, actor, "add attendees to this event")

    if await UserRepository(db).get_by_id(user_id) is None:
        raise NotFound("User not found")

    attendees = AttendeeRepository(db)
    if await attendees.get(event.id, user_id):
        logger.warning("attendee_add_failed", event_id=event.id, user_id=user_id, reason="duplicate")
        raise Conflict("User is already an attendee")

    async with atomic(db):
        try:
            attendee = await attendees.create(event.id, user_id)
        except IntegrityError as e:
            raise Conflict("User is already an attendee") from e

    logger.info("attendee_added", event_id=event.id, user_id=user_id)
    return attendee


async def list_attendees(db: AsyncSession, actor: AuthenticatedUser, event_id: int) -> list[User]:
    event = await get_owned_event(db, event_id, actor, "view attendees for this event")
    return await AttendeeRepository(db).list_users(event.id)


async def remove_attendee(
    db: AsyncSession,
    actor: AuthenticatedUser,
    event_id: int,
    user_id: int,
) -> None:
    event = await get_owned_event(db, event_id, actor, "remove attendees from this event")

    async with atomic(db):
        if not await AttendeeRepository(db).delete(event.id, user_id):
            raise NotFound("Attendee not found")

    logger.info("attendee_removed", event_id=event.id, user_id=user_id)
