"""
Event service handling CRUD operations. Every by-id operation goes through
`get_owned_event`, so existence is checked before ownership.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.core.logging import get_logger
from app.db.session import atomic
from app.models.event import Event
from app.repositories.events import EventRepository
from app.schemas.event import EventCreate, EventUpdate
from app.services.authorization import AuthenticatedUser, get_owned_event

logger = get_logger(__name__)


async def create_event(db: AsyncSession, actor: AuthenticatedUser, event_data: EventCreate) -> Event:
    """Create a new event owned by the acting user."""
    async with atomic(db):
        event = await EventRepository(db).create(
            owner_id=actor.id,
            name=event_data.name,
            description=event_data.description,
            date=event_data.date,
            location=event_data.location,
        )

    logger.info("event_created", event_id=event.id, owner_id=actor.id)
    return event


async def get_event(db: AsyncSession, actor: AuthenticatedUser, event_id: int) -> Event:
    return await get_owned_event(db, event_id, actor, "view this event")


async def list_events(
    db: AsyncSession,
    actor: AuthenticatedUser,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Event], int]:
    """List the acting user's events, ordered by date."""
    return await EventRepository(db).list_by_owner(actor.id, page, page_size)


async def update_event(
    db: AsyncSession,
    actor: AuthenticatedUser,
    event_id: int,
    event_data: EventUpdate,
) -> Event:
    event = await get_owned_event(db, event_id, actor, "update this event")

    async with atomic(db):
        event = await EventRepository(db).update(
            event,
            name=event_data.name,
            description=event_data.description,
            date=event_data.date,
            location=event_data.location,
        )

    logger.info("event_updated", event_id=event.id)
    return event


async def delete_event(db: AsyncSession, actor: AuthenticatedUser, event_id: int) -> None:
    """Delete an event and its attendee rows in one transaction."""
    await get_owned_event(db, event_id, actor, "delete this event")

    async with atomic(db):
        if not await EventRepository(db).delete_with_attendees(event_id):
            raise NotFound("Event not found")

    logger.info("event_deleted", event_id=event_id)
