"""
Event persistence.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select

from app.models.attendee import Attendee
from app.models.event import Event
from app.repositories.base import Repository


class EventRepository(Repository):
    async def get(self, event_id: int) -> Optional[Event]:
        result = await self._execute(select(Event).where(Event.id == event_id), "event_get")
        return result.scalar_one_or_none()

    async def create(
        self,
        *,
        owner_id: int,
        name: str,
        description: str,
        date: datetime,
        location: str,
    ) -> Event:
        event = Event(
            owner_id=owner_id,
            name=name,
            description=description,
            date=date,
            location=location,
        )
        self._session.add(event)
        await self._flush("event_insert")
        return event

    async def update(
        self,
        event: Event,
        *,
        name: str,
        description: str,
        date: datetime,
        location: str,
    ) -> Event:
        event.name = name
        event.description = description
        event.date = date
        event.location = location
        await self._flush("event_update")
        return event

    async def list_by_owner(
        self,
        owner_id: int,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Event], int]:
        count_query = select(func.count()).select_from(Event).where(Event.owner_id == owner_id)
        total = (await self._execute(count_query, "event_count_by_owner")).scalar_one()

        events_query = (
            select(Event)
            .where(Event.owner_id == owner_id)
            .order_by(Event.date.asc(), Event.id.asc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self._execute(events_query, "event_list_by_owner")
        return list(result.scalars().all()), total

    async def list_attended_by(self, user_id: int) -> list[Event]:
        query = (
            select(Event)
            .join(Attendee, Attendee.event_id == Event.id)
            .where(Attendee.user_id == user_id)
            .order_by(Event.date.asc(), Event.id.asc())
        )
        result = await self._execute(query, "event_list_attended")
        return list(result.scalars().all())

    async def delete_with_attendees(self, event_id: int) -> bool:
        await self._execute(
            delete(Attendee).where(Attendee.event_id == event_id), "attendee_delete_for_event"
        )
        result = await self._execute(delete(Event).where(Event.id == event_id), "event_delete")
        return result.rowcount > 0
