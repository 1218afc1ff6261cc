"""
Attendee persistence.
"""

from typing import Optional

from sqlalchemy import delete, select

from app.models.attendee import Attendee
from app.models.user import User
from app.repositories.base import Repository


class AttendeeRepository(Repository):
    async def get(self, event_id: int, user_id: int) -> Optional[Attendee]:
        result = await self._execute(
            select(Attendee).where(Attendee.event_id == event_id, Attendee.user_id == user_id),
            "attendee_get",
        )
        return result.scalar_one_or_none()

    async def create(self, event_id: int, user_id: int) -> Attendee:
        attendee = Attendee(event_id=event_id, user_id=user_id)
        self._session.add(attendee)
        await self._flush("attendee_insert")
        return attendee

    async def delete(self, event_id: int, user_id: int) -> bool:
        result = await self._execute(
            delete(Attendee).where(Attendee.event_id == event_id, Attendee.user_id == user_id),
            "attendee_delete",
        )
        return result.rowcount > 0

    async def list_users(self, event_id: int) -> list[User]:
        query = (
            select(User)
            .join(Attendee, Attendee.user_id == User.id)
            .where(Attendee.event_id == event_id)
            .order_by(User.id.asc())
        )
        result = await self._execute(query, "attendee_list_users")
        return list(result.scalars().all())
