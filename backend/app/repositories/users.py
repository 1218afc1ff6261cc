"""
User persistence, including the cascading account delete.

CASCADE DELETE PROTOCOL
=======================

Removing a user must never leave rows pointing at it, and must never remove
dependents without also removing the user. `delete_with_dependents` runs:

  1. DELETE attendee rows on events the user owns, and rows where the user
     is the attendee
  2. DELETE the user's events
  3. DELETE the user row

All three run in the caller's transaction (`atomic`). Step 3 reports how many
rows it removed; zero means the user was already gone (a concurrent delete),
and the caller must roll back steps 1-2 rather than commit them.
"""

from typing import Optional

from sqlalchemy import delete, or_, select

from app.models.attendee import Attendee
from app.models.event import Event
from app.models.user import User
from app.repositories.base import Repository

_UNSET = object()


class UserRepository(Repository):
    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self._execute(select(User).where(User.id == user_id), "user_get")
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._execute(select(User).where(User.email == email), "user_get_by_email")
        return result.scalar_one_or_none()

    async def create(self, *, email: str, name: str, password_hash: str) -> User:
        user = User(email=email, name=name, password=password_hash)
        self._session.add(user)
        await self._flush("user_insert")
        return user

    async def update(
        self,
        user: User,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        profile_picture=_UNSET,
    ) -> User:
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if password_hash is not None:
            user.password = password_hash
        if profile_picture is not _UNSET:
            user.profile_picture = profile_picture or None
        await self._flush("user_update")
        return user

    async def delete_with_dependents(self, user_id: int) -> bool:
        """Run the cascade. Returns False when the user row was already gone."""
        await self._delete_attendee_rows(user_id)
        await self._delete_owned_events(user_id)
        return await self._delete_user_row(user_id) > 0

    async def _delete_attendee_rows(self, user_id: int) -> int:
        owned_events = select(Event.id).where(Event.owner_id == user_id)
        result = await self._execute(
            delete(Attendee).where(
                or_(Attendee.event_id.in_(owned_events), Attendee.user_id == user_id)
            ),
            "attendee_delete_for_user",
        )
        return result.rowcount

    async def _delete_owned_events(self, user_id: int) -> int:
        result = await self._execute(
            delete(Event).where(Event.owner_id == user_id), "event_delete_for_owner"
        )
        return result.rowcount

    async def _delete_user_row(self, user_id: int) -> int:
        result = await self._execute(delete(User).where(User.id == user_id), "user_delete")
        return result.rowcount
