"""
Self-service profile operations and account deletion.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Conflict, NotFound
from app.core.logging import get_logger
from app.core.metrics import record_account_deletion
from app.core.security import CredentialStore
from app.db.session import atomic
from app.models.event import Event
from app.models.user import User
from app.repositories.events import EventRepository
from app.repositories.users import UserRepository
from app.schemas.user import UserUpdate
from app.services.authorization import AuthenticatedUser, ensure_owner

logger = get_logger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


async def update_profile(
    db: AsyncSession,
    credentials: CredentialStore,
    actor: AuthenticatedUser,
    changes: UserUpdate,
) -> User:
    """Apply only the fields the client sent."""
    users = UserRepository(db)
    user = await users.get_by_id(actor.id)
    if user is None:
        raise NotFound("User not found")

    if changes.email is not None and changes.email != user.email:
        if await users.get_by_email(changes.email):
            raise Conflict("Email already registered")

    password_hash = credentials.hash(changes.password) if changes.password else None
    picture_kwargs = (
        {"profile_picture": changes.profile_picture}
        if "profile_picture" in changes.model_fields_set
        else {}
    )

    async with atomic(db):
        try:
            user = await users.update(
                user,
                name=changes.name,
                email=changes.email,
                password_hash=password_hash,
                **picture_kwargs,
            )
        except IntegrityError as e:
            raise Conflict("Email already registered") from e

    logger.info("user_updated", user_id=user.id, fields=sorted(changes.model_fields_set))
    return user


async def delete_account(db: AsyncSession, actor: AuthenticatedUser) -> None:
    """
    Delete the user together with their events and every attendee row that
    references either. All-or-nothing: if the user row is already gone the
    whole transaction is rolled back and 404 is returned.
    """
    users = UserRepository(db)
    try:
        async with atomic(db):
            if not await users.delete_with_dependents(actor.id):
                raise NotFound("User not found")
    except NotFound:
        record_account_deletion("not_found")
        logger.warning("account_delete_rolled_back", user_id=actor.id, reason="user_missing")
        raise
    except Exception as e:
        record_account_deletion("rolled_back")
        logger.error("account_delete_rolled_back", user_id=actor.id, error=str(e))
        raise

    record_account_deletion("deleted")
    logger.info("account_deleted", user_id=actor.id)


async def list_attended_events(
    db: AsyncSession,
    actor: AuthenticatedUser,
    user_id: int,
) -> list[Event]:
    """Events a user is registered for. Users may only list their own."""
    ensure_owner(actor, user_id, "view events attended by this user")
    return await EventRepository(db).list_attended_by(user_id)
