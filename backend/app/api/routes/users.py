"""
User lookup endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.session import get_db
from app.schemas.event import EventResponse
from app.schemas.user import UserResponse
from app.services.authorization import AuthenticatedUser
from app.services.user_service import get_user, list_attended_events

router = APIRouter(prefix="/users", tags=["Users"], dependencies=[Depends(get_current_user)])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user_endpoint(user_id: int, db: AsyncSession = Depends(get_db)):
    return await get_user(db, user_id)


@router.get("/{user_id}/events", response_model=list[EventResponse])
async def list_attended_events_endpoint(
    user_id: int,
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Events the user is registered to attend. Only available for yourself."""
    return await list_attended_events(db, actor, user_id)
