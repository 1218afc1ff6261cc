"""
Event and attendee endpoints. All of them require authentication; by-id
operations additionally require ownership of the event.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.db.session import get_db
from app.schemas.attendee import AttendeeResponse
from app.schemas.event import EventCreate, EventUpdate, EventResponse, EventListResponse
from app.schemas.user import UserResponse
from app.services.attendee_service import add_attendee, list_attendees, remove_attendee
from app.services.authorization import AuthenticatedUser
from app.services.event_service import (
    create_event,
    delete_event,
    get_event,
    list_events,
    update_event,
)

router = APIRouter(prefix="/events", tags=["Events"])


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new event. The caller becomes its owner."""
    return await create_event(db, actor, event_data)


@router.get("", response_model=EventListResponse)
async def list_events_endpoint(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's own events with pagination."""
    events, total = await list_events(db, actor, page, page_size)
    return EventListResponse(
        events=[EventResponse.model_validate(e) for e in events],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(
    event_id: int,
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await get_event(db, actor, event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event_endpoint(
    event_id: int,
    event_data: EventUpdate,
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await update_event(db, actor, event_id, event_data)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_event_endpoint(
    event_id: int,
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete an event together with its attendee list."""
    await delete_event(db, actor, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/attendees", response_model=list[UserResponse])
async def list_attendees_endpoint(
    event_id: int,
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await list_attendees(db, actor, event_id)


@router.post(
    "/{event_id}/attendees/{user_id}",
    response_model=AttendeeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_attendee_endpoint(
    event_id: int,
    user_id: int,
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Register a user for the event. Returns 409 if already registered."""
    return await add_attendee(db, actor, event_id, user_id)


@router.delete(
    "/{event_id}/attendees/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def remove_attendee_endpoint(
    event_id: int,
    user_id: int,
    actor: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await remove_attendee(db, actor, event_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
