"""
Tests for attendee roster endpoints.
"""

import pytest
from httpx import AsyncClient

from app.models.attendee import Attendee


@pytest.mark.asyncio
async def test_add_attendee(client: AsyncClient, test_event, other_user, auth_headers):
    event_id, other_id = test_event.id, other_user.id
    response = await client.post(
        f"/api/v1/events/{event_id}/attendees/{other_id}", headers=auth_headers
    )
    assert response.status_code == 201
    data = response.json()
    assert data["event_id"] == event_id
    assert data["user_id"] == other_id


@pytest.mark.asyncio
async def test_add_attendee_duplicate(
    client: AsyncClient, test_event, other_user, auth_headers, count_rows
):
    """Adding the same user twice returns 409 and leaves a single row."""
    event_id, other_id = test_event.id, other_user.id
    url = f"/api/v1/events/{event_id}/attendees/{other_id}"

    assert (await client.post(url, headers=auth_headers)).status_code == 201
    response = await client.post(url, headers=auth_headers)
    assert response.status_code == 409
    assert await count_rows(Attendee, event_id=event_id, user_id=other_id) == 1


@pytest.mark.asyncio
async def test_owner_can_attend_own_event(client: AsyncClient, test_user, test_event, auth_headers):
    event_id, user_id = test_event.id, test_user.id
    response = await client.post(f"/api/v1/events/{event_id}/attendees/{user_id}", headers=auth_headers)
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_add_attendee_not_owner(
    client: AsyncClient, test_event, other_user, other_auth_headers, count_rows
):
    event_id, other_id = test_event.id, other_user.id
    response = await client.post(
        f"/api/v1/events/{event_id}/attendees/{other_id}", headers=other_auth_headers
    )
    assert response.status_code == 403
    assert await count_rows(Attendee, event_id=event_id) == 0


@pytest.mark.asyncio
async def test_add_attendee_missing_event(client: AsyncClient, other_user, auth_headers):
    other_id = other_user.id
    response = await client.post(f"/api/v1/events/99999/attendees/{other_id}", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_add_attendee_missing_user(client: AsyncClient, test_event, auth_headers):
    event_id = test_event.id
    response = await client.post(f"/api/v1/events/{event_id}/attendees/99999", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_attendees(
    client: AsyncClient, test_event, other_user, third_user, auth_headers, add_attendee_row
):
    event_id = test_event.id
    attendee_ids = {other_user.id, third_user.id}
    for user_id in attendee_ids:
        await add_attendee_row(event_id, user_id)

    response = await client.get(f"/api/v1/events/{event_id}/attendees", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert {u["id"] for u in data} == attendee_ids
    assert all("password" not in u for u in data)


@pytest.mark.asyncio
async def test_list_attendees_not_owner(client: AsyncClient, test_event, other_auth_headers):
    event_id = test_event.id
    response = await client.get(f"/api/v1/events/{event_id}/attendees", headers=other_auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_remove_attendee(
    client: AsyncClient, test_event, other_user, auth_headers, add_attendee_row, count_rows
):
    event_id, other_id = test_event.id, other_user.id
    await add_attendee_row(event_id, other_id)

    response = await client.delete(
        f"/api/v1/events/{event_id}/attendees/{other_id}", headers=auth_headers
    )
    assert response.status_code == 204
    assert await count_rows(Attendee, event_id=event_id) == 0


@pytest.mark.asyncio
async def test_remove_attendee_not_registered(client: AsyncClient, test_event, other_user, auth_headers):
    event_id, other_id = test_event.id, other_user.id
    response = await client.delete(
        f"/api/v1/events/{event_id}/attendees/{other_id}", headers=auth_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_remove_attendee_not_owner(
    client: AsyncClient, test_event, other_user, other_auth_headers, add_attendee_row, count_rows
):
    """An attendee cannot remove themselves from someone else's event."""
    event_id, other_id = test_event.id, other_user.id
    await add_attendee_row(event_id, other_id)

    response = await client.delete(
        f"/api/v1/events/{event_id}/attendees/{other_id}", headers=other_auth_headers
    )
    assert response.status_code == 403
    assert await count_rows(Attendee, event_id=event_id) == 1
