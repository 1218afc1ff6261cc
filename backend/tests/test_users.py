"""
Tests for user lookup, profile updates and self-service account deletion.
"""

import pytest
from httpx import AsyncClient

from app.models.attendee import Attendee
from app.models.event import Event
from app.models.user import User


@pytest.mark.asyncio
async def test_get_user(client: AsyncClient, other_user, auth_headers):
    other_id = other_user.id
    response = await client.get(f"/api/v1/users/{other_id}", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Other User"
    assert "password" not in data


@pytest.mark.asyncio
async def test_get_user_requires_auth(client: AsyncClient, other_user):
    other_id = other_user.id
    response = await client.get(f"/api/v1/users/{other_id}")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_user_not_found(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/users/99999", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_profile_partial(client: AsyncClient, auth_headers):
    """Only the fields sent are changed."""
    response = await client.put(
        "/api/v1/auth/me",
        json={"name": "Renamed User", "profile_picture": "https://cdn.example.com/me.png"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed User"
    assert data["email"] == "test@example.com"
    assert data["profile_picture"] == "https://cdn.example.com/me.png"

    cleared = await client.put("/api/v1/auth/me", json={"profile_picture": ""}, headers=auth_headers)
    assert cleared.status_code == 200
    assert cleared.json()["profile_picture"] is None
    assert cleared.json()["name"] == "Renamed User"


@pytest.mark.asyncio
async def test_update_profile_invalid_picture(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/v1/auth/me", json={"profile_picture": "not a url"}, headers=auth_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_email_conflict(client: AsyncClient, other_user, auth_headers):
    response = await client.put(
        "/api/v1/auth/me", json={"email": "other@example.com"}, headers=auth_headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_password(client: AsyncClient, auth_headers):
    response = await client.put(
        "/api/v1/auth/me", json={"password": "brand-new-password"}, headers=auth_headers
    )
    assert response.status_code == 200

    old = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert old.status_code == 401
    new = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "brand-new-password",
    })
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_list_attended_events(
    client: AsyncClient, test_user, other_event, auth_headers, add_attendee_row
):
    user_id, event_id = test_user.id, other_event.id
    await add_attendee_row(event_id, user_id)

    response = await client.get(f"/api/v1/users/{user_id}/events", headers=auth_headers)
    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [event_id]


@pytest.mark.asyncio
async def test_list_attended_events_of_someone_else(client: AsyncClient, other_user, auth_headers):
    other_id = other_user.id
    response = await client.get(f"/api/v1/users/{other_id}/events", headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_delete_account_cascades(
    client: AsyncClient,
    test_user,
    other_user,
    test_event,
    other_event,
    auth_headers,
    other_auth_headers,
    add_attendee_row,
    count_rows,
):
    """Deleting an account removes the user, their events and every attendee row referencing either."""
    user_id, other_id = test_user.id, other_user.id
    event_id, other_event_id = test_event.id, other_event.id
    await add_attendee_row(event_id, other_id)
    await add_attendee_row(other_event_id, user_id)

    response = await client.delete("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 204

    assert await count_rows(User, id=user_id) == 0
    assert await count_rows(Event, owner_id=user_id) == 0
    assert await count_rows(Attendee, event_id=event_id) == 0
    assert await count_rows(Attendee, user_id=user_id) == 0

    # The other user's data survives
    assert await count_rows(User, id=other_id) == 1
    assert await count_rows(Event, id=other_event_id) == 1
    listed = await client.get(f"/api/v1/events/{other_event_id}/attendees", headers=other_auth_headers)
    assert listed.status_code == 200
    assert listed.json() == []


@pytest.mark.asyncio
async def test_token_rejected_after_account_deletion(client: AsyncClient, auth_headers):
    """A token issued before deletion no longer authenticates."""
    assert (await client.delete("/api/v1/auth/me", headers=auth_headers)).status_code == 204

    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized access"

    login = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert login.status_code == 401


@pytest.mark.asyncio
async def test_updated_password_is_kept_verbatim(client: AsyncClient, auth_headers):
    """Surrounding spaces are part of the password, as they are at register and login."""
    response = await client.put(
        "/api/v1/auth/me", json={"password": " padded-password "}, headers=auth_headers
    )
    assert response.status_code == 200

    exact = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": " padded-password ",
    })
    assert exact.status_code == 200
    trimmed = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "padded-password",
    })
    assert trimmed.status_code == 401


@pytest.mark.asyncio
async def test_user_timestamps_are_utc(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.json()["created_at"].endswith("Z")
    assert response.json()["updated_at"].endswith("Z")
