"""
Tests for event creation, listing and detail pages.
"""

import pytest
from httpx import AsyncClient

from eventhub.core.exceptions import ValidationError, NotFoundError
from eventhub.services.event_service import create_event, get_event, list_events, parse_capacity
from tests.conftest import make_event


def _form(**overrides):
    form = {
        "title": "Python Meetup",
        "description": "Monthly Python gathering",
        "location": "Community Hall",
        "starts_at": "2030-03-14T19:00",
        "capacity": "40",
    }
    form.update(overrides)
    return form


@pytest.mark.asyncio
@pytest.mark.parametrize("capacity", [1, 5000, "1", "5000", " 25 "])
async def test_create_event_capacity_bounds_accepted(db_session, alice, capacity):
    event = await create_event(db_session, alice.id, "T", "D", "L", "2030-01-01T10:00", capacity)
    assert 1 <= event.capacity <= 5000


@pytest.mark.asyncio
@pytest.mark.parametrize("capacity", [0, 5001, -3, "0", "5001", "abc", "2.5", "1e3", True])
async def test_create_event_capacity_rejected(db_session, alice, capacity):
    with pytest.raises(ValidationError) as exc:
        await create_event(db_session, alice.id, "T", "D", "L", "2030-01-01T10:00", capacity)
    assert "Capacity" in exc.value.message


def test_empty_capacity_uses_default():
    assert parse_capacity("") == 50
    assert parse_capacity(None) == 50


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "description", "location", "starts_at"])
async def test_create_event_requires_text_fields(db_session, alice, field):
    values = {"title": "T", "description": "D", "location": "L", "starts_at": "2030-01-01T10:00"}
    values[field] = "   "
    with pytest.raises(ValidationError):
        await create_event(db_session, alice.id, capacity=10, **values)


@pytest.mark.asyncio
async def test_create_event_trims_and_accepts_past_dates(db_session, alice):
    event = await create_event(db_session, alice.id, "  Retro  ", " Looking back ", " Museum ", " 1999-12-31T23:00 ", "10")
    assert event.title == "Retro"
    assert event.description == "Looking back"
    assert event.location == "Museum"
    assert event.starts_at == "1999-12-31T23:00"
    assert event.host_user_id == alice.id


@pytest.mark.asyncio
async def test_list_events_ordered_by_start_time(db_session, alice, bob):
    await make_event(db_session, alice, title="Third", starts_at="2030-03-01T09:00")
    await make_event(db_session, bob, title="First", starts_at="2030-01-01T09:00")
    await make_event(db_session, alice, title="Second", starts_at="2030-02-01T09:00")

    events = await list_events(db_session)
    assert [e.title for e in events] == ["First", "Second", "Third"]
    assert [e.host_name for e in events] == ["Bob", "Alice", "Alice"]
    assert all(e.registration_count == 0 for e in events)


@pytest.mark.asyncio
async def test_get_event_missing(db_session):
    with pytest.raises(NotFoundError):
        await get_event(db_session, 99999)


@pytest.mark.asyncio
async def test_create_event_page(alice_client: AsyncClient, db_session):
    response = await alice_client.post("/events/new", data=_form())
    assert response.status_code == 303
    location = response.headers["location"]
    assert location.startswith("/events/")

    event = await get_event(db_session, int(location.rsplit("/", 1)[1]))
    assert event.title == "Python Meetup"
    assert event.capacity == 40
    assert event.host_name == "Alice"


@pytest.mark.asyncio
async def test_create_event_page_validation_error(alice_client: AsyncClient):
    response = await alice_client.post("/events/new", data=_form(capacity="0"))
    assert response.status_code == 400
    assert "Capacity must be 1–5000." in response.text
    # Submitted values are kept in the form
    assert "Python Meetup" in response.text


@pytest.mark.asyncio
async def test_create_event_page_missing_fields(alice_client: AsyncClient):
    response = await alice_client.post("/events/new", data=_form(location=""))
    assert response.status_code == 400
    assert "Fill all required fields." in response.text


@pytest.mark.asyncio
async def test_create_event_unauthenticated(client: AsyncClient):
    response = await client.post("/events/new", data=_form())
    assert response.status_code == 303
    assert response.headers["location"] == "/login"

    response = await client.get("/events/new")
    assert response.status_code == 303
    assert response.headers["location"] == "/login"


@pytest.mark.asyncio
async def test_index_lists_events(client: AsyncClient, db_session, alice):
    await make_event(db_session, alice, title="Board Games Night", capacity=8)
    response = await client.get("/")
    assert response.status_code == 200
    assert "Board Games Night" in response.text
    assert "0 / 8 registered" in response.text


@pytest.mark.asyncio
async def test_event_detail_page(client: AsyncClient, test_event):
    response = await client.get(f"/events/{test_event.id}")
    assert response.status_code == 200
    assert "Test Meetup" in response.text
    assert "Hosted by Alice" in response.text
    assert "Log in</a> to register" in response.text


@pytest.mark.asyncio
async def test_event_detail_not_found(client: AsyncClient):
    response = await client.get("/events/99999")
    assert response.status_code == 404
    assert "Event not found" in response.text


@pytest.mark.asyncio
@pytest.mark.parametrize("event_id", ["abc", "1.5", "-1", "١"])
async def test_event_detail_non_numeric_id(client: AsyncClient, event_id):
    response = await client.get(f"/events/{event_id}")
    assert response.status_code == 404
    assert "text/html" in response.headers["content-type"]
    assert "Event not found" in response.text
