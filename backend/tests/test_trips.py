"""
Tests for public trip endpoints: listing, search and detail.
"""

import uuid

import pytest
from httpx import AsyncClient

from app.models import ApprovalStatus, TripStatus
from app.services.cache_service import get_cached_trips


@pytest.mark.asyncio
async def test_list_trips(client: AsyncClient, make_trip):
    """Only bookable trips are listed."""
    visible = await make_trip(title="Bromo Sunrise")
    await make_trip(title="Draft Trip", status=TripStatus.DRAFT)
    await make_trip(title="Pending Trip", approval_status=ApprovalStatus.PENDING)
    await make_trip(title="Deleted Trip", is_deleted=True)

    response = await client.get("/api/v1/trips")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 1
    assert data["cached"] is False
    assert [t["uuid"] for t in data["trips"]] == [visible.public_id]
    assert data["trips"][0]["remaining_seats"] == 10
    assert data["trips"][0]["provider"]["company_name"] == "Java Trails"


@pytest.mark.asyncio
async def test_list_trips_pagination(client: AsyncClient, make_trip):
    for i in range(5):
        await make_trip(title=f"Trip {i}")

    response = await client.get("/api/v1/trips", params={"page": 2, "page_size": 2})
    data = response.json()["data"]
    assert data["total"] == 5
    assert data["page"] == 2
    assert len(data["trips"]) == 2


@pytest.mark.asyncio
async def test_list_trips_invalid_page(client: AsyncClient):
    response = await client.get("/api/v1/trips", params={"page": 0})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_search_by_location(client: AsyncClient, make_trip):
    match = await make_trip(location="Labuan Bajo")
    await make_trip(location="Yogyakarta")

    response = await client.get("/api/v1/trips/search", params={"location": "bajo"})
    assert response.status_code == 200
    assert [t["uuid"] for t in response.json()["data"]] == [match.public_id]


@pytest.mark.asyncio
async def test_search_by_location_blank_keyword(client: AsyncClient):
    response = await client.get("/api/v1/trips/search", params={"location": "   "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_search_by_location_missing_keyword(client: AsyncClient):
    response = await client.get("/api/v1/trips/search")
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("keyword", ["_", "%"])
async def test_search_treats_wildcards_literally(client: AsyncClient, make_trip, keyword):
    """LIKE wildcards in the keyword match only themselves."""
    await make_trip(location="Malang")
    await make_trip(location="Bali")
    literal = await make_trip(location=f"North{keyword}Coast", gathering_point_name=f"Pier{keyword}7")

    response = await client.get("/api/v1/trips/search", params={"location": keyword})
    assert response.status_code == 200
    assert [t["uuid"] for t in response.json()["data"]] == [literal.public_id]

    response = await client.get("/api/v1/trips/search/gathering-point", params={"q": keyword})
    assert [t["uuid"] for t in response.json()["data"]] == [literal.public_id]


@pytest.mark.asyncio
async def test_search_by_gathering_point(client: AsyncClient, make_trip):
    match = await make_trip(gathering_point_name="Ngurah Rai Airport")
    await make_trip(gathering_point_name="Gambir Station")

    response = await client.get("/api/v1/trips/search/gathering-point", params={"q": "airport"})
    assert response.status_code == 200
    assert [t["uuid"] for t in response.json()["data"]] == [match.public_id]


@pytest.mark.asyncio
async def test_trip_detail(client: AsyncClient, trip):
    response = await client.get(f"/api/v1/trips/{trip.public_id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["uuid"] == trip.public_id
    assert data["status"] == "published"
    assert data["provider"]["email"] == "provider@example.com"
    assert "id" not in data


@pytest.mark.asyncio
async def test_trip_detail_reflects_booking(client: AsyncClient, customer_headers, trip):
    await client.post(
        "/api/v1/booking",
        json={"trip_id": trip.public_id, "num_of_people": 4},
        headers=customer_headers,
    )
    response = await client.get(f"/api/v1/trips/{trip.public_id}")
    data = response.json()["data"]
    assert data["booked_participants"] == 4
    assert data["remaining_seats"] == 6


@pytest.mark.asyncio
async def test_trip_detail_unapproved(client: AsyncClient, make_trip):
    trip = await make_trip(approval_status=ApprovalStatus.REJECTED)
    response = await client.get(f"/api/v1/trips/{trip.public_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_trip_detail_unknown(client: AsyncClient):
    response = await client.get(f"/api/v1/trips/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Trip not found."}


@pytest.mark.asyncio
async def test_listing_cache_disabled():
    assert await get_cached_trips(1, 20) is None


@pytest.mark.asyncio
async def test_list_trips_served_from_cache(client: AsyncClient, trip, monkeypatch):
    """A cached page is returned as-is and flagged as cached."""
    from app.api.routes import trips as trips_routes

    stored = {}

    async def fake_set(page, page_size, data):
        stored[(page, page_size)] = data

    async def fake_get(page, page_size):
        return dict(stored[(page, page_size)]) if (page, page_size) in stored else None

    monkeypatch.setattr(trips_routes, "set_cached_trips", fake_set)
    monkeypatch.setattr(trips_routes, "get_cached_trips", fake_get)

    first = await client.get("/api/v1/trips")
    assert first.json()["data"]["cached"] is False
    assert (1, 20) in stored

    second = await client.get("/api/v1/trips")
    data = second.json()["data"]
    assert data["cached"] is True
    assert [t["uuid"] for t in data["trips"]] == [trip.public_id]
