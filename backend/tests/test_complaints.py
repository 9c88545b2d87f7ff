"""
Tests for complaint submission.
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.models import Complaint, ComplaintStatus


@pytest.mark.asyncio
async def test_submit_complaint(client: AsyncClient, customer, customer_headers, trip, db_session):
    response = await client.post(
        "/api/v1/complaints",
        json={"trip_uuid": trip.public_id, "subject": "  Late pickup ", "description": "Jeep came 2h late."},
        headers=customer_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["subject"] == "Late pickup"
    assert data["status"] == "open"

    complaint = (await db_session.execute(select(Complaint))).scalar_one()
    assert complaint.user_id == customer.id
    assert complaint.trip_id == trip.id
    assert complaint.status == ComplaintStatus.OPEN


@pytest.mark.asyncio
async def test_complaint_blank_fields(client: AsyncClient, customer_headers, trip):
    response = await client.post(
        "/api/v1/complaints",
        json={"trip_uuid": trip.public_id, "subject": "   ", "description": "x"},
        headers=customer_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_complaint_unknown_trip(client: AsyncClient, customer_headers):
    response = await client.post(
        "/api/v1/complaints",
        json={"trip_uuid": str(uuid.uuid4()), "subject": "Late", "description": "Very late"},
        headers=customer_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_complaint_requires_customer(client: AsyncClient, trip):
    response = await client.post(
        "/api/v1/complaints",
        json={"trip_uuid": trip.public_id, "subject": "Late", "description": "Very late"},
    )
    assert response.status_code == 401
