"""
Tests for authentication endpoints: registration, login lockout and password reset.
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.core.security import decode_access_token
from app.models.password_reset import PasswordReset
from app.models.user import User
from conftest import DEFAULT_PASSWORD


async def _login(client: AsyncClient, email: str, password: str):
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Successful registration returns the new customer without the hash."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "New Customer",
        "email": "New@Example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    data = body["data"]
    assert data["email"] == "new@example.com"
    assert data["role"] == "customer"
    assert len(data["uuid"]) == 36
    assert "hashed_password" not in data  # Never expose password hash
    assert "id" not in data


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, customer):
    """Duplicate email returns 409."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "Someone Else",
        "email": customer.email,
        "password": "securepassword123",
    })
    assert response.status_code == 409
    assert response.json()["status"] == "error"


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    """Password under 8 chars returns 400 with field errors."""
    response = await client.post("/api/v1/auth/register", json={
        "name": "Weak",
        "email": "weak@example.com",
        "password": "short",
    })
    assert response.status_code == 400
    assert any(err["field"] == "password" for err in response.json()["errors"])


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, customer):
    """Valid credentials return a JWT whose subject is the public id."""
    response = await _login(client, customer.email, DEFAULT_PASSWORD)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["user_uuid"] == customer.public_id
    assert data["role"] == "customer"

    payload = decode_access_token(data["access_token"])
    assert payload["sub"] == customer.public_id
    assert payload["role"] == "customer"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, customer, db_session):
    """Wrong password returns 401 and counts the failure."""
    response = await _login(client, customer.email, "wrongpassword")
    assert response.status_code == 401

    await db_session.refresh(customer)
    assert customer.failed_login_attempts == 1
    assert customer.is_suspended is False


@pytest.mark.asyncio
async def test_login_nonexistent_user(client: AsyncClient):
    response = await _login(client, "nobody@example.com", "anything")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_fifth_failure_suspends_account(client: AsyncClient, customer, db_session):
    """The fifth consecutive failure suspends; the right password is then refused."""
    for attempt in range(1, 5):
        response = await _login(client, customer.email, "wrongpassword")
        assert response.status_code == 401
        await db_session.refresh(customer)
        assert customer.failed_login_attempts == attempt
        assert customer.is_suspended is False

    response = await _login(client, customer.email, "wrongpassword")
    assert response.status_code == 401
    await db_session.refresh(customer)
    assert customer.failed_login_attempts == 5
    assert customer.is_suspended is True

    response = await _login(client, customer.email, DEFAULT_PASSWORD)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_successful_login_resets_counter(client: AsyncClient, customer, db_session):
    for _ in range(3):
        await _login(client, customer.email, "wrongpassword")

    response = await _login(client, customer.email, DEFAULT_PASSWORD)
    assert response.status_code == 200

    await db_session.refresh(customer)
    assert customer.failed_login_attempts == 0


@pytest.mark.asyncio
async def test_suspended_user_token_rejected(client: AsyncClient, customer, customer_headers, db_session):
    """A token issued before suspension stops working."""
    customer.is_suspended = True
    await db_session.commit()

    response = await client.get("/api/v1/booking", headers=customer_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_rejected(client: AsyncClient):
    response = await client.get(
        "/api/v1/booking",
        headers={"Authorization": "Bearer not-a-real-token"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_forgot_password_unknown_email_reports_success(client: AsyncClient, mailer):
    """Unknown emails get the same answer, and nothing is sent."""
    response = await client.post("/api/v1/auth/forgot-password", json={"email": "ghost@example.com"})
    assert response.status_code == 200
    assert response.json()["status"] == "success"
    assert len(mailer.outbox) == 0


@pytest.mark.asyncio
async def test_forgot_password_sends_code(client: AsyncClient, customer, mailer, db_session):
    response = await client.post("/api/v1/auth/forgot-password", json={"email": customer.email})
    assert response.status_code == 200

    assert len(mailer.outbox) == 1
    message = mailer.outbox[0]
    assert message["to"] == customer.email

    result = await db_session.execute(select(PasswordReset).where(PasswordReset.user_id == customer.id))
    reset = result.scalar_one()
    assert len(reset.otp_code) == 6
    assert reset.otp_code in message["body"]


@pytest.mark.asyncio
async def test_reset_password_unlocks_account(client: AsyncClient, customer, mailer, db_session):
    """A valid code sets the new password and lifts the suspension."""
    for _ in range(5):
        await _login(client, customer.email, "wrongpassword")
    await db_session.refresh(customer)
    assert customer.is_suspended is True

    await client.post("/api/v1/auth/forgot-password", json={"email": customer.email})
    otp = (
        await db_session.execute(select(PasswordReset.otp_code).where(PasswordReset.user_id == customer.id))
    ).scalar_one()

    response = await client.post("/api/v1/auth/reset-password", json={
        "email": customer.email,
        "otp": otp,
        "new_password": "brandnewpassword",
    })
    assert response.status_code == 200

    await db_session.refresh(customer)
    assert customer.is_suspended is False
    assert customer.failed_login_attempts == 0

    # Code is single use
    remaining = await db_session.execute(select(PasswordReset).where(PasswordReset.user_id == customer.id))
    assert remaining.scalar_one_or_none() is None

    assert (await _login(client, customer.email, DEFAULT_PASSWORD)).status_code == 401
    assert (await _login(client, customer.email, "brandnewpassword")).status_code == 200


@pytest.mark.asyncio
async def test_reset_password_wrong_code(client: AsyncClient, customer, mailer):
    await client.post("/api/v1/auth/forgot-password", json={"email": customer.email})
    sent_code = mailer.outbox[0]["body"].split("code is ")[1][:6]
    wrong_code = "000000" if sent_code != "000000" else "111111"

    response = await client.post("/api/v1/auth/reset-password", json={
        "email": customer.email,
        "otp": wrong_code,
        "new_password": "brandnewpassword",
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_reset_password_expired_code(client: AsyncClient, customer: User, db_session):
    db_session.add(PasswordReset(
        user_id=customer.id,
        otp_code="123456",
        expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
    ))
    await db_session.commit()

    response = await client.post("/api/v1/auth/reset-password", json={
        "email": customer.email,
        "otp": "123456",
        "new_password": "brandnewpassword",
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid or expired reset code."
