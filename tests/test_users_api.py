"""Integration tests for registration and login."""

import asyncio

from jose import jwt

from conftest import ADMIN_EMAIL, CUSTOMER_EMAIL, PASSWORD


class TestRegister:

    async def test_register_new_customer(self, client):
        response = await client.post(
            "/api/users/register",
            json={"email_address": "new.reader@example.com", "password": "abc12345"},
        )
        assert response.status_code == 200
        assert response.json() == {"succeeded": True}

        login = await client.post(
            "/api/users/login",
            json={"email_address": "new.reader@example.com", "password": "abc12345"},
        )
        assert login.status_code == 200
        claims = jwt.get_unverified_claims(login.json()["token"])
        assert claims["role"] == ["Customer"]

    async def test_register_existing_email_fails(self, client):
        response = await client.post(
            "/api/users/register",
            json={"email_address": CUSTOMER_EMAIL, "password": "abc12345"},
        )
        assert response.status_code == 400

    async def test_concurrent_duplicate_registration_is_bad_request(self, client):
        body = {"email_address": "twice@example.com", "password": "abc12345"}
        responses = await asyncio.gather(
            client.post("/api/users/register", json=body),
            client.post("/api/users/register", json=body),
        )
        assert sorted(r.status_code for r in responses) == [200, 400]

    async def test_register_email_differing_only_in_case_fails(self, client):
        response = await client.post(
            "/api/users/register",
            json={"email_address": CUSTOMER_EMAIL.upper(), "password": "abc12345"},
        )
        assert response.status_code == 400

    async def test_register_invalid_email_is_bad_request(self, client):
        response = await client.post(
            "/api/users/register",
            json={"email_address": "not-an-email", "password": "abc12345"},
        )
        assert response.status_code == 400

    async def test_register_short_password_is_bad_request(self, client):
        response = await client.post(
            "/api/users/register",
            json={"email_address": "short@example.com", "password": "abc"},
        )
        assert response.status_code == 400


class TestLogin:

    async def test_admin_login_carries_administrator_role(self, client):
        response = await client.post(
            "/api/users/login",
            json={"email_address": ADMIN_EMAIL, "password": PASSWORD},
        )
        assert response.status_code == 200
        claims = jwt.get_unverified_claims(response.json()["token"])
        assert claims["sub"] == ADMIN_EMAIL
        assert "Administrator" in claims["role"]

    async def test_wrong_password_is_unauthorized(self, client):
        response = await client.post(
            "/api/users/login",
            json={"email_address": ADMIN_EMAIL, "password": "Wr0ngPass"},
        )
        assert response.status_code == 401

    async def test_unknown_user_is_unauthorized(self, client):
        response = await client.post(
            "/api/users/login",
            json={"email_address": "ghost@example.com", "password": PASSWORD},
        )
        assert response.status_code == 401


async def test_seeding_is_idempotent(db):
    from services.seed_service import SeedService

    await SeedService.seed()
    rows = await db.fetch_all("SELECT email FROM users ORDER BY email")
    assert [row["email"] for row in rows] == [
        "admin@bookstore.com",
        "customer1@gmail.com",
        "customer2@gmail.com",
    ]


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "ok", "uploads": "ok"}
