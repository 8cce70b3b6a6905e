"""
Pytest configuration and shared fixtures.

Environment variables are set before any application import so the
settings singleton picks up test values.
"""

import io
import os
import tempfile

import pytest

_test_root = tempfile.mkdtemp(prefix="bookstore-tests-")
os.environ["DATABASE_URL"] = os.path.join(_test_root, "bookstore.db")
os.environ["UPLOADS_DIR"] = os.path.join(_test_root, "uploads")
os.environ["CLIENT_TOKEN_FILE"] = os.path.join(_test_root, "token.json")
os.environ["JWT_SECRET_KEY"] = "test_secret_key_at_least_32_characters_long_for_jwt"
os.environ["SEED_PASSWORD"] = "P@ssword1"
os.environ["LOG_LEVEL"] = "WARNING"

import httpx  # noqa: E402
from PIL import Image  # noqa: E402

from config import settings  # noqa: E402
from database import Database  # noqa: E402
from main import app  # noqa: E402
from services import auth_service  # noqa: E402
from services.seed_service import SeedService  # noqa: E402

ADMIN_EMAIL = "admin@bookstore.com"
CUSTOMER_EMAIL = "customer1@gmail.com"
PASSWORD = "P@ssword1"


def make_image_bytes(width: int = 40, height: int = 30, image_format: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format=image_format)
    return buffer.getvalue()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def uploads_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(settings, "UPLOADS_DIR", str(path))
    return path


@pytest.fixture
async def db(tmp_path, monkeypatch, uploads_dir):
    """Fresh seeded database per test"""
    monkeypatch.setattr(Database, "_db_path", str(tmp_path / "bookstore.db"))
    # Cheap hashes keep seeding fast
    monkeypatch.setattr(auth_service, "BCRYPT_ROUNDS", 4)
    await Database.initialize()
    await SeedService.seed()
    yield Database


@pytest.fixture
async def client(db):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _login(client: httpx.AsyncClient, email: str) -> str:
    response = await client.post(
        "/api/users/login", json={"email_address": email, "password": PASSWORD}
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
async def admin_token(client):
    return await _login(client, ADMIN_EMAIL)


@pytest.fixture
async def customer_token(client):
    return await _login(client, CUSTOMER_EMAIL)


@pytest.fixture
async def author(client, admin_token):
    response = await client.post(
        "/api/authors",
        json={"firstname": "Ursula", "lastname": "Le Guin", "bio": "Wrote Earthsea"},
        headers=bearer(admin_token),
    )
    assert response.status_code == 201
    return response.json()
