"""Unit tests for password hashing and access tokens."""

import threading
from datetime import timedelta

from jose import jwt

from config import settings
from repositories.user_repo import UserRepository
from services.auth_service import (
    ALGORITHM,
    AuthService,
    CurrentUser,
    ROLE_ADMINISTRATOR,
    ROLE_CUSTOMER,
)


def _user(**overrides) -> CurrentUser:
    data = {"id": 7, "email": "reader@example.com", "roles": [ROLE_CUSTOMER]}
    data.update(overrides)
    return CurrentUser(**data)


class TestPasswordHashing:

    def test_hash_verifies(self):
        hashed = AuthService.hash_password("s3cret!")
        assert hashed != "s3cret!"
        assert AuthService.verify_password("s3cret!", hashed)

    def test_wrong_password_rejected(self):
        hashed = AuthService.hash_password("s3cret!")
        assert not AuthService.verify_password("other", hashed)

    def test_malformed_hash_rejected(self):
        assert not AuthService.verify_password("s3cret!", "not-a-bcrypt-hash")


class TestAccessTokens:

    def test_round_trip_keeps_identity_and_roles(self):
        token = AuthService.create_access_token(_user(roles=[ROLE_ADMINISTRATOR, ROLE_CUSTOMER]))
        user = AuthService.decode_access_token(token)

        assert user is not None
        assert user.id == 7
        assert user.email == "reader@example.com"
        assert user.is_in_role(ROLE_ADMINISTRATOR)
        assert user.is_in_role(ROLE_CUSTOMER)

    def test_claims_include_issuer_audience_and_unique_jti(self):
        first = jwt.get_unverified_claims(AuthService.create_access_token(_user()))
        second = jwt.get_unverified_claims(AuthService.create_access_token(_user()))

        assert first["iss"] == settings.JWT_ISSUER
        assert first["aud"] == settings.JWT_AUDIENCE
        assert first["nameid"] == "7"
        assert first["jti"] != second["jti"]

    def test_expired_token_rejected(self):
        token = AuthService.create_access_token(_user(), expires_delta=timedelta(seconds=-30))
        assert AuthService.decode_access_token(token) is None

    def test_wrong_audience_rejected(self):
        token = jwt.encode(
            {"sub": "a@b.com", "nameid": "1", "iss": settings.JWT_ISSUER, "aud": "someone-else"},
            settings.JWT_SECRET_KEY,
            algorithm=ALGORITHM,
        )
        assert AuthService.decode_access_token(token) is None

    def test_wrong_issuer_rejected(self):
        token = jwt.encode(
            {"sub": "a@b.com", "nameid": "1", "iss": "someone-else", "aud": settings.JWT_AUDIENCE},
            settings.JWT_SECRET_KEY,
            algorithm=ALGORITHM,
        )
        assert AuthService.decode_access_token(token) is None

    def test_foreign_signature_rejected(self):
        token = jwt.encode(
            {"sub": "a@b.com", "nameid": "1", "iss": settings.JWT_ISSUER, "aud": settings.JWT_AUDIENCE},
            "a-completely-different-secret-key-value",
            algorithm=ALGORITHM,
        )
        assert AuthService.decode_access_token(token) is None

    def test_garbage_rejected(self):
        assert AuthService.decode_access_token("not.a.token") is None


class TestRegistration:

    async def test_hashing_runs_off_the_event_loop(self, db, monkeypatch):
        loop_thread = threading.get_ident()
        hashing_threads = []
        original = AuthService.hash_password

        def recording_hash(password):
            hashing_threads.append(threading.get_ident())
            return original(password)

        monkeypatch.setattr(AuthService, "hash_password", staticmethod(recording_hash))
        assert await AuthService.register("thread@example.com", "abc12345") is not None
        assert hashing_threads and loop_thread not in hashing_threads

    async def test_duplicate_insert_returns_none(self, db):
        first = await UserRepository.create_user("dup@example.com", "hash", ROLE_CUSTOMER)
        second = await UserRepository.create_user("DUP@example.com", "hash", ROLE_CUSTOMER)

        assert first is not None
        assert second is None
        rows = await db.fetch_all("SELECT id FROM users WHERE lower(email) = 'dup@example.com'")
        assert len(rows) == 1
        assert await UserRepository.get_roles(first) == [ROLE_CUSTOMER]
