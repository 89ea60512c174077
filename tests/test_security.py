"""Tests for password hashing and JWT handling."""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_active_user,
    get_password_hash,
    verify_password,
)
from app.main import app
from app.models.base import utcnow
from app.models.user import User, UserRole


class TestPasswordHashing:
    """Tests for the passlib context."""

    def test_hash_and_verify(self) -> None:
        hashed = get_password_hash("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong-pass", hashed)


class TestTokens:
    """Tests for access and refresh tokens."""

    def test_access_token_round_trip(self) -> None:
        token = create_access_token({"sub": "maria"})
        payload = decode_token(token, ACCESS_TOKEN_TYPE)
        assert payload["sub"] == "maria"
        assert payload["type"] == ACCESS_TOKEN_TYPE

    def test_refresh_token_carries_jti(self) -> None:
        token, jti, expires_at = create_refresh_token("maria")
        payload = decode_token(token, REFRESH_TOKEN_TYPE)
        assert payload["jti"] == jti
        assert payload["sub"] == "maria"
        assert expires_at is not None

    def test_refresh_expiry_is_naive_utc(self) -> None:
        token, _, expires_at = create_refresh_token("maria")
        exp = decode_token(token, REFRESH_TOKEN_TYPE)["exp"]

        assert expires_at.tzinfo is None
        assert expires_at.replace(microsecond=0) == datetime.fromtimestamp(
            exp, timezone.utc
        ).replace(tzinfo=None)
        remaining = expires_at - utcnow()
        assert timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS - 1) < remaining

    def test_refresh_token_rejected_as_access(self) -> None:
        token, _, _ = create_refresh_token("maria")
        with pytest.raises(AuthenticationError):
            decode_token(token, ACCESS_TOKEN_TYPE)

    def test_expired_token_rejected(self) -> None:
        token = create_access_token({"sub": "maria"}, expires_delta=timedelta(seconds=-5))
        with pytest.raises(AuthenticationError):
            decode_token(token, ACCESS_TOKEN_TYPE)

    def test_garbage_token_rejected(self) -> None:
        with pytest.raises(AuthenticationError):
            decode_token("not-a-jwt", ACCESS_TOKEN_TYPE)


class TestAuthFlow:
    """Tests for login, refresh rotation and logout through the API."""

    @pytest.fixture
    def stored_user(self, run_in_db) -> None:
        async def create(session) -> None:
            session.add(
                User(
                    username="ana",
                    email="ana@example.com",
                    hashed_password=get_password_hash("password123"),
                    role=UserRole.STAFF,
                    is_active=True,
                )
            )
            await session.commit()

        run_in_db(create)

    def _login(self, client) -> dict:
        response = client.post(
            "/api/auth/login", json={"username": "ana", "password": "password123"}
        )
        assert response.status_code == 200
        return response.json()

    def test_login_returns_token_pair(self, client, stored_user) -> None:
        tokens = self._login(client)
        assert tokens["token_type"] == "bearer"
        assert tokens["expires_in"] > 0
        assert decode_token(tokens["access_token"], ACCESS_TOKEN_TYPE)["sub"] == "ana"

    def test_wrong_password_rejected(self, client, stored_user) -> None:
        response = client.post(
            "/api/auth/login", json={"username": "ana", "password": "nope"}
        )
        assert response.status_code == 401

    def test_refresh_rotates_session(self, client, stored_user) -> None:
        tokens = self._login(client)

        response = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 200
        assert response.json()["refresh_token"] != tokens["refresh_token"]

        # The old refresh token was revoked by the rotation
        again = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert again.status_code == 401

    def test_logout_revokes_refresh_token(self, client, stored_user) -> None:
        tokens = self._login(client)

        response = client.post(
            "/api/auth/logout", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 200

        response = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 401

    def test_register_requires_admin(self, client) -> None:
        response = client.post(
            "/api/auth/register",
            json={
                "username": "novo",
                "email": "novo@example.com",
                "password": "password123",
            },
        )
        assert response.status_code == 403

    def test_me_returns_current_user(self, client) -> None:
        response = client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["username"] == "maria"
        assert response.json()["role"] == "staff"

    def test_inactive_user_cannot_log_in(self, client, run_in_db) -> None:
        async def create(session) -> None:
            session.add(
                User(
                    username="rui",
                    email="rui@example.com",
                    hashed_password=get_password_hash("password123"),
                    role=UserRole.STAFF,
                    is_active=False,
                )
            )
            await session.commit()

        run_in_db(create)

        response = client.post(
            "/api/auth/login", json={"username": "rui", "password": "password123"}
        )
        assert response.status_code == 403
        assert response.json()["error_type"] == "inactive_user"


class TestRoleChecks:
    """Tests for the staff role required on write endpoints."""

    @pytest.fixture
    def as_user(self, client):
        def switch(role: UserRole, is_active: bool = True) -> None:
            user = User(
                id=2,
                username="leitor",
                email="leitor@example.com",
                hashed_password="not-used",
                role=role,
                is_active=is_active,
                created_at=datetime(2024, 1, 1),
            )
            app.dependency_overrides[get_active_user] = lambda: user

        return switch

    def test_viewer_can_read(self, client, as_user) -> None:
        as_user(UserRole.VIEWER)
        assert client.get("/api/owners/").status_code == 200

    def test_viewer_cannot_write(self, client, as_user) -> None:
        as_user(UserRole.VIEWER)
        response = client.post("/api/owners/", json={"name": "Rita Costa"})

        assert response.status_code == 403
        body = response.json()
        assert body["error_type"] == "access_denied"
        assert body["details"]["required_role"] == "Staff"
        assert client.get("/api/owners/").json() == []

    def test_inactive_staff_cannot_write(self, client, as_user) -> None:
        as_user(UserRole.STAFF, is_active=False)
        response = client.post("/api/owners/", json={"name": "Rita Costa"})
        assert response.status_code == 403
        assert response.json()["error_type"] == "inactive_user"

    def test_admin_can_write(self, client, as_user) -> None:
        as_user(UserRole.ADMIN)
        response = client.post("/api/owners/", json={"name": "Rita Costa"})
        assert response.status_code == 200
