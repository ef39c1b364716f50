"""Tests for login and password reset."""

from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hands_of_hope.core.exceptions import (
    AccountNotFoundException,
    EmailDeliveryException,
    InvalidCredentialsException,
    InvalidOrExpiredCodeException,
)
from hands_of_hope.core.security import decode_access_token, verify_password
from hands_of_hope.main import app
from hands_of_hope.models.admins import admins
from hands_of_hope.services.auth_service import AuthService
from hands_of_hope.services.email_service import get_email_service
from tests.conftest import ADMIN_PASSWORD, SUPER_ADMIN_PASSWORD


async def _admin_row(db: AsyncSession, username: str) -> dict:
    result = await db.execute(select(admins).where(admins.c.username == username))
    return dict(result.mappings().one())


@pytest.mark.asyncio
class TestLogin:
    """Tests for AuthService.login and /auth/login."""

    async def test_login_returns_stored_role(self, db_session, email_service, regular_admin):
        service = AuthService(email_service)

        root = await service.login(db_session, "root", SUPER_ADMIN_PASSWORD)
        alice = await service.login(db_session, "alice", ADMIN_PASSWORD)

        assert root["role"] == "superadmin"
        assert alice["role"] == "admin"
        assert alice["username"] == "alice"

    async def test_login_wrong_password(self, db_session, email_service, super_admin):
        with pytest.raises(InvalidCredentialsException):
            await AuthService(email_service).login(db_session, "root", "not-the-password")

    async def test_login_unknown_user(self, db_session, email_service, super_admin):
        with pytest.raises(InvalidCredentialsException):
            await AuthService(email_service).login(db_session, "ghost", SUPER_ADMIN_PASSWORD)

    async def test_login_endpoint(self, client: AsyncClient, super_admin):
        response = await client.post(
            "/auth/login",
            json={"username": "root", "password": SUPER_ADMIN_PASSWORD},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["username"] == "root"
        assert data["role"] == "superadmin"
        assert data["tokenType"] == "bearer"

        payload = decode_access_token(data["accessToken"])
        assert payload is not None
        assert payload["sub"] == str(super_admin["id"])
        assert payload["role"] == "superadmin"

    async def test_login_endpoint_bad_password(self, client: AsyncClient, super_admin):
        response = await client.post(
            "/auth/login",
            json={"username": "root", "password": "wrong"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid username or password"}

    async def test_login_needs_no_email_sender(self, db_session, super_admin):
        service = AuthService()

        identity = await service.login(db_session, "root", SUPER_ADMIN_PASSWORD)

        payload = decode_access_token(service.create_token(identity))
        assert payload["username"] == "root"

    async def test_login_endpoint_does_not_build_mailer(self, client: AsyncClient, super_admin):
        def no_mailer():
            raise AssertionError("login must not construct an email sender")

        app.dependency_overrides[get_email_service] = no_mailer

        response = await client.post(
            "/auth/login",
            json={"username": "root", "password": SUPER_ADMIN_PASSWORD},
        )

        assert response.status_code == 200

    async def test_login_rate_limited(self, client: AsyncClient, redis_mock, super_admin):
        redis_mock.get.return_value = "1000"

        response = await client.post(
            "/auth/login",
            json={"username": "root", "password": SUPER_ADMIN_PASSWORD},
        )

        assert response.status_code == 429


@pytest.mark.asyncio
class TestPasswordReset:
    """Tests for the reset code flow."""

    async def test_request_reset_by_username(self, db_session, email_service, super_admin):
        await AuthService(email_service).request_password_reset(db_session, "root")

        row = await _admin_row(db_session, "root")
        assert row["reset_token"] is not None
        assert len(row["reset_token"]) == 6
        assert row["reset_token"].isdigit()
        assert row["reset_token_expiry"] is not None

        assert len(email_service.sent) == 1
        assert email_service.sent[0]["to"] == "root@handsofhope.test"
        assert row["reset_token"] in email_service.sent[0]["html"]

    async def test_request_reset_by_email(self, db_session, email_service, super_admin):
        await AuthService(email_service).request_password_reset(
            db_session, "Root@HandsOfHope.test"
        )

        row = await _admin_row(db_session, "root")
        assert row["reset_token"] is not None

    async def test_request_reset_without_sender(self, db_session, super_admin):
        with pytest.raises(EmailDeliveryException):
            await AuthService().request_password_reset(db_session, "root")

        row = await _admin_row(db_session, "root")
        assert row["reset_token"] is None

    async def test_request_reset_unknown_account(self, db_session, email_service, super_admin):
        with pytest.raises(AccountNotFoundException):
            await AuthService(email_service).request_password_reset(db_session, "nobody")

        assert email_service.sent == []

    async def test_reset_with_known_code(
        self, db_session, email_service, super_admin, monkeypatch
    ):
        monkeypatch.setattr(
            "hands_of_hope.services.auth_service.generate_otp", lambda: "482913"
        )
        service = AuthService(email_service)
        old_hash = (await _admin_row(db_session, "root"))["password_hash"]

        await service.request_password_reset(db_session, "root")
        await service.reset_password(db_session, "482913", "NewPass1")

        row = await _admin_row(db_session, "root")
        assert row["reset_token"] is None
        assert row["reset_token_expiry"] is None
        assert verify_password("NewPass1", row["password_hash"])
        assert not verify_password(SUPER_ADMIN_PASSWORD, row["password_hash"])
        assert row["password_hash"] != old_hash

    async def test_reset_code_single_use(self, db_session, email_service, super_admin):
        service = AuthService(email_service)
        await service.request_password_reset(db_session, "root")
        code = (await _admin_row(db_session, "root"))["reset_token"]

        await service.reset_password(db_session, code, "NewPass1")

        with pytest.raises(InvalidOrExpiredCodeException):
            await service.reset_password(db_session, code, "OtherPass2")

        row = await _admin_row(db_session, "root")
        assert verify_password("NewPass1", row["password_hash"])

    async def test_reset_wrong_code(self, db_session, email_service, super_admin):
        service = AuthService(email_service)
        await service.request_password_reset(db_session, "root")
        code = (await _admin_row(db_session, "root"))["reset_token"]
        wrong = "100000" if code != "100000" else "100001"

        with pytest.raises(InvalidOrExpiredCodeException):
            await service.reset_password(db_session, wrong, "NewPass1")

        row = await _admin_row(db_session, "root")
        assert row["reset_token"] == code

    async def test_reset_expired_code(self, db_session, email_service, super_admin):
        service = AuthService(email_service)
        await service.request_password_reset(db_session, "root")
        code = (await _admin_row(db_session, "root"))["reset_token"]

        await db_session.execute(
            update(admins)
            .where(admins.c.username == "root")
            .values(reset_token_expiry=datetime.now(UTC) - timedelta(minutes=1))
        )
        await db_session.commit()

        with pytest.raises(InvalidOrExpiredCodeException):
            await service.reset_password(db_session, code, "NewPass1")

        row = await _admin_row(db_session, "root")
        assert verify_password(SUPER_ADMIN_PASSWORD, row["password_hash"])

    async def test_reset_non_numeric_code(self, db_session, email_service, super_admin):
        with pytest.raises(InvalidOrExpiredCodeException):
            await AuthService(email_service).reset_password(db_session, "abcdef", "NewPass1")

    async def test_new_request_replaces_pending_code(
        self, db_session, email_service, super_admin, monkeypatch
    ):
        codes = iter(["111111", "222222"])
        monkeypatch.setattr(
            "hands_of_hope.services.auth_service.generate_otp", lambda: next(codes)
        )
        service = AuthService(email_service)

        await service.request_password_reset(db_session, "root")
        await service.request_password_reset(db_session, "root")

        with pytest.raises(InvalidOrExpiredCodeException):
            await service.reset_password(db_session, "111111", "NewPass1")

        await service.reset_password(db_session, "222222", "NewPass1")

    async def test_forgot_and_reset_endpoints(
        self, client: AsyncClient, db_session, email_service, super_admin
    ):
        response = await client.post("/auth/forgot-password", json={"identifier": "root"})
        assert response.status_code == 200
        assert response.json() == {"success": True}

        code = (await _admin_row(db_session, "root"))["reset_token"]

        response = await client.post(
            "/auth/reset-password",
            json={"code": code, "newPassword": "BrandNew9"},
        )
        assert response.status_code == 200

        response = await client.post(
            "/auth/login",
            json={"username": "root", "password": "BrandNew9"},
        )
        assert response.status_code == 200

    async def test_forgot_password_unknown(self, client: AsyncClient, super_admin):
        response = await client.post("/auth/forgot-password", json={"identifier": "ghost"})

        assert response.status_code == 400
        assert response.json() == {"error": "Account not found"}

    async def test_forgot_password_email_failure(
        self, client: AsyncClient, email_service, super_admin
    ):
        email_service.fail = True

        response = await client.post("/auth/forgot-password", json={"identifier": "root"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to send email"}

    async def test_reset_password_endpoint_bad_code(self, client: AsyncClient, super_admin):
        response = await client.post(
            "/auth/reset-password",
            json={"code": "123456", "newPassword": "BrandNew9"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid or expired code"}

    async def test_reset_password_short_password(self, client: AsyncClient, super_admin):
        response = await client.post(
            "/auth/reset-password",
            json={"code": "123456", "newPassword": "short"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Request validation failed"
