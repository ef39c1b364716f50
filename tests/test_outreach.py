"""Tests for public form intake."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from hands_of_hope.core.exceptions import AlreadySubscribedException
from hands_of_hope.models.outreach import contact_messages, subscribers, volunteers
from hands_of_hope.schemas.outreach import VolunteerApplication
from hands_of_hope.services.outreach_service import OutreachService


async def _count(db, table) -> int:
    result = await db.execute(select(func.count()).select_from(table))
    return result.scalar_one()


@pytest.mark.asyncio
class TestSubscribe:
    """Tests for newsletter sign-up."""

    async def test_subscribe_normalizes_email(self, db_session):
        subscriber = await OutreachService.subscribe(db_session, "  Fan@Example.COM ")

        assert subscriber["email"] == "fan@example.com"
        assert await OutreachService.list_subscriber_emails(db_session) == ["fan@example.com"]

    async def test_subscribe_twice(self, db_session):
        await OutreachService.subscribe(db_session, "fan@example.com")

        with pytest.raises(AlreadySubscribedException):
            await OutreachService.subscribe(db_session, "FAN@example.com")

        assert await _count(db_session, subscribers) == 1

    async def test_subscribe_endpoint(self, client: AsyncClient, db_session):
        response = await client.post("/subscribe", json={"email": "fan@example.com"})
        assert response.status_code == 200
        assert response.json() == {"success": True}

        response = await client.post("/subscribe", json={"email": "fan@example.com"})
        assert response.status_code == 400
        assert response.json() == {"error": "Email already subscribed"}

        assert await _count(db_session, subscribers) == 1

    async def test_subscribe_invalid_email(self, client: AsyncClient):
        response = await client.post("/subscribe", json={"email": "not-an-email"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Request validation failed"
        assert data["details"]


@pytest.mark.asyncio
class TestVolunteer:
    """Tests for volunteer applications."""

    APPLICATION = {
        "firstName": "Sam",
        "lastName": "Rivera",
        "email": "sam@example.com",
        "phone": "555-0100",
        "skills": "First aid",
        "availability": "Weekends",
    }

    async def test_apply_notifies_inbox(self, db_session, email_service):
        application = VolunteerApplication.model_validate(self.APPLICATION)

        volunteer = await OutreachService(email_service).apply_volunteer(db_session, application)

        assert volunteer["first_name"] == "Sam"
        assert volunteer["skills"] == "First aid"
        assert len(email_service.sent) == 1
        assert email_service.sent[0]["to"] == "team@handsofhope.test"
        assert email_service.sent[0]["subject"] == "New Volunteer: Sam"

    async def test_apply_endpoint(self, client: AsyncClient, db_session, email_service):
        response = await client.post("/apply-volunteer", json=self.APPLICATION)

        assert response.status_code == 200
        assert await _count(db_session, volunteers) == 1
        assert len(email_service.sent) == 1

    async def test_apply_kept_when_notice_fails(
        self, client: AsyncClient, db_session, email_service
    ):
        email_service.fail = True

        response = await client.post("/apply-volunteer", json=self.APPLICATION)

        assert response.status_code == 200
        assert await _count(db_session, volunteers) == 1

    async def test_apply_missing_name(self, client: AsyncClient):
        response = await client.post(
            "/apply-volunteer",
            json={"lastName": "Rivera", "email": "sam@example.com"},
        )

        assert response.status_code == 400


@pytest.mark.asyncio
class TestContact:
    """Tests for the contact form."""

    async def test_contact_endpoint(self, client: AsyncClient, db_session, admin_headers):
        response = await client.post(
            "/contact-us",
            json={
                "firstName": "Lee",
                "lastName": "Chen",
                "email": "lee@example.com",
                "subject": "Partnership",
                "message": "We would like to help.",
            },
        )

        assert response.status_code == 200
        assert await _count(db_session, contact_messages) == 1

        response = await client.post("/admin/data", headers=admin_headers)
        messages = response.json()["messages"]
        assert len(messages) == 1
        assert messages[0]["firstName"] == "Lee"
        assert messages[0]["message"] == "We would like to help."

    async def test_contact_requires_message(self, client: AsyncClient):
        response = await client.post(
            "/contact-us",
            json={"firstName": "Lee", "lastName": "Chen", "email": "lee@example.com"},
        )

        assert response.status_code == 400
