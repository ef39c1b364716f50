"""Tests for donation checkout and payment verification."""

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import stripe
from httpx import AsyncClient
from sqlalchemy import func, select

from hands_of_hope.core.exceptions import (
    InvalidPaymentSessionException,
    PaymentNotCompletedException,
    PaymentProviderException,
)
from hands_of_hope.models.donations import donations
from hands_of_hope.services.payment_service import PaymentService, to_cents


def _paid_session(**overrides) -> SimpleNamespace:
    fields = {
        "id": "cs_test_123",
        "payment_status": "paid",
        "amount_total": 2550,
        "currency": "usd",
        "mode": "payment",
        "metadata": {"frequency": "once", "donor_name": "Pat"},
        "customer_details": {"email": "pat@example.com", "name": "Pat Doe"},
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def stripe_create(monkeypatch) -> MagicMock:
    mock = MagicMock(
        return_value=SimpleNamespace(id="cs_test_123", url="https://checkout.test/cs_test_123")
    )
    monkeypatch.setattr(stripe.checkout.Session, "create", mock)
    return mock


@pytest.fixture
def stripe_retrieve(monkeypatch) -> MagicMock:
    mock = MagicMock(return_value=_paid_session())
    monkeypatch.setattr(stripe.checkout.Session, "retrieve", mock)
    return mock


@pytest.fixture
def payment_service(email_service) -> PaymentService:
    return PaymentService(
        api_key="sk_test_dummy",
        currency="USD",
        success_url="https://handsofhope.test/success?session_id={CHECKOUT_SESSION_ID}",
        cancel_url="https://handsofhope.test/donate",
        email_service=email_service,
    )


def test_to_cents():
    assert to_cents(Decimal("25")) == 2500
    assert to_cents(Decimal("25.5")) == 2550
    assert to_cents(Decimal("0.01")) == 1
    assert to_cents(Decimal("19.999")) == 2000


@pytest.mark.asyncio
class TestCheckout:
    """Tests for checkout session creation."""

    async def test_one_time_checkout(self, payment_service, stripe_create):
        url = await payment_service.create_checkout_session(Decimal("25.50"))

        assert url == "https://checkout.test/cs_test_123"
        kwargs = stripe_create.call_args.kwargs
        assert kwargs["api_key"] == "sk_test_dummy"
        assert kwargs["mode"] == "payment"
        assert kwargs["payment_method_types"] == ["card"]
        price_data = kwargs["line_items"][0]["price_data"]
        assert price_data["unit_amount"] == 2550
        assert price_data["currency"] == "usd"
        assert "recurring" not in price_data
        assert kwargs["metadata"] == {"frequency": "once"}
        assert "customer_email" not in kwargs

    async def test_monthly_checkout(self, payment_service, stripe_create):
        await payment_service.create_checkout_session(
            Decimal("10"), is_monthly=True, donor_name="Pat", donor_email="pat@example.com"
        )

        kwargs = stripe_create.call_args.kwargs
        assert kwargs["mode"] == "subscription"
        assert kwargs["line_items"][0]["price_data"]["recurring"] == {"interval": "month"}
        assert kwargs["metadata"] == {
            "frequency": "monthly",
            "donor_name": "Pat",
            "donor_email": "pat@example.com",
        }
        assert kwargs["customer_email"] == "pat@example.com"

    async def test_provider_error(self, payment_service, monkeypatch):
        monkeypatch.setattr(
            stripe.checkout.Session,
            "create",
            MagicMock(side_effect=stripe.APIConnectionError("network down")),
        )

        with pytest.raises(PaymentProviderException):
            await payment_service.create_checkout_session(Decimal("10"))

    async def test_checkout_endpoint(self, client: AsyncClient, stripe_create):
        response = await client.post(
            "/create-checkout-session",
            json={"amount": 50, "isMonthly": True},
        )

        assert response.status_code == 200
        assert response.json() == {"url": "https://checkout.test/cs_test_123"}
        assert stripe_create.call_args.kwargs["mode"] == "subscription"

    @pytest.mark.parametrize("amount", [0, -5, "abc", "10.001"])
    async def test_checkout_rejects_bad_amount(self, client: AsyncClient, stripe_create, amount):
        response = await client.post("/create-checkout-session", json={"amount": amount})

        assert response.status_code == 400
        stripe_create.assert_not_called()


@pytest.mark.asyncio
class TestVerifyPayment:
    """Tests for payment verification."""

    async def test_records_paid_donation(
        self, db_session, payment_service, email_service, stripe_retrieve
    ):
        donation = await payment_service.verify_payment(db_session, "cs_test_123")

        assert donation["amount"] == Decimal("25.50")
        assert donation["currency"] == "usd"
        assert donation["is_monthly"] is False
        assert donation["donor_name"] == "Pat"
        assert donation["donor_email"] == "pat@example.com"
        assert donation["session_metadata"] == {"frequency": "once", "donor_name": "Pat"}

        assert stripe_retrieve.call_args.args == ("cs_test_123",)
        assert len(email_service.sent) == 1
        assert email_service.sent[0]["to"] == "pat@example.com"
        assert "25.50 USD" in email_service.sent[0]["html"]

    async def test_verify_twice_records_once(
        self, db_session, payment_service, email_service, stripe_retrieve
    ):
        first = await payment_service.verify_payment(db_session, "cs_test_123")
        second = await payment_service.verify_payment(db_session, "cs_test_123")

        assert first["id"] == second["id"]
        result = await db_session.execute(select(func.count()).select_from(donations))
        assert result.scalar_one() == 1
        assert len(email_service.sent) == 1

    async def test_subscription_is_monthly(self, db_session, payment_service, monkeypatch):
        monkeypatch.setattr(
            stripe.checkout.Session,
            "retrieve",
            MagicMock(return_value=_paid_session(mode="subscription")),
        )

        donation = await payment_service.verify_payment(db_session, "cs_test_123")

        assert donation["is_monthly"] is True

    async def test_unpaid_session(self, db_session, payment_service, monkeypatch):
        monkeypatch.setattr(
            stripe.checkout.Session,
            "retrieve",
            MagicMock(return_value=_paid_session(payment_status="unpaid")),
        )

        with pytest.raises(PaymentNotCompletedException):
            await payment_service.verify_payment(db_session, "cs_test_123")

        result = await db_session.execute(select(func.count()).select_from(donations))
        assert result.scalar_one() == 0

    async def test_unknown_session(self, db_session, payment_service, monkeypatch):
        monkeypatch.setattr(
            stripe.checkout.Session,
            "retrieve",
            MagicMock(side_effect=stripe.InvalidRequestError("No such session", "id")),
        )

        with pytest.raises(InvalidPaymentSessionException):
            await payment_service.verify_payment(db_session, "cs_missing")

    async def test_receipt_failure_keeps_donation(
        self, db_session, payment_service, email_service, stripe_retrieve
    ):
        email_service.fail = True

        await payment_service.verify_payment(db_session, "cs_test_123")

        assert await PaymentService.get_donation_by_session(db_session, "cs_test_123")

    async def test_verify_endpoint(self, client: AsyncClient, stripe_retrieve, admin_headers):
        response = await client.post("/verify-payment", json={"sessionId": "cs_test_123"})

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "paymentStatus": "paid",
            "amount": 25.5,
            "currency": "usd",
            "isMonthly": False,
            "metadata": {"frequency": "once", "donor_name": "Pat"},
        }

        response = await client.post("/admin/data", headers=admin_headers)
        recorded = response.json()["donations"]
        assert len(recorded) == 1
        assert recorded[0]["sessionId"] == "cs_test_123"
        assert recorded[0]["amount"] == 25.5

    async def test_verify_endpoint_unpaid(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(
            stripe.checkout.Session,
            "retrieve",
            MagicMock(return_value=_paid_session(payment_status="unpaid")),
        )

        response = await client.post("/verify-payment", json={"sessionId": "cs_test_123"})

        assert response.status_code == 400
        assert response.json() == {"error": "Payment not completed"}

    async def test_verify_endpoint_unknown_session(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(
            stripe.checkout.Session,
            "retrieve",
            MagicMock(side_effect=stripe.InvalidRequestError("No such session", "id")),
        )

        response = await client.post("/verify-payment", json={"sessionId": "cs_missing"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid payment session"}
