"""Donation checkout and verification against Stripe."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import stripe
import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from hands_of_hope.config import Settings
from hands_of_hope.core.exceptions import (
    EmailDeliveryException,
    InvalidPaymentSessionException,
    PaymentNotCompletedException,
    PaymentProviderException,
)
from hands_of_hope.models.donations import donations
from hands_of_hope.services.email_service import EmailService

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


def _plain_dict(obj: Any) -> dict[str, Any]:
    """Convert a Stripe object (or mapping) to a plain dict."""
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return dict(obj)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)


def to_cents(amount: Decimal) -> int:
    """Convert a currency amount to integer minor units."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService:
    """Stripe Checkout wrapper; the provider is the source of truth for payment status."""

    def __init__(
        self,
        api_key: str,
        currency: str = "usd",
        success_url: str = "",
        cancel_url: str = "",
        email_service: EmailService | None = None,
    ):
        """Initialize with Stripe credentials and redirect URLs."""
        self.api_key = api_key
        self.currency = currency.lower()
        self.success_url = success_url
        self.cancel_url = cancel_url
        self.email = email_service

    @classmethod
    def from_settings(
        cls, config: Settings, email_service: EmailService | None = None
    ) -> "PaymentService":
        """Build a payment service from application settings."""
        return cls(
            api_key=config.stripe_secret_key,
            currency=config.payment_currency,
            success_url=config.checkout_success_url,
            cancel_url=config.checkout_cancel_url,
            email_service=email_service,
        )

    async def create_checkout_session(
        self,
        amount: Decimal,
        is_monthly: bool = False,
        donor_name: str | None = None,
        donor_email: str | None = None,
    ) -> str:
        """
        Create a hosted checkout page for a donation.

        Args:
            amount: Donation amount in whole currency units
            is_monthly: Recurring monthly subscription instead of a one-off payment
            donor_name: Optional donor name, echoed back in metadata
            donor_email: Optional donor email, prefilled on the checkout page

        Returns:
            Checkout page URL

        Raises:
            PaymentProviderException: If Stripe rejects the request
        """
        price_data: dict[str, Any] = {
            "currency": self.currency,
            "product_data": {"name": "Monthly Donation" if is_monthly else "One-time Donation"},
            "unit_amount": to_cents(amount),
        }
        if is_monthly:
            price_data["recurring"] = {"interval": "month"}

        metadata = {"frequency": "monthly" if is_monthly else "once"}
        if donor_name:
            metadata["donor_name"] = donor_name
        if donor_email:
            metadata["donor_email"] = donor_email

        params: dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": [{"price_data": price_data, "quantity": 1}],
            "mode": "subscription" if is_monthly else "payment",
            "success_url": self.success_url,
            "cancel_url": self.cancel_url,
            "metadata": metadata,
        }
        if donor_email:
            params["customer_email"] = donor_email

        try:
            session = await run_in_threadpool(
                stripe.checkout.Session.create, api_key=self.api_key, **params
            )
        except stripe.StripeError as e:
            logger.error("checkout_session_failed", error=str(e))
            raise PaymentProviderException("Could not start checkout") from e

        logger.info(
            "checkout_session_created",
            session_id=session.id,
            amount=str(amount),
            is_monthly=is_monthly,
        )
        return session.url

    async def retrieve_session(self, session_id: str) -> Any:
        """
        Fetch a checkout session from Stripe.

        Raises:
            InvalidPaymentSessionException: If Stripe does not know the session
            PaymentProviderException: On any other Stripe failure
        """
        try:
            return await run_in_threadpool(
                stripe.checkout.Session.retrieve, session_id, api_key=self.api_key
            )
        except stripe.InvalidRequestError as e:
            raise InvalidPaymentSessionException() from e
        except stripe.StripeError as e:
            logger.error("checkout_session_lookup_failed", session_id=session_id, error=str(e))
            raise PaymentProviderException() from e

    @staticmethod
    async def get_donation_by_session(db: AsyncSession, session_id: str) -> dict | None:
        """Get a recorded donation by checkout session ID."""
        result = await db.execute(select(donations).where(donations.c.session_id == session_id))
        donation = result.mappings().first()
        return dict(donation) if donation else None

    @staticmethod
    async def list_donations(db: AsyncSession) -> list[dict]:
        """Donations, newest first."""
        result = await db.execute(select(donations).order_by(donations.c.created_at.desc()))
        return [dict(row) for row in result.mappings().all()]

    async def verify_payment(self, db: AsyncSession, session_id: str) -> dict:
        """
        Confirm a checkout session is paid and record the donation.

        Recording is idempotent on the session ID; the receipt goes out only
        the first time.

        Args:
            db: Database session
            session_id: Checkout session ID from the success redirect

        Returns:
            The donation, including the session metadata

        Raises:
            InvalidPaymentSessionException: If the session is unknown
            PaymentNotCompletedException: If the session is not paid
        """
        session = await self.retrieve_session(session_id)

        payment_status = getattr(session, "payment_status", None)
        if payment_status != "paid":
            logger.info("payment_not_completed", session_id=session_id, status=payment_status)
            raise PaymentNotCompletedException()

        existing = await self.get_donation_by_session(db, session_id)
        if existing:
            return existing

        metadata = _plain_dict(getattr(session, "metadata", None))
        customer = _plain_dict(getattr(session, "customer_details", None))
        amount_total = getattr(session, "amount_total", None) or 0

        values = {
            "session_id": session_id,
            "amount": (Decimal(amount_total) / 100).quantize(CENT),
            "currency": (getattr(session, "currency", None) or self.currency).lower(),
            "is_monthly": getattr(session, "mode", None) == "subscription",
            "donor_name": metadata.get("donor_name") or customer.get("name"),
            "donor_email": customer.get("email") or metadata.get("donor_email"),
            "payment_status": payment_status,
            "session_metadata": metadata,
        }

        try:
            result = await db.execute(donations.insert().values(**values).returning(donations))
            await db.commit()
        except IntegrityError:
            # Recorded by a concurrent verification
            await db.rollback()
            return await self.get_donation_by_session(db, session_id)  # type: ignore[return-value]

        donation = dict(result.mappings().one())
        logger.info("donation_recorded", session_id=session_id, amount=str(donation["amount"]))

        if self.email and donation["donor_email"]:
            try:
                await self.email.send_donation_receipt(donation["donor_email"], donation)
            except EmailDeliveryException:
                logger.warning("donation_receipt_not_sent", session_id=session_id)

        return donation

