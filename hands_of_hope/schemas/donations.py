"""Payment and donation schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import EmailStr, Field

from hands_of_hope.schemas.base import CamelModel


class CheckoutSessionRequest(CamelModel):
    """Donation checkout request; amount is in whole currency units."""

    amount: Decimal = Field(..., gt=0, le=Decimal("1000000"), decimal_places=2)
    is_monthly: bool = False
    donor_name: str | None = Field(default=None, max_length=200)
    donor_email: EmailStr | None = None


class CheckoutSessionResponse(CamelModel):
    """Hosted checkout page."""

    url: str


class VerifyPaymentRequest(CamelModel):
    """Checkout session to verify."""

    session_id: str = Field(..., min_length=1, max_length=255)


class VerifyPaymentResponse(CamelModel):
    """Verified payment as reported by the provider."""

    success: bool = True
    payment_status: str
    amount: float
    currency: str
    is_monthly: bool
    metadata: dict[str, Any] = {}


class DonationResponse(CamelModel):
    """Recorded donation."""

    id: UUID
    session_id: str
    amount: float
    currency: str
    is_monthly: bool
    donor_name: str | None = None
    donor_email: str | None = None
    payment_status: str
    created_at: datetime | None = None
