"""Donation payment endpoints."""

from fastapi import APIRouter, status

from hands_of_hope.dependencies import DatabaseSession, PaymentServiceDep
from hands_of_hope.schemas.donations import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)

router = APIRouter()


@router.post(
    "/create-checkout-session",
    response_model=CheckoutSessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Start a donation checkout",
)
async def create_checkout_session(
    request: CheckoutSessionRequest,
    payment_service: PaymentServiceDep,
) -> CheckoutSessionResponse:
    """Create a hosted checkout page for a one-time or monthly donation."""
    url = await payment_service.create_checkout_session(
        amount=request.amount,
        is_monthly=request.is_monthly,
        donor_name=request.donor_name,
        donor_email=request.donor_email,
    )
    return CheckoutSessionResponse(url=url)


@router.post(
    "/verify-payment",
    response_model=VerifyPaymentResponse,
    status_code=status.HTTP_200_OK,
    summary="Verify a completed checkout",
)
async def verify_payment(
    request: VerifyPaymentRequest,
    db: DatabaseSession,
    payment_service: PaymentServiceDep,
) -> VerifyPaymentResponse:
    """Confirm the payment with the provider and record the donation."""
    donation = await payment_service.verify_payment(db, request.session_id)

    return VerifyPaymentResponse(
        payment_status=donation["payment_status"],
        amount=donation["amount"],
        currency=donation["currency"],
        is_monthly=donation["is_monthly"],
        metadata=donation["session_metadata"] or {},
    )
