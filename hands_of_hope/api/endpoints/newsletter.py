"""Newsletter broadcast endpoints."""

from fastapi import APIRouter, Depends, status

from hands_of_hope.dependencies import (
    CurrentAdmin,
    DatabaseSession,
    EmailServiceDep,
    rate_limited,
)
from hands_of_hope.schemas.base import SuccessResponse
from hands_of_hope.schemas.newsletter import (
    BroadcastOtpRequest,
    NewsletterRequest,
    NewsletterResponse,
)
from hands_of_hope.services.broadcast_service import BroadcastService

router = APIRouter()


@router.post(
    "/admin/request-broadcast-otp",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Ask the super-admin for a broadcast approval code",
    dependencies=[Depends(rate_limited("broadcast_otp"))],
)
async def request_broadcast_otp(
    request: BroadcastOtpRequest,
    db: DatabaseSession,
    current_admin: CurrentAdmin,
    email_service: EmailServiceDep,
) -> SuccessResponse:
    """Email a fresh approval code to the super-admin, replacing any pending one."""
    await BroadcastService(email_service).request_broadcast_otp(
        db, current_user=current_admin["username"], subject=request.subject
    )
    return SuccessResponse()


@router.post(
    "/send-newsletter",
    response_model=NewsletterResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a newsletter to all subscribers",
    dependencies=[Depends(rate_limited("send_newsletter"))],
)
async def send_newsletter(
    request: NewsletterRequest,
    db: DatabaseSession,
    current_admin: CurrentAdmin,
    email_service: EmailServiceDep,
) -> NewsletterResponse:
    """
    Broadcast to every subscriber as blind copies.

    Regular admins must include the approval code the super-admin received.
    """
    count = await BroadcastService(email_service).send_newsletter(
        db,
        subject=request.subject,
        message=request.message,
        current_user=current_admin["username"],
        otp=request.otp,
    )
    return NewsletterResponse(count=count)
