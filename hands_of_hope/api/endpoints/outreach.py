"""Public form endpoints."""

from fastapi import APIRouter, status

from hands_of_hope.dependencies import DatabaseSession, EmailServiceDep
from hands_of_hope.schemas.base import SuccessResponse
from hands_of_hope.schemas.outreach import (
    ContactMessageCreate,
    SubscribeRequest,
    VolunteerApplication,
)
from hands_of_hope.services.outreach_service import OutreachService

router = APIRouter()


@router.post(
    "/apply-volunteer",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit a volunteer application",
)
async def apply_volunteer(
    request: VolunteerApplication,
    db: DatabaseSession,
    email_service: EmailServiceDep,
) -> SuccessResponse:
    await OutreachService(email_service).apply_volunteer(db, request)
    return SuccessResponse()


@router.post(
    "/contact-us",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a contact message",
)
async def contact_us(
    request: ContactMessageCreate,
    db: DatabaseSession,
) -> SuccessResponse:
    await OutreachService.save_contact_message(db, request)
    return SuccessResponse()


@router.post(
    "/subscribe",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Subscribe to the newsletter",
)
async def subscribe(
    request: SubscribeRequest,
    db: DatabaseSession,
) -> SuccessResponse:
    """Add an email to the newsletter list; subscribing twice is a 400."""
    await OutreachService.subscribe(db, request.email)
    return SuccessResponse()
