"""Public event endpoints."""

from fastapi import APIRouter, status

from hands_of_hope.dependencies import CacheManagerDep, DatabaseSession, EmailServiceDep
from hands_of_hope.schemas.base import SuccessResponse
from hands_of_hope.schemas.events import EventRegistrationRequest, EventResponse
from hands_of_hope.services.event_service import EventService

router = APIRouter(prefix="/events")


@router.get(
    "",
    response_model=list[EventResponse],
    status_code=status.HTTP_200_OK,
    summary="List events",
)
async def list_events(
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
) -> list[EventResponse]:
    """Upcoming and past events with registrant counts."""
    events = await EventService(cache_manager=cache_manager).list_events(db)
    return [EventResponse.model_validate(event) for event in events]


@router.post(
    "/register",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Register for an event",
)
async def register_for_event(
    request: EventRegistrationRequest,
    db: DatabaseSession,
    cache_manager: CacheManagerDep,
    email_service: EmailServiceDep,
) -> SuccessResponse:
    """Register once per email; a ticket is emailed after the registration is saved."""
    await EventService(email_service, cache_manager).register(
        db, request.event_id, request.name, request.email
    )
    return SuccessResponse()
