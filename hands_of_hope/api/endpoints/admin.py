"""Admin endpoints: account management, dashboard data and events."""

from fastapi import APIRouter, status

from hands_of_hope.dependencies import (
    CacheManagerDep,
    CurrentAdmin,
    DatabaseSession,
    SuperAdmin,
)
from hands_of_hope.schemas.admin import (
    AddAdminRequest,
    AdminDataResponse,
    DeleteAdminRequest,
)
from hands_of_hope.schemas.base import SuccessResponse
from hands_of_hope.schemas.events import EventCreate, EventCreatedResponse, EventDeleteRequest
from hands_of_hope.services.admin_service import AdminService
from hands_of_hope.services.event_service import EventService
from hands_of_hope.services.outreach_service import OutreachService
from hands_of_hope.services.payment_service import PaymentService

router = APIRouter(prefix="/admin")


@router.post(
    "/add-user",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Create an admin (super-admin only)",
)
async def add_user(
    request: AddAdminRequest,
    db: DatabaseSession,
    super_admin: SuperAdmin,
) -> SuccessResponse:
    """Create a regular admin account."""
    await AdminService.add_admin(
        db,
        requestor_username=super_admin["username"],
        new_username=request.new_username,
        new_email=request.new_email,
        new_password=request.new_password,
    )
    return SuccessResponse()


@router.post(
    "/delete-user",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete an admin (super-admin only)",
)
async def delete_user(
    request: DeleteAdminRequest,
    db: DatabaseSession,
    current_admin: CurrentAdmin,
) -> SuccessResponse:
    """
    Delete another admin account.

    Deleting one's own account is refused for every role.
    """
    await AdminService.delete_admin(
        db,
        requestor_username=current_admin["username"],
        target_id=request.target_id,
    )
    return SuccessResponse()


@router.post(
    "/data",
    response_model=AdminDataResponse,
    status_code=status.HTTP_200_OK,
    summary="Dashboard data",
)
async def get_admin_data(
    db: DatabaseSession,
    current_admin: CurrentAdmin,
) -> AdminDataResponse:
    """All collections for the dashboard, with admin credentials removed."""
    return AdminDataResponse(
        volunteers=await OutreachService.list_volunteers(db),
        messages=await OutreachService.list_contact_messages(db),
        subscribers=await OutreachService.list_subscribers(db),
        admins=await AdminService.list_admins(db),
        events=await EventService().list_events_with_registrants(db),
        donations=await PaymentService.list_donations(db),
    )


@router.post(
    "/add-event",
    response_model=EventCreatedResponse,
    status_code=status.HTTP_200_OK,
    summary="Create an event",
)
async def add_event(
    request: EventCreate,
    db: DatabaseSession,
    current_admin: CurrentAdmin,
    cache_manager: CacheManagerDep,
) -> EventCreatedResponse:
    """Create an event; any admin may do this."""
    event = await EventService(cache_manager=cache_manager).create_event(db, request)
    return EventCreatedResponse(event=event)


@router.post(
    "/delete-event",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete an event",
)
async def delete_event(
    request: EventDeleteRequest,
    db: DatabaseSession,
    current_admin: CurrentAdmin,
    cache_manager: CacheManagerDep,
) -> SuccessResponse:
    """Delete an event and its registrations."""
    await EventService(cache_manager=cache_manager).delete_event(db, request.event_id)
    return SuccessResponse()
