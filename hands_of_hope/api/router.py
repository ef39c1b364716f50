"""API router configuration."""

from fastapi import APIRouter

from hands_of_hope.api.endpoints import (
    admin,
    auth,
    events,
    health,
    newsletter,
    outreach,
    payments,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(admin.router, tags=["Admin"])
api_router.include_router(newsletter.router, tags=["Newsletter"])
api_router.include_router(events.router, tags=["Events"])
api_router.include_router(payments.router, tags=["Payments"])
api_router.include_router(outreach.router, tags=["Forms"])
