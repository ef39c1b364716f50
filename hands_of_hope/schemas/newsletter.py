"""Broadcast schemas."""

from pydantic import Field

from hands_of_hope.schemas.base import CamelModel


class BroadcastOtpRequest(CamelModel):
    """Ask the super-admin to approve a broadcast."""

    subject: str = Field(..., min_length=1, max_length=200)


class NewsletterRequest(CamelModel):
    """Broadcast to every subscriber."""

    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    otp: str | None = Field(default=None, max_length=16)


class NewsletterResponse(CamelModel):
    """Number of recipients the broadcast went to."""

    success: bool = True
    count: int
