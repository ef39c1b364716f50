"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class UnauthorizedException(AppException):
    """Unauthorized access exception."""

    def __init__(self, message: str = "Unauthorized"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class ForbiddenException(AppException):
    """Forbidden access exception."""

    def __init__(self, message: str = "Forbidden"):
        """Initialize with 403 status code."""
        super().__init__(message, status_code=403)


class BadRequestException(AppException):
    """Bad request exception."""

    def __init__(self, message: str = "Bad request"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class RateLimitException(AppException):
    """Rate limit exceeded exception."""

    def __init__(self, message: str = "Too many requests, try again later"):
        """Initialize with 429 status code."""
        super().__init__(message, status_code=429)


# Authentication


class InvalidCredentialsException(BadRequestException):
    """Unknown username or wrong password."""

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


class AccountNotFoundException(BadRequestException):
    """No admin matches the given username or email."""

    def __init__(self, message: str = "Account not found"):
        super().__init__(message)


class InvalidOrExpiredCodeException(BadRequestException):
    """Password reset code is wrong, used or past its expiry."""

    def __init__(self, message: str = "Invalid or expired code"):
        super().__init__(message)


# Role-gated administration


class AccessDeniedException(ForbiddenException):
    """Requestor lacks the super-admin role."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class CannotDeleteSelfException(ForbiddenException):
    """An admin tried to delete their own account."""

    def __init__(self, message: str = "Cannot delete your own account"):
        super().__init__(message)


class UserExistsException(BadRequestException):
    """Username or email already taken."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


class SuperAdminNotConfiguredException(AppException):
    """No super-admin account exists."""

    def __init__(self, message: str = "No super admin configured"):
        super().__init__(message, status_code=500)


# Broadcast


class InvalidOtpException(ForbiddenException):
    """Broadcast approval code missing or wrong."""

    def __init__(self, message: str = "Invalid OTP"):
        super().__init__(message)


class NoSubscribersException(BadRequestException):
    """Newsletter has nobody to go to."""

    def __init__(self, message: str = "No subscribers"):
        super().__init__(message)


class AlreadySubscribedException(BadRequestException):
    """Email is already on the newsletter list."""

    def __init__(self, message: str = "Email already subscribed"):
        super().__init__(message)


# Events


class AlreadyRegisteredException(BadRequestException):
    """Email is already registered for the event."""

    def __init__(self, message: str = "Already registered for this event"):
        super().__init__(message)


# Payments


class InvalidPaymentSessionException(BadRequestException):
    """Payment provider does not know the session."""

    def __init__(self, message: str = "Invalid payment session"):
        super().__init__(message)


class PaymentNotCompletedException(BadRequestException):
    """Checkout session exists but is not paid."""

    def __init__(self, message: str = "Payment not completed"):
        super().__init__(message)


# Infrastructure


class EmailDeliveryException(AppException):
    """SMTP send failed."""

    def __init__(self, message: str = "Failed to send email"):
        super().__init__(message, status_code=500)


class PaymentProviderException(AppException):
    """Payment provider call failed."""

    def __init__(self, message: str = "Payment provider error"):
        super().__init__(message, status_code=500)
