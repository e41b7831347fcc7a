"""Custom exceptions for the service layer."""

from uuid import UUID


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, code: str = "SERVICE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(ServiceError):
    """Missing or malformed input."""

    def __init__(self, message: str):
        super().__init__(message=message, code="VALIDATION_ERROR")


class ConflictError(ServiceError):
    """An active account already owns the email or identity."""

    def __init__(self, message: str = "User already exists with this email"):
        super().__init__(message=message, code="CONFLICT")


class NotFoundError(ServiceError):
    """Resource not found error."""

    def __init__(self, resource_type: str, resource_id: UUID):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            message=f"{resource_type} with ID {resource_id} not found",
            code=f"{resource_type.upper()}_NOT_FOUND"
        )


class NoteNotFoundError(NotFoundError):
    """Note does not exist or belongs to someone else."""

    def __init__(self, note_id: UUID):
        super().__init__("Note", note_id)


class UserNotFoundError(NotFoundError):
    """User not found error."""

    def __init__(self, user_id: UUID):
        super().__init__("User", user_id)


class AuthenticationError(ServiceError):
    """Missing, malformed or expired bearer token, or a deleted user."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message=message, code="AUTHENTICATION_FAILED")


class InvalidOrExpiredOTPError(ServiceError):
    """
    The submitted code could not be accepted.

    Wrong code, expired code, already verified account and unknown email
    all raise this same error.
    """

    def __init__(self):
        super().__init__(message="Invalid or expired OTP", code="INVALID_OTP")


class InvalidCredentialsError(ServiceError):
    """Unknown email or wrong password."""

    def __init__(self):
        super().__init__(message="Invalid credentials", code="INVALID_CREDENTIALS")


class InvalidIdentityCredentialError(ServiceError):
    """The Google credential was rejected or lacks required profile fields."""

    def __init__(self, message: str = "Invalid Google token"):
        super().__init__(message=message, code="INVALID_IDENTITY_CREDENTIAL")


class DeliveryError(ServiceError):
    """The one-time code could not be sent."""

    def __init__(self, message: str = "Failed to send OTP email"):
        super().__init__(message=message, code="DELIVERY_FAILED")


class ServerError(ServiceError):
    """Unexpected failure of the store or a remote dependency."""

    def __init__(self, message: str = "Server error"):
        super().__init__(message=message, code="SERVER_ERROR")
