# 🔹 FILE: hiring_api/errors.py
# --------------------------------------------------------------
# Error kinds raised by the service layer.
# Every kind carries the HTTP status it maps to; main.py turns
# them into the {success: false, message} envelope.
# --------------------------------------------------------------
from typing import Optional

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UploadError(AppError):
    """The attachment store failed or answered with garbage."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Attachment store error"


class UploadRejected(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid extension"


class PayloadTooLarge(AppError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_message = "File is too large. Maximum size is 10MB."


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed"


class AccountInactiveError(ForbiddenError):
    default_message = "user is not active"
