from typing import Any, Dict, Optional, Union
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError


class BaseAPIError(Exception):
    """
    Base exception class for API errors.

    Subclasses set status_code, error_code and default_message; callers
    may override the message, the code and attach details.
    """
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(BaseAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_ERROR"
    default_message = "Authentication failed"


class SessionRequired(AuthenticationError):
    """Raised by the session guard; details carry the sign-in route"""
    error_code = "SESSION_REQUIRED"
    default_message = "Authentication required"

    def __init__(self, redirect_to: str = "/auth", message: Optional[str] = None):
        super().__init__(message, details={"redirect": redirect_to})
        self.redirect_to = redirect_to


class InvalidCredentialsException(AuthenticationError):
    error_code = "INVALID_CREDENTIALS"
    default_message = "Invalid login credentials"


class TokenError(AuthenticationError):
    error_code = "TOKEN_ERROR"
    default_message = "Invalid or expired token"


class PermissionDenied(BaseAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "PERMISSION_DENIED"
    default_message = "Permission denied"


class NotFoundError(BaseAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class AmbiguousTenantError(BaseAPIError):
    """More than one school answers to the same name"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "AMBIGUOUS_TENANT"
    default_message = "Multiple schools found with this name. Please contact support."


class ValidationError(BaseAPIError):
    status_code = 422
    error_code = "VALIDATION_ERROR"
    default_message = "Please fill in all required fields"


class ConflictError(BaseAPIError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
    default_message = "Resource already exists"


class DuplicateRollNumberError(ConflictError):
    error_code = "DUPLICATE_ROLL_NUMBER"
    default_message = "A student with this roll number already exists in this school"


class ConfirmationRequired(BaseAPIError):
    """Destructive call sent without confirm=true"""
    status_code = status.HTTP_428_PRECONDITION_REQUIRED
    error_code = "CONFIRMATION_REQUIRED"
    default_message = "Are you sure? Repeat the request with confirm=true"


class DatabaseError(BaseAPIError):
    error_code = "DB_ERROR"
    default_message = "Database error occurred"


def get_error_message(
    error: Union[Exception, HTTPException, str],
    default_message: str = "An unexpected error occurred",
    include_details: bool = True
) -> Dict[str, Any]:
    """
    Formats errors into the response body shared by every failure path.

    Args:
        error: The exception that was raised or error message string
        default_message: Fallback message if error type is not recognized
        include_details: Whether to include error details in response

    Returns:
        Dict containing message, error code, status code and optional details
    """
    error_response = {
        "success": False,
        "error_code": "INTERNAL_ERROR",
        "message": default_message,
        "status_code": 500
    }

    if isinstance(error, str):
        error_response.update({
            "message": error,
            "error_code": "GENERAL_ERROR"
        })
        return error_response

    if isinstance(error, BaseAPIError):
        error_response.update({
            "error_code": error.error_code,
            "message": error.message,
            "status_code": error.status_code
        })
        if include_details and error.details:
            error_response["details"] = error.details

    elif isinstance(error, HTTPException):
        error_response.update({
            "error_code": "HTTP_ERROR",
            "message": str(error.detail),
            "status_code": error.status_code
        })

    elif isinstance(error, SQLAlchemyError):
        error_response.update({
            "error_code": "DB_ERROR",
            "message": "Database error occurred",
        })

    elif isinstance(error, ValueError):
        error_response.update({
            "error_code": "VALIDATION_ERROR",
            "message": str(error),
            "status_code": 422
        })

    return error_response
