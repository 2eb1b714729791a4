"""Custom exception classes for the estate platform."""

from typing import Optional

from fastapi import HTTPException, status


class PlatformError(Exception):
    """Base exception for the estate platform.

    Every subclass carries a machine-readable ``reason`` and the HTTP status
    the API renders it with.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    reason: str = "error"

    def __init__(self, message: str = "An error occurred", reason: Optional[str] = None):
        self.message = message
        if reason is not None:
            self.reason = reason
        super().__init__(self.message)


class AuthenticationError(PlatformError):
    """Raised when a principal cannot be authenticated."""
    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "unauthenticated"


class InvalidTokenError(AuthenticationError):
    """Raised when a token fails signature or payload validation."""
    reason = "invalid_token"


class ExpiredTokenError(AuthenticationError):
    """Raised when a token is past its expiry."""
    reason = "expired_token"


class LoginRejectedError(AuthenticationError):
    """Raised when login is refused; ``reason`` tells the client why."""
    reason = "invalid_credentials"


class AuthorizationError(PlatformError):
    """Raised when user lacks permission."""
    status_code = status.HTTP_403_FORBIDDEN
    reason = "forbidden"


class SystemRoleProtectedError(AuthorizationError):
    """Raised on a forbidden mutation of a built-in system role."""
    reason = "system_role_protected"


class ResourceNotFoundError(PlatformError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND
    reason = "not_found"


class RoleNotFoundError(ResourceNotFoundError):
    reason = "role_not_found"


class ResourceConflictError(PlatformError):
    """Raised when a resource already exists."""
    status_code = status.HTTP_409_CONFLICT
    reason = "conflict"


class DuplicateRoleError(ResourceConflictError):
    status_code = status.HTTP_400_BAD_REQUEST
    reason = "duplicate_role"


class ValidationError(PlatformError):
    """Raised when input validation fails."""
    reason = "validation_error"


# HTTP exception shortcuts
def forbidden(detail: str = "Insufficient permissions") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )
