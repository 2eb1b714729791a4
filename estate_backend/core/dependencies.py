"""FastAPI dependencies that turn guard results into 401/403 responses."""

import logging
from typing import Callable, Optional, Sequence

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from estate_backend.core import guards
from estate_backend.core.exceptions import AuthenticationError, forbidden, unauthorized
from estate_backend.core.principal import Principal
from estate_backend.core.security import security_scheme
from estate_backend.db.session import get_db
from estate_backend.services.principal_service import principal_service

logger = logging.getLogger("estate_platform.auth")


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db),
) -> Principal:
    """Resolve the bearer token into a Principal or fail with 401.

    The response message is generic; the actual cause only goes to the log.
    """
    if credentials is None:
        raise unauthorized("Access token required")
    try:
        return principal_service.resolve(db, credentials.credentials)
    except AuthenticationError as e:
        logger.debug("Authentication failed (%s): %s", e.reason, e.message)
        raise unauthorized("Invalid or expired credentials")


async def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db),
) -> Optional[Principal]:
    """Principal when a usable token is present, otherwise None."""
    token = credentials.credentials if credentials else None
    return principal_service.resolve_optional(db, token)


class RequirePermission:
    """Dependency that checks for a single permission token."""

    def __init__(self, permission: str):
        self.permission = permission

    async def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        if not guards.has_permission(principal, self.permission):
            raise forbidden(f"Permission denied. Required permission: {self.permission}")
        return principal


class RequireAnyPermission:
    """Dependency that passes when the principal holds at least one of the permissions."""

    def __init__(self, permissions: Sequence[str]):
        self.permissions = list(permissions)

    async def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        if not guards.has_any_permission(principal, self.permissions):
            raise forbidden(
                f"Permission denied. Required one of: {', '.join(self.permissions)}"
            )
        return principal


class RequireRoles:
    """Dependency that checks role names, admitting custom roles by level."""

    def __init__(self, *roles: str):
        self.roles = roles

    async def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        if not guards.authorize_roles(principal, self.roles):
            raise forbidden("Insufficient permissions")
        return principal


class RequireGuard:
    """Dependency wrapping a boolean guard with a fixed 403 message."""

    def __init__(self, guard: Callable[[Principal], bool], detail: str):
        self.guard = guard
        self.detail = detail

    async def __call__(self, principal: Principal = Depends(get_current_principal)) -> Principal:
        if not self.guard(principal):
            raise forbidden(self.detail)
        return principal


# Convenience dependency instances
require_admin = RequireGuard(guards.meets_admin_threshold, "Admin access required")
require_subadmin = RequireGuard(guards.meets_subadmin_threshold, "SubAdmin access required")
require_admin_tier = RequireGuard(guards.is_admin_tier, "Admin access required")
require_super_admin = RequireGuard(guards.is_super_admin, "Super admin access required")
