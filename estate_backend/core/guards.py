"""Authorization predicates.

Every guard is a pure function of a ``Principal`` and returns a bool. Turning
a ``False`` into a 401/403 is the job of the FastAPI dependencies in
``estate_backend.core.dependencies``.
"""

from typing import Iterable, Optional

from estate_backend.core.permissions import (
    ADMIN,
    ADMIN_LEVEL_THRESHOLD,
    ADMIN_ROLE_NAMES,
    SUBADMIN,
    SUBADMIN_LEVEL_THRESHOLD,
    SUPERADMIN,
)
from estate_backend.core.principal import Principal, RoleTier

ADMIN_ALLOWED_ROLES = (ADMIN, SUPERADMIN)
SUBADMIN_ALLOWED_ROLES = (SUBADMIN, ADMIN, SUPERADMIN)


def is_super_admin(principal: Optional[Principal]) -> bool:
    return principal is not None and principal.role == SUPERADMIN


def has_permission(principal: Optional[Principal], permission: str) -> bool:
    """Superadmin holds every permission, even ones no role lists."""
    if principal is None:
        return False
    if principal.role == SUPERADMIN:
        return True
    if permission in principal.permissions:
        return True
    role = principal.role_object
    return role is not None and permission in role.permissions


def has_any_permission(principal: Optional[Principal], permissions: Iterable[str]) -> bool:
    if is_super_admin(principal):
        return True
    return any(has_permission(principal, p) for p in permissions)


def has_all_permissions(principal: Optional[Principal], permissions: Iterable[str]) -> bool:
    if is_super_admin(principal):
        return True
    return all(has_permission(principal, p) for p in permissions)


def has_role(principal: Optional[Principal], roles: Iterable[str]) -> bool:
    return principal is not None and principal.role in set(roles)


def is_admin_tier(principal: Optional[Principal]) -> bool:
    """True for the admin role names and for any role not known to be an end-user role."""
    if principal is None:
        return False
    if principal.role in ADMIN_ROLE_NAMES:
        return True
    return principal.tier == RoleTier.admin_tier


def is_at_least_level(
    principal: Optional[Principal],
    threshold: int,
    allowed_roles: Iterable[str] = (),
) -> bool:
    """Named roles pass by name; custom roles pass only on their numeric level."""
    if principal is None:
        return False
    if principal.role in set(allowed_roles):
        return True
    role = principal.role_object
    return principal.is_custom_role and role is not None and role.level >= threshold


def meets_admin_threshold(principal: Optional[Principal]) -> bool:
    return is_at_least_level(principal, ADMIN_LEVEL_THRESHOLD, ADMIN_ALLOWED_ROLES)


def meets_subadmin_threshold(principal: Optional[Principal]) -> bool:
    return is_at_least_level(principal, SUBADMIN_LEVEL_THRESHOLD, SUBADMIN_ALLOWED_ROLES)


def authorize_roles(principal: Optional[Principal], roles: Iterable[str]) -> bool:
    """Role-list check where "admin"/"subadmin" entries also admit custom roles by level.

    Superadmin passes every list.
    """
    roles = set(roles)
    if is_super_admin(principal) or has_role(principal, roles):
        return True
    if ADMIN in roles and is_at_least_level(principal, ADMIN_LEVEL_THRESHOLD):
        return True
    if SUBADMIN in roles and is_at_least_level(principal, SUBADMIN_LEVEL_THRESHOLD):
        return True
    return False

