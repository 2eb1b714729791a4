"""Admin API router — user management and audit."""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from estate_backend.db.session import get_db
from estate_backend.schemas.schemas import (
    AuditLogOut, UserOut, UserCreateRequest, UserUpdateRequest, MessageResponse,
)
from estate_backend.services.audit_service import audit_service, user_snapshot
from estate_backend.services.auth_service import auth_service
from estate_backend.models.audit_log import AuditEvent
from estate_backend.models.user import UserStatusEnum
from estate_backend.core import guards
from estate_backend.core import permissions as perms
from estate_backend.core.dependencies import RequirePermission, require_admin_tier
from estate_backend.core.exceptions import forbidden
from estate_backend.core.principal import Principal

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin_tier)],
)


@router.get("/users")
async def admin_list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    role: Optional[str] = Query(None),
    status: Optional[UserStatusEnum] = Query(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.USERS_VIEW)),
):
    """List users."""
    result = auth_service.list_users(db, page, page_size, role, status)
    return {
        "users": [UserOut.model_validate(u) for u in result["users"]],
        "total": result["total"],
        "page": result["page"],
    }


@router.post("/users", response_model=UserOut, status_code=201)
async def admin_create_user(
    body: UserCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.USERS_CREATE)),
):
    """Create a user holding a role below the caller's own level."""
    if body.role.strip().lower() == perms.SUPERADMIN and not guards.is_super_admin(principal):
        raise forbidden("Only superadmin can create superadmin accounts")
    auth_service.check_grant(db, principal, body.role, body.role_permissions)
    user = auth_service.create_user(
        db, body.email, body.password, body.full_name, body.role,
        status=body.status, phone=body.phone, role_permissions=body.role_permissions,
    )
    audit_service.user_changed(db, request, principal, AuditEvent.user_created, user)
    return user


@router.patch("/users/{user_id}", response_model=UserOut)
async def admin_update_user(
    user_id: int,
    body: UserUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.USERS_EDIT)),
):
    """Update a user's name, role, status or permission override.

    Changing the role or permission override needs ``users.promote``;
    changing the status needs ``users.status``.
    """
    if (body.role or body.role_permissions is not None) and not guards.has_permission(
        principal, perms.USERS_PROMOTE
    ):
        raise forbidden(f"Permission denied. Required permission: {perms.USERS_PROMOTE}")
    if body.status is not None and not guards.has_permission(principal, perms.USERS_STATUS):
        raise forbidden(f"Permission denied. Required permission: {perms.USERS_STATUS}")

    before = user_snapshot(auth_service.get_user(db, user_id))
    user = auth_service.update_user(
        db, user_id, principal,
        full_name=body.full_name,
        role_name=body.role,
        status=body.status,
        role_permissions=body.role_permissions,
    )
    audit_service.user_changed(db, request, principal, AuditEvent.user_updated, user, before)
    return user


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def admin_delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.USERS_DELETE)),
):
    """Delete a single user account."""
    if user_id == principal.id:
        raise forbidden("You cannot delete your own account")
    role_name = auth_service.get_user(db, user_id).role
    auth_service.delete_user(db, user_id, principal)
    audit_service.user_deleted(db, request, principal, user_id, role_name)
    return MessageResponse(message="User deleted")


@router.get("/audit")
async def get_audit_logs(
    event: Optional[AuditEvent] = Query(None),
    actor_id: Optional[int] = Query(None),
    role: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.LOGS_VIEW)),
):
    """Query audit logs."""
    result = audit_service.query_logs(db, event, actor_id, role, page, page_size)
    return {
        "logs": [AuditLogOut.model_validate(log) for log in result["logs"]],
        "total": result["total"],
        "page": result["page"],
    }
