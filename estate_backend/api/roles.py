"""Roles API router — catalog, CRUD, status toggle, cascade delete."""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from estate_backend.db.session import get_db
from estate_backend.schemas.schemas import (
    RoleCreate, RolePresetCreate, RoleUpdate, RoleOut,
    RoleListResponse, RoleDeleteResponse,
)
from estate_backend.services.role_service import role_service
from estate_backend.services.audit_service import audit_service
from estate_backend.core import permissions as perms
from estate_backend.core.dependencies import RequirePermission, require_admin_tier
from estate_backend.core.principal import Principal

router = APIRouter(
    prefix="/roles",
    tags=["roles"],
    dependencies=[Depends(require_admin_tier)],
)


@router.get("/pages")
async def list_pages():
    """Page identifiers grouped by dashboard."""
    return {"pages": perms.AVAILABLE_PAGES}


@router.get("/permissions")
async def list_permissions():
    """Permission tokens grouped by area."""
    return {"permissions": perms.PERMISSION_CATALOG}


@router.get("/presets")
async def list_presets():
    """Presets usable with POST /roles/preset."""
    return {"presets": perms.ROLE_PRESETS}


@router.get("", response_model=RoleListResponse)
async def list_roles(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.ROLES_VIEW)),
):
    """List roles with user counts."""
    return role_service.list_roles(db, page, limit, is_active, search)


@router.get("/{role_id}", response_model=RoleOut)
async def get_role(
    role_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.ROLES_VIEW)),
):
    """Get a single role with its user count."""
    role = role_service.get(db, role_id)
    return role_service.to_dict(role, role_service.count_users(db, role.name))


@router.post("", response_model=RoleOut, status_code=201)
async def create_role(
    body: RoleCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.ROLES_CREATE)),
):
    """Create a custom role."""
    role = role_service.create(
        db, body.name, body.description, body.level,
        body.permissions, body.pages, body.is_active,
    )
    audit_service.role_created(db, request, principal, role)
    return role_service.to_dict(role, 0)


@router.post("/preset", response_model=RoleOut, status_code=201)
async def create_role_from_preset(
    body: RolePresetCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.ROLES_CREATE)),
):
    """Create a custom role from a named permission preset."""
    role = role_service.create_from_preset(db, body.preset, body.name, body.description)
    audit_service.role_created(db, request, principal, role)
    return role_service.to_dict(role, 0)


@router.put("/{role_id}", response_model=RoleOut)
async def update_role(
    role_id: int,
    body: RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.ROLES_EDIT)),
):
    """Update a role; system roles only by superadmin."""
    before = role_service.to_dict(role_service.get(db, role_id))
    role = role_service.update(db, role_id, principal, **body.model_dump(exclude_unset=True))
    data = role_service.to_dict(role, role_service.count_users(db, role.name))
    audit_service.role_updated(db, request, principal, role, before)
    return data


@router.patch("/{role_id}/toggle-status", response_model=RoleOut)
async def toggle_role_status(
    role_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.ROLES_EDIT)),
):
    """Activate/deactivate a role. Existing sessions are not revoked."""
    role = role_service.toggle_active(db, role_id, principal)
    data = role_service.to_dict(role, role_service.count_users(db, role.name))
    audit_service.role_toggled(db, request, principal, role)
    return data


@router.delete("/{role_id}", response_model=RoleDeleteResponse)
async def delete_role(
    role_id: int,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(RequirePermission(perms.ROLES_DELETE)),
):
    """Delete a custom role.

    WARNING: every user account holding the role is deleted with it.
    """
    before = role_service.to_dict(role_service.get(db, role_id))
    deleted_users = role_service.delete(db, role_id)
    audit_service.role_deleted(db, request, principal, before["name"], deleted_users)
    return RoleDeleteResponse(
        message=f"Role '{before['name']}' deleted along with {deleted_users} user account(s)",
        deleted_users=deleted_users,
    )
