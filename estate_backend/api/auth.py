"""Auth API router — login, register, logout, me, session."""

from typing import Optional
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from estate_backend.db.session import get_db
from estate_backend.schemas.schemas import (
    LoginRequest, LoginResponse, RegisterRequest,
    PrincipalOut, SessionOut, UserOut, MessageResponse,
)
from estate_backend.services.auth_service import auth_service
from estate_backend.services.audit_service import audit_service
from estate_backend.core import guards
from estate_backend.core.dependencies import get_current_principal, get_optional_principal
from estate_backend.core.exceptions import LoginRejectedError, ValidationError
from estate_backend.core.principal import Principal

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, request: Request, db: Session = Depends(get_db)):
    """Authenticate and return a token plus the role's pages.

    Rejections carry a ``reason`` so clients can tell a bad password from a
    removed or deactivated role.
    """
    try:
        result = auth_service.authenticate(db, body.email, body.password)
    except LoginRejectedError as e:
        audit_service.login_rejected(db, request, body.email, e.reason)
        raise

    user = result["user"]
    audit_service.login(db, request, user["id"], user["email"], user["role"])
    return result


@router.post("/register", response_model=UserOut, status_code=201)
async def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Register a customer or agent account (starts as pending)."""
    if not body.agree_to_terms:
        raise ValidationError("You must agree to the terms and conditions")
    return auth_service.register(
        db, body.email, body.password, body.full_name, body.role, phone=body.phone,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(principal: Principal = Depends(get_current_principal)):
    """Tokens are stateless; the client discards its copy."""
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=PrincipalOut)
async def get_me(principal: Principal = Depends(get_current_principal)):
    """Current principal with its live permission set and pages."""
    role = principal.role_object
    return PrincipalOut(
        id=principal.id,
        email=principal.email,
        role=principal.role,
        level=principal.level,
        is_admin_tier=guards.is_admin_tier(principal),
        permissions=sorted(principal.permissions),
        pages=list(role.pages) if role else [],
    )


@router.get("/session", response_model=SessionOut)
async def get_session(principal: Optional[Principal] = Depends(get_optional_principal)):
    """Public; a missing or unusable token reads as signed out instead of 401."""
    if principal is None:
        return SessionOut(authenticated=False)
    role = principal.role_object
    return SessionOut(
        authenticated=True,
        id=principal.id,
        email=principal.email,
        role=principal.role,
        level=principal.level,
        pages=list(role.pages) if role else [],
    )
